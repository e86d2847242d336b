"""
Convert the AsciiMath in one text, one document or a whole collection.

A document is converted against a single snapshot of its text: it is read
once, every offset is computed on that snapshot and the computed text is
written back as is. Documents share nothing, so a collection may be converted
in parallel.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from django.core.exceptions import ObjectDoesNotExist
from django.db import connection

from notes import conf, conversion, rewrite, scanner
from notes.conversion import ConversionCounts
from notes.exceptions import ExtractionError, MathNotesError
from notes.extraction import extract_formulas

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    text: str
    counts: ConversionCounts = field(default_factory=ConversionCounts)
    failures: list = field(default_factory=list)


@dataclass
class DocumentReport:
    ref: object
    counts: ConversionCounts = field(default_factory=ConversionCounts)
    failures: list = field(default_factory=list)
    changed: bool = False
    error: str = ""

    @property
    def converted(self):
        return bool(self.counts)


@dataclass
class BatchReport:
    block: int = 0
    inline: int = 0
    # documents with at least one conversion
    file_count: int = 0
    documents: list = field(default_factory=list)
    skipped: list = field(default_factory=list)

    @property
    def counts(self):
        return ConversionCounts(self.block, self.inline)

    @property
    def failures(self):
        return [(d.ref, f) for d in self.documents for f in d.failures]

    @property
    def errors(self):
        return [d for d in self.documents if d.error]

    def add(self, report):
        self.documents.append(report)
        if report.converted:
            self.block += report.counts.block
            self.inline += report.counts.inline
            self.file_count += 1

    def summary(self):
        plural = "s" if self.file_count != 1 else ""
        return (
            f"Converted {self.block} blocks and {self.inline} inline formulas "
            f"in {self.file_count} file{plural}."
        )


def convert_text(text, math_settings=None, translator=None, display=False):
    """Return the text with its AsciiMath converted to LaTeX."""
    if math_settings is None:
        math_settings = conf.get_math_settings()
    if translator is None:
        translator = conf.get_translator(math_settings)

    scan_result = scanner.scan(text, math_settings.block_prefixes)
    formulas = extract_formulas(text, math_settings, scan_result)
    converted = conversion.convert_formulas(formulas, translator, display)
    new_text = rewrite.apply_replacements(text, converted.replacements)

    return ConversionResult(
        text=new_text, counts=converted.counts, failures=converted.failures
    )


def convert_document(
    storage, ref, math_settings=None, translator=None, display=False, dry_run=False
):
    """
    Convert one stored document and write it back when it changed.

    Storage and extraction errors propagate to the caller.
    """
    original = storage.read_text(ref)
    result = convert_text(original, math_settings, translator, display)
    changed = result.text != original
    if changed and not dry_run:
        storage.write_text(ref, result.text)

    return DocumentReport(
        ref=ref, counts=result.counts, failures=result.failures, changed=changed
    )


def _convert_safely(storage, ref, math_settings, translator, display, dry_run):
    try:
        return convert_document(
            storage, ref, math_settings, translator, display, dry_run
        )
    except ExtractionError as ex:
        logger.exception("Internal error while converting %s", ref)
        return DocumentReport(ref=ref, error=str(ex))
    except (OSError, MathNotesError, ObjectDoesNotExist) as ex:
        logger.warning("Cannot convert %s: %s", ref, ex)
        return DocumentReport(ref=ref, error=str(ex))


def convert_collection(
    storage,
    math_settings=None,
    translator=None,
    display=False,
    dry_run=False,
    workers=1,
    cancel=None,
):
    """
    Convert every document of storage and fold the per-document reports.

    One document failing never stops the others. When cancel, a
    threading.Event, gets set, documents not yet started are skipped; those
    already written stay written.
    """
    if math_settings is None:
        math_settings = conf.get_math_settings()
    if translator is None:
        translator = conf.get_translator(math_settings)

    refs = storage.list_documents()
    report = BatchReport()

    def run(ref):
        if cancel is not None and cancel.is_set():
            return None
        return _convert_safely(
            storage, ref, math_settings, translator, display, dry_run
        )

    def run_in_worker(ref):
        try:
            return run(ref)
        finally:
            # each worker thread opens its own database connection
            connection.close()

    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(run_in_worker, refs))
    else:
        results = [run(ref) for ref in refs]

    for ref, document in zip(refs, results):
        if document is None:
            report.skipped.append(ref)
            continue
        report.add(document)

    logger.info(report.summary())
    return report
