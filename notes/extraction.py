import enum
import re
from dataclasses import dataclass

from notes import classifier, scanner


class FormulaKind(str, enum.Enum):
    INLINE = "inline"
    BLOCK = "block"


@dataclass(frozen=True)
class FormulaMatch:
    kind: FormulaKind
    start: int
    end: int
    content: str

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Empty formula span {self.start}:{self.end}")


_RE_BLOCK_MATH = re.compile(r"(?<!\\)\$\$([\s\S]+?)\$\$")
_RE_INLINE_MATH = re.compile(r"(?<![\\$])\$([^$\n]+?)\$(?!\$)")


@dataclass(frozen=True)
class _Candidate:
    kind: FormulaKind
    start: int
    end: int
    body: str
    # the candidate is an inline code span in its own right
    is_code_span: bool = False


def _fenced_formulas(text, scan_result):
    for code_range in scan_result.formula_fences:
        content = scanner.fence_body(text, code_range).strip()
        if not content:
            continue
        yield FormulaMatch(
            FormulaKind.BLOCK, code_range.start, code_range.end, content
        )


def _candidates(text, delimiters, segments):
    # dollar math never reaches into code
    for start, end in segments:
        for m in _RE_BLOCK_MATH.finditer(text, start, end):
            yield _Candidate(FormulaKind.BLOCK, m.start(), m.end(), m.group(1))
        for m in _RE_INLINE_MATH.finditer(text, start, end):
            yield _Candidate(FormulaKind.INLINE, m.start(), m.end(), m.group(1))
    for m in delimiters.pattern.finditer(text):
        yield _Candidate(
            FormulaKind.INLINE, m.start(), m.end(), m.group(1), is_code_span=True
        )


def _is_excluded(candidate, scan_result):
    for code_range in scan_result.ranges:
        if code_range.end <= candidate.start or candidate.end <= code_range.start:
            continue
        # a delimited span may be the inline code span itself
        if code_range.kind == scanner.INLINE and candidate.is_code_span and (
            code_range.start == candidate.start and code_range.end == candidate.end
        ):
            continue
        return True
    return False


def _drop_overlaps(candidates):
    """Keep the earliest, then longest, of any overlapping candidates."""
    kept = []
    last_end = -1
    for c in sorted(candidates, key=lambda c: (c.start, c.start - c.end)):
        if c.start < last_end:
            continue
        kept.append(c)
        last_end = c.end
    return kept


def extract_formulas(text, math_settings, scan_result=None):
    """
    Return every AsciiMath formula in text, in document order.

    Formula fences become block formulas whatever they contain. Dollar math
    and spans wrapped in the inline delimiters become formulas unless they
    sit inside other code or already look like LaTeX.
    """
    if scan_result is None:
        scan_result = scanner.scan(text, math_settings.block_prefixes)

    formulas = list(_fenced_formulas(text, scan_result))

    candidates = [
        c
        for c in _candidates(text, math_settings.inline, scan_result.segments)
        if not _is_excluded(c, scan_result)
    ]
    for c in _drop_overlaps(candidates):
        content = c.body.strip()
        if not content or classifier.is_latex_code(content):
            continue
        formulas.append(FormulaMatch(c.kind, c.start, c.end, content))

    formulas.sort(key=lambda f: f.start)
    return formulas
