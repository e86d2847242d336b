import logging
import re
from dataclasses import dataclass, field

from notes.exceptions import TranslationError
from notes.extraction import FormulaKind
from notes.rewrite import Replacement

logger = logging.getLogger(__name__)

BLOCK_TEMPLATE = "$${tex}$$"
INLINE_TEMPLATE = "${tex}$"

_RE_REPEATED_BRACE = re.compile(r"([{}])\1+")


@dataclass(frozen=True)
class ConversionCounts:
    block: int = 0
    inline: int = 0

    def __add__(self, other):
        return ConversionCounts(self.block + other.block, self.inline + other.inline)

    def __bool__(self):
        return self.total > 0

    @property
    def total(self):
        return self.block + self.inline

    def as_dict(self):
        return {"block": self.block, "inline": self.inline}


@dataclass(frozen=True)
class Failure:
    start: int
    end: int
    content: str
    error: str

    def __str__(self):
        return f"{self.start}:{self.end} {self.content!r} ({self.error})"


@dataclass
class ConvertedFormulas:
    replacements: list = field(default_factory=list)
    counts: ConversionCounts = field(default_factory=ConversionCounts)
    failures: list = field(default_factory=list)


def collapse_braces(tex):
    """Space out runs of identical braces, "}}" renders badly otherwise."""
    return _RE_REPEATED_BRACE.sub(lambda m: " ".join(m.group(0)), tex)


def to_tex(translator, content, display=False):
    try:
        tex = translator.translate(content, display=display)
    except TranslationError:
        raise
    except Exception as ex:
        raise TranslationError(content, str(ex)) from ex
    return collapse_braces(tex)


def wrap(kind, tex):
    if kind == FormulaKind.BLOCK:
        return BLOCK_TEMPLATE.format(tex=tex)
    return INLINE_TEMPLATE.format(tex=tex)


def convert_formulas(formulas, translator, display=False):
    """
    Translate every formula into a replacement.

    A formula the translator rejects is left out of the replacements, so its
    original text stays in place, and is reported as a failure.
    """
    result = ConvertedFormulas()
    block = inline = 0
    for formula in formulas:
        try:
            tex = to_tex(translator, formula.content, display)
        except TranslationError as ex:
            logger.warning("Skipping formula at %s: %s", formula.start, ex)
            result.failures.append(
                Failure(formula.start, formula.end, formula.content, str(ex))
            )
            continue

        result.replacements.append(
            Replacement(formula.start, formula.end, wrap(formula.kind, tex))
        )
        if formula.kind == FormulaKind.BLOCK:
            block += 1
        else:
            inline += 1

    result.counts = ConversionCounts(block=block, inline=inline)
    return result
