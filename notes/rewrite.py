from dataclasses import dataclass

from notes.exceptions import ExtractionError


@dataclass(frozen=True)
class Replacement:
    start: int
    end: int
    text: str


def _check(text, replacements):
    previous = None
    for r in sorted(replacements, key=lambda r: r.start):
        if r.start < 0 or r.end > len(text) or r.start > r.end:
            raise ExtractionError(
                f"Span {r.start}:{r.end} is outside text of length {len(text)}"
            )
        if previous is not None and r.start < previous.end:
            raise ExtractionError(
                f"Span {r.start}:{r.end} overlaps {previous.start}:{previous.end}"
            )
        previous = r


def apply_replacements(text, replacements):
    """
    Return text with every replacement applied.

    Replacements are applied from the end of the text backwards, so an edit
    never moves the text that a pending edit points at.
    """
    replacements = list(replacements)
    _check(text, replacements)

    for r in sorted(replacements, key=lambda r: r.start, reverse=True):
        text = text[: r.start] + r.text + text[r.end :]
    return text
