"""
Find the code in a Markdown document.

Fenced blocks are found first, line by line. Inline code spans are then
looked for only in the text the fences left over, so the two kinds of range
never overlap.
"""

import re
from dataclasses import dataclass, field

from notes.delimiters import normalize_escape

FENCE = "fence"
INLINE = "inline"

# up to three spaces, then three or more backticks or tildes
_RE_FENCE_OPEN = re.compile(r"^ {0,3}(?P<fence>`{3,}|~{3,})(?P<info>[^\n]*)$")
_RE_INLINE_CODE = re.compile(r"`[^`\n]*`")


@dataclass(frozen=True)
class CodeRange:
    start: int
    end: int
    is_formula_bearing: bool = False
    kind: str = FENCE

    def contains(self, start, end):
        return self.start <= start and end <= self.end


@dataclass
class ScanResult:
    ranges: list = field(default_factory=list)
    # (start, end) spans of text outside any code
    segments: list = field(default_factory=list)

    @property
    def fences(self):
        return [r for r in self.ranges if r.kind == FENCE]

    @property
    def formula_fences(self):
        return [r for r in self.ranges if r.is_formula_bearing]

    @property
    def exclusions(self):
        return [r for r in self.ranges if not r.is_formula_bearing]


def prefix_pattern(prefixes):
    """Pattern matching a fence info string made of one recognized prefix."""
    if not prefixes:
        return re.compile(r"(?!)")
    alternatives = "|".join(normalize_escape(p) for p in prefixes)
    return re.compile(rf"^\s*(?:{alternatives})\s*$")


def _iter_lines(text):
    """Yield (start, end, line) for each line, end excluding the newline."""
    pos = 0
    length = len(text)
    while pos < length:
        newline = text.find("\n", pos)
        if newline == -1:
            yield pos, length, text[pos:]
            return
        yield pos, newline, text[pos:newline]
        pos = newline + 1


def _is_closing(line, fence):
    stripped = line.lstrip(" ")
    if len(line) - len(stripped) > 3:
        return False
    run = len(stripped) - len(stripped.lstrip(fence[0]))
    return run >= len(fence) and not stripped[run:].strip()


def scan_fences(text, prefixes):
    """Return the CodeRange of every fenced block in text."""
    info_re = prefix_pattern(prefixes)
    ranges = []
    opening = None

    for start, end, line in _iter_lines(text):
        if opening is None:
            m = _RE_FENCE_OPEN.match(line)
            if not m:
                continue
            fence, info = m.group("fence"), m.group("info")
            # a backtick fence cannot carry backticks in its info string
            if fence[0] == "`" and "`" in info:
                continue
            opening = (start, fence, bool(info_re.match(info)))
            continue

        fence_start, fence, is_math = opening
        if _is_closing(line, fence):
            ranges.append(CodeRange(fence_start, end, is_math, FENCE))
            opening = None

    if opening is not None:
        # unclosed fences swallow the rest of the document and are never math
        ranges.append(CodeRange(opening[0], len(text), False, FENCE))

    return ranges


def _complement(ranges, length):
    segments = []
    pos = 0
    for r in ranges:
        if r.start > pos:
            segments.append((pos, r.start))
        pos = max(pos, r.end)
    if pos < length:
        segments.append((pos, length))
    return segments


def scan(text, prefixes):
    """Return every code range in text, in document order."""
    fences = scan_fences(text, prefixes)

    inline = []
    for seg_start, seg_end in _complement(fences, len(text)):
        for m in _RE_INLINE_CODE.finditer(text, seg_start, seg_end):
            inline.append(CodeRange(m.start(), m.end(), False, INLINE))

    ranges = sorted(fences + inline, key=lambda r: r.start)
    return ScanResult(ranges=ranges, segments=_complement(ranges, len(text)))


def fence_body(text, code_range):
    """Return the text between the opening and closing fence lines."""
    block = text[code_range.start : code_range.end]
    first_newline = block.find("\n")
    if first_newline == -1:
        return ""
    body = block[first_newline + 1 :]
    last_newline = body.rfind("\n")
    if last_newline == -1:
        # only the closing fence remains
        return ""
    return body[:last_newline]


def fence_info(text, code_range):
    """Return the info string of the fence opening code_range."""
    end = text.find("\n", code_range.start, code_range.end)
    if end == -1:
        end = code_range.end
    m = _RE_FENCE_OPEN.match(text[code_range.start : end])
    return m.group("info").strip() if m else ""
