"""
Heuristics that tell LaTeX apart from AsciiMath.

Not a parser. AsciiMath rarely contains a backslash followed by letters, so
such a sequence is taken as proof the formula is already LaTeX and must be
left alone. AsciiMath that really needs a literal backslash-letter sequence is
skipped as well; wrapping it in tex"..." is the way around that.
"""

import re

_RE_COMMAND = re.compile(r"\\[A-Za-z0-9]{2,}")
_RE_TEX_EMBED = re.compile(r'tex".*"')
_RE_BRACED_SCRIPT = re.compile(r"[_^]\{[^{}]*\}")
_RE_PAREN_SCRIPT = re.compile(r"[_^]\(")

STRONG = "strong"
WEAK = "weak"


def latex_evidence(code):
    """Return STRONG, WEAK or None for how LaTeX-like code looks."""
    if _RE_TEX_EMBED.search(code):
        return None
    if _RE_COMMAND.search(code):
        return STRONG
    if _RE_BRACED_SCRIPT.search(code) and not _RE_PAREN_SCRIPT.search(code):
        return WEAK
    return None


def is_latex_code(code):
    return latex_evidence(code) is not None
