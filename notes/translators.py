"""
AsciiMath to LaTeX translators.

A translator is any object with translate(source, display=False) returning
LaTeX, and raising TranslationError for input it cannot parse. The default
one wraps py-asciimath and adds user defined symbols on top of it.
"""

import re
from dataclasses import dataclass

from notes.exceptions import ConfigurationError, TranslationError

ARGUMENT = "$1"

# survives translation as plain text, whatever the translator wraps it in
_PLACEHOLDER = "@@{index}@@"
_RE_PLACEHOLDER = re.compile(
    r"\\(?:text|textrm|mathrm|mbox)\s*\{\s*@@(\d+)@@\s*\}|@@(\d+)@@"
)


@dataclass(frozen=True)
class SimpleSymbol:
    source: str
    target: str


@dataclass(frozen=True)
class TemplatedSymbol:
    """A symbol taking one bracketed argument, put where $1 is in target."""

    source: str
    target: str


def parse_symbol_rule(rule):
    source, target = rule
    if not source or not target:
        raise ConfigurationError(f"Empty custom symbol rule {rule!r}")
    if ARGUMENT in target:
        return TemplatedSymbol(source, target)
    return SimpleSymbol(source, target)


def _closing_bracket(text, pos):
    """Return the index after the bracket group opening at pos, or None."""
    pairs = {"(": ")", "[": "]", "{": "}"}
    opener = text[pos]
    closer = pairs[opener]
    depth = 0
    for i in range(pos, len(text)):
        if text[i] == opener:
            depth += 1
        elif text[i] == closer:
            depth -= 1
            if depth == 0:
                return i + 1
    return None


class SymbolTable:
    """
    User defined symbols, substituted around a translator.

    Each symbol in the source is swapped for a quoted placeholder before
    translation and the placeholder is swapped for the symbol's LaTeX after.
    """

    def __init__(self, rules=()):
        self.symbols = [parse_symbol_rule(rule) for rule in rules]
        # longest first, so "RRR" wins over "RR"
        self.symbols.sort(key=lambda s: len(s.source), reverse=True)
        if self.symbols:
            alternatives = "|".join(re.escape(s.source) for s in self.symbols)
            self._pattern = re.compile(rf'"[^"]*"|(?:{alternatives})')
        else:
            self._pattern = None
        self._by_source = {s.source: s for s in self.symbols}

    def __bool__(self):
        return bool(self.symbols)

    def protect(self, source, translate_argument):
        """Return source with placeholders, and the LaTeX they stand for."""
        if self._pattern is None:
            return source, []

        replacements = []
        out = []
        pos = 0
        while True:
            m = self._pattern.search(source, pos)
            if m is None:
                out.append(source[pos:])
                break
            out.append(source[pos : m.start()])
            token = m.group(0)
            symbol = self._by_source.get(token)
            if symbol is None:
                # quoted text is left alone
                out.append(token)
                pos = m.end()
                continue

            end = m.end()
            if isinstance(symbol, TemplatedSymbol):
                arg_start = end
                while arg_start < len(source) and source[arg_start] == " ":
                    arg_start += 1
                arg_end = None
                if arg_start < len(source) and source[arg_start] in "([{":
                    arg_end = _closing_bracket(source, arg_start)
                if arg_end is None:
                    tex = symbol.target.replace(ARGUMENT, "")
                else:
                    argument = source[arg_start + 1 : arg_end - 1]
                    tex = symbol.target.replace(ARGUMENT, translate_argument(argument))
                    end = arg_end
            else:
                tex = symbol.target

            out.append(f' "{_PLACEHOLDER.format(index=len(replacements))}" ')
            replacements.append(tex)
            pos = end

        return "".join(out), replacements

    @staticmethod
    def restore(tex, replacements):
        if not replacements:
            return tex
        return _RE_PLACEHOLDER.sub(
            lambda m: replacements[int(m.group(1) or m.group(2))], tex
        )


class ASCIIMathTranslator:
    """Translate with py-asciimath, installed with the asciimath extra."""

    def __init__(self, symbols=()):
        try:
            from py_asciimath.translator.translator import ASCIIMath2Tex
        except ImportError as ex:
            raise ConfigurationError(
                "py-asciimath is required by ASCIIMathTranslator, "
                "install mathnotes[asciimath]."
            ) from ex

        self._parser = ASCIIMath2Tex(log=False, inplace=True)
        self.symbols = SymbolTable(symbols)

    def _translate(self, source, display):
        if not source.strip():
            return ""
        try:
            tex = self._parser.translate(
                source, displaystyle=display, from_file=False, pprint=False
            )
        except Exception as ex:
            raise TranslationError(source, str(ex)) from ex
        tex = tex.strip()
        # py-asciimath wraps its output in dollars
        if len(tex) >= 2 and tex.startswith("$") and tex.endswith("$"):
            tex = tex[1:-1].strip()
        return tex

    def translate(self, source, display=False):
        source, replacements = self.symbols.protect(
            source, lambda arg: self._translate(arg, False)
        )
        return self.symbols.restore(self._translate(source, display), replacements)
