"""
Markdown extensions rendering AsciiMath and LaTeX to MathML.

The LaTeX part is vendored from https://gitlab.com/parcifal/l2m4m/-/blob/develop/l2m4m.py
"""

import logging
import re

from django.utils.html import escape
from latex2mathml import converter
from markdown import Extension
from markdown.blockprocessors import BlockProcessor
from markdown.inlinepatterns import Pattern
from markdown.preprocessors import Preprocessor

from notes import classifier, scanner
from notes.conversion import collapse_braces
from notes.exceptions import TranslationError

logger = logging.getLogger(__name__)


def render_math(tex, display=False):
    """Return the MathML for a LaTeX formula."""
    return converter.convert(tex, display="block" if display else "inline")


def render_error(source, ex):
    logger.warning("Cannot render %r: %s", source, ex)
    return f'<code class="math-error" title="{escape(str(ex))}">{escape(source)}</code>'


class AsciiMathRenderer:
    """Turns AsciiMath, or LaTeX that slipped in, into MathML."""

    def __init__(self, translator):
        self.translator = translator

    def to_tex(self, source, display=False):
        if classifier.is_latex_code(source):
            return source
        return collapse_braces(self.translator.translate(source, display=display))

    def __call__(self, source, display=False):
        source = source.strip()
        try:
            return render_math(self.to_tex(source, display), display)
        except Exception as ex:
            return render_error(source, ex)


class ProcessorRegistry:
    """Block handlers keyed by the fence prefix they render."""

    def __init__(self):
        self._handlers = {}

    def register(self, prefix, handler):
        self._handlers[prefix] = handler

    def unregister(self, prefix):
        self._handlers.pop(prefix, None)

    def unregister_all(self):
        self._handlers.clear()

    def get(self, prefix):
        return self._handlers.get(prefix)

    @property
    def prefixes(self):
        return list(self._handlers)

    def __contains__(self, prefix):
        return prefix in self._handlers

    def __len__(self):
        return len(self._handlers)


class AsciiMathExtension(Extension):
    def __init__(self, math_settings, translator, **kwargs):
        super().__init__(**kwargs)
        self.math_settings = math_settings
        self.renderer = AsciiMathRenderer(translator)
        self.registry = ProcessorRegistry()
        for prefix in math_settings.block_prefixes:
            self.registry.register(prefix, self.render_block)

    def render_block(self, source):
        return self.renderer(source, display=True)

    def extendMarkdown(self, md):
        # ahead of fenced_code, which would otherwise take the math fences
        md.preprocessors.register(
            AsciiMathPreprocessor(md, self), "asciimath", 30
        )


class AsciiMathPreprocessor(Preprocessor):
    """Replace math fences and inline AsciiMath with stashed MathML."""

    def __init__(self, md, extension):
        super().__init__(md)
        self.extension = extension

    def run(self, lines):
        text = "\n".join(lines)
        registry = self.extension.registry
        scan_result = scanner.scan(text, registry.prefixes)
        edits = []

        for code_range in scan_result.formula_fences:
            handler = registry.get(scanner.fence_info(text, code_range))
            if handler is None:
                continue
            html = handler(scanner.fence_body(text, code_range))
            placeholder = self.md.htmlStash.store(html)
            edits.append((code_range.start, code_range.end, f"\n{placeholder}\n"))

        pattern = self.extension.math_settings.inline.pattern
        for code_range in scan_result.ranges:
            if code_range.kind != scanner.INLINE:
                continue
            m = pattern.fullmatch(text, code_range.start, code_range.end)
            if not m:
                continue
            html = self.extension.renderer(m.group(1), display=False)
            edits.append(
                (code_range.start, code_range.end, self.md.htmlStash.store(html))
            )

        for start, end, replacement in sorted(edits, reverse=True):
            text = text[:start] + replacement + text[end:]
        return text.split("\n")


class LaTeX2MathMLExtension(Extension):
    _RE_LATEX = r"\$([^$]+)\$"

    def __init__(self, renderer=None, **kwargs):
        super().__init__(**kwargs)
        # renders dollar math that is not LaTeX as AsciiMath when set
        self.renderer = renderer

    def extendMarkdown(self, md):
        md.inlinePatterns.register(
            LatexPattern(self._RE_LATEX, md, renderer=self.renderer),
            "latex-inline",
            170,
        )
        md.parser.blockprocessors.register(
            LatexBlockProcessor(md.parser, renderer=self.renderer), "latex-block", 170
        )


def _to_element(text, display, renderer, parent=None):
    if renderer is not None and not classifier.is_latex_code(text.strip()):
        try:
            text = renderer.to_tex(text.strip(), display)
        except TranslationError as ex:
            logger.warning("Rendering %r as LaTeX: %s", text, ex)
    if display:
        return converter.convert_to_element(text, display="block", parent=parent)
    return converter.convert_to_element(text)


class LatexPattern(Pattern):
    def __init__(self, pattern, md=None, renderer=None):
        super().__init__(pattern, md)
        self.renderer = renderer

    def handleMatch(self, m):
        return _to_element(m.group(2), False, self.renderer)


class LatexBlockProcessor(BlockProcessor):
    _RE_LATEX_START = [r"^\s*\${2}", r"^\s*\\\["]

    _RE_LATEX_END = [r"\${2}\s*$", r"\\\]\s*$"]

    def __init__(self, parser, renderer=None):
        super().__init__(parser)

        self._mode = 0
        self.renderer = renderer

    def test(self, _, block):
        """
        Indicated whether the specified block starts a block of LaTeX.
        """
        for i, start in enumerate(self._RE_LATEX_START):
            if not re.search(start, block):
                continue

            self._mode = i
            return True

        return False

    def run(self, parent, blocks):
        """
        Convert all subsequent blocks of LaTeX to MathML. Cancel conversion
        in case no ending block is found.
        """
        start = self._RE_LATEX_START[self._mode]
        end = self._RE_LATEX_END[self._mode]

        for i, block in enumerate(blocks):
            if not re.search(end, block):
                continue

            text = "\n".join([blocks.pop(0) for _ in range(0, i + 1)])
            text = re.sub(start, "", text)
            text = re.sub(end, "", text)

            _to_element(text, True, self.renderer, parent=parent)

            return True

        return False
