from django.test import SimpleTestCase, override_settings

from notes import models
from notes.conf import MathSettings
from notes.markdown_extensions import AsciiMathRenderer, ProcessorRegistry
from notes.text_processing import md_to_html
from notes.tests.fakes import FAKE_ASCIIMATH, BrokenTranslator, FakeTranslator


class MarkdownAsciiMathTestCase(SimpleTestCase):
    def setUp(self):
        self.math_settings = MathSettings()
        self.translator = FakeTranslator()

    def render(self, text, math_settings=None):
        return md_to_html(text, math_settings or self.math_settings, self.translator)

    def test_fenced_block(self):
        html = self.render("```am\na/b\n```")
        self.assertIn("<math", html)
        self.assertIn('display="block"', html)
        self.assertIn("<mfrac>", html)
        self.assertNotIn("<code", html)

    def test_plain_fence_untouched(self):
        html = self.render("```python\nx = a/b\n```")
        self.assertIn("<code", html)
        self.assertIn("x = a/b", html)
        self.assertNotIn("<math", html)

    def test_unknown_prefix(self):
        html = self.render("```am\nx\n```", MathSettings(block_prefixes=("math",)))
        self.assertIn("<code", html)
        self.assertNotIn("<math", html)

    def test_inline_pair(self):
        html = self.render("Let `$a/b$` be.")
        self.assertIn("<mfrac>", html)
        self.assertNotIn("<code>", html)

    def test_plain_inline_code(self):
        html = self.render("Run `a/b` now.")
        self.assertIn("<code>a/b</code>", html)
        self.assertNotIn("<math", html)

    def test_latex_inline_pair(self):
        html = self.render("Let `$\\alpha$` be.")
        self.assertIn("<math", html)
        self.assertEqual(self.translator.calls, [])

    def test_translation_error(self):
        html = self.render("Let `$a !! b$` be.")
        self.assertIn('class="math-error"', html)
        self.assertIn("a !! b", html)

    def test_translator_crash(self):
        html = md_to_html("```am\nx\n```", self.math_settings, BrokenTranslator())
        self.assertIn('class="math-error"', html)


class MarkdownLaTeXTestCase(SimpleTestCase):
    def setUp(self):
        self.translator = FakeTranslator()

    def test_inline_dollar(self):
        html = md_to_html("Energy $E=mc^2$.", MathSettings(), self.translator)
        self.assertIn("<math", html)
        self.assertIn("<msup>", html)
        self.assertEqual(self.translator.calls, [])

    def test_block_dollar(self):
        html = md_to_html("$$\nx^2\n$$", MathSettings(), self.translator)
        self.assertIn('display="block"', html)
        self.assertIn("<msup>", html)

    def test_dollar_math_as_latex_by_default(self):
        html = md_to_html("So $a/b$.", MathSettings(), self.translator)
        self.assertIn("<math", html)
        self.assertNotIn("<mfrac>", html)

    def test_replace_math_block(self):
        math_settings = MathSettings(replace_math_block=True)
        html = md_to_html("So $a/b$.", math_settings, self.translator)
        self.assertIn("<mfrac>", html)

    def test_replace_math_block_keeps_latex(self):
        math_settings = MathSettings(replace_math_block=True)
        html = md_to_html("So $\\frac{1}{2}$.", math_settings, self.translator)
        self.assertIn("<mfrac>", html)
        self.assertEqual(self.translator.calls, [])


class AsciiMathRendererTestCase(SimpleTestCase):
    def test_to_tex(self):
        renderer = AsciiMathRenderer(FakeTranslator())
        self.assertEqual(renderer.to_tex("a/b"), "\\frac{a}{b}")
        self.assertEqual(renderer.to_tex("\\beta"), "\\beta")


class ProcessorRegistryTestCase(SimpleTestCase):
    def test_register(self):
        registry = ProcessorRegistry()
        registry.register("am", str.upper)
        self.assertIn("am", registry)
        self.assertEqual(len(registry), 1)
        self.assertEqual(registry.get("am")("x"), "X")
        self.assertEqual(registry.prefixes, ["am"])

    def test_unregister(self):
        registry = ProcessorRegistry()
        registry.register("am", str.upper)
        registry.unregister("am")
        registry.unregister("am")
        self.assertIsNone(registry.get("am"))

    def test_unregister_all_twice(self):
        registry = ProcessorRegistry()
        registry.register("am", str.upper)
        registry.register("asciimath", str.upper)
        registry.unregister_all()
        registry.unregister_all()
        self.assertEqual(len(registry), 0)


@override_settings(ASCIIMATH=FAKE_ASCIIMATH)
class NoteBodyTestCase(SimpleTestCase):
    def test_body_as_html(self):
        note = models.Note(title="Sums", slug="sums", body="# Sums\n\n`$a/b$`")
        html = note.body_as_html
        self.assertIn("<h1>Sums</h1>", html)
        self.assertIn("<mfrac>", html)
