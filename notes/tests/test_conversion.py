from django.test import SimpleTestCase

from notes import conversion
from notes.conversion import ConversionCounts
from notes.exceptions import TranslationError
from notes.extraction import FormulaKind, FormulaMatch
from notes.tests.fakes import BrokenTranslator, FakeTranslator


class StaticTranslator:
    def __init__(self, tex):
        self.tex = tex

    def translate(self, source, display=False):
        return self.tex


class CollapseBracesTestCase(SimpleTestCase):
    def test_runs(self):
        self.assertEqual(
            conversion.collapse_braces(r"\frac{{a}}{b}"), r"\frac{ {a} }{b}"
        )
        self.assertEqual(conversion.collapse_braces("{{{x}}}"), "{ { {x} } }")

    def test_mixed_braces_untouched(self):
        self.assertEqual(conversion.collapse_braces("{a}{b}"), "{a}{b}")
        self.assertEqual(conversion.collapse_braces("}{"), "}{")

    def test_no_braces(self):
        self.assertEqual(conversion.collapse_braces("x + y"), "x + y")


class ToTexTestCase(SimpleTestCase):
    def test_translates_and_collapses(self):
        tex = conversion.to_tex(StaticTranslator(r"\sqrt{{x}}"), "sqrt(x)")
        self.assertEqual(tex, r"\sqrt{ {x} }")

    def test_display(self):
        translator = FakeTranslator()
        self.assertEqual(
            conversion.to_tex(translator, "a/b", display=True),
            r"\displaystyle \frac{a}{b}",
        )
        self.assertEqual(translator.calls, [("a/b", True)])

    def test_translation_error(self):
        with self.assertRaises(TranslationError):
            conversion.to_tex(FakeTranslator(), "x !! y")

    def test_foreign_error_wrapped(self):
        with self.assertRaises(TranslationError) as cm:
            conversion.to_tex(BrokenTranslator(), "x")
        self.assertEqual(cm.exception.source, "x")
        self.assertIn("parser crashed", str(cm.exception))


class WrapTestCase(SimpleTestCase):
    def test_wrap(self):
        self.assertEqual(conversion.wrap(FormulaKind.BLOCK, "x"), "$$x$$")
        self.assertEqual(conversion.wrap(FormulaKind.INLINE, "x"), "$x$")


class ConvertFormulasTestCase(SimpleTestCase):
    def test_counts_and_replacements(self):
        formulas = [
            FormulaMatch(FormulaKind.BLOCK, 0, 10, "a/b"),
            FormulaMatch(FormulaKind.INLINE, 12, 15, "pi"),
            FormulaMatch(FormulaKind.INLINE, 20, 25, "x^2"),
        ]
        result = conversion.convert_formulas(formulas, FakeTranslator())
        self.assertEqual(result.counts, ConversionCounts(block=1, inline=2))
        self.assertEqual(
            [r.text for r in result.replacements],
            [r"$$\frac{a}{b}$$", r"$\pi$", "$x^{2}$"],
        )
        self.assertEqual(result.failures, [])

    def test_failure_recorded_and_skipped(self):
        formulas = [
            FormulaMatch(FormulaKind.INLINE, 0, 5, "a !! b"),
            FormulaMatch(FormulaKind.INLINE, 6, 9, "c"),
        ]
        result = conversion.convert_formulas(formulas, FakeTranslator())
        self.assertEqual(result.counts, ConversionCounts(inline=1))
        self.assertEqual([r.start for r in result.replacements], [6])
        [failure] = result.failures
        self.assertEqual((failure.start, failure.end), (0, 5))
        self.assertEqual(failure.content, "a !! b")


class ConversionCountsTestCase(SimpleTestCase):
    def test_add(self):
        total = ConversionCounts(1, 2) + ConversionCounts(3, 4)
        self.assertEqual(total, ConversionCounts(4, 6))
        self.assertEqual(total.total, 10)
        self.assertEqual(total.as_dict(), {"block": 4, "inline": 6})

    def test_bool(self):
        self.assertFalse(ConversionCounts())
        self.assertTrue(ConversionCounts(inline=1))
