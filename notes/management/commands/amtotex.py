from django.core.management.base import BaseCommand, CommandError

from notes import classifier, conf, conversion
from notes.exceptions import ConfigurationError, TranslationError

MAX_LENGTH = 1000


class Command(BaseCommand):
    help = "Print the LaTeX for one AsciiMath expression."

    def add_arguments(self, parser):
        parser.add_argument(
            "expression",
            type=str,
            help="AsciiMath expression to convert.",
        )
        parser.add_argument(
            "--display",
            action="store_true",
            help="Translate in display style.",
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help="Convert even if the expression looks like LaTeX or is very long.",
        )

    def handle(self, *args, **options):
        expression = options["expression"]

        if not options["force"]:
            if len(expression) > MAX_LENGTH:
                raise CommandError(
                    f"The expression is over {MAX_LENGTH} chars. "
                    "Use --force to convert it anyway."
                )
            if classifier.is_latex_code(expression):
                raise CommandError(
                    "The expression may be already LaTeX. "
                    "Use --force to convert it anyway."
                )

        try:
            translator = conf.get_translator()
            tex = conversion.to_tex(translator, expression, options["display"])
        except (ConfigurationError, TranslationError) as ex:
            raise CommandError(str(ex)) from ex

        self.stdout.write(tex)
