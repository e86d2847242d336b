import logging

from django.core.management.base import BaseCommand, CommandError

from notes import batch, conf, models
from notes.exceptions import ConfigurationError, MathNotesError
from notes.storage import FileSystemStorage, NoteStorage

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Convert AsciiMath formulas into LaTeX in notes or Markdown files."

    def add_arguments(self, parser):
        target = parser.add_mutually_exclusive_group()
        target.add_argument(
            "--note",
            dest="slug",
            help="Convert a single note, by slug.",
        )
        target.add_argument(
            "--path",
            help="Convert a Markdown file, or every Markdown file under a directory.",
        )
        parser.add_argument(
            "--display",
            action="store_true",
            help="Translate formulas in display style.",
        )
        parser.add_argument(
            "--jobs",
            type=int,
            default=1,
            help="Number of documents converted in parallel.",
        )
        parser.add_argument(
            "--no-dryrun",
            action="store_false",
            dest="dryrun",
            help="No dry run. Write converted documents back.",
        )
        parser.set_defaults(dryrun=True)

    def get_storage(self, options):
        if options["path"]:
            return FileSystemStorage(options["path"])
        return NoteStorage()

    def write_failures(self, ref, failures):
        for failure in failures:
            msg = f"Left unconverted in '{ref}': {failure}"
            self.stdout.write(self.style.WARNING(msg))

    def handle(self, *args, **options):
        try:
            math_settings = conf.get_math_settings()
            translator = conf.get_translator(math_settings)
        except ConfigurationError as ex:
            raise CommandError(str(ex)) from ex

        storage = self.get_storage(options)
        dryrun = options["dryrun"]

        if options["slug"]:
            self.stdout.write(self.style.NOTICE(f"Converting note '{options['slug']}'."))
            try:
                report = batch.convert_document(
                    storage,
                    options["slug"],
                    math_settings,
                    translator,
                    display=options["display"],
                    dry_run=dryrun,
                )
            except models.Note.DoesNotExist as ex:
                raise CommandError(f"Note '{options['slug']}' not found.") from ex
            except MathNotesError as ex:
                raise CommandError(str(ex)) from ex

            self.write_failures(report.ref, report.failures)
            counts = report.counts
            msg = (
                f"Converted {counts.block} blocks and {counts.inline} inline formulas."
            )
        else:
            try:
                documents = storage.list_documents()
            except MathNotesError as ex:
                raise CommandError(str(ex)) from ex
            self.stdout.write(
                self.style.NOTICE(f"Document count to process: {len(documents)}")
            )

            report = batch.convert_collection(
                storage,
                math_settings,
                translator,
                display=options["display"],
                dry_run=dryrun,
                workers=options["jobs"],
            )
            for document in report.documents:
                if document.error:
                    msg = f"Failed to convert '{document.ref}': {document.error}"
                    self.stdout.write(self.style.ERROR(msg))
                    continue
                if document.converted:
                    counts = document.counts
                    msg = (
                        f"'{document.ref}': {counts.block} blocks, "
                        f"{counts.inline} inline formulas."
                    )
                    self.stdout.write(self.style.NOTICE(msg))
                self.write_failures(document.ref, document.failures)

            if report.failures or report.errors:
                msg = (
                    f"{len(report.failures)} formulas could not be converted, "
                    f"{len(report.errors)} documents failed."
                )
                self.stdout.write(self.style.WARNING(msg))
            msg = report.summary()

        if dryrun:
            self.stdout.write(
                self.style.SUCCESS(f"Dry run done. Nothing was written. {msg}")
            )
            return

        self.stdout.write(self.style.SUCCESS(msg))
