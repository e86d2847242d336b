"""
Where documents come from and go back to.

Every storage offers list_documents(), read_text(ref) and write_text(ref, text).
"""

from pathlib import Path

from django.db import DatabaseError

from notes import models
from notes.exceptions import StorageError

SKIP_DIRS = {"_site", ".git", ".venv", "node_modules"}


class FileSystemStorage:
    """Markdown files under a directory, or a single file."""

    def __init__(self, root, pattern="*.md", skip_dirs=SKIP_DIRS, encoding="utf-8"):
        self.root = Path(root)
        self.pattern = pattern
        self.skip_dirs = set(skip_dirs)
        self.encoding = encoding

    def list_documents(self):
        if self.root.is_file():
            return [self.root]
        if not self.root.is_dir():
            raise StorageError(f"No such file or directory: {self.root}")

        documents = []
        for path in sorted(self.root.rglob(self.pattern)):
            relative = path.relative_to(self.root)
            if any(part in self.skip_dirs for part in relative.parts):
                continue
            if path.is_file():
                documents.append(path)
        return documents

    def read_text(self, ref):
        try:
            return Path(ref).read_text(encoding=self.encoding)
        except (OSError, UnicodeError) as ex:
            raise StorageError(f"Cannot read {ref}: {ex}") from ex

    def write_text(self, ref, text):
        try:
            Path(ref).write_text(text, encoding=self.encoding)
        except (OSError, UnicodeError) as ex:
            raise StorageError(f"Cannot write {ref}: {ex}") from ex


class NoteStorage:
    """Notes in the database, referenced by slug."""

    def __init__(self, queryset=None):
        self.model = models.Note
        self.queryset = queryset if queryset is not None else models.Note.objects.all()

    def list_documents(self):
        try:
            return list(self.queryset.order_by("id").values_list("slug", flat=True))
        except DatabaseError as ex:
            raise StorageError(f"Cannot list notes: {ex}") from ex

    def read_text(self, ref):
        try:
            return self.model.objects.get(slug=ref).body
        except DatabaseError as ex:
            raise StorageError(f"Cannot read note {ref}: {ex}") from ex

    def write_text(self, ref, text):
        try:
            note = self.model.objects.get(slug=ref)
            note.body = text
            note.save(update_fields=["body", "updated_at"])
        except DatabaseError as ex:
            raise StorageError(f"Cannot write note {ref}: {ex}") from ex
