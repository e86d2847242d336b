from django.core.exceptions import ImproperlyConfigured


class MathNotesError(Exception):
    pass


class ConfigurationError(MathNotesError, ImproperlyConfigured):
    """Invalid block prefixes, inline delimiters or custom symbols."""


class ExtractionError(MathNotesError):
    """Formula offsets that cannot be applied to the document text."""


class TranslationError(MathNotesError):
    """The translator rejected a formula."""

    def __init__(self, source, reason=""):
        self.source = source
        self.reason = reason
        message = f"Cannot translate {source!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class StorageError(MathNotesError):
    """A document could not be read or written."""
