import re
from dataclasses import dataclass

from notes.exceptions import ConfigurationError

# backtick is the only escape character the inline pair may be wrapped in
ESCAPE_CHAR = "`"


def normalize_escape(literal):
    """Return literal with regex-special characters backslash escaped."""
    return re.escape(literal)


@dataclass(frozen=True)
class DelimiterPair:
    open: str
    close: str

    def validate(self):
        """Raise ConfigurationError unless the pair is usable for scanning."""
        if (
            not self.open.startswith(ESCAPE_CHAR)
            or len(self.open) <= 1
            or self.open.startswith(ESCAPE_CHAR * 2)
            or self.open.count(ESCAPE_CHAR) != 1
        ):
            raise ConfigurationError("Invalid inline leading escape!")
        if (
            not self.close.endswith(ESCAPE_CHAR)
            or len(self.close) <= 1
            or self.close.endswith(ESCAPE_CHAR * 2)
            or self.close.count(ESCAPE_CHAR) != 1
        ):
            raise ConfigurationError("Invalid inline trailing escape!")
        return self

    @property
    def pattern(self):
        """Pattern matching one delimited span, group 1 is the body."""
        return re.compile(
            f"{normalize_escape(self.open)}(.*?){normalize_escape(self.close)}"
        )
