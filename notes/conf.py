from dataclasses import dataclass, field

from django.conf import settings
from django.utils.module_loading import import_string

from notes.delimiters import DelimiterPair
from notes.exceptions import ConfigurationError

DEFAULTS = {
    "BLOCK_PREFIXES": ["asciimath", "am"],
    "INLINE": {"open": "`$", "close": "$`"},
    "CUSTOM_SYMBOLS": [],
    "REPLACE_MATH_BLOCK": False,
    "TRANSLATOR": "notes.translators.ASCIIMathTranslator",
}


@dataclass(frozen=True)
class MathSettings:
    block_prefixes: tuple = tuple(DEFAULTS["BLOCK_PREFIXES"])
    inline: DelimiterPair = DelimiterPair(**DEFAULTS["INLINE"])
    custom_symbols: tuple = field(default_factory=tuple)
    replace_math_block: bool = False
    translator: str = DEFAULTS["TRANSLATOR"]

    @property
    def default_prefix(self):
        return self.block_prefixes[0]

    def validate(self):
        if len(self.block_prefixes) < 1:
            raise ConfigurationError("You should add at least 1 block prefix!")
        self.inline.validate()
        if any(len(rule) != 2 for rule in self.custom_symbols):
            raise ConfigurationError(
                "Custom rule should be two string split with a comma!"
            )
        return self


def parse_prefixes(value):
    """Accept a list or a comma separated string of block prefixes."""
    if isinstance(value, str):
        value = value.split(",")
    return tuple(p.strip() for p in value if p and p.strip())


def parse_symbols(value):
    """Accept a list of pairs or one "symbol, \\latex" rule per line."""
    if isinstance(value, str):
        value = [line.split(",") for line in value.split("\n")]
    rules = []
    for rule in value:
        if isinstance(rule, str):
            rule = rule.split(",")
        rule = tuple(s.strip() for s in rule if s and s.strip())
        if rule:
            rules.append(rule)
    return tuple(rules)


def get_math_settings(overrides=None):
    """
    Return validated MathSettings from settings.ASCIIMATH.

    Raises ConfigurationError before anything gets scanned.
    """
    conf = {**DEFAULTS, **getattr(settings, "ASCIIMATH", {})}
    if overrides:
        conf.update(overrides)

    inline = conf["INLINE"]
    if isinstance(inline, DelimiterPair):
        pair = inline
    else:
        pair = DelimiterPair(inline.get("open", ""), inline.get("close", ""))

    math_settings = MathSettings(
        block_prefixes=parse_prefixes(conf["BLOCK_PREFIXES"]),
        inline=pair,
        custom_symbols=parse_symbols(conf["CUSTOM_SYMBOLS"]),
        replace_math_block=bool(conf["REPLACE_MATH_BLOCK"]),
        translator=conf["TRANSLATOR"],
    )
    return math_settings.validate()


def get_translator(math_settings=None):
    """Instantiate the configured translator with the custom symbols."""
    if math_settings is None:
        math_settings = get_math_settings()
    try:
        translator_class = import_string(math_settings.translator)
    except ImportError as ex:
        raise ConfigurationError(
            f"Cannot import translator {math_settings.translator!r}: {ex}"
        ) from ex
    return translator_class(symbols=math_settings.custom_symbols)
