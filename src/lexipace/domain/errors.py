"""Exception hierarchy shared by every layer."""


class LexipaceError(Exception):
    """Base class for errors raised on purpose by lexipace."""


class InvalidRecordError(LexipaceError):
    """A learning record, answer event or snapshot violates its invariants."""


class CatalogLoadError(LexipaceError):
    """A word list could not be read or parsed."""
