"""Exception types shared across feedburst."""


class FeedburstError(Exception):
    """Base class for all feedburst errors."""


class ConfigError(FeedburstError):
    """Raised when the config file cannot be located or read."""


class ParseError(FeedburstError):
    """Raised when the config text is malformed.

    Carries the 1-based line and column of the offending token, the length
    of its span, and what the parser expected to find there.
    """

    def __init__(
        self,
        line: int,
        column: int,
        expected: str,
        found: str | None = None,
        span: int = 1,
    ):
        self.line = line
        self.column = column
        self.expected = expected
        self.found = found
        self.span = span
        super().__init__(str(self))

    def __str__(self) -> str:
        message = f"line {self.line}, column {self.column}: expected {self.expected}"
        if self.found is not None:
            message += f", found {self.found}"
        return message


class FeedError(FeedburstError):
    """A failure that only affects a single feed."""


class FeedFetchError(FeedError):
    """Raised when a feed cannot be retrieved or decoded."""


class LoadError(FeedError):
    """Raised when a stored feed record is corrupt."""


class StoreError(FeedError):
    """Raised when a feed record cannot be located or written."""


class PresentError(FeedError):
    """Raised when a batch cannot be shown to the user."""
