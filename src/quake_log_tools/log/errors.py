"""
Errors raised while interpreting a game log.

Parsing is all-or-nothing: each of these aborts the parse and no partial
result is returned.
"""

__all__ = ['QuakeLogError', 'MalformedLineError', 'UnterminatedMatchError', 'StreamReadError']


class QuakeLogError(Exception):
    """Base class for game log parsing errors."""


class MalformedLineError(QuakeLogError):
    """A line lacks the timestamp header every log line starts with."""

    def __init__(self, line: int):
        self.line = line
        super().__init__(f"line {line} is malformed")


class UnterminatedMatchError(QuakeLogError):
    """The input ended while a match was still open."""

    def __init__(self, message: str = "log entries ended while a match was still open"):
        super().__init__(message)


class StreamReadError(QuakeLogError):
    """
    Reading from the underlying input failed; the original error is chained.

    ``line`` is the number of lines read successfully before the failure.
    """

    def __init__(self, line: int, error: Exception):
        self.line = line
        self.error = error
        super().__init__(f"failed to read log after line {line}: {error}")
