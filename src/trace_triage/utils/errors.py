"""Exceptions raised by the I/O and configuration layers.

The analysis core never raises for input text; these cover acquiring that
text and configuring the run.
"""


class TriageError(Exception):
    """Base exception for all trace-triage errors."""


class ConfigError(TriageError):
    """Configuration could not be loaded or is invalid."""


class InputError(TriageError):
    """Input text could not be acquired."""


class FetchError(InputError):
    """Fetching input from a URL failed.

    Attributes:
        status_code: HTTP status of the response, if one was received.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
