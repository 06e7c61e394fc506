"""Data models for analysis results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ExceptionInfo:
    """An exception identity: type token plus (possibly empty) message."""

    name: str  # e.g., "java.lang.IllegalStateException"
    message: str = ""  # e.g., "connection closed"

    @property
    def display(self) -> str:
        """
        Human-readable form.

        Format: 'Name: message', or just 'Name' when the message is empty.
        """
        if self.message:
            return f"{self.name}: {self.message}"
        return self.name


@dataclass(frozen=True)
class DiagnosticResult:
    """Outcome of analyzing a blob of log text.

    When ``found`` is False every other field is None.
    """

    found: bool
    exception: str | None = None
    exception_message: str | None = None
    root_exception: str | None = None
    root_exception_message: str | None = None
    frame_string: str | None = None
    file: str | None = None
    line: int | None = None
    function: str | None = None
    search_link: str | None = None

    @classmethod
    def not_found(cls) -> DiagnosticResult:
        """The sentinel returned when no trace with a frame exists."""
        return cls(found=False)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the public JSON shape.

        Keys are camelCase and the search link is exposed as ``link``.
        """
        if not self.found:
            return {"found": False}
        return {
            "found": True,
            "exception": self.exception,
            "exceptionMessage": self.exception_message,
            "rootException": self.root_exception,
            "rootExceptionMessage": self.root_exception_message,
            "frameString": self.frame_string,
            "file": self.file,
            "line": self.line,
            "function": self.function,
            "link": self.search_link,
        }
