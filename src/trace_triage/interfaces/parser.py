"""Abstract interface for stack frame grammars."""

from typing import Protocol

from ..models.trace import Frame


class FrameParser(Protocol):
    """Contract for a single stack-frame dialect (JVM, Node, Python, ...).

    Implementations must be side-effect free and must never raise for
    arbitrary input text.
    """

    name: str

    def parse(self, line: str) -> Frame | None:
        """
        Convert one line of text into a frame.

        Args:
            line: A single line of log text (untrimmed)

        Returns:
            The parsed Frame, or None if the line is not in this dialect
        """
        ...
