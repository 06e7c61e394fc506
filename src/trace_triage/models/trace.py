"""Data models for stack frames and trace blocks."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class Frame:
    """A single call-site parsed from one line of a stack trace.

    ``file`` is kept exactly as printed; it is not normalized.
    """

    file: str
    line: int  # 1-based
    raw_text: str  # The originating line, trimmed
    function: str | None = None  # Not every dialect exposes one
    index: int = 0  # Position within the owning block


@dataclass(frozen=True)
class TraceBlock:
    """A contiguous span of lines believed to hold one logical trace.

    A block may absorb nested "Caused by" sub-traces. Frames are attached
    once, after extraction, via :meth:`with_frames`.
    """

    header_line: str
    raw_lines: tuple[str, ...]
    start: int = 0  # Index of the header line in the scanned text
    frames: tuple[Frame, ...] = ()

    @property
    def end(self) -> int:
        """Index one past the last line consumed by this block."""
        return self.start + len(self.raw_lines)

    @property
    def frame_count(self) -> int:
        return len(self.frames)

    def with_frames(self, frames: tuple[Frame, ...]) -> TraceBlock:
        """Return a copy of this block enriched with parsed frames."""
        return replace(self, frames=tuple(frames))
