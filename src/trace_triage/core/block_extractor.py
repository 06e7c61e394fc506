"""Locate trace blocks inside free-form log text.

The scan is a small state machine over the input lines:

    SCANNING ──block start──▶ ABSORBING_BLOCK ──first foreign line──▶
    LOOKING_AHEAD_FOR_CONTINUATION ──exception/"Caused by" line──▶ ABSORBING_BLOCK
                                   └──anything else──▶ emit block, SCANNING

The lookahead step stitches a nested cause into the block it belongs to.
Python prints the "Name: message" line of each exception *after* its
indented frames, and JVM runtimes print "Caused by:" at column zero, so in
both cases the block would otherwise end one line too early.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

import structlog

from trace_triage.core.patterns import (
    BLOCK_START_TOKENS,
    CAUSED_BY,
    ELISION_LINE,
    JVM_OR_NODE_FRAME_LINE,
    PYTHON_FRAME_LINE,
    match_exception,
)
from trace_triage.models.trace import TraceBlock

log = structlog.get_logger()


class ScanState(Enum):
    """States of the block extraction scan."""

    SCANNING = "scanning"
    ABSORBING_BLOCK = "absorbing_block"
    LOOKING_AHEAD_FOR_CONTINUATION = "looking_ahead_for_continuation"


def is_caused_by(line: str) -> bool:
    """Check if a line is a ``Caused by:`` marker."""
    return CAUSED_BY.match(line) is not None


def is_block_start(line: str) -> bool:
    """Check if a line opens a new trace block."""
    return BLOCK_START_TOKENS.search(line) is not None or is_caused_by(line)


def is_absorbable(line: str) -> bool:
    """Check if a line continues the block that precedes it.

    Blank lines, indented ``at``/``File`` frame lines and elision markers
    are absorbable.
    """
    return (
        not line.strip()
        or JVM_OR_NODE_FRAME_LINE.match(line) is not None
        or PYTHON_FRAME_LINE.match(line) is not None
        or ELISION_LINE.match(line) is not None
    )


def is_exception_like(line: str) -> bool:
    """Check if a line, once trimmed, looks like ``SomeError: message``."""
    return match_exception(line) is not None


def _is_blank_or_indented(line: str) -> bool:
    return not line.strip() or line[0].isspace()


def split_lines(text: str | Sequence[str]) -> list[str]:
    """Split text into lines, normalizing ``\\r\\n`` endings."""
    if isinstance(text, str):
        return text.splitlines()
    return [line.rstrip("\r\n") for line in text]


class TraceBlockExtractor:
    """Split a sequence of lines into non-overlapping trace blocks.

    Example:
        extractor = TraceBlockExtractor(text.splitlines())
        for block in extractor.extract():
            print(block.header_line, len(block.raw_lines))
    """

    def __init__(self, lines: Sequence[str]) -> None:
        """Initialize the extractor.

        Args:
            lines: Input lines without line terminators
        """
        self._lines = lines
        self._state = ScanState.SCANNING
        self._position = 0  # Next line to inspect while scanning
        self._block_start = 0
        self._block_end = 0  # One past the last line claimed by the open block
        # Lines between _block_end and here are known to be blank or indented
        self._indented_until = 0
        self._blocks: list[TraceBlock] = []

    @property
    def state(self) -> ScanState:
        """The current scan state."""
        return self._state

    def extract(self) -> list[TraceBlock]:
        """Run the scan to completion.

        Returns:
            Trace blocks in order of appearance, without parsed frames
        """
        while self.step():
            pass
        return list(self._blocks)

    def step(self) -> bool:
        """Advance the state machine by one transition.

        Returns:
            False once the input is exhausted, True otherwise
        """
        if self._state is ScanState.SCANNING:
            return self._scan()
        if self._state is ScanState.ABSORBING_BLOCK:
            self._absorb()
        else:
            self._look_ahead()
        return True

    def _scan(self) -> bool:
        if self._position >= len(self._lines):
            return False
        if is_block_start(self._lines[self._position]):
            self._block_start = self._position
            self._block_end = self._position + 1
            self._state = ScanState.ABSORBING_BLOCK
        else:
            self._position += 1
        return True

    def _absorb(self) -> None:
        while self._block_end < len(self._lines) and is_absorbable(self._lines[self._block_end]):
            self._block_end += 1
        self._state = ScanState.LOOKING_AHEAD_FOR_CONTINUATION

    def _look_ahead(self) -> None:
        probe = max(self._block_end, self._indented_until)
        while probe < len(self._lines) and _is_blank_or_indented(self._lines[probe]):
            probe += 1
        self._indented_until = probe

        if probe < len(self._lines) and (
            is_exception_like(self._lines[probe]) or is_caused_by(self._lines[probe])
        ):
            # Lines skipped on the way belong to the nested cause's frames
            self._block_end = probe + 1
            self._state = ScanState.ABSORBING_BLOCK
            return

        self._emit()

    def _emit(self) -> None:
        block = TraceBlock(
            header_line=self._lines[self._block_start],
            raw_lines=tuple(self._lines[self._block_start : self._block_end]),
            start=self._block_start,
        )
        self._blocks.append(block)
        log.debug(
            "trace_block_extracted",
            start=block.start,
            end=block.end,
            header=block.header_line.strip()[:120],
        )
        self._position = self._block_end
        self._state = ScanState.SCANNING


def extract_blocks(text: str | Sequence[str]) -> list[TraceBlock]:
    """Extract all trace blocks from text.

    Args:
        text: Raw text, or text already split into lines

    Returns:
        Trace blocks in order of appearance, without parsed frames
    """
    return TraceBlockExtractor(split_lines(text)).extract()
