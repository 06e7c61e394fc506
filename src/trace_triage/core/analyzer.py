"""Analysis entry point: from raw log text to a diagnostic result.

Pipeline:
    text → trace blocks → frames per block → best trace → best frame
         → primary exception + root cause → DiagnosticResult

The analysis is a pure function of its input text and configuration. It
reads no environment, holds no state between calls and never raises for
malformed text; when no trace with a parseable frame exists the result is
``DiagnosticResult.not_found()``.
"""

from __future__ import annotations

from collections.abc import Sequence
from urllib.parse import quote

import structlog

from trace_triage.config.schema import AnalysisConfig
from trace_triage.core.block_extractor import extract_blocks, split_lines
from trace_triage.core.exception_extractor import extract_exception_info, find_root_cause
from trace_triage.core.frame_parsers import DEFAULT_FRAME_PARSERS, parse_frames
from trace_triage.core.selector import DEFAULT_IGNORE_PACKAGES, select_frame, select_trace
from trace_triage.interfaces.parser import FrameParser
from trace_triage.models.diagnosis import DiagnosticResult, ExceptionInfo
from trace_triage.models.trace import Frame
from trace_triage.utils.logging import LogEventNames

log = structlog.get_logger()


def build_search_link(root: ExceptionInfo, frame: Frame, search_base: str) -> str:
    """Build a search URL for the root cause at the selected frame.

    The query is the root exception name followed by the frame's function,
    or its file when the dialect exposes no function.

    Args:
        root: Root-cause exception
        frame: Selected frame
        search_base: URL prefix the escaped query is appended to

    Returns:
        The search URL
    """
    query = f"{root.name} {frame.function or frame.file}"
    # Lone surrogates from undecodable input bytes become "?"
    return search_base + quote(query, safe="", errors="replace")


class TraceAnalyzer:
    """Reusable analyzer bound to one configuration.

    Example:
        analyzer = TraceAnalyzer(AnalysisConfig(ignore_packages={"com.acme.infra."}))
        result = analyzer.analyze(log_text)
        if result.found:
            print(result.file, result.line)
    """

    def __init__(
        self,
        config: AnalysisConfig | None = None,
        parsers: Sequence[FrameParser] = DEFAULT_FRAME_PARSERS,
    ) -> None:
        """Initialize the analyzer.

        Args:
            config: Analysis options; defaults apply when None
            parsers: Frame parsers in priority order
        """
        self._config = config or AnalysisConfig()
        self._parsers = tuple(parsers)
        self._ignore_packages = DEFAULT_IGNORE_PACKAGES | self._config.ignore_packages

    @property
    def config(self) -> AnalysisConfig:
        """The analysis options in effect."""
        return self._config

    @property
    def ignore_packages(self) -> frozenset[str]:
        """Built-in noise markers plus the configured ones."""
        return self._ignore_packages

    def analyze(self, text: str | Sequence[str] | None) -> DiagnosticResult:
        """Diagnose the most relevant stack trace in ``text``.

        Args:
            text: Raw log text, or text already split into lines

        Returns:
            DiagnosticResult; ``found`` is False when no trace has a frame
        """
        if not text:
            return DiagnosticResult.not_found()

        lines = split_lines(text)
        if not any(line.strip() for line in lines):
            return DiagnosticResult.not_found()

        log.debug(LogEventNames.ANALYSIS_STARTED, line_count=len(lines))

        blocks = [
            block.with_frames(parse_frames(block.raw_lines, self._parsers))
            for block in extract_blocks(lines)
        ]
        log.debug(
            LogEventNames.TRACE_BLOCKS_EXTRACTED,
            count=len(blocks),
            frame_counts=[block.frame_count for block in blocks],
        )

        trace = select_trace(blocks)
        if trace is None:
            log.debug(LogEventNames.TRACE_NOT_FOUND, block_count=len(blocks))
            return DiagnosticResult.not_found()

        frame = select_frame(trace.frames, self._ignore_packages)
        if frame is None:
            return DiagnosticResult.not_found()

        primary = extract_exception_info(trace)
        root = find_root_cause(trace)

        log.debug(
            LogEventNames.TRACE_SELECTED,
            start=trace.start,
            frame_count=trace.frame_count,
            frame_index=frame.index,
            exception_type=primary.name,
            root_exception_type=root.name,
        )

        return DiagnosticResult(
            found=True,
            exception=primary.display,
            exception_message=primary.message,
            root_exception=root.display,
            root_exception_message=root.message,
            frame_string=frame.raw_text,
            file=frame.file,
            line=frame.line,
            function=frame.function,
            search_link=build_search_link(root, frame, self._config.search_base),
        )


def analyze(
    text: str | Sequence[str] | None,
    config: AnalysisConfig | None = None,
) -> DiagnosticResult:
    """Diagnose the most relevant stack trace in ``text``.

    Args:
        text: Raw log text, or text already split into lines
        config: Analysis options (extra ignore prefixes, search base)

    Returns:
        DiagnosticResult; ``found`` is False when no trace has a frame
    """
    return TraceAnalyzer(config).analyze(text)
