"""Core analysis components.

This module exports the analysis pipeline:
- analyze / TraceAnalyzer: Entry point producing a DiagnosticResult
- TraceBlockExtractor: Locates trace blocks inside free-form text
- Frame parsers: JVM, Node and Python frame grammars
- Selectors: Pick the richest trace and the first non-noise frame
- Exception extraction: Primary exception and root cause
"""

from trace_triage.core.analyzer import TraceAnalyzer, analyze, build_search_link
from trace_triage.core.block_extractor import ScanState, TraceBlockExtractor, extract_blocks
from trace_triage.core.exception_extractor import (
    extract_exception_info,
    find_root_cause,
    split_exception,
)
from trace_triage.core.frame_parsers import (
    DEFAULT_FRAME_PARSERS,
    JvmFrameParser,
    NodeFrameParser,
    PythonFrameParser,
    parse_frame,
    parse_frames,
)
from trace_triage.core.selector import (
    DEFAULT_IGNORE_PACKAGES,
    is_noise_frame,
    select_frame,
    select_trace,
)

__all__ = [
    "DEFAULT_FRAME_PARSERS",
    "DEFAULT_IGNORE_PACKAGES",
    "JvmFrameParser",
    "NodeFrameParser",
    "PythonFrameParser",
    "ScanState",
    "TraceAnalyzer",
    "TraceBlockExtractor",
    "analyze",
    "build_search_link",
    "extract_blocks",
    "extract_exception_info",
    "find_root_cause",
    "is_noise_frame",
    "parse_frame",
    "parse_frames",
    "select_frame",
    "select_trace",
    "split_exception",
]
