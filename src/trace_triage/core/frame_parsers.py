"""Per-dialect stack frame parsers.

Each parser converts a single line into a Frame, or returns None when the
line is not in its dialect. Three dialects are supported:
- JVM (Java, Kotlin, Scala): ``at com.example.Foo.bar(Foo.java:42)``
- Node/V8: ``at handler (/app/src/index.js:12:7)`` or ``at /app/index.js:12:7``
- Python: ``File "/app/main.py", line 10, in main``

Parsers are tried in a fixed priority order and the first match wins,
because the grammars overlap (a JVM frame also looks like a column-less
Node frame).
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import replace

from trace_triage.interfaces.parser import FrameParser
from trace_triage.models.trace import Frame


class JvmFrameParser:
    """Parser for JVM-style frames: ``at <identifier>(<file>:<line>)``."""

    name = "jvm"

    # File is everything before the last colon inside the parentheses
    FRAME_PATTERN = re.compile(
        r"\bat\s+(?P<function>[\w$.<>/]+)\((?P<file>[^()]*):(?P<line>\d+)\)"
    )

    def parse(self, line: str) -> Frame | None:
        match = self.FRAME_PATTERN.search(line)
        if not match:
            return None
        return Frame(
            file=match.group("file"),
            line=int(match.group("line")),
            raw_text=line.strip(),
            function=match.group("function"),
        )


class NodeFrameParser:
    """Parser for Node/V8-style frames.

    The ``<label> (`` prefix is optional and is not captured: labels vary
    too much across runtimes (``async``, ``new``, ``Object.<anonymous>``) to
    be reported as a function name.
    """

    name = "node"

    WITH_COLUMN = re.compile(
        r"\bat\s+(?:.*?\()?(?P<file>[^()]+?):(?P<line>\d+):(?P<column>\d+)\)?\s*$"
    )
    WITHOUT_COLUMN = re.compile(r"\bat\s+(?:.*?\()?(?P<file>[^()]+?):(?P<line>\d+)\)?\s*$")

    def parse(self, line: str) -> Frame | None:
        stripped = line.strip()
        match = self.WITH_COLUMN.search(stripped) or self.WITHOUT_COLUMN.search(stripped)
        if not match:
            return None
        return Frame(
            file=match.group("file").strip(),
            line=int(match.group("line")),
            raw_text=stripped,
        )


class PythonFrameParser:
    """Parser for Python traceback frames.

    ``, in <name>`` is optional so that SyntaxError locations, which omit
    it, still produce a frame.
    """

    name = "python"

    FRAME_PATTERN = re.compile(
        r'File "(?P<file>[^"]+)", line (?P<line>\d+)(?:, in (?P<function>.+))?'
    )

    def parse(self, line: str) -> Frame | None:
        match = self.FRAME_PATTERN.search(line)
        if not match:
            return None
        function = match.group("function")
        return Frame(
            file=match.group("file"),
            line=int(match.group("line")),
            raw_text=line.strip(),
            function=function.strip() if function else None,
        )


# Priority order matters: the first parser that matches a line wins
DEFAULT_FRAME_PARSERS: tuple[FrameParser, ...] = (
    JvmFrameParser(),
    NodeFrameParser(),
    PythonFrameParser(),
)


def parse_frame(
    line: str,
    parsers: Sequence[FrameParser] = DEFAULT_FRAME_PARSERS,
) -> Frame | None:
    """Parse one line with the first dialect that accepts it.

    Args:
        line: A single line of text
        parsers: Parsers to try, in priority order

    Returns:
        The parsed Frame, or None if no dialect matches
    """
    for parser in parsers:
        frame = parser.parse(line)
        if frame is not None:
            return frame
    return None


def parse_frames(
    lines: Iterable[str],
    parsers: Sequence[FrameParser] = DEFAULT_FRAME_PARSERS,
) -> tuple[Frame, ...]:
    """Parse every line that holds a frame, numbering frames in order."""
    frames: list[Frame] = []
    for line in lines:
        frame = parse_frame(line, parsers)
        if frame is None:
            continue
        frames.append(replace(frame, index=len(frames)))
    return tuple(frames)
