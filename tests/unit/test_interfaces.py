"""Tests for protocol interfaces."""

import re

from trace_triage.core.analyzer import TraceAnalyzer
from trace_triage.core.frame_parsers import DEFAULT_FRAME_PARSERS
from trace_triage.interfaces.parser import FrameParser
from trace_triage.models.trace import Frame

DOTNET_TRACE = (
    "System.InvalidOperationException: Sequence contains no elements\n"
    "   at App.Orders.Load(Int32 id) in /src/Orders.cs:line 42\n"
    "   at App.Program.Main(String[] args) in /src/Program.cs:line 9"
)


class MockDotNetFrameParser:
    """Mock implementation of FrameParser for a dialect not built in."""

    name = "dotnet"

    _pattern = re.compile(
        r"\bat\s+(?P<function>[^(]+)\([^)]*\)\s+in\s+(?P<file>.+):line\s+(?P<line>\d+)"
    )

    def parse(self, line: str) -> Frame | None:
        """Parse '   at Ns.Type.Method(args) in path:line N'."""
        match = self._pattern.search(line)
        if not match:
            return None
        return Frame(
            file=match.group("file"),
            line=int(match.group("line")),
            raw_text=line.strip(),
            function=match.group("function").strip(),
        )


def test_mock_parser_implements_protocol() -> None:
    """Test that the mock satisfies FrameParser."""
    parser: FrameParser = MockDotNetFrameParser()
    frame = parser.parse("   at App.Orders.Load(Int32 id) in /src/Orders.cs:line 42")

    assert frame is not None
    assert (frame.file, frame.line) == ("/src/Orders.cs", 42)


def test_builtin_parsers_do_not_know_dialect() -> None:
    """Test that the built-in grammars ignore .NET frames."""
    assert TraceAnalyzer().analyze(DOTNET_TRACE).found is False


def test_custom_parser_plugs_into_analyzer() -> None:
    """Test that an extra dialect is used by the pipeline."""
    analyzer = TraceAnalyzer(parsers=[*DEFAULT_FRAME_PARSERS, MockDotNetFrameParser()])

    result = analyzer.analyze(DOTNET_TRACE)

    assert result.found is True
    assert result.exception == "System.InvalidOperationException: Sequence contains no elements"
    assert result.file == "/src/Orders.cs"
    assert result.line == 42
    assert result.function == "App.Orders.Load"
    assert result.search_link.endswith("System.InvalidOperationException%20App.Orders.Load")
