"""Shared test fixtures for trace-triage."""

from pathlib import Path

import pytest

# Get the fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"
TRACES_DIR = FIXTURES_DIR / "traces"


def load_trace(name: str) -> str:
    """Read a sample trace from the fixtures directory."""
    return (TRACES_DIR / name).read_text()


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def java_nested_trace() -> str:
    """A JVM trace wrapped in a log line, with two nested causes."""
    return load_trace("java_nested.txt")


@pytest.fixture
def python_traceback() -> str:
    """A one-frame Python traceback."""
    return load_trace("python_simple.txt")


@pytest.fixture
def python_chained_traceback() -> str:
    """Two Python tracebacks joined by a chaining banner."""
    return load_trace("python_chained.txt")


@pytest.fixture
def node_trace() -> str:
    """A Node.js uncaught exception with source excerpt."""
    return load_trace("node_trace.txt")


@pytest.fixture
def mixed_log() -> str:
    """Application log with a one-frame and a five-frame JVM trace."""
    return load_trace("mixed_log.txt")


@pytest.fixture
def plain_log() -> str:
    """Log text without any error or exception."""
    return load_trace("plain.txt")


@pytest.fixture
def jvm_scenario() -> str:
    """The smallest complete JVM trace."""
    return "NullPointerException: boom\n\tat com.example.Foo.bar(Foo.java:42)"
