"""Data models and transfer objects."""

from .diagnosis import DiagnosticResult, ExceptionInfo
from .trace import Frame, TraceBlock

__all__ = [
    # Trace models
    "Frame",
    "TraceBlock",
    # Result models
    "ExceptionInfo",
    "DiagnosticResult",
]
