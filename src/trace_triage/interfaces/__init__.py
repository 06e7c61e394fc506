"""Protocol definitions for pluggable components."""

from .parser import FrameParser

__all__ = ["FrameParser"]
