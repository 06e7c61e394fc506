"""Derive exception identities from a trace block.

Two derivations run over the same block:
- The primary exception is the *first* ``Caused by:`` entry, or the last
  exception-like line when there is no cause marker.
- The root cause is the *last* ``Caused by:`` entry, or the last
  exception-like line when there is no cause marker.

The asymmetry is deliberate: the primary exception reports the outer
context, the root cause reports the deepest failure. A ``Caused by:`` line
always outranks a bare exception-like line, wherever the latter appears.
"""

from __future__ import annotations

from trace_triage.core.patterns import CAUSED_BY, match_exception
from trace_triage.models.diagnosis import ExceptionInfo
from trace_triage.models.trace import TraceBlock


def split_exception(text: str) -> ExceptionInfo | None:
    """Split ``Name: message`` text into an ExceptionInfo.

    The name is the identifier ending in Exception, Error, Throwable,
    Warning or Exit; a following colon is consumed as the separator.
    A JVM ``Exception in thread "name"`` prefix is skipped.

    Args:
        text: Candidate text (surrounding whitespace is ignored)

    Returns:
        ExceptionInfo, or None if the text does not start with an exception name
    """
    match = match_exception(text)
    if not match:
        return None
    return ExceptionInfo(name=match.group("name"), message=match.group("message").strip())


def _split_caused_by(rest: str) -> ExceptionInfo:
    name, _, message = rest.partition(": ")
    return ExceptionInfo(name=name.strip(), message=message.strip())


def _caused_by_entries(lines: tuple[str, ...]) -> list[ExceptionInfo]:
    entries = []
    for line in lines:
        match = CAUSED_BY.match(line)
        if match:
            entries.append(_split_caused_by(match.group("rest")))
    return entries


def _from_header(block: TraceBlock) -> ExceptionInfo:
    info = split_exception(block.header_line)
    if info is not None:
        return info
    return ExceptionInfo(name=block.header_line.strip(), message="")


def extract_exception_info(block: TraceBlock) -> ExceptionInfo:
    """Derive the primary exception of a block.

    Args:
        block: The selected trace block

    Returns:
        The primary ExceptionInfo (never None; the header is the last resort)
    """
    for line in block.raw_lines:
        match = CAUSED_BY.match(line)
        if match:
            return _split_caused_by(match.group("rest"))

    for line in reversed(block.raw_lines):
        info = split_exception(line)
        if info is not None:
            return info

    return _from_header(block)


def find_root_cause(block: TraceBlock) -> ExceptionInfo:
    """Derive the deepest cause of a block.

    Args:
        block: The selected trace block

    Returns:
        The root-cause ExceptionInfo (never None; the header is the last resort)
    """
    causes = _caused_by_entries(block.raw_lines)
    if causes:
        return causes[-1]

    root: ExceptionInfo | None = None
    for line in block.raw_lines:
        info = split_exception(line)
        if info is not None:
            root = info
    if root is not None:
        return root

    return _from_header(block)
