"""Line patterns shared by the block extractor and the exception extractor."""

import re

# Any of these tokens, anywhere in a line and in any case, opens a trace block
BLOCK_START_TOKENS = re.compile(r"exception|error|traceback|throwable", re.IGNORECASE)

CAUSED_BY = re.compile(r"^\s*Caused by:\s*(?P<rest>.*)$", re.IGNORECASE)

# Lines that keep a block open once it has started
JVM_OR_NODE_FRAME_LINE = re.compile(r"^\s+at\s+")
PYTHON_FRAME_LINE = re.compile(r"^\s+File\s+")
ELISION_LINE = re.compile(r"^\s+\.{3}")  # e.g. "... 12 more"

# "Name", "Name: message" or "Name message", where Name ends in a known suffix.
# A bare suffix such as "Error" needs a colon or nothing after it, so prose
# like "Exception in ..." is not split into a name and a message.
# The lookahead keeps "ValueErrorFoo: x" from splitting inside an identifier.
EXCEPTION_LIKE = re.compile(
    r"^(?!(?:Exception|Error|Throwable|Warning|Exit)\s)"
    r"(?P<name>(?:[A-Za-z_$][\w$.]*)?(?:Exception|Error|Throwable|Warning|Exit))"
    r"(?=[:\s]|$):?\s*(?P<message>.*)$"
)

# JVM uncaught exception header: Exception in thread "main" java.lang.X: msg
THREAD_HEADER = re.compile(r'^Exception in thread "[^"]*"\s+')


def match_exception(text: str) -> re.Match[str] | None:
    """Match trimmed text against EXCEPTION_LIKE, looking past a thread header."""
    return EXCEPTION_LIKE.match(THREAD_HEADER.sub("", text.strip(), count=1))
