"""Input acquisition and output rendering around the analysis core."""

from .render import NOT_FOUND_TEXT, redact_result, render_json, render_text
from .sources import InputKind, InputSource, fetch_url, read_file, read_input, read_stdin

__all__ = [
    "NOT_FOUND_TEXT",
    "InputKind",
    "InputSource",
    "fetch_url",
    "read_file",
    "read_input",
    "read_stdin",
    "redact_result",
    "render_json",
    "render_text",
]
