"""Output rendering for diagnostic results."""

from __future__ import annotations

import json
from dataclasses import replace

import structlog

from trace_triage.models.diagnosis import DiagnosticResult
from trace_triage.utils.logging import LogEventNames
from trace_triage.utils.security import SecretRedactor, sanitize_for_terminal

log = structlog.get_logger()

NOT_FOUND_TEXT = "No stack trace found."


def redact_result(
    result: DiagnosticResult,
    redactor: SecretRedactor | None = None,
) -> DiagnosticResult:
    """Return a copy of ``result`` with secrets removed from text taken from the log."""
    if not result.found:
        return result
    redactor = redactor or SecretRedactor()

    def scrub(value: str | None) -> str | None:
        return redactor.redact(value) if value else value

    texts = (result.exception, result.root_exception, result.frame_string)
    kinds = sorted({kind for text in texts if text for kind in redactor.findings(text)})
    if kinds:
        log.info(LogEventNames.SECRETS_REDACTED, kinds=kinds)

    return replace(
        result,
        exception=scrub(result.exception),
        exception_message=scrub(result.exception_message),
        root_exception=scrub(result.root_exception),
        root_exception_message=scrub(result.root_exception_message),
        frame_string=scrub(result.frame_string),
    )


def render_json(result: DiagnosticResult) -> str:
    """Render the result in its public JSON shape."""
    return json.dumps(result.to_dict(), indent=2, ensure_ascii=False)


def render_text(result: DiagnosticResult) -> str:
    """Render a short human-readable summary."""
    if not result.found:
        return NOT_FOUND_TEXT

    lines = [f"Exception:  {result.exception}"]
    if result.root_exception and result.root_exception != result.exception:
        lines.append(f"Root cause: {result.root_exception}")
    lines.append(f"Location:   {result.file}:{result.line}")
    if result.function:
        lines.append(f"Function:   {result.function}")
    lines.append(f"Frame:      {result.frame_string}")
    lines.append(f"Search:     {result.search_link}")
    return sanitize_for_terminal("\n".join(lines))
