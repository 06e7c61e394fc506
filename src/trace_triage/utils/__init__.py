"""Utility functions and helpers.

This module provides various utilities for trace-triage:
- errors: Exception hierarchy for the I/O and configuration layers
- logging: Structured logging with secret sanitization
- retry: Retry with exponential backoff for network calls
- security: Secret redaction, input validation
"""

from trace_triage.utils.errors import ConfigError, FetchError, InputError, TriageError
from trace_triage.utils.logging import (
    LogEventNames,
    LogFormat,
    LogLevel,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)
from trace_triage.utils.retry import TRANSIENT_ERRORS, create_retry
from trace_triage.utils.security import (
    RedactionError,
    SecretRedactor,
    SecurityError,
    sanitize_for_terminal,
    validate_input_url,
)

__all__ = [
    # Errors
    "ConfigError",
    "FetchError",
    "InputError",
    "TriageError",
    # Logging
    "LogEventNames",
    "LogFormat",
    "LogLevel",
    "bind_context",
    "clear_context",
    "configure_logging",
    "get_logger",
    "unbind_context",
    # Retry
    "TRANSIENT_ERRORS",
    "create_retry",
    # Security
    "RedactionError",
    "SecretRedactor",
    "SecurityError",
    "sanitize_for_terminal",
    "validate_input_url",
]
