"""Structured logging for trace-triage.

structlog renders every entry as JSON or as console key/value pairs on
stderr; stdout is reserved for analysis results. Entries pass through a
sanitizing processor because header lines and exception messages taken
from analyzed text end up in log events, and that text can hold
credentials or run to thousands of characters.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from enum import StrEnum
from functools import lru_cache
from pathlib import Path
from typing import Any, cast

import structlog
from structlog.typing import Processor, WrappedLogger

from trace_triage._version import __version__
from trace_triage.utils.security import SecretRedactor

SERVICE_NAME = "trace-triage"

# Longer string values are cut in log entries
MAX_LOG_VALUE_LENGTH = 500


class LogFormat(StrEnum):
    """Log output format options."""

    JSON = "json"
    CONSOLE = "console"


class LogLevel(StrEnum):
    """Log level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@lru_cache(maxsize=1)
def _log_redactor() -> SecretRedactor:
    return SecretRedactor()


def _truncate(text: str) -> str:
    if len(text) <= MAX_LOG_VALUE_LENGTH:
        return text
    return f"{text[:MAX_LOG_VALUE_LENGTH]}...[+{len(text) - MAX_LOG_VALUE_LENGTH} chars]"


def sanitize_log_value(value: Any) -> Any:
    """Redact secrets from a log value and cap long strings.

    Dicts, lists and tuples are walked recursively; other values pass through.
    """
    if isinstance(value, str):
        return _truncate(_log_redactor().redact(value))
    if isinstance(value, dict):
        return {key: sanitize_log_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return type(value)(sanitize_log_value(item) for item in value)
    return value


def secret_sanitizer(
    logger: logging.Logger,
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Structlog processor applying sanitize_log_value to the whole entry."""
    return cast(MutableMapping[str, Any], sanitize_log_value(dict(event_dict)))


def add_service_context(
    logger: logging.Logger,
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Structlog processor tagging entries with the service name and version."""
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("version", __version__)
    return event_dict


def _build_processors(log_format: LogFormat) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_service_context,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        secret_sanitizer,
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if log_format is LogFormat.JSON:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stderr.isatty(),
                exception_formatter=structlog.dev.plain_traceback,
            )
        )
    return processors


def _build_handlers(numeric_level: int, file_path: Path | None) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if file_path is not None:
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(file_path, encoding="utf-8"))
        except OSError as e:
            # Keep going with stderr only
            logging.getLogger(__name__).warning("Could not open log file %s: %s", file_path, e)

    for handler in handlers:
        handler.setLevel(numeric_level)
    return handlers


def configure_logging(
    level: LogLevel | str = LogLevel.WARNING,
    log_format: LogFormat | str = LogFormat.CONSOLE,
    file_path: Path | str | None = None,
    file_enabled: bool = False,
) -> None:
    """Configure structlog and the stdlib root logger.

    Safe to call more than once; the CLI configures early from flags and
    again once the configuration file has been read.

    Args:
        level: Minimum level, as a LogLevel or its name in any case
        log_format: "json" for machine-readable lines, "console" for humans
        file_path: Log file, also written when ``file_enabled`` is set
        file_enabled: Whether to write ``file_path`` in addition to stderr

    Example:
        configure_logging(level="DEBUG")  # see every pipeline stage
        configure_logging(level="INFO", log_format="json")  # CI log collectors
    """
    level = LogLevel(level.upper()) if isinstance(level, str) else level
    log_format = LogFormat(log_format.lower()) if isinstance(log_format, str) else log_format
    numeric_level = getattr(logging, level.value)

    structlog.configure(
        processors=_build_processors(log_format),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    log_file = Path(file_path) if file_enabled and file_path else None
    logging.basicConfig(
        format="%(message)s",
        level=numeric_level,
        handlers=_build_handlers(numeric_level, log_file),
        force=True,
    )


def get_logger(name: str | None = None) -> WrappedLogger:
    """Return a structlog logger, optionally named."""
    return cast(WrappedLogger, structlog.get_logger(name))


def bind_context(**kwargs: Any) -> None:
    """Attach key/value pairs to every subsequent entry in this context.

    Example:
        bind_context(source="url")
        log.info("input_loaded", size=1024)  # also carries source="url"
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    """Remove previously bound keys."""
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    """Remove every bound key."""
    structlog.contextvars.clear_contextvars()


class LogEventNames:
    """Standard log event names for consistency."""

    # Run lifecycle
    RUN_STARTING = "run_starting"
    RUN_FINISHED = "run_finished"
    CONFIGURATION_LOADED = "configuration_loaded"
    CONFIGURATION_INVALID = "configuration_invalid"

    # Input acquisition
    INPUT_LOADING = "input_loading"
    INPUT_LOADED = "input_loaded"
    INPUT_ERROR = "input_error"
    FETCH_START = "fetch_start"
    FETCH_COMPLETE = "fetch_complete"
    FETCH_TRUNCATED = "fetch_truncated"

    # Analysis
    ANALYSIS_STARTED = "analysis_started"
    TRACE_BLOCKS_EXTRACTED = "trace_blocks_extracted"
    TRACE_SELECTED = "trace_selected"
    TRACE_NOT_FOUND = "trace_not_found"

    # Output
    SECRETS_REDACTED = "secrets_redacted"
