"""Entry point for running trace-triage.

This module provides the command line interface. It handles:
- Configuration loading (YAML file, TRACE_TRIAGE_* environment, flags)
- Logging setup with secret sanitization
- Reading input from a file, inline text, a URL or stdin
- Rendering the diagnosis as text or JSON
- Exit codes
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

import structlog

from trace_triage._version import __version__

if TYPE_CHECKING:
    from trace_triage.config.schema import TriageSettings

log = structlog.get_logger()

EXIT_FOUND = 0
EXIT_NOT_FOUND = 1
EXIT_INPUT_ERROR = 2
EXIT_CONFIG_ERROR = 3


def setup_logging(debug: bool = False, log_format: str = "console") -> None:
    """Configure structured logging from CLI flags.

    Args:
        debug: Enable debug logging if True
        log_format: Output format ("json" or "console")
    """
    from trace_triage.utils.logging import LogFormat, LogLevel, configure_logging

    level = LogLevel.DEBUG if debug else LogLevel.WARNING
    configure_logging(level=level, log_format=LogFormat(log_format.lower()))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed argument namespace
    """
    parser = argparse.ArgumentParser(
        prog="trace-triage",
        description="Find the most likely offending frame and root cause in log text",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "file",
        nargs="?",
        help="Log file to analyze; '-' or nothing reads stdin",
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "-t",
        "--text",
        help="Analyze this text instead of a file",
    )
    source.add_argument(
        "-u",
        "--url",
        help="Fetch the text to analyze from an http(s) URL",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON",
    )

    parser.add_argument(
        "--ignore",
        action="append",
        default=[],
        metavar="PREFIX",
        help="Skip frames containing PREFIX (repeatable, added to the built-in list)",
    )

    parser.add_argument(
        "--search-base",
        help="Base URL for the search link",
    )

    parser.add_argument(
        "--redact",
        action="store_true",
        help="Redact secrets from exception messages and frames before printing",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to a YAML configuration file",
    )

    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--log-format",
        choices=["json", "console"],
        help="Log output format (default: from config, else console)",
    )

    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> "TriageSettings":
    """Load configuration and apply command line overrides.

    Precedence: flags > config file > environment > defaults.

    Raises:
        ConfigError: If the config file is missing or the configuration is invalid
    """
    from trace_triage.config.loader import load_config, validate_config
    from trace_triage.config.schema import AnalysisConfig
    from trace_triage.utils.errors import ConfigError

    try:
        settings = load_config(args.config)

        analysis = settings.analysis
        if args.ignore:
            analysis = analysis.with_ignored(args.ignore)
        if args.search_base:
            analysis = AnalysisConfig(
                ignore_packages=analysis.ignore_packages,
                search_base=args.search_base,
            )
        settings = settings.model_copy(update={"analysis": analysis})

        validate_config(settings)
    except FileNotFoundError as e:
        raise ConfigError(str(e)) from e
    except ValueError as e:
        # pydantic.ValidationError is a ValueError
        raise ConfigError(f"Invalid configuration: {e}") from e

    return settings


async def run(
    args: argparse.Namespace,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    """Run one analysis.

    Args:
        args: Parsed command line arguments
        stdin: Stream for stdin input (defaults to sys.stdin)
        stdout: Stream for the rendered result (defaults to sys.stdout)

    Returns:
        Exit code
    """
    from trace_triage.adapters.render import redact_result, render_json, render_text
    from trace_triage.adapters.sources import InputSource, read_input
    from trace_triage.core.analyzer import analyze
    from trace_triage.utils.errors import ConfigError, InputError
    from trace_triage.utils.logging import LogEventNames, bind_context, configure_logging

    stdout = stdout if stdout is not None else sys.stdout

    try:
        settings = build_settings(args)
    except ConfigError as e:
        log.error(LogEventNames.CONFIGURATION_INVALID, path=str(args.config), error=str(e))
        print(f"trace-triage: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    if not args.debug:
        # Reconfigure logging from config file settings
        configure_logging(
            level=settings.logging.level,
            log_format=args.log_format or settings.logging.format,
            file_path=settings.logging.file.path if settings.logging.file.enabled else None,
            file_enabled=settings.logging.file.enabled,
        )
    log.debug(LogEventNames.CONFIGURATION_LOADED)
    log.info(LogEventNames.RUN_STARTING, output="json" if args.json else "text", redact=args.redact)

    try:
        source = InputSource.from_args(file=args.file, text=args.text, url=args.url)
        bind_context(source=source.kind.value)
        text = await read_input(source, settings.fetch, stdin=stdin)
    except InputError as e:
        log.error(LogEventNames.INPUT_ERROR, error=str(e))
        print(f"trace-triage: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    result = analyze(text, settings.analysis)
    if args.redact:
        result = redact_result(result)

    print(render_json(result) if args.json else render_text(result), file=stdout)

    log.info(LogEventNames.RUN_FINISHED, found=result.found)
    return EXIT_FOUND if result.found else EXIT_NOT_FOUND


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    setup_logging(debug=args.debug, log_format=args.log_format or "console")

    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        log.info("interrupted")
        return 130
    finally:
        from trace_triage.utils.logging import clear_context

        clear_context()


if __name__ == "__main__":
    sys.exit(main())
