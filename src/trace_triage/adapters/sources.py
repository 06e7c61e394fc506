"""Input acquisition: read the text to analyze from a file, string, URL or stdin."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import TextIO

import httpx
import structlog

from trace_triage.config.schema import FetchConfig
from trace_triage.utils.errors import FetchError, InputError
from trace_triage.utils.logging import LogEventNames
from trace_triage.utils.retry import create_retry
from trace_triage.utils.security import validate_input_url

log = structlog.get_logger()


class InputKind(StrEnum):
    """Where the input text comes from."""

    FILE = "file"
    TEXT = "text"
    URL = "url"
    STDIN = "stdin"


@dataclass(frozen=True)
class InputSource:
    """A single input location."""

    kind: InputKind
    value: str | None = None  # Path, inline text or URL; None for stdin

    @classmethod
    def from_args(
        cls,
        file: str | None = None,
        text: str | None = None,
        url: str | None = None,
    ) -> InputSource:
        """Build a source from mutually exclusive CLI arguments.

        A file argument of ``-`` and no argument at all both mean stdin.

        Raises:
            InputError: If more than one source is given
        """
        candidates = ((InputKind.FILE, file), (InputKind.TEXT, text), (InputKind.URL, url))
        given = [(kind, value) for kind, value in candidates if value is not None]
        if len(given) > 1:
            names = ", ".join(kind.value for kind, _ in given)
            raise InputError(f"Only one input source may be given, got: {names}")
        if not given or given[0] == (InputKind.FILE, "-"):
            return cls(InputKind.STDIN)
        kind, value = given[0]
        return cls(kind, value)

    @property
    def label(self) -> str:
        """Short description for logs and messages."""
        if self.kind is InputKind.TEXT:
            return "<inline text>"
        if self.kind is InputKind.STDIN:
            return "<stdin>"
        return self.value or ""


def read_file(path: Path) -> str:
    """Read a file as UTF-8, replacing undecodable bytes.

    Raises:
        InputError: If the file cannot be read
    """
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise InputError(f"Cannot read {path}: {e.strerror or e}") from e


def read_stdin(stream: TextIO | None = None) -> str:
    """Read all of stdin.

    Raises:
        InputError: If stdin is an interactive terminal
    """
    stream = stream if stream is not None else sys.stdin
    if stream.isatty():
        raise InputError("No input given: pass a file, --text, --url or pipe text on stdin")
    return stream.read()


async def fetch_url(
    url: str,
    config: FetchConfig | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    retry_wait: float = 0.5,
) -> str:
    """Download text from an http(s) URL.

    Transport failures are retried with exponential backoff; HTTP error
    statuses are not. Bodies larger than ``config.max_bytes`` are truncated.

    Args:
        url: Address to fetch
        config: Fetch options; defaults apply when None
        transport: Custom httpx transport (used by tests)
        retry_wait: Initial backoff between attempts, in seconds

    Returns:
        The decoded body

    Raises:
        FetchError: If the URL is not allowed, unreachable or returns an error status
    """
    config = config or FetchConfig()
    if not validate_input_url(url):
        raise FetchError(f"Unsupported URL: {url}. Only http(s) URLs can be fetched")

    retrying = create_retry(
        max_attempts=config.max_attempts,
        min_wait=retry_wait,
        max_wait=max(retry_wait, 10.0),
    )

    @retrying
    async def download(client: httpx.AsyncClient) -> tuple[bytes, str, bool]:
        async with client.stream("GET", url) as response:
            if response.is_error:
                raise FetchError(
                    f"Fetching {url} returned HTTP {response.status_code}",
                    status_code=response.status_code,
                )
            body = bytearray()
            truncated = False
            async for chunk in response.aiter_bytes():
                body.extend(chunk)
                if len(body) > config.max_bytes:
                    truncated = True
                    break
            encoding = response.charset_encoding or "utf-8"
            return bytes(body[: config.max_bytes]), encoding, truncated

    log.info(LogEventNames.FETCH_START, url=url, timeout=config.timeout)
    async with httpx.AsyncClient(
        timeout=config.timeout,
        follow_redirects=config.follow_redirects,
        transport=transport,
    ) as client:
        try:
            body, encoding, truncated = await download(client)
        except httpx.HTTPError as e:
            raise FetchError(f"Failed to fetch {url}: {e}") from e

    if truncated:
        log.warning(LogEventNames.FETCH_TRUNCATED, url=url, max_bytes=config.max_bytes)
    log.info(LogEventNames.FETCH_COMPLETE, url=url, size=len(body))

    try:
        return body.decode(encoding, errors="replace")
    except LookupError:
        # Unknown charset in Content-Type
        return body.decode("utf-8", errors="replace")


async def read_input(
    source: InputSource,
    fetch_config: FetchConfig | None = None,
    *,
    stdin: TextIO | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """Read the text for ``source``.

    Args:
        source: Where to read from
        fetch_config: Options for URL sources
        stdin: Stream used for stdin sources (defaults to sys.stdin)
        transport: Custom httpx transport for URL sources

    Returns:
        The input text

    Raises:
        InputError: If the input cannot be acquired
    """
    log.debug(LogEventNames.INPUT_LOADING, source=source.kind.value, input_name=source.label)

    if source.kind is InputKind.FILE:
        text = read_file(Path(source.value or ""))
    elif source.kind is InputKind.TEXT:
        text = source.value or ""
    elif source.kind is InputKind.URL:
        text = await fetch_url(source.value or "", fetch_config, transport=transport)
    else:
        text = read_stdin(stdin)

    log.debug(LogEventNames.INPUT_LOADED, source=source.kind.value, size=len(text))
    return text
