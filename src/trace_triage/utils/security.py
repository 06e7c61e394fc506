"""Secret redaction and input validation.

Log text routinely carries credentials: connection strings in "Connection
refused" messages, bearer tokens in request dumps, API keys in config
echoes. Anything derived from that text which is logged or printed can be
passed through SecretRedactor first.

Redaction is fail-closed: if a pattern fails to compile or execute the
operation raises rather than returning potentially sensitive text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import urlparse

import structlog

if TYPE_CHECKING:
    from collections.abc import Iterable

log = structlog.get_logger()

ALLOWED_URL_SCHEMES = frozenset({"http", "https"})

ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")
# C0 controls and DEL, except tab, newline and carriage return
CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


class SecurityError(Exception):
    """Base exception for security-related errors."""


class RedactionError(SecurityError):
    """Raised when secret redaction fails."""


@dataclass(frozen=True)
class SecretPattern:
    """A named secret shape.

    The optional ``keep`` and ``tail`` groups survive redaction, so
    ``password=hunter2`` becomes ``password=[REDACTED]`` and a connection
    string keeps its scheme and host.
    """

    name: str
    regex: str


DEFAULT_PATTERNS: tuple[SecretPattern, ...] = (
    # key=value pairs as printed in config dumps and exception messages
    SecretPattern(
        "Generic secret",
        r"(?i)(?P<keep>(?:api[_-]?key|secret|token|password|passwd|pwd|credential)s?"
        r"\s*[=:]\s*[\"']?)[\w\-.~+/]{8,}",
    ),
    SecretPattern("Bearer token", r"(?i)(?P<keep>bearer\s+)[a-z0-9._~+/-]{16,}=*"),
    # Credentials embedded in connection strings, JDBC URLs included
    SecretPattern(
        "Connection string credentials",
        r"(?i)(?P<keep>(?:jdbc:)?(?:postgres(?:ql)?|mysql|mariadb|sqlserver|oracle:thin"
        r"|mongodb(?:\+srv)?|redis|amqps?)://)[^:\s/@]+:[^@\s]+(?P<tail>@)",
    ),
    SecretPattern("Slack token", r"xox[baprs]-[\w-]+"),
    SecretPattern("GitHub token", r"(?:gh[oprsu]_[a-zA-Z0-9]{36}|github_pat_[a-zA-Z0-9_]{22,})"),
    SecretPattern("OpenAI API key", r"sk-(?:proj-[a-zA-Z0-9]{20,}|[a-zA-Z0-9]{48})"),
    SecretPattern("Anthropic API key", r"sk-ant-[\w-]{40,}"),
    SecretPattern("AWS access key ID", r"(?:AKIA|ASIA)[0-9A-Z]{16}"),
    SecretPattern("Google API key", r"AIza[0-9A-Za-z\-_]{35}"),
    SecretPattern("Google OAuth access token", r"ya29\.[0-9A-Za-z\-_]+"),
    SecretPattern("Stripe secret key", r"[sr]k_live_[a-zA-Z0-9]{24,}"),
    SecretPattern("Private key header", r"-----BEGIN (?:RSA |EC |DSA |OPENSSH )?PRIVATE KEY-----"),
    SecretPattern("JWT", r"eyJ[a-zA-Z0-9_-]*\.eyJ[a-zA-Z0-9_-]*\.[a-zA-Z0-9_-]*"),
)


class SecretRedactor:
    """Finds and masks secrets in text.

    Usage:
        redactor = SecretRedactor()
        redactor.redact("Cannot connect to postgresql://app:hunter2@db:5432/orders")
        # 'Cannot connect to postgresql://[REDACTED]@db:5432/orders'
    """

    def __init__(
        self,
        placeholder: str = "[REDACTED]",
        custom_patterns: Iterable[tuple[str, str]] | None = None,
    ) -> None:
        """Compile the pattern catalogue.

        Args:
            placeholder: Text that replaces each secret
            custom_patterns: Extra ``(regex, name)`` pairs

        Raises:
            RedactionError: If any pattern fails to compile
        """
        self.placeholder = placeholder

        catalogue = list(DEFAULT_PATTERNS)
        catalogue.extend(SecretPattern(name, regex) for regex, name in custom_patterns or ())

        self._compiled: list[tuple[str, re.Pattern[str]]] = []
        for pattern in catalogue:
            try:
                self._compiled.append((pattern.name, re.compile(pattern.regex)))
            except re.error as e:
                log.error("pattern_compilation_failed", pattern=pattern.name, error=str(e))
                raise RedactionError(f"Invalid secret pattern {pattern.name!r}: {e}") from e

    @property
    def patterns(self) -> list[re.Pattern[str]]:
        """The compiled patterns, in the order they are applied."""
        return [compiled for _, compiled in self._compiled]

    def _mask(self, match: re.Match[str]) -> str:
        groups = match.groupdict()
        return (groups.get("keep") or "") + self.placeholder + (groups.get("tail") or "")

    def redact(self, text: str) -> str:
        """Replace every secret in ``text`` with the placeholder.

        Raises:
            RedactionError: If a pattern fails while matching
        """
        if not text:
            return text

        try:
            for _, compiled in self._compiled:
                text = compiled.sub(self._mask, text)
        except Exception as e:
            log.error("redaction_failed", error=str(e))
            raise RedactionError(f"Redaction failed: {e}") from e
        return text

    def findings(self, text: str) -> list[str]:
        """Name the kinds of secret present in ``text``."""
        if not text:
            return []

        try:
            return [name for name, compiled in self._compiled if compiled.search(text)]
        except Exception as e:
            log.error("secret_scan_failed", error=str(e))
            raise RedactionError(f"Secret scan failed: {e}") from e

    def has_secrets(self, text: str) -> bool:
        """Check if text contains any secret."""
        return bool(self.findings(text))


def validate_input_url(url: str) -> bool:
    """Check that a URL is safe to fetch log text from.

    Only absolute http(s) URLs with a host are accepted; ``file://`` and
    friends would turn a URL argument into arbitrary local file access.
    """
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ALLOWED_URL_SCHEMES and bool(parsed.hostname)


def sanitize_for_terminal(text: str) -> str:
    """Strip ANSI escapes and control characters before echoing log text.

    Tabs and newlines are kept.
    """
    if not text:
        return text
    return CONTROL_CHARS.sub("", ANSI_ESCAPE.sub("", text))
