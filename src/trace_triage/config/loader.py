"""Reading trace-triage settings from YAML and the environment.

A configuration file may reference environment variables as ``${NAME}``
or ``${NAME:-fallback}``; references are expanded before the YAML is
parsed, so secrets such as a private search endpoint never need to be
written to disk.
"""

import os
import re
from pathlib import Path

import yaml

from ..utils.security import validate_input_url
from .schema import TriageSettings

ENV_REFERENCE = re.compile(r"\$\{(?P<name>[^}:]+)(?::-(?P<fallback>[^}]*))?\}")


def substitute_env_vars(text: str) -> str:
    """
    Expand ``${NAME}`` and ``${NAME:-fallback}`` references in ``text``.

    Raises:
        ValueError: If a variable without a fallback is unset
    """

    def expand(match: re.Match[str]) -> str:
        name, fallback = match.group("name", "fallback")
        if name in os.environ:
            return os.environ[name]
        if fallback is not None:
            return fallback
        raise ValueError(f"Environment variable {name} not found")

    return ENV_REFERENCE.sub(expand, text)


def _read_mapping(path: Path) -> dict:
    if not path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    document = yaml.safe_load(substitute_env_vars(path.read_text(encoding="utf-8")))
    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ValueError(f"Configuration file must contain a mapping: {path}")
    return document


def load_config(path: Path | None = None) -> TriageSettings:
    """
    Build validated settings.

    Keys in the file at ``path`` win over TRACE_TRIAGE_* variables, which
    win over the built-in defaults. Without a path only the environment
    and defaults apply.

    Raises:
        FileNotFoundError: If ``path`` does not exist
        ValueError: For unset variables, a non-mapping document or invalid values
    """
    settings = TriageSettings(**_read_mapping(path)) if path is not None else TriageSettings()
    validate_config(settings)
    return settings


def validate_config(config: TriageSettings) -> None:
    """
    Checks that span more than one field or need the security helpers.

    Raises:
        ValueError: If the search base is not an absolute http(s) URL
    """
    if not validate_input_url(config.analysis.search_base):
        raise ValueError(
            f"Invalid search base: {config.analysis.search_base}. Expected an http(s) URL"
        )
