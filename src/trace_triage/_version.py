"""Package version, taken from the installed distribution when there is one."""

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DISTRIBUTION = "trace-triage"

_PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def _resolve_version() -> str:
    try:
        return version(DISTRIBUTION)
    except PackageNotFoundError:
        pass

    # Source checkout that was never installed
    if _PYPROJECT.is_file():
        with _PYPROJECT.open("rb") as f:
            return str(tomllib.load(f)["project"]["version"])
    raise RuntimeError(f"Could not determine the {DISTRIBUTION} version")


__version__ = _resolve_version()

__all__ = ["__version__"]
