"""Pydantic models for configuration schema."""

from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_SEARCH_BASE = "https://www.google.com/search?q="


def _split_prefixes(value: Any) -> Any:
    """Accept a comma separated string wherever a list of prefixes is expected."""
    if isinstance(value, str):
        value = value.split(",")
    if isinstance(value, (list, tuple, set, frozenset)):
        return [str(item).strip() for item in value if str(item).strip()]
    return value


class AnalysisConfig(BaseModel):
    """Immutable options passed into the analysis core."""

    model_config = ConfigDict(frozen=True)

    ignore_packages: frozenset[str] = frozenset()  # Added to the built-in noise list
    search_base: str = DEFAULT_SEARCH_BASE

    @field_validator("ignore_packages", mode="before")
    @classmethod
    def normalize_ignore_packages(cls, v: Any) -> Any:
        """Strip whitespace and drop empty prefixes."""
        return _split_prefixes(v)

    @field_validator("search_base")
    @classmethod
    def validate_search_base(cls, v: str) -> str:
        """Reject an empty search base."""
        if not v.strip():
            raise ValueError("search_base must not be empty")
        return v.strip()

    def with_ignored(self, prefixes: list[str] | tuple[str, ...]) -> "AnalysisConfig":
        """Return a copy with additional ignore prefixes."""
        return AnalysisConfig(
            ignore_packages=self.ignore_packages | frozenset(prefixes),
            search_base=self.search_base,
        )


class FileLoggingConfig(BaseModel):
    """File logging configuration."""

    enabled: bool = False
    path: Path = Path("trace-triage.log")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["json", "console"] = "console"
    file: FileLoggingConfig = FileLoggingConfig()


class FetchConfig(BaseModel):
    """Settings for reading input from a URL."""

    timeout: float = Field(10.0, ge=1.0, le=300.0, description="Request timeout in seconds")
    max_attempts: int = Field(3, ge=1, le=10)
    max_bytes: int = Field(5 * 1024 * 1024, ge=1024, description="Largest body accepted")
    follow_redirects: bool = True


class TriageSettings(BaseSettings):
    """Root configuration for trace-triage.

    ``TRACE_TRIAGE_IGNORE`` (comma separated) and ``TRACE_TRIAGE_SEARCH_BASE``
    are shortcuts merged into ``analysis``.
    """

    analysis: AnalysisConfig = AnalysisConfig()
    logging: LoggingConfig = LoggingConfig()
    fetch: FetchConfig = FetchConfig()

    ignore: Annotated[list[str], NoDecode] = []
    search_base: str | None = None

    model_config = SettingsConfigDict(
        env_prefix="TRACE_TRIAGE_",
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @field_validator("ignore", mode="before")
    @classmethod
    def split_ignore(cls, v: Any) -> Any:
        """Split the comma separated shortcut."""
        return _split_prefixes(v)

    @model_validator(mode="after")
    def merge_shortcuts(self) -> "TriageSettings":
        """Fold the flat shortcuts into the analysis options."""
        if self.ignore or self.search_base:
            self.analysis = AnalysisConfig(
                ignore_packages=self.analysis.ignore_packages | frozenset(self.ignore),
                search_base=self.search_base or self.analysis.search_base,
            )
        return self
