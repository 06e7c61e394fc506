"""Configuration loading and validation."""

from .loader import load_config, validate_config
from .schema import (
    DEFAULT_SEARCH_BASE,
    AnalysisConfig,
    FetchConfig,
    FileLoggingConfig,
    LoggingConfig,
    TriageSettings,
)

__all__ = [
    # Loader
    "load_config",
    "validate_config",
    # Root config
    "TriageSettings",
    # Section configs
    "AnalysisConfig",
    "FetchConfig",
    "LoggingConfig",
    "FileLoggingConfig",
    "DEFAULT_SEARCH_BASE",
]
