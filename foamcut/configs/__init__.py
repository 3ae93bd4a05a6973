"""Cutter configuration loading and validation."""

from foamcut.configs.loader import (
    ConfigError,
    CoordinatesConfig,
    CutterConfig,
    FilesConfig,
    GCodeConfig,
    LoggingConfig,
    WorkAreaConfig,
    load_config,
)

__all__ = [
    "ConfigError",
    "CoordinatesConfig",
    "CutterConfig",
    "FilesConfig",
    "GCodeConfig",
    "LoggingConfig",
    "WorkAreaConfig",
    "load_config",
]
