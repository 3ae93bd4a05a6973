"""Configuration loader for the foam-cutter G-code converter.

Loads and validates ``cutter.yaml`` into typed, frozen dataclasses.
Cutter travel limits, the coordinate scalar, the feedrate and move
command, and the input/output file locations all come from the config.
The shipped defaults reproduce the classic converter output exactly.

Usage::

    from foamcut.configs.loader import load_config
    cfg = load_config()                      # default path
    cfg = load_config("/custom/cutter.yaml") # explicit path
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from foamcut.utils.fs import load_yaml
from foamcut.vectors.model import VECTOR_KEYS

logger = logging.getLogger(__name__)

_FEEDRATE_RE = re.compile(r"^F[0-9]+(\.[0-9]+)?$")
_MOVE_COMMANDS = ("G0", "G1")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "cutter.yaml"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


# ---------------------------------------------------------------------------
# Dataclasses -- mirror the YAML structure
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WorkAreaConfig:
    """Cutter travel limits.

    The tip carriage (U/V) shares the root carriage (X/Y) limits, so
    ``u_*`` and ``v_*`` are aliases of ``x_*`` and ``y_*``.
    """

    x_min: float
    x_max: float
    y_min: float
    y_max: float

    @property
    def u_min(self) -> float:
        return self.x_min

    @property
    def u_max(self) -> float:
        return self.x_max

    @property
    def v_min(self) -> float:
        return self.y_min

    @property
    def v_max(self) -> float:
        return self.y_max


@dataclass(frozen=True)
class CoordinatesConfig:
    """Scaling applied to every sample as it is read."""

    scalar: float


@dataclass(frozen=True)
class GCodeConfig:
    """Literal G-code words used by the emitter.

    ``feedrate`` is the complete ``F`` word (e.g. ``"F0.60"``) and is
    written verbatim on every cutting move.
    """

    feedrate: str
    move_command: str


@dataclass(frozen=True)
class FilesConfig:
    """Input and output locations, relative to the working directory."""

    input_directory: str
    output_filename: str


@dataclass(frozen=True)
class LoggingConfig:
    """Logging setup used by the CLI."""

    level: str
    file: str | None = None
    json: bool = False
    color: bool = True


@dataclass(frozen=True)
class CutterConfig:
    """Top-level converter configuration."""

    work_area: WorkAreaConfig
    coordinates: CoordinatesConfig
    gcode: GCodeConfig
    files: FilesConfig
    logging: LoggingConfig


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _validate_config(cfg: CutterConfig) -> None:
    """Validate cross-field consistency.

    Raises
    ------
    ConfigError
        On any invalid combination.
    """
    # -- Travel limits ordered ----------------------------------------------
    wa = cfg.work_area
    if not wa.x_min < wa.x_max:
        raise ConfigError(
            f"work_area.x_min ({wa.x_min}) must be < x_max ({wa.x_max})"
        )
    if not wa.y_min < wa.y_max:
        raise ConfigError(
            f"work_area.y_min ({wa.y_min}) must be < y_max ({wa.y_max})"
        )

    # -- Scalar usable ------------------------------------------------------
    scalar = cfg.coordinates.scalar
    if not math.isfinite(scalar) or scalar == 0.0:
        raise ConfigError(
            f"coordinates.scalar must be finite and non-zero, got {scalar}"
        )

    # -- G-code words -------------------------------------------------------
    if not _FEEDRATE_RE.fullmatch(cfg.gcode.feedrate):
        raise ConfigError(
            f"gcode.feedrate must look like 'F0.60', "
            f"got {cfg.gcode.feedrate!r}"
        )
    if cfg.gcode.move_command not in _MOVE_COMMANDS:
        raise ConfigError(
            f"gcode.move_command must be one of {_MOVE_COMMANDS}, "
            f"got {cfg.gcode.move_command!r}"
        )

    # -- Output must not clobber an input ------------------------------------
    out_name = cfg.files.output_filename
    if not out_name:
        raise ConfigError("files.output_filename must not be empty")
    if Path(out_name).name in {key.filename for key in VECTOR_KEYS}:
        raise ConfigError(
            f"files.output_filename {out_name!r} collides with a vector file"
        )

    if cfg.logging.level.upper() not in _LOG_LEVELS:
        raise ConfigError(
            f"logging.level must be one of {_LOG_LEVELS}, "
            f"got {cfg.logging.level!r}"
        )


def _section(
    data: dict[str, Any], name: str, required: bool = True,
) -> dict[str, Any]:
    """Return the mapping under *name*; optional sections default to ``{}``.

    Raises
    ------
    KeyError
        If a required section is absent.
    ConfigError
        If the section is present but not a mapping.
    """
    if not required and data.get(name) is None:
        return {}
    section = data[name]
    if not isinstance(section, dict):
        raise ConfigError(
            f"Section {name!r} must be a mapping, got {type(section).__name__}"
        )
    return section


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(path: str | Path | None = None) -> CutterConfig:
    """Load and validate cutter configuration from YAML.

    Parameters
    ----------
    path : str | Path | None
        Path to ``cutter.yaml``.  ``None`` loads the default shipped
        alongside this module.

    Returns
    -------
    CutterConfig
        Fully validated, frozen configuration object.

    Raises
    ------
    ConfigError
        If any field is missing or fails validation.
    FileNotFoundError
        If *path* does not exist.
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH
    else:
        path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    logger.debug("Loading configuration from %s", path)

    try:
        data: dict[str, Any] = load_yaml(path)
    except yaml.YAMLError as exc:
        raise ConfigError(str(exc)) from exc
    if data is None:
        raise ConfigError(f"Empty configuration file: {path}")
    if not isinstance(data, dict):
        raise ConfigError(
            f"Configuration must be a mapping, got {type(data).__name__}"
        )

    try:
        # -- work area ------------------------------------------------------
        wa = _section(data, "work_area")
        work_area = WorkAreaConfig(
            x_min=float(wa["x_min"]),
            x_max=float(wa["x_max"]),
            y_min=float(wa["y_min"]),
            y_max=float(wa["y_max"]),
        )

        # -- coordinates ----------------------------------------------------
        coordinates = CoordinatesConfig(
            scalar=float(_section(data, "coordinates")["scalar"]),
        )

        # -- gcode ----------------------------------------------------------
        gd = _section(data, "gcode")
        gcode = GCodeConfig(
            feedrate=str(gd["feedrate"]),
            move_command=str(gd["move_command"]),
        )

        # -- files ----------------------------------------------------------
        fd = _section(data, "files", required=False)
        files = FilesConfig(
            input_directory=str(fd.get("input_directory", ".")),
            output_filename=str(fd.get("output_filename", "OUTPUT.txt")),
        )

        # -- logging (optional) ---------------------------------------------
        ld = _section(data, "logging", required=False)
        log_file = ld.get("file")
        logging_cfg = LoggingConfig(
            level=str(ld.get("level", "WARNING")),
            file=str(log_file) if log_file else None,
            json=bool(ld.get("json", False)),
            color=bool(ld.get("color", True)),
        )

        config = CutterConfig(
            work_area=work_area,
            coordinates=coordinates,
            gcode=gcode,
            files=files,
            logging=logging_cfg,
        )

    except KeyError as exc:
        raise ConfigError(
            f"Missing required configuration key: {exc}"
        ) from exc
    except (TypeError, ValueError) as exc:
        raise ConfigError(
            f"Invalid configuration value: {exc}"
        ) from exc

    _validate_config(config)
    logger.debug("Configuration loaded successfully")
    return config
