"""Filesystem helpers for configuration and job files.

Provides:
    - YAML loading (``yaml.safe_load``)
    - Path resolution against a working directory
    - Directory creation with exist_ok semantics

All paths use pathlib.Path for cross-platform compatibility.

Usage:
    from foamcut.utils import fs
    data = fs.load_yaml("cutter.yaml")
    out = fs.resolve_path(workdir, "OUTPUT.txt")
"""

from pathlib import Path
from typing import Any, Dict, Union

import yaml


def ensure_dir(p: Union[str, Path]) -> Path:
    """Create directory if it doesn't exist, return Path object.

    Parameters
    ----------
    p : Union[str, Path]
        Directory path

    Returns
    -------
    Path
        Path object (guaranteed to exist)
    """
    p = Path(p)
    p.mkdir(parents=True, exist_ok=True)
    return p


def resolve_path(base: Union[str, Path], p: Union[str, Path]) -> Path:
    """Resolve *p* against *base* unless it is already absolute.

    Parameters
    ----------
    base : Union[str, Path]
        Working directory used for relative paths
    p : Union[str, Path]
        Relative or absolute path

    Returns
    -------
    Path
        ``p`` when absolute, otherwise ``base / p``
    """
    p = Path(p)
    if p.is_absolute():
        return p
    return Path(base) / p


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """Load YAML file safely.

    Parameters
    ----------
    path : Union[str, Path]
        YAML file path

    Returns
    -------
    Dict[str, Any]
        Parsed YAML content (``None`` for an empty document)

    Raises
    ------
    FileNotFoundError
        If file doesn't exist
    yaml.YAMLError
        If YAML parsing fails

    Notes
    -----
    Uses safe_load to prevent arbitrary code execution.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}") from e
