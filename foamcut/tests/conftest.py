"""Shared fixtures: default config, vector-file writer, logging reset."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

import pytest

from foamcut.configs.loader import CutterConfig, load_config
from foamcut.utils import logging_config
from foamcut.vectors.model import VECTOR_KEYS

VECTOR_NAMES = [key.filename for key in VECTOR_KEYS]


def vector_text(values: list[float], count: int | None = None) -> str:
    """Vector file body: count line, then one sample per line."""
    n = len(values) if count is None else count
    return f"{n}\n" + "".join(f"{v}\n" for v in values)


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop handlers installed by setup_logging between tests."""
    yield
    root = logging.getLogger()
    for handler in logging_config._installed_handlers:
        root.removeHandler(handler)
        handler.close()
    logging_config._installed_handlers.clear()
    root.setLevel(logging.WARNING)
    logging_config.pop_context()


@pytest.fixture()
def config() -> CutterConfig:
    """Load the default cutter.yaml shipped with the package."""
    return load_config()


@pytest.fixture()
def write_vectors(tmp_path: Path) -> Callable[..., Path]:
    """Write all eight vector files into ``tmp_path``.

    Every file gets *default*; entries in *overrides* (keyed by file
    name) replace individual files.  A value of ``None`` skips the file.
    """

    def _write(
        default: str = "1\n0.0\n",
        overrides: dict[str, str | None] | None = None,
    ) -> Path:
        overrides = overrides or {}
        for name in VECTOR_NAMES:
            body = overrides.get(name, default)
            if body is None:
                continue
            (tmp_path / name).write_text(body, encoding="ascii")
        return tmp_path

    return _write
