"""Conversion pipeline -- vector files in, one G-code program out.

Sequence::

    open output  ->  load vectors  ->  check counts  ->  emit G-code

The output is opened (and truncated) first so an unwritable target fails
before any input is read, but nothing is written to it until loading is
complete.  One :class:`contextlib.ExitStack` owns the output handle and
all eight input handles, so every exit path, fatal or not, closes all
nine files.
"""

from __future__ import annotations

import logging
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path

from foamcut.configs.loader import CutterConfig
from foamcut.errors import GCodeWriteError
from foamcut.gcode.generator import GCodeGenerator
from foamcut.utils.fs import resolve_path
from foamcut.vectors.consistency import check_consistency
from foamcut.vectors.reader import load_input_set

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of a successful :func:`run_conversion`."""

    output_path: Path
    counts_consistent: bool
    upper_lines: int
    lower_lines: int
    stopped_early: bool = False

    @property
    def total_lines(self) -> int:
        return self.upper_lines + self.lower_lines


def run_conversion(
    config: CutterConfig,
    workdir: str | Path | None = None,
) -> ConversionResult:
    """Convert the eight vector files in *workdir* to a G-code file.

    Parameters
    ----------
    config : CutterConfig
        Validated cutter configuration.
    workdir : str | Path | None
        Base for relative input/output paths.  ``None`` uses the
        current working directory.

    Returns
    -------
    ConversionResult
        Output location and cutting-move counts.

    Raises
    ------
    FoamcutError
        On any fatal condition (missing or malformed vector file,
        allocation failure, unwritable output).
    """
    base = Path.cwd() if workdir is None else Path(workdir)
    input_dir = resolve_path(base, config.files.input_directory)
    output_path = resolve_path(base, config.files.output_filename)
    output_name = config.files.output_filename

    with ExitStack() as stack:
        try:
            out = stack.enter_context(
                open(output_path, "w", encoding="ascii", newline="\n")
            )
        except OSError as exc:
            raise GCodeWriteError(output_name) from exc

        input_set = load_input_set(input_dir, config.coordinates.scalar, stack)
        consistent = check_consistency(input_set)

        summary = GCodeGenerator(config).write(input_set, out, output_name)

    logger.info(
        "Wrote %d cutting moves (%d upper, %d lower) to %s",
        summary.total_lines,
        summary.upper_lines,
        summary.lower_lines,
        output_path,
    )
    return ConversionResult(
        output_path=output_path,
        counts_consistent=consistent,
        upper_lines=summary.upper_lines,
        lower_lines=summary.lower_lines,
        stopped_early=summary.stopped_early,
    )
