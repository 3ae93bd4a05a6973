"""Tests for the hot-wire G-code generator.

Validates the byte-exact program envelope, cutting-move format and
ordering, the per-half loop bound, safe-stop on short vectors, and
write-error mapping.
"""

from __future__ import annotations

import dataclasses
import io
import logging
import re

import numpy as np
import pytest

from foamcut.configs.loader import CutterConfig
from foamcut.errors import GCodeWriteError, WARNING_VECTOR_EOF
from foamcut.gcode.generator import EmitSummary, GCodeGenerator
from foamcut.vectors.model import VECTOR_KEYS, Half, InputSet, Vector

SCALAR = 5.0

HEADER = (
    "(Initialize)\n"
    "G20\n"
    "G90\n"
    "\n"
    "(Wire reset)\n"
    "G0 X-12.000000 U-12.000000\n"
    "G0 Y-12.000000 V-12.000000\n"
    "\n"
    "(Knock slew)\n"
    "G0 X12.000000 U12.000000\n"
    "G0 Y12.000000 V12.000000\n"
    "G0 X-12.000000 U-12.000000\n"
    "G0 Y-12.000000 V-12.000000\n"
    "\n"
    "(Begin airfoil upper half)\n"
)

TRANSITION = (
    "(End airfoil upper half)\n"
    "\n"
    "(Wire reset)\n"
    "G1 X12.000000 U12.000000\n"
    "G0 Y12.000000 V12.000000\n"
    "G0 X-12.000000 U-12.000000\n"
    "G0 Y-12.000000 V-12.000000\n"
    "\n"
    "(Begin airfoil lower half)\n"
)

FOOTER = (
    "(End airfoil lower half)\n"
    "\n"
    "(Wire reset)\n"
    "G1 X12.000000 U12.000000\n"
    "G0 Y12.000000 V12.000000\n"
    "G0 X-12.000000 U-12.000000\n"
    "G0 Y-12.000000 V-12.000000\n"
    "\n"
    "(Stop)\n"
    "M30"
)

CUT_RE = re.compile(
    r"^G1 F0\.60 X(-?\d+\.\d{6}) Y(-?\d+\.\d{6}) "
    r"U(-?\d+\.\d{6}) V(-?\d+\.\d{6})$"
)

HEADER_LINES = HEADER.count("\n")


def make_input_set(
    raw: dict[str, list[float]] | None = None,
    counts: dict[str, int] | None = None,
    default: list[float] | None = None,
) -> InputSet:
    """Build an input set from unscaled samples keyed by file name."""
    raw = raw or {}
    counts = counts or {}
    default = [0.0] if default is None else default
    vectors = {}
    for key in VECTOR_KEYS:
        values = raw.get(key.filename, default)
        vectors[key] = Vector(
            declared_count=counts.get(key.filename, len(values)),
            samples=np.asarray(values, dtype=np.float64) * SCALAR,
            source_name=key.filename,
        )
    return InputSet(vectors)


def _eof_warnings(caplog) -> list[logging.LogRecord]:
    return [
        r for r in caplog.records
        if r.levelno == logging.WARNING and WARNING_VECTOR_EOF in r.getMessage()
    ]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def gen(config: CutterConfig) -> GCodeGenerator:
    return GCodeGenerator(config)


# ---------------------------------------------------------------------------
# Envelope
# ---------------------------------------------------------------------------


class TestEnvelope:
    def test_header_exact(self, gen: GCodeGenerator) -> None:
        assert gen.header() == HEADER

    def test_transition_exact(self, gen: GCodeGenerator) -> None:
        assert gen.transition() == TRANSITION

    def test_footer_exact(self, gen: GCodeGenerator) -> None:
        assert gen.footer() == FOOTER

    def test_single_sample_program_exact(self, gen: GCodeGenerator) -> None:
        line = "G1 F0.60 X0.000000 Y0.000000 U0.000000 V0.000000\n"
        expected = HEADER + line + TRANSITION + line + FOOTER
        assert gen.generate(make_input_set()) == expected

    def test_no_trailing_newline(self, gen: GCodeGenerator) -> None:
        gcode = gen.generate(make_input_set())
        assert gcode.endswith("(Stop)\nM30")

    def test_header_wire_reset_uses_y_min_then_x_min(
        self, config: CutterConfig,
    ) -> None:
        wa = dataclasses.replace(config.work_area, x_min=-10.0, y_min=-20.0)
        gen = GCodeGenerator(dataclasses.replace(config, work_area=wa))
        header = gen.header()
        assert "(Wire reset)\nG0 X-20.000000 U-10.000000\n" \
               "G0 Y-20.000000 V-10.000000\n" in header
        assert "G0 X-10.000000 U-10.000000\nG0 Y-20.000000 V-20.000000\n" \
               "\n(Begin airfoil upper half)\n" in header

    def test_move_command_configurable(self, config: CutterConfig) -> None:
        gc = dataclasses.replace(config.gcode, move_command="G0")
        gen = GCodeGenerator(dataclasses.replace(config, gcode=gc))
        assert "G0 X12.000000 U12.000000" in gen.transition()
        assert gen.cutting_line(0.0, 0.0, 0.0, 0.0).startswith("G0 F0.60 ")

    def test_header_uses_g0_only(self, gen: GCodeGenerator) -> None:
        moves = [l for l in gen.header().splitlines() if l.startswith("G")]
        assert moves[:2] == ["G20", "G90"]
        assert all(m.startswith("G0 ") for m in moves[2:])


# ---------------------------------------------------------------------------
# Cutting moves
# ---------------------------------------------------------------------------


class TestCuttingLines:
    def test_line_format(self, gen: GCodeGenerator) -> None:
        assert gen.cutting_line(2.5, -0.125, 1.0, 0.0) == (
            "G1 F0.60 X2.500000 Y-0.125000 U1.000000 V0.000000\n"
        )

    def test_f_format_rounds_to_six_places(self, gen: GCodeGenerator) -> None:
        line = gen.cutting_line(1 / 3, 2 / 3, 1e-7, -1e-7)
        assert line == "G1 F0.60 X0.333333 Y0.666667 U0.000000 V-0.000000\n"

    def test_every_cut_matches_pattern(self, gen: GCodeGenerator) -> None:
        values = [0.0, 0.1, -0.2, 0.35]
        lines = gen.generate(make_input_set(default=values)).splitlines()
        cuts = [l for l in lines if l.startswith("G1 F")]
        assert len(cuts) == 8
        assert all(CUT_RE.match(c) for c in cuts)

    def test_upper_then_lower_order(self, gen: GCodeGenerator) -> None:
        raw = {
            "ROOTUPPERX": [0.0, 0.1],
            "ROOTUPPERY": [0.01, 0.02],
            "TIPUPPERX": [0.2, 0.3],
            "TIPUPPERY": [0.03, 0.04],
            "ROOTLOWERX": [1.0, 1.1],
            "ROOTLOWERY": [-0.01, -0.02],
            "TIPLOWERX": [1.2, 1.3],
            "TIPLOWERY": [-0.03, -0.04],
        }
        lines = gen.generate(make_input_set(raw)).splitlines()
        assert lines[HEADER_LINES] == (
            "G1 F0.60 X0.000000 Y0.050000 U1.000000 V0.150000"
        )
        assert lines[HEADER_LINES + 1] == (
            "G1 F0.60 X0.500000 Y0.100000 U1.500000 V0.200000"
        )
        begin_lower = lines.index("(Begin airfoil lower half)")
        assert lines[begin_lower + 1] == (
            "G1 F0.60 X5.000000 Y-0.050000 U6.000000 V-0.150000"
        )
        assert lines[begin_lower + 2] == (
            "G1 F0.60 X5.500000 Y-0.100000 U6.500000 V-0.200000"
        )

    def test_values_round_trip(self, gen: GCodeGenerator) -> None:
        values = [0.0, 0.0125, 0.5, -0.0375, 0.999999]
        lines = gen.generate(make_input_set(default=values)).splitlines()
        cuts = [CUT_RE.match(l) for l in lines if l.startswith("G1 F")]
        upper = cuts[: len(values)]
        for match, expected in zip(upper, values):
            for group in match.groups():
                assert abs(float(group) / SCALAR - expected) <= 1e-5

    def test_bound_is_tip_x_declared_count(self, gen: GCodeGenerator) -> None:
        input_set = make_input_set(
            default=[0.0, 0.1, 0.2],
            raw={"TIPUPPERX": [0.0, 0.1]},
        )
        lines = list(gen.cutting_lines(input_set, Half.UPPER))
        assert len(lines) == 2
        assert len(list(gen.cutting_lines(input_set, Half.LOWER))) == 3


# ---------------------------------------------------------------------------
# Safe stop
# ---------------------------------------------------------------------------


class TestSafeStop:
    def test_truncated_vector_stops_without_new_warning(
        self, gen: GCodeGenerator, caplog,
    ) -> None:
        input_set = make_input_set(
            default=[0.0] * 10,
            raw={"TIPUPPERY": [0.0] * 7},
            counts={"TIPUPPERY": 10},
        )
        out = io.StringIO()
        summary = gen.write(input_set, out, "OUTPUT.txt")
        assert summary == EmitSummary(
            upper_lines=7, lower_lines=10, stopped_early=True,
        )
        assert _eof_warnings(caplog) == []
        assert out.getvalue().endswith("M30")

    def test_undeclared_shortfall_warns_once(
        self, gen: GCodeGenerator, caplog,
    ) -> None:
        input_set = make_input_set(
            default=[0.0] * 3,
            raw={"TIPUPPERX": [0.0] * 5},
        )
        summary = gen.write(input_set, io.StringIO(), "OUTPUT.txt")
        assert summary.upper_lines == 3
        assert summary.lower_lines == 3
        assert summary.stopped_early
        assert len(_eof_warnings(caplog)) == 1

    def test_complete_input_not_stopped(self, gen: GCodeGenerator) -> None:
        summary = gen.write(make_input_set(default=[0.0, 1.0]),
                            io.StringIO(), "OUTPUT.txt")
        assert summary.total_lines == 4
        assert not summary.stopped_early

    def test_surplus_samples_ignored(self, gen: GCodeGenerator) -> None:
        input_set = make_input_set(
            default=[0.0] * 4,
            raw={"TIPLOWERX": [0.0, 0.0]},
        )
        summary = gen.write(input_set, io.StringIO(), "OUTPUT.txt")
        assert summary.lower_lines == 2
        assert not summary.stopped_early


# ---------------------------------------------------------------------------
# Write errors
# ---------------------------------------------------------------------------


class _FailingStream(io.StringIO):
    def __init__(self, fail_after: int) -> None:
        super().__init__()
        self._remaining = fail_after

    def write(self, s: str) -> int:
        if self._remaining == 0:
            raise OSError(28, "No space left on device")
        self._remaining -= 1
        return super().write(s)


class TestWriteErrors:
    @pytest.mark.parametrize("fail_after", [0, 1, 3])
    def test_write_failure_mapped(
        self, gen: GCodeGenerator, fail_after: int,
    ) -> None:
        with pytest.raises(GCodeWriteError) as exc_info:
            gen.write(make_input_set(), _FailingStream(fail_after),
                      "OUTPUT.txt")
        assert exc_info.value.filename == "OUTPUT.txt"
        assert isinstance(exc_info.value.__cause__, OSError)
        assert "disk full" in str(exc_info.value)

    def test_unencodable_text_mapped(self, config: CutterConfig) -> None:
        gc = dataclasses.replace(config.gcode, feedrate="F\u0660.60")
        gen = GCodeGenerator(dataclasses.replace(config, gcode=gc))
        out = io.TextIOWrapper(io.BytesIO(), encoding="ascii")
        with pytest.raises(GCodeWriteError) as exc_info:
            gen.write(make_input_set(), out, "OUTPUT.txt")
        assert isinstance(exc_info.value.__cause__, UnicodeEncodeError)
