"""G-code generator -- vector input set to a 4-axis hot-wire program.

The root section drives the X/Y carriage and the tip section drives the
U/V carriage.  Each cutting move advances both carriages to the samples
at the same index, keeping the two sections synchronised::

    G1 F0.60 X<root x> Y<root y> U<tip x> V<tip y>

Program layout (fixed order, streamed without buffering):

    header       initialise, wire reset, knock slew
    upper half   one cutting move per index of TIPUPPERX
    transition   wire reset around the work area
    lower half   one cutting move per index of TIPLOWERX
    footer       wire reset, stop

The envelope text is byte-exact with the classic converter:

* The opening wire reset targets ``X=y_min U=x_min`` / ``Y=y_min V=x_min``.
* The first move of the transition and footer wire resets uses the
  configured move command (``G1``) instead of ``G0``, so the wire leaves
  the finished half along a feed move rather than a rapid.
* Numbers use the ``f`` presentation type, identical to C ``%f``
  (six decimals).  Samples arrive in single precision, so cutting moves
  match the classic output digit for digit.
* ``M30`` ends the program without a trailing newline.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from io import StringIO
from typing import Iterator, TextIO

from foamcut.configs.loader import CutterConfig
from foamcut.errors import GCodeWriteError, WARNING_VECTOR_EOF, warning_message
from foamcut.vectors.model import Dimension, Half, InputSet, Side

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

HEADER_TEMPLATE = (
    "(Initialize)\n"
    "G20\n"
    "G90\n"
    "\n"
    "(Wire reset)\n"
    "G0 X{y_min:f} U{x_min:f}\n"
    "G0 Y{y_min:f} V{x_min:f}\n"
    "\n"
    "(Knock slew)\n"
    "G0 X{x_max:f} U{u_max:f}\n"
    "G0 Y{y_max:f} V{v_max:f}\n"
    "G0 X{x_min:f} U{u_min:f}\n"
    "G0 Y{y_min:f} V{v_min:f}\n"
    "\n"
    "(Begin airfoil upper half)\n"
)

WIRE_RESET_TEMPLATE = (
    "(Wire reset)\n"
    "{move} X{x_max:f} U{u_max:f}\n"
    "G0 Y{y_max:f} V{v_max:f}\n"
    "G0 X{x_min:f} U{u_min:f}\n"
    "G0 Y{y_min:f} V{v_min:f}\n"
)

TRANSITION_TEMPLATE = (
    "(End airfoil upper half)\n"
    "\n"
    + WIRE_RESET_TEMPLATE
    + "\n"
    "(Begin airfoil lower half)\n"
)

FOOTER_TEMPLATE = (
    "(End airfoil lower half)\n"
    "\n"
    + WIRE_RESET_TEMPLATE
    + "\n"
    "(Stop)\n"
    "M30"
)

CUTTING_LINE_TEMPLATE = "{move} {feed} X{rx:f} Y{ry:f} U{tx:f} V{ty:f}\n"


@dataclass(frozen=True)
class EmitSummary:
    """Result of one :meth:`GCodeGenerator.write` call."""

    upper_lines: int
    lower_lines: int
    stopped_early: bool = False

    @property
    def total_lines(self) -> int:
        return self.upper_lines + self.lower_lines


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class GCodeGenerator:
    """Render a vector input set as hot-wire G-code.

    Parameters
    ----------
    config : CutterConfig
        Validated cutter configuration (limits, feedrate, move command).

    Notes
    -----
    The generator trusts the input set: it does not re-check count
    consistency.  Each half is bounded by the declared count of the tip
    X vector for that half.  If any of the four vectors used by a half
    has fewer samples than the index being emitted, that half stops at
    the last complete index.
    """

    def __init__(self, config: CutterConfig) -> None:
        self._cfg = config
        wa = config.work_area
        self._limits = {
            "x_min": wa.x_min,
            "x_max": wa.x_max,
            "y_min": wa.y_min,
            "y_max": wa.y_max,
            "u_min": wa.u_min,
            "u_max": wa.u_max,
            "v_min": wa.v_min,
            "v_max": wa.v_max,
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def generate(self, input_set: InputSet) -> str:
        """Render the complete program into a string.

        Parameters
        ----------
        input_set : InputSet
            Loaded, scaled vectors.

        Returns
        -------
        str
            Complete G-code program, header through ``M30``.
        """
        buf = StringIO()
        self.write(input_set, buf, "<memory>")
        return buf.getvalue()

    def write(
        self,
        input_set: InputSet,
        out: TextIO,
        output_name: str,
    ) -> EmitSummary:
        """Stream the complete program to *out* and flush it.

        Parameters
        ----------
        input_set : InputSet
            Loaded, scaled vectors.
        out : TextIO
            Open text handle; written in phase order.
        output_name : str
            Name used in the error message if a write fails.

        Returns
        -------
        EmitSummary
            Cutting lines written per half.

        Raises
        ------
        GCodeWriteError
            If any write or the final flush fails, or the text cannot
            be encoded for *out*.
        """
        try:
            out.write(self.header())
            upper, upper_short = self._write_half(input_set, Half.UPPER, out)
            out.write(self.transition())
            lower, lower_short = self._write_half(input_set, Half.LOWER, out)
            out.write(self.footer())
            out.flush()
        except (OSError, UnicodeEncodeError) as exc:
            raise GCodeWriteError(output_name) from exc

        return EmitSummary(
            upper_lines=upper,
            lower_lines=lower,
            stopped_early=upper_short or lower_short,
        )

    def header(self) -> str:
        """Initialisation, opening wire reset and knock slew."""
        return HEADER_TEMPLATE.format(**self._limits)

    def transition(self) -> str:
        """Wire reset between the upper and lower halves."""
        return TRANSITION_TEMPLATE.format(
            move=self._cfg.gcode.move_command, **self._limits
        )

    def footer(self) -> str:
        """Closing wire reset and program end."""
        return FOOTER_TEMPLATE.format(
            move=self._cfg.gcode.move_command, **self._limits
        )

    def cutting_line(self, rx: float, ry: float, tx: float, ty: float) -> str:
        """One synchronised root/tip feed move."""
        return CUTTING_LINE_TEMPLATE.format(
            move=self._cfg.gcode.move_command,
            feed=self._cfg.gcode.feedrate,
            rx=rx,
            ry=ry,
            tx=tx,
            ty=ty,
        )

    def cutting_lines(self, input_set: InputSet, half: Half) -> Iterator[str]:
        """Yield the cutting moves for one half in ascending index order.

        Stops early, with one warning, when a vector is shorter than the
        loop bound and that shortfall was not already reported while
        loading.
        """
        root_x = input_set.get_vector(Side.ROOT, half, Dimension.X)
        root_y = input_set.get_vector(Side.ROOT, half, Dimension.Y)
        tip_x = input_set.get_vector(Side.TIP, half, Dimension.X)
        tip_y = input_set.get_vector(Side.TIP, half, Dimension.Y)
        vectors = (root_x, root_y, tip_x, tip_y)

        bound = tip_x.declared_count
        available = min(len(v) for v in vectors)

        for i in range(min(bound, available)):
            yield self.cutting_line(
                float(root_x.samples[i]),
                float(root_y.samples[i]),
                float(tip_x.samples[i]),
                float(tip_y.samples[i]),
            )

        if available < bound:
            short = [v for v in vectors if len(v) == available]
            logger.debug(
                "%s half stopped at %d of %d moves (short: %s)",
                half.value.lower(),
                available,
                bound,
                ", ".join(v.source_name for v in short),
            )
            if not any(v.truncated for v in short):
                logger.warning(warning_message(WARNING_VECTOR_EOF))

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _write_half(
        self, input_set: InputSet, half: Half, out: TextIO,
    ) -> tuple[int, bool]:
        bound = input_set.get_vector(Side.TIP, half, Dimension.X).declared_count
        written = 0
        for line in self.cutting_lines(input_set, half):
            out.write(line)
            written += 1
        return written, written < bound
