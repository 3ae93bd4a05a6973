"""
G-code generation module.

Converts a loaded vector input set to a 4-axis hot-wire G-code program
with the fixed initialise / wire-reset / knock-slew envelope.
"""

from foamcut.gcode.generator import EmitSummary, GCodeGenerator

__all__ = ["EmitSummary", "GCodeGenerator"]
