"""
Foamcut Package.

Converts airfoil coordinate files into a single G-code program for a
4-axis CNC hot-wire foam cutter.  The root carriage drives X/Y and the
tip carriage drives U/V; both trace their cross-section in lock-step to
cut a lofted wing.

Subpackages:
    vectors: Input data model, file loader, count consistency check
    gcode: G-code generation from a loaded input set
    configs: Cutter configuration loading and validation
    scripts: Command-line entrypoint
    utils: Logging and filesystem helpers
"""

__version__ = "0.9.4"

__all__ = ["vectors", "gcode", "configs", "scripts", "utils"]
