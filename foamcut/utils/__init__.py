"""Cross-cutting utilities (lowest dependency layer).

This package provides shared primitives for:
    - YAML loading and path resolution (fs)
    - Logging setup (logging_config)

No module in utils/ may import from upper layers (vectors, gcode, pipeline).

Convenience imports:
    from foamcut.utils import fs
    from foamcut.utils.logging_config import setup_logging, push_context
"""

from . import fs
from . import logging_config

from .logging_config import push_context, setup_logging

__all__ = [
    'fs',
    'logging_config',
    'setup_logging',
    'push_context',
]
