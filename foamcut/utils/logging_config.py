"""Logging configuration for the converter entrypoints.

Two destinations:
    - Console (stderr): the bare message, so operator notes and errors
      start with their fixed ``* Note:`` / ``* Oops --`` marker
    - Optional log file: timestamped lines with contextual fields
      (app, profile), human-readable or JSON

Public API:
    setup_logging(log_level="WARNING", context={"app": "foamcut"})
    push_context(profile="cutter.yaml")
    pop_context(keys=["profile"])

Format examples:
    Console: * Note: You should ensure all vector files list ...
    File:    2026-10-17T13:45:12.345Z | WARNING  | app=foamcut | * Note: ...
    JSON:    {"t":"2026-10-17T13:45:12.345+00:00","lvl":"WARNING","app":"foamcut","msg":"..."}

Context uses contextvars for thread isolation.
Idempotent: repeated setup_logging() calls don't duplicate handlers.
"""

import contextvars
import json
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from .fs import ensure_dir


# Context variable for per-thread contextual fields
_context_var = contextvars.ContextVar('logging_context', default={})

# Handlers installed by setup_logging (idempotency)
_installed_handlers: List[logging.Handler] = []

_LEVEL_COLORS = {
    'DEBUG': '\033[36m',
    'INFO': '\033[32m',
    'WARNING': '\033[33m',
    'ERROR': '\033[31m',
    'CRITICAL': '\033[35m',
}
_RESET = '\033[0m'


class ContextFormatter(logging.Formatter):
    """Formatter with three modes.

    ``"plain"``
        Message only; coloured by level when writing to a TTY.
    ``"human"``
        ``<UTC timestamp> | LEVEL | key=value | message``.
    ``"json"``
        One JSON object per record, context fields merged in.
    """

    def __init__(self, fmt_mode: str = "plain", use_color: bool = False):
        super().__init__()
        if fmt_mode not in ("plain", "human", "json"):
            raise ValueError(f"Unknown format mode: {fmt_mode}")
        self.fmt_mode = fmt_mode
        self.use_color = use_color and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        if self.fmt_mode == "plain":
            return self._format_plain(record)

        context = _context_var.get({})
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        if self.fmt_mode == "json":
            return self._format_json(record, ts, context)
        return self._format_human(record, ts, context)

    def _format_plain(self, record: logging.LogRecord) -> str:
        line = record.getMessage()
        if self.use_color:
            line = f"{_LEVEL_COLORS.get(record.levelname, '')}{line}{_RESET}"
        if record.exc_info:
            line += '\n' + self.formatException(record.exc_info)
        return line

    def _format_json(
        self,
        record: logging.LogRecord,
        ts: datetime,
        context: dict
    ) -> str:
        log_dict = {
            't': ts.isoformat(),
            'lvl': record.levelname,
            'name': record.name,
            'pid': os.getpid(),
            'msg': record.getMessage()
        }
        log_dict.update(context)

        if record.exc_info:
            log_dict['exc'] = self.formatException(record.exc_info)

        return json.dumps(log_dict)

    def _format_human(
        self,
        record: logging.LogRecord,
        ts: datetime,
        context: dict
    ) -> str:
        ts_str = ts.strftime('%Y-%m-%dT%H:%M:%S.%f')[:-3] + 'Z'
        parts = [ts_str, '|', f"{record.levelname:8s}", '|']

        context_str = ' '.join(f"{k}={v}" for k, v in context.items())
        if context_str:
            parts.extend([context_str, '|'])
        parts.append(record.getMessage())

        line = ' '.join(parts)
        if record.exc_info:
            line += '\n' + self.formatException(record.exc_info)
        return line


def setup_logging(
    log_level: str = "WARNING",
    log_file: Optional[str] = None,
    *,
    json: bool = False,
    color: bool = True,
    context: Optional[Dict[str, Any]] = None,
) -> List[logging.Handler]:
    """Configure root logger (idempotent).

    Parameters
    ----------
    log_level : str
        Logging level: "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"
    log_file : str, optional
        Log file path; parent directories are created.  None for no file
    json : bool
        Write the log file as JSON lines instead of human-readable text
    color : bool
        Colour console messages by level when stderr is a TTY
    context : dict, optional
        Contextual fields added to file records (e.g. {"app": "foamcut"})

    Returns
    -------
    list[logging.Handler]
        Handlers attached to the root logger

    Notes
    -----
    Repeated calls replace the handlers installed by the previous call
    and leave handlers added by other code (e.g. pytest) untouched.
    """
    root = logging.getLogger()

    for handler in _installed_handlers:
        root.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    root.setLevel(getattr(logging, log_level.upper()))

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(ContextFormatter("plain", use_color=color))
    root.addHandler(console_handler)
    _installed_handlers.append(console_handler)

    if log_file:
        ensure_dir(Path(log_file).parent)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(
            ContextFormatter("json" if json else "human")
        )
        root.addHandler(file_handler)
        _installed_handlers.append(file_handler)

    if context:
        push_context(**context)

    return list(_installed_handlers)


def push_context(**kwargs) -> None:
    """Add contextual fields to all subsequent log records.

    Examples
    --------
    >>> push_context(app="foamcut")
    >>> logger.warning("...")  # file: "... | app=foamcut | ..."
    """
    current = _context_var.get({})
    _context_var.set({**current, **kwargs})


def pop_context(keys: Optional[List[str]] = None) -> None:
    """Remove contextual fields; all of them when *keys* is None."""
    if keys is None:
        _context_var.set({})
    else:
        current = dict(_context_var.get({}))
        for key in keys:
            current.pop(key, None)
        _context_var.set(current)
