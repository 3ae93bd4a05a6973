"""Fatal error types and operator-facing message text.

Every fatal condition raised by the converter derives from
:class:`FoamcutError`.  ``str(exc)`` is the bare message; the CLI prefixes
it with :data:`MESSAGE_ERROR` before logging.  Non-fatal conditions are
logged as warnings with the :data:`MESSAGE_WARNING` prefix and never
raised.

Message catalogue::

    * Oops -- Can't open ROOTUPPERX. Are all vector files present?
    * Oops -- Can't read ROOTUPPERX. The first line should be the 'Total Values'.
    * Oops -- Can't allocate memory for that many data points!
    * Oops -- Can't write to OUTPUT.txt. Is the file in-use or the disk full?
    * Note: You should ensure all vector files list the same number of data points
    * Note: You should check all vector files for the listed number of data points
"""

from __future__ import annotations

MESSAGE_ERROR = "* Oops -- Can't "
MESSAGE_WARNING = "* Note: You should "

WARNING_VECTOR_CONSISTENCY = (
    "ensure all vector files list the same number of data points"
)
WARNING_VECTOR_EOF = (
    "check all vector files for the listed number of data points"
)


class FoamcutError(Exception):
    """Base class for conditions that abort the conversion."""

    pass


class VectorOpenError(FoamcutError):
    """Raised when a vector file cannot be opened for reading."""

    def __init__(self, filename: str) -> None:
        self.filename = filename
        super().__init__(f"open {filename}. Are all vector files present?")


class VectorHeaderError(FoamcutError):
    """Raised when a vector file does not start with a positive count."""

    def __init__(self, filename: str) -> None:
        self.filename = filename
        super().__init__(
            f"read {filename}. The first line should be the 'Total Values'."
        )


class VectorAllocationError(FoamcutError):
    """Raised when sample storage for a vector cannot be allocated."""

    def __init__(self, filename: str | None = None) -> None:
        self.filename = filename
        super().__init__("allocate memory for that many data points!")


class GCodeWriteError(FoamcutError):
    """Raised when the G-code output cannot be opened or written."""

    def __init__(self, filename: str) -> None:
        self.filename = filename
        super().__init__(
            f"write to {filename}. Is the file in-use or the disk full?"
        )


def fatal_message(exc: BaseException) -> str:
    """Return the operator-facing text for a fatal error."""
    return f"{MESSAGE_ERROR}{exc}"


def warning_message(note: str) -> str:
    """Return the operator-facing text for a non-fatal note."""
    return f"{MESSAGE_WARNING}{note}"
