"""
Error handling for dmat.

Every failure raised by the matrix engine is a ``DMatError`` carrying a
numeric code from the table below. The concrete subclasses also derive from
the matching builtin exception so callers can catch ``ValueError`` or
``IndexError`` without importing dmat.
"""

from __future__ import annotations

from typing import Optional


# =============================================================================
# Error Codes
# =============================================================================

# Success
DMAT_OK = 0

# General errors (1-9)
DMAT_ERROR_UNKNOWN = 1
DMAT_ERROR_INTERNAL = 2

# Argument errors (10-19)
DMAT_ERROR_INVALID_ARGUMENT = 10
DMAT_ERROR_DIMENSION_MISMATCH = 11
DMAT_ERROR_INDEX_OUT_OF_BOUNDS = 14

# Type errors (20-29)
DMAT_ERROR_TYPE_MISMATCH = 21

# Format errors (30-39)
DMAT_ERROR_READ_ERROR = 33

# Kernel errors (40-49)
DMAT_ERROR_KERNEL_FAILURE = 40
DMAT_ERROR_LIBRARY_NOT_FOUND = 41


_ERROR_MESSAGES = {
    DMAT_OK: "Success",
    DMAT_ERROR_UNKNOWN: "Unknown error",
    DMAT_ERROR_INTERNAL: "Internal error",
    DMAT_ERROR_INVALID_ARGUMENT: "Invalid argument",
    DMAT_ERROR_DIMENSION_MISMATCH: "Dimension mismatch",
    DMAT_ERROR_INDEX_OUT_OF_BOUNDS: "Index out of bounds",
    DMAT_ERROR_TYPE_MISMATCH: "Type mismatch",
    DMAT_ERROR_READ_ERROR: "Read error",
    DMAT_ERROR_KERNEL_FAILURE: "Kernel failure",
    DMAT_ERROR_LIBRARY_NOT_FOUND: "Library not found",
}


# =============================================================================
# Exception Classes
# =============================================================================

class DMatError(Exception):
    """
    Base exception for all dmat errors.

    Attributes:
        code: Numeric error code (one of the ``DMAT_ERROR_*`` constants)
        message: Human readable description
    """

    default_code = DMAT_ERROR_UNKNOWN

    def __init__(self, message: Optional[str] = None, code: Optional[int] = None):
        if code is None:
            code = self.default_code
        self.code = code
        if message is None:
            message = _ERROR_MESSAGES.get(code, f"Unknown error (code={code})")
        self.message = message
        super().__init__(message)

    @classmethod
    def from_code(cls, code: int, context: str = "") -> "DMatError":
        """Create exception from error code with optional context."""
        base_msg = _ERROR_MESSAGES.get(code, "Unknown error")
        msg = f"{context}: {base_msg}" if context else base_msg
        return cls(msg, code)


class ShapeMismatchError(DMatError, ValueError):
    """Operands have incompatible rows, columns or length."""

    default_code = DMAT_ERROR_DIMENSION_MISMATCH


class BoundsError(DMatError, IndexError):
    """Index outside ``[0, length)``, ``[0, rows)`` or ``[0, columns)``."""

    default_code = DMAT_ERROR_INDEX_OUT_OF_BOUNDS


class FormatError(DMatError, ValueError):
    """Malformed persisted or textual matrix input."""

    default_code = DMAT_ERROR_READ_ERROR


class KernelError(DMatError, RuntimeError):
    """A kernel backend reported a failure."""

    default_code = DMAT_ERROR_KERNEL_FAILURE


class LibraryNotFoundError(DMatError):
    """Raised when a CBLAS shared library cannot be found or loaded."""

    default_code = DMAT_ERROR_LIBRARY_NOT_FOUND


# Name used throughout the arithmetic docs
SizeError = ShapeMismatchError

