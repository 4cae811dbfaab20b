"""C type definitions for the CBLAS bindings.

Maps Python values to the C types of the reference CBLAS interface
(``cblas.h``, LP64: 32-bit integers). No external dependencies.
"""

import ctypes

import numpy as np

__all__ = [
    'c_real', 'c_blasint', 'c_ptr',
    'CBLAS_COL_MAJOR', 'CBLAS_NO_TRANS',
    'as_c_ptr',
]


# =============================================================================
# C Type Aliases
# =============================================================================

c_real = ctypes.c_double
c_blasint = ctypes.c_int
c_ptr = ctypes.c_void_p


# =============================================================================
# CBLAS Enumerations
# =============================================================================

CBLAS_COL_MAJOR = 102
CBLAS_NO_TRANS = 111


# =============================================================================
# Pointer Helpers
# =============================================================================

def as_c_ptr(buf: np.ndarray, offset: int = 0) -> int:
    """Address of ``buf[offset]`` for passing as a ``c_void_p`` argument.

    Args:
        buf: Contiguous numpy array.
        offset: Element offset into the buffer.

    Returns:
        Integer address.
    """
    return buf.ctypes.data + offset * buf.itemsize
