"""
CBLAS Kernel

Low-level ctypes bindings to a CBLAS shared library (reference CBLAS,
OpenBLAS, ...). Matrices are passed in column-major order with leading
dimension equal to their row count.
"""

import ctypes
from typing import Optional

import numpy as np

from .base import Kernel
from .lib_loader import get_lib
from .types import (
    CBLAS_COL_MAJOR,
    CBLAS_NO_TRANS,
    as_c_ptr,
    c_blasint,
    c_ptr,
    c_real,
)

__all__ = ['CBlasKernel']


# =============================================================================
# Function Signatures
# =============================================================================

def _init_signatures(lib: ctypes.CDLL) -> None:
    """Initialize C function signatures."""

    lib.cblas_dcopy.argtypes = [c_blasint, c_ptr, c_blasint, c_ptr, c_blasint]
    lib.cblas_dcopy.restype = None

    lib.cblas_dscal.argtypes = [c_blasint, c_real, c_ptr, c_blasint]
    lib.cblas_dscal.restype = None

    lib.cblas_dswap.argtypes = [c_blasint, c_ptr, c_blasint, c_ptr, c_blasint]
    lib.cblas_dswap.restype = None

    lib.cblas_daxpy.argtypes = [c_blasint, c_real, c_ptr, c_blasint, c_ptr, c_blasint]
    lib.cblas_daxpy.restype = None

    lib.cblas_ddot.argtypes = [c_blasint, c_ptr, c_blasint, c_ptr, c_blasint]
    lib.cblas_ddot.restype = c_real

    lib.cblas_dgemv.argtypes = [
        ctypes.c_int,   # order
        ctypes.c_int,   # trans
        c_blasint,      # M
        c_blasint,      # N
        c_real,         # alpha
        c_ptr,          # A
        c_blasint,      # lda
        c_ptr,          # X
        c_blasint,      # incX
        c_real,         # beta
        c_ptr,          # Y
        c_blasint,      # incY
    ]
    lib.cblas_dgemv.restype = None

    lib.cblas_dgemm.argtypes = [
        ctypes.c_int,   # order
        ctypes.c_int,   # transA
        ctypes.c_int,   # transB
        c_blasint,      # M
        c_blasint,      # N
        c_blasint,      # K
        c_real,         # alpha
        c_ptr,          # A
        c_blasint,      # lda
        c_ptr,          # B
        c_blasint,      # ldb
        c_real,         # beta
        c_ptr,          # C
        c_blasint,      # ldc
    ]
    lib.cblas_dgemm.restype = None

    lib.cblas_dger.argtypes = [
        ctypes.c_int,   # order
        c_blasint,      # M
        c_blasint,      # N
        c_real,         # alpha
        c_ptr,          # X
        c_blasint,      # incX
        c_ptr,          # Y
        c_blasint,      # incY
        c_ptr,          # A
        c_blasint,      # lda
    ]
    lib.cblas_dger.restype = None


# =============================================================================
# Kernel
# =============================================================================

class CBlasKernel(Kernel):
    """Kernel calling a CBLAS shared library through ctypes.

    Args:
        path: Optional library file or directory; defaults to
            ``DMAT_BLAS_LIBRARY`` and then the system search path.

    Raises:
        LibraryNotFoundError: If no CBLAS library can be loaded.
    """

    name = "cblas"

    def __init__(self, path: Optional[str] = None):
        self._lib = get_lib(path)
        _init_signatures(self._lib)

    def _copy(self, n, x, offx, incx, y, offy, incy):
        if x is y or np.shares_memory(x, y):
            x = x.copy()
        self._lib.cblas_dcopy(n, as_c_ptr(x, offx), incx, as_c_ptr(y, offy), incy)

    def _scale(self, n, alpha, x, offx, incx):
        self._lib.cblas_dscal(n, alpha, as_c_ptr(x, offx), incx)

    def _swap(self, n, x, offx, incx, y, offy, incy):
        self._lib.cblas_dswap(n, as_c_ptr(x, offx), incx, as_c_ptr(y, offy), incy)

    def _axpy(self, n, alpha, x, offx, incx, y, offy, incy):
        if x is y or np.shares_memory(x, y):
            x = x.copy()
        self._lib.cblas_daxpy(n, alpha, as_c_ptr(x, offx), incx, as_c_ptr(y, offy), incy)

    def _dot(self, n, x, offx, incx, y, offy, incy):
        return self._lib.cblas_ddot(n, as_c_ptr(x, offx), incx, as_c_ptr(y, offy), incy)

    def _gemv(self, alpha, a, m, n, x, beta, y):
        self._lib.cblas_dgemv(
            CBLAS_COL_MAJOR, CBLAS_NO_TRANS,
            m, n, alpha,
            as_c_ptr(a), max(1, m),
            as_c_ptr(x), 1,
            beta,
            as_c_ptr(y), 1,
        )

    def _gemm(self, alpha, a, b, m, n, k, beta, c):
        self._lib.cblas_dgemm(
            CBLAS_COL_MAJOR, CBLAS_NO_TRANS, CBLAS_NO_TRANS,
            m, n, k, alpha,
            as_c_ptr(a), max(1, m),
            as_c_ptr(b), max(1, k),
            beta,
            as_c_ptr(c), max(1, m),
        )

    def _ger(self, alpha, x, y, a, m, n):
        self._lib.cblas_dger(
            CBLAS_COL_MAJOR,
            m, n, alpha,
            as_c_ptr(x), 1,
            as_c_ptr(y), 1,
            as_c_ptr(a), max(1, m),
        )
