"""Kernel backed by ``scipy.linalg.blas``.

The Fortran BLAS shipped with scipy works on column-major data natively, so
matrix buffers are handed over as Fortran-ordered views without copying.
Routines that return their output array are written back when f2py had to
copy instead of updating in place.
"""

import numpy as np
from scipy.linalg import blas as fblas

from .base import Kernel

__all__ = ['BlasKernel']


def _colmajor(buf: np.ndarray, m: int, n: int) -> np.ndarray:
    return buf[:m * n].reshape((m, n), order='F')


def _store(target: np.ndarray, result: np.ndarray) -> None:
    if result is not target:
        target[...] = result


class BlasKernel(Kernel):
    """Kernel using scipy's BLAS wrappers (double precision routines)."""

    name = "blas"

    def _copy(self, n, x, offx, incx, y, offy, incy):
        if x is y or np.shares_memory(x, y):
            # BLAS copy is undefined for overlapping operands
            x = x.copy()
        out = fblas.dcopy(x, y, n=n, offx=offx, incx=incx, offy=offy, incy=incy)
        _store(y, out)

    def _scale(self, n, alpha, x, offx, incx):
        out = fblas.dscal(alpha, x, n=n, offx=offx, incx=incx)
        _store(x, out)

    def _swap(self, n, x, offx, incx, y, offy, incy):
        # x and y may be the same buffer (row/column swaps); the strided
        # regions never share an element unless they are identical
        out_x, out_y = fblas.dswap(x, y, n=n, offx=offx, incx=incx, offy=offy, incy=incy)
        _store(x, out_x)
        _store(y, out_y)

    def _axpy(self, n, alpha, x, offx, incx, y, offy, incy):
        if x is y or np.shares_memory(x, y):
            x = x.copy()
        out = fblas.daxpy(x, y, n=n, a=alpha, offx=offx, incx=incx, offy=offy, incy=incy)
        _store(y, out)

    def _dot(self, n, x, offx, incx, y, offy, incy):
        return fblas.ddot(x, y, n=n, offx=offx, incx=incx, offy=offy, incy=incy)

    def _gemv(self, alpha, a, m, n, x, beta, y):
        target = y[:m]
        out = fblas.dgemv(alpha, _colmajor(a, m, n), x[:n], beta=beta, y=target, overwrite_y=1)
        _store(target, out)

    def _gemm(self, alpha, a, b, m, n, k, beta, c):
        target = _colmajor(c, m, n)
        out = fblas.dgemm(alpha, _colmajor(a, m, k), _colmajor(b, k, n),
                          beta=beta, c=target, overwrite_c=1)
        _store(target, out)

    def _ger(self, alpha, x, y, a, m, n):
        target = _colmajor(a, m, n)
        out = fblas.dger(alpha, x[:m], y[:n], a=target, overwrite_x=0, overwrite_y=0, overwrite_a=1)
        _store(target, out)
