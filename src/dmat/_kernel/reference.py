"""Reference kernel built on numpy strided views.

Used for small or diagnostic builds where no BLAS is wanted. Results match
the BLAS backends up to floating point reassociation in the products.
"""

import numpy as np

from .base import Kernel

__all__ = ['ReferenceKernel']


def _strided(buf: np.ndarray, offset: int, stride: int, n: int) -> np.ndarray:
    return buf[offset:offset + (n - 1) * stride + 1:stride]


def _colmajor(buf: np.ndarray, m: int, n: int) -> np.ndarray:
    return buf[:m * n].reshape((m, n), order='F')


class ReferenceKernel(Kernel):
    """Kernel implemented with numpy array operations."""

    name = "reference"

    def _copy(self, n, x, offx, incx, y, offy, incy):
        # numpy buffers overlapping source and destination
        _strided(y, offy, incy, n)[...] = _strided(x, offx, incx, n)

    def _scale(self, n, alpha, x, offx, incx):
        _strided(x, offx, incx, n)[...] *= alpha

    def _swap(self, n, x, offx, incx, y, offy, incy):
        xs = _strided(x, offx, incx, n)
        ys = _strided(y, offy, incy, n)
        tmp = xs.copy()
        xs[...] = ys
        ys[...] = tmp

    def _axpy(self, n, alpha, x, offx, incx, y, offy, incy):
        _strided(y, offy, incy, n)[...] += alpha * _strided(x, offx, incx, n)

    def _dot(self, n, x, offx, incx, y, offy, incy):
        return np.dot(_strided(x, offx, incx, n), _strided(y, offy, incy, n))

    def _gemv(self, alpha, a, m, n, x, beta, y):
        prod = alpha * (_colmajor(a, m, n) @ x[:n])
        if beta == 0.0:
            y[:m] = prod
        else:
            y[:m] = prod + beta * y[:m]

    def _gemm(self, alpha, a, b, m, n, k, beta, c):
        prod = alpha * (_colmajor(a, m, k) @ _colmajor(b, k, n))
        out = _colmajor(c, m, n)
        if beta == 0.0:
            out[...] = prod
        else:
            out[...] = prod + beta * out

    def _ger(self, alpha, x, y, a, m, n):
        _colmajor(a, m, n)[...] += alpha * np.outer(x[:m], y[:n])
