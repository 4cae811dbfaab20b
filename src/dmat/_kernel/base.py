"""Kernel interface consumed by the matrix engine.

Every heavy operation of ``DenseMatrix`` (vector copy/scale/swap, axpy, dot,
matrix-vector and matrix-matrix products, rank-1 updates) goes through a
``Kernel``. Buffers are flat, contiguous float64 numpy arrays; matrices are
passed as buffer plus dimensions and are always column-major with leading
dimension equal to the row count.

The public methods validate arguments and short-circuit empty work; backends
implement the underscore-prefixed primitives.
"""

from abc import ABC, abstractmethod

import numpy as np

from .._errors import KernelError

__all__ = ['Kernel']


def _check_buffer(buf: np.ndarray, name: str) -> None:
    if not isinstance(buf, np.ndarray) or buf.dtype != np.float64 or buf.ndim != 1:
        raise KernelError(f"{name} must be a 1-D float64 array")
    if not buf.flags['C_CONTIGUOUS']:
        raise KernelError(f"{name} must be contiguous")


def _check_extent(n: int, buf: np.ndarray, offset: int, stride: int, name: str) -> None:
    if stride <= 0:
        raise KernelError(f"{name} stride must be positive, got {stride}")
    if offset < 0 or offset + (n - 1) * stride >= buf.shape[0]:
        raise KernelError(
            f"{name}: {n} elements from offset {offset} with stride {stride} "
            f"exceed buffer of length {buf.shape[0]}"
        )


class Kernel(ABC):
    """BLAS-compatible compute backend.

    Attributes:
        name: Backend name used in logs and ``repr``.
    """

    name = "abstract"

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"

    # -------------------------------------------------------------------------
    # Level 1
    # -------------------------------------------------------------------------

    def copy(self, n: int, x: np.ndarray, offx: int, incx: int,
             y: np.ndarray, offy: int, incy: int) -> None:
        """Copy ``n`` strided elements of ``x`` into ``y``."""
        if n <= 0:
            return
        _check_buffer(x, "x")
        _check_buffer(y, "y")
        _check_extent(n, x, offx, incx, "x")
        _check_extent(n, y, offy, incy, "y")
        self._copy(n, x, offx, incx, y, offy, incy)

    def scale(self, n: int, alpha: float, x: np.ndarray, offx: int = 0, incx: int = 1) -> None:
        """Compute ``x = alpha * x`` over ``n`` strided elements."""
        if n <= 0:
            return
        _check_buffer(x, "x")
        _check_extent(n, x, offx, incx, "x")
        self._scale(n, float(alpha), x, offx, incx)

    def swap(self, n: int, x: np.ndarray, offx: int, incx: int,
             y: np.ndarray, offy: int, incy: int) -> None:
        """Exchange ``n`` strided elements of ``x`` and ``y``."""
        if n <= 0:
            return
        _check_buffer(x, "x")
        _check_buffer(y, "y")
        _check_extent(n, x, offx, incx, "x")
        _check_extent(n, y, offy, incy, "y")
        self._swap(n, x, offx, incx, y, offy, incy)

    def axpy(self, n: int, alpha: float, x: np.ndarray, y: np.ndarray,
             offx: int = 0, incx: int = 1, offy: int = 0, incy: int = 1) -> None:
        """Compute ``y += alpha * x``."""
        if n <= 0:
            return
        _check_buffer(x, "x")
        _check_buffer(y, "y")
        _check_extent(n, x, offx, incx, "x")
        _check_extent(n, y, offy, incy, "y")
        self._axpy(n, float(alpha), x, offx, incx, y, offy, incy)

    def dot(self, n: int, x: np.ndarray, y: np.ndarray,
            offx: int = 0, incx: int = 1, offy: int = 0, incy: int = 1) -> float:
        """Return the inner product of ``n`` strided elements."""
        if n <= 0:
            return 0.0
        _check_buffer(x, "x")
        _check_buffer(y, "y")
        _check_extent(n, x, offx, incx, "x")
        _check_extent(n, y, offy, incy, "y")
        return float(self._dot(n, x, offx, incx, y, offy, incy))

    # -------------------------------------------------------------------------
    # Level 2 / 3
    # -------------------------------------------------------------------------

    def gemv(self, alpha: float, a: np.ndarray, m: int, n: int,
             x: np.ndarray, beta: float, y: np.ndarray) -> None:
        """Compute ``y = alpha * A x + beta * y`` for column-major ``A`` (m x n).

        With ``beta == 0`` the previous content of ``y`` is ignored.
        """
        if m <= 0:
            return
        _check_buffer(a, "a")
        _check_buffer(x, "x")
        _check_buffer(y, "y")
        if a.shape[0] < m * n or x.shape[0] < n or y.shape[0] < m:
            raise KernelError(f"gemv: buffers too small for a {m}x{n} product")
        if n == 0:
            self._scale_or_zero(m, beta, y)
            return
        self._gemv(float(alpha), a, m, n, x, float(beta), y)

    def gemm(self, alpha: float, a: np.ndarray, b: np.ndarray, m: int, n: int, k: int,
             beta: float, c: np.ndarray) -> None:
        """Compute ``C = alpha * A B + beta * C`` with A (m x k), B (k x n), C (m x n)."""
        if m <= 0 or n <= 0:
            return
        _check_buffer(a, "a")
        _check_buffer(b, "b")
        _check_buffer(c, "c")
        if a.shape[0] < m * k or b.shape[0] < k * n or c.shape[0] < m * n:
            raise KernelError(f"gemm: buffers too small for ({m}x{k}) * ({k}x{n})")
        if k == 0:
            self._scale_or_zero(m * n, beta, c)
            return
        self._gemm(float(alpha), a, b, m, n, k, float(beta), c)

    def ger(self, alpha: float, x: np.ndarray, y: np.ndarray, a: np.ndarray, m: int, n: int) -> None:
        """Rank-1 update ``A += alpha * x y'`` for column-major ``A`` (m x n)."""
        if m <= 0 or n <= 0:
            return
        _check_buffer(a, "a")
        _check_buffer(x, "x")
        _check_buffer(y, "y")
        if a.shape[0] < m * n or x.shape[0] < m or y.shape[0] < n:
            raise KernelError(f"ger: buffers too small for a {m}x{n} update")
        self._ger(float(alpha), x, y, a, m, n)

    def _scale_or_zero(self, n: int, beta: float, y: np.ndarray) -> None:
        if beta == 0.0:
            y[:n] = 0.0
        else:
            self._scale(n, beta, y, 0, 1)

    # -------------------------------------------------------------------------
    # Backend primitives
    # -------------------------------------------------------------------------

    @abstractmethod
    def _copy(self, n, x, offx, incx, y, offy, incy) -> None:
        ...

    @abstractmethod
    def _scale(self, n, alpha, x, offx, incx) -> None:
        ...

    @abstractmethod
    def _swap(self, n, x, offx, incx, y, offy, incy) -> None:
        ...

    @abstractmethod
    def _axpy(self, n, alpha, x, offx, incx, y, offy, incy) -> None:
        ...

    @abstractmethod
    def _dot(self, n, x, offx, incx, y, offy, incy) -> float:
        ...

    @abstractmethod
    def _gemv(self, alpha, a, m, n, x, beta, y) -> None:
        ...

    @abstractmethod
    def _gemm(self, alpha, a, b, m, n, k, beta, c) -> None:
        ...

    @abstractmethod
    def _ger(self, alpha, x, y, a, m, n) -> None:
        ...
