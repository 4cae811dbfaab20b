"""
Factory Functions

Constructors for common matrices and concatenation. Random matrices draw
from the generator returned by ``dmat.get_rng()``, seeded through
``DMAT_SEED`` or ``dmat.seed()``.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from .._config import get_rng
from .._errors import ShapeMismatchError
from ._matrix import DenseMatrix

__all__ = [
    'zeros',
    'ones',
    'eye',
    'diag',
    'scalar',
    'rand',
    'randn',
    'linspace',
    'logspace',
    'concat_horizontally',
    'concat_vertically',
    'empty',
]


# =============================================================================
# Constant Matrices
# =============================================================================

def zeros(rows: int, columns: int = 1) -> DenseMatrix:
    """Zero-filled ``rows x columns`` matrix."""
    return DenseMatrix(rows, columns)


def ones(rows: int, columns: int = 1) -> DenseMatrix:
    """``rows x columns`` matrix filled with 1.0."""
    return DenseMatrix(rows, columns).fill(1.0)


def eye(n: int) -> DenseMatrix:
    """``n x n`` identity matrix."""
    m = DenseMatrix(n, n)
    m.data[::n + 1] = 1.0
    return m


def diag(x, rows: Optional[int] = None, columns: Optional[int] = None) -> DenseMatrix:
    """
    Matrix with the elements of ``x`` on its diagonal.

    Args:
        x: Vector of diagonal values
        rows: Result rows (default ``len(x)``)
        columns: Result columns (default ``rows``)

    Raises:
        BoundsError: If ``x`` does not fit on the diagonal
    """
    x = DenseMatrix._as_matrix(x)
    rows = x.length if rows is None else rows
    columns = rows if columns is None else columns
    m = DenseMatrix(rows, columns)
    for i, v in enumerate(x.data.tolist()):
        m.put(i, i, v)
    return m


def scalar(value: float) -> DenseMatrix:
    """1x1 matrix holding ``value``; broadcasts like a number."""
    return DenseMatrix(1, 1, [value])


def empty() -> DenseMatrix:
    """The 0x0 matrix."""
    return DenseMatrix.empty()


# =============================================================================
# Random Matrices
# =============================================================================

def rand(rows: int, columns: int = 1) -> DenseMatrix:
    """Uniform samples from [0, 1)."""
    return DenseMatrix(rows, columns, get_rng().random(rows * columns))


def randn(rows: int, columns: int = 1) -> DenseMatrix:
    """Standard normal samples."""
    return DenseMatrix(rows, columns, get_rng().standard_normal(rows * columns))


# =============================================================================
# Sequences
# =============================================================================

def linspace(lower: float, upper: float, size: int) -> DenseMatrix:
    """Column vector of ``size`` evenly spaced values from lower to upper."""
    return DenseMatrix(size, 1, np.linspace(lower, upper, size))


def logspace(lower: float, upper: float, size: int) -> DenseMatrix:
    """Column vector of ``10 ** v`` for ``v`` in ``linspace(lower, upper, size)``."""
    return DenseMatrix(size, 1, np.power(10.0, np.linspace(lower, upper, size)))


# =============================================================================
# Concatenation
# =============================================================================

def concat_horizontally(a, b) -> DenseMatrix:
    """
    ``[a, b]``: place ``b`` to the right of ``a``.

    Raises:
        ShapeMismatchError: If the row counts differ
    """
    a = DenseMatrix._as_matrix(a)
    b = DenseMatrix._as_matrix(b)
    if a.rows != b.rows:
        raise ShapeMismatchError(f"Matrices don't have same number of rows ({a.rows} != {b.rows})")
    # column-major: the buffers simply follow each other
    return DenseMatrix(a.rows, a.columns + b.columns, np.concatenate([a.data, b.data]))


def concat_vertically(a, b) -> DenseMatrix:
    """
    ``[a; b]``: place ``b`` below ``a``.

    Raises:
        ShapeMismatchError: If the column counts differ
    """
    a = DenseMatrix._as_matrix(a)
    b = DenseMatrix._as_matrix(b)
    if a.columns != b.columns:
        raise ShapeMismatchError(
            f"Matrices don't have same number of columns ({a.columns} != {b.columns})"
        )
    stacked = np.vstack([a.to_numpy(copy=False), b.to_numpy(copy=False)])
    return DenseMatrix(a.rows + b.rows, a.columns, stacked.ravel(order='F'))
