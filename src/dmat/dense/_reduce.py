"""
Reduction and Ordering

Whole-matrix reductions, per-row/per-column aggregates and sorting.

NaN handling:
    ``min``/``max`` and their argument and per-axis forms skip NaN. Empty
    input yields +inf (min), -inf (max) or -1 (argmin/argmax).
    Sorting places NaN after every number and ``-0.0`` before ``0.0``.

Per-axis results are shaped as the original: column aggregates are
1 x columns, row aggregates rows x 1. A single-row matrix's column sums
(and a single-column matrix's row sums) are a copy of the matrix.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

import numpy as np

if TYPE_CHECKING:
    from ._matrix import DenseMatrix

__all__ = ['ReductionMixin']


def _first_extremum(values: np.ndarray, smallest: bool) -> int:
    """First index of the NaN-skipping extremum, -1 if none."""
    valid = ~np.isnan(values)
    if not valid.any():
        return -1
    return int(np.nanargmin(values) if smallest else np.nanargmax(values))


def _sort_order(values: np.ndarray, axis: int = -1) -> np.ndarray:
    """Stable ascending order with -0.0 before 0.0 and NaN last."""
    # secondary key only separates signed zeros; NaNs stay in input order
    positive = ~np.signbit(values) | np.isnan(values)
    return np.lexsort((positive, values), axis=axis)


class ReductionMixin:
    """Reductions and ordering for ``DenseMatrix``."""

    __slots__ = ()

    # =========================================================================
    # Extrema
    # =========================================================================

    def min(self, other=None, out=None):
        """
        Smallest element, or the elementwise minimum with ``other``.

        Without ``other`` NaN entries are ignored and an empty matrix gives
        +inf. With ``other`` (matrix or number) a new matrix (or ``out``)
        holds ``minimum(self, other)`` element by element.
        """
        if other is None:
            return float(np.fmin.reduce(self._data, initial=np.inf))
        return self._elementwise('min', other, out)

    def mini(self, other, out=None) -> "DenseMatrix":
        """Elementwise minimum into ``out`` (default: self)."""
        return self._elementwise('min', other, self._target(out))

    def max(self, other=None, out=None):
        """
        Largest element, or the elementwise maximum with ``other``.

        Without ``other`` NaN entries are ignored and an empty matrix gives
        -inf.
        """
        if other is None:
            return float(np.fmax.reduce(self._data, initial=-np.inf))
        return self._elementwise('max', other, out)

    def maxi(self, other, out=None) -> "DenseMatrix":
        return self._elementwise('max', other, self._target(out))

    def argmin(self) -> int:
        """Linear index of the first smallest non-NaN element, -1 if none."""
        if self.is_empty():
            return -1
        return _first_extremum(self._data, smallest=True)

    def argmax(self) -> int:
        """Linear index of the first largest non-NaN element, -1 if none."""
        if self.is_empty():
            return -1
        return _first_extremum(self._data, smallest=False)

    # =========================================================================
    # Sums
    # =========================================================================

    def sum(self) -> float:
        return float(np.sum(self._data))

    def prod(self) -> float:
        return float(np.prod(self._data))

    def mean(self) -> float:
        """Arithmetic mean; NaN for an empty matrix."""
        if self.length == 0:
            return float('nan')
        return self.sum() / self.length

    def cumulative_sum(self) -> "DenseMatrix":
        """Running sum over the elements in linear order."""
        return self.dup().cumulative_sumi()

    def cumulative_sumi(self) -> "DenseMatrix":
        np.cumsum(self._data, out=self._data)
        return self

    # =========================================================================
    # Per-column / Per-row Aggregates
    # =========================================================================

    def column_sums(self) -> "DenseMatrix":
        """1 x columns matrix of column sums."""
        if self._rows == 1:
            return self.dup()
        return self._new(1, self._columns, self._view2d().sum(axis=0))

    def column_means(self) -> "DenseMatrix":
        return self.column_sums().divi(self._rows)

    def row_sums(self) -> "DenseMatrix":
        """rows x 1 matrix of row sums."""
        if self._columns == 1:
            return self.dup()
        return self._new(self._rows, 1, self._view2d().sum(axis=1))

    def row_means(self) -> "DenseMatrix":
        return self.row_sums().divi(self._columns)

    def column_mins(self) -> "DenseMatrix":
        return self._new(1, self._columns, np.fmin.reduce(self._view2d(), axis=0, initial=np.inf))

    def column_maxs(self) -> "DenseMatrix":
        return self._new(1, self._columns, np.fmax.reduce(self._view2d(), axis=0, initial=-np.inf))

    def row_mins(self) -> "DenseMatrix":
        return self._new(self._rows, 1, np.fmin.reduce(self._view2d(), axis=1, initial=np.inf))

    def row_maxs(self) -> "DenseMatrix":
        return self._new(self._rows, 1, np.fmax.reduce(self._view2d(), axis=1, initial=-np.inf))

    def column_argmins(self) -> np.ndarray:
        """Row index of each column's minimum (-1 for an all-NaN column)."""
        view = self._view2d()
        return np.array([_first_extremum(view[:, c], True) for c in range(self._columns)], dtype=np.intp)

    def column_argmaxs(self) -> np.ndarray:
        view = self._view2d()
        return np.array([_first_extremum(view[:, c], False) for c in range(self._columns)], dtype=np.intp)

    def row_argmins(self) -> np.ndarray:
        """Column index of each row's minimum (-1 for an all-NaN row)."""
        view = self._view2d()
        return np.array([_first_extremum(view[r, :], True) for r in range(self._rows)], dtype=np.intp)

    def row_argmaxs(self) -> np.ndarray:
        view = self._view2d()
        return np.array([_first_extremum(view[r, :], False) for r in range(self._rows)], dtype=np.intp)

    # =========================================================================
    # Sorting
    # =========================================================================

    def sort(self) -> "DenseMatrix":
        """Copy with all elements in increasing order (NaN last)."""
        return self.dup().sorti()

    def sorti(self) -> "DenseMatrix":
        self._data[:] = self._data[_sort_order(self._data)]
        return self

    def sorting_permutation(self) -> np.ndarray:
        """
        Stable sorting permutation.

        Reading the elements in the order ``p[0], p[1], ...`` gives a
        non-decreasing sequence; equal elements keep their original order
        and ``-0.0`` comes before ``0.0``.
        """
        return _sort_order(self._data)

    def sort_columns(self) -> "DenseMatrix":
        return self.dup().sort_columnsi()

    def sort_columnsi(self) -> "DenseMatrix":
        """Sort every column independently (in place)."""
        view = self._view2d()
        view[:] = np.take_along_axis(view, _sort_order(view, axis=0), axis=0)
        return self

    def sort_rows(self) -> "DenseMatrix":
        return self.dup().sort_rowsi()

    def sort_rowsi(self) -> "DenseMatrix":
        """Sort every row independently (in place)."""
        view = self._view2d()
        view[:] = np.take_along_axis(view, _sort_order(view, axis=1), axis=1)
        return self

    def column_sorting_permutations(self) -> List[np.ndarray]:
        """One stable sorting permutation per column."""
        view = self._view2d()
        return [_sort_order(view[:, c]) for c in range(self._columns)]

    def row_sorting_permutations(self) -> List[np.ndarray]:
        """One stable sorting permutation per row."""
        view = self._view2d()
        return [_sort_order(view[r, :]) for r in range(self._rows)]
