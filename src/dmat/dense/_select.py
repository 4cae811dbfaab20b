"""
Selection Engine

The ``get``/``put`` family. Every form reduces to the same algorithm:

    1. classify each axis argument with ``Selector.of``
    2. resolve it to an ordered array of positions (bounds checked)
    3. read or write the Cartesian product of positions, row-major over
       the output shape

Output shapes:

    get(i)            float
    get(sel)          column vector, one entry per resolved position
    get(r, c)         float
    get(r, cols)      1 x len(cols)
    get(rows, c)      len(rows) x 1
    get(rows, cols)   len(rows) x len(cols)

Whole-row and whole-column transfers go through the kernel's strided copy:
columns are unit stride, rows have stride ``rows``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Optional

import numpy as np

from .._errors import BoundsError, ShapeMismatchError
from .._typing import IndexLike, is_number
from ._index import Selector, find_nonzero
from ._views import ColumnsView, ElementsView, RowsView

if TYPE_CHECKING:
    from ._matrix import DenseMatrix

__all__ = ['SelectionMixin']


class SelectionMixin:
    """Element, row, column and block access for ``DenseMatrix``."""

    __slots__ = ()

    # =========================================================================
    # get / put
    # =========================================================================

    def get(self, *index: IndexLike):
        """
        Read one element or a selection.

        Args:
            *index: One linear index-like, or a (row, column) pair of
                index-likes (int, sequence, mask matrix, Range or slice)

        Returns:
            A float when every axis is a single int, else a new matrix.

        Raises:
            BoundsError: If a position is out of range
        """
        if len(index) == 1:
            sel = Selector.of(index[0])
            if sel.is_single:
                return float(self._data[self._check_linear(sel.payload)])
            positions = sel.resolve(self.length)
            return self._new(positions.shape[0], 1, self._data[positions])

        if len(index) == 2:
            rsel = Selector.of(index[0])
            csel = Selector.of(index[1])
            if rsel.is_single and csel.is_single:
                r = self._check_row(rsel.payload)
                c = self._check_column(csel.payload)
                return float(self._data[r + self._rows * c])
            rp = rsel.resolve(self._rows)
            cp = csel.resolve(self._columns)
            block = self._view2d()[np.ix_(rp, cp)]
            return self._new(rp.shape[0], cp.shape[0], block.flatten(order='F'))

        raise TypeError(f"get() takes 1 or 2 index arguments ({len(index)} given)")

    def put(self, *args):
        """
        Write one element or a selection.

        ``put(index, value)`` and ``put(row_index, column_index, value)``.
        A number (or 1x1 matrix) is broadcast to every selected position.
        Otherwise the value must match the selected region: equal length
        for a one-dimensional selection, exact shape for a block.

        Returns:
            self

        Raises:
            BoundsError: If a position is out of range
            ShapeMismatchError: If the value does not fit the region
        """
        if len(args) not in (2, 3):
            raise TypeError(f"put() takes 2 or 3 arguments ({len(args)} given)")
        *index, value = args

        if len(index) == 1:
            sel = Selector.of(index[0])
            if sel.is_single:
                i = self._check_linear(sel.payload)
                self._data[i] = self._broadcast_value(value)
                return self
            positions = sel.resolve(self.length)
            self._data[positions] = self._region_values(value, positions.shape[0], None, vector=True)
            return self

        rsel = Selector.of(index[0])
        csel = Selector.of(index[1])
        if rsel.is_single and csel.is_single:
            r = self._check_row(rsel.payload)
            c = self._check_column(csel.payload)
            self._data[r + self._rows * c] = self._broadcast_value(value)
            return self

        rp = rsel.resolve(self._rows)
        cp = csel.resolve(self._columns)
        vector = rsel.is_single or csel.is_single
        values = self._region_values(value, rp.shape[0], cp.shape[0], vector=vector)
        self._view2d()[np.ix_(rp, cp)] = values
        return self

    def _broadcast_value(self, value: Any) -> float:
        if is_number(value):
            return float(value)
        m = self._as_matrix(value)
        if not m.is_scalar():
            raise ShapeMismatchError(
                f"Cannot store a {m.rows}x{m.columns} matrix in a single element"
            )
        return float(m.data[0])

    def _region_values(self, value: Any, nrows: int, ncols: Optional[int], vector: bool):
        """
        Validate ``value`` against the selected region before any write.

        ``ncols`` is None for a linear selection of ``nrows`` positions.
        """
        if is_number(value):
            return float(value)
        m = self._as_matrix(value)
        if m.is_scalar():
            return float(m.data[0])
        if ncols is None:
            m.check_length(nrows)
            return m.data.copy()
        if vector:
            m.check_length(nrows * ncols)
            return m.data.reshape((nrows, ncols)).copy()
        m.check_rows(nrows)
        m.check_columns(ncols)
        return m._view2d().copy()

    def __getitem__(self, key):
        if isinstance(key, tuple):
            return self.get(*key)
        return self.get(key)

    def __setitem__(self, key, value) -> None:
        if isinstance(key, tuple):
            self.put(*key, value)
        else:
            self.put(key, value)

    def scalar(self) -> float:
        """The first element (the value of a 1x1 matrix)."""
        return float(self._data[self._check_linear(0)])

    def fill(self, value: float):
        """Set every element to ``value``. Returns self."""
        self._data.fill(float(value))
        return self

    # =========================================================================
    # Rows and Columns
    # =========================================================================

    def get_row(self, r: int, out: Optional["DenseMatrix"] = None) -> "DenseMatrix":
        """
        Copy row ``r`` into a 1 x columns matrix (or ``out``).

        Raises:
            BoundsError: If ``r`` is out of range
            ShapeMismatchError: If ``out`` does not have ``columns`` elements
        """
        self._check_row(r)
        if out is None:
            out = self._new(1, self._columns)
        else:
            out.check_length(self._columns)
        self._kernel().copy(self._columns, self._data, r, self._rows, out.data, 0, 1)
        return out

    def get_column(self, c: int, out: Optional["DenseMatrix"] = None) -> "DenseMatrix":
        """
        Copy column ``c`` into a rows x 1 matrix (or ``out``).

        Raises:
            BoundsError: If ``c`` is out of range
            ShapeMismatchError: If ``out`` does not have ``rows`` elements
        """
        self._check_column(c)
        if out is None:
            out = self._new(self._rows, 1)
        else:
            out.check_length(self._rows)
        self._kernel().copy(self._rows, self._data, c * self._rows, 1, out.data, 0, 1)
        return out

    def put_row(self, r: int, v) -> "DenseMatrix":
        """Overwrite row ``r`` with the elements of ``v`` (length ``columns``)."""
        self._check_row(r)
        src = self._source_for_copy(v, self._columns)
        self._kernel().copy(self._columns, src, 0, 1, self._data, r, self._rows)
        return self

    def put_column(self, c: int, v) -> "DenseMatrix":
        """Overwrite column ``c`` with the elements of ``v`` (length ``rows``)."""
        self._check_column(c)
        src = self._source_for_copy(v, self._rows)
        self._kernel().copy(self._rows, src, 0, 1, self._data, c * self._rows, 1)
        return self

    def _source_for_copy(self, v, n: int) -> np.ndarray:
        m = self._as_matrix(v)
        m.check_length(n)
        if np.shares_memory(m.data, self._data):
            return m.data.copy()
        return m.data

    def get_rows(self, indices: IndexLike) -> "DenseMatrix":
        """Copy whole rows selected by ``indices`` into a new matrix."""
        positions = Selector.of(indices).resolve(self._rows)
        n = positions.shape[0]
        out = self._new(n, self._columns)
        kernel = self._kernel()
        for i, r in enumerate(positions):
            kernel.copy(self._columns, self._data, int(r), self._rows, out.data, i, n)
        return out

    def get_columns(self, indices: IndexLike) -> "DenseMatrix":
        """Copy whole columns selected by ``indices`` into a new matrix."""
        positions = Selector.of(indices).resolve(self._columns)
        out = self._new(self._rows, positions.shape[0])
        kernel = self._kernel()
        for i, c in enumerate(positions):
            kernel.copy(self._rows, self._data, int(c) * self._rows, 1, out.data, i * self._rows, 1)
        return out

    # =========================================================================
    # Half-open Ranges
    # =========================================================================

    def get_range(self, a: int, b: int, c: Optional[int] = None, d: Optional[int] = None) -> "DenseMatrix":
        """
        Contiguous half-open selections.

        ``get_range(a, b)`` returns linear elements ``a .. b-1`` as a column
        vector. ``get_range(ra, rb, ca, cb)`` returns rows ``ra .. rb-1`` of
        columns ``ca .. cb-1``.

        Raises:
            BoundsError: If the range leaves the matrix or is reversed
        """
        if c is None and d is None:
            _check_half_open(a, b, self.length, "linear")
            return self._new(b - a, 1, self._data[a:b].copy())
        if c is None or d is None:
            raise TypeError("get_range() takes 2 or 4 arguments")
        _check_half_open(a, b, self._rows, "row")
        _check_half_open(c, d, self._columns, "column")
        block = self._view2d()[a:b, c:d]
        return self._new(b - a, d - c, block.flatten(order='F'))

    def get_row_range(self, a: int, b: int, c: int) -> "DenseMatrix":
        """Rows ``a .. b-1`` of column ``c`` as a column vector."""
        self._check_column(c)
        _check_half_open(a, b, self._rows, "row")
        start = c * self._rows
        return self._new(b - a, 1, self._data[start + a:start + b].copy())

    def get_column_range(self, r: int, a: int, b: int) -> "DenseMatrix":
        """Columns ``a .. b-1`` of row ``r`` as a row vector."""
        self._check_row(r)
        _check_half_open(a, b, self._columns, "column")
        out = self._new(1, b - a)
        self._kernel().copy(b - a, self._data, r + a * self._rows, self._rows, out.data, 0, 1)
        return out

    # =========================================================================
    # In-place Row/Column Operations
    # =========================================================================

    def swap_rows(self, i: int, j: int) -> "DenseMatrix":
        self._check_row(i)
        self._check_row(j)
        self._kernel().swap(self._columns, self._data, i, self._rows, self._data, j, self._rows)
        return self

    def swap_columns(self, i: int, j: int) -> "DenseMatrix":
        self._check_column(i)
        self._check_column(j)
        self._kernel().swap(self._rows, self._data, i * self._rows, 1, self._data, j * self._rows, 1)
        return self

    def mul_row(self, r: int, scale: float) -> "DenseMatrix":
        """Multiply row ``r`` by ``scale`` in place."""
        self._check_row(r)
        self._kernel().scale(self._columns, scale, self._data, r, self._rows)
        return self

    def mul_column(self, c: int, scale: float) -> "DenseMatrix":
        """Multiply column ``c`` by ``scale`` in place."""
        self._check_column(c)
        self._kernel().scale(self._rows, scale, self._data, c * self._rows, 1)
        return self

    # =========================================================================
    # Structure
    # =========================================================================

    def diag(self) -> "DenseMatrix":
        """
        Diagonal of a square matrix as a column vector.

        Raises:
            ShapeMismatchError: If the matrix is not square
        """
        self.assert_square()
        out = self._new(self._rows, 1)
        self._kernel().copy(self._rows, self._data, 0, self._rows + 1, out.data, 0, 1)
        return out

    def find_indices(self) -> np.ndarray:
        """Linear indices of the non-zero elements, in column-major order."""
        return find_nonzero(self._data)

    def selecti(self, where) -> "DenseMatrix":
        """Zero every element whose counterpart in ``where`` is zero (in place)."""
        where = self._as_matrix(where)
        self.check_length(where.length)
        self._data[where.data == 0.0] = 0.0
        return self

    def select(self, where) -> "DenseMatrix":
        return self.dup().selecti(where)

    def transpose(self) -> "DenseMatrix":
        """A new columns x rows matrix with rows and columns exchanged."""
        return self._new(self._columns, self._rows, self._view2d().flatten(order='C'))

    def repmat(self, row_mult: int, column_mult: int) -> "DenseMatrix":
        """Tile the matrix ``row_mult`` times vertically and ``column_mult`` horizontally."""
        if row_mult < 0 or column_mult < 0:
            raise ValueError("Replication counts must be non-negative")
        tiled = np.tile(self._view2d(), (row_mult, column_mult))
        return self._new(self._rows * row_mult, self._columns * column_mult, tiled.ravel(order='F'))

    def dup(self) -> "DenseMatrix":
        """Deep copy."""
        return self._new(self._rows, self._columns, self._data.copy())

    def copy_from(self, other) -> "DenseMatrix":
        """
        Make this matrix an element-for-element copy of ``other``.

        Resizes when the shapes differ. Returns self.
        """
        other = self._as_matrix(other)
        if other is self:
            return self
        src = other.data.copy() if np.shares_memory(other.data, self._data) else other.data
        if not self.same_size(other):
            self.resize(other.rows, other.columns)
        self._kernel().copy(self.length, src, 0, 1, self._data, 0, 1)
        return self

    def is_lower_triangular(self) -> bool:
        """True if every entry strictly above the diagonal is zero."""
        return not np.any(np.triu(self._view2d(), 1))

    def is_upper_triangular(self) -> bool:
        """True if every entry strictly below the diagonal is zero."""
        return not np.any(np.tril(self._view2d(), -1))

    # =========================================================================
    # Conversion
    # =========================================================================

    def to_list(self) -> List[float]:
        """Elements in linear (column-major) order."""
        return self._data.tolist()

    def to_nested_list(self) -> List[List[float]]:
        """Row-major nested lists, one per row."""
        return self._view2d().tolist()

    def to_int_list(self) -> List[int]:
        """Elements rounded to the nearest integer, in linear order."""
        return np.rint(self._data).astype(np.int64).tolist()

    def to_bool_list(self) -> List[bool]:
        """``element != 0.0`` for every element, in linear order."""
        return (self._data != 0.0).tolist()

    def to_numpy(self, copy: bool = True) -> np.ndarray:
        """
        2-D numpy array with the matrix contents.

        With ``copy=False`` a Fortran-ordered view on the live buffer is
        returned instead.
        """
        view = self._view2d()
        return view.copy(order='F') if copy else view

    # =========================================================================
    # Live Views
    # =========================================================================

    def elements(self) -> ElementsView:
        """Live read/write sequence over the elements in linear order."""
        return ElementsView(self)

    def rows_as_list(self) -> RowsView:
        """Live sequence of row projections."""
        return RowsView(self)

    def columns_as_list(self) -> ColumnsView:
        """Live sequence of column projections."""
        return ColumnsView(self)


def _check_half_open(a: int, b: int, bound: int, axis: str) -> None:
    if a < 0 or b > bound or a > b:
        raise BoundsError(f"Invalid {axis} range [{a}, {b}) for axis of size {bound}")
