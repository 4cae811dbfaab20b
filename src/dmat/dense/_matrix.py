"""
DenseMatrix

The matrix type users work with. It composes the storage layer with the
selection, arithmetic and reduction mixins and adds construction,
persistence and Python operator support.

Construction copies the caller's values, except ``DenseMatrix.wrap``, which
aliases a caller-owned float64 array:

    >>> arr = np.zeros(6)
    >>> m = DenseMatrix.wrap(arr, 2, 3)
    >>> m.put(1, 2, 5.0)
    >>> arr[5]
    5.0

Operators:
    ``+ - * /`` are elementwise (numbers and 1x1 matrices broadcast), ``@``
    is the matrix product, ``& | ^ ~`` are logical, ``< <= > >=`` return
    1.0/0.0 matrices. ``==`` and ``!=`` compare whole matrices; use ``eq``
    and ``ne`` for the elementwise forms.
"""

from __future__ import annotations

from typing import BinaryIO, Iterator, Optional

import numpy as np

from .._typing import is_integer
from ._arith import ArithmeticMixin
from ._base import MatrixBase
from ._io import PathLike, load_file, parse_text, read_matrix, save_file, write_matrix
from ._reduce import ReductionMixin
from ._select import SelectionMixin

__all__ = ['DenseMatrix']


class DenseMatrix(SelectionMixin, ArithmeticMixin, ReductionMixin, MatrixBase):
    """
    Dense column-major matrix of doubles.

    Args:
        rows: Number of rows, or the values to copy: a nested sequence of
            rows, a 1-D sequence (column vector), a numpy array or another
            matrix
        columns: Number of columns when ``rows`` is an int (default 1)
        data: Column-major values (``rows * columns`` of them) when
            ``rows`` is an int; zeros when omitted

    Raises:
        ShapeMismatchError: If ``data`` has the wrong length
        ValueError: If ``data`` is not one-dimensional

    Example:
        >>> DenseMatrix(2, 3)                   # 2x3 zeros
        >>> DenseMatrix(2, 2, [1, 2, 3, 4])     # columns [1, 2] and [3, 4]
        >>> DenseMatrix([[1, 2], [3, 4]])       # rows [1, 2] and [3, 4]
        >>> DenseMatrix([1, 2, 3])              # 3x1
    """

    __slots__ = ()

    __array_ufunc__ = None
    __hash__ = None

    def __init__(self, rows=None, columns: Optional[int] = None, data=None):
        if rows is None:
            if columns is not None or data is not None:
                raise TypeError("columns/data require a row count")
            self._set_storage(0, 0, np.zeros(0))
            return

        if is_integer(rows):
            columns = 1 if columns is None else columns
            if data is None:
                self._set_storage(rows, columns, np.zeros(max(rows, 0) * max(columns, 0)))
            else:
                values = np.array(data, dtype=np.float64)
                if values.ndim > 1:
                    raise ValueError(
                        f"data must be a flat column-major sequence, got {values.ndim}-D input"
                    )
                values = values.ravel()
                self._set_storage(rows, columns, values)
            return

        if columns is not None or data is not None:
            raise TypeError("columns/data are only accepted together with an integer row count")
        source = self._as_matrix(rows)
        values = source.data.copy() if source is rows else source.data
        self._set_storage(source.rows, source.columns, values)

    # =========================================================================
    # Alternative Constructors
    # =========================================================================

    @classmethod
    def wrap(cls, array: np.ndarray, rows: Optional[int] = None,
             columns: Optional[int] = None) -> "DenseMatrix":
        """
        Build a matrix on top of ``array`` without copying.

        Args:
            array: float64 array; 1-D and contiguous, or 2-D and
                Fortran-contiguous
            rows: Row count for a 1-D array (default: its length)
            columns: Column count for a 1-D array (default: 1 or
                ``len / rows``)

        Raises:
            TypeError: If ``array`` is not a float64 numpy array
            ValueError: If the memory layout cannot be aliased
            ShapeMismatchError: If the dimensions do not cover the array
        """
        if not isinstance(array, np.ndarray) or array.dtype != np.float64:
            raise TypeError("wrap() requires a float64 numpy array")

        if array.ndim == 2:
            if not array.flags['F_CONTIGUOUS']:
                raise ValueError("wrap() requires a Fortran-contiguous 2-D array")
            if rows is not None or columns is not None:
                raise TypeError("rows/columns are taken from a 2-D array's shape")
            return cls._new(array.shape[0], array.shape[1], array.ravel(order='F'))

        if array.ndim != 1 or not array.flags['C_CONTIGUOUS']:
            raise ValueError("wrap() requires a contiguous 1-D or 2-D array")
        n = array.shape[0]
        if rows is None:
            rows = n if columns is None else (n // columns if columns else 0)
        if columns is None:
            columns = n // rows if rows else 0
        return cls._new(rows, columns, array)

    @classmethod
    def empty(cls) -> "DenseMatrix":
        """The 0x0 matrix."""
        return cls._new(0, 0)

    @classmethod
    def value_of(cls, text: str) -> "DenseMatrix":
        """
        Parse ``"1 2; 3 4"`` (rows separated by ``;``).

        Raises:
            FormatError: On ragged rows or unparsable values
        """
        rows, columns, data = parse_text(text)
        return cls._new(rows, columns, data)

    # =========================================================================
    # Persistence
    # =========================================================================

    def write_to(self, stream: BinaryIO) -> None:
        """Write the matrix to a binary stream."""
        write_matrix(self._rows, self._columns, self._data, stream)

    @classmethod
    def read_from(cls, stream: BinaryIO) -> "DenseMatrix":
        """
        Read a matrix written by ``write_to``.

        Raises:
            FormatError: On a malformed or truncated stream
        """
        rows, columns, data = read_matrix(stream)
        return cls._new(rows, columns, data)

    def save(self, path: PathLike) -> None:
        """Write the matrix to ``path`` (overwrites)."""
        save_file(self._rows, self._columns, self._data, path)

    @classmethod
    def load(cls, path: PathLike) -> "DenseMatrix":
        """Read a matrix saved with ``save``."""
        rows, columns, data = load_file(path)
        return cls._new(rows, columns, data)

    # =========================================================================
    # Python Protocols
    # =========================================================================

    def __len__(self) -> int:
        return self.length

    def __iter__(self) -> Iterator[float]:
        return iter(self._data.tolist())

    def __array__(self, dtype=None, copy=None) -> np.ndarray:
        arr = self._view2d()
        if dtype is not None and np.dtype(dtype) != arr.dtype:
            return arr.astype(dtype)
        return arr.copy(order='F') if copy else arr

    def __copy__(self) -> "DenseMatrix":
        return self.dup()

    def __deepcopy__(self, memo) -> "DenseMatrix":
        return self.dup()

    def __eq__(self, other) -> bool:
        """Same shape and identical elements (NaN equals NaN)."""
        if not isinstance(other, MatrixBase):
            return NotImplemented
        return self.same_size(other) and np.array_equal(self._data, other.data, equal_nan=True)

    def __repr__(self) -> str:
        return f"DenseMatrix({self._rows}x{self._columns}, {self.to_nested_list()})"

    def __str__(self) -> str:
        rows = ("; ".join(", ".join(repr(v) for v in row) for row in self.to_nested_list()))
        return f"[{rows}]"

    # =========================================================================
    # Operators
    # =========================================================================

    def __add__(self, other):
        return self.add(other)

    def __radd__(self, other):
        return self.add(other)

    def __iadd__(self, other):
        return self.addi(other)

    def __sub__(self, other):
        return self.sub(other)

    def __rsub__(self, other):
        return self.rsub(other)

    def __isub__(self, other):
        return self.subi(other)

    def __mul__(self, other):
        return self.mul(other)

    def __rmul__(self, other):
        return self.mul(other)

    def __imul__(self, other):
        return self.muli(other)

    def __truediv__(self, other):
        return self.div(other)

    def __rtruediv__(self, other):
        return self.rdiv(other)

    def __itruediv__(self, other):
        return self.divi(other)

    def __matmul__(self, other):
        return self.mmul(other)

    def __rmatmul__(self, other):
        return self._as_matrix(other).mmul(self)

    def __neg__(self):
        return self.neg()

    def __invert__(self):
        return self.not_()

    def __and__(self, other):
        return self.and_(other)

    def __rand__(self, other):
        return self.and_(other)

    def __or__(self, other):
        return self.or_(other)

    def __ror__(self, other):
        return self.or_(other)

    def __xor__(self, other):
        return self.xor(other)

    def __rxor__(self, other):
        return self.xor(other)

    def __lt__(self, other):
        return self.lt(other)

    def __le__(self, other):
        return self.le(other)

    def __gt__(self, other):
        return self.gt(other)

    def __ge__(self, other):
        return self.ge(other)
