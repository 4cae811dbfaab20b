"""
Shape and Storage

Defines ``MatrixBase``, the storage layer shared by every dense matrix:

    - dimensions (rows, columns) and length = rows * columns
    - a flat, contiguous float64 buffer in column-major order, element
      (r, c) at offset ``r + rows * c``

The buffer length always equals ``rows * columns``. Dimensions can only be
changed through ``resize`` (discards content) and ``reshape`` (keeps
content, same element count), which both preserve that invariant.

Ownership:
    A matrix owns its buffer, except when built with ``DenseMatrix.wrap``,
    which aliases caller memory. Mutations are then visible through both
    the matrix and the caller's array.
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from .._config import get_kernel
from .._errors import BoundsError, ShapeMismatchError
from .._kernel.base import Kernel
from .._typing import OperandLike

__all__ = ['MatrixBase']


class MatrixBase:
    """
    Column-major storage and shape bookkeeping.

    Subclasses never touch ``_rows``/``_columns``/``_data`` directly except
    through ``_set_storage``, which enforces the shape invariant.
    """

    __slots__ = ("_rows", "_columns", "_data", "__weakref__")

    def _set_storage(self, rows: int, columns: int, data: np.ndarray) -> None:
        if rows < 0 or columns < 0:
            raise ValueError(f"Matrix dimensions must be non-negative, got {rows}x{columns}")
        if data.ndim != 1 or data.shape[0] != rows * columns:
            raise ShapeMismatchError(
                f"Buffer of length {data.size} does not hold a {rows}x{columns} matrix"
            )
        self._rows = int(rows)
        self._columns = int(columns)
        self._data = data

    @classmethod
    def _new(cls, rows: int, columns: int, data: Optional[np.ndarray] = None):
        """Build an instance around ``data`` (taken as is) or a zero buffer."""
        obj = cls.__new__(cls)
        if data is None:
            data = np.zeros(rows * columns)
        obj._set_storage(rows, columns, data)
        return obj

    @classmethod
    def _as_matrix(cls, value: OperandLike) -> "MatrixBase":
        """
        Coerce an operand to a matrix.

        Matrices pass through untouched. Numbers become 1x1 matrices, 1-D
        sequences column vectors and 2-D sequences/arrays row-major nested
        data. Values are copied.

        Raises:
            TypeError: If the value is not numeric or is a ragged sequence
            ShapeMismatchError: For arrays with more than two dimensions
        """
        if isinstance(value, MatrixBase):
            return value
        try:
            arr = np.array(value, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise TypeError(f"Cannot use {type(value).__name__} as a matrix operand") from e
        if arr.ndim == 0:
            return cls._new(1, 1, arr.reshape(1))
        if arr.ndim == 1:
            return cls._new(arr.shape[0], 1, arr)
        if arr.ndim == 2:
            return cls._new(arr.shape[0], arr.shape[1], arr.ravel(order='F'))
        raise ShapeMismatchError(f"Expected at most 2 dimensions, got {arr.ndim}")

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def rows(self) -> int:
        """Number of rows."""
        return self._rows

    @property
    def columns(self) -> int:
        """Number of columns."""
        return self._columns

    @property
    def length(self) -> int:
        """Total number of elements (rows * columns)."""
        return self._rows * self._columns

    @property
    def shape(self) -> Tuple[int, int]:
        """Matrix dimensions (rows, columns)."""
        return (self._rows, self._columns)

    @property
    def data(self) -> np.ndarray:
        """
        The live column-major buffer.

        The array itself is mutable; writes are visible through the matrix.
        Dimensions cannot be changed through it.
        """
        return self._data

    @staticmethod
    def _kernel() -> Kernel:
        return get_kernel()

    # =========================================================================
    # Shape Changes
    # =========================================================================

    def resize(self, new_rows: int, new_columns: int) -> "MatrixBase":
        """Discard the content and reallocate a zero-filled buffer."""
        self._set_storage(new_rows, new_columns, np.zeros(max(new_rows, 0) * max(new_columns, 0)))
        return self

    def reshape(self, new_rows: int, new_columns: int) -> "MatrixBase":
        """
        Reinterpret the buffer with new dimensions (in place).

        Raises:
            ShapeMismatchError: If ``new_rows * new_columns != length``
        """
        if new_rows < 0 or new_columns < 0 or new_rows * new_columns != self.length:
            raise ShapeMismatchError(
                f"Cannot reshape {self._rows}x{self._columns} to {new_rows}x{new_columns}: "
                f"number of elements must not change"
            )
        self._rows = int(new_rows)
        self._columns = int(new_columns)
        return self

    # =========================================================================
    # Index Arithmetic
    # =========================================================================

    def index(self, row: int, column: int) -> int:
        """Linear offset of element (row, column)."""
        return row + self._rows * column

    def row_of(self, i: int) -> int:
        """Row of linear index ``i``."""
        return i - self.column_of(i) * self._rows

    def column_of(self, i: int) -> int:
        """Column of linear index ``i``."""
        return i // self._rows

    def _check_linear(self, i: int) -> int:
        if i < 0 or i >= self.length:
            raise BoundsError(f"Linear index {i} out of bounds for length {self.length}")
        return i

    def _check_row(self, r: int) -> int:
        if r < 0 or r >= self._rows:
            raise BoundsError(f"Row index {r} out of bounds for {self._rows} rows")
        return r

    def _check_column(self, c: int) -> int:
        if c < 0 or c >= self._columns:
            raise BoundsError(f"Column index {c} out of bounds for {self._columns} columns")
        return c

    # =========================================================================
    # Shape Predicates
    # =========================================================================

    def is_empty(self) -> bool:
        return self._rows == 0 or self._columns == 0

    def is_scalar(self) -> bool:
        """True for a 1-element matrix (interchangeable with a number)."""
        return self.length == 1

    def is_square(self) -> bool:
        return self._rows == self._columns

    def is_vector(self) -> bool:
        return self._rows == 1 or self._columns == 1

    def is_row_vector(self) -> bool:
        return self._rows == 1

    def is_column_vector(self) -> bool:
        return self._columns == 1

    def same_size(self, other: "MatrixBase") -> bool:
        return self._rows == other._rows and self._columns == other._columns

    def multiplies_with(self, other: "MatrixBase") -> bool:
        """True if ``self.columns == other.rows``."""
        return self._columns == other._rows

    # =========================================================================
    # Shape Assertions
    # =========================================================================

    def check_length(self, n: int) -> None:
        if self.length != n:
            raise ShapeMismatchError(
                f"Matrix does not have the necessary length ({self.length} != {n})"
            )

    def check_rows(self, r: int) -> None:
        if self._rows != r:
            raise ShapeMismatchError(
                f"Matrix does not have the necessary number of rows ({self._rows} != {r})"
            )

    def check_columns(self, c: int) -> None:
        if self._columns != c:
            raise ShapeMismatchError(
                f"Matrix does not have the necessary number of columns ({self._columns} != {c})"
            )

    def assert_square(self) -> None:
        if not self.is_square():
            raise ShapeMismatchError(f"Matrix must be square, got {self._rows}x{self._columns}")

    def assert_same_size(self, other: "MatrixBase") -> None:
        if not self.same_size(other):
            raise ShapeMismatchError(
                f"Matrices must have the same size ({self._rows}x{self._columns} "
                f"and {other._rows}x{other._columns})"
            )

    def assert_same_length(self, other: "MatrixBase") -> None:
        if self.length != other.length:
            raise ShapeMismatchError(
                f"Matrices must have same length (is: {self.length} and {other.length})"
            )

    def assert_multiplies_with(self, other: "MatrixBase") -> None:
        if not self.multiplies_with(other):
            raise ShapeMismatchError(
                "Number of columns of left matrix must be equal to number of rows "
                f"of right matrix ({self._columns} != {other._rows})"
            )

    # =========================================================================
    # Internal Views
    # =========================================================================

    def _view2d(self) -> np.ndarray:
        """Fortran-ordered 2-D view of the buffer (no copy)."""
        return self._data.reshape((self._rows, self._columns), order='F')
