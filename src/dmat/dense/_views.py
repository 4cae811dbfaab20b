"""
Live Projections

Lightweight sequence objects over a matrix's buffer. They hold a reference
to the owning matrix plus an index and never copy data: reads see the
current contents and writes go straight into the matrix.

A view reads the matrix dimensions at every access, so it follows
``reshape``/``resize`` of its owner.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from ._matrix import DenseMatrix

__all__ = ['ElementsView', 'RowsView', 'RowView', 'ColumnsView', 'ColumnView']


def _normalize(i: int, n: int) -> int:
    if i < 0:
        i += n
    if i < 0 or i >= n:
        raise IndexError(f"View index out of range for length {n}")
    return i


class _MatrixView(Sequence):
    __slots__ = ("_matrix",)

    def __init__(self, matrix: "DenseMatrix"):
        self._matrix = matrix

    @property
    def matrix(self) -> "DenseMatrix":
        """The owning matrix."""
        return self._matrix


class ElementsView(_MatrixView):
    """All elements in linear (column-major) order."""

    __slots__ = ()

    def __len__(self) -> int:
        return self._matrix.length

    def __getitem__(self, i: int) -> float:
        return float(self._matrix.data[_normalize(i, len(self))])

    def __setitem__(self, i: int, value: float) -> None:
        self._matrix.data[_normalize(i, len(self))] = float(value)

    def __iter__(self) -> Iterator[float]:
        return iter(self._matrix.data.tolist())

    def __repr__(self) -> str:
        return f"ElementsView({self._matrix.data.tolist()})"


class RowView(_MatrixView):
    """Row ``r`` of the owning matrix."""

    __slots__ = ("_row",)

    def __init__(self, matrix: "DenseMatrix", row: int):
        super().__init__(matrix)
        self._row = row

    def __len__(self) -> int:
        return self._matrix.columns

    def __getitem__(self, c: int) -> float:
        return self._matrix.get(self._row, _normalize(c, len(self)))

    def __setitem__(self, c: int, value: float) -> None:
        self._matrix.put(self._row, _normalize(c, len(self)), value)

    def to_matrix(self) -> "DenseMatrix":
        """Copy of the row as a 1 x columns matrix."""
        return self._matrix.get_row(self._row)

    def __repr__(self) -> str:
        return f"RowView(row={self._row}, {list(self)})"


class ColumnView(_MatrixView):
    """Column ``c`` of the owning matrix."""

    __slots__ = ("_column",)

    def __init__(self, matrix: "DenseMatrix", column: int):
        super().__init__(matrix)
        self._column = column

    def __len__(self) -> int:
        return self._matrix.rows

    def __getitem__(self, r: int) -> float:
        return self._matrix.get(_normalize(r, len(self)), self._column)

    def __setitem__(self, r: int, value: float) -> None:
        self._matrix.put(_normalize(r, len(self)), self._column, value)

    def to_matrix(self) -> "DenseMatrix":
        """Copy of the column as a rows x 1 matrix."""
        return self._matrix.get_column(self._column)

    def __repr__(self) -> str:
        return f"ColumnView(column={self._column}, {list(self)})"


class RowsView(_MatrixView):
    """Sequence of ``RowView`` objects, one per row."""

    __slots__ = ()

    def __len__(self) -> int:
        return self._matrix.rows

    def __getitem__(self, r: int) -> RowView:
        return RowView(self._matrix, _normalize(r, len(self)))


class ColumnsView(_MatrixView):
    """Sequence of ``ColumnView`` objects, one per column."""

    __slots__ = ()

    def __len__(self) -> int:
        return self._matrix.columns

    def __getitem__(self, c: int) -> ColumnView:
        return ColumnView(self._matrix, _normalize(c, len(self)))
