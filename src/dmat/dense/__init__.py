"""
dmat.dense - Dense column-major matrices.

Modules:
    - _base: shape and storage (``MatrixBase``)
    - _index: index kinds, ``Range`` cursors and selector resolution
    - _select: ``get``/``put`` family, rows, columns, views
    - _arith: elementwise/broadcast operators, products, aliasing rules
    - _reduce: reductions, per-axis aggregates, sorting
    - _io: binary persistence and text parsing
    - _matrix: ``DenseMatrix``
    - _ops: factory functions
"""

from ._arith import Aliasing, classify
from ._base import MatrixBase
from ._index import (
    AllRange,
    IndexKind,
    IndicesRange,
    IntervalRange,
    PointRange,
    Range,
    Selector,
    find_nonzero,
)
from ._matrix import DenseMatrix
from ._ops import (
    concat_horizontally,
    concat_vertically,
    diag,
    empty,
    eye,
    linspace,
    logspace,
    ones,
    rand,
    randn,
    scalar,
    zeros,
)
from ._views import ColumnsView, ColumnView, ElementsView, RowsView, RowView

# Short alias
Matrix = DenseMatrix

__all__ = [
    # Matrix
    "MatrixBase",
    "DenseMatrix",
    "Matrix",
    # Index model
    "Range",
    "AllRange",
    "PointRange",
    "IntervalRange",
    "IndicesRange",
    "IndexKind",
    "Selector",
    "find_nonzero",
    # Aliasing
    "Aliasing",
    "classify",
    # Views
    "ElementsView",
    "RowsView",
    "RowView",
    "ColumnsView",
    "ColumnView",
    # Factories
    "zeros",
    "ones",
    "eye",
    "diag",
    "scalar",
    "rand",
    "randn",
    "linspace",
    "logspace",
    "concat_horizontally",
    "concat_vertically",
    "empty",
]
