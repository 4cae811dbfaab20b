"""
Index Model

Every selection accepted by ``get``/``put`` is one of four index kinds:

    LINEAR  a single int (linear offset, or a row/column when paired)
    LIST    an explicit ordered sequence of ints, used verbatim
    MASK    a matrix (or boolean array) whose non-zero entries select
            positions, taken in column-major traversal order
    RANGE   a ``Range`` cursor over legal positions along one axis

``Selector.of`` turns any accepted object into a tagged ``Selector`` and
``Selector.resolve`` turns that into an ordered array of positions. The
selection and arithmetic code only ever sees resolved positions.

Ranges are reinitializable cursors::

    r = Range.interval(1, 3)
    r.initialize(10)
    while r.has_next():
        print(r.index(), r.value())   # 0 1, 1 2, 2 3
        r.advance()
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence

import numpy as np

from .._errors import BoundsError
from .._typing import is_integer
from ._base import MatrixBase

__all__ = [
    'Range',
    'AllRange',
    'PointRange',
    'IntervalRange',
    'IndicesRange',
    'IndexKind',
    'Selector',
    'find_nonzero',
]


# =============================================================================
# Ranges
# =============================================================================

class Range(ABC):
    """
    Abstract cursor over legal positions along one axis.

    A range must be initialized with the axis bound before iterating and can
    be reinitialized any number of times; two-axis selections reinitialize
    the column range for every row.
    """

    def __init__(self):
        self._cursor = 0

    @abstractmethod
    def initialize(self, bound: int) -> None:
        """Reset the cursor for an axis with ``bound`` positions."""
        ...

    @abstractmethod
    def length(self) -> int:
        """Number of positions produced after ``initialize``."""
        ...

    @abstractmethod
    def value(self) -> int:
        """Position at the cursor."""
        ...

    def has_next(self) -> bool:
        return self._cursor < self.length()

    def advance(self) -> None:
        self._cursor += 1

    def index(self) -> int:
        """Ordinal of the cursor within the range (0, 1, ...)."""
        return self._cursor

    def positions(self, bound: int) -> np.ndarray:
        """Initialize for ``bound`` and collect every position in order."""
        self.initialize(bound)
        out = np.empty(self.length(), dtype=np.intp)
        while self.has_next():
            out[self.index()] = self.value()
            self.advance()
        return out

    # -------------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------------

    @staticmethod
    def all() -> "AllRange":
        """Every position ``[0, bound)``."""
        return AllRange()

    @staticmethod
    def point(i: int) -> "PointRange":
        """Exactly position ``i``."""
        return PointRange(i)

    @staticmethod
    def interval(a: int, b: int) -> "IntervalRange":
        """Positions ``a`` to ``b`` inclusive."""
        return IntervalRange(a, b)

    @staticmethod
    def indices(values: Sequence[int]) -> "IndicesRange":
        """The given positions, verbatim."""
        return IndicesRange(values)


class AllRange(Range):
    """All positions of the axis."""

    def __init__(self):
        super().__init__()
        self._bound = 0

    def initialize(self, bound: int) -> None:
        self._bound = bound
        self._cursor = 0

    def length(self) -> int:
        return self._bound

    def value(self) -> int:
        return self._cursor

    def positions(self, bound: int) -> np.ndarray:
        self.initialize(bound)
        return np.arange(bound, dtype=np.intp)

    def __repr__(self) -> str:
        return "Range.all()"


class PointRange(Range):
    """A single position."""

    def __init__(self, i: int):
        super().__init__()
        self._point = int(i)

    def initialize(self, bound: int) -> None:
        self._cursor = 0

    def length(self) -> int:
        return 1

    def value(self) -> int:
        return self._point

    def __repr__(self) -> str:
        return f"Range.point({self._point})"


class IntervalRange(Range):
    """Contiguous positions ``a..b``, both ends included."""

    def __init__(self, a: int, b: int):
        super().__init__()
        self._start = int(a)
        self._end = int(b)

    def initialize(self, bound: int) -> None:
        self._cursor = 0

    def length(self) -> int:
        return max(0, self._end - self._start + 1)

    def value(self) -> int:
        return self._start + self._cursor

    def positions(self, bound: int) -> np.ndarray:
        self.initialize(bound)
        return np.arange(self._start, self._start + self.length(), dtype=np.intp)

    def __repr__(self) -> str:
        return f"Range.interval({self._start}, {self._end})"


class IndicesRange(Range):
    """An explicit list of positions."""

    def __init__(self, values: Sequence[int]):
        super().__init__()
        self._values = _as_positions(values)

    def initialize(self, bound: int) -> None:
        self._cursor = 0

    def length(self) -> int:
        return self._values.shape[0]

    def value(self) -> int:
        return int(self._values[self._cursor])

    def positions(self, bound: int) -> np.ndarray:
        self.initialize(bound)
        return self._values.copy()

    def __repr__(self) -> str:
        return f"Range.indices({self._values.tolist()})"


class _SliceRange(Range):
    """Python ``slice`` resolved against the axis bound."""

    def __init__(self, s: slice):
        super().__init__()
        self._slice = s
        self._range = range(0)

    def initialize(self, bound: int) -> None:
        self._range = range(*self._slice.indices(bound))
        self._cursor = 0

    def length(self) -> int:
        return len(self._range)

    def value(self) -> int:
        return self._range[self._cursor]

    def positions(self, bound: int) -> np.ndarray:
        self.initialize(bound)
        return np.arange(self._range.start, self._range.stop, self._range.step, dtype=np.intp)


# =============================================================================
# Selectors
# =============================================================================

class IndexKind(Enum):
    """The four kinds of index accepted by selections."""
    LINEAR = "linear"
    LIST = "list"
    MASK = "mask"
    RANGE = "range"


def _as_positions(values: Any) -> np.ndarray:
    arr = np.asarray(values)
    if arr.size == 0:
        return np.empty(0, dtype=np.intp)
    if arr.dtype.kind not in "iu":
        if arr.dtype.kind == "f" and np.all(np.floor(arr) == arr):
            arr = arr.astype(np.intp)
        else:
            raise TypeError(f"Index list must contain integers, got dtype {arr.dtype}")
    return arr.astype(np.intp, copy=True).ravel()


def find_nonzero(values: np.ndarray) -> np.ndarray:
    """
    Linear positions of the non-zero entries of a flat buffer.

    Exact comparison with 0.0 (NaN counts as non-zero), matching
    ``get(i) != 0.0`` element by element.
    """
    return np.flatnonzero(values != 0.0).astype(np.intp)


@dataclass(frozen=True)
class Selector:
    """
    Tagged index selection.

    Attributes:
        kind: Which of the four index kinds this is
        payload: int (LINEAR), position array (LIST), flat column-major
            mask values (MASK) or a ``Range`` (RANGE)
    """

    kind: IndexKind
    payload: Any

    @classmethod
    def of(cls, obj: Any) -> "Selector":
        """
        Classify an index-like object.

        Raises:
            TypeError: If the object cannot be used as an index
        """
        if isinstance(obj, Selector):
            return obj
        if is_integer(obj):
            return cls(IndexKind.LINEAR, int(obj))
        if isinstance(obj, Range):
            return cls(IndexKind.RANGE, obj)
        if isinstance(obj, slice):
            return cls(IndexKind.RANGE, _SliceRange(obj))

        if isinstance(obj, MatrixBase):
            return cls(IndexKind.MASK, obj.data)

        if isinstance(obj, np.ndarray):
            if obj.dtype == np.bool_:
                return cls(IndexKind.MASK, obj.ravel(order='F'))
            return cls(IndexKind.LIST, _as_positions(obj))

        if isinstance(obj, (list, tuple, range)):
            if len(obj) > 0 and all(isinstance(v, (bool, np.bool_)) for v in obj):
                return cls(IndexKind.MASK, np.asarray(obj, dtype=np.bool_))
            return cls(IndexKind.LIST, _as_positions(list(obj)))

        raise TypeError(f"Cannot index a matrix with {type(obj).__name__}")

    @property
    def is_single(self) -> bool:
        """True for a LINEAR selector (a fixed axis)."""
        return self.kind is IndexKind.LINEAR

    def resolve(self, bound: int) -> np.ndarray:
        """
        Resolve to an ordered array of positions in ``[0, bound)``.

        Raises:
            BoundsError: If any position falls outside ``[0, bound)``
        """
        if self.kind is IndexKind.LINEAR:
            positions = np.array([self.payload], dtype=np.intp)
        elif self.kind is IndexKind.LIST:
            positions = self.payload
        elif self.kind is IndexKind.MASK:
            positions = find_nonzero(self.payload)
        else:
            positions = self.payload.positions(bound)

        if positions.size and (positions.min() < 0 or positions.max() >= bound):
            bad = positions[(positions < 0) | (positions >= bound)][0]
            raise BoundsError(f"Index {bad} out of bounds for axis of size {bound}")
        return positions
