"""
Arithmetic Engine

Elementwise and broadcast binary operators, unary transforms, matrix
products and vector algebra.

Every binary operator exists twice:

    op(other, out=None)    allocating unless ``out`` is given
    opi(other, out=None)   writes into ``out``, defaulting to self

and follows the same dispatch:

    1. ``other`` is a number or 1x1 matrix: broadcast it (scalar form)
    2. self is a 1x1 matrix: swap operands and use the reflected operator
    3. otherwise both lengths must match (shapes may differ)
    4. ``out`` of another length is resized, unless it is one of the
       operands, which is a ``SizeError``
    5. the computation branches on how ``out`` aliases the operands
       (see ``Aliasing``)

Comparison and logical operators yield 1.0/0.0; logical operators treat
any non-zero value as true.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, Optional

import numpy as np

from .._errors import ShapeMismatchError, SizeError
from .._typing import MatrixLike, OperandLike, is_number
from ._base import MatrixBase

if TYPE_CHECKING:
    from ._matrix import DenseMatrix

__all__ = ['Aliasing', 'classify', 'ArithmeticMixin']


# =============================================================================
# Aliasing
# =============================================================================

class Aliasing(Enum):
    """How a destination relates to the operands of an operation."""
    INDEPENDENT = "independent"  # no shared memory
    LEFT = "left"                # destination is the left operand's buffer
    RIGHT = "right"              # destination is the right operand's buffer
    OVERLAP = "overlap"          # partial overlap, computed via a temporary


def _shares(a: MatrixBase, b: MatrixBase) -> bool:
    return a is b or a.data is b.data or np.shares_memory(a.data, b.data)


def classify(result: MatrixBase, left: MatrixBase, right: Optional[MatrixBase] = None) -> Aliasing:
    """
    Determine how ``result`` aliases ``left`` and ``right``.

    Exact buffer identity gives LEFT/RIGHT; any other shared memory gives
    OVERLAP.
    """
    same_left = result.data is left.data
    same_right = right is not None and result.data is right.data
    if not same_left and np.shares_memory(result.data, left.data):
        return Aliasing.OVERLAP
    if right is not None and not same_right and np.shares_memory(result.data, right.data):
        return Aliasing.OVERLAP
    if same_left:
        return Aliasing.LEFT
    if same_right:
        return Aliasing.RIGHT
    return Aliasing.INDEPENDENT


# =============================================================================
# Operator Tables
# =============================================================================

_REFLECTED: Dict[str, str] = {
    'add': 'add', 'sub': 'rsub', 'rsub': 'sub',
    'mul': 'mul', 'div': 'rdiv', 'rdiv': 'div',
    'lt': 'gt', 'gt': 'lt', 'le': 'ge', 'ge': 'le', 'eq': 'eq', 'ne': 'ne',
    'and': 'and', 'or': 'or', 'xor': 'xor',
    'min': 'min', 'max': 'max',
}

_ARITHMETIC: Dict[str, Callable] = {
    'add': np.add,
    'sub': np.subtract,
    'rsub': lambda a, b, out=None: np.subtract(b, a, out=out),
    'mul': np.multiply,
    'div': np.divide,
    'rdiv': lambda a, b, out=None: np.divide(b, a, out=out),
    'min': np.minimum,
    'max': np.maximum,
}

_PREDICATES: Dict[str, Callable] = {
    'lt': np.less,
    'le': np.less_equal,
    'gt': np.greater,
    'ge': np.greater_equal,
    'eq': np.equal,
    'ne': np.not_equal,
    'and': lambda a, b: np.logical_and(np.not_equal(a, 0.0), np.not_equal(b, 0.0)),
    'or': lambda a, b: np.logical_or(np.not_equal(a, 0.0), np.not_equal(b, 0.0)),
    'xor': lambda a, b: np.logical_xor(np.not_equal(a, 0.0), np.not_equal(b, 0.0)),
}


def _apply(op: str, a, b, out: np.ndarray, alias: Aliasing) -> None:
    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        if op in _PREDICATES:
            np.copyto(out, _PREDICATES[op](a, b))
        elif alias is Aliasing.OVERLAP:
            np.copyto(out, _ARITHMETIC[op](a, b))
        else:
            _ARITHMETIC[op](a, b, out=out)


def _nanmax(values: np.ndarray) -> float:
    return float(np.fmax.reduce(values, initial=-np.inf))


class ArithmeticMixin:
    """Operators for ``DenseMatrix``."""

    __slots__ = ()

    # =========================================================================
    # Dispatch
    # =========================================================================

    def _ensure_result(self, out: Optional[MatrixBase], *operands: MatrixBase):
        """Allocate, validate or resize the destination of an elementwise op."""
        if out is None:
            return self._new(self._rows, self._columns)
        if not isinstance(out, MatrixBase):
            raise TypeError(f"out must be a matrix, got {type(out).__name__}")
        if out.length != self.length:
            if any(_shares(out, m) for m in (self,) + operands):
                raise SizeError("Cannot resize result matrix because it is used in-place")
            out.resize(self._rows, self._columns)
        return out

    def _elementwise(self, op: str, other: OperandLike, out: Optional[MatrixBase]):
        if is_number(other):
            return self._scalar_op(op, float(other), out)
        other = self._as_matrix(other)
        if other.is_scalar():
            return self._scalar_op(op, float(other.data[0]), out, other)
        if self.is_scalar():
            return other._scalar_op(_REFLECTED[op], float(self._data[0]), out, self)

        self.assert_same_length(other)
        out = self._ensure_result(out, other)
        alias = classify(out, self, other)
        if op == 'add':
            self._add_into(other, out, alias)
        elif op == 'sub':
            self._sub_into(other, out, alias)
        else:
            _apply(op, self._data, other.data, out.data, alias)
        return out

    def _scalar_op(self, op: str, value: float, out: Optional[MatrixBase], *operands: MatrixBase):
        out = self._ensure_result(out, *operands)
        _apply(op, self._data, value, out.data, classify(out, self))
        return out

    def _add_into(self, other: MatrixBase, out: MatrixBase, alias: Aliasing) -> None:
        kernel = self._kernel()
        n = self.length
        if alias is Aliasing.LEFT:
            kernel.axpy(n, 1.0, other.data, out.data)
        elif alias is Aliasing.RIGHT:
            kernel.axpy(n, 1.0, self._data, out.data)
        elif alias is Aliasing.INDEPENDENT:
            kernel.copy(n, self._data, 0, 1, out.data, 0, 1)
            kernel.axpy(n, 1.0, other.data, out.data)
        else:
            temp = self._data.copy()
            kernel.axpy(n, 1.0, other.data, temp)
            np.copyto(out.data, temp)

    def _sub_into(self, other: MatrixBase, out: MatrixBase, alias: Aliasing) -> None:
        kernel = self._kernel()
        n = self.length
        if alias is Aliasing.LEFT:
            kernel.axpy(n, -1.0, other.data, out.data)
        elif alias is Aliasing.RIGHT:
            # out holds other: negate it, then add self
            kernel.scale(n, -1.0, out.data)
            kernel.axpy(n, 1.0, self._data, out.data)
        elif alias is Aliasing.INDEPENDENT:
            kernel.copy(n, self._data, 0, 1, out.data, 0, 1)
            kernel.axpy(n, -1.0, other.data, out.data)
        else:
            temp = self._data.copy()
            kernel.axpy(n, -1.0, other.data, temp)
            np.copyto(out.data, temp)

    def _target(self, out: Optional[MatrixBase]):
        return self if out is None else out

    # =========================================================================
    # Arithmetic
    # =========================================================================

    def add(self, other: OperandLike, out: Optional[MatrixBase] = None) -> "DenseMatrix":
        """Addition: A + B"""
        return self._elementwise('add', other, out)

    def addi(self, other: OperandLike, out: Optional[MatrixBase] = None) -> "DenseMatrix":
        """Addition into ``out`` (default: self)."""
        return self._elementwise('add', other, self._target(out))

    def sub(self, other: OperandLike, out: Optional[MatrixBase] = None) -> "DenseMatrix":
        """Subtraction: A - B"""
        return self._elementwise('sub', other, out)

    def subi(self, other: OperandLike, out: Optional[MatrixBase] = None) -> "DenseMatrix":
        return self._elementwise('sub', other, self._target(out))

    def rsub(self, other: OperandLike, out: Optional[MatrixBase] = None) -> "DenseMatrix":
        """Reversed subtraction: B - A"""
        return self._elementwise('rsub', other, out)

    def rsubi(self, other: OperandLike, out: Optional[MatrixBase] = None) -> "DenseMatrix":
        return self._elementwise('rsub', other, self._target(out))

    def mul(self, other: OperandLike, out: Optional[MatrixBase] = None) -> "DenseMatrix":
        """Elementwise multiplication: A * B"""
        return self._elementwise('mul', other, out)

    def muli(self, other: OperandLike, out: Optional[MatrixBase] = None) -> "DenseMatrix":
        return self._elementwise('mul', other, self._target(out))

    def div(self, other: OperandLike, out: Optional[MatrixBase] = None) -> "DenseMatrix":
        """Elementwise division: A / B"""
        return self._elementwise('div', other, out)

    def divi(self, other: OperandLike, out: Optional[MatrixBase] = None) -> "DenseMatrix":
        return self._elementwise('div', other, self._target(out))

    def rdiv(self, other: OperandLike, out: Optional[MatrixBase] = None) -> "DenseMatrix":
        """Reversed division: B / A"""
        return self._elementwise('rdiv', other, out)

    def rdivi(self, other: OperandLike, out: Optional[MatrixBase] = None) -> "DenseMatrix":
        return self._elementwise('rdiv', other, self._target(out))

    # =========================================================================
    # Comparison (1.0 / 0.0)
    # =========================================================================

    def lt(self, other: OperandLike, out: Optional[MatrixBase] = None) -> "DenseMatrix":
        return self._elementwise('lt', other, out)

    def lti(self, other: OperandLike, out: Optional[MatrixBase] = None) -> "DenseMatrix":
        return self._elementwise('lt', other, self._target(out))

    def le(self, other: OperandLike, out: Optional[MatrixBase] = None) -> "DenseMatrix":
        return self._elementwise('le', other, out)

    def lei(self, other: OperandLike, out: Optional[MatrixBase] = None) -> "DenseMatrix":
        return self._elementwise('le', other, self._target(out))

    def gt(self, other: OperandLike, out: Optional[MatrixBase] = None) -> "DenseMatrix":
        return self._elementwise('gt', other, out)

    def gti(self, other: OperandLike, out: Optional[MatrixBase] = None) -> "DenseMatrix":
        return self._elementwise('gt', other, self._target(out))

    def ge(self, other: OperandLike, out: Optional[MatrixBase] = None) -> "DenseMatrix":
        return self._elementwise('ge', other, out)

    def gei(self, other: OperandLike, out: Optional[MatrixBase] = None) -> "DenseMatrix":
        return self._elementwise('ge', other, self._target(out))

    def eq(self, other: OperandLike, out: Optional[MatrixBase] = None) -> "DenseMatrix":
        """Elementwise equality; ``==`` is structural equality instead."""
        return self._elementwise('eq', other, out)

    def eqi(self, other: OperandLike, out: Optional[MatrixBase] = None) -> "DenseMatrix":
        return self._elementwise('eq', other, self._target(out))

    def ne(self, other: OperandLike, out: Optional[MatrixBase] = None) -> "DenseMatrix":
        return self._elementwise('ne', other, out)

    def nei(self, other: OperandLike, out: Optional[MatrixBase] = None) -> "DenseMatrix":
        return self._elementwise('ne', other, self._target(out))

    # =========================================================================
    # Logical (non-zero is true)
    # =========================================================================

    def and_(self, other: OperandLike, out: Optional[MatrixBase] = None) -> "DenseMatrix":
        return self._elementwise('and', other, out)

    def andi(self, other: OperandLike, out: Optional[MatrixBase] = None) -> "DenseMatrix":
        return self._elementwise('and', other, self._target(out))

    def or_(self, other: OperandLike, out: Optional[MatrixBase] = None) -> "DenseMatrix":
        return self._elementwise('or', other, out)

    def ori(self, other: OperandLike, out: Optional[MatrixBase] = None) -> "DenseMatrix":
        return self._elementwise('or', other, self._target(out))

    def xor(self, other: OperandLike, out: Optional[MatrixBase] = None) -> "DenseMatrix":
        return self._elementwise('xor', other, out)

    def xori(self, other: OperandLike, out: Optional[MatrixBase] = None) -> "DenseMatrix":
        return self._elementwise('xor', other, self._target(out))

    # =========================================================================
    # Row / Column Vector Broadcast
    # =========================================================================

    def _vector_op(self, op: str, vector: MatrixLike, along_rows: bool, out: Optional[MatrixBase]):
        """
        Combine every row (``along_rows``) or column with ``vector``.

        Element (r, c) pairs with ``vector[c]`` for a row vector and
        ``vector[r]`` for a column vector.
        """
        vector = self._as_matrix(vector)
        vector.check_length(self._columns if along_rows else self._rows)
        out = self._ensure_result(out, vector)
        alias = classify(out, self, vector)
        shape = (1, self._columns) if along_rows else (self._rows, 1)
        operand = vector.data.reshape(shape)
        target = out.data.reshape((self._rows, self._columns), order='F')
        _apply(op, self._view2d(), operand, target, alias)
        return out

    def add_row_vector(self, x: MatrixLike) -> "DenseMatrix":
        """Add ``x`` to every row."""
        return self._vector_op('add', x, True, None)

    def addi_row_vector(self, x: MatrixLike) -> "DenseMatrix":
        return self._vector_op('add', x, True, self)

    def add_column_vector(self, x: MatrixLike) -> "DenseMatrix":
        """Add ``x`` to every column."""
        return self._vector_op('add', x, False, None)

    def addi_column_vector(self, x: MatrixLike) -> "DenseMatrix":
        return self._vector_op('add', x, False, self)

    def sub_row_vector(self, x: MatrixLike) -> "DenseMatrix":
        return self._vector_op('sub', x, True, None)

    def subi_row_vector(self, x: MatrixLike) -> "DenseMatrix":
        return self._vector_op('sub', x, True, self)

    def sub_column_vector(self, x: MatrixLike) -> "DenseMatrix":
        return self._vector_op('sub', x, False, None)

    def subi_column_vector(self, x: MatrixLike) -> "DenseMatrix":
        return self._vector_op('sub', x, False, self)

    def mul_row_vector(self, x: MatrixLike) -> "DenseMatrix":
        return self._vector_op('mul', x, True, None)

    def muli_row_vector(self, x: MatrixLike) -> "DenseMatrix":
        return self._vector_op('mul', x, True, self)

    def mul_column_vector(self, x: MatrixLike) -> "DenseMatrix":
        return self._vector_op('mul', x, False, None)

    def muli_column_vector(self, x: MatrixLike) -> "DenseMatrix":
        return self._vector_op('mul', x, False, self)

    def div_row_vector(self, x: MatrixLike) -> "DenseMatrix":
        return self._vector_op('div', x, True, None)

    def divi_row_vector(self, x: MatrixLike) -> "DenseMatrix":
        return self._vector_op('div', x, True, self)

    def div_column_vector(self, x: MatrixLike) -> "DenseMatrix":
        return self._vector_op('div', x, False, None)

    def divi_column_vector(self, x: MatrixLike) -> "DenseMatrix":
        return self._vector_op('div', x, False, self)

    # =========================================================================
    # Unary
    # =========================================================================

    def _unary(self, fn: Callable, out: Optional[MatrixBase]):
        out = self._ensure_result(out)
        np.copyto(out.data, fn(self._data))
        return out

    def neg(self) -> "DenseMatrix":
        """Negation: -A"""
        return self._unary(np.negative, None)

    def negi(self) -> "DenseMatrix":
        return self._unary(np.negative, self)

    def not_(self) -> "DenseMatrix":
        """1.0 where an element is zero, else 0.0."""
        return self._unary(lambda x: x == 0.0, None)

    def noti(self) -> "DenseMatrix":
        return self._unary(lambda x: x == 0.0, self)

    def truth(self) -> "DenseMatrix":
        """1.0 where an element is non-zero, else 0.0."""
        return self._unary(lambda x: x != 0.0, None)

    def truthi(self) -> "DenseMatrix":
        return self._unary(lambda x: x != 0.0, self)

    def isnan(self) -> "DenseMatrix":
        return self._unary(np.isnan, None)

    def isnani(self) -> "DenseMatrix":
        return self._unary(np.isnan, self)

    def isinf(self) -> "DenseMatrix":
        return self._unary(np.isinf, None)

    def isinfi(self) -> "DenseMatrix":
        return self._unary(np.isinf, self)

    # =========================================================================
    # Matrix Products
    # =========================================================================

    def mmul(self, other: OperandLike, out: Optional[MatrixBase] = None) -> "DenseMatrix":
        """
        Matrix product: A @ B

        A single-column right operand goes through ``gemv``, anything else
        through ``gemm``. A 1x1 operand degrades to scalar multiplication.
        When ``out`` shares memory with an operand the product is formed in
        a temporary and copied into ``out`` afterwards.

        Args:
            other: Right operand with ``other.rows == self.columns``
            out: Destination; resized to (rows, other.columns) when needed

        Returns:
            The product matrix (``out`` when given)

        Raises:
            ShapeMismatchError: If the inner dimensions differ
            SizeError: If ``out`` is an operand of the wrong shape
        """
        if is_number(other):
            return self._scalar_op('mul', float(other), out)
        other = self._as_matrix(other)
        if other.is_scalar():
            return self._scalar_op('mul', float(other.data[0]), out, other)
        if self.is_scalar():
            return other._scalar_op('mul', float(self._data[0]), out, self)

        self.assert_multiplies_with(other)
        m, k, n = self._rows, self._columns, other.columns
        if out is None:
            out = self._new(m, n)
        elif out.rows != m or out.columns != n:
            if _shares(out, self) or _shares(out, other):
                raise SizeError("Cannot resize result matrix because it is used in-place")
            out.resize(m, n)

        alias = classify(out, self, other)
        target = out.data if alias is Aliasing.INDEPENDENT else np.zeros(m * n)
        kernel = self._kernel()
        if n == 1:
            kernel.gemv(1.0, self._data, m, k, other.data, 0.0, target)
        else:
            kernel.gemm(1.0, self._data, other.data, m, n, k, 0.0, target)
        if target is not out.data:
            kernel.copy(m * n, target, 0, 1, out.data, 0, 1)
        return out

    def mmuli(self, other: OperandLike, out: Optional[MatrixBase] = None) -> "DenseMatrix":
        """Matrix product into ``out`` (default: self)."""
        return self.mmul(other, self._target(out))

    def rank_one_update(self, x, y=None, alpha: float = 1.0) -> "DenseMatrix":
        """
        In-place rank-1 update ``A += alpha * x y'`` (``y`` defaults to ``x``).

        Raises:
            ShapeMismatchError: If ``len(x) != rows`` or ``len(y) != columns``
        """
        x = self._as_matrix(x)
        y = x if y is None else self._as_matrix(y)
        if x.length != self._rows:
            raise ShapeMismatchError(f"Vector x has wrong length ({x.length} != {self._rows})")
        if y.length != self._columns:
            raise ShapeMismatchError(f"Vector y has wrong length ({y.length} != {self._columns})")
        xd = x.data.copy() if _shares(x, self) else x.data
        yd = y.data.copy() if _shares(y, self) else y.data
        self._kernel().ger(alpha, xd, yd, self._data, self._rows, self._columns)
        return self

    # =========================================================================
    # Vector Algebra
    # =========================================================================

    def dot(self, other: MatrixLike) -> float:
        """Inner product of the two matrices read as vectors."""
        other = self._as_matrix(other)
        self.assert_same_length(other)
        return self._kernel().dot(self.length, self._data, other.data)

    def project(self, other: MatrixLike) -> float:
        """
        Projection coefficient of ``other`` on self.

        ``project(other) * self`` is the orthogonal projection of ``other``
        onto self.
        """
        other = self._as_matrix(other)
        other.check_length(self.length)
        kernel = self._kernel()
        return kernel.dot(self.length, self._data, other.data) / kernel.dot(self.length, self._data, self._data)

    def norm1(self) -> float:
        """Sum of absolute values."""
        return float(np.sum(np.abs(self._data)))

    def norm2(self) -> float:
        """Euclidean (Frobenius) norm."""
        return float(np.sqrt(self._kernel().dot(self.length, self._data, self._data)))

    def normmax(self) -> float:
        """Largest absolute value (0.0 for an empty matrix)."""
        return float(np.fmax.reduce(np.abs(self._data), initial=0.0))

    def squared_distance(self, other: MatrixLike) -> float:
        other = self._as_matrix(other)
        other.check_length(self.length)
        d = self._data - other.data
        return float(np.dot(d, d))

    def distance2(self, other: MatrixLike) -> float:
        """Euclidean distance."""
        return float(np.sqrt(self.squared_distance(other)))

    def distance1(self, other: MatrixLike) -> float:
        """Manhattan distance."""
        other = self._as_matrix(other)
        other.check_length(self.length)
        return float(np.sum(np.abs(self._data - other.data)))

    def compare(self, other, tolerance: float) -> bool:
        """
        Approximate equality.

        True when ``other`` is a matrix of the same size whose largest
        absolute difference, divided by the element count, is below
        ``tolerance``.
        """
        if not isinstance(other, MatrixBase) or not self.same_size(other):
            return False
        if self.is_empty():
            return True
        diff = np.abs(self._data - other.data)
        return _nanmax(diff) / self.length < tolerance

