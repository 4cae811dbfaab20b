"""
dmat Type Definitions.

Type aliases used across the dense matrix package. They describe what the
selection and arithmetic entry points accept:

    - Scalars: Python/numpy numbers, or a 1x1 ``DenseMatrix``
    - Index-likes: an int, a sequence of ints, a mask matrix, a ``Range``
      or a Python ``slice``
"""

from __future__ import annotations

import numbers
from typing import TYPE_CHECKING, Sequence, Union

import numpy as np

if TYPE_CHECKING:
    from dmat.dense import DenseMatrix, Range


Number = Union[int, float, np.integer, np.floating]

ScalarLike = Union[Number, "DenseMatrix"]

IndexLike = Union[int, Sequence[int], np.ndarray, "DenseMatrix", "Range", slice]

MatrixLike = Union["DenseMatrix", Sequence[float], Sequence[Sequence[float]], np.ndarray]

OperandLike = Union[ScalarLike, MatrixLike]


def is_number(value) -> bool:
    """True for real numbers, excluding bools."""
    return isinstance(value, numbers.Real) and not isinstance(value, (bool, np.bool_))


def is_integer(value) -> bool:
    """True for integral values, excluding bools."""
    return isinstance(value, (numbers.Integral, np.integer)) and not isinstance(value, (bool, np.bool_))
