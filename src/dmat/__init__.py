"""
dmat - Dense Matrix Engine

Column-major double-precision matrices with rich indexing, broadcasting
elementwise arithmetic, aliasing-safe in-place operations and BLAS-backed
kernels.

Matrices:
    DenseMatrix: Column-major matrix of doubles (alias: Matrix)
    Range: Reinitializable index cursors (all, point, interval, indices)

Kernel Selection:
    The compute backend is chosen with ``DMAT_KERNEL`` (``blas``,
    ``cblas``, ``reference`` or ``auto``) or ``set_kernel()``.

Usage:
    >>> import dmat
    >>> a = dmat.DenseMatrix([[1, 2], [3, 4]])
    >>> b = dmat.ones(2, 2)
    >>> (a + b).to_nested_list()
    [[2.0, 3.0], [4.0, 5.0]]

    # In-place with an explicit destination
    >>> a.addi(b, out=b)

    # Mask selection
    >>> a.get(a.gt(2)).to_list()
    [3.0, 4.0]

    # Ranges are inclusive
    >>> a.get(dmat.Range.interval(0, 1), 1).to_list()
    [2.0, 4.0]
"""

__version__ = '0.1.0'

from ._config import (
    KernelName,
    get_config,
    get_kernel,
    get_rng,
    seed,
    set_kernel,
)
from ._errors import (
    BoundsError,
    DMatError,
    FormatError,
    KernelError,
    LibraryNotFoundError,
    ShapeMismatchError,
    SizeError,
)
from .dense import (
    AllRange,
    Aliasing,
    DenseMatrix,
    IndexKind,
    IndicesRange,
    IntervalRange,
    Matrix,
    PointRange,
    Range,
    Selector,
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

__all__ = [
    # Version
    "__version__",
    # Matrices
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
    "Aliasing",
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
    # Error handling
    "DMatError",
    "ShapeMismatchError",
    "SizeError",
    "BoundsError",
    "FormatError",
    "KernelError",
    "LibraryNotFoundError",
    # Configuration
    "KernelName",
    "get_config",
    "get_kernel",
    "set_kernel",
    "seed",
    "get_rng",
]
