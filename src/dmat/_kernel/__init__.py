"""dmat Private Kernel Package (_kernel).

Compute backends behind the matrix engine. All backends implement the
``Kernel`` interface from ``base``.

Modules:
    - base: Abstract kernel interface and argument validation
    - reference: numpy strided kernels (no BLAS)
    - blas: scipy.linalg.blas (Fortran BLAS bundled with scipy)
    - cblas: ctypes bindings to a CBLAS shared library
    - lib_loader: CBLAS library discovery
    - types: C type definitions for the ctypes bindings

Usage (Internal only):
    >>> from dmat._kernel import create_kernel
    >>> kernel = create_kernel("reference")
    >>> kernel.dot(3, x, y)
"""

import logging
from typing import Optional, Union

from . import base
from . import lib_loader
from . import reference
from . import types
from .base import Kernel
from .reference import ReferenceKernel
from .._errors import LibraryNotFoundError

__all__ = [
    'base',
    'lib_loader',
    'reference',
    'types',
    'Kernel',
    'ReferenceKernel',
    'create_kernel',
]

logger = logging.getLogger("dmat.kernel")


def create_kernel(name: Union[str, "KernelName"], library: Optional[str] = None) -> Kernel:
    """Instantiate a kernel backend by name.

    Args:
        name: ``blas``, ``cblas``, ``reference`` or ``auto``.
        library: CBLAS library path for ``cblas``/``auto``.

    Returns:
        Kernel instance.

    Raises:
        ValueError: Unknown backend name.
        LibraryNotFoundError: ``cblas`` requested but no library available.
    """
    from .._config import KernelName

    name = KernelName.parse(name)

    if name is KernelName.REFERENCE:
        return ReferenceKernel()

    if name is KernelName.BLAS:
        from .blas import BlasKernel
        return BlasKernel()

    from .cblas import CBlasKernel

    if name is KernelName.CBLAS:
        return CBlasKernel(library)

    # auto
    try:
        return CBlasKernel(library)
    except LibraryNotFoundError as e:
        logger.info("No CBLAS library (%s), using scipy BLAS", e)
        from .blas import BlasKernel
        return BlasKernel()
