"""
Global configuration for dmat.

Provides:
- Kernel backend selection (``DMAT_KERNEL``)
- CBLAS library location (``DMAT_BLAS_LIBRARY``)
- Seeded random generator for ``rand``/``randn`` (``DMAT_SEED``)
- Lazy kernel construction and caching
"""

from __future__ import annotations

import logging
import os
from enum import Enum
from typing import TYPE_CHECKING, Optional, Union

import numpy as np

if TYPE_CHECKING:
    from ._kernel.base import Kernel

logger = logging.getLogger("dmat.config")


# =============================================================================
# Kernel Names
# =============================================================================

class KernelName(Enum):
    """Available kernel backends."""
    BLAS = "blas"              # scipy.linalg.blas
    CBLAS = "cblas"            # ctypes-loaded CBLAS shared library
    REFERENCE = "reference"    # numpy strided kernels
    AUTO = "auto"              # cblas if a library is found, else blas

    @classmethod
    def parse(cls, value: Union["KernelName", str]) -> "KernelName":
        if isinstance(value, KernelName):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError:
            names = ", ".join(k.value for k in cls)
            raise ValueError(f"Unknown kernel backend {value!r}. Expected one of: {names}") from None


# =============================================================================
# Global Configuration State
# =============================================================================

class _Config:
    """
    Global configuration singleton.

    Reads its initial state from the environment and builds the kernel
    lazily on first use.
    """

    def __init__(self):
        self._kernel_name = KernelName.parse(os.environ.get("DMAT_KERNEL", "blas"))
        self._blas_library = os.environ.get("DMAT_BLAS_LIBRARY") or None
        seed = os.environ.get("DMAT_SEED")
        self._seed: Optional[int] = int(seed) if seed else None
        self._rng: Optional[np.random.Generator] = None
        self._kernel: Optional["Kernel"] = None

    @property
    def kernel_name(self) -> KernelName:
        """Configured kernel backend."""
        return self._kernel_name

    @kernel_name.setter
    def kernel_name(self, value: Union[KernelName, str]):
        self._kernel_name = KernelName.parse(value)
        self._kernel = None
        logger.debug("Kernel backend set to %s", self._kernel_name.value)

    @property
    def blas_library(self) -> Optional[str]:
        """Explicit CBLAS library path, or None to search."""
        return self._blas_library

    @blas_library.setter
    def blas_library(self, value: Optional[str]):
        self._blas_library = value
        if self._kernel_name in (KernelName.CBLAS, KernelName.AUTO):
            self._kernel = None

    @property
    def seed(self) -> Optional[int]:
        return self._seed

    @seed.setter
    def seed(self, value: Optional[int]):
        self._seed = value
        self._rng = None

    def get_rng(self) -> np.random.Generator:
        """Random generator used by ``rand``/``randn`` (created lazily)."""
        if self._rng is None:
            self._rng = np.random.default_rng(self._seed)
        return self._rng

    def get_kernel(self) -> "Kernel":
        """
        Get the kernel instance (lazy loaded).

        Returns:
            Kernel for the configured backend

        Raises:
            LibraryNotFoundError: If ``cblas`` is requested and no library is found
        """
        if self._kernel is None:
            from ._kernel import create_kernel
            self._kernel = create_kernel(self._kernel_name, self._blas_library)
            logger.info("Using %s kernel", self._kernel.name)
        return self._kernel


_config = _Config()


# =============================================================================
# Public API
# =============================================================================

def get_config() -> _Config:
    """Get the global configuration object."""
    return _config


def get_kernel() -> "Kernel":
    """Get the kernel used by all matrix operations."""
    return _config.get_kernel()


def set_kernel(name: Union[KernelName, str]) -> None:
    """
    Select the kernel backend.

    Args:
        name: ``"blas"``, ``"cblas"``, ``"reference"`` or ``"auto"``

    Example:
        >>> import dmat
        >>> dmat.set_kernel("reference")
    """
    _config.kernel_name = name


def seed(value: Optional[int]) -> None:
    """Reseed the generator behind ``rand``/``randn``."""
    _config.seed = value


def get_rng() -> np.random.Generator:
    return _config.get_rng()
