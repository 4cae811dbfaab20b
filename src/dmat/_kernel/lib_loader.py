"""Dynamic library loader for a CBLAS shared library.

This module handles platform-specific library discovery with lazy loading.
No external dependencies required.
"""

import ctypes
import ctypes.util
import logging
import os
import sys
import warnings
from pathlib import Path
from typing import List, Optional

from .._errors import LibraryNotFoundError

__all__ = ['get_lib', 'find_library', 'REQUIRED_SYMBOLS', 'LibraryNotFoundError']

logger = logging.getLogger("dmat.kernel")


REQUIRED_SYMBOLS = (
    'cblas_dcopy',
    'cblas_dscal',
    'cblas_dswap',
    'cblas_daxpy',
    'cblas_ddot',
    'cblas_dgemv',
    'cblas_dgemm',
    'cblas_dger',
)

# Names handed to ctypes.util.find_library, in order of preference
_CANDIDATE_NAMES = ('cblas', 'openblas', 'blas')

# Global library cache
_lib_cache = {}


def _platform_names(base_name: str) -> List[str]:
    """Get platform-specific file names for a library base name."""
    if sys.platform == 'win32':
        return [f"{base_name}.dll", f"lib{base_name}.dll"]
    elif sys.platform == 'darwin':
        return [f"lib{base_name}.dylib"]
    else:  # Linux
        return [f"lib{base_name}.so", f"lib{base_name}.so.3", f"lib{base_name}.so.0"]


def _has_symbols(lib: ctypes.CDLL) -> bool:
    return all(hasattr(lib, sym) for sym in REQUIRED_SYMBOLS)


def _candidates(path: Optional[str]) -> List[str]:
    """Build the ordered list of library locations to try.

    Search order:
        1. Explicit path (argument or ``DMAT_BLAS_LIBRARY``), file or directory
        2. System library paths via ``ctypes.util.find_library``
    """
    candidates = []

    if path is None:
        path = os.environ.get('DMAT_BLAS_LIBRARY') or None

    if path is not None:
        p = Path(path)
        if p.is_dir():
            for base in _CANDIDATE_NAMES:
                candidates.extend(str(p / name) for name in _platform_names(base))
        else:
            candidates.append(str(p))

    for base in _CANDIDATE_NAMES:
        found = ctypes.util.find_library(base)
        if found:
            candidates.append(found)

    return candidates


def find_library(path: Optional[str] = None) -> Optional[ctypes.CDLL]:
    """Search for a loadable CBLAS library exporting all required symbols.

    Args:
        path: Optional explicit library file or directory.

    Returns:
        Loaded library, or None if nothing suitable was found.
    """
    for candidate in _candidates(path):
        try:
            lib = ctypes.CDLL(candidate)
        except OSError as e:
            logger.debug("Cannot load %s: %s", candidate, e)
            continue
        if not _has_symbols(lib):
            warnings.warn(f"{candidate} does not export the CBLAS interface, skipping")
            continue
        logger.info("Loaded CBLAS library %s", candidate)
        return lib
    return None


def get_lib(path: Optional[str] = None) -> ctypes.CDLL:
    """Get CBLAS library handle with lazy initialization.

    Args:
        path: Optional explicit library file or directory.

    Returns:
        ctypes.CDLL library handle.

    Raises:
        LibraryNotFoundError: If no library can be found.

    Example:
        >>> lib = get_lib()
        >>> lib.cblas_ddot
    """
    key = path or os.environ.get('DMAT_BLAS_LIBRARY') or ''
    if key in _lib_cache:
        return _lib_cache[key]

    lib = find_library(path)
    if lib is None:
        raise LibraryNotFoundError(
            "Cannot find a CBLAS library. Install one (e.g. OpenBLAS) "
            "or set DMAT_BLAS_LIBRARY."
        )
    _lib_cache[key] = lib
    return lib
