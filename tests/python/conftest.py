"""
Pytest configuration and shared fixtures for dmat tests.

Matrix tests run against the configured default kernel; tests that take the
``backend`` fixture run once per available kernel backend.
"""

import pytest
import numpy as np
from pathlib import Path
import sys

# Add src to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))

import dmat
from dmat import DenseMatrix
from dmat._config import get_config
from dmat._errors import LibraryNotFoundError
from dmat._kernel import create_kernel


def _cblas_available():
    try:
        create_kernel("cblas")
    except LibraryNotFoundError:
        return False
    return True


HAS_CBLAS = _cblas_available()

BACKENDS = ["reference", "blas", "cblas"]


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(scope="session")
def requires_cblas():
    """Skip test if no CBLAS shared library can be loaded."""
    if not HAS_CBLAS:
        pytest.skip("CBLAS library not available")


@pytest.fixture(params=BACKENDS)
def backend(request):
    """Select each kernel backend in turn, restoring the previous one afterwards."""
    if request.param == "cblas" and not HAS_CBLAS:
        pytest.skip("CBLAS library not available")
    config = get_config()
    previous = config.kernel_name
    dmat.set_kernel(request.param)
    yield dmat.get_kernel()
    dmat.set_kernel(previous)


@pytest.fixture(params=BACKENDS)
def kernel(request):
    """A fresh kernel instance per backend (global configuration untouched)."""
    if request.param == "cblas" and not HAS_CBLAS:
        pytest.skip("CBLAS library not available")
    return create_kernel(request.param)


@pytest.fixture
def square():
    """3x3 matrix.

    Matrix:
    [[1, 4, 7],
     [2, 5, 8],
     [3, 6, 9]]

    Buffer (column-major): 1, 2, ..., 9
    """
    return DenseMatrix(3, 3, np.arange(1.0, 10.0))


@pytest.fixture
def rect():
    """2x3 matrix.

    Matrix:
    [[1, 2, 3],
     [4, 5, 6]]
    """
    return DenseMatrix([[1, 2, 3], [4, 5, 6]])


@pytest.fixture
def rng():
    """Deterministic numpy generator for reference data."""
    return np.random.default_rng(42)


# =============================================================================
# Helper Functions
# =============================================================================

def assert_matrix_equal(m, expected, rtol=1e-12, atol=1e-12):
    """Assert a matrix matches a nested list / array (row-major) element-wise."""
    expected = np.asarray(expected, dtype=np.float64)
    if expected.ndim == 1:
        expected = expected.reshape(-1, 1)
    assert m.shape == expected.shape
    np.testing.assert_allclose(m.to_numpy(), expected, rtol=rtol, atol=atol)


def column_major(rows):
    """Column-major buffer of a row-major nested list."""
    return np.asarray(rows, dtype=np.float64).ravel(order='F')
