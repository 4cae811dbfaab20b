"""
Tests for the kernel backends.

Every backend is checked against plain numpy on the same inputs; the cblas
backend is skipped when no CBLAS shared library is installed.
"""

import pytest
import numpy as np

from dmat import KernelError, LibraryNotFoundError
from dmat._kernel import create_kernel, ReferenceKernel
from dmat._kernel.blas import BlasKernel
from dmat._kernel.lib_loader import get_lib, REQUIRED_SYMBOLS


class TestKernelFactory:
    """Test backend construction."""

    def test_reference(self):
        """The reference kernel needs nothing but numpy."""
        k = create_kernel("reference")
        assert isinstance(k, ReferenceKernel)
        assert k.name == "reference"

    def test_blas(self):
        """scipy BLAS backend."""
        assert isinstance(create_kernel("blas"), BlasKernel)

    def test_case_insensitive(self):
        """Backend names are parsed case-insensitively."""
        assert create_kernel(" Reference ").name == "reference"

    def test_unknown(self):
        """Unknown names raise ValueError."""
        with pytest.raises(ValueError):
            create_kernel("gpu")

    def test_auto_falls_back(self):
        """auto never fails: without CBLAS it returns a usable backend."""
        k = create_kernel("auto")
        assert k.name in ("cblas", "blas")

    def test_repr(self):
        """repr names the backend."""
        assert "reference" in repr(create_kernel("reference"))


class TestLibraryLoader:
    """Test CBLAS library loading."""

    def test_missing_library(self, tmp_path, monkeypatch):
        """A bogus path with nothing on the system path raises."""
        monkeypatch.setattr("ctypes.util.find_library", lambda name: None)
        with pytest.raises(LibraryNotFoundError):
            get_lib(str(tmp_path / "libnothing.so"))

    def test_required_symbols(self):
        """Every routine the backend binds is required."""
        assert "cblas_dgemm" in REQUIRED_SYMBOLS
        assert "cblas_dger" in REQUIRED_SYMBOLS

    def test_default_library(self, requires_cblas):
        """The system library exports the interface."""
        lib = get_lib()
        for sym in REQUIRED_SYMBOLS:
            assert hasattr(lib, sym)


class TestLevel1:
    """Test vector routines on every backend."""

    def test_copy_strided(self, kernel):
        """Strided copy between buffers."""
        x = np.arange(10.0)
        y = np.zeros(3)
        kernel.copy(3, x, 1, 3, y, 0, 1)
        np.testing.assert_array_equal(y, [1.0, 4.0, 7.0])

    def test_copy_into_strided(self, kernel):
        """Strided destination."""
        x = np.array([1.0, 2.0])
        y = np.zeros(5)
        kernel.copy(2, x, 0, 1, y, 1, 3)
        np.testing.assert_array_equal(y, [0.0, 1.0, 0.0, 0.0, 2.0])

    def test_scale(self, kernel):
        """Scaling a strided subset."""
        x = np.ones(6)
        kernel.scale(3, 2.0, x, 1, 2)
        np.testing.assert_array_equal(x, [1, 2, 1, 2, 1, 2])

    def test_swap(self, kernel):
        """Exchanging two strided regions of one buffer."""
        x = np.arange(6.0)
        kernel.swap(3, x, 0, 2, x, 1, 2)
        np.testing.assert_array_equal(x, [1, 0, 3, 2, 5, 4])

    def test_axpy(self, kernel):
        """y += alpha x."""
        x = np.array([1.0, 2.0, 3.0])
        y = np.array([10.0, 10.0, 10.0])
        kernel.axpy(3, -2.0, x, y)
        np.testing.assert_array_equal(y, [8.0, 6.0, 4.0])

    def test_axpy_same_buffer(self, kernel):
        """x and y may be the same array."""
        x = np.array([1.0, 2.0])
        kernel.axpy(2, 1.0, x, x)
        np.testing.assert_array_equal(x, [2.0, 4.0])

    def test_dot(self, kernel, rng):
        """Inner product."""
        x = rng.standard_normal(7)
        y = rng.standard_normal(7)
        assert kernel.dot(7, x, y) == pytest.approx(float(x @ y))
        assert kernel.dot(2, x, y, 0, 3, 1, 3) == pytest.approx(x[0] * y[1] + x[3] * y[4])

    def test_empty_is_noop(self, kernel):
        """n == 0 does nothing, even on empty buffers."""
        empty = np.zeros(0)
        kernel.copy(0, empty, 0, 1, empty, 0, 1)
        kernel.scale(0, 2.0, empty)
        assert kernel.dot(0, empty, empty) == 0.0


class TestLevel23:
    """Test matrix routines on every backend."""

    def test_gemv(self, kernel, rng):
        """y = alpha A x + beta y on a column-major buffer."""
        a = rng.standard_normal((4, 3))
        x = rng.standard_normal(3)
        y = rng.standard_normal(4)
        expected = 2.0 * a @ x + 0.5 * y
        kernel.gemv(2.0, a.ravel(order='F'), 4, 3, x, 0.5, y)
        np.testing.assert_allclose(y, expected, rtol=1e-12, atol=1e-12)

    def test_gemv_beta_zero_ignores_garbage(self, kernel):
        """beta == 0 overwrites y even when it holds NaN."""
        a = np.eye(2).ravel(order='F')
        y = np.array([np.nan, np.nan])
        kernel.gemv(1.0, a, 2, 2, np.array([1.0, 2.0]), 0.0, y)
        np.testing.assert_array_equal(y, [1.0, 2.0])

    def test_gemm(self, kernel, rng):
        """C = A B with column-major buffers."""
        a = rng.standard_normal((3, 5))
        b = rng.standard_normal((5, 2))
        c = np.zeros(6)
        kernel.gemm(1.0, a.ravel(order='F'), b.ravel(order='F'), 3, 2, 5, 0.0, c)
        np.testing.assert_allclose(c.reshape((3, 2), order='F'), a @ b, rtol=1e-12, atol=1e-12)

    def test_gemm_empty_inner(self, kernel):
        """k == 0 scales C by beta."""
        c = np.ones(4)
        kernel.gemm(1.0, np.zeros(0), np.zeros(0), 2, 2, 0, 3.0, c)
        np.testing.assert_array_equal(c, [3.0] * 4)

    def test_ger(self, kernel):
        """A += alpha x y'."""
        a = np.zeros(6)
        kernel.ger(1.0, np.array([1.0, 2.0]), np.array([1.0, 0.0, 3.0]), a, 2, 3)
        np.testing.assert_array_equal(a.reshape((2, 3), order='F'), [[1, 0, 3], [2, 0, 6]])


class TestValidation:
    """Test argument validation shared by all backends."""

    def test_wrong_dtype(self, kernel):
        """Only float64 buffers are accepted."""
        with pytest.raises(KernelError):
            kernel.scale(2, 1.0, np.ones(2, dtype=np.float32))

    def test_non_contiguous(self, kernel):
        """Strided numpy views are rejected; use the increment arguments."""
        with pytest.raises(KernelError):
            kernel.scale(2, 1.0, np.ones(4)[::2])

    def test_extent(self, kernel):
        """Reading past the buffer end raises."""
        with pytest.raises(KernelError):
            kernel.copy(3, np.ones(4), 0, 2, np.zeros(3), 0, 1)
        with pytest.raises(KernelError):
            kernel.axpy(2, 1.0, np.ones(2), np.ones(2), incx=0)

    def test_small_matrix_buffers(self, kernel):
        """Matrix buffers must cover their dimensions."""
        with pytest.raises(KernelError):
            kernel.gemm(1.0, np.ones(3), np.ones(4), 2, 2, 2, 0.0, np.zeros(4))
        with pytest.raises(KernelError):
            kernel.gemv(1.0, np.ones(4), 2, 2, np.ones(1), 0.0, np.zeros(2))
