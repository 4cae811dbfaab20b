"""
Tests for elementwise arithmetic, broadcasting, aliasing of in-place
destinations and matrix products.
"""

import pytest
import numpy as np

import dmat
from dmat import DenseMatrix, Aliasing, ShapeMismatchError, SizeError
from dmat.dense import classify
from conftest import assert_matrix_equal


class TestAliasing:
    """Test destination classification."""

    def test_classify(self):
        """LEFT/RIGHT for identical buffers, OVERLAP for partial sharing."""
        a = DenseMatrix(2, 2, [1, 2, 3, 4])
        b = DenseMatrix(2, 2, [5, 6, 7, 8])
        assert classify(DenseMatrix(2, 2), a, b) is Aliasing.INDEPENDENT
        assert classify(a, a, b) is Aliasing.LEFT
        assert classify(b, a, b) is Aliasing.RIGHT
        part = DenseMatrix.wrap(a.data[1:3])
        assert classify(part, a, b) is Aliasing.OVERLAP

    @pytest.mark.parametrize("op", [
        "add", "sub", "mul", "div", "rsub", "rdiv", "min", "max",
        "lt", "le", "gt", "ge", "eq", "ne", "and_", "or_", "xor",
    ])
    def test_destination_does_not_change_result(self, op, backend):
        """Writing into either operand or a fresh matrix gives the same values."""
        a = DenseMatrix([[1, -2, 3], [4, 0, -6]])
        b = DenseMatrix([[1, 2, 0], [-1, 5, 3]])
        expected = getattr(a, op)(b)

        into_left = a.dup()
        getattr(into_left, op)(b, out=into_left)
        assert into_left == expected

        into_right = b.dup()
        getattr(a, op)(into_right, out=into_right)
        assert into_right == expected

        fresh = DenseMatrix(2, 3)
        getattr(a, op)(b, out=fresh)
        assert fresh == expected

    def test_random_operands(self, backend, rng):
        """Random same-length operands agree with numpy in every destination."""
        for _ in range(5):
            x = rng.standard_normal(12)
            y = rng.standard_normal(12)
            a = DenseMatrix(3, 4, x)
            b = DenseMatrix(4, 3, y)
            fresh = a.add(b)
            np.testing.assert_allclose(fresh.data, x + y, rtol=1e-15)
            right = b.dup()
            a.add(right, out=right)
            assert right.data.tolist() == fresh.data.tolist()
            a.addi(b)
            assert a.data.tolist() == fresh.data.tolist()

    @pytest.mark.parametrize("op, in_place", [
        ("lt", "lti"), ("le", "lei"), ("gt", "gti"), ("ge", "gei"), ("eq", "eqi"),
        ("ne", "nei"), ("and_", "andi"), ("or_", "ori"), ("xor", "xori"),
    ])
    def test_in_place_predicate_with_matrix(self, op, in_place):
        """In-place predicates with a matrix argument write into self."""
        a = DenseMatrix([0, 1, 2, -1])
        b = DenseMatrix([1, 1, 0, -1])
        expected = getattr(a, op)(b)
        result = getattr(a, in_place)(b)
        assert result is a
        assert a == expected

    def test_self_operand(self, backend):
        """a.addi(a) doubles a."""
        a = DenseMatrix([1, 2, 3])
        a.addi(a)
        assert a.to_list() == [2.0, 4.0, 6.0]
        a.subi(a)
        assert a.to_list() == [0.0, 0.0, 0.0]

    def test_addi_into_other(self, backend):
        """addi with an explicit destination writes there and leaves self alone."""
        a = DenseMatrix([1, 2])
        b = DenseMatrix([10, 20])
        result = a.addi(b, b)
        assert result is b
        assert b.to_list() == [11.0, 22.0]
        assert a.to_list() == [1.0, 2.0]

    def test_sub_into_right_operand(self, backend):
        """a - b written into b."""
        a = DenseMatrix([5, 5])
        b = DenseMatrix([1, 2])
        a.sub(b, out=b)
        assert b.to_list() == [4.0, 3.0]

    def test_partial_overlap(self, backend):
        """A destination overlapping an operand is computed through a temporary."""
        buf = np.arange(1.0, 6.0)
        a = DenseMatrix.wrap(buf[0:4])
        out = DenseMatrix.wrap(buf[1:5])
        b = DenseMatrix([10, 20, 30, 40])
        expected = a.add(b).to_list()
        a.add(b, out=out)
        assert out.to_list() == expected

    def test_resize_fresh_destination(self):
        """An unrelated destination of the wrong size is resized."""
        a = DenseMatrix([[1, 2], [3, 4]])
        out = DenseMatrix(5, 5)
        a.add(1.0, out=out)
        assert out.shape == (2, 2)
        assert out.to_list() == [2.0, 4.0, 3.0, 5.0]

    def test_in_place_size_error(self):
        """A 1x1 self cannot take an in-place result of a larger matrix."""
        s = dmat.scalar(1.0)
        with pytest.raises(SizeError):
            s.addi(DenseMatrix([1, 2, 3]))
        assert s.scalar() == 1.0


class TestBroadcast:
    """Test scalar and shape-agnostic broadcasting."""

    def test_scalar(self):
        """Numbers broadcast to every element."""
        m = dmat.ones(2, 2).add(6)
        assert m.to_list() == [7.0] * 4

    def test_scalar_matrix_left(self):
        """A 1x1 left operand broadcasts over a 3x3 right operand."""
        m = dmat.scalar(5.0).add(dmat.ones(3, 3).fill(2.0))
        assert m.shape == (3, 3)
        assert m.to_list() == [7.0] * 9

    @pytest.mark.parametrize("operand", [
        2, 2.0, np.float64(2.0), np.int64(2), dmat.scalar(2.0),
    ])
    def test_scalar_operand_forms(self, operand):
        """Python, numpy and 1x1 matrix scalars all broadcast."""
        m = DenseMatrix(2, 2, [1, 2, 3, 4]).add(operand)
        assert m.to_list() == [3.0, 4.0, 5.0, 6.0]

    @pytest.mark.parametrize("operand", [
        [1, 2, 3, 4],
        [[1, 3], [2, 4]],
        np.array([[1.0, 3.0], [2.0, 4.0]]),
        DenseMatrix(2, 2, [1, 2, 3, 4]),
    ])
    def test_matrix_operand_forms(self, operand):
        """Sequences, nested rows and arrays are coerced to matrices."""
        m = DenseMatrix(2, 2, [1, 2, 3, 4]).add(operand)
        assert m.to_list() == [2.0, 4.0, 6.0, 8.0]

    def test_one_by_one_matrix_as_scalar(self):
        """1x1 matrices act as numbers on either side."""
        m = dmat.ones(2, 2)
        assert m.add(dmat.scalar(6.0)).to_list() == [7.0] * 4
        r = dmat.scalar(10.0).sub(m)
        assert r.shape == (2, 2)
        assert r.to_list() == [9.0] * 4
        r = dmat.scalar(8.0).div(DenseMatrix([2, 4]))
        assert r.to_list() == [4.0, 2.0]

    def test_equal_length_shapes(self):
        """Equal lengths combine element-wise and keep the left shape."""
        a = dmat.ones(3, 3)
        b = dmat.ones(1, 9)
        c = a.add(b)
        assert c.shape == (3, 3)
        assert c.length == 9
        assert c.to_list() == [2.0] * 9

    def test_length_mismatch(self):
        """Different lengths raise ShapeMismatchError."""
        with pytest.raises(ShapeMismatchError):
            dmat.ones(2, 2).add(dmat.ones(3, 1))

    def test_sequences_as_operands(self):
        """Lists are coerced to matrices."""
        m = DenseMatrix([1, 2, 3]).mul([2, 2, 2])
        assert m.to_list() == [2.0, 4.0, 6.0]

    def test_reverse_ops(self):
        """rsub and rdiv swap the operands."""
        m = DenseMatrix([1, 2, 4])
        assert m.rsub(1).to_list() == [0.0, -1.0, -3.0]
        assert m.rdiv(4).to_list() == [4.0, 2.0, 1.0]

    def test_division_by_zero(self):
        """Division follows IEEE semantics."""
        m = DenseMatrix([1, -1, 0]).div(0.0)
        assert m.get(0) == np.inf
        assert m.get(1) == -np.inf
        assert np.isnan(m.get(2))

    def test_vector_broadcast(self, rect):
        """Row and column vectors combine with every row or column."""
        assert_matrix_equal(rect.add_row_vector([10, 20, 30]), [[11, 22, 33], [14, 25, 36]])
        assert_matrix_equal(rect.sub_column_vector([1, 4]), [[0, 1, 2], [0, 1, 2]])
        assert_matrix_equal(rect.mul_row_vector([1, 0, 2]), [[1, 0, 6], [4, 0, 12]])
        assert_matrix_equal(rect.div_column_vector([1, 2]), [[1, 2, 3], [2, 2.5, 3]])
        rect.muli_column_vector([0, 1])
        assert_matrix_equal(rect, [[0, 0, 0], [4, 5, 6]])

    def test_vector_wrong_length(self, rect):
        """The vector must match the row or column count."""
        with pytest.raises(ShapeMismatchError):
            rect.add_row_vector([1, 2])


class TestComparison:
    """Test comparison and logical operators."""

    def test_comparisons(self):
        """Comparisons yield 1.0/0.0."""
        m = DenseMatrix([1, 2, 3])
        assert m.lt(2).to_list() == [1.0, 0.0, 0.0]
        assert m.le(2).to_list() == [1.0, 1.0, 0.0]
        assert m.gt(2).to_list() == [0.0, 0.0, 1.0]
        assert m.ge(2).to_list() == [0.0, 1.0, 1.0]
        assert m.eq([1, 0, 3]).to_list() == [1.0, 0.0, 1.0]
        assert m.ne([1, 0, 3]).to_list() == [0.0, 1.0, 0.0]

    def test_reflected_comparison(self):
        """A 1x1 left operand reflects the comparison."""
        r = dmat.scalar(2.0).lt(DenseMatrix([1, 2, 3]))
        assert r.to_list() == [0.0, 0.0, 1.0]

    def test_in_place_comparison(self):
        """lti overwrites self with the predicate."""
        m = DenseMatrix([1, 5])
        m.gti(2)
        assert m.to_list() == [0.0, 1.0]

    def test_nan_compares_false(self):
        """NaN is unequal to everything."""
        m = DenseMatrix([np.nan])
        assert m.eq(np.nan).scalar() == 0.0
        assert m.ne(np.nan).scalar() == 1.0

    def test_logical(self):
        """Non-zero is true."""
        a = DenseMatrix([0, 2, 0, -1])
        b = DenseMatrix([0, 0, 3, 4])
        assert a.and_(b).to_list() == [0.0, 0.0, 0.0, 1.0]
        assert a.or_(b).to_list() == [0.0, 1.0, 1.0, 1.0]
        assert a.xor(b).to_list() == [0.0, 1.0, 1.0, 0.0]
        assert a.not_().to_list() == [1.0, 0.0, 1.0, 0.0]
        assert a.truth().to_list() == [0.0, 1.0, 0.0, 1.0]


class TestUnary:
    """Test unary transforms."""

    def test_neg(self):
        """Negation allocates; negi works in place."""
        m = DenseMatrix([1, -2])
        assert m.neg().to_list() == [-1.0, 2.0]
        m.negi()
        assert m.to_list() == [-1.0, 2.0]

    def test_isnan_isinf(self):
        """Classification of special values."""
        m = DenseMatrix([np.nan, np.inf, 1.0])
        assert m.isnan().to_list() == [1.0, 0.0, 0.0]
        assert m.isinf().to_list() == [0.0, 1.0, 0.0]


class TestOperators:
    """Test Python operator overloading."""

    def test_arithmetic_operators(self):
        """+ - * / and their reflected forms."""
        m = DenseMatrix([1, 2])
        assert (m + 1).to_list() == [2.0, 3.0]
        assert (1 + m).to_list() == [2.0, 3.0]
        assert (10 - m).to_list() == [9.0, 8.0]
        assert (m * m).to_list() == [1.0, 4.0]
        assert (2 / m).to_list() == [2.0, 1.0]
        assert (-m).to_list() == [-1.0, -2.0]

    def test_in_place_operators(self):
        """Augmented assignment keeps the same object."""
        m = DenseMatrix([1, 2])
        ident = id(m)
        m += 1
        m *= 2
        m -= 1
        m /= 3
        assert id(m) == ident
        assert m.to_list() == [1.0, 5.0 / 3.0]

    def test_numpy_scalar_left_operand(self):
        """numpy scalars on the left defer to the matrix."""
        m = DenseMatrix([1, 2])
        r = np.float64(2.0) * m
        assert isinstance(r, DenseMatrix)
        assert r.to_list() == [2.0, 4.0]

    def test_comparison_and_logic_operators(self):
        """< > & | ^ ~ are elementwise."""
        m = DenseMatrix([1, 2, 3])
        assert (m > 1).to_list() == [0.0, 1.0, 1.0]
        assert (m <= 1).to_list() == [1.0, 0.0, 0.0]
        assert ((m > 1) & (m < 3)).to_list() == [0.0, 1.0, 0.0]
        assert ((m < 2) | (m > 2)).to_list() == [1.0, 0.0, 1.0]
        assert ((m > 1) ^ (m > 2)).to_list() == [0.0, 1.0, 0.0]
        assert (~(m > 1)).to_list() == [1.0, 0.0, 0.0]

    def test_matmul_operator(self):
        """@ is the matrix product."""
        a = DenseMatrix([[1, 2], [3, 4]])
        assert_matrix_equal(a @ a, [[7, 10], [15, 22]])
        assert_matrix_equal([[1, 0]] @ a, [[1, 2]])


class TestProducts:
    """Test matrix products through the kernel."""

    def test_shapes(self, backend, rng):
        """(m x k) @ (k x n) gives m x n and matches numpy."""
        a = rng.standard_normal((3, 4))
        b = rng.standard_normal((4, 2))
        c = DenseMatrix(a).mmul(DenseMatrix(b))
        assert c.shape == (3, 2)
        np.testing.assert_allclose(c.to_numpy(), a @ b, rtol=1e-12, atol=1e-12)

    def test_matrix_vector(self, backend, rng):
        """A single-column right operand."""
        a = rng.standard_normal((4, 3))
        x = rng.standard_normal(3)
        y = DenseMatrix(a).mmul(DenseMatrix(x))
        assert y.shape == (4, 1)
        np.testing.assert_allclose(y.to_list(), a @ x, rtol=1e-12, atol=1e-12)

    def test_inner_dimension_mismatch(self):
        """Inner dimensions must agree."""
        with pytest.raises(ShapeMismatchError):
            dmat.ones(2, 3).mmul(dmat.ones(2, 3))

    def test_scalar_operand(self):
        """1x1 operands degrade to scalar multiplication."""
        m = DenseMatrix([[1, 2], [3, 4]])
        assert m.mmul(dmat.scalar(2.0)).to_list() == [2.0, 6.0, 4.0, 8.0]
        assert dmat.scalar(2.0).mmul(m).to_list() == [2.0, 6.0, 4.0, 8.0]
        assert m.mmul(3).to_list() == [3.0, 9.0, 6.0, 12.0]

    def test_aliased_square_product(self, backend):
        """mmuli into self uses a temporary and matches the allocating product."""
        a = DenseMatrix([[1, 2], [3, 4]])
        expected = a.mmul(a)
        a.mmuli(a)
        assert a == expected

    def test_aliased_wrong_shape(self, backend):
        """An operand of the wrong shape cannot receive the product."""
        a = dmat.ones(2, 3)
        b = dmat.ones(3, 4)
        with pytest.raises(SizeError):
            a.mmuli(b)
        assert a.shape == (2, 3)
        assert a.to_list() == [1.0] * 6

    def test_aliased_product_shape_change(self, backend):
        """(2x3) @ (3x2) cannot be written back into the 2x3 operand."""
        a = DenseMatrix([[1, 2, 3], [4, 5, 6]])
        b = DenseMatrix([[1, 0], [0, 1], [1, 1]])
        expected = a.mmul(b)
        assert expected.shape == (2, 2)
        assert_matrix_equal(expected, [[4, 5], [10, 11]])
        with pytest.raises(SizeError):
            a.mmul(b, out=a)
        assert_matrix_equal(a, [[1, 2, 3], [4, 5, 6]])

    def test_out_resized(self, backend):
        """A fresh destination of the wrong shape is resized."""
        out = DenseMatrix(1, 1)
        dmat.ones(2, 3).mmul(dmat.ones(3, 4), out)
        assert out.shape == (2, 4)
        assert out.to_list() == [3.0] * 8

    def test_empty_inner_dimension(self, backend):
        """(m x 0) @ (0 x n) is an m x n zero matrix."""
        c = DenseMatrix(2, 0).mmul(DenseMatrix(0, 3))
        assert c.shape == (2, 3)
        assert c.to_list() == [0.0] * 6

    def test_rank_one_update(self, backend):
        """A += alpha x y'."""
        a = dmat.zeros(2, 3)
        a.rank_one_update([1, 2], [1, 0, -1], alpha=2.0)
        assert_matrix_equal(a, [[2, 0, -2], [4, 0, -4]])
        with pytest.raises(ShapeMismatchError):
            a.rank_one_update([1, 2, 3], [1, 0, -1])

    def test_rank_one_symmetric(self, backend):
        """y defaults to x."""
        a = dmat.zeros(2, 2)
        a.rank_one_update([1, 2])
        assert_matrix_equal(a, [[1, 2], [2, 4]])


class TestVectorAlgebra:
    """Test dot products, norms and distances."""

    def test_dot_and_norms(self, backend):
        """Inner product and norms."""
        a = DenseMatrix([3, -4])
        assert a.dot([1, 1]) == -1.0
        assert a.norm1() == 7.0
        assert a.norm2() == 5.0
        assert a.normmax() == 4.0
        assert DenseMatrix().normmax() == 0.0

    def test_project(self, backend):
        """Projection coefficient."""
        a = DenseMatrix([1, 0])
        assert a.project([3, 4]) == 3.0

    def test_distances(self):
        """Euclidean and Manhattan distances."""
        a = DenseMatrix([0, 0])
        b = DenseMatrix([3, 4])
        assert a.squared_distance(b) == 25.0
        assert a.distance2(b) == 5.0
        assert a.distance1(b) == 7.0
        with pytest.raises(ShapeMismatchError):
            a.distance1([1, 2, 3])

    def test_compare(self):
        """Approximate equality with a per-element tolerance."""
        a = DenseMatrix([1.0, 2.0])
        assert a.compare(DenseMatrix([1.0, 2.001]), 0.01)
        assert not a.compare(DenseMatrix([1.0, 2.1]), 0.01)
        assert not a.compare(DenseMatrix([[1.0, 2.0]]), 1.0)
        assert not a.compare([1.0, 2.0], 1.0)
        assert DenseMatrix().compare(DenseMatrix(), 0.0)
