"""
Tests for the algebra layer: scalar field, univariate polynomials, MLE helpers.

Covers:
- to_scalar encoding (bool, negative int, str hash, bytes hash)
- scalar_to_signed_int round trip for small magnitudes
- batch_inversion with zero entries (pseudo-inverse)
- Polynomial evaluate / divide_by_linear / interpolate_uni_poly
- log2_up, compute_evaluation_vector, mle_evaluate, chi_eval, eq_eval
"""

import pytest
from zksql.field import (
    FR, CURVE_ORDER, HASH_SCALAR_BITS,
    batch_inversion, scalar_from_bytes_via_hash, scalar_to_signed_int, to_scalar,
)
from zksql.polynomial import Polynomial, interpolate_uni_poly
from zksql.mle import (
    chi_eval, compute_evaluation_vector, eq_eval, log2_up, mle_evaluate, pad_to,
)


# ─────────────────────────────────────────────────────────────────────
# Scalar encoding
# ─────────────────────────────────────────────────────────────────────

class TestToScalar:
    """SQL 값 → FR 인코딩 테스트."""

    def test_bool(self):
        assert to_scalar(True) == FR(1)
        assert to_scalar(False) == FR(0)

    def test_negative_int_wraps(self):
        assert to_scalar(-1) == FR(CURVE_ORDER - 1)

    def test_string_is_hash_of_utf8(self):
        assert to_scalar("héllo") == scalar_from_bytes_via_hash("héllo".encode("utf-8"))

    def test_bytes_and_str_agree(self):
        assert to_scalar(b"abc") == to_scalar("abc")

    def test_hash_scalar_below_248_bits(self):
        for data in [b"", b"a", b"\xff" * 100]:
            assert int(scalar_from_bytes_via_hash(data)) < (1 << HASH_SCALAR_BITS)

    def test_fr_passthrough(self):
        x = FR(12345)
        assert to_scalar(x) is x

    def test_unsupported_type(self):
        with pytest.raises(TypeError):
            to_scalar(1.5)

    @pytest.mark.parametrize("value", [0, 1, -1, 2**63 - 1, -(2**63), 10**70, -(10**70)])
    def test_signed_round_trip(self, value):
        assert scalar_to_signed_int(to_scalar(value)) == value


class TestBatchInversion:
    """Montgomery 일괄 역원 테스트."""

    def test_inverses(self):
        values = [FR(2), FR(3), FR(7)]
        for v, inv in zip(values, batch_inversion(values)):
            assert v * inv == FR(1)

    def test_zero_maps_to_zero(self):
        result = batch_inversion([FR(0), FR(5), FR(0)])
        assert result[0] == FR(0)
        assert result[2] == FR(0)
        assert result[1] * FR(5) == FR(1)

    def test_all_zero(self):
        assert batch_inversion([0, 0]) == [FR(0), FR(0)]

    def test_empty(self):
        assert batch_inversion([]) == []


# ─────────────────────────────────────────────────────────────────────
# Polynomial
# ─────────────────────────────────────────────────────────────────────

class TestPolynomial:

    def test_evaluate(self):
        p = Polynomial([1, 2, 3])  # 1 + 2x + 3x²
        assert p.evaluate(FR(2)) == FR(17)

    def test_trim(self):
        assert Polynomial([1, 2, 0, 0]).coeffs == [FR(1), FR(2)]
        assert Polynomial([]).coeffs == [FR(0)]

    def test_add_and_scale(self):
        p = Polynomial([1, 2])
        q = Polynomial([3, 4, 5])
        assert (p + q).coeffs == [FR(4), FR(6), FR(5)]
        assert (q + q.scale(FR(-1))).coeffs == [FR(0)]

    def test_divide_by_linear(self):
        """(p(x) - p(z)) = q(x)·(x - z) 가 임의의 점에서 성립."""
        p = Polynomial([5, 0, 2, 7])
        z = FR(3)
        q = p.divide_by_linear(z)
        x = FR(11)
        assert p.evaluate(x) - p.evaluate(z) == q.evaluate(x) * (x - z)

    def test_divide_constant(self):
        assert Polynomial([9]).divide_by_linear(FR(4)).coeffs == [FR(0)]

    def test_interpolate_matches_evaluate(self):
        p = Polynomial([4, -1, 3])
        evals = [p.evaluate(FR(i)) for i in range(3)]
        assert interpolate_uni_poly(evals, FR(10)) == p.evaluate(FR(10))


# ─────────────────────────────────────────────────────────────────────
# MLE helpers
# ─────────────────────────────────────────────────────────────────────

class TestLog2Up:

    @pytest.mark.parametrize("n,expected", [(0, 0), (1, 0), (2, 1), (3, 2), (4, 2), (5, 3), (32, 5)])
    def test_values(self, n, expected):
        assert log2_up(n) == expected


class TestMle:
    """행 번호의 비트 k가 변수 k이다."""

    def test_evaluation_vector_sums_to_one(self):
        table = compute_evaluation_vector([FR(3), FR(5), FR(7)])
        assert len(table) == 8
        total = FR(0)
        for v in table:
            total = total + v
        assert total == FR(1)

    def test_low_bit_is_first_variable(self):
        # values[1]은 x0=1, x1=0 인 꼭짓점
        values = [FR(0), FR(1), FR(0), FR(0)]
        assert mle_evaluate(values, [FR(1), FR(0)]) == FR(1)
        assert mle_evaluate(values, [FR(0), FR(1)]) == FR(0)

    def test_one_variable(self):
        assert mle_evaluate([FR(1), FR(2)], [FR(3)]) == FR(4)

    def test_short_vector_is_zero_padded(self):
        point = [FR(9), FR(4)]
        assert mle_evaluate([FR(2), FR(5), FR(7)], point) == mle_evaluate(
            pad_to([2, 5, 7], 4), point
        )

    def test_too_long(self):
        with pytest.raises(ValueError):
            mle_evaluate([1, 2, 3], [FR(2)])

    def test_chi_eval_matches_ones_vector(self):
        point = [FR(2), FR(13), FR(21)]
        for length in range(9):
            assert chi_eval(length, point) == mle_evaluate([FR(1)] * length, point)

    def test_chi_eval_full_is_one(self):
        assert chi_eval(4, [FR(123), FR(456)]) == FR(1)

    def test_eq_eval_matches_table(self):
        tau = [FR(3), FR(8)]
        r = [FR(17), FR(2)]
        assert eq_eval(tau, r) == mle_evaluate(compute_evaluation_vector(tau), r)

    def test_eq_eval_dimension_mismatch(self):
        with pytest.raises(ValueError):
            eq_eval([FR(1)], [FR(1), FR(2)])
