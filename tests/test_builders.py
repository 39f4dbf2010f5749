"""
Tests for the round builders and the sumcheck protocol.

Covers:
- FirstRoundBuilder range length / challenge bookkeeping
- FinalRoundBuilder ordering and challenge exhaustion
- VerificationBuilder consumption order, degree limit, leftover detection
- SumcheckSubpolynomial row checks
- prove_sumcheck / verify_sumcheck agreement and tampering
"""

import pytest
from zksql.database.arena import Arena
from zksql.errors import ProtocolError, VerificationError
from zksql.field import FR
from zksql.mle import eq_eval, mle_evaluate
from zksql.proof.first_round_builder import FirstRoundBuilder
from zksql.proof.final_round_builder import FinalRoundBuilder
from zksql.proof.sumcheck import SumcheckProof, prove_sumcheck, verify_sumcheck
from zksql.proof.sumcheck_subpolynomial import SumcheckSubpolynomial, SumcheckSubpolynomialType
from zksql.proof.verification_builder import VerificationBuilder
from zksql.transcript import Transcript

IDENTITY = SumcheckSubpolynomialType.IDENTITY
ZERO_SUM = SumcheckSubpolynomialType.ZERO_SUM


def _verification_builder(**overrides):
    kwargs = dict(
        mle_evaluations=[],
        chi_evaluations=[],
        post_result_challenges=[],
        bit_distributions=[],
        subpolynomial_multipliers=[],
        entrywise_multiplier=FR(1),
    )
    kwargs.update(overrides)
    return VerificationBuilder(**kwargs)


# ─────────────────────────────────────────────────────────────────────
# Arena
# ─────────────────────────────────────────────────────────────────────

class TestArena:

    def test_slices_cleared_on_exit(self):
        with Arena() as alloc:
            values = alloc.alloc_slice([1, 2, 3])
            filled = alloc.alloc_slice_fill(FR(0), 2)
            assert alloc.num_slices == 2
        assert values == []
        assert filled == []
        assert alloc.closed

    def test_alloc_after_close(self):
        with Arena() as alloc:
            pass
        with pytest.raises(RuntimeError):
            alloc.alloc_slice([1])


# ─────────────────────────────────────────────────────────────────────
# First / Final round builders
# ─────────────────────────────────────────────────────────────────────

class TestFirstRoundBuilder:

    def test_range_length_is_max(self):
        b = FirstRoundBuilder()
        b.update_range_length(5)
        b.update_range_length(3)
        assert b.range_length == 5

    def test_chi_length_updates_range(self):
        b = FirstRoundBuilder()
        b.produce_chi_evaluation_length(9)
        b.produce_chi_evaluation_length(2)
        assert b.chi_evaluation_lengths == [9, 2]
        assert b.range_length == 9

    def test_challenges_accumulate(self):
        b = FirstRoundBuilder()
        b.request_post_result_challenges(2)
        b.request_post_result_challenges(1)
        assert b.num_post_result_challenges == 3


class TestFinalRoundBuilder:

    def test_mle_is_converted_to_scalars(self):
        b = FinalRoundBuilder(2, [])
        mle = b.produce_intermediate_mle([True, -1, "x"])
        assert mle[0] == FR(1)
        assert mle[1] == FR(-1)
        assert b.pcs_proof_mles == [mle]

    def test_mle_longer_than_domain(self):
        b = FinalRoundBuilder(1, [])
        with pytest.raises(ProtocolError):
            b.produce_intermediate_mle([1, 2, 3])

    def test_challenges_in_order(self):
        b = FinalRoundBuilder(1, [FR(7), FR(8)])
        assert b.consume_post_result_challenge() == FR(7)
        assert b.consume_post_result_challenge() == FR(8)
        with pytest.raises(ProtocolError):
            b.consume_post_result_challenge()

    def test_subpolynomial_count(self):
        b = FinalRoundBuilder(1, [])
        b.produce_sumcheck_subpolynomial(IDENTITY, [(FR(1), [[FR(0)]])])
        b.produce_sumcheck_subpolynomial(ZERO_SUM, [(FR(1), [[FR(0)]])])
        assert b.num_sumcheck_subpolynomials == 2


# ─────────────────────────────────────────────────────────────────────
# VerificationBuilder
# ─────────────────────────────────────────────────────────────────────

class TestVerificationBuilder:

    def test_consumes_in_order(self):
        vb = _verification_builder(
            mle_evaluations=[FR(1), FR(2), FR(3)],
            chi_evaluations=[FR(9)],
            post_result_challenges=[FR(5)],
        )
        assert vb.try_consume_final_round_mle_evaluation() == FR(1)
        assert vb.try_consume_final_round_mle_evaluations(2) == [FR(2), FR(3)]
        assert vb.try_consume_chi_evaluation() == FR(9)
        assert vb.try_consume_post_result_challenge() == FR(5)
        vb.check_all_consumed()

    def test_overconsumption(self):
        vb = _verification_builder(mle_evaluations=[FR(1)])
        vb.try_consume_final_round_mle_evaluation()
        with pytest.raises(ProtocolError):
            vb.try_consume_final_round_mle_evaluation()
        with pytest.raises(ProtocolError):
            vb.try_consume_bit_distribution()

    def test_leftover_evaluation(self):
        vb = _verification_builder(mle_evaluations=[FR(1), FR(2)])
        vb.try_consume_final_round_mle_evaluation()
        with pytest.raises(ProtocolError):
            vb.check_all_consumed()

    def test_leftover_multiplier(self):
        vb = _verification_builder(subpolynomial_multipliers=[FR(3)])
        with pytest.raises(ProtocolError):
            vb.check_all_consumed()

    def test_accumulates_weighted_evaluations(self):
        vb = _verification_builder(
            subpolynomial_multipliers=[FR(2), FR(3)],
            entrywise_multiplier=FR(10),
        )
        vb.try_produce_sumcheck_subpolynomial_evaluation(IDENTITY, FR(4), 1)
        vb.try_produce_sumcheck_subpolynomial_evaluation(ZERO_SUM, FR(5), 1)
        # 2·10·4 + 3·1·5
        assert vb.sumcheck_evaluation == FR(95)

    def test_degree_limit(self):
        vb = _verification_builder(subpolynomial_multipliers=[FR(1)], max_degree=2)
        with pytest.raises(ProtocolError):
            vb.try_produce_sumcheck_subpolynomial_evaluation(IDENTITY, FR(0), 2)


# ─────────────────────────────────────────────────────────────────────
# Subpolynomials
# ─────────────────────────────────────────────────────────────────────

class TestSubpolynomial:

    def test_identity_degree(self):
        s = SumcheckSubpolynomial(IDENTITY, [(1, [[FR(1)], [FR(1)]]), (-1, [[FR(1)]])])
        assert s.degree() == 2
        assert s.sumcheck_degree() == 3

    def test_identity_satisfied(self):
        b = [FR(0), FR(1), FR(1)]
        s = SumcheckSubpolynomial(IDENTITY, [(1, [b, b]), (-1, [b])])
        assert s.is_satisfied()

    def test_identity_unsatisfied(self):
        b = [FR(0), FR(2)]
        s = SumcheckSubpolynomial(IDENTITY, [(1, [b, b]), (-1, [b])])
        assert not s.is_satisfied()

    def test_zero_sum(self):
        a = [FR(3), FR(-1)]
        c = [FR(2)]
        assert SumcheckSubpolynomial(ZERO_SUM, [(1, [a]), (-1, [c])]).is_satisfied()
        assert not SumcheckSubpolynomial(ZERO_SUM, [(1, [a])]).is_satisfied()


# ─────────────────────────────────────────────────────────────────────
# Sumcheck
# ─────────────────────────────────────────────────────────────────────

def _run_sumcheck(subpolynomials, num_vars):
    multipliers = [FR(31 + i) for i in range(len(subpolynomials))]
    tau = [FR(101 + 2 * i) for i in range(num_vars)]
    proof, point = prove_sumcheck(Transcript(b"sc"), subpolynomials, multipliers, tau, num_vars)
    return proof, point, multipliers, tau


def _expected_claim(subpolynomials, multipliers, tau, point):
    total = FR(0)
    for s, rho in zip(subpolynomials, multipliers):
        value = FR(0)
        for coeff, mles in s.terms:
            product = coeff
            for mle in mles:
                product = product * mle_evaluate(mle, point)
            value = value + product
        weight = eq_eval(tau, point) if s.subpolynomial_type == IDENTITY else FR(1)
        total = total + rho * weight * value
    return total


class TestSumcheck:

    @pytest.fixture
    def subpolynomials(self):
        b = [FR(1), FR(0), FR(1), FR(1), FR(0)]
        a = [FR(4), FR(-2), FR(7)]
        c = [FR(9)]
        return [
            SumcheckSubpolynomial(IDENTITY, [(1, [b, b]), (-1, [b])]),
            SumcheckSubpolynomial(ZERO_SUM, [(1, [a]), (-1, [c])]),
        ]

    def test_prover_and_verifier_agree(self, subpolynomials):
        proof, point, multipliers, tau = _run_sumcheck(subpolynomials, 3)
        v_point, claim = verify_sumcheck(Transcript(b"sc"), proof, 3)
        assert v_point == point
        assert claim == _expected_claim(subpolynomials, multipliers, tau, point)

    def test_degree_is_max_term_plus_eq(self, subpolynomials):
        proof, _, _, _ = _run_sumcheck(subpolynomials, 3)
        assert proof.max_degree == 3

    def test_tampered_round(self, subpolynomials):
        proof, _, _, _ = _run_sumcheck(subpolynomials, 3)
        rounds = [list(r) for r in proof.round_evaluations]
        rounds[0][0] = rounds[0][0] + FR(1)
        with pytest.raises(VerificationError):
            verify_sumcheck(Transcript(b"sc"), SumcheckProof(rounds), 3)

    def test_unsatisfied_identity_is_rejected(self):
        """행 0에서 b² - b = 2 이므로 정직하게 만든 증명도 첫 라운드에서 거부된다."""
        b = [FR(2), FR(0)]
        s = [SumcheckSubpolynomial(IDENTITY, [(1, [b, b]), (-1, [b])])]
        proof, _, _, _ = _run_sumcheck(s, 1)
        rounds = proof.round_evaluations
        assert rounds[0][0] + rounds[0][1] != FR(0)
        with pytest.raises(VerificationError):
            verify_sumcheck(Transcript(b"sc"), proof, 1)

    def test_round_count_mismatch(self, subpolynomials):
        proof, _, _, _ = _run_sumcheck(subpolynomials, 3)
        with pytest.raises(ProtocolError):
            verify_sumcheck(Transcript(b"sc"), proof, 4)

    def test_zero_variables(self):
        s = [SumcheckSubpolynomial(ZERO_SUM, [(1, [[FR(0)]])])]
        proof, point, _, _ = _run_sumcheck(s, 0)
        assert proof.round_evaluations == []
        assert point == []
        v_point, claim = verify_sumcheck(Transcript(b"sc"), proof, 0)
        assert v_point == []
        assert claim == FR(0)
