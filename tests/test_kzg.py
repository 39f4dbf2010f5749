"""
Tests for the commitment scheme layer: SRS, KZG, HyperKZG, Transcript.

Covers:
- ProverSetup.generate (deterministic, lengths, capacity check)
- KZG commit linearity and single/batched opening verification
- HyperKZG evaluation proof (valid, tampered evaluation, tampered proof, ν = 0)
- Transcript determinism and label separation
"""

import pytest
from zksql.field import FR, G1, ec_add, ec_mul
from zksql.polynomial import Polynomial
from zksql.srs import ProverSetup
from zksql.kzg import commit, create_witness, verify_opening, verify_openings
from zksql.hyperkzg import EvaluationProof, prove_evaluation, verify_evaluation
from zksql.mle import mle_evaluate
from zksql.transcript import Transcript
from zksql.errors import ProtocolError


# ─────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────

@pytest.fixture(scope="module")
def tiny_setup():
    """Small setup for fast KZG tests (max_len=8)."""
    return ProverSetup.generate(8, seed=7)


# ─────────────────────────────────────────────────────────────────────
# SRS
# ─────────────────────────────────────────────────────────────────────

class TestProverSetup:

    def test_lengths(self, tiny_setup):
        assert len(tiny_setup.g1_powers) == 8
        assert len(tiny_setup.g2_powers) == 2
        assert tiny_setup.max_len == 8

    def test_first_power_is_generator(self, tiny_setup):
        assert tiny_setup.g1_powers[0] == G1

    def test_deterministic_with_same_seed(self):
        a = ProverSetup.generate(3, seed=99)
        b = ProverSetup.generate(3, seed=99)
        assert a.g1_powers == b.g1_powers

    def test_different_seed(self):
        a = ProverSetup.generate(2, seed=1)
        b = ProverSetup.generate(2, seed=2)
        assert a.g1_powers[1] != b.g1_powers[1]

    def test_invalid_length(self):
        with pytest.raises(ValueError):
            ProverSetup.generate(0)

    def test_verifier_setup(self, tiny_setup):
        vs = tiny_setup.verifier_setup()
        assert vs.g1 == G1
        assert vs.g2_powers == tiny_setup.g2_powers


# ─────────────────────────────────────────────────────────────────────
# KZG
# ─────────────────────────────────────────────────────────────────────

class TestKzgCommit:

    def test_constant(self, tiny_setup):
        assert commit([FR(5)], tiny_setup) == ec_mul(G1, 5)

    def test_zero_vector_is_identity(self, tiny_setup):
        assert commit([FR(0), FR(0)], tiny_setup) is None

    def test_linearity(self, tiny_setup):
        """commit(a + b) == commit(a) + commit(b)"""
        a = [FR(1), FR(2), FR(3)]
        b = [FR(4), FR(0), FR(-3)]
        lhs = commit([x + y for x, y in zip(a, b)], tiny_setup)
        rhs = ec_add(commit(a, tiny_setup), commit(b, tiny_setup))
        assert lhs == rhs

    def test_offset_shifts_generators(self, tiny_setup):
        assert commit([FR(1)], tiny_setup, offset=2) == tiny_setup.g1_powers[2]

    def test_capacity_overflow(self, tiny_setup):
        with pytest.raises(ValueError):
            commit([FR(1)] * 9, tiny_setup)
        with pytest.raises(ValueError):
            commit([FR(1)] * 4, tiny_setup, offset=5)


class TestKzgOpening:

    def test_valid_opening(self, tiny_setup):
        poly = Polynomial([3, 1, 4, 1])
        z = FR(9)
        c = commit(poly.coeffs, tiny_setup)
        w = create_witness(poly, z, tiny_setup)
        assert verify_opening(c, w, z, poly.evaluate(z), tiny_setup.verifier_setup())

    def test_wrong_evaluation(self, tiny_setup):
        poly = Polynomial([3, 1, 4, 1])
        z = FR(9)
        c = commit(poly.coeffs, tiny_setup)
        w = create_witness(poly, z, tiny_setup)
        assert not verify_opening(c, w, z, poly.evaluate(z) + FR(1), tiny_setup.verifier_setup())

    def test_batched_openings(self, tiny_setup):
        p = Polynomial([2, 7])
        q = Polynomial([5, 0, 6])
        z1, z2 = FR(3), FR(11)
        openings = [
            (commit(p.coeffs, tiny_setup), create_witness(p, z1, tiny_setup), z1, p.evaluate(z1)),
            (commit(q.coeffs, tiny_setup), create_witness(q, z2, tiny_setup), z2, q.evaluate(z2)),
        ]
        assert verify_openings(openings, FR(17), tiny_setup.verifier_setup())


# ─────────────────────────────────────────────────────────────────────
# HyperKZG
# ─────────────────────────────────────────────────────────────────────

def _prove(values, point, setup):
    t = Transcript(b"hyperkzg-test")
    proof = prove_evaluation(t, values, point, setup)
    return proof, commit(values, setup)


def _verify(proof, commitment, point, evaluation, setup):
    t = Transcript(b"hyperkzg-test")
    return verify_evaluation(t, proof, commitment, point, evaluation, setup.verifier_setup())


class TestHyperKzg:
    """다중선형 평가 증명 테스트."""

    def test_valid_proof(self, tiny_setup):
        values = [FR(v) for v in [4, 8, 15, 16, 23, 42]]
        point = [FR(3), FR(5), FR(7)]
        proof, c = _prove(values, point, tiny_setup)
        assert len(proof.fold_commitments) == 2
        assert len(proof.evaluations) == 3
        assert _verify(proof, c, point, mle_evaluate(values, point), tiny_setup)

    def test_wrong_evaluation(self, tiny_setup):
        values = [FR(1), FR(2), FR(3), FR(4)]
        point = [FR(10), FR(20)]
        proof, c = _prove(values, point, tiny_setup)
        assert not _verify(proof, c, point, mle_evaluate(values, point) + FR(1), tiny_setup)

    def test_wrong_commitment(self, tiny_setup):
        values = [FR(1), FR(2), FR(3), FR(4)]
        point = [FR(10), FR(20)]
        proof, _ = _prove(values, point, tiny_setup)
        other = commit([FR(1), FR(2), FR(3), FR(5)], tiny_setup)
        assert not _verify(proof, other, point, mle_evaluate(values, point), tiny_setup)

    def test_tampered_fold_evaluation(self, tiny_setup):
        values = [FR(1), FR(2), FR(3), FR(4)]
        point = [FR(10), FR(20)]
        proof, c = _prove(values, point, tiny_setup)
        rows = [list(row) for row in proof.evaluations]
        rows[1][2] = rows[1][2] + FR(1)
        tampered = EvaluationProof(proof.fold_commitments, rows, proof.witnesses)
        assert not _verify(tampered, c, point, mle_evaluate(values, point), tiny_setup)

    def test_single_variable(self, tiny_setup):
        values = [FR(6), FR(9)]
        point = [FR(4)]
        proof, c = _prove(values, point, tiny_setup)
        assert proof.fold_commitments == []
        assert _verify(proof, c, point, mle_evaluate(values, point), tiny_setup)

    def test_zero_variables(self, tiny_setup):
        values = [FR(13)]
        proof, c = _prove(values, [], tiny_setup)
        assert _verify(proof, c, [], FR(13), tiny_setup)
        assert not _verify(proof, c, [], FR(14), tiny_setup)

    def test_malformed_shape(self, tiny_setup):
        values = [FR(1), FR(2), FR(3), FR(4)]
        point = [FR(10), FR(20)]
        proof, c = _prove(values, point, tiny_setup)
        broken = EvaluationProof([], proof.evaluations, proof.witnesses)
        with pytest.raises(ProtocolError):
            _verify(broken, c, point, mle_evaluate(values, point), tiny_setup)


# ─────────────────────────────────────────────────────────────────────
# Transcript
# ─────────────────────────────────────────────────────────────────────

class TestTranscript:

    def test_deterministic(self):
        t1, t2 = Transcript(), Transcript()
        for t in (t1, t2):
            t.append_u64(b"n", 3)
            t.append_scalars(b"s", [FR(1), FR(2)])
        assert t1.challenge_scalar(b"c") == t2.challenge_scalar(b"c")

    def test_label_separation(self):
        t1, t2 = Transcript(), Transcript()
        t1.append_u64(b"a", 1)
        t2.append_u64(b"b", 1)
        assert t1.challenge_scalar(b"c") != t2.challenge_scalar(b"c")

    def test_domain_label(self):
        assert Transcript(b"x").challenge_bytes(b"c") != Transcript(b"y").challenge_bytes(b"c")

    def test_chaining(self):
        t = Transcript()
        a, b = t.challenge_scalars(b"c", 2)
        assert a != b

    def test_challenge_bytes_length(self):
        assert len(Transcript().challenge_bytes(b"h")) == 32
