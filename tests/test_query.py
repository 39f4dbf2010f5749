"""
End-to-end tests: prove a query over a committed table and verify it from commitments only.

Covers:
- FilterExec (non-empty, empty, placeholder, compound predicate with committed gadgets)
- ProjectionExec over TableExec
- Rejection of a modified result, modified proof, wrong params, wrong table, wrong label
- Structural errors (missing evaluation, table not committed at offset 0)
- Verification hash stability
- ProofConfig: parallel backend, constraint self-check
"""

import pytest
from zksql.config import ProofConfig
from zksql.database.accessor import OwnedTableAccessor
from zksql.database.column_type import ColumnType
from zksql.database.literal import LiteralValue
from zksql.database.owned_table_utility import bigint, owned_table, varchar
from zksql.dsl import (
    add, aliased, and_, col_expr_plan, column, const_bigint, equal, filter_exec, ge, gt,
    multiply, placeholder, projection, table_exec,
)
from zksql.errors import ProtocolError, UnsatisfiedConstraint, VerificationError
from zksql.field import FR
from zksql.proof.provable_result import ProvableQueryResult
from zksql.proof.verifiable_query_result import VerifiableQueryResult
from zksql.proof.verifier import verify_query


# ─────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────

@pytest.fixture(scope="module")
def filter_plan(table_ref, accessor):
    """SELECT a, b FROM sxt.t WHERE a > 1"""
    return filter_exec(
        [col_expr_plan(table_ref, "a", accessor), col_expr_plan(table_ref, "b", accessor)],
        table_ref,
        gt(column(table_ref, "a", accessor), const_bigint(1)),
    )


@pytest.fixture(scope="module")
def filter_vqr(filter_plan, accessor, setup):
    return VerifiableQueryResult.new(filter_plan, accessor, setup)


@pytest.fixture(scope="module")
def commitment_accessor(accessor):
    return accessor.to_commitment_accessor()


# ─────────────────────────────────────────────────────────────────────
# Honest proofs
# ─────────────────────────────────────────────────────────────────────

class TestFilter:
    """필터 질의의 증명과 검증."""

    def test_filter_result(self, filter_plan, filter_vqr, commitment_accessor, verifier_setup):
        data = filter_vqr.verify(filter_plan, commitment_accessor, verifier_setup)
        assert data.table == owned_table([bigint("a", [2, 3]), varchar("b", ["b", "c"])])
        assert data.table.rows() == [(2, "b"), (3, "c")]

    def test_proof_shape(self, filter_vqr):
        proof = filter_vqr.proof
        assert proof.num_post_result_challenges == 2
        assert proof.chi_evaluation_lengths == [2]
        assert proof.range_length == 3
        assert len(proof.bit_distributions) == 1
        assert len(proof.base_evaluations) == 2
        assert len(proof.final_round_mle_evaluations) == len(proof.final_round_commitments)

    def test_empty_result(self, table_ref, accessor, commitment_accessor, setup, verifier_setup):
        """0행 결과도 증명, 검증된다."""
        plan = filter_exec(
            [col_expr_plan(table_ref, "b", accessor)],
            table_ref,
            gt(column(table_ref, "a", accessor), const_bigint(10)),
        )
        vqr = VerifiableQueryResult.new(plan, accessor, setup)
        data = vqr.verify(plan, commitment_accessor, verifier_setup)
        assert data.table.num_rows == 0
        assert data.table.identifiers() == ["b"]

    def test_all_rows(self, table_ref, accessor, commitment_accessor, setup, verifier_setup):
        plan = filter_exec(
            [col_expr_plan(table_ref, "b", accessor)],
            table_ref,
            ge(column(table_ref, "a", accessor), const_bigint(1)),
        )
        vqr = VerifiableQueryResult.new(plan, accessor, setup)
        data = vqr.verify(plan, commitment_accessor, verifier_setup)
        assert data.table.rows() == [("a",), ("b",), ("c",)]

    def test_placeholder(self, table_ref, accessor, commitment_accessor, setup, verifier_setup):
        plan = filter_exec(
            [col_expr_plan(table_ref, "b", accessor)],
            table_ref,
            equal(column(table_ref, "a", accessor), placeholder(1, ColumnType.BIGINT)),
        )
        params = [LiteralValue.bigint(2)]
        vqr = VerifiableQueryResult.new(plan, accessor, setup, params)
        data = vqr.verify(plan, commitment_accessor, verifier_setup, params)
        assert data.table.rows() == [("b",)]

        with pytest.raises(VerificationError):
            vqr.verify(plan, commitment_accessor, verifier_setup, [LiteralValue.bigint(3)])

    def test_compound_predicate(self, table_ref, mixed_accessor, setup, verifier_setup):
        """SELECT name, x * y AS xy WHERE flag AND x >= y"""
        acc = mixed_accessor
        plan = filter_exec(
            [
                col_expr_plan(table_ref, "name", acc),
                aliased(multiply(column(table_ref, "x", acc), column(table_ref, "y", acc)), "xy"),
            ],
            table_ref,
            and_(
                column(table_ref, "flag", acc),
                ge(column(table_ref, "x", acc), column(table_ref, "y", acc)),
            ),
        )
        vqr = VerifiableQueryResult.new(plan, acc, setup)
        data = vqr.verify(plan, acc.to_commitment_accessor(), verifier_setup)
        assert data.table.rows() == [("ann", 10), ("dee", 49)]


class TestProjection:

    def test_projection_over_table(self, table_ref, accessor, commitment_accessor, setup, verifier_setup):
        plan = projection(
            [
                aliased(add(column(table_ref, "a", accessor), const_bigint(1)), "a1"),
                col_expr_plan(table_ref, "b", accessor),
            ],
            table_exec(table_ref, accessor),
        )
        vqr = VerifiableQueryResult.new(plan, accessor, setup)
        data = vqr.verify(plan, commitment_accessor, verifier_setup)
        assert data.table.rows() == [(2, "a"), (3, "b"), (4, "c")]

    def test_table_scan(self, table_ref, accessor, commitment_accessor, setup, verifier_setup):
        plan = table_exec(table_ref, accessor)
        vqr = VerifiableQueryResult.new(plan, accessor, setup)
        data = vqr.verify(plan, commitment_accessor, verifier_setup)
        assert data.table.rows() == [(1, "a"), (2, "b"), (3, "c")]
        assert vqr.proof.final_round_commitments == []


# ─────────────────────────────────────────────────────────────────────
# Rejections
# ─────────────────────────────────────────────────────────────────────

class TestRejection:
    """수정된 결과나 증명은 거부되어야 한다."""

    def test_modified_result(self, filter_plan, filter_vqr, commitment_accessor, verifier_setup):
        forged = ProvableQueryResult.from_columns(
            list(owned_table([bigint("a", [2, 3]), varchar("b", ["b", "x"])]).columns.values()), 2
        )
        with pytest.raises(VerificationError):
            VerifiableQueryResult(forged, filter_vqr.proof).verify(
                filter_plan, commitment_accessor, verifier_setup
            )

    def test_dropped_row(self, filter_plan, filter_vqr, commitment_accessor, verifier_setup):
        forged = ProvableQueryResult.from_columns(
            list(owned_table([bigint("a", [3]), varchar("b", ["c"])]).columns.values()), 1
        )
        with pytest.raises(VerificationError):
            VerifiableQueryResult(forged, filter_vqr.proof).verify(
                filter_plan, commitment_accessor, verifier_setup
            )

    def test_truncated_result_data(self, filter_plan, filter_vqr, commitment_accessor, verifier_setup):
        result = filter_vqr.result
        forged = ProvableQueryResult(result.num_columns, result.table_length, result.data[:-1])
        with pytest.raises(VerificationError):
            verify_query(filter_plan, commitment_accessor, forged, filter_vqr.proof, verifier_setup)

    def test_modified_base_evaluation(self, filter_plan, filter_vqr, commitment_accessor, verifier_setup):
        proof = filter_vqr.proof
        original = list(proof.base_evaluations)
        proof.base_evaluations[0] = proof.base_evaluations[0] + FR(1)
        try:
            with pytest.raises(VerificationError):
                filter_vqr.verify(filter_plan, commitment_accessor, verifier_setup)
        finally:
            proof.base_evaluations = original

    def test_missing_mle_evaluation(self, filter_plan, filter_vqr, commitment_accessor, verifier_setup):
        proof = filter_vqr.proof
        original = list(proof.final_round_mle_evaluations)
        proof.final_round_mle_evaluations = original[:-1]
        try:
            with pytest.raises(ProtocolError):
                filter_vqr.verify(filter_plan, commitment_accessor, verifier_setup)
        finally:
            proof.final_round_mle_evaluations = original

    @pytest.mark.parametrize("field,value", [
        ("range_length", -5),
        ("range_length", 4),
        ("chi_evaluation_lengths", [-1]),
        ("chi_evaluation_lengths", [10 ** 12]),
        ("num_post_result_challenges", -2),
        ("num_sumcheck_subpolynomials", -1),
        ("num_sumcheck_subpolynomials", 2.0),
    ])
    def test_invalid_counts(self, filter_plan, filter_vqr, commitment_accessor, verifier_setup,
                            field, value):
        """음수, 정수가 아닌 값, 테이블보다 긴 길이는 ProtocolError."""
        proof = filter_vqr.proof
        original = getattr(proof, field)
        setattr(proof, field, value)
        try:
            with pytest.raises(ProtocolError):
                filter_vqr.verify(filter_plan, commitment_accessor, verifier_setup)
        finally:
            setattr(proof, field, original)

    @pytest.mark.parametrize("table_length", [-1, 10 ** 12])
    def test_invalid_result_length(self, filter_plan, filter_vqr, commitment_accessor, verifier_setup,
                                   table_length):
        result = filter_vqr.result
        forged = ProvableQueryResult(result.num_columns, table_length, result.data)
        with pytest.raises(ProtocolError):
            verify_query(filter_plan, commitment_accessor, forged, filter_vqr.proof, verifier_setup)

    def test_wrong_table(self, table_ref, filter_plan, filter_vqr, setup, verifier_setup):
        other = OwnedTableAccessor.new_from_table(
            table_ref, owned_table([bigint("a", [1, 2, 4]), varchar("b", ["a", "b", "c"])]), setup
        )
        with pytest.raises(VerificationError):
            filter_vqr.verify(filter_plan, other.to_commitment_accessor(), verifier_setup)

    def test_wrong_transcript_label(self, filter_plan, accessor, commitment_accessor, setup, verifier_setup):
        config = ProofConfig(transcript_label=b"other")
        vqr = VerifiableQueryResult.new(filter_plan, accessor, setup, config=config)
        assert vqr.verify(filter_plan, commitment_accessor, verifier_setup, config=config).table.num_rows == 2
        with pytest.raises(VerificationError):
            vqr.verify(filter_plan, commitment_accessor, verifier_setup)

    def test_table_not_at_offset_zero(self, table_ref, small_table, filter_plan, filter_vqr, setup, verifier_setup):
        shifted = OwnedTableAccessor.new_from_table(table_ref, small_table, setup, offset=2)
        with pytest.raises(ProtocolError):
            VerifiableQueryResult.new(filter_plan, shifted, setup)
        with pytest.raises(ProtocolError):
            filter_vqr.verify(filter_plan, shifted.to_commitment_accessor(), verifier_setup)


# ─────────────────────────────────────────────────────────────────────
# Hash / config
# ─────────────────────────────────────────────────────────────────────

class TestVerificationHash:

    def test_stable(self, filter_plan, filter_vqr, commitment_accessor, verifier_setup):
        h1 = filter_vqr.verify(filter_plan, commitment_accessor, verifier_setup).verification_hash
        h2 = filter_vqr.verify(filter_plan, commitment_accessor, verifier_setup).verification_hash
        assert len(h1) == 32
        assert h1 == h2

    def test_differs_between_queries(self, table_ref, accessor, filter_plan, filter_vqr,
                                     commitment_accessor, setup, verifier_setup):
        plan = table_exec(table_ref, accessor)
        other = VerifiableQueryResult.new(plan, accessor, setup)
        h1 = filter_vqr.verify(filter_plan, commitment_accessor, verifier_setup).verification_hash
        h2 = other.verify(plan, commitment_accessor, verifier_setup).verification_hash
        assert h1 != h2


class TestConfig:

    def test_parallel_backend(self, filter_plan, accessor, commitment_accessor, setup, verifier_setup, filter_vqr):
        config = ProofConfig(backend="parallel", max_workers=2)
        vqr = VerifiableQueryResult.new(filter_plan, accessor, setup, config=config)
        assert vqr.proof.final_round_commitments == filter_vqr.proof.final_round_commitments
        data = vqr.verify(filter_plan, commitment_accessor, verifier_setup)
        assert data.table.rows() == [(2, "b"), (3, "c")]

    def test_check_constraints_honest(self, filter_plan, accessor, setup):
        config = ProofConfig(check_constraints=True)
        vqr = VerifiableQueryResult.new(filter_plan, accessor, setup, config=config)
        assert vqr.result.table_length == 2

    def test_check_constraints_catches_bad_gadget(self, table_ref, accessor, setup, monkeypatch):
        """부호 가젯이 잘못된 부호를 내보내면 Prover 자체 점검에서 걸린다."""
        from zksql.exprs import sign_expr

        original = sign_expr.decompose

        def flipped(value):
            sign, magnitude = original(value)
            return 1 - sign, magnitude

        monkeypatch.setattr(sign_expr, "decompose", flipped)
        plan = filter_exec(
            [col_expr_plan(table_ref, "b", accessor)],
            table_ref,
            gt(column(table_ref, "a", accessor), const_bigint(1)),
        )
        with pytest.raises(UnsatisfiedConstraint):
            VerifiableQueryResult.new(plan, accessor, setup, config=ProofConfig(check_constraints=True))
