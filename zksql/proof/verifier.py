"""
질의 Verifier
==============

커밋먼트만 가지고 질의 증명을 검증한다. 원본 컬럼 값은 보지 않는다.

**검증 과정**:
  1. 증명의 모양 확인 (평가값 수, 커밋먼트 수, 테이블 오프셋,
     개수와 길이가 0 이상이고 참조 테이블의 최대 행 수 이하인지)
  2. 섬체크 변수 수 ν 계산
  3. Fiat-Shamir 트랜스크립트 재생 → post-result 챌린지, ρ, τ, r, μ 복원
  4. 플랜을 VerificationBuilder와 함께 평가하여 서브다항식 평가값 누적
  5. 모든 증명 요소가 정확히 소비되었는지 확인
  6. 섬체크 최종 주장값 == Σ ρₖ·wₖ(r)·Pₖ(r)
  7. 결과 테이블의 MLE 평가값 == 플랜 출력 평가값, chi도 같은지 확인
  8. HyperKZG로 모든 평가값을 한꺼번에 확인
  9. 검증 해시 계산 후 결과 디코딩

구조적 불일치는 ProtocolError, 암호학적 검사 실패는 VerificationError.

사용 예시:
    >>> data = verify_query(plan, accessor, result, proof, verifier_setup)
    >>> data.table.rows()
"""

import logging
from dataclasses import dataclass

from zksql.commitment.commitment import Commitment
from zksql.database.table import OwnedTable
from zksql.errors import ProtocolError, QueryError, VerificationError
from zksql.field import FR
from zksql.hyperkzg import verify_evaluation
from zksql.mle import chi_eval, eq_eval, log2_up
from zksql.proof.sumcheck import verify_sumcheck
from zksql.proof.verification_builder import VerificationBuilder
from zksql.transcript import Transcript

logger = logging.getLogger(__name__)


def _check_count(name, value, upper=None):
    """증명에 담긴 개수, 길이가 0 이상의 정수 (그리고 upper 이하)인지 확인한다."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ProtocolError(f"{name}은(는) 0 이상의 정수여야 합니다: {value!r}")
    if upper is not None and value > upper:
        raise ProtocolError(f"{name} {value}가 참조 테이블의 최대 행 수 {upper}를 넘습니다")


@dataclass
class QueryData:
    """검증된 질의 결과와 검증 해시 (32바이트)."""

    table: OwnedTable
    verification_hash: bytes


def verify_query(plan, accessor, result, proof, verifier_setup, params=(), transcript_label=b"zksql"):
    """질의 증명을 검증한다.

    Args:
        plan: ProofPlan
        accessor: CommitmentAccessor (길이, 오프셋, 커밋먼트)
        result: ProvableQueryResult
        proof: QueryProof
        verifier_setup: VerifierSetup
        params: 질의 파라미터 (LiteralValue 리스트)
        transcript_label: Prover와 같은 트랜스크립트 레이블

    Returns:
        QueryData

    Raises:
        ProtocolError: 증명의 구조가 플랜과 맞지 않을 때
        VerificationError: 섬체크, 결과 평가값, 평가 증명 검사가 실패할 때
        QueryError: 검증은 통과했지만 결과를 타입에 맞게 디코딩할 수 없을 때
    """
    params = list(params)
    column_refs = plan.get_column_references()
    table_refs = plan.get_table_references()

    # ── Step 1: 증명 모양 ──
    if len(proof.base_evaluations) != len(column_refs):
        raise ProtocolError(
            f"기본 컬럼 평가값 {len(proof.base_evaluations)}개가 참조 컬럼 {len(column_refs)}개와 다릅니다"
        )
    if len(proof.final_round_mle_evaluations) != len(proof.final_round_commitments):
        raise ProtocolError("중간 MLE 평가값 수와 커밋먼트 수가 다릅니다")
    for table_ref in table_refs:
        if accessor.get_offset(table_ref) != 0:
            raise ProtocolError(f"테이블 {table_ref}가 오프셋 0에서 커밋되지 않았습니다")
    table_lengths = [accessor.get_length(table_ref) for table_ref in table_refs]

    # 행 수는 참조 테이블의 최대 길이를 넘을 수 없다
    max_rows = max(table_lengths, default=0)
    _check_count("range_length", proof.range_length, max_rows)
    _check_count("result.table_length", result.table_length, max_rows)
    for length in proof.chi_evaluation_lengths:
        _check_count("chi_evaluation_length", length, max_rows)
    _check_count("num_post_result_challenges", proof.num_post_result_challenges)
    _check_count("num_sumcheck_subpolynomials", proof.num_sumcheck_subpolynomials)

    # ── Step 2: ν ──
    num_vars = log2_up(max(
        [proof.range_length, result.table_length, 1]
        + table_lengths
        + list(proof.chi_evaluation_lengths)
    ))

    # ── Step 3: 트랜스크립트 재생 ──
    t = Transcript(transcript_label)

    # First Round
    t.append_bytes(b"plan", repr(plan).encode("utf-8"))
    t.append_scalars(b"params", [p.to_scalar() for p in params])
    base_commitments = [accessor.get_commitment(ref) for ref in column_refs]
    t.append_commitments(b"base_commitments", base_commitments)
    t.append_u64(b"table_lengths", len(table_lengths))
    for length in table_lengths:
        t.append_u64(b"table_length", length)
    t.append_u64(b"range_length", proof.range_length)
    t.append_u64(b"chi_lengths", len(proof.chi_evaluation_lengths))
    for length in proof.chi_evaluation_lengths:
        t.append_u64(b"chi_length", length)
    t.append_u64(b"post_result_challenges", proof.num_post_result_challenges)
    t.append_u64(b"result_length", result.table_length)
    t.append_bytes(b"result", result.data)
    post_result_challenges = t.challenge_scalars(
        b"post_result_challenge", proof.num_post_result_challenges
    )

    # Final Round
    t.append_commitments(b"final_round_commitments", proof.final_round_commitments)
    t.append_u64(b"bit_distributions", len(proof.bit_distributions))
    for dist in proof.bit_distributions:
        t.append_bytes(b"bit_distribution", dist.to_bytes())
    t.append_u64(b"num_sumcheck_subpolynomials", proof.num_sumcheck_subpolynomials)
    subpolynomial_multipliers = t.challenge_scalars(
        b"subpolynomial_multiplier", proof.num_sumcheck_subpolynomials
    )
    entrywise_point = t.challenge_scalars(b"entrywise_point", num_vars)

    # Sumcheck Round
    point, claim = verify_sumcheck(t, proof.sumcheck_proof, num_vars)

    # Evaluation Round
    t.append_scalars(b"base_evaluations", proof.base_evaluations)
    t.append_scalars(b"final_round_mle_evaluations", proof.final_round_mle_evaluations)
    commitments = base_commitments + list(proof.final_round_commitments)
    evaluations = list(proof.base_evaluations) + list(proof.final_round_mle_evaluations)
    mu = t.challenge_scalars(b"evaluation_batching", len(commitments))

    # ── Step 4: 플랜 평가 ──
    builder = VerificationBuilder(
        mle_evaluations=proof.final_round_mle_evaluations,
        chi_evaluations=[chi_eval(length, point) for length in proof.chi_evaluation_lengths],
        post_result_challenges=post_result_challenges,
        bit_distributions=proof.bit_distributions,
        subpolynomial_multipliers=subpolynomial_multipliers,
        entrywise_multiplier=eq_eval(entrywise_point, point),
        max_degree=proof.sumcheck_proof.max_degree,
    )
    evals_by_table = {table_ref: {} for table_ref in table_refs}
    for ref, value in zip(column_refs, proof.base_evaluations):
        evals_by_table.setdefault(ref.table_ref, {})[ref.column_id] = value
    chi_eval_map = {
        table_ref: chi_eval(length, point) for table_ref, length in zip(table_refs, table_lengths)
    }
    table_evaluation = plan.verifier_evaluate(builder, evals_by_table, chi_eval_map, params)

    # ── Step 5: 소비 확인 ──
    builder.check_all_consumed()

    # ── Step 6: 섬체크 최종 주장값 ──
    if claim != builder.sumcheck_evaluation:
        raise VerificationError("섬체크 최종 주장값이 서브다항식 평가값과 다릅니다")

    # ── Step 7: 결과 평가값 ──
    fields = plan.get_column_result_fields()
    try:
        result_evals = result.evaluate(point, [f.data_type for f in fields])
    except QueryError as e:
        raise VerificationError(f"결과 데이터를 평가할 수 없습니다: {e}") from e
    if len(result_evals) != len(table_evaluation.column_evals) or any(
        a != b for a, b in zip(result_evals, table_evaluation.column_evals)
    ):
        raise VerificationError("결과 테이블의 평가값이 플랜 출력과 다릅니다")
    if chi_eval(result.table_length, point) != table_evaluation.chi_eval:
        raise VerificationError("결과 테이블의 길이가 플랜 출력과 다릅니다")

    # ── Step 8: 평가 증명 ──
    combined_commitment = Commitment.identity()
    combined_evaluation = FR(0)
    for coeff, commitment, value in zip(mu, commitments, evaluations):
        combined_commitment = combined_commitment + commitment * coeff
        combined_evaluation = combined_evaluation + coeff * value
    if not verify_evaluation(
        t, proof.evaluation_proof, combined_commitment.point, point, combined_evaluation, verifier_setup
    ):
        raise VerificationError("HyperKZG 평가 증명 검증에 실패했습니다")

    # ── Step 9: 검증 해시와 디코딩 ──
    verification_hash = t.challenge_bytes(b"verification_hash")
    logger.debug("query verified: %d result rows", result.table_length)
    return QueryData(result.to_owned_table(fields), verification_hash)
