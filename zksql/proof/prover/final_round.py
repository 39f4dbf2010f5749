"""
Prover Final Round: 증인 커밋
===============================

  ┌─────────────────────────────────────────────────┐
  │  Prover → Verifier: 중간 MLE 커밋먼트, 비트 분포  │
  │  Verifier → Prover: ρ₀..ρ_{k-1}, τ₀..τ_{ν-1}    │
  └─────────────────────────────────────────────────┘

**과정**:
  1. 플랜을 FinalRoundBuilder와 함께 다시 평가한다.
     비선형 노드가 중간 컬럼과 서브다항식, 비트 분포를 내보낸다.
  2. 중간 MLE를 오프셋 0에서 커밋한다 (설정된 백엔드 사용)
  3. config.check_constraints이면 모든 서브다항식을 행 단위로 확인
  4. 커밋먼트, 비트 분포, 서브다항식 수를 바인딩하고 ρ, τ를 뽑는다
"""

import logging

from zksql.commitment.committable_column import CommittableColumn
from zksql.errors import UnsatisfiedConstraint
from zksql.proof.final_round_builder import FinalRoundBuilder

logger = logging.getLogger(__name__)


def execute(state):
    """Final Round를 실행한다.

    Args:
        state: ProverState — final_builder, subpolynomial_multipliers,
               entrywise_point와 증명의 Final Round 필드를 기록한다.
    """
    builder = FinalRoundBuilder(state.num_sumcheck_variables, state.post_result_challenges)

    # ── 1. 증인 생성 ──
    state.plan.final_round_evaluate(
        builder, state.alloc, state.table_map(state.alloc), state.params
    )

    # ── 2. 중간 MLE 커밋 ──
    columns = [CommittableColumn.from_scalars(mle) for mle in builder.pcs_proof_mles]
    commitments = state.backend.compute_commitments(columns, 0, state.setup)

    # ── 3. 제약 점검 (선택) ──
    if state.config.check_constraints:
        for i, subpolynomial in enumerate(builder.sumcheck_subpolynomials):
            if not subpolynomial.is_satisfied():
                raise UnsatisfiedConstraint(
                    f"서브다항식 {i} ({subpolynomial.subpolynomial_type.value})이 만족되지 않습니다"
                )

    # ── 4. 바인딩과 챌린지 ──
    t = state.transcript
    t.append_commitments(b"final_round_commitments", commitments)
    t.append_u64(b"bit_distributions", len(builder.bit_distributions))
    for dist in builder.bit_distributions:
        t.append_bytes(b"bit_distribution", dist.to_bytes())
    t.append_u64(b"num_sumcheck_subpolynomials", builder.num_sumcheck_subpolynomials)

    state.subpolynomial_multipliers = t.challenge_scalars(
        b"subpolynomial_multiplier", builder.num_sumcheck_subpolynomials
    )
    state.entrywise_point = t.challenge_scalars(b"entrywise_point", state.num_sumcheck_variables)
    state.final_builder = builder

    logger.debug(
        "final round: %d intermediate mles, %d subpolynomials",
        len(builder.pcs_proof_mles),
        builder.num_sumcheck_subpolynomials,
    )

    proof = state.proof
    proof.final_round_commitments = commitments
    proof.bit_distributions = list(builder.bit_distributions)
    proof.num_sumcheck_subpolynomials = builder.num_sumcheck_subpolynomials
