"""
Prover Evaluation Round: 다중선형 평가 증명
=============================================

  ┌─────────────────────────────────────────────────┐
  │  Prover → Verifier: 기본 컬럼과 중간 MLE의 r 평가값 │
  │  Verifier → Prover: μ₀, μ₁, ...                  │
  │  Prover → Verifier: HyperKZG 증명 하나            │
  └─────────────────────────────────────────────────┘

**배치**:
  커밋먼트가 선형이므로 모든 벡터 vₖ를 μ로 묶은 결합 벡터
      v = Σ μₖ · vₖ
  의 커밋먼트는 Σ μₖ · Cₖ 이고, 평가값은 Σ μₖ · yₖ 이다.
  따라서 평가 증명 하나로 모든 평가값을 한꺼번에 확인한다.
"""

from zksql.field import FR
from zksql.hyperkzg import prove_evaluation
from zksql.mle import mle_evaluate


def execute(state):
    """Evaluation Round를 실행한다.

    Args:
        state: ProverState — 증명의 Evaluation Round 필드를 기록한다.
    """
    point = state.evaluation_point
    size = 1 << state.num_sumcheck_variables

    # ── 1. 평가값 ──
    base_columns = [
        state.alloc.alloc_slice(
            state.accessor.get_owned_table(ref.table_ref).column(ref.column_id).scalars()
        )
        for ref in state.column_refs
    ]
    mles = state.final_builder.pcs_proof_mles
    base_evaluations = [mle_evaluate(col, point) for col in base_columns]
    mle_evaluations = [mle_evaluate(mle, point) for mle in mles]

    t = state.transcript
    t.append_scalars(b"base_evaluations", base_evaluations)
    t.append_scalars(b"final_round_mle_evaluations", mle_evaluations)

    # ── 2. μ 배치 ──
    vectors = base_columns + mles
    mu = t.challenge_scalars(b"evaluation_batching", len(vectors))
    combined = state.alloc.alloc_slice_fill(FR(0), size)
    for coeff, vector in zip(mu, vectors):
        for i, v in enumerate(vector):
            combined[i] = combined[i] + coeff * v

    # ── 3. HyperKZG ──
    proof = state.proof
    proof.base_evaluations = base_evaluations
    proof.final_round_mle_evaluations = mle_evaluations
    proof.evaluation_proof = prove_evaluation(t, combined, point, state.setup)
