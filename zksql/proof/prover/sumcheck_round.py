"""
Prover Sumcheck Round
======================

  ┌─────────────────────────────────────────────────┐
  │  Prover → Verifier: g₀, ..., g_{ν-1}             │
  │  Verifier → Prover: r = (r₀, ..., r_{ν-1})       │
  └─────────────────────────────────────────────────┘

  F(x) = Σₖ ρₖ · wₖ(x) · Pₖ(x) 의 하이퍼큐브 합이 0임을 증명한다.
  모든 제약이 만족되면 이 합은 0이다.
"""

from zksql.proof.sumcheck import prove_sumcheck


def execute(state):
    """Sumcheck Round를 실행한다.

    Args:
        state: ProverState — evaluation_point와 proof.sumcheck_proof를 기록한다.
    """
    proof, point = prove_sumcheck(
        state.transcript,
        state.final_builder.sumcheck_subpolynomials,
        state.subpolynomial_multipliers,
        state.entrywise_point,
        state.num_sumcheck_variables,
    )
    state.evaluation_point = point
    state.proof.sumcheck_proof = proof
