"""
Prover First Round: 평문 계산과 결과 바인딩
=============================================

  ┌─────────────────────────────────────────────────┐
  │  입력:  플랜, 원본 테이블, 파라미터               │
  │  출력:  ProvableQueryResult, post-result 챌린지   │
  └─────────────────────────────────────────────────┘

**과정**:
  1. 플랜을 평문으로 평가 (FirstRoundBuilder가 길이와 챌린지 수를 모음)
  2. 결과 테이블을 바이트로 인코딩
  3. 트랜스크립트에 바인딩 (Verifier가 같은 순서로 재생):
       플랜 repr, 파라미터, 기본 컬럼 커밋먼트, 테이블 길이,
       range_length, chi 길이들, post-result 챌린지 수, 결과
  4. post-result 챌린지를 뽑는다

결과가 커밋된 뒤에 뽑은 챌린지이므로 Prover는 결과를 챌린지에 맞춰 고를 수 없다.
이 라운드의 Arena는 라운드가 끝나면 해제된다.
"""

from zksql.database.arena import Arena
from zksql.errors import ProtocolError
from zksql.mle import log2_up
from zksql.proof.first_round_builder import FirstRoundBuilder
from zksql.proof.provable_result import ProvableQueryResult


def execute(state):
    """First Round를 실행한다.

    Args:
        state: ProverState — provable_result, column_refs, post_result_challenges,
               num_sumcheck_variables와 증명의 First Round 필드를 기록한다.
    """
    plan = state.plan
    accessor = state.accessor
    table_refs = plan.get_table_references()

    # 평가 증명은 오프셋 0에서 커밋된 기본 컬럼만 다룬다
    for table_ref in table_refs:
        if accessor.get_offset(table_ref) != 0:
            raise ProtocolError(f"테이블 {table_ref}가 오프셋 0에서 커밋되지 않았습니다")

    # ── 1-2. 평문 계산과 결과 인코딩 ──
    builder = FirstRoundBuilder()
    with Arena() as alloc:
        result_table = plan.first_round_evaluate(builder, alloc, state.table_map(alloc), state.params)
        state.provable_result = ProvableQueryResult.from_table(result_table)

    state.column_refs = plan.get_column_references()
    table_lengths = [accessor.get_length(table_ref) for table_ref in table_refs]

    # ── 3. 트랜스크립트 바인딩 ──
    t = state.transcript
    t.append_bytes(b"plan", repr(plan).encode("utf-8"))
    t.append_scalars(b"params", [p.to_scalar() for p in state.params])
    t.append_commitments(
        b"base_commitments", [accessor.get_commitment(ref) for ref in state.column_refs]
    )
    t.append_u64(b"table_lengths", len(table_lengths))
    for length in table_lengths:
        t.append_u64(b"table_length", length)
    t.append_u64(b"range_length", builder.range_length)
    t.append_u64(b"chi_lengths", len(builder.chi_evaluation_lengths))
    for length in builder.chi_evaluation_lengths:
        t.append_u64(b"chi_length", length)
    t.append_u64(b"post_result_challenges", builder.num_post_result_challenges)
    t.append_u64(b"result_length", state.provable_result.table_length)
    t.append_bytes(b"result", state.provable_result.data)

    # ── 4. post-result 챌린지 ──
    state.post_result_challenges = t.challenge_scalars(
        b"post_result_challenge", builder.num_post_result_challenges
    )

    state.num_sumcheck_variables = log2_up(max(
        [builder.range_length, state.provable_result.table_length, 1]
        + table_lengths
        + builder.chi_evaluation_lengths
    ))

    proof = state.proof
    proof.range_length = builder.range_length
    proof.chi_evaluation_lengths = list(builder.chi_evaluation_lengths)
    proof.num_post_result_challenges = builder.num_post_result_challenges
