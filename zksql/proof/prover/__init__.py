"""
질의 Prover: 4-라운드 프로토콜 오케스트레이터
===============================================

플랜 트리와 커밋된 테이블로부터 결과와 증명을 생성한다.

  ┌─────────────────────────────────────────────────────┐
  │  First Round: 평문 계산 + 결과 바인딩                 │
  │  플랜, 파라미터, 기본 커밋먼트, 길이, 결과 → 트랜스크립트 │
  │  Verifier → Prover: post-result 챌린지 (α, β, ...)   │
  ├─────────────────────────────────────────────────────┤
  │  Final Round: 증인 커밋                              │
  │  Prover → Verifier: 중간 MLE 커밋먼트, 비트 분포      │
  │  Verifier → Prover: ρ (서브다항식 승수), τ (eq 점)    │
  ├─────────────────────────────────────────────────────┤
  │  Sumcheck Round                                     │
  │  Prover → Verifier: 라운드 다항식 g₀ ... g_{ν-1}      │
  │  Verifier → Prover: 평가 점 r                        │
  ├─────────────────────────────────────────────────────┤
  │  Evaluation Round: 다중선형 평가 증명                 │
  │  Prover → Verifier: 기본 컬럼, 중간 MLE의 r 평가값    │
  │  Verifier → Prover: μ (배치 계수)                    │
  │  Prover → Verifier: 결합 벡터의 HyperKZG 증명         │
  └─────────────────────────────────────────────────────┘

First Round는 자체 Arena에서, 나머지 세 라운드는 하나의 Arena를 공유한다.

사용 예시:
    >>> result, proof = prove(plan, accessor, setup)
"""

import logging

from zksql.config import ProofConfig
from zksql.database.arena import Arena
from zksql.database.table import Table
from zksql.proof.prover import evaluation_round, final_round, first_round, sumcheck_round
from zksql.transcript import Transcript

logger = logging.getLogger(__name__)


class QueryProof:
    """질의 증명 데이터 컨테이너.

    First Round:
        range_length: 섬체크 도메인이 담아야 할 최대 행 수
        chi_evaluation_lengths: 플랜이 선언한 출력 길이들
        num_post_result_challenges: post-result 챌린지 수

    Final Round:
        final_round_commitments: 중간 MLE 커밋먼트 (Commitment 리스트)
        bit_distributions: 부호 가젯 비트 분포
        num_sumcheck_subpolynomials: 서브다항식 수

    Sumcheck Round:
        sumcheck_proof: SumcheckProof

    Evaluation Round:
        base_evaluations: 참조된 기본 컬럼의 r 평가값
        final_round_mle_evaluations: 중간 MLE의 r 평가값
        evaluation_proof: hyperkzg.EvaluationProof
    """

    def __init__(self):
        # First Round
        self.range_length = 0
        self.chi_evaluation_lengths = []
        self.num_post_result_challenges = 0
        # Final Round
        self.final_round_commitments = []
        self.bit_distributions = []
        self.num_sumcheck_subpolynomials = 0
        # Sumcheck Round
        self.sumcheck_proof = None
        # Evaluation Round
        self.base_evaluations = []
        self.final_round_mle_evaluations = []
        self.evaluation_proof = None


class ProverState:
    """라운드 간 공유되는 Prover 상태.

    속성 (입력):
        plan, accessor (OwnedTableAccessor), setup (ProverSetup), params, config

    속성 (라운드 간 생성):
        column_refs: 참조된 기본 컬럼 (First Round)
        provable_result: ProvableQueryResult (First Round)
        post_result_challenges, num_sumcheck_variables (First Round)
        final_builder: FinalRoundBuilder (Final Round)
        subpolynomial_multipliers, entrywise_point (Final Round)
        evaluation_point: 섬체크가 정한 r (Sumcheck Round)

    속성 (출력):
        proof: QueryProof
    """

    def __init__(self, plan, accessor, setup, params, config):
        # 입력
        self.plan = plan
        self.accessor = accessor
        self.setup = setup
        self.params = list(params)
        self.config = config
        self.backend = config.make_backend()

        # Fiat-Shamir 트랜스크립트
        self.transcript = Transcript(config.transcript_label)

        # 라운드별 결과
        self.column_refs = []
        self.provable_result = None
        self.post_result_challenges = []
        self.num_sumcheck_variables = 0
        self.final_builder = None
        self.subpolynomial_multipliers = []
        self.entrywise_point = []
        self.evaluation_point = []

        # 라운드 범위 할당기 (First Round 이후)
        self.alloc = None

        # 증명 출력
        self.proof = QueryProof()

    def table_map(self, alloc):
        """플랜이 참조하는 테이블을 alloc에 올린다."""
        return {
            table_ref: Table.from_owned(alloc, self.accessor.get_owned_table(table_ref))
            for table_ref in self.plan.get_table_references()
        }


def prove(plan, accessor, setup, params=(), config=None):
    """질의 증명 프로토콜을 실행한다.

    Args:
        plan: ProofPlan
        accessor: OwnedTableAccessor (원본 테이블과 커밋먼트)
        setup: ProverSetup
        params: 질의 파라미터 (LiteralValue 리스트)
        config: ProofConfig (None이면 기본값)

    Returns:
        (ProvableQueryResult, QueryProof)
    """
    state = ProverState(plan, accessor, setup, params, config or ProofConfig())

    # ┌─────────────────────────────────────────────────────┐
    # │  First Round: 평문 계산 + 결과 바인딩                 │
    # └─────────────────────────────────────────────────────┘
    first_round.execute(state)

    with Arena() as alloc:
        state.alloc = alloc

        # ┌─────────────────────────────────────────────────────┐
        # │  Final Round: 증인 커밋 → ρ, τ                       │
        # └─────────────────────────────────────────────────────┘
        final_round.execute(state)

        # ┌─────────────────────────────────────────────────────┐
        # │  Sumcheck Round: 라운드 다항식 → r                    │
        # └─────────────────────────────────────────────────────┘
        sumcheck_round.execute(state)

        # ┌─────────────────────────────────────────────────────┐
        # │  Evaluation Round: r 평가값 + HyperKZG               │
        # └─────────────────────────────────────────────────────┘
        evaluation_round.execute(state)

    state.alloc = None
    logger.debug(
        "query proved: %d result rows, %d sumcheck variables",
        state.provable_result.table_length,
        state.num_sumcheck_variables,
    )
    return state.provable_result, state.proof
