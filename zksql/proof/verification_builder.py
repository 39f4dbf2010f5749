"""
검증 빌더 (VerificationBuilder)
================================

Verifier가 플랜 트리를 다시 훑을 때, Prover가 내보낸 정보를 같은 순서로 소비한다.

  try_consume_final_round_mle_evaluation(s)  중간 MLE의 평가값
  try_consume_post_result_challenge          post-result 챌린지
  try_consume_chi_evaluation                 선언된 출력 길이의 chi 평가값
  try_consume_bit_distribution               부호 가젯의 비트 분포
  try_produce_sumcheck_subpolynomial_evaluation
      서브다항식 평가값을 누적한다:
          sumcheck_evaluation += ρₖ · wₖ · Pₖ(r)
      wₖ = eq(τ, r) (IDENTITY) 또는 1 (ZERO_SUM)

하나라도 순서, 개수가 어긋나거나 남으면 ProtocolError이다.
이 결정성이 증명을 비대화식으로 재생 가능하게 만든다.
"""

from zksql.errors import ProtocolError
from zksql.field import FR
from zksql.proof.sumcheck_subpolynomial import SumcheckSubpolynomialType


class VerificationBuilder:
    """
    Args:
        mle_evaluations: 중간 MLE 평가값 (증명에 담긴 순서)
        chi_evaluations: 선언된 출력 길이들의 chi 평가값
        post_result_challenges: post-result 챌린지
        bit_distributions: 부호 가젯 비트 분포
        subpolynomial_multipliers: 서브다항식마다의 랜덤 승수 ρ
        entrywise_multiplier: eq(τ, r)
        max_degree: 섬체크 증명의 라운드 다항식 차수 (None이면 제한 없음)
    """

    def __init__(
        self,
        mle_evaluations,
        chi_evaluations,
        post_result_challenges,
        bit_distributions,
        subpolynomial_multipliers,
        entrywise_multiplier,
        max_degree=None,
    ):
        self.mle_evaluations = list(mle_evaluations)
        self.chi_evaluations = list(chi_evaluations)
        self.post_result_challenges = list(post_result_challenges)
        self.bit_distributions = list(bit_distributions)
        self.subpolynomial_multipliers = list(subpolynomial_multipliers)
        self.entrywise_multiplier = entrywise_multiplier
        self.max_degree = max_degree

        self.consumed_mle_evaluations = 0
        self.consumed_chi_evaluations = 0
        self.consumed_post_result_challenges = 0
        self.consumed_bit_distributions = 0
        self.produced_subpolynomials = 0
        self.sumcheck_evaluation = FR(0)

    @staticmethod
    def _take(items, index, what):
        if index >= len(items):
            raise ProtocolError(f"{what}이(가) 부족합니다 (요청 {index + 1}, 보유 {len(items)})")
        return items[index]

    def try_consume_final_round_mle_evaluation(self):
        value = self._take(self.mle_evaluations, self.consumed_mle_evaluations, "중간 MLE 평가값")
        self.consumed_mle_evaluations += 1
        return value

    def try_consume_final_round_mle_evaluations(self, count):
        return [self.try_consume_final_round_mle_evaluation() for _ in range(count)]

    def try_consume_chi_evaluation(self):
        value = self._take(self.chi_evaluations, self.consumed_chi_evaluations, "chi 평가값")
        self.consumed_chi_evaluations += 1
        return value

    def try_consume_post_result_challenge(self):
        value = self._take(
            self.post_result_challenges, self.consumed_post_result_challenges, "post-result 챌린지"
        )
        self.consumed_post_result_challenges += 1
        return value

    def try_consume_bit_distribution(self):
        value = self._take(self.bit_distributions, self.consumed_bit_distributions, "비트 분포")
        self.consumed_bit_distributions += 1
        return value

    def try_produce_sumcheck_subpolynomial_evaluation(self, subpolynomial_type, evaluation, degree):
        multiplier = self._take(
            self.subpolynomial_multipliers, self.produced_subpolynomials, "서브다항식 승수"
        )
        self.produced_subpolynomials += 1

        if subpolynomial_type == SumcheckSubpolynomialType.IDENTITY:
            weight = self.entrywise_multiplier
            sumcheck_degree = degree + 1
        else:
            weight = FR(1)
            sumcheck_degree = degree
        if self.max_degree is not None and sumcheck_degree > self.max_degree:
            raise ProtocolError(
                f"서브다항식 차수 {sumcheck_degree}가 섬체크 차수 {self.max_degree}를 초과합니다"
            )
        self.sumcheck_evaluation = self.sumcheck_evaluation + multiplier * weight * evaluation

    def check_all_consumed(self):
        remaining = [
            ("중간 MLE 평가값", len(self.mle_evaluations) - self.consumed_mle_evaluations),
            ("chi 평가값", len(self.chi_evaluations) - self.consumed_chi_evaluations),
            ("post-result 챌린지", len(self.post_result_challenges) - self.consumed_post_result_challenges),
            ("비트 분포", len(self.bit_distributions) - self.consumed_bit_distributions),
            ("서브다항식 승수", len(self.subpolynomial_multipliers) - self.produced_subpolynomials),
        ]
        for what, count in remaining:
            if count != 0:
                raise ProtocolError(f"소비되지 않은 {what}이(가) {count}개 남았습니다")
