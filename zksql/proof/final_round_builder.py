"""
최종 라운드 빌더 (FinalRoundBuilder)
=====================================

증인 커밋 패스에서 호출 순서대로 다음을 쌓는다.

  (a) 커밋할 중간 MLE (produce_intermediate_mle)
  (b) 섬체크 서브다항식 (produce_sumcheck_subpolynomial)
  (c) 부호 가젯의 비트 분포 (produce_bit_distribution)
  (d) post-result 챌린지 소비 (consume_post_result_challenge)

쌓인 순서 자체가 프로토콜 계약이다. Verifier는 VerificationBuilder에서
정확히 같은 순서로 소비해야 한다.
"""

from zksql.errors import ProtocolError
from zksql.field import to_scalar
from zksql.proof.sumcheck_subpolynomial import SumcheckSubpolynomial


class FinalRoundBuilder:
    def __init__(self, num_sumcheck_variables, post_result_challenges):
        self.num_sumcheck_variables = num_sumcheck_variables
        self.post_result_challenges = list(post_result_challenges)
        self._next_challenge = 0
        self.pcs_proof_mles = []
        self.sumcheck_subpolynomials = []
        self.bit_distributions = []

    def produce_intermediate_mle(self, values):
        """중간 컬럼을 커밋 대상으로 등록하고 그 스칼라 리스트를 돌려준다.

        돌려받은 리스트를 서브다항식 항에 그대로 써야 한다.
        """
        scalars = [to_scalar(v) for v in values]
        if len(scalars) > (1 << self.num_sumcheck_variables):
            raise ProtocolError(
                f"중간 MLE 길이 {len(scalars)}가 섬체크 도메인 {1 << self.num_sumcheck_variables}을 초과합니다"
            )
        self.pcs_proof_mles.append(scalars)
        return scalars

    def produce_sumcheck_subpolynomial(self, subpolynomial_type, terms):
        subpolynomial = SumcheckSubpolynomial(subpolynomial_type, terms)
        self.sumcheck_subpolynomials.append(subpolynomial)
        return subpolynomial

    def produce_bit_distribution(self, distribution):
        self.bit_distributions.append(distribution)

    def consume_post_result_challenge(self):
        if self._next_challenge >= len(self.post_result_challenges):
            raise ProtocolError("post-result 챌린지를 요청한 개수보다 많이 소비했습니다")
        challenge = self.post_result_challenges[self._next_challenge]
        self._next_challenge += 1
        return challenge

    @property
    def num_sumcheck_subpolynomials(self):
        return len(self.sumcheck_subpolynomials)
