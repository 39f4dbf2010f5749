"""
섬체크 서브다항식 (SumcheckSubpolynomial)
==========================================

Prover가 최종 라운드에서 내보내는 대수 제약 하나.

  P(x) = Σₜ coeffₜ · Π mleₜ,ⱼ(x)

**타입**:
  - IDENTITY: 모든 행에서 P = 0 (행 단위 항등식)
  - ZERO_SUM: 모든 행에 대한 P의 합 = 0

섬체크는 IDENTITY에 eq(x, τ)를 곱해 "합이 0"인 주장으로 바꾼다.
따라서 IDENTITY의 섬체크 차수는 항 차수 + 1이다.

MLE는 FR 리스트이며, 길이보다 뒤의 행은 0으로 본다.
"""

from enum import Enum

from zksql.field import FR


class SumcheckSubpolynomialType(Enum):
    IDENTITY = "identity"
    ZERO_SUM = "zero_sum"


class SumcheckSubpolynomial:
    """서브다항식: 타입과 (계수, [MLE, ...]) 항 리스트."""

    def __init__(self, subpolynomial_type, terms):
        self.subpolynomial_type = subpolynomial_type
        self.terms = [
            (coeff if isinstance(coeff, FR) else FR(coeff), list(mles))
            for coeff, mles in terms
        ]

    def degree(self):
        """항 차수의 최댓값 (eq 인자 제외)."""
        return max((len(mles) for _, mles in self.terms), default=0)

    def sumcheck_degree(self):
        if self.subpolynomial_type == SumcheckSubpolynomialType.IDENTITY:
            return self.degree() + 1
        return self.degree()

    def num_rows(self):
        return max((len(m) for _, mles in self.terms for m in mles), default=0)

    def evaluate_row(self, i):
        total = FR(0)
        for coeff, mles in self.terms:
            product = coeff
            for mle in mles:
                product = product * (mle[i] if i < len(mle) else FR(0))
            total = total + product
        return total

    def is_satisfied(self):
        """행 단위로 제약이 만족되는지 확인한다 (디버깅과 적대적 테스트용)."""
        rows = [self.evaluate_row(i) for i in range(self.num_rows())]
        if self.subpolynomial_type == SumcheckSubpolynomialType.IDENTITY:
            return all(r == FR(0) for r in rows)
        total = FR(0)
        for r in rows:
            total = total + r
        return total == FR(0)
