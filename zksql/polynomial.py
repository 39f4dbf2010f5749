"""
zksql 기반 모듈: 일변수 다항식(Polynomial)
============================================

KZG 열기 증명과 섬체크(sumcheck) 라운드 다항식에서 쓰이는 일변수 다항식 연산.

**Polynomial 클래스**:
  계수(coefficient) 표현 기반 다항식. p(x) = c₀ + c₁·x + c₂·x² + ...
  컬럼 벡터 v를 커밋할 때는 v 자체를 계수 벡터로 본다:
      F_v(X) = Σ vᵢ · Xⁱ

**선형 인수 나눗셈 (divide_by_linear)**:
  (p(x) - p(z)) / (x - z) 를 합성 나눗셈(synthetic division)으로 계산한다.
  KZG 증인(witness) 계산에 쓰인다.

**라운드 다항식 보간 (interpolate_uni_poly)**:
  섬체크 라운드 다항식은 0, 1, ..., d 에서의 평가값으로 전송된다.
  Lagrange 보간으로 임의의 점 x에서의 값을 복원한다.

사용 예시:
    >>> from zksql.polynomial import Polynomial, interpolate_uni_poly
    >>> p = Polynomial([FR(1), FR(2), FR(3)])  # 1 + 2x + 3x²
    >>> p.evaluate(FR(2))                       # FR(17)
    >>> interpolate_uni_poly([FR(1), FR(3)], FR(5))  # 1 + 2·5 = FR(11)
"""

from zksql.field import FR


class Polynomial:
    """유한체 FR 위의 다항식.

    계수 리스트로 표현: coeffs = [c₀, c₁, c₂, ...] → c₀ + c₁x + c₂x² + ...

    예시:
        >>> p = Polynomial([FR(1), FR(2)])  # 1 + 2x
        >>> q = Polynomial([FR(3), FR(4)])  # 3 + 4x
        >>> (p + q).coeffs                   # [4, 6]
    """

    def __init__(self, coeffs=None):
        if coeffs is None:
            self.coeffs = [FR(0)]
        else:
            self.coeffs = [c if isinstance(c, FR) else FR(c) for c in coeffs]
            if not self.coeffs:
                self.coeffs = [FR(0)]
        self._trim()

    def _trim(self):
        """최고차 계수가 0인 항을 제거하여 정규화한다."""
        while len(self.coeffs) > 1 and self.coeffs[-1] == FR(0):
            self.coeffs.pop()

    def evaluate(self, point):
        """다항식을 주어진 점에서 평가한다 (Horner's method)."""
        if not isinstance(point, FR):
            point = FR(point)
        result = FR(0)
        for coeff in reversed(self.coeffs):
            result = result * point + coeff
        return result

    def __add__(self, other):
        """다항식 덧셈: p(x) + q(x)."""
        if isinstance(other, (int, FR)):
            other = Polynomial([other])
        max_len = max(len(self.coeffs), len(other.coeffs))
        result = []
        for i in range(max_len):
            a = self.coeffs[i] if i < len(self.coeffs) else FR(0)
            b = other.coeffs[i] if i < len(other.coeffs) else FR(0)
            result.append(a + b)
        return Polynomial(result)

    def scale(self, scalar):
        """스칼라 곱: s · p(x)."""
        if not isinstance(scalar, FR):
            scalar = FR(scalar)
        return Polynomial([c * scalar for c in self.coeffs])

    def divide_by_linear(self, point):
        """(p(x) - p(z)) / (x - z)의 몫 다항식을 구한다.

        합성 나눗셈: 최고차 계수부터 내려오며
            qᵢ₋₁ = cᵢ + z · qᵢ
        를 계산한다. 마지막 누적값이 p(z)이며 이는 나머지로 버려진다.

        Args:
            point: 나눌 선형 인수의 근 z

        Returns:
            Polynomial: 몫 q(x), 차수는 deg(p) - 1
        """
        if not isinstance(point, FR):
            point = FR(point)
        n = len(self.coeffs)
        if n == 1:
            return Polynomial.zero()
        quotient = [FR(0)] * (n - 1)
        acc = FR(0)
        for i in range(n - 1, 0, -1):
            acc = acc * point + self.coeffs[i]
            quotient[i - 1] = acc
        return Polynomial(quotient)

    @classmethod
    def zero(cls):
        return cls([FR(0)])

    def __repr__(self):
        return f"Polynomial({[int(c) for c in self.coeffs]})"


# ─────────────────────────────────────────────────────────────────────
# 섬체크 라운드 다항식 보간
# ─────────────────────────────────────────────────────────────────────

def interpolate_uni_poly(evals, x):
    """점 0, 1, ..., d에서의 평가값으로 정의된 다항식을 x에서 평가한다.

    Lagrange 보간:
        g(x) = Σᵢ evals[i] · Πⱼ≠ᵢ (x - j) / (i - j)

    Args:
        evals: [g(0), g(1), ..., g(d)]
        x: 평가 점 (FR)

    Returns:
        FR: g(x)
    """
    if not isinstance(x, FR):
        x = FR(x)
    d = len(evals)
    result = FR(0)
    for i in range(d):
        num = FR(1)
        den = FR(1)
        for j in range(d):
            if i == j:
                continue
            num = num * (x - FR(j))
            den = den * FR(i - j)
        result = result + evals[i] * num / den
    return result
