"""
zksql 공개 파라미터 (Structured Reference String)
===================================================

컬럼 커밋먼트와 다중선형 평가 증명에 필요한 공개 파라미터를 생성한다.

**구성**:
  ProverSetup = {
      G1 powers: [G1, τ·G1, τ²·G1, ..., τ^(max_len-1)·G1]
      G2 powers: [G2, τ·G2]
  }
  VerifierSetup = { G1, G2 powers }

  길이 n 컬럼 v를 오프셋 o에서 커밋하면
      C = Σᵢ vᵢ · τ^(o+i)·G1
  이므로 max_len은 커밋할 수 있는 최대 (오프셋 + 길이)이다.

**보안**:
  τ를 아는 사람은 임의의 거짓 증명을 만들 수 있다.
  실제 시스템에서는 MPC 세레모니로 τ를 생성해야 한다.
  여기서는 테스트 재현성을 위해 seed에서 결정론적으로 생성할 수 있다.

사용 예시:
    >>> setup = ProverSetup.generate(max_len=16, seed=42)
    >>> len(setup.g1_powers)  # 16
    >>> vs = setup.verifier_setup()
"""

import hashlib
import secrets

from py_ecc import optimized_bn128

from zksql.field import FR, G2, ec_mul, CURVE_ORDER, from_optimized_g1, to_optimized_g1


class ProverSetup:
    """Prover 측 공개 파라미터.

    속성:
        g1_powers: [τⁱ·G1] (아핀 좌표, i < max_len)
        g2_powers: [G2, τ·G2]
        max_len: 커밋 가능한 최대 오프셋 + 길이
    """

    def __init__(self, g1_powers, g2_powers):
        self.g1_powers = g1_powers
        self.g2_powers = g2_powers
        self.max_len = len(g1_powers)
        self._optimized_g1_powers = None

    @classmethod
    def generate(cls, max_len, seed=None):
        """공개 파라미터를 생성한다.

        Args:
            max_len: 지원할 최대 벡터 길이 (오프셋 포함)
            seed: 결정론적 생성을 위한 시드. None이면 안전한 난수를 쓴다.

        Returns:
            ProverSetup
        """
        if max_len < 1:
            raise ValueError("max_len은 1 이상이어야 합니다")

        # toxic waste τ
        if seed is not None:
            h = hashlib.sha256(str(seed).encode()).digest()
            tau_int = int.from_bytes(h, "big") % CURVE_ORDER
        else:
            tau_int = secrets.randbelow(CURVE_ORDER - 1) + 1
        tau = FR(tau_int)

        # 야코비안 좌표에서 누적 곱으로 계산한 뒤 아핀으로 정규화
        g1_powers = []
        tau_power = FR(1)
        for _ in range(max_len):
            point = optimized_bn128.multiply(optimized_bn128.G1, int(tau_power))
            g1_powers.append(from_optimized_g1(point))
            tau_power = tau_power * tau

        g2_powers = [G2, ec_mul(G2, tau)]
        return cls(g1_powers, g2_powers)

    @property
    def optimized_g1_powers(self):
        """가속 백엔드용 야코비안 G1 powers (처음 접근 시 계산 후 캐시)."""
        if self._optimized_g1_powers is None:
            self._optimized_g1_powers = [to_optimized_g1(p) for p in self.g1_powers]
        return self._optimized_g1_powers

    def verifier_setup(self):
        return VerifierSetup(self.g1_powers[0], self.g2_powers)


class VerifierSetup:
    """Verifier 측 공개 파라미터: G1 생성원과 [G2, τ·G2]."""

    def __init__(self, g1, g2_powers):
        self.g1 = g1
        self.g2_powers = g2_powers
