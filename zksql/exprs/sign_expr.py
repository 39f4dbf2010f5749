"""
부호 가젯 (비트 분해)
======================

컬럼 d의 각 행에 대해 부호 s[i] (d[i] < 0 이면 1)를 증명한다.

**부호-크기 분해**:
    d ≥ 0:  s = 0, M = d
    d < 0:  s = 1, M = -d - 1
  항상 d = M (s=0) 또는 d = -1 - M (s=1)이며, 두 경우를 한 식으로 쓰면
      d - M + 2·s·M + s = 0
  M은 252비트 미만이어야 한다. 넘으면 ColumnOperationError.
  p ≈ 2^253.6 이므로 [0, 2^252)와 [p - 2^252, p)가 겹치지 않아 s가 하나로 정해진다.
  DECIMAL75(75, s) 두 값의 차이 (최대 2·(10^75 - 1) < 2^251)도 들어간다.

**비트 분포 (BitDistribution)**:
  모든 행의 253비트 단어 w = M | (s << 252)에 대해
      vary_mask     = (OR 전체) XOR (AND 전체)  모든 행에서 같지 않은 비트
      constant_mask = AND 전체                  모든 행에서 1인 비트
  Prover가 공개하고 트랜스크립트에 바인딩된다.

**Prover**:
  1. 변하는 크기 비트 bₖ를 오름차순으로 커밋, 각각 booleanity bₖ² - bₖ = 0
  2. 부호가 변하면 s를 커밋, booleanity
  3. 재구성 항등식 d - M + 2sM + s = 0,
     M = Σ 2ᵏ·bₖ + C·chi  (C = 상수 크기 비트들의 값)
     부호가 상수 c이면 s = c·chi

**Verifier**:
  같은 순서로 비트 평가값을 소비하여 같은 항등식의 평가값을 내보내고
  s의 평가값(또는 c·chi_eval)을 돌려준다.
"""

from zksql.errors import ColumnOperationError, ProtocolError
from zksql.field import FR
from zksql.proof.sumcheck_subpolynomial import SumcheckSubpolynomialType


SIGN_BIT = 252
WORD_BITS = SIGN_BIT + 1
MAGNITUDE_MASK = (1 << SIGN_BIT) - 1


def decompose(value):
    """정수 하나를 (부호, 크기)로 분해한다."""
    if value >= 0:
        sign, magnitude = 0, value
    else:
        sign, magnitude = 1, -value - 1
    if magnitude >> SIGN_BIT:
        raise ColumnOperationError(f"부호 가젯의 표현 범위를 벗어난 값입니다: {value}")
    return sign, magnitude


class BitDistribution:
    def __init__(self, vary_mask, constant_mask):
        self.vary_mask = vary_mask
        self.constant_mask = constant_mask

    @classmethod
    def from_values(cls, values):
        if not values:
            return cls(0, 0)
        or_all = 0
        and_all = (1 << WORD_BITS) - 1
        for v in values:
            sign, magnitude = decompose(v)
            word = magnitude | (sign << SIGN_BIT)
            or_all |= word
            and_all &= word
        return cls(or_all ^ and_all, and_all)

    def is_valid(self):
        return (
            self.vary_mask & self.constant_mask == 0
            and 0 <= self.vary_mask < (1 << WORD_BITS)
            and 0 <= self.constant_mask < (1 << WORD_BITS)
        )

    def varying_magnitude_bits(self):
        return [k for k in range(SIGN_BIT) if (self.vary_mask >> k) & 1]

    def sign_varies(self):
        return bool((self.vary_mask >> SIGN_BIT) & 1)

    def constant_sign(self):
        return (self.constant_mask >> SIGN_BIT) & 1

    def constant_magnitude(self):
        return self.constant_mask & MAGNITUDE_MASK

    def to_bytes(self):
        return self.vary_mask.to_bytes(32, "big") + self.constant_mask.to_bytes(32, "big")

    def __eq__(self, other):
        if not isinstance(other, BitDistribution):
            return NotImplemented
        return self.vary_mask == other.vary_mask and self.constant_mask == other.constant_mask

    def __repr__(self):
        return f"BitDistribution(vary={self.vary_mask:#x}, constant={self.constant_mask:#x})"


def first_round_evaluate_sign(alloc, values):
    return alloc.alloc_slice([decompose(v)[0] == 1 for v in values])


def final_round_evaluate_sign(builder, alloc, values):
    """정수 리스트 values의 부호를 증명한다.

    Returns:
        list[bool]: 부호 (음수이면 True)
    """
    n = len(values)
    decomposed = [decompose(v) for v in values]
    dist = BitDistribution.from_values(values)
    builder.produce_bit_distribution(dist)

    d = alloc.alloc_slice([FR(v) for v in values])
    chi = alloc.alloc_slice_fill(FR(1), n)

    bits = []
    for k in dist.varying_magnitude_bits():
        bit = builder.produce_intermediate_mle([(m >> k) & 1 for _, m in decomposed])
        builder.produce_sumcheck_subpolynomial(
            SumcheckSubpolynomialType.IDENTITY,
            [(FR(1), [bit, bit]), (FR(-1), [bit])],
        )
        bits.append((k, bit))

    constant = FR(dist.constant_magnitude())
    terms = [(FR(1), [d]), (FR(0) - constant, [chi])]
    for k, bit in bits:
        terms.append((FR(0) - FR(1 << k), [bit]))

    if dist.sign_varies():
        sign = builder.produce_intermediate_mle([s for s, _ in decomposed])
        builder.produce_sumcheck_subpolynomial(
            SumcheckSubpolynomialType.IDENTITY,
            [(FR(1), [sign, sign]), (FR(-1), [sign])],
        )
        for k, bit in bits:
            terms.append((FR(2 << k), [sign, bit]))
        terms.append((constant * FR(2), [sign, chi]))
        terms.append((FR(1), [sign]))
    else:
        c = FR(dist.constant_sign())
        for k, bit in bits:
            terms.append((c * FR(2 << k), [chi, bit]))
        terms.append((c * constant * FR(2), [chi, chi]))
        terms.append((c, [chi]))

    builder.produce_sumcheck_subpolynomial(SumcheckSubpolynomialType.IDENTITY, terms)
    return alloc.alloc_slice([s == 1 for s, _ in decomposed])


def verifier_evaluate_sign(builder, d_eval, chi_eval):
    dist = builder.try_consume_bit_distribution()
    if not dist.is_valid():
        raise ProtocolError(f"잘못된 비트 분포입니다: {dist!r}")

    bit_evals = []
    for k in dist.varying_magnitude_bits():
        b = builder.try_consume_final_round_mle_evaluation()
        builder.try_produce_sumcheck_subpolynomial_evaluation(
            SumcheckSubpolynomialType.IDENTITY, b * b - b, 2
        )
        bit_evals.append((k, b))

    constant = FR(dist.constant_magnitude())
    magnitude_eval = constant * chi_eval
    for k, b in bit_evals:
        magnitude_eval = magnitude_eval + FR(1 << k) * b

    if dist.sign_varies():
        s_eval = builder.try_consume_final_round_mle_evaluation()
        builder.try_produce_sumcheck_subpolynomial_evaluation(
            SumcheckSubpolynomialType.IDENTITY, s_eval * s_eval - s_eval, 2
        )
    else:
        s_eval = FR(dist.constant_sign()) * chi_eval

    # d - M + 2·s·M + s
    identity_eval = d_eval - magnitude_eval + FR(2) * s_eval * magnitude_eval + s_eval
    builder.try_produce_sumcheck_subpolynomial_evaluation(
        SumcheckSubpolynomialType.IDENTITY, identity_eval, 2
    )
    return s_eval
