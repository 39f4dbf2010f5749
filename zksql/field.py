"""
zksql 기반 모듈: 스칼라 필드(Scalar Field) 및 타원곡선 연산
==========================================================

증명 계층 전체에서 사용하는 기본 대수 도구를 정의한다.

**스칼라 필드 FR**:
  bn128(BN254) 곡선의 스칼라 필드. 컬럼 값, MLE 평가값, 챌린지,
  서브다항식 계수 등 모든 산술이 이 필드 위에서 이루어진다.
  - 위수(order) p ≈ 2^254, 소수체(prime field)

**타원곡선 연산**:
  커밋먼트는 G1 위의 점이다. 참조(reference) 연산은 py_ecc.bn128의
  아핀(affine) 좌표를, 가속 연산과 페어링은 py_ecc.optimized_bn128의
  야코비안(Jacobian) 좌표를 사용한다. 두 표현 사이의 변환도 여기서 제공한다.

**스칼라 인코딩**:
  SQL 값(bool, 정수, 문자열, 바이트열)을 필드 원소로 옮기는 규칙.
  문자열과 바이트열은 원문이 아니라 해시 스칼라로 커밋된다.

사용 예시:
    >>> from zksql.field import FR, to_scalar, batch_inversion
    >>> to_scalar(-1) == FR(CURVE_ORDER - 1)   # True
    >>> batch_inversion([FR(2), FR(0)])          # [1/2, 0]
"""

import hashlib

from py_ecc import bn128, optimized_bn128
from py_ecc.fields import bn128_FQ as FQ


# ─────────────────────────────────────────────────────────────────────
# 스칼라 필드 FR
# ─────────────────────────────────────────────────────────────────────

class FR(FQ):
    """bn128 스칼라 필드 위의 원소.

    py_ecc의 FQ를 상속하여 +, -, *, /, ** 연산을 제공한다.
    음수 정수는 모듈러 감산으로 정규화된다: FR(-1) == FR(p - 1).
    """
    field_modulus = bn128.curve_order


# 곡선 위수 (필드 크기)
CURVE_ORDER = bn128.curve_order

# 문자열/바이트열 해시 스칼라의 비트 폭 (항상 p보다 작다)
HASH_SCALAR_BITS = 248


# ─────────────────────────────────────────────────────────────────────
# 타원곡선 상수 및 연산 (참조 구현: 아핀 좌표)
# ─────────────────────────────────────────────────────────────────────

G1 = bn128.G1
G2 = bn128.G2

# G1의 항등원 (무한원점). bn128에서는 None으로 표현한다.
Z1 = None


def ec_mul(point, scalar):
    """타원곡선 스칼라 곱셈: scalar · point.

    Args:
        point: G1 또는 G2 위의 점
        scalar: 정수 또는 FR 원소 (음수는 위수로 정규화)

    Returns:
        scalar · point
    """
    scalar = int(scalar) % CURVE_ORDER
    if point is None or scalar == 0:
        return None
    return bn128.multiply(point, scalar)


def ec_add(p1, p2):
    """타원곡선 점 덧셈: p1 + p2."""
    return bn128.add(p1, p2)


def ec_neg(point):
    """타원곡선 점의 역원: -point."""
    if point is None:
        return None
    return bn128.neg(point)


def ec_is_on_curve(point):
    """G1 점이 곡선 위에 있는지 확인한다. 무한원점은 유효하다."""
    if point is None:
        return True
    return bn128.is_on_curve(point, bn128.b)


def ec_msm(points, scalars):
    """다중 스칼라 곱셈(MSM): Σ scalars[i] · points[i].

    0인 스칼라는 건너뛴다. 결과가 항등원이면 None을 반환한다.
    """
    result = Z1
    for point, scalar in zip(points, scalars):
        value = int(scalar) % CURVE_ORDER
        if value == 0:
            continue
        result = ec_add(result, ec_mul(point, value))
    return result


# ─────────────────────────────────────────────────────────────────────
# 가속 표현 (야코비안 좌표) 변환
# ─────────────────────────────────────────────────────────────────────

def to_optimized_g1(point):
    """아핀 G1 점을 optimized_bn128의 야코비안 점으로 변환한다."""
    if point is None:
        return optimized_bn128.Z1
    x, y = point
    return (
        optimized_bn128.FQ(int(x)),
        optimized_bn128.FQ(int(y)),
        optimized_bn128.FQ.one(),
    )


def to_optimized_g2(point):
    """아핀 G2 점을 optimized_bn128의 야코비안 점으로 변환한다."""
    if point is None:
        return optimized_bn128.Z2
    x, y = point
    return (
        optimized_bn128.FQ2([int(c) for c in x.coeffs]),
        optimized_bn128.FQ2([int(c) for c in y.coeffs]),
        optimized_bn128.FQ2.one(),
    )


def from_optimized_g1(point):
    """야코비안 G1 점을 참조 구현의 아핀 점으로 되돌린다.

    두 백엔드가 같은 결과를 내는지 비교하려면 반드시 이 정규화를 거쳐야 한다.
    """
    if optimized_bn128.is_inf(point):
        return None
    x, y = optimized_bn128.normalize(point)
    return (FQ(int(x)), FQ(int(y)))


def ec_pairing(g2_point, g1_point):
    """쌍선형 페어링 e(G1, G2) → GT.

    페어링은 검증에서만 쓰이므로 optimized_bn128 구현으로 계산한다.
    인자 순서는 py_ecc 관례대로 (G2, G1)이다.
    """
    return optimized_bn128.pairing(to_optimized_g2(g2_point), to_optimized_g1(g1_point))


# ─────────────────────────────────────────────────────────────────────
# 스칼라 인코딩
# ─────────────────────────────────────────────────────────────────────

def scalar_from_bytes_via_hash(data):
    """바이트열을 SHA-256 해시 스칼라로 변환한다.

    해시를 리틀엔디안 정수로 읽고 하위 248비트만 남긴다.
    결과는 항상 p보다 작으므로 모듈러 축소가 일어나지 않는다.
    """
    digest = hashlib.sha256(bytes(data)).digest()
    value = int.from_bytes(digest, "little") & ((1 << HASH_SCALAR_BITS) - 1)
    return FR(value)


def to_scalar(value):
    """SQL 값 하나를 FR 원소로 인코딩한다.

    - bool → 0 / 1
    - int → 모듈러 정규화 (음수 허용)
    - str → UTF-8 바이트의 해시 스칼라
    - bytes → 해시 스칼라
    - FR → 그대로
    """
    if isinstance(value, FR):
        return value
    if isinstance(value, bool):
        return FR(1) if value else FR(0)
    if isinstance(value, int):
        return FR(value)
    if isinstance(value, str):
        return scalar_from_bytes_via_hash(value.encode("utf-8"))
    if isinstance(value, (bytes, bytearray)):
        return scalar_from_bytes_via_hash(value)
    raise TypeError(f"스칼라로 변환할 수 없는 값입니다: {value!r}")


def scalar_to_signed_int(scalar):
    """FR 원소를 부호 있는 정수로 해석한다.

    p/2 이하면 양수, 그보다 크면 음수 (n - p)로 본다.
    """
    n = int(scalar)
    if n > CURVE_ORDER // 2:
        return n - CURVE_ORDER
    return n


# ─────────────────────────────────────────────────────────────────────
# 일괄 역원 (Montgomery Batch Inversion)
# ─────────────────────────────────────────────────────────────────────

def batch_inversion(values):
    """Montgomery 트릭으로 여러 원소의 역원을 한 번의 역원 연산으로 구한다.

    0은 0으로 보낸다 (의사 역원, pseudo-inverse). 동등성 가젯과
    필터 인수의 c_star / d_star 계산이 이 성질에 의존한다.

    알고리즘:
        1. 0이 아닌 원소들의 누적곱 prefix[i]를 계산
        2. 전체 곱의 역원을 한 번 계산
        3. 역방향으로 훑으며 개별 역원을 추출

    Args:
        values: FR 원소(또는 정수) 리스트

    Returns:
        list[FR]: result[i] = values[i]^(-1), values[i] == 0이면 0

    예시:
        >>> batch_inversion([FR(2), FR(0), FR(4)])
        [FR(1/2), FR(0), FR(1/4)]
    """
    values = [v if isinstance(v, FR) else FR(v) for v in values]
    result = [FR(0)] * len(values)

    nonzero = [i for i, v in enumerate(values) if v != 0]
    if not nonzero:
        return result

    prefix = []
    acc = FR(1)
    for i in nonzero:
        acc = acc * values[i]
        prefix.append(acc)

    inv = FR(1) / acc
    for pos in range(len(nonzero) - 1, -1, -1):
        i = nonzero[pos]
        before = prefix[pos - 1] if pos > 0 else FR(1)
        result[i] = inv * before
        inv = inv * values[i]

    return result
