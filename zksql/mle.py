"""
zksql 공유 유틸리티: 다중선형 확장(MLE)
========================================

컬럼 벡터를 부울 하이퍼큐브 위의 다중선형 다항식으로 보는 데 필요한 함수들.

**변수 순서 규약**:
  행 인덱스 i의 k번째 비트가 k번째 변수에 대응한다.
      MLE_v(r) = Σᵢ vᵢ · eq(bits(i), r)
      eq(b, r) = Πₖ (bₖ·rₖ + (1-bₖ)(1-rₖ))

  섬체크와 HyperKZG 폴딩이 모두 하위 비트(변수 0)부터 접는 것은
  이 규약 때문이다.

**chi 평가값**:
  길이 n의 전부-1 벡터의 MLE 평가값. 테이블 길이를 대수적으로 고정한다.
      chi_n(r) = Σ_{i<n} eq(bits(i), r)

사용 예시:
    >>> compute_evaluation_vector([FR(3), FR(5)])  # 길이 4의 eq 테이블
    >>> mle_evaluate([FR(1), FR(2)], [FR(3)])      # 1·(1-3) + 2·3 = FR(4)
"""

from zksql.field import FR


def log2_up(n):
    """2^k >= n 인 최소 k. n <= 1이면 0."""
    k = 0
    while (1 << k) < n:
        k += 1
    return k


def compute_evaluation_vector(point):
    """eq(·, point) 테이블을 계산한다.

    result[i] = Πₖ (bitₖ(i) ? rₖ : 1 - rₖ), 길이 2^len(point).

    변수 하나를 추가할 때마다 테이블 길이가 두 배가 된다:
        new[i]         = old[i] · (1 - rₖ)
        new[i + 2^k]   = old[i] · rₖ
    """
    table = [FR(1)]
    for r in point:
        one_minus_r = FR(1) - r
        table = [x * one_minus_r for x in table] + [x * r for x in table]
    return table


def mle_evaluate(values, point):
    """벡터 values의 MLE를 point에서 평가한다.

    values가 2^len(point)보다 짧으면 나머지는 0으로 간주한다.

    Raises:
        ValueError: values가 하이퍼큐브보다 길 때
    """
    eq = compute_evaluation_vector(point)
    if len(values) > len(eq):
        raise ValueError(
            f"벡터 길이 {len(values)}가 하이퍼큐브 크기 {len(eq)}를 초과합니다"
        )
    result = FR(0)
    for v, e in zip(values, eq):
        if not isinstance(v, FR):
            v = FR(v)
        result = result + v * e
    return result


def chi_eval(length, point):
    """chi_length(point): 앞의 length개 행이 1인 벡터의 MLE 평가값."""
    eq = compute_evaluation_vector(point)
    if length > len(eq):
        raise ValueError(
            f"chi 길이 {length}가 하이퍼큐브 크기 {len(eq)}를 초과합니다"
        )
    result = FR(0)
    for e in eq[:length]:
        result = result + e
    return result


def eq_eval(a, b):
    """eq(a, b) = Πₖ (aₖ·bₖ + (1-aₖ)(1-bₖ))."""
    if len(a) != len(b):
        raise ValueError("eq 평가의 두 점은 차원이 같아야 합니다")
    result = FR(1)
    for x, y in zip(a, b):
        result = result * (x * y + (FR(1) - x) * (FR(1) - y))
    return result


def pad_to(values, length):
    """values를 FR(0)으로 채워 length 길이의 새 리스트로 만든다."""
    out = [v if isinstance(v, FR) else FR(v) for v in values]
    if len(out) > length:
        raise ValueError(f"벡터 길이 {len(out)}가 {length}를 초과합니다")
    out.extend([FR(0)] * (length - len(out)))
    return out
