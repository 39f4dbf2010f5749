"""
KZG 다항식 커밋먼트 스킴
=========================

컬럼 커밋먼트는 벡터를 계수로 하는 일변수 다항식의 KZG 커밋먼트이다.

**커밋먼트**:
  벡터 v와 오프셋 o에 대해
      C = Σᵢ vᵢ · [τ^(o+i)]₁ = τ^o · F_v(τ) · G1
  커밋먼트는 선형이므로 commit(f) + commit(g) = commit(f + g),
  s · commit(f) = commit(s · f)가 성립한다.

**열기 증명 (Opening Proof)**:
  "F(z) = y" 임을 증명하는 방법:
  1. 몫 다항식 q(x) = (F(x) - y) / (x - z) 계산
  2. 증명 π = q(τ)·G1
  3. 검증: e(π, τ·G2) == e(C - y·G1 + z·π, G2)

**일괄 검증**:
  여러 열기 (Cₖ, πₖ, zₖ, yₖ)를 랜덤 δ의 거듭제곱으로 묶어
  두 번의 페어링으로 확인한다:
      e(Σ δᵏ πₖ, τ·G2) == e(Σ δᵏ (Cₖ - yₖ·G1 + zₖ·πₖ), G2)

사용 예시:
    >>> C = commit(coeffs, setup)
    >>> proof = create_witness(Polynomial(coeffs), FR(7), setup)
    >>> verify_opening(C, proof, FR(7), Polynomial(coeffs).evaluate(FR(7)), vs)  # True
"""

from zksql.field import FR, ec_mul, ec_add, ec_neg, ec_msm, ec_pairing


def commit(coeffs, setup, offset=0):
    """계수 벡터를 KZG 커밋한다.

    Args:
        coeffs: FR 원소(또는 정수) 리스트
        setup: ProverSetup
        offset: 시작 생성원 인덱스

    Returns:
        G1 점 (항등원이면 None)

    Raises:
        ValueError: offset + len(coeffs)가 setup.max_len을 초과할 때
    """
    if offset + len(coeffs) > setup.max_len:
        raise ValueError(
            f"커밋 길이 {offset + len(coeffs)}가 setup 최대 길이 {setup.max_len}를 초과합니다"
        )
    return ec_msm(setup.g1_powers[offset:offset + len(coeffs)], coeffs)


def create_witness(poly, point, setup):
    """열기 증명 π = commit((F(x) - F(z)) / (x - z))를 생성한다."""
    quotient = poly.divide_by_linear(point)
    return commit(quotient.coeffs, setup)


def verify_opening(commitment, proof, point, evaluation, verifier_setup):
    """단일 KZG 열기 증명을 검증한다.

    검증 방정식:
        e(π, [τ]₂) == e(C - y·G1 + z·π, G2)
    """
    return verify_openings([(commitment, proof, point, evaluation)], FR(1), verifier_setup)


def verify_openings(openings, delta, verifier_setup):
    """여러 열기 증명을 δ 거듭제곱으로 묶어 한 번에 검증한다.

    Args:
        openings: (commitment, proof, point, evaluation) 튜플 리스트
        delta: 배치 챌린지 (트랜스크립트에서 유도)
        verifier_setup: VerifierSetup

    Returns:
        bool: 검증 성공 여부
    """
    lhs_point = None
    rhs_point = None
    weight = FR(1)
    for commitment, proof, point, evaluation in openings:
        point = point if isinstance(point, FR) else FR(point)
        evaluation = evaluation if isinstance(evaluation, FR) else FR(evaluation)

        # Cₖ - yₖ·G1 + zₖ·πₖ
        term = ec_add(commitment, ec_neg(ec_mul(verifier_setup.g1, evaluation)))
        term = ec_add(term, ec_mul(proof, point))

        lhs_point = ec_add(lhs_point, ec_mul(proof, weight))
        rhs_point = ec_add(rhs_point, ec_mul(term, weight))
        weight = weight * delta

    lhs = ec_pairing(verifier_setup.g2_powers[1], lhs_point)
    rhs = ec_pairing(verifier_setup.g2_powers[0], rhs_point)
    return lhs == rhs
