"""
HyperKZG 다중선형 평가 증명
============================

KZG로 커밋된 벡터 v에 대해 "MLE_v(r) = y" 임을 증명한다.

**폴딩 (Gemini 방식)**:
  f₀ = v (2^ν 길이로 0 패딩). 변수 0부터 차례로 접는다:
      f_{i+1}[j] = (1 - rᵢ)·fᵢ[2j] + rᵢ·fᵢ[2j+1]
  ν번 접으면 상수 f_ν = MLE_v(r) = y 가 된다.

**일변수 관계**:
  Fᵢ(X) = Σⱼ fᵢ[j]·Xʲ 를 짝수/홀수 계수로 나누면
      Fᵢ(X) = Eᵢ(X²) + X·Oᵢ(X²),   F_{i+1}(Y) = (1-rᵢ)·Eᵢ(Y) + rᵢ·Oᵢ(Y)
  따라서 챌린지 q에 대해
      F_{i+1}(q²) = (1-rᵢ)·(Fᵢ(q) + Fᵢ(-q))/2 + rᵢ·(Fᵢ(q) - Fᵢ(-q))/(2q)

**프로토콜**:
  1. Prover → [F₁]₁, ..., [F_{ν-1}]₁
  2. 챌린지 q
  3. Prover → 모든 Fᵢ의 q, -q, q² 평가값
  4. 챌린지 γ: 다항식을 B = Σ γⁱ Fᵢ 로 묶음
  5. Prover → B의 세 점 열기 증명 W_q, W_-q, W_q²
  6. 챌린지 δ: 세 열기를 묶어 두 번의 페어링으로 검증

  ν = 0이면 폴드가 없고 F₀(q)가 곧 y여야 한다.
"""

from zksql.errors import ProtocolError
from zksql.field import FR, ec_add, ec_mul
from zksql.kzg import commit, create_witness, verify_openings
from zksql.mle import pad_to
from zksql.polynomial import Polynomial


class EvaluationProof:
    """HyperKZG 평가 증명 데이터 컨테이너.

    속성:
        fold_commitments: [F₁]₁ ... [F_{ν-1}]₁ (G1 점 리스트)
        evaluations: 각 Fᵢ의 [F(q), F(-q), F(q²)] (max(ν, 1)행)
        witnesses: B의 열기 증명 [W_q, W_-q, W_q²]
    """

    def __init__(self, fold_commitments, evaluations, witnesses):
        self.fold_commitments = fold_commitments
        self.evaluations = evaluations
        self.witnesses = witnesses


def fold(values, r):
    """한 변수를 고정하여 벡터 길이를 절반으로 줄인다."""
    one_minus_r = FR(1) - r
    return [
        one_minus_r * values[2 * j] + r * values[2 * j + 1]
        for j in range(len(values) // 2)
    ]


def _opening_points(q):
    return [q, FR(0) - q, q * q]


def prove_evaluation(transcript, values, point, setup):
    """MLE_values(point)에 대한 평가 증명을 생성한다.

    Args:
        transcript: 증명 세션의 Transcript (변경됨)
        values: 커밋된 벡터 (길이 <= 2^len(point))
        point: 평가 점 r (FR 리스트)
        setup: ProverSetup

    Returns:
        EvaluationProof
    """
    nu = len(point)
    folds = [pad_to(values, 1 << nu)]
    for i in range(nu - 1):
        folds.append(fold(folds[-1], point[i]))

    # ── 1. 폴드 커밋 ──
    fold_commitments = [commit(f, setup) for f in folds[1:]]
    for c in fold_commitments:
        transcript.append_point(b"hyperkzg_fold", c)

    # ── 2-3. q 챌린지와 평가값 ──
    q = transcript.challenge_scalar(b"hyperkzg_q")
    points = _opening_points(q)
    polys = [Polynomial(f) for f in folds]
    evaluations = [[p.evaluate(z) for z in points] for p in polys]
    for row in evaluations:
        transcript.append_scalars(b"hyperkzg_evals", row)

    # ── 4. γ로 다항식 배치 ──
    gamma = transcript.challenge_scalar(b"hyperkzg_gamma")
    batched = Polynomial.zero()
    weight = FR(1)
    for p in polys:
        batched = batched + p.scale(weight)
        weight = weight * gamma

    # ── 5. 세 점 열기 ──
    witnesses = [create_witness(batched, z, setup) for z in points]
    for w in witnesses:
        transcript.append_point(b"hyperkzg_witness", w)

    # Verifier와 트랜스크립트 상태를 맞추기 위해 δ도 뽑는다
    transcript.challenge_scalar(b"hyperkzg_delta")

    return EvaluationProof(fold_commitments, evaluations, witnesses)


def verify_evaluation(transcript, proof, commitment, point, evaluation, verifier_setup):
    """평가 증명을 검증한다.

    Args:
        transcript: Prover와 같은 상태의 Transcript (변경됨)
        proof: EvaluationProof
        commitment: 벡터의 커밋먼트 (G1 점)
        point: 평가 점 r
        evaluation: 주장된 평가값 y
        verifier_setup: VerifierSetup

    Returns:
        bool: 검증 성공 여부

    Raises:
        ProtocolError: 증명의 모양(폴드 수, 평가값 수)이 ν와 맞지 않을 때
    """
    nu = len(point)
    if len(proof.fold_commitments) != max(nu - 1, 0):
        raise ProtocolError("HyperKZG 폴드 커밋먼트 개수가 맞지 않습니다")
    if len(proof.evaluations) != max(nu, 1) or any(len(row) != 3 for row in proof.evaluations):
        raise ProtocolError("HyperKZG 평가값 개수가 맞지 않습니다")
    if len(proof.witnesses) != 3:
        raise ProtocolError("HyperKZG 열기 증명 개수가 맞지 않습니다")

    for c in proof.fold_commitments:
        transcript.append_point(b"hyperkzg_fold", c)
    q = transcript.challenge_scalar(b"hyperkzg_q")
    points = _opening_points(q)
    for row in proof.evaluations:
        transcript.append_scalars(b"hyperkzg_evals", row)
    gamma = transcript.challenge_scalar(b"hyperkzg_gamma")
    for w in proof.witnesses:
        transcript.append_point(b"hyperkzg_witness", w)
    delta = transcript.challenge_scalar(b"hyperkzg_delta")

    # ── 폴드 일관성 ──
    if nu == 0:
        if proof.evaluations[0][0] != evaluation:
            return False
    else:
        two = FR(2)
        for i in range(nu):
            e_pos, e_neg, _ = proof.evaluations[i]
            r = point[i]
            even = (e_pos + e_neg) / two
            odd = (e_pos - e_neg) / (two * q)
            folded = (FR(1) - r) * even + r * odd
            target = proof.evaluations[i + 1][2] if i + 1 < nu else evaluation
            if folded != target:
                return False

    # ── 배치 KZG 열기 ──
    batched_commitment = None
    batched_evals = [FR(0), FR(0), FR(0)]
    weight = FR(1)
    for c, row in zip([commitment] + list(proof.fold_commitments), proof.evaluations):
        batched_commitment = ec_add(batched_commitment, ec_mul(c, weight))
        for k in range(3):
            batched_evals[k] = batched_evals[k] + weight * row[k]
        weight = weight * gamma

    openings = [
        (batched_commitment, w, z, y)
        for w, z, y in zip(proof.witnesses, points, batched_evals)
    ]
    return verify_openings(openings, delta, verifier_setup)
