"""
섬체크 (Sumcheck) 프로토콜
===========================

모든 서브다항식을 하나로 묶은 다항식

    F(x) = Σₖ ρₖ · wₖ(x) · Pₖ(x),   wₖ = eq(x, τ) (IDENTITY) 또는 1 (ZERO_SUM)

의 하이퍼큐브 합이 0임을 증명한다.

  - IDENTITY Pₖ가 모든 행에서 0이면 Σ eq(x, τ)·Pₖ(x) = 0
  - ZERO_SUM Pₖ는 정의상 합이 0
  - ρₖ가 랜덤이므로 하나라도 어긋나면 전체 합이 0이 아닐 확률이 압도적

**라운드 i** (변수 0부터, 하위 비트부터 접는다):
  Prover → gᵢ(0), gᵢ(1), ..., gᵢ(d)   (gᵢ(t) = 변수 i를 t로 고정한 부분합)
  Verifier 확인: gᵢ(0) + gᵢ(1) == 현재 주장값
  챌린지 rᵢ, 주장값 ← gᵢ(rᵢ)

마지막 주장값은 F(r)이어야 하며, Verifier는 VerificationBuilder가 누적한
서브다항식 평가값과 비교한다.

ν = 0이면 라운드가 없고 주장값은 0이다.
"""

import logging

from zksql.errors import ProtocolError, VerificationError
from zksql.field import FR
from zksql.mle import compute_evaluation_vector, pad_to
from zksql.polynomial import interpolate_uni_poly
from zksql.proof.sumcheck_subpolynomial import SumcheckSubpolynomialType

logger = logging.getLogger(__name__)


class SumcheckProof:
    """섬체크 증명: 라운드마다 [g(0), ..., g(d)]."""

    def __init__(self, round_evaluations):
        self.round_evaluations = round_evaluations

    @property
    def max_degree(self):
        if not self.round_evaluations:
            return None
        return len(self.round_evaluations[0]) - 1


def _build_terms(subpolynomials, multipliers, entrywise_point, num_vars):
    """모든 서브다항식을 (계수, [패딩된 테이블]) 항의 평탄한 리스트로 만든다."""
    size = 1 << num_vars
    eq_table = compute_evaluation_vector(entrywise_point)
    padded = {}

    def table(mle):
        key = id(mle)
        if key not in padded:
            padded[key] = pad_to(mle, size)
        return padded[key]

    terms = []
    for subpolynomial, rho in zip(subpolynomials, multipliers):
        is_identity = subpolynomial.subpolynomial_type == SumcheckSubpolynomialType.IDENTITY
        for coeff, mles in subpolynomial.terms:
            tables = [table(m) for m in mles]
            if is_identity:
                tables.append(eq_table)
            terms.append((rho * coeff, tables))
    return terms


def prove_sumcheck(transcript, subpolynomials, multipliers, entrywise_point, num_vars):
    """섬체크 증명을 생성한다.

    Args:
        transcript: Transcript (변경됨)
        subpolynomials: SumcheckSubpolynomial 리스트
        multipliers: 서브다항식별 ρ
        entrywise_point: τ (길이 ν)
        num_vars: ν

    Returns:
        (SumcheckProof, 평가 점 r)
    """
    terms = _build_terms(subpolynomials, multipliers, entrywise_point, num_vars)
    degree = max([1] + [len(tables) for _, tables in terms])
    if num_vars:
        transcript.append_u64(b"sumcheck_degree", degree)

    round_evaluations = []
    point = []
    for _ in range(num_vars):
        evals = [FR(0)] * (degree + 1)
        for coeff, tables in terms:
            half = len(tables[0]) // 2
            for t in range(degree + 1):
                ft = FR(t)
                one_minus_t = FR(1) - ft
                acc = FR(0)
                for j in range(half):
                    product = FR(1)
                    for tab in tables:
                        product = product * (tab[2 * j] * one_minus_t + tab[2 * j + 1] * ft)
                    acc = acc + product
                evals[t] = evals[t] + coeff * acc
        transcript.append_scalars(b"sumcheck_round", evals)
        r = transcript.challenge_scalar(b"sumcheck_challenge")
        round_evaluations.append(evals)
        point.append(r)

        folded = {}
        new_terms = []
        for coeff, tables in terms:
            new_tables = []
            for tab in tables:
                key = id(tab)
                if key not in folded:
                    folded[key] = [
                        tab[2 * j] + r * (tab[2 * j + 1] - tab[2 * j])
                        for j in range(len(tab) // 2)
                    ]
                new_tables.append(folded[key])
            new_terms.append((coeff, new_tables))
        terms = new_terms

    logger.debug("sumcheck proved: %d rounds, degree %d", num_vars, degree)
    return SumcheckProof(round_evaluations), point


def verify_sumcheck(transcript, proof, num_vars):
    """섬체크 증명의 라운드 일관성을 확인한다.

    Returns:
        (평가 점 r, 최종 주장값)

    Raises:
        ProtocolError: 라운드 수나 라운드 다항식 길이가 맞지 않을 때
        VerificationError: g(0) + g(1)이 주장값과 다를 때
    """
    if len(proof.round_evaluations) != num_vars:
        raise ProtocolError(
            f"섬체크 라운드 수 {len(proof.round_evaluations)}가 변수 수 {num_vars}와 다릅니다"
        )
    if num_vars:
        degree = proof.max_degree
        if degree < 1:
            raise ProtocolError("섬체크 라운드 다항식은 최소 1차여야 합니다")
        if any(len(evals) != degree + 1 for evals in proof.round_evaluations):
            raise ProtocolError("섬체크 라운드 다항식의 길이가 일정하지 않습니다")
        transcript.append_u64(b"sumcheck_degree", degree)

    claim = FR(0)
    point = []
    for i, evals in enumerate(proof.round_evaluations):
        if evals[0] + evals[1] != claim:
            raise VerificationError(f"섬체크 라운드 {i}의 g(0) + g(1)이 주장값과 다릅니다")
        transcript.append_scalars(b"sumcheck_round", evals)
        r = transcript.challenge_scalar(b"sumcheck_challenge")
        claim = interpolate_uni_poly(evals, r)
        point.append(r)
    return point, claim
