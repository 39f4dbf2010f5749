"""
zksql Fiat-Shamir 트랜스크립트
================================

비대화식(non-interactive) 변환을 위한 Fiat-Shamir 해싱 구현.

**역할**:
  질의 증명은 여러 라운드로 이루어진다. Prover가 결과와 커밋먼트를
  트랜스크립트에 추가하면, 그 상태의 해시에서 다음 챌린지가 나온다.
  Verifier는 같은 순서로 같은 데이터를 추가하여 챌린지를 재구성한다.

**질의 증명의 챌린지 순서**:
  1차 라운드 → 결과 바인딩 후 post-result 챌린지 (α, β, ...)
  최종 라운드 → 중간 MLE 커밋먼트 바인딩 후 서브다항식 승수 ρ, 점 τ
  섬체크     → 라운드마다 rᵢ
  평가 라운드 → 평가값 바인딩 후 배치 계수 μ, HyperKZG 챌린지
  마지막     → 32바이트 검증 해시

트랜스크립트는 명시적 객체로 전달되며 전역 상태가 없다.

사용 예시:
    >>> t = Transcript()
    >>> t.append_commitment(b"col", commitment)
    >>> alpha = t.challenge_scalar(b"alpha")
"""

import hashlib

from zksql.field import FR, CURVE_ORDER


class Transcript:
    """SHA-256 기반 Fiat-Shamir 트랜스크립트.

    속성:
        state: 현재까지 누적된 해시 입력 바이트열

    보안 주의:
        - 모든 데이터는 레이블(label)과 함께 추가하여 도메인 분리 보장
        - 트랜스크립트 순서가 다르면 다른 챌린지가 생성됨
    """

    def __init__(self, label=b"zksql"):
        self.state = bytearray()
        self.state.extend(label)

    def append_bytes(self, label, data):
        """길이 접두어와 함께 임의의 바이트열을 추가한다."""
        self.state.extend(label)
        data = bytes(data)
        self.state.extend(len(data).to_bytes(8, "big"))
        self.state.extend(data)

    def append_u64(self, label, value):
        """부호 없는 64비트 정수를 추가한다 (길이, 개수 등)."""
        self.state.extend(label)
        self.state.extend(int(value).to_bytes(8, "big"))

    def append_scalar(self, label, scalar):
        """FR 스칼라 값을 32바이트 빅엔디안으로 추가한다."""
        self.state.extend(label)
        val = int(scalar) % CURVE_ORDER
        self.state.extend(val.to_bytes(32, "big"))

    def append_scalars(self, label, scalars):
        """스칼라 목록을 개수와 함께 추가한다."""
        self.append_u64(label, len(scalars))
        for s in scalars:
            self.append_scalar(label, s)

    def append_point(self, label, point):
        """G1 점을 추가한다. 무한원점(None)은 64바이트의 0."""
        self.state.extend(label)
        if point is None:
            self.state.extend(b"\x00" * 64)
        else:
            x, y = point
            self.state.extend(int(x).to_bytes(32, "big"))
            self.state.extend(int(y).to_bytes(32, "big"))

    def append_commitment(self, label, commitment):
        """커밋먼트의 정규 인코딩(64바이트)을 추가한다."""
        self.state.extend(label)
        self.state.extend(commitment.to_bytes())

    def append_commitments(self, label, commitments):
        self.append_u64(label, len(commitments))
        for c in commitments:
            self.append_commitment(label, c)

    def challenge_bytes(self, label):
        """현재 상태의 SHA-256 해시(32바이트)를 반환하고 상태에 체이닝한다."""
        self.state.extend(label)
        h = hashlib.sha256(bytes(self.state)).digest()
        self.state.extend(h)
        return h

    def challenge_scalar(self, label):
        """트랜스크립트로부터 챌린지 스칼라를 생성한다.

        현재 상태를 SHA-256으로 해싱하여 FR 원소를 도출한다.
        생성된 챌린지는 자동으로 트랜스크립트에 추가된다 (체이닝).

        예시:
            >>> alpha = t.challenge_scalar(b"alpha")
            >>> beta = t.challenge_scalar(b"beta")
            # alpha와 beta는 서로 다른 값 (상태가 업데이트되므로)
        """
        h = self.challenge_bytes(label)
        return FR(int.from_bytes(h, "big") % CURVE_ORDER)

    def challenge_scalars(self, label, count):
        """챌린지 스칼라 count개를 순서대로 생성한다."""
        return [self.challenge_scalar(label) for _ in range(count)]
