"""
커밋먼트 (Commitment)
======================

컬럼의 KZG 커밋먼트: bn128 G1 위의 점 하나.

**모듈 연산**:
  스칼라 필드 위의 모듈이므로 +, -, 단항 -, 스칼라 곱을 지원한다.
  Verifier는 원본 컬럼 없이 커밋먼트만 대수적으로 재조합한다.
      commit(f) + commit(g) = commit(f + g)
      s · commit(f)        = commit(s · f)

**정규 인코딩** (64바이트):
  x || y (각각 32바이트 빅엔디안). 항등원(무한원점)은 64바이트의 0.
  디코딩 시 좌표 범위와 곡선 위에 있는지를 검사한다.
"""

from py_ecc import bn128
from py_ecc.fields import bn128_FQ as FQ

from zksql.field import ec_add, ec_mul, ec_neg, ec_is_on_curve


ENCODED_LENGTH = 64


class Commitment:
    """G1 점 하나를 감싼 커밋먼트. point가 None이면 항등원."""

    def __init__(self, point=None):
        self.point = point

    @classmethod
    def identity(cls):
        return cls(None)

    def is_identity(self):
        return self.point is None

    def __add__(self, other):
        return Commitment(ec_add(self.point, other.point))

    def __sub__(self, other):
        return Commitment(ec_add(self.point, ec_neg(other.point)))

    def __neg__(self):
        return Commitment(ec_neg(self.point))

    def __rmul__(self, scalar):
        return Commitment(ec_mul(self.point, scalar))

    def __mul__(self, scalar):
        return Commitment(ec_mul(self.point, scalar))

    def to_bytes(self):
        if self.point is None:
            return b"\x00" * ENCODED_LENGTH
        x, y = self.point
        return int(x).to_bytes(32, "big") + int(y).to_bytes(32, "big")

    @classmethod
    def from_bytes(cls, data):
        """정규 인코딩을 디코딩한다.

        Raises:
            ValueError: 길이가 64가 아니거나, 좌표가 필드 밖이거나, 곡선 위의 점이 아닐 때
        """
        data = bytes(data)
        if len(data) != ENCODED_LENGTH:
            raise ValueError(f"커밋먼트 인코딩은 {ENCODED_LENGTH}바이트여야 합니다: {len(data)}")
        if data == b"\x00" * ENCODED_LENGTH:
            return cls.identity()
        x = int.from_bytes(data[:32], "big")
        y = int.from_bytes(data[32:], "big")
        if x >= bn128.field_modulus or y >= bn128.field_modulus:
            raise ValueError("커밋먼트 좌표가 필드 범위를 벗어났습니다")
        point = (FQ(x), FQ(y))
        if not ec_is_on_curve(point):
            raise ValueError("커밋먼트가 곡선 위의 점이 아닙니다")
        return cls(point)

    def to_hex(self):
        return self.to_bytes().hex()

    @classmethod
    def from_hex(cls, text):
        return cls.from_bytes(bytes.fromhex(text))

    def __eq__(self, other):
        if not isinstance(other, Commitment):
            return NotImplemented
        return self.to_bytes() == other.to_bytes()

    def __hash__(self):
        return hash(self.to_bytes())

    def __repr__(self):
        if self.point is None:
            return "Commitment(identity)"
        return f"Commitment({self.to_hex()[:16]}...)"
