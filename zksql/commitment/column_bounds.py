"""
컬럼 값 범위 (ColumnBounds)
============================

커밋먼트와 별도로 유지하는 min/max 요약. 결과 오버플로를 감지하는 데 쓰인다.

  - NO_ORDER: 순서가 없는 타입 (문자열, 불리언, 십진수, 스칼라 등)
  - EMPTY: 순서 있는 타입이지만 행이 없음
  - SHARP: min/max가 실제 값과 정확히 일치
  - BOUNDED: 실제 값이 [min, max] 안에 있다는 것만 보장

행을 더하면(union) 두 SHARP는 SHARP로 합쳐지고, 하나라도 BOUNDED면 BOUNDED.
행을 빼면(difference) 남은 값의 정확한 범위를 알 수 없으므로 BOUNDED가 된다.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from zksql.errors import InvalidColumnCommitmentMetadata


class BoundsKind(Enum):
    NO_ORDER = "no_order"
    EMPTY = "empty"
    SHARP = "sharp"
    BOUNDED = "bounded"


@dataclass(frozen=True)
class ColumnBounds:
    kind: BoundsKind
    min: Optional[int] = None
    max: Optional[int] = None

    @classmethod
    def no_order(cls):
        return cls(BoundsKind.NO_ORDER)

    @classmethod
    def empty(cls):
        return cls(BoundsKind.EMPTY)

    @classmethod
    def sharp(cls, lo, hi):
        return cls._with_range(BoundsKind.SHARP, lo, hi)

    @classmethod
    def bounded(cls, lo, hi):
        return cls._with_range(BoundsKind.BOUNDED, lo, hi)

    @classmethod
    def _with_range(cls, kind, lo, hi):
        if lo > hi:
            raise InvalidColumnCommitmentMetadata(f"범위의 최솟값 {lo}가 최댓값 {hi}보다 큽니다")
        return cls(kind, lo, hi)

    @classmethod
    def from_values(cls, column_type, values):
        if not column_type.is_ordered():
            return cls.no_order()
        if not values:
            return cls.empty()
        return cls.sharp(min(values), max(values))

    def is_ordered(self):
        return self.kind != BoundsKind.NO_ORDER

    def try_union(self, other):
        """행 추가 후의 범위."""
        if self.is_ordered() != other.is_ordered():
            raise InvalidColumnCommitmentMetadata("순서 있는 범위와 없는 범위는 합칠 수 없습니다")
        if self.kind == BoundsKind.NO_ORDER:
            return self
        if self.kind == BoundsKind.EMPTY:
            return other
        if other.kind == BoundsKind.EMPTY:
            return self
        lo = min(self.min, other.min)
        hi = max(self.max, other.max)
        if self.kind == BoundsKind.SHARP and other.kind == BoundsKind.SHARP:
            return ColumnBounds.sharp(lo, hi)
        return ColumnBounds.bounded(lo, hi)

    def try_difference(self, other):
        """행 제거 후의 범위. 남은 값은 원래 범위 안에 있다는 것만 안다."""
        if self.is_ordered() != other.is_ordered():
            raise InvalidColumnCommitmentMetadata("순서 있는 범위와 없는 범위는 뺄 수 없습니다")
        if self.kind in (BoundsKind.NO_ORDER, BoundsKind.EMPTY):
            return self
        return ColumnBounds.bounded(self.min, self.max)
