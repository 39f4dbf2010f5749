"""
컬럼 타입 (ColumnType)
=======================

질의 결과와 커밋먼트 메타데이터가 공유하는 닫힌 타입 집합.

  BOOLEAN, TINYINT, SMALLINT, INT, BIGINT, INT128,
  DECIMAL75(precision, scale), SCALAR, VARCHAR, VARBINARY,
  TIMESTAMPTZ(unit, timezone)

정수 타입은 비트 폭으로, DECIMAL75는 정밀도(최대 75자리)로 값 범위가 정해진다.
정수도 암묵적 정밀도를 가지며(BIGINT = 19자리), 십진수와의 산술에서 쓰인다.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


MAX_DECIMAL_PRECISION = 75


class ColumnKind(Enum):
    BOOLEAN = "BOOLEAN"
    TINYINT = "TINYINT"
    SMALLINT = "SMALLINT"
    INT = "INT"
    BIGINT = "BIGINT"
    INT128 = "INT128"
    DECIMAL75 = "DECIMAL75"
    SCALAR = "SCALAR"
    VARCHAR = "VARCHAR"
    VARBINARY = "VARBINARY"
    TIMESTAMPTZ = "TIMESTAMPTZ"


class TimeUnit(Enum):
    SECOND = "s"
    MILLISECOND = "ms"
    MICROSECOND = "us"
    NANOSECOND = "ns"


_INTEGER_BITS = {
    ColumnKind.TINYINT: 8,
    ColumnKind.SMALLINT: 16,
    ColumnKind.INT: 32,
    ColumnKind.BIGINT: 64,
    ColumnKind.INT128: 128,
}

_INTEGER_PRECISION = {
    ColumnKind.TINYINT: 3,
    ColumnKind.SMALLINT: 5,
    ColumnKind.INT: 10,
    ColumnKind.BIGINT: 19,
    ColumnKind.INT128: 39,
}


@dataclass(frozen=True)
class ColumnType:
    """컬럼의 의미 타입.

    DECIMAL75는 precision/scale을, TIMESTAMPTZ는 time_unit/timezone을 가진다.
    값은 해시 가능하므로 ColumnRef 등의 키로 쓸 수 있다.
    """

    kind: ColumnKind
    precision: Optional[int] = None
    scale: Optional[int] = None
    time_unit: Optional[TimeUnit] = None
    timezone: Optional[str] = None

    # ─── 생성 헬퍼 ───

    @classmethod
    def decimal75(cls, precision, scale):
        if not 1 <= precision <= MAX_DECIMAL_PRECISION:
            raise ValueError(f"DECIMAL75 정밀도는 1..75 범위여야 합니다: {precision}")
        return cls(ColumnKind.DECIMAL75, precision=precision, scale=scale)

    @classmethod
    def timestamptz(cls, time_unit=TimeUnit.SECOND, timezone="+00:00"):
        return cls(ColumnKind.TIMESTAMPTZ, time_unit=time_unit, timezone=timezone)

    # ─── 분류 ───

    def is_integer(self):
        return self.kind in _INTEGER_BITS

    def is_numeric(self):
        """정수와 십진수. 서로 섞어서 산술/비교할 수 있다."""
        return self.is_integer() or self.kind == ColumnKind.DECIMAL75

    def is_ordered(self):
        """min/max 범위를 추적할 수 있는 타입."""
        return self.is_integer() or self.kind == ColumnKind.TIMESTAMPTZ

    def bit_size(self):
        return _INTEGER_BITS.get(self.kind)

    def integer_bounds(self):
        """정수 타입의 (최솟값, 최댓값). 정수가 아니면 None."""
        bits = self.bit_size()
        if bits is None:
            return None
        return -(1 << (bits - 1)), (1 << (bits - 1)) - 1

    def precision_value(self):
        """십진 자릿수. 정수는 암묵적 정밀도를 쓴다."""
        if self.kind == ColumnKind.DECIMAL75:
            return self.precision
        return _INTEGER_PRECISION.get(self.kind)

    def scale_value(self):
        if self.kind == ColumnKind.DECIMAL75:
            return self.scale
        if self.is_integer():
            return 0
        return None

    def __str__(self):
        if self.kind == ColumnKind.DECIMAL75:
            return f"DECIMAL75({self.precision}, {self.scale})"
        if self.kind == ColumnKind.TIMESTAMPTZ:
            return f"TIMESTAMPTZ({self.time_unit.value}, {self.timezone})"
        return self.kind.value


ColumnType.BOOLEAN = ColumnType(ColumnKind.BOOLEAN)
ColumnType.TINYINT = ColumnType(ColumnKind.TINYINT)
ColumnType.SMALLINT = ColumnType(ColumnKind.SMALLINT)
ColumnType.INT = ColumnType(ColumnKind.INT)
ColumnType.BIGINT = ColumnType(ColumnKind.BIGINT)
ColumnType.INT128 = ColumnType(ColumnKind.INT128)
ColumnType.SCALAR = ColumnType(ColumnKind.SCALAR)
ColumnType.VARCHAR = ColumnType(ColumnKind.VARCHAR)
ColumnType.VARBINARY = ColumnType(ColumnKind.VARBINARY)


def integer_type_for_bits(bits):
    """비트 폭을 담을 수 있는 가장 작은 정수 타입. 128비트 초과면 None."""
    for kind, size in _INTEGER_BITS.items():
        if bits <= size:
            return ColumnType(kind)
    return None
