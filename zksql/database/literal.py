"""
리터럴 값 (LiteralValue)
=========================

식 안의 상수와 질의 파라미터(placeholder)가 쓰는 타입 지정 값.
"""

from zksql.database.column import validate_value
from zksql.database.column_type import ColumnType
from zksql.field import FR, to_scalar


class LiteralValue:
    def __init__(self, column_type, value):
        validate_value(column_type, value)
        self.column_type = column_type
        self.value = value

    @classmethod
    def boolean(cls, value):
        return cls(ColumnType.BOOLEAN, value)

    @classmethod
    def tinyint(cls, value):
        return cls(ColumnType.TINYINT, value)

    @classmethod
    def smallint(cls, value):
        return cls(ColumnType.SMALLINT, value)

    @classmethod
    def int_(cls, value):
        return cls(ColumnType.INT, value)

    @classmethod
    def bigint(cls, value):
        return cls(ColumnType.BIGINT, value)

    @classmethod
    def int128(cls, value):
        return cls(ColumnType.INT128, value)

    @classmethod
    def decimal75(cls, precision, scale, value):
        return cls(ColumnType.decimal75(precision, scale), value)

    @classmethod
    def scalar(cls, value):
        return cls(ColumnType.SCALAR, FR(value))

    @classmethod
    def varchar(cls, value):
        return cls(ColumnType.VARCHAR, value)

    @classmethod
    def varbinary(cls, value):
        return cls(ColumnType.VARBINARY, bytes(value))

    @classmethod
    def timestamptz(cls, value, time_unit=None, timezone="+00:00"):
        if time_unit is None:
            return cls(ColumnType.timestamptz(timezone=timezone), value)
        return cls(ColumnType.timestamptz(time_unit, timezone), value)

    def to_scalar(self):
        return to_scalar(self.value)

    def __eq__(self, other):
        if not isinstance(other, LiteralValue):
            return NotImplemented
        return self.column_type == other.column_type and self.value == other.value

    def __repr__(self):
        value = int(self.value) if isinstance(self.value, FR) else self.value
        return f"{self.column_type}({value!r})"
