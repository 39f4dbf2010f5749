"""
컬럼 (Column / OwnedColumn)
============================

**OwnedColumn**: 소유권을 가진 타입 지정 컬럼. 생성 시 값이 타입에 맞는지 검사한다.
  - BOOLEAN → bool
  - 정수 타입 → 비트 폭 범위의 int
  - DECIMAL75 → |v| < 10^precision 인 스케일 전 정수 (unscaled)
  - SCALAR → FR
  - VARCHAR → str, VARBINARY → bytes
  - TIMESTAMPTZ → int (단위는 타입이 가진다)

**Column**: 한 라운드 동안만 유효한 뷰. 값 리스트는 Arena에서 할당된다.
  라운드가 끝나면 Arena가 슬라이스를 비우므로 라운드 밖으로 들고 나가면 안 된다.
"""

from zksql.database.column_type import ColumnKind
from zksql.errors import OwnedTableError
from zksql.field import FR, to_scalar


def validate_value(column_type, value):
    """값 하나가 column_type에 맞는지 검사한다. 맞지 않으면 OwnedTableError."""
    kind = column_type.kind
    if kind == ColumnKind.BOOLEAN:
        ok = isinstance(value, bool)
    elif column_type.is_integer():
        lo, hi = column_type.integer_bounds()
        ok = isinstance(value, int) and not isinstance(value, bool) and lo <= value <= hi
    elif kind == ColumnKind.DECIMAL75:
        ok = (
            isinstance(value, int)
            and not isinstance(value, bool)
            and abs(value) < 10 ** column_type.precision
        )
    elif kind == ColumnKind.SCALAR:
        ok = isinstance(value, FR)
    elif kind == ColumnKind.VARCHAR:
        ok = isinstance(value, str)
    elif kind == ColumnKind.VARBINARY:
        ok = isinstance(value, (bytes, bytearray))
    elif kind == ColumnKind.TIMESTAMPTZ:
        ok = isinstance(value, int) and not isinstance(value, bool) and -(1 << 63) <= value < (1 << 63)
    else:
        ok = False
    if not ok:
        raise OwnedTableError(f"{column_type} 타입에 맞지 않는 값입니다: {value!r}")


class OwnedColumn:
    """타입과 값 리스트를 소유하는 컬럼."""

    def __init__(self, column_type, values):
        values = list(values)
        for v in values:
            validate_value(column_type, v)
        self.column_type = column_type
        self.values = values

    def __len__(self):
        return len(self.values)

    def scalars(self):
        return [to_scalar(v) for v in self.values]

    def __eq__(self, other):
        if not isinstance(other, OwnedColumn):
            return NotImplemented
        return self.column_type == other.column_type and self.values == other.values

    def __repr__(self):
        return f"OwnedColumn({self.column_type}, {self.values!r})"


class Column:
    """라운드 범위의 컬럼 뷰. values는 Arena 슬라이스이다."""

    def __init__(self, column_type, values):
        self.column_type = column_type
        self.values = values

    @classmethod
    def from_owned(cls, alloc, owned):
        return cls(owned.column_type, alloc.alloc_slice(owned.values))

    def __len__(self):
        return len(self.values)

    def scalars(self):
        return [to_scalar(v) for v in self.values]

    def to_owned(self):
        return OwnedColumn(self.column_type, list(self.values))
