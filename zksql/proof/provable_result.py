"""
증명 가능한 질의 결과 (ProvableQueryResult)
=============================================

Prover가 돌려주는 결과 테이블의 바이트 인코딩. 트랜스크립트에 그대로 바인딩된다.

**인코딩** (컬럼 순서대로, 각 컬럼은 행 순서대로):
  - BOOLEAN: 1바이트 (0 / 1)
  - 정수, DECIMAL75, SCALAR, TIMESTAMPTZ: 32바이트 빅엔디안 필드 원소
  - VARCHAR / VARBINARY: 8바이트 길이 + 원문 바이트

**평가**:
  evaluate(point, column_types)는 각 컬럼의 스칼라 인코딩으로 MLE 평가값을 계산한다.
  Verifier는 이 값이 플랜의 출력 평가값과 같은지 확인한다.

**디코딩**:
  to_owned_table(fields)는 값이 타입 범위에 맞는지 검사한다.
  실패하면 QueryError(OVERFLOW / INVALID_STRING / MISCELLANEOUS_DECODING).
  디코딩 실패는 증명이 무효라는 뜻이 아니다.
"""

from zksql.database.column import OwnedColumn
from zksql.database.column_type import ColumnKind
from zksql.database.table import OwnedTable
from zksql.errors import QueryError, QueryErrorKind
from zksql.field import FR, CURVE_ORDER, scalar_from_bytes_via_hash, scalar_to_signed_int, to_scalar
from zksql.mle import mle_evaluate


_FIELD_WIDTH = 32
_LENGTH_WIDTH = 8


def _is_bytes_kind(column_type):
    return column_type.kind in (ColumnKind.VARCHAR, ColumnKind.VARBINARY)


def _encode_value(column_type, value):
    if column_type.kind == ColumnKind.BOOLEAN:
        return b"\x01" if value else b"\x00"
    if _is_bytes_kind(column_type):
        raw = value.encode("utf-8") if isinstance(value, str) else bytes(value)
        return len(raw).to_bytes(_LENGTH_WIDTH, "big") + raw
    return (int(to_scalar(value)) % CURVE_ORDER).to_bytes(_FIELD_WIDTH, "big")


class _Reader:
    def __init__(self, data):
        self.data = data
        self.pos = 0

    def take(self, n):
        if self.pos + n > len(self.data):
            raise QueryError(QueryErrorKind.MISCELLANEOUS_DECODING, "결과 데이터가 잘렸습니다")
        chunk = self.data[self.pos:self.pos + n]
        self.pos += n
        return chunk

    def at_end(self):
        return self.pos == len(self.data)


def _read_raw(reader, column_type):
    """값 하나를 (원시 값, 스칼라)로 읽는다. 타입 범위는 검사하지 않는다."""
    if column_type.kind == ColumnKind.BOOLEAN:
        b = reader.take(1)[0]
        if b not in (0, 1):
            raise QueryError(QueryErrorKind.MISCELLANEOUS_DECODING, f"잘못된 불리언 바이트: {b}")
        return b == 1, FR(b)
    if _is_bytes_kind(column_type):
        length = int.from_bytes(reader.take(_LENGTH_WIDTH), "big")
        raw = reader.take(length)
        return raw, scalar_from_bytes_via_hash(raw)
    n = int.from_bytes(reader.take(_FIELD_WIDTH), "big")
    if n >= CURVE_ORDER:
        raise QueryError(QueryErrorKind.MISCELLANEOUS_DECODING, "필드 원소가 위수 이상입니다")
    return n, FR(n)


def _decode_value(column_type, raw):
    """원시 값을 타입에 맞는 값으로 바꾼다."""
    kind = column_type.kind
    if kind == ColumnKind.BOOLEAN or kind == ColumnKind.VARBINARY:
        return raw
    if kind == ColumnKind.VARCHAR:
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            raise QueryError(QueryErrorKind.INVALID_STRING, "UTF-8이 아닌 문자열입니다") from None
    if kind == ColumnKind.SCALAR:
        return FR(raw)
    value = scalar_to_signed_int(FR(raw))
    if column_type.is_integer():
        lo, hi = column_type.integer_bounds()
        in_range = lo <= value <= hi
    elif kind == ColumnKind.DECIMAL75:
        in_range = abs(value) < 10 ** column_type.precision
    else:
        in_range = -(1 << 63) <= value < (1 << 63)
    if not in_range:
        raise QueryError(QueryErrorKind.OVERFLOW, f"{value}는 {column_type} 범위를 벗어납니다")
    return value


class ProvableQueryResult:
    """
    속성:
        num_columns: 결과 컬럼 수
        table_length: 결과 행 수
        data: 인코딩된 바이트열
    """

    def __init__(self, num_columns, table_length, data):
        self.num_columns = num_columns
        self.table_length = table_length
        self.data = bytes(data)

    @classmethod
    def from_columns(cls, columns, table_length):
        """Column 또는 OwnedColumn 리스트를 인코딩한다."""
        out = bytearray()
        for col in columns:
            for v in col.values:
                out.extend(_encode_value(col.column_type, v))
        return cls(len(columns), table_length, out)

    @classmethod
    def from_table(cls, table):
        return cls.from_columns(list(table.columns.values()), table.num_rows)

    def _read_columns(self, column_types):
        if len(column_types) != self.num_columns:
            raise QueryError(
                QueryErrorKind.INVALID_COLUMN_COUNT,
                f"컬럼 수 {self.num_columns}가 기대값 {len(column_types)}와 다릅니다",
            )
        reader = _Reader(self.data)
        columns = []
        for column_type in column_types:
            columns.append([_read_raw(reader, column_type) for _ in range(self.table_length)])
        if not reader.at_end():
            raise QueryError(QueryErrorKind.MISCELLANEOUS_DECODING, "결과 데이터 뒤에 남는 바이트가 있습니다")
        return columns

    def evaluate(self, point, column_types):
        """각 결과 컬럼의 MLE를 point에서 평가한다."""
        return [
            mle_evaluate([scalar for _, scalar in col], point)
            for col in self._read_columns(column_types)
        ]

    def to_owned_table(self, fields):
        """ColumnField 리스트에 맞춰 OwnedTable로 디코딩한다."""
        columns = self._read_columns([f.data_type for f in fields])
        return OwnedTable(
            (f.name, OwnedColumn(f.data_type, [_decode_value(f.data_type, raw) for raw, _ in col]))
            for f, col in zip(fields, columns)
        )
