"""
Tests for ProvableQueryResult encoding, evaluation and decoding.

Covers:
- byte layout per column type
- evaluate() agrees with the MLE of the scalar encoding
- decode errors: truncated data, trailing bytes, bad boolean byte,
  out-of-range integers, invalid UTF-8, wrong column count
"""

import pytest
from zksql.database.column_type import ColumnType
from zksql.database.owned_table_utility import (
    bigint, boolean, decimal75, int128, owned_table, smallint, varbinary, varchar,
)
from zksql.database.table import ColumnField
from zksql.errors import QueryError, QueryErrorKind
from zksql.field import FR, scalar_from_bytes_via_hash
from zksql.mle import mle_evaluate
from zksql.proof.provable_result import ProvableQueryResult


def _encode(table):
    return ProvableQueryResult.from_columns(list(table.columns.values()), table.num_rows)


def _fields(table):
    return [ColumnField(ident, col.column_type) for ident, col in table.columns.items()]


def _field_bytes(n):
    return (n % FR.field_modulus).to_bytes(32, "big")


# ─────────────────────────────────────────────────────────────────────
# Encoding
# ─────────────────────────────────────────────────────────────────────

class TestEncoding:

    def test_layout(self):
        table = owned_table([boolean("f", [True, False]), varchar("s", ["hi", ""]), bigint("n", [7, -1])])
        result = _encode(table)
        expected = (
            b"\x01\x00"
            + (2).to_bytes(8, "big") + b"hi" + (0).to_bytes(8, "big")
            + _field_bytes(7) + _field_bytes(-1)
        )
        assert result.num_columns == 3
        assert result.table_length == 2
        assert result.data == expected

    def test_round_trip(self):
        table = owned_table([
            bigint("a", [1, -2, 3]),
            smallint("b", [10, 0, -10]),
            int128("c", [1 << 100, 0, -(1 << 100)]),
            decimal75("d", 5, 2, [12345, -99999, 0]),
            varchar("s", ["x", "한글", ""]),
            varbinary("v", [b"\x00\xff", b"", b"z"]),
            boolean("f", [True, True, False]),
        ])
        assert _encode(table).to_owned_table(_fields(table)) == table

    def test_empty_table(self):
        table = owned_table([bigint("a", []), varchar("b", [])])
        result = _encode(table)
        assert result.data == b""
        assert result.to_owned_table(_fields(table)).num_rows == 0


class TestEvaluate:
    """결과 컬럼의 MLE 평가값."""

    def test_matches_mle(self):
        table = owned_table([bigint("a", [4, -5, 6]), varchar("b", ["p", "q", "r"])])
        point = [FR(3), FR(11)]
        a_eval, b_eval = _encode(table).evaluate(point, [ColumnType.BIGINT, ColumnType.VARCHAR])
        assert a_eval == mle_evaluate([FR(4), FR(-5), FR(6)], point)
        assert b_eval == mle_evaluate(
            [scalar_from_bytes_via_hash(s.encode("utf-8")) for s in "pqr"], point
        )

    def test_empty_evaluates_to_zero(self):
        result = _encode(owned_table([bigint("a", [])]))
        assert result.evaluate([FR(5)], [ColumnType.BIGINT]) == [FR(0)]


# ─────────────────────────────────────────────────────────────────────
# Decoding errors
# ─────────────────────────────────────────────────────────────────────

def _kind(excinfo):
    return excinfo.value.kind


class TestDecodeErrors:

    def test_truncated(self):
        result = _encode(owned_table([bigint("a", [1, 2])]))
        broken = ProvableQueryResult(1, 2, result.data[:-1])
        with pytest.raises(QueryError) as e:
            broken.to_owned_table([ColumnField("a", ColumnType.BIGINT)])
        assert _kind(e) == QueryErrorKind.MISCELLANEOUS_DECODING

    def test_trailing_bytes(self):
        result = _encode(owned_table([bigint("a", [1])]))
        broken = ProvableQueryResult(1, 1, result.data + b"\x00")
        with pytest.raises(QueryError) as e:
            broken.evaluate([], [ColumnType.BIGINT])
        assert _kind(e) == QueryErrorKind.MISCELLANEOUS_DECODING

    def test_bad_boolean_byte(self):
        broken = ProvableQueryResult(1, 1, b"\x02")
        with pytest.raises(QueryError) as e:
            broken.to_owned_table([ColumnField("f", ColumnType.BOOLEAN)])
        assert _kind(e) == QueryErrorKind.MISCELLANEOUS_DECODING

    def test_field_element_out_of_range(self):
        broken = ProvableQueryResult(1, 1, FR.field_modulus.to_bytes(32, "big"))
        with pytest.raises(QueryError) as e:
            broken.to_owned_table([ColumnField("a", ColumnType.BIGINT)])
        assert _kind(e) == QueryErrorKind.MISCELLANEOUS_DECODING

    def test_integer_overflow(self):
        result = _encode(owned_table([bigint("a", [300])]))
        with pytest.raises(QueryError) as e:
            result.to_owned_table([ColumnField("a", ColumnType.TINYINT)])
        assert _kind(e) == QueryErrorKind.OVERFLOW

    def test_decimal_overflow(self):
        result = _encode(owned_table([bigint("a", [1000])]))
        with pytest.raises(QueryError) as e:
            result.to_owned_table([ColumnField("d", ColumnType.decimal75(3, 0))])
        assert _kind(e) == QueryErrorKind.OVERFLOW

    def test_invalid_utf8(self):
        data = (2).to_bytes(8, "big") + b"\xff\xfe"
        broken = ProvableQueryResult(1, 1, data)
        with pytest.raises(QueryError) as e:
            broken.to_owned_table([ColumnField("s", ColumnType.VARCHAR)])
        assert _kind(e) == QueryErrorKind.INVALID_STRING
        # VARBINARY는 같은 바이트를 그대로 받는다
        table = broken.to_owned_table([ColumnField("v", ColumnType.VARBINARY)])
        assert table.rows() == [(b"\xff\xfe",)]

    def test_column_count(self):
        result = _encode(owned_table([bigint("a", [1])]))
        with pytest.raises(QueryError) as e:
            result.to_owned_table([
                ColumnField("a", ColumnType.BIGINT),
                ColumnField("b", ColumnType.BIGINT),
            ])
        assert _kind(e) == QueryErrorKind.INVALID_COLUMN_COUNT
