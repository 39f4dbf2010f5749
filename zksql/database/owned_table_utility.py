"""
OwnedTable 생성 헬퍼
=====================

테스트와 예제에서 테이블을 짧게 만들기 위한 함수들.

    >>> table = owned_table([bigint("a", [1, 2, 3]), varchar("b", ["x", "y", "z"])])
"""

from zksql.database.column import OwnedColumn
from zksql.database.column_type import ColumnType, TimeUnit
from zksql.database.table import OwnedTable
from zksql.field import FR


def owned_table(columns):
    """(식별자, OwnedColumn) 쌍 리스트로 OwnedTable을 만든다."""
    return OwnedTable(columns)


def boolean(name, values):
    return name, OwnedColumn(ColumnType.BOOLEAN, values)


def tinyint(name, values):
    return name, OwnedColumn(ColumnType.TINYINT, values)


def smallint(name, values):
    return name, OwnedColumn(ColumnType.SMALLINT, values)


def int_(name, values):
    return name, OwnedColumn(ColumnType.INT, values)


def bigint(name, values):
    return name, OwnedColumn(ColumnType.BIGINT, values)


def int128(name, values):
    return name, OwnedColumn(ColumnType.INT128, values)


def decimal75(name, precision, scale, values):
    return name, OwnedColumn(ColumnType.decimal75(precision, scale), values)


def scalar(name, values):
    return name, OwnedColumn(ColumnType.SCALAR, [FR(v) for v in values])


def varchar(name, values):
    return name, OwnedColumn(ColumnType.VARCHAR, values)


def varbinary(name, values):
    return name, OwnedColumn(ColumnType.VARBINARY, [bytes(v) for v in values])


def timestamptz(name, values, time_unit=TimeUnit.SECOND, timezone="+00:00"):
    return name, OwnedColumn(ColumnType.timestamptz(time_unit, timezone), values)
