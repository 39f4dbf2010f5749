"""
테이블과 참조 (TableRef, ColumnRef, ColumnField, Table, OwnedTable)
"""

from dataclasses import dataclass

from zksql.database.column import Column
from zksql.database.column_type import ColumnType
from zksql.errors import ColumnNotFound, OwnedTableError


@dataclass(frozen=True)
class TableRef:
    """스키마.테이블 이름."""

    schema: str
    table: str

    @classmethod
    def parse(cls, name):
        """"schema.table" 문자열을 파싱한다. 스키마가 없으면 빈 문자열."""
        if "." in name:
            schema, table = name.split(".", 1)
        else:
            schema, table = "", name
        return cls(schema, table)

    def __str__(self):
        return f"{self.schema}.{self.table}" if self.schema else self.table


@dataclass(frozen=True)
class ColumnRef:
    """테이블에 속한 컬럼 하나에 대한 참조."""

    table_ref: TableRef
    column_id: str
    column_type: ColumnType

    def __str__(self):
        return f"{self.table_ref}.{self.column_id}"


@dataclass(frozen=True)
class ColumnField:
    """결과 컬럼의 이름과 타입."""

    name: str
    data_type: ColumnType


class Table:
    """라운드 범위의 테이블. 컬럼은 Arena에서 할당된 Column이다.

    컬럼이 하나도 없어도 행 수를 유지하도록 num_rows를 명시적으로 가진다.
    """

    def __init__(self, columns, num_rows=None):
        self.columns = dict(columns)
        if num_rows is None:
            if not self.columns:
                raise ValueError("컬럼이 없는 테이블은 num_rows를 지정해야 합니다")
            num_rows = len(next(iter(self.columns.values())))
        for ident, col in self.columns.items():
            if len(col) != num_rows:
                raise ValueError(
                    f"컬럼 {ident}의 길이 {len(col)}가 테이블 행 수 {num_rows}와 다릅니다"
                )
        self.num_rows = num_rows

    @classmethod
    def from_owned(cls, alloc, owned_table):
        columns = {
            ident: Column.from_owned(alloc, col) for ident, col in owned_table.columns.items()
        }
        return cls(columns, owned_table.num_rows)

    def column(self, ident):
        try:
            return self.columns[ident]
        except KeyError:
            raise ColumnNotFound(f"컬럼 {ident}을(를) 찾을 수 없습니다") from None

    def identifiers(self):
        return list(self.columns)

    def to_owned(self):
        return OwnedTable({ident: col.to_owned() for ident, col in self.columns.items()})


class OwnedTable:
    """소유권을 가진 테이블: 식별자 → OwnedColumn (순서 유지).

    Raises:
        OwnedTableError: 컬럼 길이가 서로 다를 때
    """

    def __init__(self, columns):
        self.columns = dict(columns)
        lengths = {len(col) for col in self.columns.values()}
        if len(lengths) > 1:
            raise OwnedTableError(f"컬럼 길이가 서로 다릅니다: {sorted(lengths)}")

    @property
    def num_rows(self):
        if not self.columns:
            return 0
        return len(next(iter(self.columns.values())))

    @property
    def num_columns(self):
        return len(self.columns)

    def column(self, ident):
        try:
            return self.columns[ident]
        except KeyError:
            raise ColumnNotFound(f"컬럼 {ident}을(를) 찾을 수 없습니다") from None

    def identifiers(self):
        return list(self.columns)

    def rows(self):
        """행 단위 튜플 리스트 (테스트와 출력용)."""
        cols = [col.values for col in self.columns.values()]
        return list(zip(*cols)) if cols else []

    def __eq__(self, other):
        if not isinstance(other, OwnedTable):
            return NotImplemented
        return list(self.columns.items()) == list(other.columns.items())

    def __repr__(self):
        return f"OwnedTable({self.columns!r})"
