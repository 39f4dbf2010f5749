"""
컬럼 커밋먼트 메타데이터 (ColumnCommitmentMetadata)
"""

from dataclasses import dataclass

from zksql.commitment.column_bounds import ColumnBounds
from zksql.database.column_type import ColumnType
from zksql.errors import ColumnCommitmentsMismatch, InvalidColumnCommitmentMetadata


@dataclass(frozen=True)
class ColumnCommitmentMetadata:
    """컬럼 타입과 값 범위 요약.

    순서 있는 타입(정수, 타임스탬프)만 min/max 범위를 가질 수 있다.
    """

    column_type: ColumnType
    bounds: ColumnBounds

    @classmethod
    def try_new(cls, column_type, bounds):
        if column_type.is_ordered() != bounds.is_ordered():
            raise InvalidColumnCommitmentMetadata(
                f"{column_type} 타입에 {bounds.kind.value} 범위를 붙일 수 없습니다"
            )
        return cls(column_type, bounds)

    @classmethod
    def from_column(cls, column):
        """OwnedColumn의 실제 값으로 SHARP(또는 EMPTY/NO_ORDER) 범위를 만든다."""
        return cls.try_new(
            column.column_type, ColumnBounds.from_values(column.column_type, column.values)
        )

    def _check_type(self, other):
        if self.column_type != other.column_type:
            raise ColumnCommitmentsMismatch(
                f"컬럼 타입이 다릅니다: {self.column_type} vs {other.column_type}"
            )

    def try_union(self, other):
        self._check_type(other)
        return ColumnCommitmentMetadata(self.column_type, self.bounds.try_union(other.bounds))

    def try_difference(self, other):
        self._check_type(other)
        return ColumnCommitmentMetadata(self.column_type, self.bounds.try_difference(other.bounds))
