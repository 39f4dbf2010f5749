"""
커밋 가능한 컬럼 (CommittableColumn)
=====================================

컬럼 타입을 지우고 커밋먼트 계산에 필요한 스칼라 인코딩만 남긴 뷰.

  - BOOLEAN → 0 / 1
  - 정수, DECIMAL75(스케일 전 정수), TIMESTAMPTZ → 부호 있는 필드 원소
  - VARCHAR / VARBINARY → 해시 스칼라 (원문 바이트가 아님)
  - SCALAR → 그대로
"""

from zksql.database.column_type import ColumnType
from zksql.field import to_scalar


class CommittableColumn:
    def __init__(self, column_type, scalars):
        self.column_type = column_type
        self.scalars = scalars

    @classmethod
    def from_column(cls, column):
        """OwnedColumn 또는 Column에서 만든다."""
        return cls(column.column_type, [to_scalar(v) for v in column.values])

    @classmethod
    def from_scalars(cls, scalars):
        """중간 MLE처럼 타입 없는 스칼라 벡터에서 만든다."""
        return cls(ColumnType.SCALAR, [to_scalar(v) for v in scalars])

    def __len__(self):
        return len(self.scalars)
