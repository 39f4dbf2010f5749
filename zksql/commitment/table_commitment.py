"""
테이블 커밋먼트 (TableCommitment)
==================================

ColumnCommitments와 커밋된 행 범위 [start, end)를 함께 가진다.
행 추가는 end 오프셋부터 새 행을 커밋하여 더하는 것으로 구현된다.
"""

from zksql.commitment.column_commitments import ColumnCommitments
from zksql.errors import TableCommitmentError


class TableCommitment:
    def __init__(self, column_commitments, start, end):
        if start > end:
            raise TableCommitmentError(f"잘못된 행 범위: [{start}, {end})")
        self.column_commitments = column_commitments
        self.start = start
        self.end = end

    @classmethod
    def from_owned_table_with_offset(cls, table, offset, setup, backend=None):
        cc = ColumnCommitments.from_columns_with_offset(
            table.columns.items(), offset, setup, backend
        )
        return cls(cc, offset, offset + table.num_rows)

    @property
    def num_rows(self):
        return self.end - self.start

    @property
    def num_columns(self):
        return len(self.column_commitments)

    def try_append_rows(self, table, setup, backend=None):
        """테이블 끝에 행을 덧붙인 새 TableCommitment."""
        cc = self.column_commitments.try_append_rows_with_offset(
            table.columns.items(), self.end, setup, backend
        )
        return TableCommitment(cc, self.start, self.end + table.num_rows)

    def try_extend_columns(self, table, setup, backend=None):
        """같은 행 범위의 새 컬럼들을 덧붙인다."""
        if table.num_rows != self.num_rows:
            raise TableCommitmentError(
                f"새 컬럼의 길이 {table.num_rows}가 테이블 행 수 {self.num_rows}와 다릅니다"
            )
        cc = self.column_commitments.try_extend_columns_with_offset(
            table.columns.items(), self.start, setup, backend
        )
        return TableCommitment(cc, self.start, self.end)

    def try_add(self, other):
        """바로 뒤에 이어지는 범위의 커밋먼트를 더한다."""
        if other.start != self.end:
            raise TableCommitmentError(
                f"범위가 이어지지 않습니다: [{self.start}, {self.end}) + [{other.start}, {other.end})"
            )
        return TableCommitment(
            self.column_commitments.try_add(other.column_commitments), self.start, other.end
        )

    def try_sub(self, other):
        """끝부분 범위의 커밋먼트를 뺀다."""
        if other.end != self.end or other.start < self.start:
            raise TableCommitmentError(
                f"끝부분 범위가 아닙니다: [{self.start}, {self.end}) - [{other.start}, {other.end})"
            )
        return TableCommitment(
            self.column_commitments.try_sub(other.column_commitments), self.start, other.start
        )
