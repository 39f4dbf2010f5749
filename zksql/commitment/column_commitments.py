"""
컬럼 커밋먼트 묶음 (ColumnCommitments)
=======================================

식별자 → (메타데이터, 커밋먼트)의 순서 있는 매핑.

**불변식**:
  - 한 인스턴스 안에 중복 식별자가 없다 (DuplicateIdentifiers)
  - try_add / try_sub는 식별자 순서가 같고 컬럼 타입이 같을 때만 성공한다.
    그렇지 않으면 ColumnCommitmentsMismatch를 던지며 커밋먼트를 만들지 않는다.
    서로 호환되지 않는 테이블을 조용히 합치는 일을 막는다.

사용 예시:
    >>> cc = ColumnCommitments.from_columns_with_offset(table.columns.items(), 0, setup)
    >>> cc2 = cc.try_append_rows_with_offset(new_rows.columns.items(), table.num_rows, setup)
"""

from zksql.commitment.backend import ReferenceBackend
from zksql.commitment.committable_column import CommittableColumn
from zksql.commitment.metadata import ColumnCommitmentMetadata
from zksql.errors import ColumnCommitmentsMismatch, DuplicateIdentifiers


def _check_unique(identifiers):
    seen = set()
    for ident in identifiers:
        if ident in seen:
            raise DuplicateIdentifiers(ident)
        seen.add(ident)


class ColumnCommitments:
    def __init__(self, entries=None):
        """entries: (식별자, 메타데이터, 커밋먼트) 튜플 리스트."""
        entries = list(entries or [])
        _check_unique(ident for ident, _, _ in entries)
        self._entries = {ident: (metadata, commitment) for ident, metadata, commitment in entries}

    @classmethod
    def from_columns_with_offset(cls, columns, offset, setup, backend=None):
        """(식별자, OwnedColumn) 쌍들을 offset에서 커밋한다."""
        columns = list(columns)
        _check_unique(ident for ident, _ in columns)
        backend = backend or ReferenceBackend()
        commitments = backend.compute_commitments(
            [CommittableColumn.from_column(col) for _, col in columns], offset, setup
        )
        return cls(
            (ident, ColumnCommitmentMetadata.from_column(col), commitment)
            for (ident, col), commitment in zip(columns, commitments)
        )

    # ─── 조회 ───

    def column_identifiers(self):
        return list(self._entries)

    def get_commitment(self, ident):
        entry = self._entries.get(ident)
        return entry[1] if entry else None

    def get_metadata(self, ident):
        entry = self._entries.get(ident)
        return entry[0] if entry else None

    def commitments(self):
        return [commitment for _, commitment in self._entries.values()]

    def items(self):
        return [(ident, md, c) for ident, (md, c) in self._entries.items()]

    def __len__(self):
        return len(self._entries)

    def __eq__(self, other):
        if not isinstance(other, ColumnCommitments):
            return NotImplemented
        return self.items() == other.items()

    # ─── 대수적 결합 ───

    def _check_same_identifiers(self, other):
        if self.column_identifiers() != other.column_identifiers():
            raise ColumnCommitmentsMismatch(
                f"식별자가 다릅니다: {self.column_identifiers()} vs {other.column_identifiers()}"
            )

    def try_add(self, other):
        """두 묶음을 더한다 (행 추가). 메타데이터 범위는 합쳐진다."""
        self._check_same_identifiers(other)
        entries = []
        for ident, (md, c) in self._entries.items():
            other_md, other_c = other._entries[ident]
            entries.append((ident, md.try_union(other_md), c + other_c))
        return ColumnCommitments(entries)

    def try_sub(self, other):
        """두 묶음을 뺀다 (행 제거). 범위는 BOUNDED가 된다."""
        self._check_same_identifiers(other)
        entries = []
        for ident, (md, c) in self._entries.items():
            other_md, other_c = other._entries[ident]
            entries.append((ident, md.try_difference(other_md), c - other_c))
        return ColumnCommitments(entries)

    def try_append_rows_with_offset(self, columns, offset, setup, backend=None):
        """offset 위치부터 새 행들을 커밋하여 더한 새 묶음을 반환한다."""
        appended = ColumnCommitments.from_columns_with_offset(columns, offset, setup, backend)
        return self.try_add(appended)

    def try_extend_columns_with_offset(self, columns, offset, setup, backend=None):
        """새 컬럼들을 뒤에 덧붙인다. 기존 식별자와 겹치면 DuplicateIdentifiers."""
        extension = ColumnCommitments.from_columns_with_offset(columns, offset, setup, backend)
        for ident in extension.column_identifiers():
            if ident in self._entries:
                raise DuplicateIdentifiers(ident)
        return ColumnCommitments(self.items() + extension.items())
