"""
테이블 접근자 (Accessor)
=========================

**OwnedTableAccessor** (Prover 측):
  원본 테이블과 그 TableCommitment를 함께 보관한다.
  Prover는 컬럼 값을, Verifier 인터페이스는 커밋먼트만 쓴다.

**CommitmentAccessor** (Verifier 측):
  TableCommitment만 보관한다. 원본 값에는 접근할 수 없다.

공통 Verifier 인터페이스:
  get_length(table_ref), get_offset(table_ref), get_commitment(column_ref),
  lookup_column(table_ref, ident), lookup_schema(table_ref)
"""

from zksql.commitment.backend import ReferenceBackend
from zksql.commitment.table_commitment import TableCommitment
from zksql.database.table import ColumnRef
from zksql.errors import ColumnNotFound, TableNotFound


class CommitmentAccessor:
    def __init__(self, table_commitments=None):
        self.table_commitments = dict(table_commitments or {})

    def insert(self, table_ref, table_commitment):
        self.table_commitments[table_ref] = table_commitment

    def _table_commitment(self, table_ref):
        try:
            return self.table_commitments[table_ref]
        except KeyError:
            raise TableNotFound(f"테이블 {table_ref}을(를) 찾을 수 없습니다") from None

    def get_length(self, table_ref):
        return self._table_commitment(table_ref).num_rows

    def get_offset(self, table_ref):
        return self._table_commitment(table_ref).start

    def get_commitment(self, column_ref):
        cc = self._table_commitment(column_ref.table_ref).column_commitments
        commitment = cc.get_commitment(column_ref.column_id)
        if commitment is None:
            raise ColumnNotFound(f"컬럼 {column_ref}을(를) 찾을 수 없습니다")
        return commitment

    def lookup_column(self, table_ref, ident):
        """컬럼 타입을 돌려준다. 없으면 None."""
        cc = self._table_commitment(table_ref).column_commitments
        metadata = cc.get_metadata(ident)
        return metadata.column_type if metadata else None

    def lookup_schema(self, table_ref):
        cc = self._table_commitment(table_ref).column_commitments
        return [(ident, md.column_type) for ident, md, _ in cc.items()]

    def column_ref(self, table_ref, ident):
        """스키마를 조회하여 ColumnRef를 만든다."""
        column_type = self.lookup_column(table_ref, ident)
        if column_type is None:
            raise ColumnNotFound(f"컬럼 {table_ref}.{ident}을(를) 찾을 수 없습니다")
        return ColumnRef(table_ref, ident, column_type)


class OwnedTableAccessor(CommitmentAccessor):
    def __init__(self, setup, backend=None):
        super().__init__()
        self.setup = setup
        self.backend = backend or ReferenceBackend()
        self.tables = {}

    @classmethod
    def new_from_table(cls, table_ref, table, setup, offset=0, backend=None):
        accessor = cls(setup, backend)
        accessor.add_table(table_ref, table, offset)
        return accessor

    def add_table(self, table_ref, table, offset=0):
        self.tables[table_ref] = table
        self.insert(
            table_ref,
            TableCommitment.from_owned_table_with_offset(table, offset, self.setup, self.backend),
        )

    def get_owned_table(self, table_ref):
        try:
            return self.tables[table_ref]
        except KeyError:
            raise TableNotFound(f"테이블 {table_ref}을(를) 찾을 수 없습니다") from None

    def get_column(self, column_ref):
        return self.get_owned_table(column_ref.table_ref).column(column_ref.column_id)

    def to_commitment_accessor(self):
        return CommitmentAccessor(self.table_commitments)
