"""컬럼 참조 식."""

from zksql.errors import ColumnNotFound
from zksql.exprs.proof_expr import ProofExpr


class ColumnExpr(ProofExpr):
    def __init__(self, column_ref):
        self.column_ref = column_ref

    def data_type(self):
        return self.column_ref.column_type

    def first_round_evaluate(self, alloc, table, params):
        return table.column(self.column_ref.column_id)

    def final_round_evaluate(self, builder, alloc, table, params):
        return table.column(self.column_ref.column_id)

    def verifier_evaluate(self, builder, accessor, chi_eval, params):
        try:
            return accessor[self.column_ref.column_id]
        except KeyError:
            raise ColumnNotFound(f"컬럼 {self.column_ref}의 평가값이 없습니다") from None

    def get_column_references(self, columns):
        columns[self.column_ref] = None

    def __repr__(self):
        return f"col({self.column_ref}: {self.column_ref.column_type})"
