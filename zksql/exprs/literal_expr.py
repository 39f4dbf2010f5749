"""
리터럴과 질의 파라미터 식
==========================

둘 다 입력에 대해 선형이므로 아무것도 커밋하지 않는다.
Verifier는 상수 스칼라에 chi 평가값을 곱한다: MLE(c, c, ..., c) = c · chi_n.
"""

from zksql.database.column import Column
from zksql.errors import PlaceholderError
from zksql.exprs.proof_expr import ProofExpr


class LiteralExpr(ProofExpr):
    def __init__(self, value):
        self.value = value

    def data_type(self):
        return self.value.column_type

    def first_round_evaluate(self, alloc, table, params):
        return Column(self.value.column_type, alloc.alloc_slice_fill(self.value.value, table.num_rows))

    def final_round_evaluate(self, builder, alloc, table, params):
        return self.first_round_evaluate(alloc, table, params)

    def verifier_evaluate(self, builder, accessor, chi_eval, params):
        return self.value.to_scalar() * chi_eval

    def get_column_references(self, columns):
        pass

    def __repr__(self):
        return f"lit({self.value!r})"


class PlaceholderExpr(ProofExpr):
    """$id 자리의 질의 파라미터. id는 1부터 시작한다."""

    def __init__(self, placeholder_id, column_type):
        self.placeholder_id = placeholder_id
        self.column_type = column_type

    @classmethod
    def try_new(cls, placeholder_id, column_type):
        if placeholder_id < 1:
            raise PlaceholderError(f"placeholder id는 1 이상이어야 합니다: {placeholder_id}")
        return cls(placeholder_id, column_type)

    def data_type(self):
        return self.column_type

    def _value(self, params):
        if self.placeholder_id > len(params):
            raise PlaceholderError(
                f"${self.placeholder_id}에 해당하는 파라미터가 없습니다 (파라미터 {len(params)}개)"
            )
        value = params[self.placeholder_id - 1]
        if value.column_type != self.column_type:
            raise PlaceholderError(
                f"${self.placeholder_id}의 타입이 {self.column_type}가 아니라 {value.column_type}입니다"
            )
        return value

    def first_round_evaluate(self, alloc, table, params):
        value = self._value(params)
        return Column(self.column_type, alloc.alloc_slice_fill(value.value, table.num_rows))

    def final_round_evaluate(self, builder, alloc, table, params):
        return self.first_round_evaluate(alloc, table, params)

    def verifier_evaluate(self, builder, accessor, chi_eval, params):
        return self._value(params).to_scalar() * chi_eval

    def get_column_references(self, columns):
        pass

    def __repr__(self):
        return f"${self.placeholder_id}: {self.column_type}"
