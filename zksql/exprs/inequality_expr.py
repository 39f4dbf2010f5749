"""
순서 비교 식 (<, >)
====================

  lhs < rhs  ⟺  sign(lhs - rhs) = 1
  lhs > rhs  ⟺  sign(rhs - lhs) = 1

차이는 공통 스케일에서 정확한 파이썬 정수로 계산하고 부호 가젯에 넘긴다.
Verifier는 같은 차이의 평가값을 선형으로 계산한 뒤 부호 가젯을 재생한다.
<=, >= 는 NOT과 조합한다 (dsl 참고).
"""

from zksql.database.column import Column
from zksql.database.column_operation import (
    scale_and_add_subtract_eval,
    scale_and_subtract_values,
    try_inequality_types,
)
from zksql.database.column_type import ColumnType
from zksql.exprs.proof_expr import ProofExpr
from zksql.exprs.sign_expr import (
    final_round_evaluate_sign,
    first_round_evaluate_sign,
    verifier_evaluate_sign,
)


class InequalityExpr(ProofExpr):
    def __init__(self, lhs, rhs, is_lt):
        self.lhs = lhs
        self.rhs = rhs
        self.is_lt = is_lt

    @classmethod
    def try_new(cls, lhs, rhs, is_lt):
        try_inequality_types(lhs.data_type(), rhs.data_type())
        return cls(lhs, rhs, is_lt)

    def data_type(self):
        return ColumnType.BOOLEAN

    def _difference(self, lhs_column, rhs_column):
        lt, rt = self.lhs.data_type(), self.rhs.data_type()
        if self.is_lt:
            return scale_and_subtract_values(lhs_column.values, rhs_column.values, lt, rt)
        return scale_and_subtract_values(rhs_column.values, lhs_column.values, rt, lt)

    def first_round_evaluate(self, alloc, table, params):
        lhs_column = self.lhs.first_round_evaluate(alloc, table, params)
        rhs_column = self.rhs.first_round_evaluate(alloc, table, params)
        diff = self._difference(lhs_column, rhs_column)
        return Column(ColumnType.BOOLEAN, first_round_evaluate_sign(alloc, diff))

    def final_round_evaluate(self, builder, alloc, table, params):
        lhs_column = self.lhs.final_round_evaluate(builder, alloc, table, params)
        rhs_column = self.rhs.final_round_evaluate(builder, alloc, table, params)
        diff = self._difference(lhs_column, rhs_column)
        return Column(ColumnType.BOOLEAN, final_round_evaluate_sign(builder, alloc, diff))

    def verifier_evaluate(self, builder, accessor, chi_eval, params):
        lhs_eval = self.lhs.verifier_evaluate(builder, accessor, chi_eval, params)
        rhs_eval = self.rhs.verifier_evaluate(builder, accessor, chi_eval, params)
        lt, rt = self.lhs.data_type(), self.rhs.data_type()
        if self.is_lt:
            diff_eval = scale_and_add_subtract_eval(lhs_eval, rhs_eval, lt, rt, True)
        else:
            diff_eval = scale_and_add_subtract_eval(rhs_eval, lhs_eval, rt, lt, True)
        return verifier_evaluate_sign(builder, diff_eval, chi_eval)

    def get_column_references(self, columns):
        self.lhs.get_column_references(columns)
        self.rhs.get_column_references(columns)

    def __repr__(self):
        op = "<" if self.is_lt else ">"
        return f"({self.lhs!r} {op} {self.rhs!r})"
