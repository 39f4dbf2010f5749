"""
산술 식 (+, -, *)
==================

**덧셈/뺄셈**: 입력에 대해 선형이므로 커밋하지 않는다.
    MLE(a·x + b·y) = a·MLE(x) + b·MLE(y)
  Prover는 정확한 정수로 계산하며 범위를 벗어나면 ColumnOperationError.

**곱셈**: 비선형이므로 곱 컬럼을 커밋하고 항등식 하나를 내보낸다.
    lhs · rhs - product = 0        (차수 2)
  Verifier는 product의 평가값을 소비한다.
"""

from zksql.database.column import Column
from zksql.database.column_operation import (
    add_subtract_values,
    multiply_values,
    scale_and_add_subtract_eval,
    try_add_subtract_column_types,
    try_multiply_column_types,
)
from zksql.exprs.proof_expr import ProofExpr
from zksql.field import FR
from zksql.proof.sumcheck_subpolynomial import SumcheckSubpolynomialType


class AddSubtractExpr(ProofExpr):
    def __init__(self, lhs, rhs, is_subtract, result_type):
        self.lhs = lhs
        self.rhs = rhs
        self.is_subtract = is_subtract
        self.result_type = result_type

    @classmethod
    def try_new(cls, lhs, rhs, is_subtract):
        op = "-" if is_subtract else "+"
        result_type = try_add_subtract_column_types(lhs.data_type(), rhs.data_type(), op)
        return cls(lhs, rhs, is_subtract, result_type)

    def data_type(self):
        return self.result_type

    def _evaluate(self, lhs_column, rhs_column, alloc):
        values = add_subtract_values(
            lhs_column.values,
            rhs_column.values,
            self.lhs.data_type(),
            self.rhs.data_type(),
            self.result_type,
            self.is_subtract,
        )
        return Column(self.result_type, alloc.alloc_slice(values))

    def first_round_evaluate(self, alloc, table, params):
        lhs_column = self.lhs.first_round_evaluate(alloc, table, params)
        rhs_column = self.rhs.first_round_evaluate(alloc, table, params)
        return self._evaluate(lhs_column, rhs_column, alloc)

    def final_round_evaluate(self, builder, alloc, table, params):
        lhs_column = self.lhs.final_round_evaluate(builder, alloc, table, params)
        rhs_column = self.rhs.final_round_evaluate(builder, alloc, table, params)
        return self._evaluate(lhs_column, rhs_column, alloc)

    def verifier_evaluate(self, builder, accessor, chi_eval, params):
        lhs_eval = self.lhs.verifier_evaluate(builder, accessor, chi_eval, params)
        rhs_eval = self.rhs.verifier_evaluate(builder, accessor, chi_eval, params)
        return scale_and_add_subtract_eval(
            lhs_eval, rhs_eval, self.lhs.data_type(), self.rhs.data_type(), self.is_subtract
        )

    def get_column_references(self, columns):
        self.lhs.get_column_references(columns)
        self.rhs.get_column_references(columns)

    def __repr__(self):
        op = "-" if self.is_subtract else "+"
        return f"({self.lhs!r} {op} {self.rhs!r})"


class MultiplyExpr(ProofExpr):
    def __init__(self, lhs, rhs, result_type):
        self.lhs = lhs
        self.rhs = rhs
        self.result_type = result_type

    @classmethod
    def try_new(cls, lhs, rhs):
        result_type = try_multiply_column_types(lhs.data_type(), rhs.data_type())
        return cls(lhs, rhs, result_type)

    def data_type(self):
        return self.result_type

    def first_round_evaluate(self, alloc, table, params):
        lhs_column = self.lhs.first_round_evaluate(alloc, table, params)
        rhs_column = self.rhs.first_round_evaluate(alloc, table, params)
        values = multiply_values(lhs_column.values, rhs_column.values, self.result_type)
        return Column(self.result_type, alloc.alloc_slice(values))

    def final_round_evaluate(self, builder, alloc, table, params):
        lhs_column = self.lhs.final_round_evaluate(builder, alloc, table, params)
        rhs_column = self.rhs.final_round_evaluate(builder, alloc, table, params)
        values = alloc.alloc_slice(
            multiply_values(lhs_column.values, rhs_column.values, self.result_type)
        )

        product = builder.produce_intermediate_mle(values)
        builder.produce_sumcheck_subpolynomial(
            SumcheckSubpolynomialType.IDENTITY,
            [
                (FR(1), [lhs_column.scalars(), rhs_column.scalars()]),
                (FR(-1), [product]),
            ],
        )
        return Column(self.result_type, values)

    def verifier_evaluate(self, builder, accessor, chi_eval, params):
        lhs_eval = self.lhs.verifier_evaluate(builder, accessor, chi_eval, params)
        rhs_eval = self.rhs.verifier_evaluate(builder, accessor, chi_eval, params)
        product_eval = builder.try_consume_final_round_mle_evaluation()
        builder.try_produce_sumcheck_subpolynomial_evaluation(
            SumcheckSubpolynomialType.IDENTITY, lhs_eval * rhs_eval - product_eval, 2
        )
        return product_eval

    def get_column_references(self, columns):
        self.lhs.get_column_references(columns)
        self.rhs.get_column_references(columns)

    def __repr__(self):
        return f"({self.lhs!r} * {self.rhs!r})"
