"""
논리 식 (AND, OR, NOT)
=======================

불리언 컬럼은 0/1 스칼라이므로 논리 연산을 산술로 쓴다.

  NOT x    = chi - x                  선형, 커밋 없음
  x AND y  = x · y                    곱을 커밋, 항등식 x·y - z = 0
  x OR y   = x + y - x·y              곱 x·y를 커밋하고 선형 결합으로 복원

피연산자가 BOOLEAN이 아니면 생성 시점에 DataTypeMismatch.
"""

from zksql.database.column import Column
from zksql.database.column_type import ColumnType
from zksql.errors import DataTypeMismatch
from zksql.exprs.proof_expr import ProofExpr
from zksql.field import FR
from zksql.proof.sumcheck_subpolynomial import SumcheckSubpolynomialType


def _check_boolean(lhs, rhs, op):
    lt, rt = lhs.data_type(), rhs.data_type()
    if lt != ColumnType.BOOLEAN or rt != ColumnType.BOOLEAN:
        raise DataTypeMismatch(lt, rt, op)


def _produce_product(builder, alloc, lhs_column, rhs_column):
    """불리언 두 컬럼의 곱을 커밋하고 곱 항등식을 내보낸다."""
    values = alloc.alloc_slice([l and r for l, r in zip(lhs_column.values, rhs_column.values)])
    product = builder.produce_intermediate_mle(values)
    builder.produce_sumcheck_subpolynomial(
        SumcheckSubpolynomialType.IDENTITY,
        [
            (FR(1), [lhs_column.scalars(), rhs_column.scalars()]),
            (FR(-1), [product]),
        ],
    )
    return values


def _verify_product(builder, lhs_eval, rhs_eval):
    product_eval = builder.try_consume_final_round_mle_evaluation()
    builder.try_produce_sumcheck_subpolynomial_evaluation(
        SumcheckSubpolynomialType.IDENTITY, lhs_eval * rhs_eval - product_eval, 2
    )
    return product_eval


class AndExpr(ProofExpr):
    def __init__(self, lhs, rhs):
        self.lhs = lhs
        self.rhs = rhs

    @classmethod
    def try_new(cls, lhs, rhs):
        _check_boolean(lhs, rhs, "AND")
        return cls(lhs, rhs)

    def data_type(self):
        return ColumnType.BOOLEAN

    def first_round_evaluate(self, alloc, table, params):
        lhs_column = self.lhs.first_round_evaluate(alloc, table, params)
        rhs_column = self.rhs.first_round_evaluate(alloc, table, params)
        values = [l and r for l, r in zip(lhs_column.values, rhs_column.values)]
        return Column(ColumnType.BOOLEAN, alloc.alloc_slice(values))

    def final_round_evaluate(self, builder, alloc, table, params):
        lhs_column = self.lhs.final_round_evaluate(builder, alloc, table, params)
        rhs_column = self.rhs.final_round_evaluate(builder, alloc, table, params)
        return Column(ColumnType.BOOLEAN, _produce_product(builder, alloc, lhs_column, rhs_column))

    def verifier_evaluate(self, builder, accessor, chi_eval, params):
        lhs_eval = self.lhs.verifier_evaluate(builder, accessor, chi_eval, params)
        rhs_eval = self.rhs.verifier_evaluate(builder, accessor, chi_eval, params)
        return _verify_product(builder, lhs_eval, rhs_eval)

    def get_column_references(self, columns):
        self.lhs.get_column_references(columns)
        self.rhs.get_column_references(columns)

    def __repr__(self):
        return f"({self.lhs!r} AND {self.rhs!r})"


class OrExpr(ProofExpr):
    def __init__(self, lhs, rhs):
        self.lhs = lhs
        self.rhs = rhs

    @classmethod
    def try_new(cls, lhs, rhs):
        _check_boolean(lhs, rhs, "OR")
        return cls(lhs, rhs)

    def data_type(self):
        return ColumnType.BOOLEAN

    def first_round_evaluate(self, alloc, table, params):
        lhs_column = self.lhs.first_round_evaluate(alloc, table, params)
        rhs_column = self.rhs.first_round_evaluate(alloc, table, params)
        values = [l or r for l, r in zip(lhs_column.values, rhs_column.values)]
        return Column(ColumnType.BOOLEAN, alloc.alloc_slice(values))

    def final_round_evaluate(self, builder, alloc, table, params):
        lhs_column = self.lhs.final_round_evaluate(builder, alloc, table, params)
        rhs_column = self.rhs.final_round_evaluate(builder, alloc, table, params)
        _produce_product(builder, alloc, lhs_column, rhs_column)
        values = [l or r for l, r in zip(lhs_column.values, rhs_column.values)]
        return Column(ColumnType.BOOLEAN, alloc.alloc_slice(values))

    def verifier_evaluate(self, builder, accessor, chi_eval, params):
        lhs_eval = self.lhs.verifier_evaluate(builder, accessor, chi_eval, params)
        rhs_eval = self.rhs.verifier_evaluate(builder, accessor, chi_eval, params)
        product_eval = _verify_product(builder, lhs_eval, rhs_eval)
        return lhs_eval + rhs_eval - product_eval

    def get_column_references(self, columns):
        self.lhs.get_column_references(columns)
        self.rhs.get_column_references(columns)

    def __repr__(self):
        return f"({self.lhs!r} OR {self.rhs!r})"


class NotExpr(ProofExpr):
    def __init__(self, expr):
        self.expr = expr

    @classmethod
    def try_new(cls, expr):
        if expr.data_type() != ColumnType.BOOLEAN:
            raise DataTypeMismatch(expr.data_type(), ColumnType.BOOLEAN, "NOT")
        return cls(expr)

    def data_type(self):
        return ColumnType.BOOLEAN

    def first_round_evaluate(self, alloc, table, params):
        column = self.expr.first_round_evaluate(alloc, table, params)
        return Column(ColumnType.BOOLEAN, alloc.alloc_slice([not v for v in column.values]))

    def final_round_evaluate(self, builder, alloc, table, params):
        column = self.expr.final_round_evaluate(builder, alloc, table, params)
        return Column(ColumnType.BOOLEAN, alloc.alloc_slice([not v for v in column.values]))

    def verifier_evaluate(self, builder, accessor, chi_eval, params):
        return chi_eval - self.expr.verifier_evaluate(builder, accessor, chi_eval, params)

    def get_column_references(self, columns):
        self.expr.get_column_references(columns)

    def __repr__(self):
        return f"(NOT {self.expr!r})"
