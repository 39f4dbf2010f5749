"""
동등 비교 식과 0 판별 가젯
===========================

**0 판별 가젯** (equals_zero):
  컬럼 lhs에 대해 selection[i] = 1 ⟺ lhs[i] = 0 을 증명한다.

  Prover:
    1. 의사 역원 inv[i] = lhs[i]⁻¹ (0이면 0), 일괄 역원으로 계산
    2. inv, selection 순서로 커밋
    3. 두 항등식:
         (a) selection · lhs = 0
             lhs[i] ≠ 0 이면 selection[i] = 0 이어야 함
         (b) (chi - selection) - lhs · inv = 0
             lhs[i] = 0 이면 chi - selection = 0, 즉 selection[i] = 1

  Verifier:
    inv, selection 평가값을 소비하고 두 항등식의 평가값을 내보낸다.
    selection_not의 평가값은 chi_eval - selection_eval로 계산한다.

모든 비선형 불리언 술어는 이 패턴(역원 증인 + 항등식 두 개)을 따른다.

**동등 비교** lhs = rhs:
  공통 스케일로 맞춘 차이 lhs - rhs에 0 판별 가젯을 적용한다.
"""

from zksql.database.column import Column
from zksql.database.column_operation import (
    scale_and_add_subtract_eval,
    scale_and_subtract_scalars,
    try_equals_types,
)
from zksql.database.column_type import ColumnType
from zksql.exprs.proof_expr import ProofExpr
from zksql.field import FR, batch_inversion
from zksql.proof.sumcheck_subpolynomial import SumcheckSubpolynomialType


# ─────────────────────────────────────────────────────────────────────
# 0 판별 가젯
# ─────────────────────────────────────────────────────────────────────

def first_round_evaluate_equals_zero(alloc, lhs):
    return alloc.alloc_slice([v == FR(0) for v in lhs])


def final_round_evaluate_equals_zero(builder, alloc, lhs):
    """lhs(FR 리스트)의 0 판별 결과를 계산하고 증인과 항등식을 내보낸다.

    Returns:
        list[bool]: selection
    """
    lhs = alloc.alloc_slice(lhs)
    inv = builder.produce_intermediate_mle(batch_inversion(lhs))

    selection_bools = alloc.alloc_slice([v == FR(0) for v in lhs])
    selection = builder.produce_intermediate_mle(selection_bools)
    selection_not = alloc.alloc_slice([FR(0) if s else FR(1) for s in selection_bools])

    builder.produce_sumcheck_subpolynomial(
        SumcheckSubpolynomialType.IDENTITY,
        [(FR(1), [lhs, selection])],
    )
    builder.produce_sumcheck_subpolynomial(
        SumcheckSubpolynomialType.IDENTITY,
        [(FR(1), [selection_not]), (FR(-1), [lhs, inv])],
    )
    return selection_bools


def verifier_evaluate_equals_zero(builder, lhs_eval, chi_eval):
    inv_eval = builder.try_consume_final_round_mle_evaluation()
    selection_eval = builder.try_consume_final_round_mle_evaluation()
    selection_not_eval = chi_eval - selection_eval

    builder.try_produce_sumcheck_subpolynomial_evaluation(
        SumcheckSubpolynomialType.IDENTITY, selection_eval * lhs_eval, 2
    )
    builder.try_produce_sumcheck_subpolynomial_evaluation(
        SumcheckSubpolynomialType.IDENTITY, selection_not_eval - lhs_eval * inv_eval, 2
    )
    return selection_eval


# ─────────────────────────────────────────────────────────────────────
# lhs = rhs
# ─────────────────────────────────────────────────────────────────────

class EqualsExpr(ProofExpr):
    def __init__(self, lhs, rhs):
        self.lhs = lhs
        self.rhs = rhs

    @classmethod
    def try_new(cls, lhs, rhs):
        try_equals_types(lhs.data_type(), rhs.data_type())
        return cls(lhs, rhs)

    def data_type(self):
        return ColumnType.BOOLEAN

    def _difference(self, lhs_column, rhs_column):
        return scale_and_subtract_scalars(
            lhs_column.values, rhs_column.values, self.lhs.data_type(), self.rhs.data_type()
        )

    def first_round_evaluate(self, alloc, table, params):
        lhs_column = self.lhs.first_round_evaluate(alloc, table, params)
        rhs_column = self.rhs.first_round_evaluate(alloc, table, params)
        diff = self._difference(lhs_column, rhs_column)
        return Column(ColumnType.BOOLEAN, first_round_evaluate_equals_zero(alloc, diff))

    def final_round_evaluate(self, builder, alloc, table, params):
        lhs_column = self.lhs.final_round_evaluate(builder, alloc, table, params)
        rhs_column = self.rhs.final_round_evaluate(builder, alloc, table, params)
        diff = self._difference(lhs_column, rhs_column)
        return Column(ColumnType.BOOLEAN, final_round_evaluate_equals_zero(builder, alloc, diff))

    def verifier_evaluate(self, builder, accessor, chi_eval, params):
        lhs_eval = self.lhs.verifier_evaluate(builder, accessor, chi_eval, params)
        rhs_eval = self.rhs.verifier_evaluate(builder, accessor, chi_eval, params)
        diff_eval = scale_and_add_subtract_eval(
            lhs_eval, rhs_eval, self.lhs.data_type(), self.rhs.data_type(), True
        )
        return verifier_evaluate_equals_zero(builder, diff_eval, chi_eval)

    def get_column_references(self, columns):
        self.lhs.get_column_references(columns)
        self.rhs.get_column_references(columns)

    def __repr__(self):
        return f"({self.lhs!r} = {self.rhs!r})"
