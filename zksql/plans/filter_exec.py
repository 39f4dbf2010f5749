"""
필터 플랜 (FilterExec)
=======================

SELECT <results> FROM <table> WHERE <where_clause>

입력 n행 중 술어를 만족하는 m행을 순서대로 골라낸다.
행 수가 바뀌므로 "선택된 입력 행이 정확히 한 번씩, 순서대로 출력에
나타난다"를 따로 증명해야 한다.

**1차 라운드**:
  술어와 결과 식을 평가하여 필터링하고
      post-result 챌린지 2개 (α, β) 요청
      출력 길이 m의 chi 평가 요청
      range_length ≥ n

**최종 라운드** (분수 분해 인수):
  1. 필터링된 출력 컬럼 d₀..dₖ 를 커밋
  2. 입력 c, 출력 d를 행마다 하나의 값으로 접는다
         c_fold[i] = α · Σ βᵏ · cₖ[i]    (길이 n)
         d_fold[j] = α · Σ βᵏ · dₖ[j]    (길이 m)
  3. c_star = 1/(1 + c_fold), d_star = 1/(1 + d_fold) 를 일괄 역원으로 계산, 커밋
  4. 네 항등식:
       (1) Σ c_star·s - Σ d_star = 0            ZERO_SUM
       (2) c_star + c_fold·c_star - chi_n = 0  c_star를 n행의 역원으로 고정
       (3) d_star + d_fold·d_star - chi_m = 0  d_star를 m행의 역원으로 고정
       (4) d_fold·chi_m - d_fold = 0           m행 밖의 d_fold는 0

**Verifier**:
  같은 순서로 평가값을 소비하고 c_fold, d_fold의 평가값을 챌린지로부터
  직접 재구성하여 네 항등식의 평가값을 내보낸다.
"""

from zksql.database.column import Column
from zksql.database.table import ColumnField, Table
from zksql.field import FR, batch_inversion
from zksql.plans.proof_plan import ProofPlan, TableEvaluation, fold_columns, fold_vals
from zksql.proof.sumcheck_subpolynomial import SumcheckSubpolynomialType


def filter_columns(alloc, columns, selection):
    """selection이 참인 행만 남긴다.

    Returns:
        (list[Column], int): 필터링된 컬럼들과 출력 행 수 m
    """
    indexes = [i for i, s in enumerate(selection) if s]
    filtered = [
        Column(col.column_type, alloc.alloc_slice([col.values[i] for i in indexes]))
        for col in columns
    ]
    return filtered, len(indexes)


def prove_filter(builder, alloc, alpha, beta, c, s, d, n, m):
    """
    Args:
        c: 입력 컬럼들의 FR 리스트 (길이 n)
        s: 선택 컬럼의 FR 리스트 (길이 n)
        d: 출력 컬럼들의 FR 리스트 (길이 m)
    """
    chi_n = alloc.alloc_slice_fill(FR(1), n)
    chi_m = alloc.alloc_slice_fill(FR(1), m)

    c_fold = alloc.alloc_slice(fold_columns(alpha, beta, c, n))
    d_fold = alloc.alloc_slice(fold_columns(alpha, beta, d, m))

    c_star = builder.produce_intermediate_mle(batch_inversion([v + FR(1) for v in c_fold]))
    d_star = builder.produce_intermediate_mle(batch_inversion([v + FR(1) for v in d_fold]))

    # Σ c_star·s - Σ d_star = 0
    builder.produce_sumcheck_subpolynomial(
        SumcheckSubpolynomialType.ZERO_SUM,
        [(FR(1), [c_star, s]), (FR(-1), [d_star])],
    )
    # c_star + c_fold·c_star - chi_n = 0
    builder.produce_sumcheck_subpolynomial(
        SumcheckSubpolynomialType.IDENTITY,
        [(FR(1), [c_star]), (FR(1), [c_star, c_fold]), (FR(-1), [chi_n])],
    )
    # d_star + d_fold·d_star - chi_m = 0
    builder.produce_sumcheck_subpolynomial(
        SumcheckSubpolynomialType.IDENTITY,
        [(FR(1), [d_star]), (FR(1), [d_star, d_fold]), (FR(-1), [chi_m])],
    )
    # d_fold·chi_m - d_fold = 0
    builder.produce_sumcheck_subpolynomial(
        SumcheckSubpolynomialType.IDENTITY,
        [(FR(1), [d_fold, chi_m]), (FR(-1), [d_fold])],
    )


def verify_filter(builder, alpha, beta, chi_n_eval, chi_m_eval, c_evals, s_eval, d_evals):
    c_fold_eval = alpha * fold_vals(beta, c_evals)
    d_fold_eval = alpha * fold_vals(beta, d_evals)
    c_star_eval = builder.try_consume_final_round_mle_evaluation()
    d_star_eval = builder.try_consume_final_round_mle_evaluation()

    builder.try_produce_sumcheck_subpolynomial_evaluation(
        SumcheckSubpolynomialType.ZERO_SUM,
        c_star_eval * s_eval - d_star_eval,
        2,
    )
    builder.try_produce_sumcheck_subpolynomial_evaluation(
        SumcheckSubpolynomialType.IDENTITY,
        c_star_eval + c_fold_eval * c_star_eval - chi_n_eval,
        2,
    )
    builder.try_produce_sumcheck_subpolynomial_evaluation(
        SumcheckSubpolynomialType.IDENTITY,
        d_star_eval + d_fold_eval * d_star_eval - chi_m_eval,
        2,
    )
    builder.try_produce_sumcheck_subpolynomial_evaluation(
        SumcheckSubpolynomialType.IDENTITY,
        d_fold_eval * (chi_m_eval - FR(1)),
        2,
    )


class FilterExec(ProofPlan):
    def __init__(self, aliased_results, table_ref, where_clause):
        self.aliased_results = list(aliased_results)
        self.table_ref = table_ref
        self.where_clause = where_clause

    def get_column_result_fields(self):
        return [ColumnField(a.alias, a.expr.data_type()) for a in self.aliased_results]

    def get_column_references(self):
        columns = {}
        self.where_clause.get_column_references(columns)
        for a in self.aliased_results:
            a.expr.get_column_references(columns)
        return list(columns)

    def get_table_references(self):
        return [self.table_ref]

    def _output(self, filtered, m):
        columns = {a.alias: col for a, col in zip(self.aliased_results, filtered)}
        return Table(columns, m)

    def first_round_evaluate(self, builder, alloc, table_map, params):
        table = table_map[self.table_ref]
        selection = self.where_clause.first_round_evaluate(alloc, table, params)
        columns = [a.expr.first_round_evaluate(alloc, table, params) for a in self.aliased_results]
        filtered, m = filter_columns(alloc, columns, selection.values)

        builder.request_post_result_challenges(2)
        builder.produce_chi_evaluation_length(m)
        builder.update_range_length(table.num_rows)
        return self._output(filtered, m)

    def final_round_evaluate(self, builder, alloc, table_map, params):
        table = table_map[self.table_ref]
        n = table.num_rows
        selection = self.where_clause.final_round_evaluate(builder, alloc, table, params)
        columns = [
            a.expr.final_round_evaluate(builder, alloc, table, params) for a in self.aliased_results
        ]
        filtered, m = filter_columns(alloc, columns, selection.values)

        d = [builder.produce_intermediate_mle(col.values) for col in filtered]
        alpha = builder.consume_post_result_challenge()
        beta = builder.consume_post_result_challenge()

        c = [alloc.alloc_slice(col.scalars()) for col in columns]
        s = alloc.alloc_slice(selection.scalars())
        prove_filter(builder, alloc, alpha, beta, c, s, d, n, m)
        return self._output(filtered, m)

    def verifier_evaluate(self, builder, accessor, chi_eval_map, params):
        input_chi_eval = chi_eval_map[self.table_ref]
        table_accessor = accessor[self.table_ref]

        selection_eval = self.where_clause.verifier_evaluate(
            builder, table_accessor, input_chi_eval, params
        )
        column_evals = [
            a.expr.verifier_evaluate(builder, table_accessor, input_chi_eval, params)
            for a in self.aliased_results
        ]

        filtered_evals = builder.try_consume_final_round_mle_evaluations(len(self.aliased_results))
        alpha = builder.try_consume_post_result_challenge()
        beta = builder.try_consume_post_result_challenge()
        output_chi_eval = builder.try_consume_chi_evaluation()

        verify_filter(
            builder,
            alpha,
            beta,
            input_chi_eval,
            output_chi_eval,
            column_evals,
            selection_eval,
            filtered_evals,
        )
        return TableEvaluation(filtered_evals, output_chi_eval)

    def __repr__(self):
        results = ", ".join(repr(a) for a in self.aliased_results)
        return f"FilterExec([{results}], {self.table_ref}, {self.where_clause!r})"
