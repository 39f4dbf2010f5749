"""
프로젝션 플랜
==============

입력 플랜의 출력 위에서 식을 평가한다. 행 수는 입력과 같으므로
입력의 chi 평가값을 그대로 물려받는다.
"""

from zksql.database.table import ColumnField, Table
from zksql.plans.proof_plan import ProofPlan, TableEvaluation


class ProjectionExec(ProofPlan):
    def __init__(self, aliased_results, input_plan):
        self.aliased_results = list(aliased_results)
        self.input = input_plan

    def get_column_result_fields(self):
        return [ColumnField(a.alias, a.expr.data_type()) for a in self.aliased_results]

    def get_column_references(self):
        return self.input.get_column_references()

    def get_table_references(self):
        return self.input.get_table_references()

    def first_round_evaluate(self, builder, alloc, table_map, params):
        table = self.input.first_round_evaluate(builder, alloc, table_map, params)
        columns = {
            a.alias: a.expr.first_round_evaluate(alloc, table, params)
            for a in self.aliased_results
        }
        return Table(columns, table.num_rows)

    def final_round_evaluate(self, builder, alloc, table_map, params):
        table = self.input.final_round_evaluate(builder, alloc, table_map, params)
        columns = {
            a.alias: a.expr.final_round_evaluate(builder, alloc, table, params)
            for a in self.aliased_results
        }
        return Table(columns, table.num_rows)

    def verifier_evaluate(self, builder, accessor, chi_eval_map, params):
        input_eval = self.input.verifier_evaluate(builder, accessor, chi_eval_map, params)
        names = [f.name for f in self.input.get_column_result_fields()]
        input_accessor = dict(zip(names, input_eval.column_evals))
        evals = [
            a.expr.verifier_evaluate(builder, input_accessor, input_eval.chi_eval, params)
            for a in self.aliased_results
        ]
        return TableEvaluation(evals, input_eval.chi_eval)

    def __repr__(self):
        results = ", ".join(repr(a) for a in self.aliased_results)
        return f"ProjectionExec([{results}], {self.input!r})"
