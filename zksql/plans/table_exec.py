"""테이블 스캔 플랜: 스키마의 모든 컬럼을 그대로 내보낸다."""

from zksql.database.table import ColumnRef, Table
from zksql.plans.proof_plan import ProofPlan, TableEvaluation


class TableExec(ProofPlan):
    def __init__(self, table_ref, schema):
        """
        Args:
            table_ref: TableRef
            schema: ColumnField 리스트
        """
        self.table_ref = table_ref
        self.schema = list(schema)

    def get_column_result_fields(self):
        return list(self.schema)

    def get_column_references(self):
        return [ColumnRef(self.table_ref, f.name, f.data_type) for f in self.schema]

    def get_table_references(self):
        return [self.table_ref]

    def _output(self, table_map):
        table = table_map[self.table_ref]
        columns = {f.name: table.column(f.name) for f in self.schema}
        return Table(columns, table.num_rows)

    def first_round_evaluate(self, builder, alloc, table_map, params):
        return self._output(table_map)

    def final_round_evaluate(self, builder, alloc, table_map, params):
        return self._output(table_map)

    def verifier_evaluate(self, builder, accessor, chi_eval_map, params):
        evals = accessor[self.table_ref]
        return TableEvaluation(
            [evals[f.name] for f in self.schema], chi_eval_map[self.table_ref]
        )

    def __repr__(self):
        fields = ", ".join(f"{f.name}: {f.data_type}" for f in self.schema)
        return f"TableExec({self.table_ref}, [{fields}])"
