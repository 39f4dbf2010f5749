"""
증명 플랜 (ProofPlan) 공통 인터페이스
======================================

플랜은 하나 이상의 테이블 위에서 식을 조합하고, 플랜 수준의 제약
(예: 필터의 행 선택 인수)을 추가하는 연산자 노드이다.

  first_round_evaluate(builder, alloc, table_map, params) -> Table
  final_round_evaluate(builder, alloc, table_map, params) -> Table
  verifier_evaluate(builder, accessor, chi_eval_map, params) -> TableEvaluation

  table_map:    TableRef → Table (Prover, 라운드 Arena에서 할당)
  accessor:     TableRef → {식별자 → MLE 평가값} (Verifier)
  chi_eval_map: TableRef → chi_{테이블 길이}(r)

플랜의 repr은 트랜스크립트에 바인딩되므로 결정적이어야 한다.
"""

from zksql.field import FR


class TableEvaluation:
    """플랜 출력의 컬럼별 MLE 평가값과 출력 길이의 chi 평가값."""

    def __init__(self, column_evals, chi_eval):
        self.column_evals = list(column_evals)
        self.chi_eval = chi_eval


class ProofPlan:
    def get_column_result_fields(self):
        raise NotImplementedError

    def get_column_references(self):
        """참조하는 기본 컬럼의 ColumnRef 리스트 (결정적 순서, 중복 없음)."""
        raise NotImplementedError

    def get_table_references(self):
        raise NotImplementedError

    def first_round_evaluate(self, builder, alloc, table_map, params):
        raise NotImplementedError

    def final_round_evaluate(self, builder, alloc, table_map, params):
        raise NotImplementedError

    def verifier_evaluate(self, builder, accessor, chi_eval_map, params):
        raise NotImplementedError


def fold_vals(beta, vals):
    """Σ βᵏ·vals[k] (Horner)."""
    acc = FR(0)
    for v in reversed(vals):
        acc = acc * beta + v
    return acc


def fold_columns(alpha, beta, columns, length):
    """행마다 α·Σ βᵏ·columns[k][i] 를 계산한다.

    Args:
        columns: 같은 길이의 FR 리스트들
        length: 행 수 (컬럼이 없어도 길이를 유지하기 위함)
    """
    folded = []
    for i in range(length):
        folded.append(alpha * fold_vals(beta, [col[i] for col in columns]))
    return folded
