"""
증명 식 (ProofExpr) 공통 인터페이스
=====================================

모든 식 노드는 세 단계를 이 순서로 수행한다.

  ┌─────────────────────────────────────────────────────────────┐
  │  1. first_round_evaluate(alloc, table, params) -> Column    │
  │     순수 평문 계산                                           │
  ├─────────────────────────────────────────────────────────────┤
  │  2. final_round_evaluate(builder, alloc, table, params)     │
  │     같은 결과를 다시 계산하면서, 입력에 대해 선형이 아닌     │
  │     노드는 중간 컬럼을 커밋하고 서브다항식을 내보낸다        │
  ├─────────────────────────────────────────────────────────────┤
  │  3. verifier_evaluate(builder, accessor, chi_eval, params)  │
  │     2단계가 내보낸 순서대로 평가값을 소비하여                │
  │     이 노드 출력의 MLE 평가값을 재구성한다                  │
  └─────────────────────────────────────────────────────────────┘

accessor는 입력 테이블의 "식별자 → MLE 평가값" 사전이다.
식은 생성 시점(try_new)에 타입을 분석하며 증명 전에 AnalyzeError를 던진다.
"""


class ProofExpr:
    def data_type(self):
        raise NotImplementedError

    def first_round_evaluate(self, alloc, table, params):
        raise NotImplementedError

    def final_round_evaluate(self, builder, alloc, table, params):
        raise NotImplementedError

    def verifier_evaluate(self, builder, accessor, chi_eval, params):
        raise NotImplementedError

    def get_column_references(self, columns):
        """참조하는 ColumnRef를 columns(순서 있는 dict)에 추가한다."""
        raise NotImplementedError


class AliasedProofExpr:
    """결과 컬럼 이름이 붙은 식."""

    def __init__(self, expr, alias):
        self.expr = expr
        self.alias = alias

    def __repr__(self):
        return f"{self.expr!r} AS {self.alias}"
