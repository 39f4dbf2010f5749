"""
플랜 구성 헬퍼
===============

SQL 파서 없이 플랜 트리를 직접 만들기 위한 짧은 함수들.
식 생성자는 try_new를 거치므로 타입 오류는 여기서 AnalyzeError로 드러난다.

    >>> t = tab("sxt.t")
    >>> plan = filter_exec(
    ...     [aliased(column(t, "b", accessor), "b")],
    ...     t,
    ...     gt(column(t, "a", accessor), const_bigint(1)),
    ... )
"""

from zksql.database.literal import LiteralValue
from zksql.database.table import ColumnField, TableRef
from zksql.exprs.arithmetic_expr import AddSubtractExpr, MultiplyExpr
from zksql.exprs.column_expr import ColumnExpr
from zksql.exprs.equals_expr import EqualsExpr
from zksql.exprs.inequality_expr import InequalityExpr
from zksql.exprs.literal_expr import LiteralExpr, PlaceholderExpr
from zksql.exprs.logical_expr import AndExpr, NotExpr, OrExpr
from zksql.exprs.proof_expr import AliasedProofExpr
from zksql.plans.filter_exec import FilterExec
from zksql.plans.projection_exec import ProjectionExec
from zksql.plans.table_exec import TableExec


def tab(name):
    return TableRef.parse(name)


# ─── 식 ───

def column(table_ref, ident, accessor):
    """accessor의 스키마에서 타입을 찾아 컬럼 참조 식을 만든다."""
    return ColumnExpr(accessor.column_ref(table_ref, ident))


def const(value):
    """LiteralValue로 리터럴 식을 만든다."""
    return LiteralExpr(value)


def const_bool(value):
    return LiteralExpr(LiteralValue.boolean(value))


def const_bigint(value):
    return LiteralExpr(LiteralValue.bigint(value))


def const_int128(value):
    return LiteralExpr(LiteralValue.int128(value))


def const_decimal75(precision, scale, value):
    return LiteralExpr(LiteralValue.decimal75(precision, scale, value))


def const_varchar(value):
    return LiteralExpr(LiteralValue.varchar(value))


def placeholder(placeholder_id, column_type):
    return PlaceholderExpr.try_new(placeholder_id, column_type)


def equal(lhs, rhs):
    return EqualsExpr.try_new(lhs, rhs)


def lt(lhs, rhs):
    return InequalityExpr.try_new(lhs, rhs, True)


def gt(lhs, rhs):
    return InequalityExpr.try_new(lhs, rhs, False)


def le(lhs, rhs):
    """lhs <= rhs  ⟺  NOT (lhs > rhs)"""
    return NotExpr.try_new(gt(lhs, rhs))


def ge(lhs, rhs):
    """lhs >= rhs  ⟺  NOT (lhs < rhs)"""
    return NotExpr.try_new(lt(lhs, rhs))


def add(lhs, rhs):
    return AddSubtractExpr.try_new(lhs, rhs, False)


def subtract(lhs, rhs):
    return AddSubtractExpr.try_new(lhs, rhs, True)


def multiply(lhs, rhs):
    return MultiplyExpr.try_new(lhs, rhs)


def and_(lhs, rhs):
    return AndExpr.try_new(lhs, rhs)


def or_(lhs, rhs):
    return OrExpr.try_new(lhs, rhs)


def not_(expr):
    return NotExpr.try_new(expr)


def aliased(expr, alias):
    return AliasedProofExpr(expr, alias)


def col_expr_plan(table_ref, ident, accessor):
    """컬럼을 같은 이름으로 내보내는 결과 식."""
    return aliased(column(table_ref, ident, accessor), ident)


# ─── 플랜 ───

def table_exec(table_ref, accessor):
    """accessor의 스키마 전체를 스캔하는 플랜."""
    schema = [ColumnField(ident, column_type) for ident, column_type in accessor.lookup_schema(table_ref)]
    return TableExec(table_ref, schema)


def projection(results, input_plan):
    return ProjectionExec(results, input_plan)


def filter_exec(results, table_ref, where_clause):
    return FilterExec(results, table_ref, where_clause)
