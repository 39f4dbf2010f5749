"""
컬럼 연산과 타입 분석
======================

**타입 분석** (식 생성 시점, 증명 전):
  - 비교(=): 숫자끼리, 또는 같은 타입끼리
  - 순서 비교(<, >): 숫자끼리, 또는 같은 타임스탬프 타입끼리
  - 덧셈/뺄셈/곱셈: 숫자끼리만
  맞지 않으면 DataTypeMismatch, 결과 정밀도가 75자리를 넘으면 InvalidDataType.

**결과 타입 승격**:
  정수끼리 → 더 넓은 정수 타입
  십진수가 섞이면 (정수는 암묵적 정밀도, 스케일 0으로 본다)
      덧셈/뺄셈: scale = max(s₁, s₂)
                 precision = max(p₁ - s₁, p₂ - s₂) + scale + 1
      곱셈:      scale = s₁ + s₂, precision = p₁ + p₂ + 1

**평가** (Prover 평문 계산):
  정수/십진수 값은 파이썬 정수로 정확히 계산하고,
  결과가 타입 범위를 벗어나면 ColumnOperationError를 던진다.

**스케일 맞춤**:
  십진수 피연산자는 공통 스케일로 올린 뒤 비교/연산한다.
      lhs · 10^(s - s₁)  -  rhs · 10^(s - s₂)
  Verifier도 같은 계수를 MLE 평가값에 곱한다.
"""

from zksql.database.column_type import ColumnKind, ColumnType, MAX_DECIMAL_PRECISION
from zksql.errors import ColumnOperationError, DataTypeMismatch, InvalidDataType
from zksql.field import FR, to_scalar


_EQUALITY_KINDS = (
    ColumnKind.BOOLEAN,
    ColumnKind.SCALAR,
    ColumnKind.VARCHAR,
    ColumnKind.VARBINARY,
    ColumnKind.TIMESTAMPTZ,
)


# ─────────────────────────────────────────────────────────────────────
# 타입 분석
# ─────────────────────────────────────────────────────────────────────

def try_equals_types(lhs_type, rhs_type):
    if lhs_type.is_numeric() and rhs_type.is_numeric():
        return ColumnType.BOOLEAN
    if lhs_type == rhs_type and lhs_type.kind in _EQUALITY_KINDS:
        return ColumnType.BOOLEAN
    raise DataTypeMismatch(lhs_type, rhs_type, "=")


def try_inequality_types(lhs_type, rhs_type):
    if lhs_type.is_numeric() and rhs_type.is_numeric():
        return ColumnType.BOOLEAN
    if lhs_type == rhs_type and lhs_type.kind == ColumnKind.TIMESTAMPTZ:
        return ColumnType.BOOLEAN
    raise DataTypeMismatch(lhs_type, rhs_type, "<")


def _wider_integer(lhs_type, rhs_type):
    return lhs_type if lhs_type.bit_size() >= rhs_type.bit_size() else rhs_type


def _decimal_result(precision, scale, operation):
    if precision > MAX_DECIMAL_PRECISION:
        raise InvalidDataType(f"DECIMAL75({precision}, {scale})", operation)
    return ColumnType.decimal75(precision, scale)


def try_add_subtract_column_types(lhs_type, rhs_type, operation="+"):
    if not (lhs_type.is_numeric() and rhs_type.is_numeric()):
        raise DataTypeMismatch(lhs_type, rhs_type, operation)
    if lhs_type.is_integer() and rhs_type.is_integer():
        return _wider_integer(lhs_type, rhs_type)
    lp, ls = lhs_type.precision_value(), lhs_type.scale_value()
    rp, rs = rhs_type.precision_value(), rhs_type.scale_value()
    scale = max(ls, rs)
    precision = max(lp - ls, rp - rs) + scale + 1
    return _decimal_result(precision, scale, operation)


def try_multiply_column_types(lhs_type, rhs_type):
    if not (lhs_type.is_numeric() and rhs_type.is_numeric()):
        raise DataTypeMismatch(lhs_type, rhs_type, "*")
    if lhs_type.is_integer() and rhs_type.is_integer():
        return _wider_integer(lhs_type, rhs_type)
    precision = lhs_type.precision_value() + rhs_type.precision_value() + 1
    scale = lhs_type.scale_value() + rhs_type.scale_value()
    return _decimal_result(precision, scale, "*")


def common_scale(lhs_type, rhs_type):
    """두 타입의 공통 스케일. 숫자가 아니면 0."""
    return max(lhs_type.scale_value() or 0, rhs_type.scale_value() or 0)


def scale_factors(lhs_type, rhs_type):
    """공통 스케일로 올리기 위해 각 피연산자에 곱할 10의 거듭제곱."""
    scale = common_scale(lhs_type, rhs_type)
    return 10 ** (scale - (lhs_type.scale_value() or 0)), 10 ** (scale - (rhs_type.scale_value() or 0))


# ─────────────────────────────────────────────────────────────────────
# 범위 검사
# ─────────────────────────────────────────────────────────────────────

def check_range(values, result_type):
    """정수/십진수 결과가 타입 범위 안에 있는지 확인한다."""
    if result_type.is_integer():
        lo, hi = result_type.integer_bounds()
        for v in values:
            if not lo <= v <= hi:
                raise ColumnOperationError(f"정수 오버플로: {v}는 {result_type} 범위를 벗어납니다")
    elif result_type.kind == ColumnKind.DECIMAL75:
        bound = 10 ** result_type.precision
        for v in values:
            if abs(v) >= bound:
                raise ColumnOperationError(f"십진수 오버플로: {v}는 {result_type} 범위를 벗어납니다")
    return values


# ─────────────────────────────────────────────────────────────────────
# 평문 연산 (Prover)
# ─────────────────────────────────────────────────────────────────────

def add_subtract_values(lhs_values, rhs_values, lhs_type, rhs_type, result_type, is_subtract):
    lf, rf = scale_factors(lhs_type, rhs_type)
    sign = -1 if is_subtract else 1
    result = [l * lf + sign * r * rf for l, r in zip(lhs_values, rhs_values)]
    return check_range(result, result_type)


def multiply_values(lhs_values, rhs_values, result_type):
    result = [l * r for l, r in zip(lhs_values, rhs_values)]
    return check_range(result, result_type)


def scale_and_subtract_values(lhs_values, rhs_values, lhs_type, rhs_type):
    """공통 스케일에서의 차이 lhs - rhs (파이썬 정수, 정확)."""
    lf, rf = scale_factors(lhs_type, rhs_type)
    return [l * lf - r * rf for l, r in zip(lhs_values, rhs_values)]


def scale_and_subtract_scalars(lhs_values, rhs_values, lhs_type, rhs_type):
    """필드 위에서의 차이. 숫자가 아닌 타입(문자열 해시 등)에도 쓸 수 있다."""
    lf, rf = scale_factors(lhs_type, rhs_type)
    return [
        to_scalar(l) * lf - to_scalar(r) * rf for l, r in zip(lhs_values, rhs_values)
    ]


# ─────────────────────────────────────────────────────────────────────
# MLE 평가값 연산 (Verifier)
# ─────────────────────────────────────────────────────────────────────

def scale_and_add_subtract_eval(lhs_eval, rhs_eval, lhs_type, rhs_type, is_subtract):
    lf, rf = scale_factors(lhs_type, rhs_type)
    if is_subtract:
        return lhs_eval * FR(lf) - rhs_eval * FR(rf)
    return lhs_eval * FR(lf) + rhs_eval * FR(rf)
