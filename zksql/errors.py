"""
zksql 오류 분류
================

**구조/분석 오류** (AnalyzeError, PlaceholderError):
  피연산자 타입 불일치, 존재하지 않는 컬럼/테이블 참조 등.
  증명 작업을 시작하기 전에 식/플랜 생성 시점에 발생한다.

**평가 오류** (ColumnOperationError):
  정수/십진수 오버플로, 부호 가젯의 표현 범위 초과.

**증명 오류** (ProofError):
  - ProtocolError: 빌더 소비 순서/개수 위반, 형식이 잘못된 증명
  - VerificationError: 섬체크, 평가 증명, 결과 불일치 등 암호학적 거부.
    호출자는 결과 전체를 폐기해야 한다.

**디코딩 오류** (QueryError):
  결과 값이 선언된 타입 범위를 벗어나거나 문자열 인코딩이 잘못된 경우.
  증명 자체가 무효라는 뜻은 아니다. 증명은 건전해도 디코딩된 결과를
  표현할 수 없을 수 있다.

**커밋먼트/테이블 오류**:
  ColumnCommitmentsMismatch, DuplicateIdentifiers,
  InvalidColumnCommitmentMetadata, TableCommitmentError, OwnedTableError.

어떤 오류도 내부에서 조용히 복구하지 않으며, 검증은 재시도하지 않는다.
"""

from enum import Enum


class ZkSqlError(Exception):
    """zksql의 모든 오류의 공통 상위 클래스."""


# ─── 구조/분석 ───

class AnalyzeError(ZkSqlError):
    pass


class DataTypeMismatch(AnalyzeError):
    def __init__(self, left_type, right_type, operation=""):
        self.left_type = left_type
        self.right_type = right_type
        super().__init__(
            f"{operation} 연산에서 타입이 맞지 않습니다: {left_type} vs {right_type}"
        )


class InvalidDataType(AnalyzeError):
    def __init__(self, expr_type, operation=""):
        self.expr_type = expr_type
        super().__init__(f"{operation} 연산에 사용할 수 없는 타입입니다: {expr_type}")


class ColumnNotFound(AnalyzeError):
    pass


class TableNotFound(AnalyzeError):
    pass


class PlaceholderError(ZkSqlError):
    pass


# ─── 평가 ───

class ColumnOperationError(ZkSqlError):
    pass


# ─── 증명 ───

class ProofError(ZkSqlError):
    pass


class ProtocolError(ProofError):
    pass


class VerificationError(ProofError):
    pass


class UnsatisfiedConstraint(ProofError):
    """Prover 측 자체 점검에서 서브다항식이 만족되지 않을 때."""


# ─── 디코딩 ───

class QueryErrorKind(Enum):
    OVERFLOW = "overflow"
    INVALID_STRING = "invalid_string"
    MISCELLANEOUS_DECODING = "miscellaneous_decoding"
    MISCELLANEOUS_EVALUATION = "miscellaneous_evaluation"
    INVALID_COLUMN_COUNT = "invalid_column_count"


class QueryError(ZkSqlError):
    def __init__(self, kind, message=""):
        self.kind = kind
        super().__init__(f"{kind.value}: {message}" if message else kind.value)


# ─── 커밋먼트/테이블 ───

class ColumnCommitmentsMismatch(ZkSqlError):
    pass


class DuplicateIdentifiers(ZkSqlError):
    def __init__(self, identifier):
        self.identifier = identifier
        super().__init__(f"중복된 컬럼 식별자: {identifier}")


class InvalidColumnCommitmentMetadata(ZkSqlError):
    pass


class TableCommitmentError(ZkSqlError):
    pass


class OwnedTableError(ZkSqlError):
    pass
