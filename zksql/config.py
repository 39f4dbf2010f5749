"""
증명 설정 (ProofConfig)
"""

from dataclasses import dataclass
from typing import Optional

from zksql.commitment.backend import get_backend


@dataclass
class ProofConfig:
    """증명 세션 설정.

    속성:
        backend: 커밋먼트 백엔드 이름 ("reference" 또는 "parallel")
        max_workers: parallel 백엔드의 스레드 수 (None이면 기본값)
        check_constraints: 섬체크 전에 모든 서브다항식을 행 단위로 점검
        transcript_label: 트랜스크립트 도메인 분리 레이블
    """

    backend: str = "reference"
    max_workers: Optional[int] = None
    check_constraints: bool = False
    transcript_label: bytes = b"zksql"

    def make_backend(self):
        return get_backend(self.backend, max_workers=self.max_workers)
