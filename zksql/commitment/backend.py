"""
커밋먼트 백엔드 (CommitmentBackend)
====================================

같은 KZG 스킴의 두 가지 구현을 같은 계약 뒤에 둔다.

  compute_commitments(columns, offset, setup) -> [Commitment]
      컬럼마다 커밋먼트 하나. 생성원 offset .. offset+len을 사용한다.
      오프셋은 이미 커밋된 테이블에 행을 덧붙일 때 쓰인다.
  to_transcript_bytes(commitment) -> bytes
      Fiat-Shamir 해시에 넣을 정규 인코딩.

**ReferenceBackend** ("reference"):
  py_ecc.bn128 아핀 좌표로 컬럼을 하나씩 계산한다.

**ParallelBackend** ("parallel"):
  py_ecc.optimized_bn128 야코비안 좌표와 스레드 풀로 컬럼별로 나누어 계산한다.
  결과는 입력 순서를 유지하며, 아핀으로 정규화하여 참조 구현과 비트 단위로 같다.
"""

import logging
from concurrent.futures import ThreadPoolExecutor

from py_ecc import optimized_bn128

from zksql.commitment.commitment import Commitment
from zksql.field import CURVE_ORDER, ec_msm, from_optimized_g1

logger = logging.getLogger(__name__)


def _check_capacity(columns, offset, setup):
    for col in columns:
        if offset + len(col) > setup.max_len:
            raise ValueError(
                f"커밋 길이 {offset + len(col)}가 setup 최대 길이 {setup.max_len}를 초과합니다"
            )


class CommitmentBackend:
    name = None

    def compute_commitments(self, columns, offset, setup):
        raise NotImplementedError

    def to_transcript_bytes(self, commitment):
        return commitment.to_bytes()


class ReferenceBackend(CommitmentBackend):
    name = "reference"

    def compute_commitments(self, columns, offset, setup):
        _check_capacity(columns, offset, setup)
        return [
            Commitment(ec_msm(setup.g1_powers[offset:offset + len(col)], col.scalars))
            for col in columns
        ]


class ParallelBackend(CommitmentBackend):
    name = "parallel"

    def __init__(self, max_workers=None):
        self.max_workers = max_workers

    @staticmethod
    def _commit_one(points, scalars):
        acc = optimized_bn128.Z1
        for point, scalar in zip(points, scalars):
            value = int(scalar) % CURVE_ORDER
            if value == 0:
                continue
            acc = optimized_bn128.add(acc, optimized_bn128.multiply(point, value))
        return Commitment(from_optimized_g1(acc))

    def compute_commitments(self, columns, offset, setup):
        _check_capacity(columns, offset, setup)
        powers = setup.optimized_g1_powers
        logger.debug("parallel commit: %d columns, offset %d", len(columns), offset)
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            return list(pool.map(
                lambda col: self._commit_one(powers[offset:offset + len(col)], col.scalars),
                columns,
            ))


def get_backend(name="reference", **options):
    """이름으로 백엔드를 고른다.

    Raises:
        ValueError: 알 수 없는 백엔드 이름
    """
    if name == ReferenceBackend.name:
        return ReferenceBackend()
    if name == ParallelBackend.name:
        return ParallelBackend(max_workers=options.get("max_workers"))
    raise ValueError(f"알 수 없는 커밋먼트 백엔드: {name}")
