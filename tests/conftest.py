import sys
import os
import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from zksql.database.accessor import OwnedTableAccessor
from zksql.database.owned_table_utility import bigint, boolean, owned_table, varchar
from zksql.database.table import TableRef
from zksql.srs import ProverSetup


# ── 테스트 상수 ──
SRS_SEED = 42
SRS_MAX_LEN = 32

TABLE_NAME = "sxt.t"


@pytest.fixture(scope="session")
def setup():
    """공용 ProverSetup (max_len=32, 결정론적 시드)."""
    return ProverSetup.generate(SRS_MAX_LEN, seed=SRS_SEED)


@pytest.fixture(scope="session")
def verifier_setup(setup):
    return setup.verifier_setup()


@pytest.fixture(scope="session")
def table_ref():
    return TableRef.parse(TABLE_NAME)


@pytest.fixture(scope="session")
def small_table():
    """a: [1, 2, 3], b: ["a", "b", "c"]"""
    return owned_table([
        bigint("a", [1, 2, 3]),
        varchar("b", ["a", "b", "c"]),
    ])


@pytest.fixture(scope="session")
def accessor(table_ref, small_table, setup):
    """small_table이 오프셋 0에서 커밋된 Prover 측 accessor."""
    return OwnedTableAccessor.new_from_table(table_ref, small_table, setup)


@pytest.fixture(scope="session")
def mixed_table():
    """정수, 불리언, 문자열이 섞인 5행 테이블."""
    return owned_table([
        bigint("x", [5, -3, 0, 7, -3]),
        bigint("y", [2, -3, 4, 7, 1]),
        boolean("flag", [True, False, True, True, False]),
        varchar("name", ["ann", "bob", "cy", "dee", "eve"]),
    ])


@pytest.fixture(scope="session")
def mixed_accessor(table_ref, mixed_table, setup):
    return OwnedTableAccessor.new_from_table(table_ref, mixed_table, setup)
