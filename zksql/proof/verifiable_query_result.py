"""
검증 가능한 질의 결과 (VerifiableQueryResult)
===============================================

Prover가 Verifier에게 보내는 단위: 인코딩된 결과와 증명.

    >>> vqr = VerifiableQueryResult.new(plan, owned_accessor, prover_setup)
    >>> data = vqr.verify(plan, commitment_accessor, verifier_setup)
    >>> data.table, data.verification_hash
"""

from zksql.config import ProofConfig
from zksql.proof.prover import prove
from zksql.proof.verifier import verify_query


class VerifiableQueryResult:
    def __init__(self, result, proof):
        self.result = result
        self.proof = proof

    @classmethod
    def new(cls, plan, accessor, setup, params=(), config=None):
        """질의를 실행하고 증명을 만든다.

        Args:
            plan: ProofPlan
            accessor: OwnedTableAccessor
            setup: ProverSetup
            params: 질의 파라미터
            config: ProofConfig
        """
        result, proof = prove(plan, accessor, setup, params, config)
        return cls(result, proof)

    def verify(self, plan, accessor, verifier_setup, params=(), config=None):
        """증명을 검증하고 QueryData를 돌려준다.

        accessor는 커밋먼트만 있으면 된다 (CommitmentAccessor).
        """
        config = config or ProofConfig()
        return verify_query(
            plan,
            accessor,
            self.result,
            self.proof,
            verifier_setup,
            params,
            transcript_label=config.transcript_label,
        )
