"""
zksql 데이터 직렬화/역직렬화 헬퍼
==================================

JSON으로 옮길 수 있는 형태(dict, list, str, int)로 객체를 변환한다.
FR, G1, G2, Commitment, ColumnType, ColumnCommitments, TableCommitment,
BitDistribution, SumcheckProof, EvaluationProof, QueryProof,
ProvableQueryResult, VerifiableQueryResult 등.

커밋먼트는 정규 64바이트 인코딩의 hex 문자열로 옮기며,
역직렬화 시 곡선 위의 점인지 검사한다.
"""

from py_ecc import bn128
from py_ecc.fields import bn128_FQ as FQ

from zksql.commitment.column_bounds import BoundsKind, ColumnBounds
from zksql.commitment.column_commitments import ColumnCommitments
from zksql.commitment.commitment import Commitment
from zksql.commitment.metadata import ColumnCommitmentMetadata
from zksql.commitment.table_commitment import TableCommitment
from zksql.database.column_type import ColumnKind, ColumnType, TimeUnit
from zksql.exprs.sign_expr import BitDistribution
from zksql.field import FR
from zksql.hyperkzg import EvaluationProof
from zksql.proof.prover import QueryProof
from zksql.proof.provable_result import ProvableQueryResult
from zksql.proof.sumcheck import SumcheckProof
from zksql.proof.verifiable_query_result import VerifiableQueryResult
from zksql.srs import VerifierSetup


# ─── FR ───

def serialize_fr(val):
    """FR → str(int)"""
    return str(int(val))


def deserialize_fr(s):
    """str(int) → FR"""
    return FR(int(s))


def serialize_fr_list(lst):
    """list[FR] → list[str]"""
    return [str(int(v)) for v in lst]


def deserialize_fr_list(data):
    """list[str] → list[FR]"""
    return [FR(int(s)) for s in data]


# ─── G1 point ───

def serialize_g1(point):
    """G1 point → [str, str] or None"""
    if point is None:
        return None
    return [str(int(point[0])), str(int(point[1]))]


def deserialize_g1(data):
    """[str, str] or None → G1 point"""
    if data is None:
        return None
    return (FQ(int(data[0])), FQ(int(data[1])))


# ─── G2 point ───

def serialize_g2(point):
    """G2 point → [[str,str],[str,str]] or None"""
    if point is None:
        return None
    return [
        [str(int(point[0].coeffs[0])), str(int(point[0].coeffs[1]))],
        [str(int(point[1].coeffs[0])), str(int(point[1].coeffs[1]))]
    ]


def deserialize_g2(data):
    """[[str,str],[str,str]] or None → G2 point"""
    if data is None:
        return None
    return (
        bn128.FQ2([int(data[0][0]), int(data[0][1])]),
        bn128.FQ2([int(data[1][0]), int(data[1][1])])
    )


# ─── VerifierSetup ───

def serialize_verifier_setup(vs):
    return {
        "g1": serialize_g1(vs.g1),
        "g2_powers": [serialize_g2(p) for p in vs.g2_powers],
    }


def deserialize_verifier_setup(data):
    return VerifierSetup(
        deserialize_g1(data["g1"]),
        [deserialize_g2(p) for p in data["g2_powers"]],
    )


# ─── Commitment ───

def serialize_commitment(commitment):
    """Commitment → 128자리 hex (항등원은 0으로 채운 문자열)"""
    return commitment.to_hex()


def deserialize_commitment(text):
    """hex → Commitment. 잘못된 점이면 ValueError."""
    return Commitment.from_hex(text)


# ─── ColumnType ───

def serialize_column_type(column_type):
    data = {"kind": column_type.kind.value}
    if column_type.kind == ColumnKind.DECIMAL75:
        data["precision"] = column_type.precision
        data["scale"] = column_type.scale
    elif column_type.kind == ColumnKind.TIMESTAMPTZ:
        data["time_unit"] = column_type.time_unit.value
        data["timezone"] = column_type.timezone
    return data


def deserialize_column_type(data):
    kind = ColumnKind(data["kind"])
    if kind == ColumnKind.DECIMAL75:
        return ColumnType.decimal75(data["precision"], data["scale"])
    if kind == ColumnKind.TIMESTAMPTZ:
        return ColumnType.timestamptz(TimeUnit(data["time_unit"]), data["timezone"])
    return ColumnType(kind)


# ─── 메타데이터와 커밋먼트 묶음 ───

def serialize_bounds(bounds):
    return {"kind": bounds.kind.value, "min": bounds.min, "max": bounds.max}


def deserialize_bounds(data):
    return ColumnBounds(BoundsKind(data["kind"]), data.get("min"), data.get("max"))


def serialize_column_commitments(cc):
    """ColumnCommitments → list of dict (순서 유지)"""
    return [
        {
            "identifier": ident,
            "column_type": serialize_column_type(md.column_type),
            "bounds": serialize_bounds(md.bounds),
            "commitment": serialize_commitment(c),
        }
        for ident, md, c in cc.items()
    ]


def deserialize_column_commitments(data):
    return ColumnCommitments(
        (
            entry["identifier"],
            ColumnCommitmentMetadata.try_new(
                deserialize_column_type(entry["column_type"]),
                deserialize_bounds(entry["bounds"]),
            ),
            deserialize_commitment(entry["commitment"]),
        )
        for entry in data
    )


def serialize_table_commitment(tc):
    return {
        "column_commitments": serialize_column_commitments(tc.column_commitments),
        "start": tc.start,
        "end": tc.end,
    }


def deserialize_table_commitment(data):
    return TableCommitment(
        deserialize_column_commitments(data["column_commitments"]), data["start"], data["end"]
    )


# ─── BitDistribution ───

def serialize_bit_distribution(dist):
    """BitDistribution → 128자리 hex (vary_mask || constant_mask)"""
    return dist.to_bytes().hex()


def deserialize_bit_distribution(text):
    raw = bytes.fromhex(text)
    if len(raw) != 64:
        raise ValueError(f"비트 분포 인코딩은 64바이트여야 합니다: {len(raw)}")
    return BitDistribution(int.from_bytes(raw[:32], "big"), int.from_bytes(raw[32:], "big"))


# ─── 섬체크 / HyperKZG ───

def serialize_sumcheck_proof(proof):
    return [serialize_fr_list(evals) for evals in proof.round_evaluations]


def deserialize_sumcheck_proof(data):
    return SumcheckProof([deserialize_fr_list(evals) for evals in data])


def serialize_evaluation_proof(proof):
    return {
        "fold_commitments": [serialize_g1(c) for c in proof.fold_commitments],
        "evaluations": [serialize_fr_list(row) for row in proof.evaluations],
        "witnesses": [serialize_g1(w) for w in proof.witnesses],
    }


def deserialize_evaluation_proof(data):
    return EvaluationProof(
        [deserialize_g1(c) for c in data["fold_commitments"]],
        [deserialize_fr_list(row) for row in data["evaluations"]],
        [deserialize_g1(w) for w in data["witnesses"]],
    )


# ─── QueryProof ───

def serialize_query_proof(proof):
    """QueryProof → dict"""
    return {
        # First Round
        "range_length": proof.range_length,
        "chi_evaluation_lengths": list(proof.chi_evaluation_lengths),
        "num_post_result_challenges": proof.num_post_result_challenges,
        # Final Round
        "final_round_commitments": [serialize_commitment(c) for c in proof.final_round_commitments],
        "bit_distributions": [serialize_bit_distribution(d) for d in proof.bit_distributions],
        "num_sumcheck_subpolynomials": proof.num_sumcheck_subpolynomials,
        # Sumcheck Round
        "sumcheck_proof": serialize_sumcheck_proof(proof.sumcheck_proof),
        # Evaluation Round
        "base_evaluations": serialize_fr_list(proof.base_evaluations),
        "final_round_mle_evaluations": serialize_fr_list(proof.final_round_mle_evaluations),
        "evaluation_proof": serialize_evaluation_proof(proof.evaluation_proof),
    }


def deserialize_query_proof(data):
    """dict → QueryProof"""
    proof = QueryProof()
    # First Round
    proof.range_length = data["range_length"]
    proof.chi_evaluation_lengths = list(data["chi_evaluation_lengths"])
    proof.num_post_result_challenges = data["num_post_result_challenges"]
    # Final Round
    proof.final_round_commitments = [
        deserialize_commitment(c) for c in data["final_round_commitments"]
    ]
    proof.bit_distributions = [deserialize_bit_distribution(d) for d in data["bit_distributions"]]
    proof.num_sumcheck_subpolynomials = data["num_sumcheck_subpolynomials"]
    # Sumcheck Round
    proof.sumcheck_proof = deserialize_sumcheck_proof(data["sumcheck_proof"])
    # Evaluation Round
    proof.base_evaluations = deserialize_fr_list(data["base_evaluations"])
    proof.final_round_mle_evaluations = deserialize_fr_list(data["final_round_mle_evaluations"])
    proof.evaluation_proof = deserialize_evaluation_proof(data["evaluation_proof"])
    return proof


# ─── 결과 ───

def serialize_provable_result(result):
    return {
        "num_columns": result.num_columns,
        "table_length": result.table_length,
        "data": result.data.hex(),
    }


def deserialize_provable_result(data):
    return ProvableQueryResult(
        data["num_columns"], data["table_length"], bytes.fromhex(data["data"])
    )


def serialize_verifiable_query_result(vqr):
    return {
        "result": serialize_provable_result(vqr.result),
        "proof": serialize_query_proof(vqr.proof),
    }


def deserialize_verifiable_query_result(data):
    return VerifiableQueryResult(
        deserialize_provable_result(data["result"]),
        deserialize_query_proof(data["proof"]),
    )

