"""
VOPRF 데이터 직렬화/역직렬화 헬퍼
==================================

HTTP(JSON)로 주고받을 수 있는 형태로 VOPRF 객체를 변환한다.
바이트열은 모두 hex 문자열로 표현한다.

Evaluation 형식:
    {"elements": ["02ab...", ...]}                              # Base
    {"elements": [...], "proof": {"c": "...", "s": "..."}}      # Verifiable

proof 키가 있으면 c와 s가 반드시 모두 있어야 한다.
"""

from voprf.errors import DecodeError
from voprf.evaluation import Evaluation
from voprf.group import deserialize_scalar
from voprf.proof import Proof


# ─── bytes ───

def serialize_bytes(data):
    """bytes → hex str"""
    return bytes(data).hex()


def deserialize_bytes(s):
    """hex str → bytes

    Raises:
        DecodeError: 문자열이 아니거나 hex가 아닐 때
    """
    if not isinstance(s, str):
        raise DecodeError("hex 문자열이 필요합니다")
    try:
        return bytes.fromhex(s)
    except ValueError as e:
        raise DecodeError(f"잘못된 hex 문자열: {e}") from e


def deserialize_bytes_list(data):
    """list[hex str] → list[bytes]"""
    if not isinstance(data, list):
        raise DecodeError("hex 문자열의 리스트가 필요합니다")
    return [deserialize_bytes(s) for s in data]


# ─── Proof ───

def serialize_proof(proof):
    """Proof → {"c": hex, "s": hex} or None"""
    if proof is None:
        return None
    data = proof.to_bytes()
    return {"c": serialize_bytes(data[:32]), "s": serialize_bytes(data[32:])}


def deserialize_proof(data):
    """{"c": hex, "s": hex} or None → Proof or None"""
    if data is None:
        return None
    if not isinstance(data, dict) or "c" not in data or "s" not in data:
        raise DecodeError("증명에는 c와 s가 모두 있어야 합니다")
    c = deserialize_scalar(deserialize_bytes(data["c"]))
    s = deserialize_scalar(deserialize_bytes(data["s"]))
    return Proof(c, s)


# ─── Evaluation ───

def serialize_evaluation(evaluation):
    """Evaluation → dict"""
    data = {"elements": [serialize_bytes(e) for e in evaluation.elements]}
    if evaluation.proof is not None:
        data["proof"] = serialize_proof(evaluation.proof)
    return data


def deserialize_evaluation(data):
    """dict → Evaluation"""
    if not isinstance(data, dict) or "elements" not in data:
        raise DecodeError("평가 결과에는 elements가 필요합니다")
    elements = deserialize_bytes_list(data["elements"])
    proof = deserialize_proof(data.get("proof"))
    return Evaluation(elements, proof)
