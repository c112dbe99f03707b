"""
VOPRF 증명: 일괄(batched) 이산로그 동등성 NIZK
================================================

서버가 공개키에 커밋된 바로 그 개인키 k로 평가했음을 증명한다.

  pk = k · G,   D_i = k · C_i  (모든 i)

**복합 원소 (Composite)**:
  배치 전체를 하나의 관계로 압축하기 위해 원소마다 의사난수 가중치 d_i를
  유도한다.

    seed = Hash(lp(Ser(pk)) || lp("Seed-" || contextString))
    d_i  = HashToScalar(lp(seed) || I2OSP(i, 2) || lp(Ser(C_i)) || lp(Ser(D_i))
                        || "Composite")
    M    = Σ d_i · C_i          (블라인드된 원소들의 복합 원소, a0)
    Z    = Σ d_i · D_i = k · M  (평가된 원소들의 복합 원소, a1)

  서버는 k를 알기 때문에 Z = k·M 한 번의 곱셈으로 계산한다 (fast path).

**Chaum-Pedersen 증명 (Fiat-Shamir)**:
  1. r ← 난수 스칼라 (증명마다 새로)
  2. a2 = r · G,  a3 = r · M
  3. c = HashToScalar(lp(pk) || lp(M) || lp(Z) || lp(a2) || lp(a3) || "Challenge")
  4. s = r - c · k

  검증자는 a2' = s·G + c·pk, a3' = s·M + c·Z 를 다시 계산한다.
  정직한 증명이면 a2' = (r - ck)·G + ck·G = r·G 이고 a3' = r·M 이므로
  같은 챌린지 c가 재현된다.

**보안 주의**:
  같은 r을 두 증명에 쓰면 s₁ - s₂ = (c₂ - c₁)·k 로부터 k가 드러난다.
"""

from py_ecc.bls.hash import i2osp

from voprf.errors import InputLengthError
from voprf.group import (
    GENERATOR, IDENTITY, SCALAR_LENGTH, Scalar,
    ec_add, ec_mul, is_identity, random_scalar,
    serialize_scalar, deserialize_scalar,
)
from voprf.transcript import MAX_LENGTH


class Proof:
    """DLEQ 증명 (c, s).

    속성:
        c: 챌린지 스칼라
        s: 응답 스칼라
    """

    __slots__ = ("c", "s")

    def __init__(self, c, s):
        self.c = Scalar(c)
        self.s = Scalar(s)

    def __eq__(self, other):
        if not isinstance(other, Proof):
            return NotImplemented
        return self.c == other.c and self.s == other.s

    def __repr__(self):
        return f"Proof(c={int(self.c):#x}, s={int(self.s):#x})"

    def to_bytes(self):
        """c || s (64바이트)."""
        return serialize_scalar(self.c) + serialize_scalar(self.s)

    @classmethod
    def from_bytes(cls, data):
        """64바이트 → Proof.

        Raises:
            DecodeError: 길이가 다르거나 스칼라가 범위를 벗어날 때
        """
        c = deserialize_scalar(data[:SCALAR_LENGTH])
        s = deserialize_scalar(data[SCALAR_LENGTH:])
        return cls(c, s)


def _check_batch(blinded, evaluated):
    if len(blinded) != len(evaluated):
        raise ValueError("블라인드 원소와 평가 원소의 개수가 다릅니다")
    if not 0 < len(blinded) <= MAX_LENGTH:
        raise InputLengthError(
            f"배치 크기는 1 이상 {MAX_LENGTH} 이하여야 합니다: {len(blinded)}"
        )


def _composite_weights(suite, public_key, blinded, evaluated):
    """원소별 가중치 d_i 를 순서대로 생성한다."""
    seed_transcript = suite.transcript()
    seed_transcript.append_element(public_key)
    seed_transcript.append(suite.dst(b"Seed-"))
    seed = seed_transcript.digest()

    for i, (c_i, d_i) in enumerate(zip(blinded, evaluated)):
        t = suite.transcript()
        t.append(seed)
        t.append_index(i)
        t.append_element(c_i)
        t.append_element(d_i)
        t.append_label(b"Composite")
        yield suite.hash_to_scalar(t)


def compute_composites_fast(suite, private_key, public_key, blinded, evaluated):
    """서버용 복합 원소: M = Σ d_i·C_i, Z = k·M."""
    _check_batch(blinded, evaluated)
    m = IDENTITY
    weights = _composite_weights(suite, public_key, blinded, evaluated)
    for d_i, c_i in zip(weights, blinded):
        m = ec_add(ec_mul(c_i, d_i), m)
    return m, ec_mul(m, private_key)


def compute_composites(suite, public_key, blinded, evaluated):
    """검증자용 복합 원소: M = Σ d_i·C_i, Z = Σ d_i·D_i."""
    _check_batch(blinded, evaluated)
    m = IDENTITY
    z = IDENTITY
    weights = _composite_weights(suite, public_key, blinded, evaluated)
    for d_i, c_i, e_i in zip(weights, blinded, evaluated):
        m = ec_add(ec_mul(c_i, d_i), m)
        z = ec_add(ec_mul(e_i, d_i), z)
    return m, z


def _challenge(suite, public_key, a0, a1, a2, a3):
    t = suite.transcript()
    for point in (public_key, a0, a1, a2, a3):
        t.append_element(point)
    t.append_label(b"Challenge")
    return suite.hash_to_scalar(t)


def generate_proof(suite, private_key, public_key, blinded, evaluated):
    """배치 전체에 대한 증명 (c, s)를 생성한다.

    Args:
        suite: Ciphersuite
        private_key: 서버 개인키 k (Scalar)
        public_key: k·G
        blinded: 디코딩된 블라인드 원소 C_i 리스트
        evaluated: 평가된 원소 D_i = k·C_i 리스트 (C와 같은 순서)

    Returns:
        Proof
    """
    a0, a1 = compute_composites_fast(suite, private_key, public_key, blinded, evaluated)

    r = random_scalar()
    a2 = ec_mul(GENERATOR, r)
    a3 = ec_mul(a0, r)

    c = _challenge(suite, public_key, a0, a1, a2, a3)
    s = r - c * private_key
    return Proof(c, s)


def verify_proof(suite, public_key, blinded, evaluated, proof):
    """증명을 검증한다 (클라이언트 측 검증 로직).

    Returns:
        bool: 재계산한 챌린지가 proof.c와 같으면 True
    """
    a0, a1 = compute_composites(suite, public_key, blinded, evaluated)

    a2 = ec_add(ec_mul(GENERATOR, proof.s), ec_mul(public_key, proof.c))
    a3 = ec_add(ec_mul(a0, proof.s), ec_mul(a1, proof.c))
    if is_identity(a2) or is_identity(a3):
        return False

    expected = _challenge(suite, public_key, a0, a1, a2, a3)
    return serialize_scalar(expected) == serialize_scalar(proof.c)
