"""
VOPRF 기반 모듈: 소수 위수 그룹 (BLS12-381 G1)
================================================

이 모듈은 (V)OPRF 프로토콜 전체에서 사용되는 그룹 추상화를 정의한다.
곡선 연산, 점 압축, 해시-투-커브는 모두 py_ecc가 제공하는 것을 그대로 쓴다.

**스칼라 Scalar**:
  BLS12-381의 스칼라 필드. 서버 개인키, 블라인딩 인자, 증명의 (c, s)가
  모두 이 필드의 원소이다.
  - 위수(order) r ≈ 2^255, 소수
  - 직렬화: 32바이트 빅엔디안

**그룹 원소 Element**:
  BLS12-381 G1 위의 점 (py_ecc.optimized_bls12_381의 사영 좌표 3-튜플).
  보조인자(cofactor)가 1이 아니므로 디코딩 시 곡선 방정식뿐 아니라
  위수 r 부분군에 속하는지도 확인한다.
  - 연산 결과는 항상 z = 1 로 정규화하므로 == 로 비교할 수 있다
  - 항등원(무한원점)은 Z1이며 인코딩이 없다
  - 직렬화: ZCash 압축 형식 48바이트 (compress_G1 / decompress_G1)

**해싱**:
  - hash_to_group: RFC 9380 BLS12381G1_XMD:SHA-256_SSWU_RO_ (hash_to_G1)
  - hash_to_scalar: expand_message_xmd 출력 48바이트를 r로 축소한다

사용 예시:
    >>> from voprf.group import Scalar, GENERATOR, ec_mul, serialize_element
    >>> k = random_scalar()
    >>> pk = ec_mul(GENERATOR, k)
    >>> len(serialize_element(pk))  # 48
"""

import hashlib
import secrets

from py_ecc.fields import bls12_381_FQ as FQ
from py_ecc import optimized_bls12_381 as bls12_381
from py_ecc.bls.g2_primitives import subgroup_check
from py_ecc.bls.hash import expand_message_xmd, i2osp, os2ip
from py_ecc.bls.hash_to_curve import hash_to_G1
from py_ecc.bls.point_compression import compress_G1, decompress_G1

from voprf.errors import DecodeError, InvalidInputError


# ─────────────────────────────────────────────────────────────────────
# 스칼라 필드
# ─────────────────────────────────────────────────────────────────────

class Scalar(FQ):
    """BLS12-381 스칼라 필드 위의 원소.

    py_ecc의 FQ를 상속하므로 +, -, *, / 등 모듈러 연산을 그대로 쓴다.

    예시:
        >>> k = Scalar(5)
        >>> k * Scalar(3)   # Scalar(15)
        >>> Scalar(1) / k   # 5의 모듈러 역원
    """
    field_modulus = bls12_381.curve_order


# 그룹 위수 (스칼라 필드 크기)
ORDER = bls12_381.curve_order

# 좌표 필드 크기 q
FIELD_MODULUS = bls12_381.field_modulus

SCALAR_LENGTH = 32
ELEMENT_LENGTH = 48

# expand_message_xmd 출력 길이: ceil((ceil(log2(r)) + 128) / 8)
HASH_TO_FIELD_LENGTH = 48


# ─────────────────────────────────────────────────────────────────────
# 그룹 상수 및 연산
# ─────────────────────────────────────────────────────────────────────

# 항등원 (무한원점)
IDENTITY = bls12_381.Z1


def _canonical(point):
    """사영 좌표를 z = 1 (또는 Z1)로 정규화한다."""
    if bls12_381.is_inf(point):
        return IDENTITY
    x, y = bls12_381.normalize(point)
    return (x, y, x.one())


# G1 생성자 (base)
GENERATOR = _canonical(bls12_381.G1)


def is_identity(point):
    return bls12_381.is_inf(point)


def ec_mul(point, scalar):
    """스칼라 곱셈: scalar · point.

    Args:
        point: G1 위의 점
        scalar: 정수 또는 Scalar 원소

    Returns:
        scalar · point. scalar가 0이면 항등원.
    """
    if isinstance(scalar, Scalar):
        scalar = int(scalar)
    scalar = scalar % ORDER
    if scalar == 0 or is_identity(point):
        return IDENTITY
    return _canonical(bls12_381.multiply(point, scalar))


def ec_add(p1, p2):
    """점 덧셈: p1 + p2. 한쪽이 항등원이면 다른 쪽을 그대로 반환한다."""
    return _canonical(bls12_381.add(p1, p2))


def ec_eq(p1, p2):
    """사영 좌표와 무관하게 두 점이 같은지 비교한다."""
    return bls12_381.eq(p1, p2)


def ec_neg(point):
    return _canonical(bls12_381.neg(point))


def random_scalar():
    """암호학적으로 안전한 난수 스칼라 (0이 아님)를 생성한다."""
    return Scalar(secrets.randbelow(ORDER - 1) + 1)


# ─────────────────────────────────────────────────────────────────────
# 직렬화
# ─────────────────────────────────────────────────────────────────────

def serialize_scalar(scalar):
    """Scalar → 32바이트 빅엔디안."""
    return i2osp(int(scalar) % ORDER, SCALAR_LENGTH)


def deserialize_scalar(data):
    """32바이트 빅엔디안 → Scalar.

    Raises:
        DecodeError: 길이가 다르거나 값이 위수 이상일 때
    """
    if not isinstance(data, (bytes, bytearray)) or len(data) != SCALAR_LENGTH:
        raise DecodeError(f"스칼라는 {SCALAR_LENGTH}바이트여야 합니다")
    value = os2ip(bytes(data))
    if value >= ORDER:
        raise DecodeError("스칼라 값이 그룹 위수 이상입니다")
    return Scalar(value)


def serialize_element(point):
    """G1 점 → 48바이트 압축 인코딩.

    Raises:
        ValueError: 항등원은 인코딩할 수 없다
    """
    if is_identity(point):
        raise ValueError("항등원은 직렬화할 수 없습니다")
    return i2osp(compress_G1(point), ELEMENT_LENGTH)


def deserialize_element(data):
    """48바이트 압축 인코딩 → G1 점.

    잘못된 플래그, q 이상의 x, 곡선 밖의 x, 항등원, 부분군 밖의 점을
    모두 거부한다.

    Raises:
        DecodeError: 유효한 (항등원이 아닌) 그룹 원소 인코딩이 아닐 때
    """
    if not isinstance(data, (bytes, bytearray)) or len(data) != ELEMENT_LENGTH:
        raise DecodeError(f"그룹 원소는 {ELEMENT_LENGTH}바이트여야 합니다")
    try:
        point = decompress_G1(os2ip(bytes(data)))
    except ValueError as e:
        raise DecodeError(f"잘못된 원소 인코딩: {e}") from e

    if is_identity(point):
        raise DecodeError("항등원은 유효한 원소가 아닙니다")
    if not subgroup_check(point):
        raise DecodeError("위수 r 부분군의 원소가 아닙니다")
    return point


# ─────────────────────────────────────────────────────────────────────
# 해싱
# ─────────────────────────────────────────────────────────────────────

def hash_to_group(msg, dst):
    """바이트열을 G1 점으로 해싱한다.

    RFC 9380의 BLS12381G1_XMD:SHA-256_SSWU_RO_ 스위트
    (hash_to_field → SSWU → 11-isogeny → 보조인자 제거).
    결과는 (msg, dst)에 대해 결정론적이다.

    Raises:
        InvalidInputError: 결과가 항등원일 때
    """
    point = _canonical(hash_to_G1(msg, dst, hashlib.sha256))
    if is_identity(point):
        raise InvalidInputError("입력이 항등원으로 매핑되었습니다")
    return point


def hash_to_scalar(msg, dst):
    """바이트열을 Scalar로 해싱한다.

    expand_message_xmd로 48바이트를 뽑아 위수 r로 축소하므로
    편향(bias)은 2^-128 이하이다.
    """
    uniform = expand_message_xmd(msg, dst, HASH_TO_FIELD_LENGTH, hashlib.sha256)
    return Scalar(os2ip(uniform) % ORDER)
