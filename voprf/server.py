"""
(V)OPRF 서버
============

서버는 키 쌍 (k, pk = k·G)을 보유하고 클라이언트가 보낸 블라인드 원소에
k를 적용한다. 클라이언트의 입력은 블라인딩되어 있으므로 서버는 입력도
출력도 알 수 없다.

**두 가지 서버**:
  - Server: Base 모드. 평가 결과에 증명이 없다.
  - VerifiableServer: Verifiable 모드. 평가 결과마다 배치 전체를 덮는
    DLEQ 증명 (c, s)가 붙는다.

  모드는 클래스가 결정한다. 따라서 "증명은 둘 다 있거나 둘 다 없다"는
  불변식은 실행 중 분기가 아니라 타입으로 보장된다.

**공개 연산**:
  ┌──────────────────────────┬──────────────────────────────────────────┐
  │ key_gen()                │ 새 키 쌍 생성 (배타적 접근 필요)          │
  │ evaluate(bytes)          │ 단일 블라인드 원소 평가                   │
  │ evaluate_batch([bytes])  │ 배치 평가 (전부 성공하거나 전부 실패)     │
  │ full_evaluate(x, info)   │ 블라인딩 없이 PRF 출력을 직접 계산        │
  │ verify_finalize(...)     │ 클라이언트 출력과 상수 시간 비교          │
  │ verify_finalize_batch()  │ 모든 쌍을 검사한 뒤 결과를 결합           │
  │ private_key()/public_key │ 키 직렬화                                │
  └──────────────────────────┴──────────────────────────────────────────┘

**동시성**:
  키 쌍은 불변 KeyPair 하나로 보관되고, 각 연산은 시작할 때 그 참조를
  한 번 읽는다. key_gen은 참조를 통째로 교체하므로 읽는 쪽이 반쯤 바뀐
  키 쌍을 보는 일은 없지만, key_gen과 평가가 겹치지 않게 하는 것은
  호출자의 책임이다.

사용 예시:
    >>> server = VerifiableServer()
    >>> ev = server.evaluate(blinded_element)
    >>> ev.proof is not None  # True
"""

import logging

from voprf.ciphersuite import Ciphersuite, KeyPair, Mode
from voprf.errors import DecodeError, InputLengthError
from voprf.evaluation import Evaluation
from voprf.group import (
    GENERATOR, ORDER, ec_eq, ec_mul, serialize_element, serialize_scalar,
    deserialize_element, deserialize_scalar,
)
from voprf.proof import generate_proof
from voprf.transcript import MAX_LENGTH
from voprf.utils import ct_equal


logger = logging.getLogger(__name__)


def _check_key_pair(key_pair):
    """pk = k·G 이고 k != 0 인지 확인한다.

    Raises:
        ValueError: 개인키가 0이거나 공개키가 개인키와 맞지 않을 때
    """
    if int(key_pair.private_key) % ORDER == 0:
        raise ValueError("개인키는 0일 수 없습니다")
    if not ec_eq(key_pair.public_key, ec_mul(GENERATOR, key_pair.private_key)):
        raise ValueError("공개키가 개인키와 맞지 않습니다")


class Server:
    """Base 모드 OPRF 서버.

    키 재료 없이는 생성되지 않는다: key_pair를 주지 않으면 생성 시점에
    새 키를 만든다.

    속성:
        suite: Ciphersuite (모드 포함)
    """

    mode = Mode.BASE

    def __init__(self, key_pair=None):
        self.suite = Ciphersuite(self.mode)
        if key_pair is None:
            key_pair = self.suite.generate_key_pair()
        else:
            _check_key_pair(key_pair)
        self._keys = key_pair

    @classmethod
    def from_private_key(cls, private_key):
        """직렬화된 개인키(32바이트)로 서버를 만든다.

        Raises:
            DecodeError: 잘못된 인코딩이거나 0일 때
        """
        k = deserialize_scalar(private_key)
        if int(k) == 0:
            raise DecodeError("개인키는 0일 수 없습니다")
        return cls(KeyPair(k, ec_mul(GENERATOR, k)))

    @classmethod
    def from_seed(cls, seed, info=b""):
        """시드로부터 결정론적으로 유도한 키로 서버를 만든다."""
        suite = Ciphersuite(cls.mode)
        return cls(suite.derive_key_pair(seed, info))

    def __repr__(self):
        return f"{type(self).__name__}({self.suite!r})"

    # ─── 키 관리 ───

    def key_gen(self):
        """새 키 쌍을 생성하여 기존 키를 대체한다."""
        self._keys = self.suite.generate_key_pair()
        logger.info("%s: generated new key pair", type(self).__name__)

    def private_key(self):
        """직렬화된 개인키 (32바이트)."""
        return serialize_scalar(self._keys.private_key)

    def public_key(self):
        """직렬화된 공개키 (48바이트)."""
        return serialize_element(self._keys.public_key)

    # ─── 평가 ───

    def _evaluate(self, keys, blinded):
        return ec_mul(blinded, keys.private_key)

    def _prove(self, keys, blinded, evaluated):
        """Base 모드에는 증명이 없다."""
        return None

    def _decode(self, blinded_elements):
        decoded = []
        for i, encoded in enumerate(blinded_elements):
            try:
                decoded.append(deserialize_element(encoded))
            except DecodeError as e:
                logger.warning("rejecting evaluation: element %d is not a valid encoding", i)
                raise DecodeError(f"OPRF can't evaluate input {i}: {e}") from e
        return decoded

    def evaluate(self, blinded_element):
        """단일 블라인드 원소를 평가한다.

        Args:
            blinded_element: 48바이트 원소 인코딩

        Returns:
            Evaluation (원소 1개, Verifiable이면 증명 포함)

        Raises:
            DecodeError: 유효한 그룹 원소 인코딩이 아닐 때
        """
        return self.evaluate_batch([blinded_element])

    def evaluate_batch(self, blinded_elements):
        """블라인드 원소 배치를 평가한다.

        모든 원소를 먼저 디코딩하고, 하나라도 실패하면 아무 결과도 없이
        DecodeError를 던진다. Verifiable 모드의 증명은 배치 전체에 대해
        한 번만 생성된다.

        Args:
            blinded_elements: 48바이트 원소 인코딩의 시퀀스

        Returns:
            Evaluation (입력과 같은 순서, 같은 개수)

        Raises:
            DecodeError: 어느 원소든 디코딩에 실패할 때
            InputLengthError: 빈 배치이거나 65535개를 넘을 때
        """
        blinded_elements = list(blinded_elements)
        if not blinded_elements:
            raise InputLengthError("빈 배치는 평가할 수 없습니다")
        if len(blinded_elements) > MAX_LENGTH:
            raise InputLengthError(
                f"배치 크기는 {MAX_LENGTH} 이하여야 합니다: {len(blinded_elements)}"
            )

        keys = self._keys
        blinded = self._decode(blinded_elements)
        evaluated = [self._evaluate(keys, b) for b in blinded]
        proof = self._prove(keys, blinded, evaluated)

        return Evaluation([serialize_element(e) for e in evaluated], proof)

    # ─── 전체 평가 및 검증 ───

    def full_evaluate(self, input, info=b""):
        """블라인딩 없이 PRF 출력을 계산한다.

        클라이언트의 Finalize 출력과 같은 값이 나와야 한다.

        Returns:
            bytes: Hash(lp(input) || lp(k·H(input)) || lp(info) || "Finalize")

        Raises:
            InputLengthError: input 또는 info가 65535바이트를 넘을 때
        """
        keys = self._keys
        p = self.suite.hash_to_group(input)
        t = self._evaluate(keys, p)
        return self.suite.hash_transcript(input, serialize_element(t), info)

    def verify_finalize(self, input, output, info=b""):
        """클라이언트의 Finalize 출력이 서버의 재계산과 같은지 확인한다.

        불일치는 오류가 아니라 False이다.
        """
        try:
            digest = self.full_evaluate(input, info)
        except InputLengthError:
            logger.info("verify_finalize: input or info too long")
            return False
        return ct_equal(digest, output)

    def verify_finalize_batch(self, inputs, outputs, info=b""):
        """모든 (input, output) 쌍을 검사한다.

        앞선 쌍이 실패해도 나머지를 계속 검사하고, 결과는 단락 평가 없는
        & 로 결합한다. 따라서 실행 시간으로 실패 위치가 드러나지 않는다.
        """
        inputs = list(inputs)
        outputs = list(outputs)
        if len(inputs) != len(outputs):
            return False

        result = True
        for input, output in zip(inputs, outputs):
            result = result & self.verify_finalize(input, output, info)
        return result


class VerifiableServer(Server):
    """Verifiable 모드 VOPRF 서버: 모든 평가에 DLEQ 증명이 붙는다."""

    mode = Mode.VERIFIABLE

    def _prove(self, keys, blinded, evaluated):
        return generate_proof(
            self.suite, keys.private_key, keys.public_key, blinded, evaluated
        )


def new_server(mode, key_pair=None):
    """모드에 맞는 서버 클래스를 골라 생성한다."""
    if Mode(mode) is Mode.VERIFIABLE:
        return VerifiableServer(key_pair)
    return Server(key_pair)
