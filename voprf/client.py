"""
(V)OPRF 클라이언트
==================

서버의 상대편. 입력을 블라인딩하여 보내고, 평가 결과를 언블라인딩하여
최종 PRF 출력을 얻는다.

  1. blind:    P = H(x),  r ← 난수,  B = r·P        → 서버로 B 전송
  2. (서버):   D = k·B
  3. finalize: N = r⁻¹·D = k·P,  y = Hash(lp(x) || lp(N) || lp(info) || "Finalize")

Verifiable 모드에서는 언블라인딩 전에 서버의 증명을 공개키로 검증한다.
검증에 실패하면 출력을 만들지 않고 VerifyError를 던진다.

사용 예시:
    >>> client = VerifiableClient(server.public_key())
    >>> blind, blinded = client.blind(b"abc")
    >>> ev = server.evaluate(blinded)
    >>> client.finalize(b"abc", blind, blinded, ev)  # == server.full_evaluate(b"abc")
"""

from voprf.ciphersuite import Ciphersuite, Mode
from voprf.errors import VerifyError
from voprf.group import (
    Scalar, ec_mul, random_scalar, serialize_element, deserialize_element,
)
from voprf.proof import verify_proof


class Client:
    """Base 모드 OPRF 클라이언트."""

    mode = Mode.BASE

    def __init__(self):
        self.suite = Ciphersuite(self.mode)

    def blind(self, input, blind=None):
        """입력을 블라인딩한다.

        Args:
            input: 원래 입력 바이트열
            blind: 블라인딩 스칼라 (테스트용, 기본값은 난수)

        Returns:
            (blind, blinded_element): Scalar와 48바이트 인코딩
        """
        if blind is None:
            blind = random_scalar()
        p = self.suite.hash_to_group(input)
        return blind, serialize_element(ec_mul(p, blind))

    def _check_proof(self, blinded_elements, evaluation):
        """Base 모드에는 검증할 증명이 없다."""

    def finalize(self, input, blind, blinded_element, evaluation, info=b""):
        """단일 평가 결과를 언블라인딩하여 PRF 출력을 계산한다."""
        return self.finalize_batch([input], [blind], [blinded_element], evaluation, info)[0]

    def finalize_batch(self, inputs, blinds, blinded_elements, evaluation, info=b""):
        """배치 평가 결과를 언블라인딩한다.

        Returns:
            list[bytes]: 입력 순서대로의 PRF 출력

        Raises:
            ValueError: 개수가 맞지 않을 때
            VerifyError: (Verifiable) 증명이 유효하지 않을 때
        """
        if not len(inputs) == len(blinds) == len(blinded_elements) == len(evaluation):
            raise ValueError("입력, 블라인드, 평가 결과의 개수가 다릅니다")

        self._check_proof(blinded_elements, evaluation)

        outputs = []
        for input, blind, encoded in zip(inputs, blinds, evaluation.elements):
            evaluated = deserialize_element(encoded)
            unblinded = ec_mul(evaluated, Scalar(1) / Scalar(blind))
            outputs.append(
                self.suite.hash_transcript(input, serialize_element(unblinded), info)
            )
        return outputs


class VerifiableClient(Client):
    """Verifiable 모드 VOPRF 클라이언트.

    속성:
        public_key: 서버 공개키 (G1 점)
    """

    mode = Mode.VERIFIABLE

    def __init__(self, public_key):
        super().__init__()
        self.public_key = deserialize_element(public_key)

    def _check_proof(self, blinded_elements, evaluation):
        if evaluation.proof is None:
            raise VerifyError("Verifiable 평가 결과에 증명이 없습니다")
        blinded = [deserialize_element(b) for b in blinded_elements]
        evaluated = [deserialize_element(e) for e in evaluation.elements]
        if not verify_proof(self.suite, self.public_key, blinded, evaluated, evaluation.proof):
            raise VerifyError("서버 증명 검증에 실패했습니다")
