"""
VOPRF 평가 결과 (Evaluation)
============================

Evaluate/EvaluateBatch 한 번의 호출이 만들어 내는 결과 값.

  - elements: 평가된 원소의 인코딩 튜플 (입력 배치와 같은 순서, 같은 길이)
  - proof:    Verifiable 모드에서만 존재하는 Proof(c, s), Base 모드에서는 None

c와 s는 하나의 Proof 객체로 묶여 있으므로 한쪽만 존재하는 상태는
표현할 수 없다. 생성 이후에는 변경되지 않는다.
"""

from voprf.group import serialize_scalar


class Evaluation:
    """평가 결과 컨테이너.

    속성:
        elements: tuple[bytes] — 48바이트 원소 인코딩들
        proof: Proof 또는 None
    """

    __slots__ = ("_elements", "_proof")

    def __init__(self, elements, proof=None):
        self._elements = tuple(bytes(e) for e in elements)
        self._proof = proof

    @property
    def elements(self):
        return self._elements

    @property
    def proof(self):
        return self._proof

    @property
    def proof_c(self):
        """챌린지 c의 32바이트 인코딩 (증명이 없으면 None)."""
        if self._proof is None:
            return None
        return serialize_scalar(self._proof.c)

    @property
    def proof_s(self):
        """응답 s의 32바이트 인코딩 (증명이 없으면 None)."""
        if self._proof is None:
            return None
        return serialize_scalar(self._proof.s)

    def __len__(self):
        return len(self._elements)

    def __iter__(self):
        return iter(self._elements)

    def __eq__(self, other):
        if not isinstance(other, Evaluation):
            return NotImplemented
        return self._elements == other._elements and self._proof == other._proof

    def __repr__(self):
        return f"Evaluation(elements={len(self._elements)}, proof={self._proof!r})"
