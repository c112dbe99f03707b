"""
VOPRF 암호 스위트 (Ciphersuite)
================================

서버와 클라이언트가 공유하는 상태(그룹, 모드, 해시 함수)를 하나의 값으로
묶는다. Server와 Client는 이 값을 필드로 보유할 뿐, 상속하지 않는다.

**컨텍스트 문자열**:
  contextString = "OPRFV1-" || I2OSP(mode, 1) || "-" || identifier

  모든 도메인 분리 태그(DST)는 이 문자열을 접미로 가진다:
  - HashToGroup-  : 입력 → 그룹 원소
  - HashToScalar- : 복합 원소 가중치, 증명 챌린지
  - Seed-         : 복합 원소 가중치 시드
  - DeriveKeyPair : 시드로부터 키 유도

  모드가 다르면 contextString이 달라지므로, 같은 키라도 Base 모드와
  Verifiable 모드의 PRF 출력은 서로 다르다.

**Finalize 해시**:
  Hash(lp(input) || lp(evaluatedElement) || lp(info) || "Finalize")

사용 예시:
    >>> suite = Ciphersuite(Mode.VERIFIABLE)
    >>> suite.context_string
    b'OPRFV1-\\x01-BLS12381G1-SHA256'
"""

import hashlib
from collections import namedtuple
from enum import IntEnum

from py_ecc.bls.hash import i2osp

from voprf.errors import DeriveKeyPairError
from voprf.group import (
    GENERATOR, ec_mul, hash_to_group, random_scalar,
)
from voprf.transcript import Transcript


IDENTIFIER = b"BLS12381G1-SHA256"

KeyPair = namedtuple("KeyPair", ["private_key", "public_key"])


class Mode(IntEnum):
    """프로토콜 모드."""
    BASE = 0x00
    VERIFIABLE = 0x01


class Ciphersuite:
    """그룹 + 모드 + 해시 함수.

    속성:
        mode: Mode
        identifier: 스위트 식별자 (b"BLS12381G1-SHA256")
        hash_function: hashlib 생성자 (SHA-256)
    """

    def __init__(self, mode, identifier=IDENTIFIER, hash_function=hashlib.sha256):
        self.mode = Mode(mode)
        self.identifier = identifier
        self.hash_function = hash_function

    def __repr__(self):
        return f"Ciphersuite({self.mode.name}, {self.identifier.decode()})"

    def __eq__(self, other):
        if not isinstance(other, Ciphersuite):
            return NotImplemented
        return self.context_string == other.context_string

    def __hash__(self):
        return hash(self.context_string)

    @property
    def context_string(self):
        return b"OPRFV1-" + i2osp(int(self.mode), 1) + b"-" + self.identifier

    def dst(self, prefix):
        """도메인 분리 태그: prefix || contextString."""
        return prefix + self.context_string

    def transcript(self):
        return Transcript(self.hash_function)

    # ─── 그룹 해싱 ───

    def hash_to_group(self, msg):
        """입력을 그룹 원소로 매핑한다.

        Raises:
            InvalidInputError: 결과가 항등원일 때
        """
        return hash_to_group(msg, self.dst(b"HashToGroup-"))

    def hash_to_scalar(self, transcript, dst=None):
        """트랜스크립트를 스칼라로 매핑한다 (기본 DST: HashToScalar-)."""
        if dst is None:
            dst = self.dst(b"HashToScalar-")
        return transcript.challenge_scalar(dst)

    # ─── Finalize ───

    def hash_transcript(self, input, element_bytes, info):
        """최종 PRF 다이제스트를 계산한다.

        Args:
            input: 클라이언트의 원래 입력
            element_bytes: 언블라인드된 (또는 서버가 직접 평가한) 원소 인코딩
            info: 공개 정보 문자열

        Returns:
            bytes: Hash(lp(input) || lp(element) || lp(info) || "Finalize")

        Raises:
            InputLengthError: 어느 인자든 65535바이트를 넘을 때
        """
        t = self.transcript()
        t.append(input)
        t.append(element_bytes)
        t.append(info)
        t.append_label(b"Finalize")
        return t.digest()

    # ─── 키 생성 ───

    def generate_key_pair(self):
        """난수 개인키와 그에 대응하는 공개키 pk = k·G."""
        private_key = random_scalar()
        return KeyPair(private_key, ec_mul(GENERATOR, private_key))

    def derive_key_pair(self, seed, info):
        """시드로부터 결정론적으로 키 쌍을 유도한다.

        deriveInput = seed || lp(info) 에 카운터 바이트를 붙여
        "DeriveKeyPair" || contextString 태그로 스칼라를 해싱하고,
        0이 아닌 첫 결과를 개인키로 쓴다.

        Raises:
            DeriveKeyPairError: 256번 모두 0이 나왔을 때
        """
        dst = self.dst(b"DeriveKeyPair")
        for counter in range(256):
            t = self.transcript()
            t.append_label(seed)
            t.append(info)
            t.append_label(i2osp(counter, 1))
            private_key = self.hash_to_scalar(t, dst)
            if int(private_key) != 0:
                return KeyPair(private_key, ec_mul(GENERATOR, private_key))
        raise DeriveKeyPairError("키 쌍을 유도하지 못했습니다")
