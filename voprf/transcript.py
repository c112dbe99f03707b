"""
VOPRF 트랜스크립트
==================

증명의 Fiat-Shamir 챌린지, 복합 원소(composite)의 가중치 시드,
Finalize 다이제스트는 모두 "길이 접두 연결" 형태의 트랜스크립트를
해싱하여 얻는다.

  lp(x) = I2OSP(len(x), 2) || x

예를 들어 챌린지 트랜스크립트는 다음과 같다:
  lp(Bm) || lp(a0) || lp(a1) || lp(a2) || lp(a3) || "Challenge"

마지막의 레이블("Challenge", "Composite", "Finalize")은 길이 접두 없이
붙으며, 같은 해시 함수를 쓰는 여러 용도를 서로 분리한다.

사용 예시:
    >>> t = Transcript()
    >>> t.append(b"input")
    >>> t.append_element(point)
    >>> t.append_label(b"Finalize")
    >>> digest = t.digest()
"""

import hashlib

from py_ecc.bls.hash import i2osp

from voprf.errors import InputLengthError
from voprf.group import serialize_element, hash_to_scalar


# I2OSP(len, 2)로 표현 가능한 최대 길이
MAX_LENGTH = (1 << 16) - 1


class Transcript:
    """SHA-256 기반 길이 접두 트랜스크립트.

    속성:
        state: 현재까지 누적된 해시 입력 바이트열
    """

    def __init__(self, hash_function=hashlib.sha256):
        self.state = bytearray()
        self.hash_function = hash_function

    def append(self, data):
        """길이 접두와 함께 바이트열을 추가한다.

        Raises:
            InputLengthError: 길이가 65535바이트를 넘을 때
        """
        if len(data) > MAX_LENGTH:
            raise InputLengthError(
                f"입력 길이 {len(data)}가 최대 {MAX_LENGTH}바이트를 초과합니다"
            )
        self.state.extend(i2osp(len(data), 2))
        self.state.extend(data)

    def append_element(self, point):
        """그룹 원소를 직렬화하여 길이 접두와 함께 추가한다."""
        self.append(serialize_element(point))

    def append_index(self, index):
        """2바이트 인덱스를 접두 없이 추가한다 (복합 원소 가중치용)."""
        if not 0 <= index <= MAX_LENGTH:
            raise InputLengthError(f"인덱스 {index}는 2바이트로 표현할 수 없습니다")
        self.state.extend(i2osp(index, 2))

    def append_label(self, label):
        """도메인 분리 레이블을 접두 없이 추가한다."""
        self.state.extend(label)

    def digest(self):
        """누적된 상태의 해시 다이제스트."""
        return self.hash_function(bytes(self.state)).digest()

    def challenge_scalar(self, dst):
        """누적된 상태를 hash_to_scalar로 스칼라에 매핑한다.

        Args:
            dst: 도메인 분리 태그 (예: b"HashToScalar-" + contextString)

        Returns:
            Scalar
        """
        return hash_to_scalar(bytes(self.state), dst)
