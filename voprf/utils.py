"""
VOPRF 공유 유틸리티
===================

**상수 시간 비교 (ct_equal)**:
  비밀에서 유도된 값(PRF 출력 등)을 비교할 때, 처음 다른 바이트에서 바로
  반환하는 일반 비교는 실행 시간으로 불일치 위치를 드러낸다.
  hmac.compare_digest는 길이가 같으면 내용과 무관하게 같은 시간에 끝난다.
"""

import hmac


def ct_equal(a, b):
    """두 바이트열이 같은지 상수 시간으로 비교한다.

    Args:
        a, b: bytes

    Returns:
        bool
    """
    return hmac.compare_digest(bytes(a), bytes(b))
