"""
VOPRF 예외 계층
===============

서버/클라이언트가 호출자에게 드러내는 모든 오류는 VOPRFError를 상속한다.

  - DecodeError: 바이트열이 유효한 그룹 원소/스칼라 인코딩이 아님
    (공격자가 제어하는 입력일 수 있으므로 절대 조용히 보정하지 않는다)
  - InputLengthError: 길이 접두(I2OSP(len, 2))로 표현할 수 없는 입력,
    또는 허용 범위를 벗어난 배치 크기
  - InvalidInputError: 입력이 그룹의 항등원으로 해싱됨
  - DeriveKeyPairError: 시드로부터 0이 아닌 키를 유도하지 못함
  - VerifyError: 클라이언트 측 증명 검증 실패

검증 불일치(VerifyFinalize가 False를 반환하는 경우)는 오류가 아니다.
"""


class VOPRFError(Exception):
    """모든 VOPRF 오류의 기반 클래스."""


class DecodeError(VOPRFError, ValueError):
    """유효하지 않은 원소/스칼라 인코딩."""


class InputLengthError(VOPRFError, ValueError):
    """길이 접두로 인코딩할 수 없는 입력 또는 잘못된 배치 크기."""


class InvalidInputError(VOPRFError, ValueError):
    """입력이 그룹 항등원으로 매핑됨."""


class DeriveKeyPairError(VOPRFError):
    """키 유도 실패."""


class VerifyError(VOPRFError):
    """증명 검증 실패."""
