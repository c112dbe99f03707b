"""
(V)OPRF 서버 라이브러리.

클라이언트는 서버 개인키 k에 대한 PRF(k, x)를 x를 드러내지 않고 얻으며,
Verifiable 모드에서는 서버가 공개키에 커밋된 k를 썼다는 증명도 받는다.

Modules:
- group: BLS12-381 G1 그룹 추상화 (py_ecc)
- transcript: 길이 접두 트랜스크립트 해싱
- ciphersuite: 모드/컨텍스트 문자열/도메인 분리, Finalize 해시, 키 생성
- proof: 일괄 DLEQ 증명 생성 및 검증
- evaluation: 평가 결과 값
- server: Server, VerifiableServer
- client: Client, VerifiableClient
"""

from voprf.ciphersuite import Ciphersuite, KeyPair, Mode
from voprf.client import Client, VerifiableClient
from voprf.errors import (
    VOPRFError, DecodeError, InputLengthError, InvalidInputError,
    DeriveKeyPairError, VerifyError,
)
from voprf.evaluation import Evaluation
from voprf.proof import Proof
from voprf.server import Server, VerifiableServer, new_server

__all__ = [
    "Ciphersuite",
    "KeyPair",
    "Mode",
    "Client",
    "VerifiableClient",
    "VOPRFError",
    "DecodeError",
    "InputLengthError",
    "InvalidInputError",
    "DeriveKeyPairError",
    "VerifyError",
    "Evaluation",
    "Proof",
    "Server",
    "VerifiableServer",
    "new_server",
]
