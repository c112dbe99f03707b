import sys
import os
import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from voprf.client import Client, VerifiableClient
from voprf.server import Server, VerifiableServer


# ── 테스트 상수 ──
TEST_PRIVATE_KEY = bytes.fromhex(
    "0f2e8d7c6b5a49382716f5e4d3c2b1a09f8e7d6c5b4a39281706f5e4d3c2b1a0"
)


@pytest.fixture
def base_server():
    """고정 키를 쓰는 Base 모드 서버."""
    return Server.from_private_key(TEST_PRIVATE_KEY)


@pytest.fixture
def verifiable_server():
    """고정 키를 쓰는 Verifiable 모드 서버."""
    return VerifiableServer.from_private_key(TEST_PRIVATE_KEY)


@pytest.fixture
def base_client():
    return Client()


@pytest.fixture
def verifiable_client(verifiable_server):
    return VerifiableClient(verifiable_server.public_key())
