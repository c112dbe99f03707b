"""
VOPRF Flask Blueprint — 서버 엔드포인트
=========================================

총 7개 엔드포인트 (GET 1 + POST 6). 요청/응답의 바이트열은 모두 hex 문자열.

  GET  /voprf/public-key               공개키와 모드
  POST /voprf/evaluate                 {"blinded_element"}
  POST /voprf/evaluate-batch           {"blinded_elements"}
  POST /voprf/full-evaluate            {"input", "info"?}
  POST /voprf/verify-finalize          {"input", "output", "info"?}
  POST /voprf/verify-finalize-batch    {"inputs", "outputs", "info"?}
  POST /voprf/key-gen                  새 키 쌍 (진행 중인 요청이 끝난 뒤 교체)

개인키는 어떤 엔드포인트로도 노출하지 않는다.
"""

import logging
import threading
from contextlib import contextmanager

from flask import Blueprint, jsonify, request

from voprf.errors import VOPRFError, DecodeError

from voprf_serializers import (
    serialize_bytes, deserialize_bytes, deserialize_bytes_list,
    serialize_evaluation,
)


logger = logging.getLogger(__name__)

voprf_bp = Blueprint('voprf', __name__, url_prefix='/voprf')

# SERVER는 app.py에서 주입
SERVER = None


class KeyLock:
    """읽기/쓰기 잠금.

    평가 요청(읽기)은 동시에 여러 개 진행될 수 있고, key-gen(쓰기)은
    진행 중인 읽기가 모두 끝난 뒤 단독으로 실행된다. 쓰기가 기다리는
    동안에는 새 읽기가 들어오지 못하므로 key-gen이 굶지 않는다.
    """

    def __init__(self):
        self._cond = threading.Condition()
        self._readers = 0
        self._writers_waiting = 0
        self._writing = False

    @contextmanager
    def read(self):
        with self._cond:
            while self._writing or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self):
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writing or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writing = True
        try:
            yield
        finally:
            with self._cond:
                self._writing = False
                self._cond.notify_all()


KEY_LOCK = KeyLock()


def init_voprf_bp(server):
    """app.py에서 Server를 주입받는다."""
    global SERVER
    SERVER = server


# ─── 요청 헬퍼 ───

def payload():
    """요청 JSON 본문 (dict)."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise DecodeError("JSON 객체 본문이 필요합니다")
    return data


def field(data, name, default=None):
    """본문에서 hex 필드를 bytes로 읽는다."""
    if name not in data:
        if default is not None:
            return default
        raise DecodeError(f"필드가 없습니다: {name}")
    return deserialize_bytes(data[name])


def list_field(data, name):
    """본문에서 hex 리스트 필드를 list[bytes]로 읽는다."""
    if name not in data:
        raise DecodeError(f"필드가 없습니다: {name}")
    return deserialize_bytes_list(data[name])


@voprf_bp.errorhandler(VOPRFError)
def handle_voprf_error(e):
    """VOPRF 오류 → 400 JSON."""
    logger.warning("%s %s rejected: %s", request.method, request.path, type(e).__name__)
    return jsonify({"error": type(e).__name__, "message": str(e)}), 400


# ──────────────────────────────────────────────────────────────
# 키
# ──────────────────────────────────────────────────────────────

@voprf_bp.route("/public-key")
def public_key():
    """공개키와 모드를 반환한다."""
    with KEY_LOCK.read():
        return jsonify({
            "mode": SERVER.mode.name.lower(),
            "public_key": serialize_bytes(SERVER.public_key()),
        })


@voprf_bp.route("/key-gen", methods=["POST"])
def key_gen():
    """새 키 쌍을 생성한다."""
    with KEY_LOCK.write():
        SERVER.key_gen()
        pk = SERVER.public_key()
    return jsonify({"public_key": serialize_bytes(pk)})


# ──────────────────────────────────────────────────────────────
# 평가
# ──────────────────────────────────────────────────────────────

@voprf_bp.route("/evaluate", methods=["POST"])
def evaluate():
    """단일 블라인드 원소를 평가한다."""
    blinded = field(payload(), "blinded_element")
    with KEY_LOCK.read():
        evaluation = SERVER.evaluate(blinded)
    return jsonify(serialize_evaluation(evaluation))


@voprf_bp.route("/evaluate-batch", methods=["POST"])
def evaluate_batch():
    """블라인드 원소 배치를 평가한다."""
    blinded = list_field(payload(), "blinded_elements")
    with KEY_LOCK.read():
        evaluation = SERVER.evaluate_batch(blinded)
    return jsonify(serialize_evaluation(evaluation))


# ──────────────────────────────────────────────────────────────
# 전체 평가 / 검증
# ──────────────────────────────────────────────────────────────

@voprf_bp.route("/full-evaluate", methods=["POST"])
def full_evaluate():
    """입력으로부터 PRF 출력을 직접 계산한다."""
    data = payload()
    input = field(data, "input")
    info = field(data, "info", default=b"")
    with KEY_LOCK.read():
        output = SERVER.full_evaluate(input, info)
    return jsonify({"output": serialize_bytes(output)})


@voprf_bp.route("/verify-finalize", methods=["POST"])
def verify_finalize():
    """클라이언트 출력을 검증한다."""
    data = payload()
    input = field(data, "input")
    output = field(data, "output")
    info = field(data, "info", default=b"")
    with KEY_LOCK.read():
        valid = SERVER.verify_finalize(input, output, info)
    return jsonify({"valid": valid})


@voprf_bp.route("/verify-finalize-batch", methods=["POST"])
def verify_finalize_batch():
    """클라이언트 출력 배치를 검증한다."""
    data = payload()
    inputs = list_field(data, "inputs")
    outputs = list_field(data, "outputs")
    info = field(data, "info", default=b"")
    with KEY_LOCK.read():
        valid = SERVER.verify_finalize_batch(inputs, outputs, info)
    return jsonify({"valid": valid})
