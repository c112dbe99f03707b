"""
Tests for the Flask blueprint (voprf_routes) and app factory (app.create_app).
"""

import threading
import time

import pytest

from app import create_app, build_server
from voprf.client import Client, VerifiableClient
from voprf.server import Server, VerifiableServer

from voprf_routes import KeyLock
from voprf_serializers import deserialize_evaluation


TEST_PRIVATE_KEY = bytes.fromhex(
    "0f2e8d7c6b5a49382716f5e4d3c2b1a09f8e7d6c5b4a39281706f5e4d3c2b1a0"
)


# ─────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────

@pytest.fixture
def base_app():
    return create_app({"VOPRF_MODE": "base", "VOPRF_PRIVATE_KEY": TEST_PRIVATE_KEY.hex()})


@pytest.fixture
def verifiable_app():
    return create_app({"VOPRF_MODE": "verifiable", "VOPRF_PRIVATE_KEY": TEST_PRIVATE_KEY.hex()})


# ─────────────────────────────────────────────────────────────────────
# App factory
# ─────────────────────────────────────────────────────────────────────

class TestCreateApp:
    """create_app / build_server 테스트."""

    def test_mode_selects_server_class(self, base_app, verifiable_app):
        assert type(base_app.extensions["voprf_server"]) is Server
        assert isinstance(verifiable_app.extensions["voprf_server"], VerifiableServer)

    def test_configured_key_is_used(self, base_app):
        assert base_app.extensions["voprf_server"].private_key() == TEST_PRIVATE_KEY

    def test_missing_key_generates_one(self):
        app = create_app({"VOPRF_MODE": "verifiable"})
        assert len(app.extensions["voprf_server"].private_key()) == 32

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            build_server({"VOPRF_MODE": "poprf"})

    def test_non_string_key_rejected(self):
        with pytest.raises(ValueError):
            build_server({"VOPRF_MODE": "base", "VOPRF_PRIVATE_KEY": 1234})

    def test_prefixed_env(self, monkeypatch):
        monkeypatch.setenv("FLASK_VOPRF_MODE", "verifiable")
        monkeypatch.setenv("FLASK_VOPRF_PRIVATE_KEY", TEST_PRIVATE_KEY.hex())
        app = create_app()
        server = app.extensions["voprf_server"]
        assert isinstance(server, VerifiableServer)
        assert server.private_key() == TEST_PRIVATE_KEY


# ─────────────────────────────────────────────────────────────────────
# Endpoints
# ─────────────────────────────────────────────────────────────────────

class TestEndpoints:
    """엔드포인트 테스트."""

    def test_public_key(self, verifiable_app):
        resp = verifiable_app.test_client().get("/voprf/public-key")
        assert resp.status_code == 200
        server = verifiable_app.extensions["voprf_server"]
        assert resp.get_json() == {
            "mode": "verifiable",
            "public_key": server.public_key().hex(),
        }

    def test_private_key_not_exposed(self, base_app):
        body = base_app.test_client().get("/voprf/public-key").get_data(as_text=True)
        assert TEST_PRIVATE_KEY.hex() not in body

    def test_evaluate_base_roundtrip(self, base_app):
        client = Client()
        blind, blinded = client.blind(b"abc")
        resp = base_app.test_client().post(
            "/voprf/evaluate", json={"blinded_element": blinded.hex()}
        )
        assert resp.status_code == 200
        data = resp.get_json()
        assert "proof" not in data
        ev = deserialize_evaluation(data)
        output = client.finalize(b"abc", blind, blinded, ev)
        assert output == base_app.extensions["voprf_server"].full_evaluate(b"abc")

    def test_evaluate_batch_verifiable_roundtrip(self, verifiable_app):
        http = verifiable_app.test_client()
        pk = bytes.fromhex(http.get("/voprf/public-key").get_json()["public_key"])
        client = VerifiableClient(pk)
        inputs = [b"a", b"b", b"c"]
        blinds, blinded = zip(*(client.blind(x) for x in inputs))
        resp = http.post(
            "/voprf/evaluate-batch", json={"blinded_elements": [b.hex() for b in blinded]}
        )
        assert resp.status_code == 200
        ev = deserialize_evaluation(resp.get_json())
        assert ev.proof is not None
        outputs = client.finalize_batch(inputs, blinds, blinded, ev)

        resp = http.post("/voprf/verify-finalize-batch", json={
            "inputs": [x.hex() for x in inputs],
            "outputs": [y.hex() for y in outputs],
        })
        assert resp.get_json() == {"valid": True}

    def test_evaluate_invalid_element(self, base_app):
        resp = base_app.test_client().post(
            "/voprf/evaluate", json={"blinded_element": "00" * 48}
        )
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "DecodeError"

    def test_evaluate_batch_invalid_element(self, base_app):
        blinded = Client().blind(b"x")[1].hex()
        resp = base_app.test_client().post(
            "/voprf/evaluate-batch",
            json={"blinded_elements": [blinded, blinded, "00" * 48, blinded]},
        )
        assert resp.status_code == 400
        assert "elements" not in resp.get_json()

    def test_missing_field(self, base_app):
        resp = base_app.test_client().post("/voprf/evaluate", json={})
        assert resp.status_code == 400

    def test_non_json_body(self, base_app):
        resp = base_app.test_client().post("/voprf/evaluate", data="not json")
        assert resp.status_code == 400

    def test_full_evaluate_and_verify(self, base_app):
        http = base_app.test_client()
        resp = http.post("/voprf/full-evaluate", json={"input": b"abc".hex(), "info": ""})
        output = resp.get_json()["output"]
        assert bytes.fromhex(output) == base_app.extensions["voprf_server"].full_evaluate(b"abc")

        resp = http.post("/voprf/verify-finalize", json={"input": b"abc".hex(), "output": output})
        assert resp.get_json() == {"valid": True}

        flipped = ("00" if output[:2] != "00" else "01") + output[2:]
        resp = http.post("/voprf/verify-finalize", json={"input": b"abc".hex(), "output": flipped})
        assert resp.get_json() == {"valid": False}

    def test_key_gen(self, base_app):
        http = base_app.test_client()
        before = http.get("/voprf/public-key").get_json()["public_key"]
        resp = http.post("/voprf/key-gen")
        assert resp.status_code == 200
        after = resp.get_json()["public_key"]
        assert after != before
        assert http.get("/voprf/public-key").get_json()["public_key"] == after


# ─────────────────────────────────────────────────────────────────────
# KeyLock
# ─────────────────────────────────────────────────────────────────────

class TestKeyLock:
    """읽기/쓰기 잠금 테스트."""

    def test_readers_share(self):
        lock = KeyLock()
        with lock.read():
            with lock.read():
                pass

    def test_writer_waits_for_reader(self):
        lock = KeyLock()
        done = threading.Event()

        def writer():
            with lock.write():
                done.set()

        with lock.read():
            t = threading.Thread(target=writer)
            t.start()
            assert not done.wait(timeout=0.1)
        t.join(timeout=5)
        assert done.is_set()

    def test_writer_not_starved_by_steady_readers(self):
        """Readers keep overlapping; a waiting writer still gets the lock."""
        lock = KeyLock()
        stop = threading.Event()
        acquired = threading.Event()

        def reader():
            while not stop.is_set():
                with lock.read():
                    time.sleep(0.01)

        readers = [threading.Thread(target=reader) for _ in range(4)]
        for t in readers:
            t.start()
        time.sleep(0.05)

        def writer():
            with lock.write():
                acquired.set()

        w = threading.Thread(target=writer)
        w.start()
        try:
            assert acquired.wait(timeout=2)
        finally:
            stop.set()
            w.join(timeout=5)
            for t in readers:
                t.join(timeout=5)

    def test_readers_wait_for_pending_writer(self):
        lock = KeyLock()
        writer_done = threading.Event()
        reader_entered = threading.Event()

        def writer():
            with lock.write():
                writer_done.set()

        def reader():
            with lock.read():
                reader_entered.set()

        with lock.read():
            w = threading.Thread(target=writer)
            w.start()
            while not lock._writers_waiting:
                time.sleep(0.001)
            r = threading.Thread(target=reader)
            r.start()
            assert not reader_entered.wait(timeout=0.1)
        w.join(timeout=5)
        r.join(timeout=5)
        assert writer_done.is_set()
        assert reader_entered.is_set()
