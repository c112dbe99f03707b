import logging

from flask import Flask

from voprf import Server, VerifiableServer

from voprf_routes import voprf_bp, init_voprf_bp
from voprf_serializers import deserialize_bytes


logger = logging.getLogger(__name__)

SERVERS = {
    "base": Server,
    "verifiable": VerifiableServer,
}


def build_server(config):
    """설정으로부터 Server를 만든다.

    VOPRF_MODE: "base" | "verifiable"
    VOPRF_PRIVATE_KEY: hex 개인키 (없으면 새로 생성)
    """
    mode_name = str(config.get("VOPRF_MODE", "base")).lower()
    if mode_name not in SERVERS:
        raise ValueError(f"unknown VOPRF_MODE: {mode_name}")
    server_class = SERVERS[mode_name]

    private_key = config.get("VOPRF_PRIVATE_KEY")
    if private_key:
        if not isinstance(private_key, str):
            # from_prefixed_env는 숫자로만 된 값을 int로 읽는다
            raise ValueError("VOPRF_PRIVATE_KEY must be a quoted hex string")
        return server_class.from_private_key(deserialize_bytes(private_key))

    logger.info("no VOPRF_PRIVATE_KEY configured, generating a fresh key pair")
    return server_class()


def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_mapping(
        VOPRF_MODE="base",
        VOPRF_PRIVATE_KEY=None,
    )
    if test_config is None:
        # FLASK_VOPRF_MODE, FLASK_VOPRF_PRIVATE_KEY
        app.config.from_prefixed_env()
    else:
        app.config.from_mapping(test_config)

    server = build_server(app.config)
    init_voprf_bp(server)
    app.register_blueprint(voprf_bp)
    app.extensions["voprf_server"] = server

    logger.info("VOPRF server ready (%s mode)", server.mode.name.lower())
    return app


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_app().run(debug=True)
