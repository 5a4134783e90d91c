"""Pytest configuration and fixtures for Wirt API tests."""
import base64

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from fastapi.testclient import TestClient

from config_manager import GatewayConfig
from main import create_app


def _b64(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii")


@pytest.fixture
def private_key():
    """A fresh Ed25519 signing key."""
    return Ed25519PrivateKey.generate()


@pytest.fixture
def public_key_b64(private_key):
    raw = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )
    return _b64(raw)


@pytest.fixture
def sign(private_key):
    """Return a function producing the base64 signature of a message."""
    def _sign(message: str) -> str:
        return _b64(private_key.sign(message.encode("utf-8")))
    return _sign


@pytest.fixture
def config_file(tmp_path):
    wireguard_dir = tmp_path / "wireguard"
    wireguard_dir.mkdir()
    return wireguard_dir / "server.conf"


@pytest.fixture
def gateway_config(public_key_b64, config_file):
    return GatewayConfig(
        public_key=public_key_b64,
        config_file=config_file,
        reload_command=["true"],
    )


@pytest.fixture
def client(gateway_config):
    app = create_app(gateway_config)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
