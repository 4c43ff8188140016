"""
Shared fixtures: RSA key pairs and configurations.
"""

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from fintecture_core.config import FintectureConfig


def _generate_pem() -> str:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()


@pytest.fixture(scope="session")
def private_key_pem() -> str:
    return _generate_pem()


@pytest.fixture(scope="session")
def other_private_key_pem() -> str:
    return _generate_pem()


@pytest.fixture(scope="session")
def public_key_pem(private_key_pem) -> str:
    key = serialization.load_pem_private_key(private_key_pem.encode(), password=None)
    return key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()


@pytest.fixture
def config(private_key_pem) -> FintectureConfig:
    return FintectureConfig(
        app_id="app-123",
        app_secret="secret",
        private_key=private_key_pem,
    )
