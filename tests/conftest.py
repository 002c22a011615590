"""Shared fixtures for jwscodec tests."""

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa


def generate_rsa_keys():
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )
    public_pem = key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return private_pem, public_pem


@pytest.fixture(scope="session")
def rsa_keys():
    """PEM encoded ``(private, public)`` RSA key pair."""
    return generate_rsa_keys()


@pytest.fixture(scope="session")
def other_rsa_keys():
    return generate_rsa_keys()


@pytest.fixture(scope="session")
def ec_private_pem():
    key = ec.generate_private_key(ec.SECP256R1())
    return key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch, tmp_path):
    """Keep config lookups away from the developer's environment."""
    for name in (
        "JWSCODEC_CONFIG",
        "JWSCODEC_ALGORITHM",
        "JWSCODEC_KEY_FILE",
        "JWSCODEC_VERIFY_KEY_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
