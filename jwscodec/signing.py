"""Signature creation and verification dispatched by :class:`Algorithm`."""

from __future__ import annotations

import logging
from typing import Union

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, hmac
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.serialization import load_pem_private_key, load_pem_public_key

from .errors import KeyParseError, UnsupportedAlgorithmError
from .header import Algorithm

logger = logging.getLogger(__name__)

KeyMaterial = Union[bytes, str]

HASH_ALGORITHMS = {
    256: hashes.SHA256,
    384: hashes.SHA384,
    512: hashes.SHA512,
}


def _key_bytes(key: KeyMaterial) -> bytes:
    if isinstance(key, str):
        return key.encode("utf-8")
    return bytes(key)


def _hash_for(algorithm: Algorithm) -> hashes.HashAlgorithm:
    return HASH_ALGORITHMS[algorithm.digest_bits]()


def load_rsa_private_key(key: KeyMaterial) -> rsa.RSAPrivateKey:
    """Load an unencrypted PEM RSA private key."""
    try:
        private_key = load_pem_private_key(_key_bytes(key), password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise KeyParseError(f"Could not load PEM private key: {exc}") from exc
    if not isinstance(private_key, rsa.RSAPrivateKey):
        raise KeyParseError("PEM private key is not an RSA key")
    return private_key


def load_rsa_public_key(key: KeyMaterial) -> rsa.RSAPublicKey:
    """Load a PEM RSA public key, or derive it from a PEM private key."""
    data = _key_bytes(key)
    if b"PRIVATE KEY" in data:
        return load_rsa_private_key(data).public_key()
    try:
        public_key = load_pem_public_key(data)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise KeyParseError(f"Could not load PEM public key: {exc}") from exc
    if not isinstance(public_key, rsa.RSAPublicKey):
        raise KeyParseError("PEM public key is not an RSA key")
    return public_key


class SignatureProvider:
    """Signs and verifies signing input for every supported algorithm.

    HMAC algorithms use the key bytes directly as the MAC secret. RSA
    algorithms expect PEM key material and use PKCS#1 v1.5 padding over the
    matching SHA-2 digest. Keys are loaded per call and never retained.
    """

    def sign(self, algorithm: Algorithm, key: KeyMaterial, message: bytes) -> bytes:
        """Return the signature of ``message``.

        Raises:
            UnsupportedAlgorithmError: For algorithms outside the HS and RS families.
            KeyParseError: If RSA key material cannot be loaded.
        """
        algorithm = Algorithm.parse(algorithm)
        if algorithm.is_hmac:
            mac = hmac.HMAC(_key_bytes(key), _hash_for(algorithm))
            mac.update(message)
            return mac.finalize()
        if algorithm.is_rsa:
            private_key = load_rsa_private_key(key)
            return private_key.sign(message, padding.PKCS1v15(), _hash_for(algorithm))
        raise UnsupportedAlgorithmError(algorithm)

    def verify(
        self, algorithm: Algorithm, key: KeyMaterial, signature: bytes, message: bytes
    ) -> bool:
        """Return ``True`` only if ``signature`` is valid for ``message``.

        Unsupported or unknown algorithms never verify. Unloadable RSA key
        material raises :class:`KeyParseError`.
        """
        try:
            algorithm = Algorithm.parse(algorithm)
        except UnsupportedAlgorithmError:
            logger.debug(f"Refusing to verify with unknown algorithm {algorithm!r}")
            return False
        if algorithm.is_hmac:
            mac = hmac.HMAC(_key_bytes(key), _hash_for(algorithm))
            mac.update(message)
            try:
                mac.verify(signature)
            except InvalidSignature:
                return False
            return True
        if algorithm.is_rsa:
            public_key = load_rsa_public_key(key)
            try:
                public_key.verify(signature, message, padding.PKCS1v15(), _hash_for(algorithm))
            except InvalidSignature:
                return False
            return True
        logger.debug(f"Refusing to verify with unsupported algorithm {algorithm.value}")
        return False


default_provider = SignatureProvider()


def sign(algorithm: Algorithm, key: KeyMaterial, message: bytes) -> bytes:
    """Sign ``message`` with the default provider."""
    return default_provider.sign(algorithm, key, message)


def verify(algorithm: Algorithm, key: KeyMaterial, signature: bytes, message: bytes) -> bool:
    """Verify ``signature`` with the default provider."""
    return default_provider.verify(algorithm, key, signature, message)


__all__ = [
    "KeyMaterial",
    "SignatureProvider",
    "default_provider",
    "load_rsa_private_key",
    "load_rsa_public_key",
    "sign",
    "verify",
]
