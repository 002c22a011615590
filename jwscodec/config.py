from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel

from .header import Algorithm


class JWSConfig(BaseModel):
    """Defaults for applications that encode and decode tokens."""

    algorithm: Algorithm = Algorithm.HS256
    key_file: Optional[str] = None
    verify_key_file: Optional[str] = None
    decode_claims: bool = True
    log_level: str = "WARNING"

    def signing_key(self) -> bytes:
        """Read the signing key (HMAC secret or PEM private key) from disk."""
        if not self.key_file:
            raise ValueError("No key_file configured")
        return Path(self.key_file).expanduser().read_bytes()

    def verification_key(self) -> bytes:
        """Read the verification key, falling back to the signing key file."""
        path = self.verify_key_file or self.key_file
        if not path:
            raise ValueError("No verify_key_file or key_file configured")
        return Path(path).expanduser().read_bytes()


def load_config(path: Optional[str] = None) -> JWSConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to JWSCODEC_CONFIG env
            variable or 'jwscodec.yaml' in the current directory.
    """

    config_path = path or os.getenv("JWSCODEC_CONFIG", "jwscodec.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = JWSConfig(**data)
    else:
        config = JWSConfig()

    env_algorithm = os.getenv("JWSCODEC_ALGORITHM")
    if env_algorithm:
        config.algorithm = Algorithm.parse(env_algorithm)
    env_key_file = os.getenv("JWSCODEC_KEY_FILE")
    if env_key_file:
        config.key_file = env_key_file
    env_verify_key_file = os.getenv("JWSCODEC_VERIFY_KEY_FILE")
    if env_verify_key_file:
        config.verify_key_file = env_verify_key_file
    return config
