"""Tests for configuration loading."""

import pytest

from jwscodec.config import JWSConfig, load_config
from jwscodec.errors import UnsupportedAlgorithmError
from jwscodec.header import Algorithm


def test_load_config_defaults_without_file():
    config = load_config()

    assert config.algorithm is Algorithm.HS256
    assert config.key_file is None
    assert config.decode_claims is True
    assert config.log_level == "WARNING"


def test_load_config_from_env(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        """
algorithm: RS384
key_file: /keys/private.pem
verify_key_file: /keys/public.pem
decode_claims: false
"""
    )
    monkeypatch.setenv("JWSCODEC_CONFIG", str(config_path))

    config = load_config()
    assert config.algorithm is Algorithm.RS384
    assert config.key_file == "/keys/private.pem"
    assert config.verify_key_file == "/keys/public.pem"
    assert config.decode_claims is False


def test_load_config_from_working_directory(tmp_path):
    (tmp_path / "jwscodec.yaml").write_text("algorithm: HS512\n")

    assert load_config().algorithm is Algorithm.HS512


def test_env_overrides_file_values(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("algorithm: HS256\nkey_file: from-file.key\n")
    monkeypatch.setenv("JWSCODEC_ALGORITHM", "RS256")
    monkeypatch.setenv("JWSCODEC_KEY_FILE", "from-env.key")
    monkeypatch.setenv("JWSCODEC_VERIFY_KEY_FILE", "from-env.pub")

    config = load_config(str(config_path))
    assert config.algorithm is Algorithm.RS256
    assert config.key_file == "from-env.key"
    assert config.verify_key_file == "from-env.pub"


def test_env_algorithm_must_be_known(monkeypatch):
    monkeypatch.setenv("JWSCODEC_ALGORITHM", "none")

    with pytest.raises(UnsupportedAlgorithmError):
        load_config()


def test_keys_are_read_from_disk(tmp_path):
    (tmp_path / "secret.key").write_bytes(b"secret")
    (tmp_path / "public.pem").write_bytes(b"public")

    config = JWSConfig(key_file=str(tmp_path / "secret.key"))
    assert config.signing_key() == b"secret"
    assert config.verification_key() == b"secret"

    config.verify_key_file = str(tmp_path / "public.pem")
    assert config.verification_key() == b"public"


def test_missing_key_configuration_raises():
    config = JWSConfig()

    with pytest.raises(ValueError):
        config.signing_key()
    with pytest.raises(ValueError):
        config.verification_key()
