import json

from typer.testing import CliRunner

from jwscodec.cli import app
from jwscodec.encoding import b64url_decode

runner = CliRunner()


def _write_key(tmp_path, name="secret.key", data=b"secret"):
    path = tmp_path / name
    path.write_bytes(data)
    return str(path)


def test_encode_then_decode_claims(tmp_path):
    key_file = _write_key(tmp_path)

    result = runner.invoke(
        app,
        ["encode", "--claims", '{"iss": "svc-a", "exp": 2000000000}', "--key-file", key_file],
    )
    assert result.exit_code == 0, f"Encode failed: {result.output}"
    token = result.stdout.strip()
    assert token.count(".") == 2

    result = runner.invoke(app, ["decode", token, "--alg", "HS256", "--key-file", key_file])
    assert result.exit_code == 0, f"Decode failed: {result.output}"
    output = json.loads(result.stdout)
    assert output["header"] == {"alg": "HS256", "typ": "JWT"}
    assert output["claims"] == {"iss": "svc-a", "exp": 2000000000}


def test_decode_with_wrong_key_exits_with_error_code(tmp_path):
    key_file = _write_key(tmp_path)
    wrong_key_file = _write_key(tmp_path, "wrong.key", b"wrong")
    token = runner.invoke(app, ["encode", "--key-file", key_file]).stdout.strip()

    result = runner.invoke(app, ["decode", token, "--key-file", wrong_key_file])

    assert result.exit_code == 1
    assert "INVALID_SIGNATURE" in result.output


def test_encode_raw_body_with_header_members(tmp_path):
    key_file = _write_key(tmp_path)

    result = runner.invoke(
        app,
        [
            "encode",
            "--raw",
            "hello world",
            "--header",
            '{"typ": "text", "kid": "k1"}',
            "--alg",
            "HS384",
            "--key-file",
            key_file,
        ],
    )
    assert result.exit_code == 0, f"Encode failed: {result.output}"
    header_segment, body_segment, _ = result.stdout.strip().split(".")
    assert json.loads(b64url_decode(header_segment)) == {"alg": "HS384", "typ": "text", "kid": "k1"}
    assert b64url_decode(body_segment) == b"hello world"

    result = runner.invoke(
        app, ["decode", result.stdout.strip(), "--raw", "--alg", "HS384", "--key-file", key_file]
    )
    assert result.exit_code == 0, f"Decode failed: {result.output}"
    assert "hello world" in result.stdout


def test_encode_uses_config_file(tmp_path):
    key_file = _write_key(tmp_path)
    config_path = tmp_path / "custom.yaml"
    config_path.write_text(f"algorithm: HS512\nkey_file: {key_file}\n")

    result = runner.invoke(app, ["--config", str(config_path), "encode", "--claims", '{"sub": "a"}'])

    assert result.exit_code == 0, f"Encode failed: {result.output}"
    header_segment = result.stdout.strip().split(".")[0]
    assert json.loads(b64url_decode(header_segment))["alg"] == "HS512"


def test_encode_without_key_fails():
    result = runner.invoke(app, ["encode"])

    assert result.exit_code == 1
    assert "No key_file configured" in result.output


def test_encode_rejects_invalid_claims_json(tmp_path):
    result = runner.invoke(app, ["encode", "--claims", "{", "--key-file", _write_key(tmp_path)])

    assert result.exit_code == 1
    assert "JSON_PARSE_ERROR" in result.output


def test_inspect_prints_unverified_header(tmp_path):
    key_file = _write_key(tmp_path)
    token = runner.invoke(
        app, ["encode", "--header", '{"kid": "key-7"}', "--key-file", key_file]
    ).stdout.strip()

    result = runner.invoke(app, ["inspect", token])

    assert result.exit_code == 0
    assert "UNVERIFIED" in result.stdout
    assert '"kid": "key-7"' in result.stdout


def test_inspect_rejects_malformed_token():
    result = runner.invoke(app, ["inspect", "not-a-token"])

    assert result.exit_code == 1
    assert "MALFORMED_COMPACT_STRING" in result.output


def test_invalid_config_file_reports_error_without_traceback(tmp_path):
    config_path = tmp_path / "broken.yaml"
    config_path.write_text("decode_claims: maybe\n")

    result = runner.invoke(app, ["--config", str(config_path), "inspect", "a.b.c"])

    assert result.exit_code == 1
    assert "decode_claims" in result.output
    assert "Traceback" not in result.output
