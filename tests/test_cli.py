from datetime import timedelta

import pytest

import sasgen
from sas.provider import SharedAccessSignatureTokenProvider


@pytest.fixture(autouse=True)
def _no_env_file(monkeypatch, clean_env) -> None:
    monkeypatch.setattr(sasgen, "load_env", lambda: None)
    monkeypatch.setattr(sasgen, "setup_logging", lambda: False)


@pytest.fixture
def configured(monkeypatch) -> None:
    monkeypatch.setenv("RELAY_SAS_KEY_NAME", "listen")
    monkeypatch.setenv("RELAY_SAS_KEY", "listen-secret")


def test_build_prints_token(configured, capsys) -> None:
    assert sasgen.main(["build", "https://relay.example.com/Hybrid", "--ttl", "60"]) == 0

    out = capsys.readouterr().out.strip()
    assert out.startswith("SharedAccessSignature sr=https%3A%2F%2Frelay.example.com%2FHybrid&sig=")
    assert out.endswith("&skn=listen")


def test_build_without_credentials(capsys) -> None:
    assert sasgen.main(["build", "https://relay.example.com/"]) == 1

    assert "Missing required environment variables" in capsys.readouterr().err


def test_inspect_prints_fields(capsys) -> None:
    provider = SharedAccessSignatureTokenProvider("listen", "secret")
    token = provider.build_signature("https://Example.com/A/B", timedelta(hours=1))

    assert sasgen.main(["inspect", token]) == 0

    out = capsys.readouterr().out
    assert "audience:   https://Example.com/A/B" in out
    assert "key name:   listen" in out
    assert "expired:    no" in out


def test_inspect_malformed(capsys) -> None:
    assert sasgen.main(["inspect", "garbage"]) == 1

    assert capsys.readouterr().err.startswith("error: ")


def test_verify_valid(configured, capsys) -> None:
    provider = SharedAccessSignatureTokenProvider("listen", "listen-secret")
    token = provider.build_signature("https://relay.example.com/", timedelta(hours=1))

    assert sasgen.main(["verify", token]) == 0
    assert "signature: valid" in capsys.readouterr().out


def test_verify_forged(configured, capsys) -> None:
    provider = SharedAccessSignatureTokenProvider("listen", "other-secret")
    token = provider.build_signature("https://relay.example.com/", timedelta(hours=1))

    assert sasgen.main(["verify", token]) == 1
    assert "signature: INVALID" in capsys.readouterr().out


def test_verify_other_key_name(configured, capsys) -> None:
    provider = SharedAccessSignatureTokenProvider("send", "listen-secret")
    token = provider.build_signature("https://relay.example.com/", timedelta(hours=1))

    assert sasgen.main(["verify", token]) == 1
    assert "not the configured key" in capsys.readouterr().out


def test_inspect_out_of_range_expiry(capsys) -> None:
    token = "SharedAccessSignature sr=x&sig=abc&se=99999999999999&skn=listen"

    assert sasgen.main(["inspect", token]) == 1

    assert "out of range" in capsys.readouterr().err
