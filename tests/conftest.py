from datetime import datetime, timezone

import pytest

from sas.provider import SharedAccessSignatureTokenProvider


@pytest.fixture
def frozen_now() -> datetime:
    return datetime(2021, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def provider(frozen_now) -> SharedAccessSignatureTokenProvider:
    return SharedAccessSignatureTokenProvider(
        "mykey",
        "verysecretvalue",
        clock=lambda: frozen_now,
    )


@pytest.fixture
def clean_env(monkeypatch) -> None:
    for key in (
        "RELAY_SAS_KEY_NAME",
        "RELAY_SAS_KEY",
        "RELAY_SAS_TTL_SECONDS",
        "RELAY_SAS_DEBUG",
    ):
        monkeypatch.delenv(key, raising=False)
