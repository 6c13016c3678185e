from __future__ import annotations

import pytest

from sensorhub import config

_VARIABLES = (
    "HOST",
    "PORT",
    "JCDECAUX_API_KEY",
    "JCDECAUX_API_URL",
    "JCDECAUX_CONTRACT",
    "FETCH_INTERVAL_SECONDS",
    "FETCH_TIMEOUT_SECONDS",
    "FIREBASE_CREDENTIALS",
    "MEMORY_RETENTION",
    "CORS_ORIGINS",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _VARIABLES:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    settings = config.load_settings()

    assert settings.port == 10000
    assert settings.jcdecaux_api_key is None
    assert settings.jcdecaux_api_url == "https://api.jcdecaux.com/vls/v1/stations"
    assert settings.jcdecaux_contract == "dublin"
    assert settings.fetch_interval_seconds == 300
    assert settings.firebase_credentials_path is None
    assert settings.memory_retention == 10000
    assert settings.cors_origins == ["*"]
    assert settings.log_level == "INFO"


def test_values_come_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("JCDECAUX_API_KEY", "secret")
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000, http://127.0.0.1:3000")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = config.load_settings()

    assert settings.port == 8080
    assert settings.jcdecaux_api_key == "secret"
    assert settings.cors_origins == ["http://localhost:3000", "http://127.0.0.1:3000"]
    assert settings.log_level == "DEBUG"


def test_blank_api_key_counts_as_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JCDECAUX_API_KEY", "   ")

    assert config.jcdecaux_api_key() is None


def test_invalid_port_names_the_variable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "ten-thousand")

    with pytest.raises(ValueError, match="PORT"):
        config.port()


def test_memory_retention_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MEMORY_RETENTION", "250")

    assert config.load_settings().memory_retention == 250
