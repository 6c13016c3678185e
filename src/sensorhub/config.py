from __future__ import annotations

import os
from dataclasses import dataclass


def _get_env(name: str, default: str | None = None) -> str:
    value = os.getenv(name, default)
    if value is None:
        raise ValueError(f"Missing required environment variable: {name}")
    return value


def _get_optional_env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _get_number(name: str, default: str, cast: type[int] | type[float]) -> int | float:
    raw = _get_env(name, default)
    try:
        return cast(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid value for {name}: {raw!r}") from exc


def host() -> str:
    return _get_env("HOST", "0.0.0.0")


def port() -> int:
    return int(_get_number("PORT", "10000", int))


def jcdecaux_api_key() -> str | None:
    return _get_optional_env("JCDECAUX_API_KEY")


def jcdecaux_api_url() -> str:
    return _get_env("JCDECAUX_API_URL", "https://api.jcdecaux.com/vls/v1/stations")


def jcdecaux_contract() -> str:
    return _get_env("JCDECAUX_CONTRACT", "dublin")


def fetch_interval_seconds() -> int:
    return int(_get_number("FETCH_INTERVAL_SECONDS", "300", int))


def fetch_timeout_seconds() -> float:
    return float(_get_number("FETCH_TIMEOUT_SECONDS", "30", float))


def firebase_credentials_path() -> str | None:
    return _get_optional_env("FIREBASE_CREDENTIALS")


def memory_retention() -> int:
    return int(_get_number("MEMORY_RETENTION", "10000", int))


def cors_origins() -> list[str]:
    raw = _get_env("CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def log_level() -> str:
    return _get_env("LOG_LEVEL", "INFO").upper()


@dataclass(frozen=True)
class Settings:
    host: str
    port: int
    jcdecaux_api_key: str | None
    jcdecaux_api_url: str
    jcdecaux_contract: str
    fetch_interval_seconds: int
    fetch_timeout_seconds: float
    firebase_credentials_path: str | None
    memory_retention: int
    cors_origins: list[str]
    log_level: str


def load_settings() -> Settings:
    return Settings(
        host=host(),
        port=port(),
        jcdecaux_api_key=jcdecaux_api_key(),
        jcdecaux_api_url=jcdecaux_api_url(),
        jcdecaux_contract=jcdecaux_contract(),
        fetch_interval_seconds=fetch_interval_seconds(),
        fetch_timeout_seconds=fetch_timeout_seconds(),
        firebase_credentials_path=firebase_credentials_path(),
        memory_retention=memory_retention(),
        cors_origins=cors_origins(),
        log_level=log_level(),
    )
