from __future__ import annotations

from dataclasses import dataclass


@dataclass
class FetchStats:
    fetch_count: int = 0
    last_fetch_time: str | None = None
    last_fetch_status: str = "Not started"


@dataclass(frozen=True)
class FetchOutcome:
    success: bool
    stations_count: int = 0
    fetch_count: int = 0
    error: str | None = None


@dataclass(frozen=True)
class StatsSnapshot:
    fetch_count: int
    last_fetch_time: str | None
    last_fetch_status: str
    is_running: bool
    schedule: str
    api_endpoint: str
    contract_name: str


def describe_schedule(interval_seconds: int) -> str:
    if interval_seconds % 60:
        return f"Every {interval_seconds} seconds"
    minutes = interval_seconds // 60
    return "Every minute" if minutes == 1 else f"Every {minutes} minutes"
