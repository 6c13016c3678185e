from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime, timezone
from typing import Any

import pytest

from sensorhub.core.errors import SinkError
from sensorhub.db.committer import BatchCommitter
from sensorhub.db.memory import InMemorySink

FIXED_NOW = datetime(2024, 1, 1, 12, 2, 30, tzinfo=timezone.utc)


class RecordingSink(InMemorySink):
    def __init__(self, clock: Callable[[], datetime]) -> None:
        super().__init__(clock=clock)
        self.commit_sizes: list[int] = []
        self.fail_commits: set[int] = set()
        self.fail_queries = False

    async def commit_batch(
        self, collection: str, documents: Sequence[Mapping[str, Any]]
    ) -> None:
        self.commit_sizes.append(len(documents))
        if len(self.commit_sizes) in self.fail_commits:
            raise SinkError("simulated outage")
        await super().commit_batch(collection, documents)

    async def query_recent(self, collection: str, limit: int) -> list[dict[str, Any]]:
        if self.fail_queries:
            raise SinkError("simulated outage")
        return await super().query_recent(collection, limit)


class FakeStationClient:
    base_url = "https://api.example.test/vls/v1/stations"
    contract = "dublin"

    def __init__(
        self,
        stations: list[dict[str, Any]] | None = None,
        error: Exception | None = None,
        gate: asyncio.Event | None = None,
    ) -> None:
        self.stations = stations or []
        self.error = error
        self.gate = gate
        self.calls = 0

    async def fetch_stations(self, api_key: str) -> list[dict[str, Any]]:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return list(self.stations)


@pytest.fixture
def clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture
def sink(clock: Callable[[], datetime]) -> RecordingSink:
    return RecordingSink(clock=clock)


@pytest.fixture
def committer(sink: RecordingSink) -> BatchCommitter:
    return BatchCommitter(sink)


@pytest.fixture
def make_client() -> Callable[..., FakeStationClient]:
    return FakeStationClient


@pytest.fixture
def station_payload() -> list[dict[str, Any]]:
    return [
        {
            "number": 42,
            "name": "SMITHFIELD NORTH",
            "address": "Smithfield North",
            "position": {"lat": 53.349562, "lng": -6.278198},
            "banking": True,
            "bonus": False,
            "bike_stands": 30,
            "available_bike_stands": 12,
            "available_bikes": 18,
            "status": "OPEN",
            "last_update": 1704110400000,
        },
        {
            "number": 7,
            "name": "HIGH STREET",
            "address": "High Street",
            "position": {"lat": 53.343368, "lng": -6.27012},
        },
    ]
