from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime

from ..db.committer import BatchCommitter
from ..db.models import STATION_COLLECTION
from ..utils.time import iso_millis, next_tick, utc_now
from .jcdecaux_client import JCDecauxClient
from .monitoring import FetchOutcome, FetchStats, StatsSnapshot, describe_schedule
from .parser import to_station_records

logger = logging.getLogger(__name__)

Sleeper = Callable[[float], Awaitable[None]]


class StationPoller:
    """Scheduled Dublin Bikes fetcher.

    Fetches once at start and then on every wall-clock boundary of
    ``interval_seconds``. At most one fetch runs at a time: a trigger that
    arrives while a fetch is in flight waits for that fetch and gets its
    outcome.
    """

    def __init__(
        self,
        committer: BatchCommitter,
        client: JCDecauxClient,
        api_key: str | None,
        interval_seconds: int = 300,
        stats: FetchStats | None = None,
        clock: Callable[[], datetime] = utc_now,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.committer = committer
        self.client = client
        self.api_key = api_key
        self.interval_seconds = interval_seconds
        self.stats = stats if stats is not None else FetchStats()
        self._clock = clock
        self._sleep = sleep
        self._inflight: asyncio.Task[FetchOutcome] | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def get_stats(self) -> StatsSnapshot:
        return StatsSnapshot(
            fetch_count=self.stats.fetch_count,
            last_fetch_time=self.stats.last_fetch_time,
            last_fetch_status=self.stats.last_fetch_status,
            is_running=self.is_running,
            schedule=describe_schedule(self.interval_seconds),
            api_endpoint=self.client.base_url,
            contract_name=self.client.contract,
        )

    async def fetch_once(self) -> FetchOutcome:
        if self._inflight is None or self._inflight.done():
            self._inflight = asyncio.get_running_loop().create_task(self._fetch())
        else:
            logger.info("Fetch already in progress; waiting for it")
        return await asyncio.shield(self._inflight)

    async def trigger_manual_fetch(self) -> FetchOutcome:
        logger.info("Manual fetch triggered")
        return await self.fetch_once()

    async def run(self) -> None:
        logger.info(
            "Starting Dublin Bikes fetcher (%s)", describe_schedule(self.interval_seconds)
        )
        outcome = await self.fetch_once()
        if outcome.success:
            logger.info("Initial fetch completed successfully")
        else:
            logger.warning("Initial fetch failed: %s", outcome.error)

        while True:
            now = self._clock()
            wake_at = next_tick(now, self.interval_seconds)
            await self._sleep((wake_at - now).total_seconds())
            logger.info("Scheduled fetch triggered at %s", iso_millis(self._clock()))
            await self.fetch_once()

    def start(self) -> asyncio.Task[None]:
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(self.run())
        return self._task

    async def stop(self) -> None:
        for task in (self._task, self._inflight):
            if task is not None and not task.done():
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task
        self._task = None
        logger.info("Dublin Bikes fetcher stopped")

    async def _fetch(self) -> FetchOutcome:
        if not self.api_key:
            logger.error("JCDECAUX_API_KEY not found in environment variables")
            self.stats.last_fetch_status = "Error: Missing API key"
            return FetchOutcome(success=False, error="Missing API key")

        try:
            logger.info("Fetching Dublin Bikes data...")
            stations = await self.client.fetch_stations(self.api_key)
            records = to_station_records(stations)
            logger.info("Received %d Dublin Bikes stations", len(records))
            fetched_at = self._clock()
            result = await self.committer.commit(
                STATION_COLLECTION,
                [record.to_document() for record in records],
                shared_fields={"fetched_at": fetched_at},
            )
        except Exception as exc:
            logger.error("Error fetching Dublin Bikes data: %s", exc)
            self.stats.last_fetch_status = f"Error: {exc}"
            return FetchOutcome(success=False, error=str(exc))

        if not result.success:
            self.stats.last_fetch_status = f"Error: {result.error}"
            return FetchOutcome(success=False, error=result.error)

        self.stats.fetch_count += 1
        self.stats.last_fetch_time = iso_millis(self._clock())
        self.stats.last_fetch_status = f"Success: {len(records)} stations"
        logger.info(
            "Successfully stored Dublin Bikes data (fetch #%d)", self.stats.fetch_count
        )
        return FetchOutcome(
            success=True,
            stations_count=len(records),
            fetch_count=self.stats.fetch_count,
        )
