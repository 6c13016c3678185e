from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from pydantic import ValidationError as PydanticValidationError

from ..api.schemas.sensor import SensorRecord
from ..db.committer import BatchCommitter
from ..db.models import SENSOR_COLLECTION, CommitResult
from .csv_export import render_csv
from .errors import EmptyError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppendResult:
    accepted: int
    total_points: int
    forwarding: asyncio.Task[CommitResult] | None = None


@dataclass(frozen=True)
class SessionSummary:
    point_count: int
    session_id: str | None


class SessionBuffer:
    """In-memory record buffer for the single active ingestion session.

    All state changes are synchronous, so they never interleave with each
    other on the event loop. Records handed to the committer are copied at
    append time, which keeps a later ``start_session`` from affecting a
    forward that is still in flight.
    """

    def __init__(
        self,
        committer: BatchCommitter | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._committer = committer
        self._clock = clock
        self._session_id: str | None = None
        self._records: list[SensorRecord] = []
        self._last_id_ms = 0
        self._pending: set[asyncio.Task[CommitResult]] = set()

    @property
    def session_id(self) -> str | None:
        return self._session_id

    def start_session(self) -> str:
        now_ms = int(self._clock() * 1000)
        id_ms = max(now_ms, self._last_id_ms + 1)
        self._last_id_ms = id_ms
        self._session_id = str(id_ms)
        self._records = []
        logger.info("New session started: %s", self._session_id)
        return self._session_id

    def append_records(self, records: object) -> AppendResult:
        if records is None or not isinstance(records, (list, tuple)):
            raise ValidationError("Invalid data format")
        try:
            parsed = [SensorRecord.model_validate(item) for item in records]
        except PydanticValidationError as exc:
            raise ValidationError(
                f"Invalid sensor record ({exc.error_count()} errors)"
            ) from exc

        self._records.extend(parsed)
        logger.info("Received %d data points. Total: %d", len(parsed), len(self._records))
        return AppendResult(
            accepted=len(parsed),
            total_points=len(self._records),
            forwarding=self._forward(parsed),
        )

    def count(self) -> int:
        return len(self._records)

    def export_csv(self) -> bytes:
        if not self._records:
            raise EmptyError("No data available")
        return render_csv(list(self._records))

    def stop_session(self) -> SessionSummary:
        logger.info("Session stopped: %s Points: %d", self._session_id, len(self._records))
        return SessionSummary(point_count=len(self._records), session_id=self._session_id)

    async def wait_forwarding(self) -> None:
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    def _forward(self, records: list[SensorRecord]) -> asyncio.Task[CommitResult] | None:
        if self._committer is None:
            return None
        documents = [record.to_document() for record in records]
        task = asyncio.get_running_loop().create_task(
            self._committer.commit(SENSOR_COLLECTION, documents)
        )
        self._pending.add(task)
        task.add_done_callback(self._forward_done)
        return task

    def _forward_done(self, task: asyncio.Task[CommitResult]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Forwarding sensor records failed", exc_info=exc)
        elif not task.result().success:
            logger.warning("Sensor records kept in memory only: %s", task.result().error)
