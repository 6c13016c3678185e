from __future__ import annotations

import asyncio
import logging

from ..api.schemas.bikes import FetchStatsResponse, ManualFetchResponse
from ..api.schemas.session import (
    CountResponse,
    FeatureFlags,
    HealthResponse,
    IngestResponse,
    SessionStartResponse,
    SessionStopResponse,
)
from ..api.schemas.store import RecentDocumentsResponse
from ..config import Settings
from ..core.errors import FetchError
from ..core.session_buffer import AppendResult, SessionBuffer
from ..db.committer import BatchCommitter
from ..db.engine import create_sink, is_durable
from ..ingest.jcdecaux_client import JCDecauxClient
from ..ingest.poller import StationPoller

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 100
MAX_LIMIT = 1000


def coerce_limit(value: object, default: int = DEFAULT_LIMIT, maximum: int = MAX_LIMIT) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        limit = int(str(value).strip())
    except ValueError:
        return default
    return max(1, min(limit, maximum))


class IngestionService:
    def __init__(
        self,
        buffer: SessionBuffer,
        committer: BatchCommitter,
        poller: StationPoller,
        durable_store: bool = False,
    ) -> None:
        self.buffer = buffer
        self.committer = committer
        self.poller = poller
        self.durable_store = durable_store

    @classmethod
    def from_settings(cls, settings: Settings) -> IngestionService:
        sink = create_sink(settings)
        committer = BatchCommitter(sink)
        client = JCDecauxClient(
            settings.jcdecaux_api_url,
            settings.jcdecaux_contract,
            timeout=settings.fetch_timeout_seconds,
        )
        poller = StationPoller(
            committer,
            client,
            api_key=settings.jcdecaux_api_key,
            interval_seconds=settings.fetch_interval_seconds,
        )
        return cls(
            SessionBuffer(committer),
            committer,
            poller,
            durable_store=is_durable(sink),
        )

    def health(self) -> HealthResponse:
        return HealthResponse(
            data_points=self.buffer.count(),
            session_id=self.buffer.session_id,
            features=FeatureFlags(
                firestore=self.durable_store,
                dublin_bikes=bool(self.poller.api_key),
            ),
        )

    def start_session(self) -> SessionStartResponse:
        return SessionStartResponse(session_id=self.buffer.start_session())

    async def ingest(self, data: object) -> IngestResponse:
        appended = self.buffer.append_records(data)
        return IngestResponse(
            total_points=appended.total_points,
            message=f"Received {appended.accepted} points",
            stored_to_cloud=await self._stored_to_cloud(appended),
        )

    def count(self) -> CountResponse:
        return CountResponse(count=self.buffer.count(), session_id=self.buffer.session_id)

    def download(self) -> tuple[bytes, str]:
        content = self.buffer.export_csv()
        filename = f"sensor_data_{self.buffer.session_id or 'null'}.csv"
        logger.info("CSV downloaded: %d points", self.buffer.count())
        return content, filename

    def stop_session(self) -> SessionStopResponse:
        summary = self.buffer.stop_session()
        return SessionStopResponse(
            data_points=summary.point_count, session_id=summary.session_id
        )

    async def recent(self, collection: str, limit: object) -> RecentDocumentsResponse:
        documents = await self.committer.sink.query_recent(collection, coerce_limit(limit))
        return RecentDocumentsResponse(data=documents, count=len(documents))

    def fetch_stats(self) -> FetchStatsResponse:
        stats = self.poller.get_stats()
        return FetchStatsResponse(
            fetch_count=stats.fetch_count,
            last_fetch_time=stats.last_fetch_time,
            last_fetch_status=stats.last_fetch_status,
            is_running=stats.is_running,
            schedule=stats.schedule,
            api_endpoint=stats.api_endpoint,
            contract_name=stats.contract_name,
        )

    async def trigger_fetch(self) -> ManualFetchResponse:
        outcome = await self.poller.trigger_manual_fetch()
        if not outcome.success:
            raise FetchError(outcome.error or "Fetch failed")
        return ManualFetchResponse(stations_count=outcome.stations_count)

    async def _stored_to_cloud(self, appended: AppendResult) -> bool:
        if appended.forwarding is None:
            return False
        try:
            result = await asyncio.shield(appended.forwarding)
        except Exception:
            # already logged by the buffer's completion callback
            return False
        return result.success and self.durable_store
