from __future__ import annotations

import itertools
from collections import deque
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime, timezone
from typing import Any

from ..core.errors import SinkError
from ..utils.time import utc_now
from .sink import MAX_BATCH_WRITES


class _ServerTimestamp:
    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()
_OLDEST = datetime.min.replace(tzinfo=timezone.utc)
DEFAULT_RETENTION = 10_000


class InMemorySink:
    """Process-local document store used when no Firestore project is set up.

    Each collection keeps only its newest ``retention`` documents.
    """

    server_timestamp = SERVER_TIMESTAMP

    def __init__(
        self,
        clock: Callable[[], datetime] = utc_now,
        retention: int = DEFAULT_RETENTION,
    ) -> None:
        if retention < 1:
            raise ValueError("retention must be at least 1")
        self._clock = clock
        self._retention = retention
        self._collections: dict[str, deque[tuple[int, dict[str, Any]]]] = {}
        self._sequence = itertools.count(1)

    async def append_one(self, collection: str, document: Mapping[str, Any]) -> str:
        stored = self._store(collection, [document])
        return stored[0]

    async def commit_batch(
        self, collection: str, documents: Sequence[Mapping[str, Any]]
    ) -> None:
        if len(documents) > MAX_BATCH_WRITES:
            raise SinkError(
                f"batch of {len(documents)} writes exceeds limit of {MAX_BATCH_WRITES}"
            )
        self._store(collection, documents)

    async def query_recent(self, collection: str, limit: int) -> list[dict[str, Any]]:
        rows = self._collections.get(collection, ())
        ordered = sorted(
            rows,
            key=lambda row: (row[1].get("created_at") or _OLDEST, row[0]),
            reverse=True,
        )
        return [dict(document) for _, document in ordered[:limit]]

    def documents(self, collection: str) -> list[dict[str, Any]]:
        return [dict(document) for _, document in self._collections.get(collection, [])]

    def _store(
        self, collection: str, documents: Sequence[Mapping[str, Any]]
    ) -> list[str]:
        now = self._clock()
        rows = self._collections.setdefault(collection, deque(maxlen=self._retention))
        ids: list[str] = []
        for document in documents:
            sequence = next(self._sequence)
            doc_id = f"{collection}-{sequence:08d}"
            resolved = {
                key: now if value is SERVER_TIMESTAMP else value
                for key, value in document.items()
            }
            resolved["id"] = doc_id
            rows.append((sequence, resolved))
            ids.append(doc_id)
        return ids
