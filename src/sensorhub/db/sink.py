from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

# Firestore rejects write batches above this size.
MAX_BATCH_WRITES = 500


class DurableSink(Protocol):
    """Append-only document store with recency-ordered reads.

    ``server_timestamp`` is a sentinel value; any document field holding it is
    replaced by the store's own clock when the write is applied.
    """

    @property
    def server_timestamp(self) -> object:  # pragma: no cover - protocol
        ...

    async def append_one(
        self, collection: str, document: Mapping[str, Any]
    ) -> str:  # pragma: no cover - protocol
        ...

    async def commit_batch(
        self, collection: str, documents: Sequence[Mapping[str, Any]]
    ) -> None:  # pragma: no cover - protocol
        ...

    async def query_recent(
        self, collection: str, limit: int
    ) -> list[dict[str, Any]]:  # pragma: no cover - protocol
        ...
