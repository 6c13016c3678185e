from __future__ import annotations

import logging
import math
from collections.abc import Iterator, Mapping, Sequence
from typing import Any

from ..core.errors import SinkError
from .models import CommitResult
from .sink import MAX_BATCH_WRITES, DurableSink

logger = logging.getLogger(__name__)


def chunked(
    records: Sequence[Mapping[str, Any]], size: int
) -> Iterator[Sequence[Mapping[str, Any]]]:
    for start in range(0, len(records), size):
        yield records[start : start + size]


class BatchCommitter:
    """Writes record lists to the sink in sequential, individually atomic chunks.

    A failed chunk ends the run; chunks committed before it stay committed.
    """

    def __init__(self, sink: DurableSink, chunk_size: int = MAX_BATCH_WRITES) -> None:
        if not 1 <= chunk_size <= MAX_BATCH_WRITES:
            raise ValueError(f"chunk_size must be between 1 and {MAX_BATCH_WRITES}")
        self.sink = sink
        self.chunk_size = chunk_size

    async def commit(
        self,
        collection: str,
        records: Sequence[Mapping[str, Any]],
        shared_fields: Mapping[str, Any] | None = None,
    ) -> CommitResult:
        extra = dict(shared_fields or {})
        committed = 0
        for chunk in chunked(records, self.chunk_size):
            documents = [
                {**record, **extra, "created_at": self.sink.server_timestamp}
                for record in chunk
            ]
            try:
                await self.sink.commit_batch(collection, documents)
            except SinkError as exc:
                logger.error(
                    "Commit to %s failed after %d of %d chunks: %s",
                    collection,
                    committed,
                    math.ceil(len(records) / self.chunk_size),
                    exc,
                )
                return CommitResult(
                    success=False, committed_chunks=committed, error=str(exc)
                )
            committed += 1

        if committed:
            logger.info(
                "Committed %d records to %s in %d batches", len(records), collection, committed
            )
        return CommitResult(
            success=True,
            total_added=len(records),
            batches=committed,
            committed_chunks=committed,
        )
