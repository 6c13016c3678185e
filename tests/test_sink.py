from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from google.api_core.exceptions import ServiceUnavailable

from sensorhub.core.errors import SinkError
from sensorhub.core.session_buffer import SessionBuffer
from sensorhub.db.committer import BatchCommitter
from sensorhub.db.firestore import FirestoreSink
from sensorhub.db.memory import SERVER_TIMESTAMP, InMemorySink


def test_query_recent_returns_newest_first_with_ids() -> None:
    times = iter(
        datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(minutes=offset)
        for offset in range(3)
    )
    sink = InMemorySink(clock=lambda: next(times))

    async def scenario():
        for timestamp in (1, 2, 3):
            await sink.append_one(
                "sensor_data", {"timestamp": timestamp, "created_at": SERVER_TIMESTAMP}
            )
        return await sink.query_recent("sensor_data", 2)

    recent = asyncio.run(scenario())

    assert [document["timestamp"] for document in recent] == [3, 2]
    assert all(document["id"].startswith("sensor_data-") for document in recent)


def test_same_batch_orders_by_arrival() -> None:
    sink = InMemorySink(clock=lambda: datetime(2024, 1, 1, tzinfo=timezone.utc))
    documents = [{"n": index, "created_at": SERVER_TIMESTAMP} for index in range(3)]

    async def scenario():
        await sink.commit_batch("dublin_bikes", documents)
        return await sink.query_recent("dublin_bikes", 10)

    recent = asyncio.run(scenario())

    assert [document["n"] for document in recent] == [2, 1, 0]


def test_query_of_unknown_collection_is_empty() -> None:
    assert asyncio.run(InMemorySink().query_recent("missing", 5)) == []


def test_oversized_batch_is_rejected() -> None:
    sink = InMemorySink()

    with pytest.raises(SinkError):
        asyncio.run(sink.commit_batch("sensor_data", [{"n": 1}] * 501))

    assert sink.documents("sensor_data") == []


def test_retention_keeps_newest_documents_per_collection() -> None:
    sink = InMemorySink(retention=3)

    async def scenario():
        await sink.commit_batch("sensor_data", [{"n": index} for index in range(5)])
        await sink.append_one("dublin_bikes", {"n": 99})
        return await sink.query_recent("sensor_data", 10)

    recent = asyncio.run(scenario())

    assert [document["n"] for document in sink.documents("sensor_data")] == [2, 3, 4]
    assert [document["n"] for document in recent] == [4, 3, 2]
    assert len(sink.documents("dublin_bikes")) == 1


def test_retention_bounds_documents_across_sessions() -> None:
    sink = InMemorySink(retention=1000)
    buffer = SessionBuffer(BatchCommitter(sink))

    async def scenario():
        for _ in range(3):
            buffer.start_session()
            buffer.append_records([{"timestamp": index} for index in range(1000)])
            await buffer.wait_forwarding()

    asyncio.run(scenario())

    assert len(sink.documents("sensor_data")) == 1000


def test_retention_must_be_positive() -> None:
    with pytest.raises(ValueError):
        InMemorySink(retention=0)


def test_firestore_batch_writes_every_document_in_one_commit() -> None:
    client = MagicMock()
    batch = client.batch.return_value

    asyncio.run(FirestoreSink(client).commit_batch("sensor_data", [{"n": 1}, {"n": 2}]))

    client.collection.assert_called_with("sensor_data")
    assert batch.set.call_count == 2
    batch.commit.assert_called_once_with()


def test_firestore_query_merges_document_ids() -> None:
    client = MagicMock()
    snapshot = MagicMock(id="doc-1")
    snapshot.to_dict.return_value = {"timestamp": 1}
    query = client.collection.return_value.order_by.return_value.limit.return_value
    query.stream.return_value = [snapshot]

    recent = asyncio.run(FirestoreSink(client).query_recent("sensor_data", 10))

    assert recent == [{"id": "doc-1", "timestamp": 1}]
    client.collection.return_value.order_by.return_value.limit.assert_called_with(10)


def test_firestore_append_one_returns_new_document_id() -> None:
    client = MagicMock()
    client.collection.return_value.document.return_value.id = "doc-9"

    doc_id = asyncio.run(FirestoreSink(client).append_one("sensor_data", {"n": 1}))

    assert doc_id == "doc-9"


def test_firestore_errors_become_sink_errors() -> None:
    client = MagicMock()
    client.batch.return_value.commit.side_effect = ServiceUnavailable("backend down")

    with pytest.raises(SinkError, match="backend down"):
        asyncio.run(FirestoreSink(client).commit_batch("sensor_data", [{"n": 1}]))
