from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any, TypeVar

import firebase_admin
from firebase_admin import credentials, firestore
from google.api_core.exceptions import GoogleAPIError

from ..core.errors import SinkError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FirestoreSink:
    server_timestamp = firestore.SERVER_TIMESTAMP

    def __init__(self, client: Any) -> None:
        self._client = client

    @classmethod
    def from_credentials(cls, path: str) -> FirestoreSink:
        try:
            app = firebase_admin.get_app()
        except ValueError:
            app = firebase_admin.initialize_app(credentials.Certificate(path))
            logger.info("Firebase Admin SDK initialized from %s", path)
        return cls(firestore.client(app))

    async def append_one(self, collection: str, document: Mapping[str, Any]) -> str:
        return await self._run(self._append_one, collection, dict(document))

    async def commit_batch(
        self, collection: str, documents: Sequence[Mapping[str, Any]]
    ) -> None:
        await self._run(self._commit_batch, collection, [dict(doc) for doc in documents])

    async def query_recent(self, collection: str, limit: int) -> list[dict[str, Any]]:
        return await self._run(self._query_recent, collection, limit)

    def _append_one(self, collection: str, document: dict[str, Any]) -> str:
        ref = self._client.collection(collection).document()
        ref.set(document)
        return ref.id

    def _commit_batch(self, collection: str, documents: list[dict[str, Any]]) -> None:
        batch = self._client.batch()
        target = self._client.collection(collection)
        for document in documents:
            batch.set(target.document(), document)
        batch.commit()

    def _query_recent(self, collection: str, limit: int) -> list[dict[str, Any]]:
        query = (
            self._client.collection(collection)
            .order_by("created_at", direction=firestore.Query.DESCENDING)
            .limit(limit)
        )
        return [{"id": snapshot.id, **snapshot.to_dict()} for snapshot in query.stream()]

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        try:
            return await asyncio.to_thread(func, *args)
        except GoogleAPIError as exc:
            raise SinkError(str(exc)) from exc
