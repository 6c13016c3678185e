from __future__ import annotations

import logging

from ..config import Settings
from .firestore import FirestoreSink
from .memory import InMemorySink
from .sink import DurableSink

logger = logging.getLogger(__name__)


def create_sink(settings: Settings) -> DurableSink:
    if settings.firebase_credentials_path is None:
        logger.warning("FIREBASE_CREDENTIALS not set; documents are kept in memory only")
        return InMemorySink(retention=settings.memory_retention)
    return FirestoreSink.from_credentials(settings.firebase_credentials_path)


def is_durable(sink: DurableSink) -> bool:
    return isinstance(sink, FirestoreSink)
