from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import time
from collections.abc import Sequence

import uvicorn

from .app.main import create_app
from .config import Settings, load_settings
from .core.errors import SinkError
from .db.engine import create_sink
from .db.models import SENSOR_COLLECTION
from .services.ingestion_service import IngestionService

logger = logging.getLogger(__name__)

TEST_READING = {
    "latitude": 53.3498,
    "longitude": -6.2603,
    "altitude": 10.0,
    "speed": 1.5,
    "accuracy": 5.0,
    "heading": 180.0,
    "accel_x": 0.5,
    "accel_y": 0.3,
    "accel_z": 9.8,
    "accel_magnitude": 9.85,
}


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def serve(settings: Settings) -> int:
    app = create_app(settings=settings)
    logger.info("Sensor API running on port %d", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
    return 0


async def poll(settings: Settings) -> int:
    service = IngestionService.from_settings(settings)
    try:
        await service.poller.start()
    finally:
        await service.poller.stop()
    return 0


async def check_store(settings: Settings) -> int:
    sink = create_sink(settings)
    document = {
        "timestamp": int(time.time() * 1000),
        **TEST_READING,
        "test": True,
        "message": "Store connection test",
        "created_at": sink.server_timestamp,
    }
    try:
        doc_id = await sink.append_one(SENSOR_COLLECTION, document)
        recent = await sink.query_recent(SENSOR_COLLECTION, 5)
    except SinkError as exc:
        logger.error("Store check failed: %s", exc)
        return 1

    logger.info("Test document written: %s", doc_id)
    logger.info("Read back %d recent %s documents", len(recent), SENSOR_COLLECTION)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sensorhub")
    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("serve", help="run the HTTP API with the station poller")
    commands.add_parser("poll", help="run only the Dublin Bikes poller")
    commands.add_parser("check-store", help="write and read back a test document")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings()
    configure_logging(settings.log_level)

    if args.command == "serve":
        return serve(settings)
    if args.command == "poll":
        with contextlib.suppress(KeyboardInterrupt):
            return asyncio.run(poll(settings))
        return 0
    return asyncio.run(check_store(settings))


if __name__ == "__main__":
    raise SystemExit(main())
