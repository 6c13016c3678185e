from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Any

from ..db.models import Position, StationRecord
from ..utils.time import from_epoch_millis


def last_update(raw: dict[str, Any]) -> datetime | None:
    value = raw.get("last_update")
    if not value:
        return None
    return from_epoch_millis(int(value))


def to_station_record(raw: dict[str, Any]) -> StationRecord:
    position = raw["position"]
    return StationRecord(
        station_number=int(raw["number"]),
        station_name=raw.get("name", ""),
        address=raw.get("address", ""),
        position=Position(lat=float(position["lat"]), lng=float(position["lng"])),
        banking=bool(raw.get("banking") or False),
        bonus=bool(raw.get("bonus") or False),
        bike_stands=int(raw.get("bike_stands") or 0),
        available_bike_stands=int(raw.get("available_bike_stands") or 0),
        available_bikes=int(raw.get("available_bikes") or 0),
        status=raw.get("status") or "UNKNOWN",
        last_update=last_update(raw),
    )


def to_station_records(stations: Iterable[dict[str, Any]]) -> list[StationRecord]:
    return [to_station_record(station) for station in stations]
