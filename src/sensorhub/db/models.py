from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

SENSOR_COLLECTION = "sensor_data"
STATION_COLLECTION = "dublin_bikes"


@dataclass(frozen=True)
class Position:
    lat: float
    lng: float


@dataclass(frozen=True)
class StationRecord:
    station_number: int
    station_name: str
    address: str
    position: Position
    banking: bool = False
    bonus: bool = False
    bike_stands: int = 0
    available_bike_stands: int = 0
    available_bikes: int = 0
    status: str = "UNKNOWN"
    last_update: datetime | None = None

    def to_document(self) -> dict[str, Any]:
        return {
            "station_number": self.station_number,
            "station_name": self.station_name,
            "address": self.address,
            "position": {"lat": self.position.lat, "lng": self.position.lng},
            "banking": self.banking,
            "bonus": self.bonus,
            "bike_stands": self.bike_stands,
            "available_bike_stands": self.available_bike_stands,
            "available_bikes": self.available_bikes,
            "status": self.status,
            "last_update": self.last_update,
        }


@dataclass(frozen=True)
class CommitResult:
    success: bool
    total_added: int = 0
    batches: int = 0
    committed_chunks: int = 0
    error: str | None = None
