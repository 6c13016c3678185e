from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

MEASUREMENT_FIELDS: tuple[str, ...] = (
    "latitude",
    "longitude",
    "altitude",
    "speed",
    "accuracy",
    "heading",
    "accel_x",
    "accel_y",
    "accel_z",
    "accel_magnitude",
)


class SensorRecord(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    timestamp: int
    latitude: float | None = None
    longitude: float | None = None
    altitude: float | None = None
    speed: float | None = None
    accuracy: float | None = None
    heading: float | None = None
    accel_x: float | None = None
    accel_y: float | None = None
    accel_z: float | None = None
    accel_magnitude: float | None = None

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)
