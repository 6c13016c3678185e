from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from .common import CamelModel


class IngestRequest(BaseModel):
    data: Any = None


class FeatureFlags(CamelModel):
    firestore: bool
    dublin_bikes: bool


class HealthResponse(CamelModel):
    status: str = "running"
    message: str = "Sensor Data Collection API"
    data_points: int
    session_id: str | None = None
    features: FeatureFlags


class SessionStartResponse(CamelModel):
    success: bool = True
    session_id: str
    message: str = "Session started"


class IngestResponse(CamelModel):
    success: bool = True
    total_points: int
    message: str
    stored_to_cloud: bool


class CountResponse(CamelModel):
    count: int
    session_id: str | None = None


class SessionStopResponse(CamelModel):
    success: bool = True
    message: str = "Session stopped"
    data_points: int
    session_id: str | None = None
