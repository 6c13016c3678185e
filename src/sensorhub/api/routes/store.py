from __future__ import annotations

from fastapi import APIRouter

from ...db.models import SENSOR_COLLECTION, STATION_COLLECTION
from ..deps import ServiceDep
from ..schemas.store import RecentDocumentsResponse


router = APIRouter(prefix="/api/firestore")


@router.get("/sensor-data")
async def recent_sensor_data(
    service: ServiceDep, limit: str | None = None
) -> RecentDocumentsResponse:
    return await service.recent(SENSOR_COLLECTION, limit)


@router.get("/dublin-bikes")
async def recent_bikes_data(
    service: ServiceDep, limit: str | None = None
) -> RecentDocumentsResponse:
    return await service.recent(STATION_COLLECTION, limit)
