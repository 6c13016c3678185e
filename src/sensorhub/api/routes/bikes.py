from __future__ import annotations

from fastapi import APIRouter

from ..deps import ServiceDep
from ..schemas.bikes import FetchStatsResponse, ManualFetchResponse


router = APIRouter(prefix="/api/dublin-bikes")


@router.get("/stats")
async def fetch_stats(service: ServiceDep) -> FetchStatsResponse:
    return service.fetch_stats()


@router.post("/fetch")
async def trigger_fetch(service: ServiceDep) -> ManualFetchResponse:
    return await service.trigger_fetch()
