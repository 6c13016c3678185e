from __future__ import annotations

from fastapi import APIRouter

from ..deps import ServiceDep
from ..schemas.session import HealthResponse


router = APIRouter()


@router.get("/")
async def health(service: ServiceDep) -> HealthResponse:
    return service.health()
