from __future__ import annotations

from fastapi import APIRouter

from ..deps import ServiceDep
from ..schemas.session import SessionStartResponse, SessionStopResponse


router = APIRouter(prefix="/api/session")


@router.post("/start")
async def start_session(service: ServiceDep) -> SessionStartResponse:
    return service.start_session()


@router.post("/stop")
async def stop_session(service: ServiceDep) -> SessionStopResponse:
    return service.stop_session()
