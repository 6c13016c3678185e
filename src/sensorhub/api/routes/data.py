from __future__ import annotations

from fastapi import APIRouter, Response

from ..deps import ServiceDep
from ..schemas.session import CountResponse, IngestRequest, IngestResponse


router = APIRouter(prefix="/api/data")


@router.post("")
async def ingest(service: ServiceDep, payload: IngestRequest | None = None) -> IngestResponse:
    return await service.ingest(payload.data if payload is not None else None)


@router.get("/count")
async def count(service: ServiceDep) -> CountResponse:
    return service.count()


@router.get("/download")
async def download(service: ServiceDep) -> Response:
    content, filename = service.download()
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
