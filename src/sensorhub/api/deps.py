from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from ..services.ingestion_service import IngestionService


def get_service(request: Request) -> IngestionService:
    return request.app.state.service


ServiceDep = Annotated[IngestionService, Depends(get_service)]
