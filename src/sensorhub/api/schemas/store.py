from __future__ import annotations

from typing import Any

from .common import CamelModel


class RecentDocumentsResponse(CamelModel):
    success: bool = True
    data: list[dict[str, Any]]
    count: int
