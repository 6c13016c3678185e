from __future__ import annotations

from .common import CamelModel


class FetchStatsResponse(CamelModel):
    fetch_count: int
    last_fetch_time: str | None = None
    last_fetch_status: str
    is_running: bool
    schedule: str
    api_endpoint: str
    contract_name: str


class ManualFetchResponse(CamelModel):
    success: bool = True
    message: str = "Dublin Bikes data fetched successfully"
    stations_count: int
