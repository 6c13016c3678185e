from __future__ import annotations

import asyncio
import json
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import urlopen

from ..core.errors import FetchError


class JCDecauxClient:
    def __init__(self, base_url: str, contract: str, timeout: float = 30) -> None:
        self.base_url = base_url
        self.contract = contract
        self.timeout = timeout

    def stations_url(self, api_key: str) -> str:
        query = urlencode({"contract": self.contract, "apiKey": api_key})
        return f"{self.base_url}?{query}"

    async def fetch_stations(self, api_key: str) -> list[dict[str, Any]]:
        return await asyncio.to_thread(self._fetch_json, self.stations_url(api_key))

    def _fetch_json(self, url: str) -> list[dict[str, Any]]:
        try:
            with urlopen(url, timeout=self.timeout) as response:
                payload = response.read()
        except HTTPError as exc:
            raise FetchError(f"API returned status {exc.code}: {exc.reason}", status=exc.code) from exc
        except URLError as exc:
            raise FetchError(f"Request failed: {exc.reason}") from exc

        stations = json.loads(payload)
        if not isinstance(stations, list):
            raise FetchError("Unexpected payload: expected a list of stations")
        return stations
