"""HTTP client for the time-series stats backend."""

from __future__ import annotations

import os
from collections.abc import Callable
from datetime import datetime

import aiohttp
from pydantic import BaseModel, ValidationError

from utils.settings_store import deep_log, get_settings

TIME_DATA_PATH = "/time-data"


class StatsBackendError(RuntimeError):
    """The backend answered with a non-2xx status or an unexpected payload."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class TimeRecord(BaseModel):
    id: int
    date: datetime
    seconds: int


class TimeDataResponse(BaseModel):
    data: list[TimeRecord]


class StatsClient:
    """Writes finalized durations to, and reads history from, ``/time-data``."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout_secs: float | None = None,
        session_factory: Callable[..., aiohttp.ClientSession] | None = None,
    ) -> None:
        settings = get_settings()
        base = base_url or os.getenv("STATS_BASE_URL") or settings.get("stats_base_url")
        self.base_url = str(base).rstrip("/")
        if timeout_secs is None:
            timeout_secs = settings.get("stats_timeout_secs")
        self.timeout_secs = float(timeout_secs) if timeout_secs else None
        self._session_factory = session_factory or aiohttp.ClientSession

    @property
    def url(self) -> str:
        return f"{self.base_url}{TIME_DATA_PATH}"

    def _timeout(self) -> aiohttp.ClientTimeout:
        return aiohttp.ClientTimeout(total=self.timeout_secs)

    async def submit_seconds(self, seconds: int) -> None:
        """POST one finalized duration; raises StatsBackendError on a non-2xx answer."""
        payload = {"seconds": int(seconds)}
        async with self._session_factory(timeout=self._timeout()) as session:
            async with session.post(self.url, json=payload) as resp:
                if resp.status >= 300:
                    text = await resp.text()
                    raise StatsBackendError(
                        f"Stats backend error {resp.status}: {text}", status=resp.status
                    )
        deep_log(f"[DEEP][STATS] POST {self.url} payload={payload}")

    async def fetch_records(self) -> list[TimeRecord]:
        """GET the recorded history, validated into TimeRecord models."""
        async with self._session_factory(timeout=self._timeout()) as session:
            async with session.get(self.url) as resp:
                if resp.status >= 300:
                    text = await resp.text()
                    raise StatsBackendError(
                        f"Stats backend error {resp.status}: {text}", status=resp.status
                    )
                try:
                    body = await resp.json()
                except (aiohttp.ContentTypeError, ValueError) as exc:
                    raise StatsBackendError(f"Stats backend returned invalid JSON: {exc}") from exc
        try:
            records = TimeDataResponse.model_validate(body).data
        except ValidationError as exc:
            raise StatsBackendError(f"Unexpected /time-data payload: {exc}") from exc
        deep_log(f"[DEEP][STATS] GET {self.url} records={len(records)}")
        return records
