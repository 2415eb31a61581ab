"""Google Sheets knowledge source (Sheets API v4 values endpoint) with a TTL cache."""
from __future__ import annotations

import logging
import time
from typing import Callable, Optional
from urllib.parse import quote

import httpx

from supportdesk.clients.knowledge.base import BaseKnowledgeSource, KnowledgeSheet
from supportdesk.core.exceptions import KnowledgeSourceError

logger = logging.getLogger(__name__)


class GoogleSheetsSource(BaseKnowledgeSource):
    BASE = "https://sheets.googleapis.com/v4/spreadsheets/{sheet_id}/values/{range}"

    def __init__(
        self,
        api_key: str,
        sheet_id: str,
        *,
        range: str = "Sheet1",
        cache_seconds: int = 300,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._api_key = api_key
        self._url = self.BASE.format(sheet_id=sheet_id, range=quote(range, safe=""))
        self._cache_seconds = cache_seconds
        self._timeout = timeout
        self._transport = transport
        self._clock = clock
        self._cache: Optional[KnowledgeSheet] = None
        self._cached_at = 0.0

    @property
    def name(self) -> str:
        return "google_sheets"

    async def fetch(self) -> KnowledgeSheet:
        """Return cached rows while fresh, otherwise pull them from the API."""
        if self._cache is not None and self._clock() - self._cached_at < self._cache_seconds:
            return self._cache

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.get(self._url, params={"key": self._api_key})
        except httpx.HTTPError as exc:
            raise KnowledgeSourceError(
                f"Google Sheets request failed: {exc}", details={"source": self.name}, cause=exc,
            ) from exc

        if resp.status_code != 200:
            raise KnowledgeSourceError(
                f"Google Sheets API error: {resp.status_code}",
                details={"source": self.name, "status": resp.status_code},
            )

        try:
            values = resp.json().get("values") or []
        except ValueError as exc:
            raise KnowledgeSourceError(
                "Google Sheets returned malformed JSON", details={"source": self.name}, cause=exc,
            ) from exc
        if not values:
            raise KnowledgeSourceError("Sheet is empty", details={"source": self.name})

        sheet = KnowledgeSheet.from_values(values)
        self._cache = sheet
        self._cached_at = self._clock()
        logger.info(
            "GoogleSheetsSource: fetched %d rows with fields %s", len(sheet.rows), sheet.headers,
        )
        return sheet

    def clear_cache(self) -> None:
        self._cache = None
        self._cached_at = 0.0
