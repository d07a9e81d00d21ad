from __future__ import annotations

import logging
from threading import Lock
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlencode

import httpx

from src.core.config import get_settings

logger = logging.getLogger(__name__)

Filters = List[Tuple[str, str]]

# Errors a degradable storage read recovers from.
STORAGE_ERRORS = (httpx.HTTPError, httpx.InvalidURL, ValueError)


def parse_total(content_range: Optional[str]) -> Optional[int]:
    """Total row count from a PostgREST Content-Range header such as `0-9/57`."""
    if not content_range or "/" not in content_range:
        return None
    total = content_range.rsplit("/", 1)[-1].strip()
    return int(total) if total.isdigit() else None


class SupabaseClient:
    """Read/insert access to the tourism tables over PostgREST.

    Every instance talks through one pooled httpx.Client so repositories can be
    read from worker threads concurrently.
    """

    _pool: Optional[httpx.Client] = None
    _pool_lock = Lock()

    def __init__(self) -> None:
        settings = get_settings()
        self.rest_url = f"{settings.supabase_url.rstrip('/')}/rest/v1"
        self.api_key = settings.supabase_service_role_key or settings.supabase_anon_key
        if not self.api_key:
            raise ValueError("SUPABASE_SERVICE_ROLE_KEY or SUPABASE_ANON_KEY must be set")
        self._http = self.pooled_client(settings.storage_timeout_seconds)

    @classmethod
    def pooled_client(cls, timeout: float) -> httpx.Client:
        with cls._pool_lock:
            if cls._pool is None or cls._pool.is_closed:
                cls._pool = httpx.Client(
                    timeout=timeout,
                    limits=httpx.Limits(max_keepalive_connections=10, max_connections=50),
                )
            return cls._pool

    @classmethod
    def close_pool(cls) -> None:
        with cls._pool_lock:
            if cls._pool is not None:
                cls._pool.close()
                cls._pool = None

    def select(
        self,
        table: str,
        select: str,
        filters: Optional[Filters] = None,
        limit: Optional[int] = None,
        order: Optional[str] = None,
        count: bool = False,
    ) -> Tuple[List[Dict[str, Any]], Optional[int]]:
        params: Filters = [("select", select), *(filters or [])]
        if order:
            params.append(("order", order))
        if limit is not None:
            params.append(("limit", str(limit)))

        response = self._http.get(
            self._url(table, params),
            headers=self._headers(prefer="count=exact" if count else None),
        )
        response.raise_for_status()
        rows = response.json()
        if not isinstance(rows, list):
            raise ValueError(f"Expected a row list from {table}, got {type(rows).__name__}")
        total = parse_total(response.headers.get("content-range")) if count else None
        logger.debug("Read %d rows from %s", len(rows), table)
        return rows, total

    def count(self, table: str, filters: Optional[Filters] = None) -> int:
        _, total = self.select(table, "id", filters=filters, limit=1, count=True)
        return total or 0

    def insert(self, table: str, row: Dict[str, Any]) -> List[Dict[str, Any]]:
        response = self._http.post(
            self._url(table),
            headers=self._headers(prefer="return=representation", json_body=True),
            json=row,
        )
        response.raise_for_status()
        if not response.content:
            return []
        created = response.json()
        if isinstance(created, dict):
            return [created]
        return created if isinstance(created, list) else []

    def _url(self, table: str, params: Optional[Filters] = None) -> str:
        if not params:
            return f"{self.rest_url}/{table}"
        return f"{self.rest_url}/{table}?{urlencode(params, doseq=True)}"

    def _headers(self, prefer: Optional[str] = None, json_body: bool = False) -> Dict[str, str]:
        headers = {"apikey": self.api_key, "Authorization": f"Bearer {self.api_key}"}
        if json_body:
            headers["Content-Type"] = "application/json"
        if prefer:
            headers["Prefer"] = prefer
        return headers
