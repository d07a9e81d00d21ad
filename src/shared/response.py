from __future__ import annotations

from datetime import date
from math import ceil
from typing import Generic, List, Optional, Sequence, TypeVar

from src.shared.base import BaseSchema
from src.shared.time import utc_now


T = TypeVar("T")

CALCULATION_VERSION = "v1"


class Pagination(BaseSchema):
    page: int
    page_size: int
    total_items: int
    total_pages: int


class Meta(BaseSchema):
    as_of_date: str
    source: str
    time_window: str
    calculation_version: str
    degraded: Optional[bool] = None
    degraded_sources: Optional[List[str]] = None
    generated_at: Optional[str] = None


class ResponseEnvelope(BaseSchema, Generic[T]):
    data: T
    pagination: Optional[Pagination] = None
    meta: Optional[Meta] = None


def build_meta(
    source: str,
    time_window: str,
    *,
    degraded_sources: Optional[Sequence[str]] = None,
    stamped: bool = False,
) -> Meta:
    """Envelope metadata for a response computed today.

    `degraded_sources` is only reported by endpoints that merge several sources;
    `stamped` adds a generation timestamp for computed (non-cached) payloads.
    """
    meta = Meta(
        as_of_date=date.today().isoformat(),
        source=source,
        time_window=time_window,
        calculation_version=CALCULATION_VERSION,
    )
    if degraded_sources is not None:
        meta.degraded = bool(degraded_sources)
        meta.degraded_sources = list(degraded_sources)
    if stamped:
        meta.generated_at = utc_now().isoformat()
    return meta


def build_pagination(page: int, page_size: int, total_items: int) -> Pagination:
    total_pages = ceil(total_items / page_size) if page_size > 0 else 0
    return Pagination(
        page=page,
        page_size=page_size,
        total_items=total_items,
        total_pages=total_pages,
    )
