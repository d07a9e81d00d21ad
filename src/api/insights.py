from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_insight_feed_service
from src.schemas.insights import InsightFeedResponse
from src.services.insight_feed_service import InsightFeedService
from src.shared.response import ResponseEnvelope, build_meta

router = APIRouter(prefix="/insights", tags=["insights"])


@router.get("/feed")
def insight_feed(
    limit: Optional[int] = Query(default=None, ge=1, le=10),
    service: InsightFeedService = Depends(get_insight_feed_service),
) -> ResponseEnvelope[InsightFeedResponse]:
    data = service.get_feed(limit=limit)
    meta = build_meta(
        "predictive_models,alerts,reports",
        "latest",
        degraded_sources=data.degraded_sources,
        stamped=True,
    )
    return ResponseEnvelope(data=data, pagination=None, meta=meta)
