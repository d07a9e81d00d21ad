from __future__ import annotations

from datetime import datetime
from typing import List, Literal

from pydantic import Field

from src.shared.base import BaseSchema, FrozenSchema

InsightKind = Literal["trend", "anomaly", "recommendation"]
InsightImpact = Literal["high", "medium", "low"]
InsightSourceKind = Literal["predictive", "alert", "report"]


class Insight(FrozenSchema):
    id: str
    kind: InsightKind
    title: str
    description: str
    impact: InsightImpact
    confidence: float = Field(ge=0.0, le=1.0)
    generated_at: datetime
    source_kind: InsightSourceKind
    source_id: int


class InsightFeedResponse(BaseSchema):
    items: List[Insight]
    degraded_sources: List[InsightSourceKind] = Field(default_factory=list)
