from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import ConfigDict, Field

from src.shared.base import BaseSchema

ForecastPeriod = Literal["month", "quarter"]


class MonthlyTrend(BaseSchema):
    month: str
    visits: int
    revenue: float
    avg_revenue: float
    avg_rating: float


class TopAttraction(BaseSchema):
    id: int
    name: str
    category: Optional[str] = None
    visits: int
    price: Optional[float] = None
    rating: Optional[float] = None


class HistoricalStatsSummary(BaseSchema):
    total_visits: int
    total_revenue: float
    avg_rating: float
    monthly_trends: List[MonthlyTrend] = Field(default_factory=list)
    top_attractions: List[TopAttraction] = Field(default_factory=list)


class ForecastConfig(BaseSchema):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    period: ForecastPeriod = "month"
    forecast_horizon: int = Field(default=3, ge=1, le=12)
    include_seasonality: bool = True


class ForecastMetrics(BaseSchema):
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)

    next_month_visitors: float
    next_month_revenue: float
    quarterly_revenue: float
    seasonal_index: float
    accuracy_score: float
    growth_rate: float


class ForecastInsights(BaseSchema):
    key_predictions: List[str] = Field(default_factory=list)
    risk_factors: List[str] = Field(default_factory=list)
    opportunities: List[str] = Field(default_factory=list)


class PredictiveAnalytics(BaseSchema):
    forecast_metrics: ForecastMetrics
    insights: ForecastInsights = Field(default_factory=ForecastInsights)


class ForecastModel(BaseSchema):
    id: str
    name: str
    type: Literal["forecast", "prediction", "analysis"]
    accuracy: float
    last_updated: datetime
    predictions: Dict[str, Any]
    insights: List[str]
    status: Literal["active"] = "active"


class ForecastModelsResponse(BaseSchema):
    items: List[ForecastModel]
