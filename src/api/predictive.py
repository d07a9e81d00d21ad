from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_forecast_service, get_historical_stats_service
from src.core.config import get_settings
from src.schemas.forecasts import (
    ForecastConfig,
    ForecastModelsResponse,
    ForecastPeriod,
    HistoricalStatsSummary,
)
from src.services.forecast_service import ForecastService
from src.services.historical_stats_service import HistoricalStatsService
from src.shared.response import ResponseEnvelope, build_meta

router = APIRouter(prefix="/predictive", tags=["predictive"])


def get_forecast_config(
    period: ForecastPeriod = Query(default="month"),
    forecast_horizon: int = Query(default=3, ge=1, le=12, alias="forecastHorizon"),
    include_seasonality: bool = Query(default=True, alias="includeSeasonality"),
) -> ForecastConfig:
    return ForecastConfig(
        period=period,
        forecast_horizon=forecast_horizon,
        include_seasonality=include_seasonality,
    )


@router.get("/stats")
def historical_stats(
    limit: int = Query(default=5, ge=1, le=20),
    service: HistoricalStatsService = Depends(get_historical_stats_service),
) -> ResponseEnvelope[HistoricalStatsSummary]:
    data = service.build_stats(limit)
    meta = build_meta(
        "visits,v_attraction_performance,v_visit_monthly_trends",
        f"{get_settings().stats_trend_months}m",
        stamped=True,
    )
    return ResponseEnvelope(data=data, pagination=None, meta=meta)


@router.get("")
def predictive_models(
    limit: int = Query(default=5, ge=1, le=20),
    config: ForecastConfig = Depends(get_forecast_config),
    service: ForecastService = Depends(get_forecast_service),
) -> ResponseEnvelope[ForecastModelsResponse]:
    items = service.get_predictive_models(limit, config)
    meta = build_meta("ai_forecast", config.period, stamped=True)
    return ResponseEnvelope(data=ForecastModelsResponse(items=items), pagination=None, meta=meta)
