from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

import httpx

from src.api.dependencies import get_forecast_service, get_historical_stats_service
from src.core.errors import AiGenerationError
from src.schemas.forecasts import (
    ForecastConfig,
    ForecastModel,
    HistoricalStatsSummary,
    MonthlyTrend,
    TopAttraction,
)
from src.services.forecast_service import ForecastService
from src.services.openai_generation_service import OpenAiGenerationService


class FakeHistoricalStatsService:
    def build_stats(self, limit: int) -> HistoricalStatsSummary:
        return HistoricalStatsSummary(
            total_visits=100,
            total_revenue=5400.0,
            avg_rating=4.3,
            monthly_trends=[MonthlyTrend(month="2026-02", visits=60, revenue=3000, avg_revenue=50, avg_rating=4.4)],
            top_attractions=[
                TopAttraction(id=1, name="Old Fort", category="historical", visits=40, price=15, rating=4.6)
            ][:limit],
        )


class FakeForecastService:
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.calls: List[tuple] = []

    def get_predictive_models(self, limit: int, config: Optional[ForecastConfig] = None) -> List[ForecastModel]:
        self.calls.append((limit, config))
        if self.error:
            raise self.error
        return [
            ForecastModel(
                id="visitor-forecast",
                name="Visitor Volume Forecast",
                type="forecast",
                accuracy=94.2,
                last_updated=datetime(2026, 3, 1, tzinfo=timezone.utc),
                predictions={"nextMonth": {"visitors": 15200, "confidence": 92}},
                insights=["Spring uplift"],
            )
        ]


def test_stats_endpoint_returns_summary(app, client):
    app.dependency_overrides[get_historical_stats_service] = lambda: FakeHistoricalStatsService()

    response = client.get("/api/v1/predictive/stats?limit=3")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["totalVisits"] == 100
    assert data["avgRating"] == 4.3
    assert data["monthlyTrends"][0]["avgRevenue"] == 50
    assert data["topAttractions"][0]["name"] == "Old Fort"


def test_predictive_models_accept_forecast_config(app, client):
    service = FakeForecastService()
    app.dependency_overrides[get_forecast_service] = lambda: service

    response = client.get(
        "/api/v1/predictive?limit=2&period=quarter&forecastHorizon=6&includeSeasonality=false"
    )

    assert response.status_code == 200
    payload = response.json()
    model = payload["data"]["items"][0]
    assert model["id"] == "visitor-forecast"
    assert model["lastUpdated"].startswith("2026-03-01")
    assert model["status"] == "active"
    assert payload["meta"]["timeWindow"] == "quarter"
    limit, config = service.calls[0]
    assert limit == 2
    assert config.period == "quarter"
    assert config.forecast_horizon == 6
    assert config.include_seasonality is False


def test_predictive_models_reject_unknown_period(app, client):
    app.dependency_overrides[get_forecast_service] = lambda: FakeForecastService()

    response = client.get("/api/v1/predictive?period=year")

    assert response.status_code == 422


def test_ai_failure_maps_to_bad_gateway(app, client):
    app.dependency_overrides[get_forecast_service] = lambda: FakeForecastService(
        error=AiGenerationError("predictive_analytics")
    )

    response = client.get("/api/v1/predictive")

    assert response.status_code == 502
    error = response.json()["error"]
    assert error["code"] == "ai_generation_failed"
    assert error["details"] == {"operation": "predictive_analytics", "retryable": True}


def test_non_finite_ai_metric_maps_to_bad_gateway(app, client, monkeypatch):
    generation_service = OpenAiGenerationService()
    monkeypatch.setattr(generation_service.settings, "openai_api_key", "test-key")
    monkeypatch.setattr(generation_service.settings, "openai_max_retries", 0)
    content = (
        '{"forecastMetrics": {"nextMonthVisitors": 15000, "nextMonthRevenue": 280000, '
        '"quarterlyRevenue": 850000, "seasonalIndex": Infinity, "accuracyScore": NaN, '
        '"growthRate": 8.5}}'
    )

    def fake_post(url, **kwargs):
        return httpx.Response(
            200,
            json={"choices": [{"message": {"content": content}}]},
            request=httpx.Request("POST", url),
        )

    monkeypatch.setattr(httpx, "post", fake_post)
    app.dependency_overrides[get_forecast_service] = lambda: ForecastService(
        stats_service=FakeHistoricalStatsService(),
        openai_service=generation_service,
    )

    response = client.get("/api/v1/predictive?limit=3")

    assert response.status_code == 502
    assert response.json()["error"]["code"] == "ai_generation_failed"
