from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from src.schemas.forecasts import (
    ForecastConfig,
    ForecastModel,
    HistoricalStatsSummary,
    PredictiveAnalytics,
)
from src.services.historical_stats_service import HistoricalStatsService
from src.services.openai_generation_service import OpenAiGenerationService
from src.shared.time import utc_now

logger = logging.getLogger(__name__)

VISITOR_NEXT_MONTH_CONFIDENCE = 92
VISITOR_QUARTER_CONFIDENCE = 88
REVENUE_NEXT_MONTH_CONFIDENCE = 89
REVENUE_GROWTH_CONFIDENCE = 85
REVENUE_ACCURACY_FACTOR = 0.95
TREND_ANALYSIS_ACCURACY = 91
DERIVED_INSIGHT_COUNT = 2


class ForecastService:
    def __init__(
        self,
        stats_service: HistoricalStatsService,
        openai_service: OpenAiGenerationService,
    ) -> None:
        self.stats_service = stats_service
        self.openai_service = openai_service

    def get_predictive_models(
        self,
        limit: int,
        config: Optional[ForecastConfig] = None,
    ) -> List[ForecastModel]:
        stats = self.stats_service.build_stats(limit)
        analytics = self.generate_forecast(stats, config or ForecastConfig())
        models = self.build_forecast_models(stats, analytics, limit)
        logger.info("Generated %d forecast models", len(models))
        return models

    def generate_forecast(
        self,
        stats: HistoricalStatsSummary,
        config: ForecastConfig,
    ) -> PredictiveAnalytics:
        # AiGenerationError propagates; there is no numeric fallback.
        return self.openai_service.generate_predictive_analytics(stats, config)

    @staticmethod
    def build_forecast_models(
        stats: HistoricalStatsSummary,
        analytics: PredictiveAnalytics,
        limit: int,
        now: Optional[datetime] = None,
    ) -> List[ForecastModel]:
        last_updated = now or utc_now()
        metrics = analytics.forecast_metrics
        insights = analytics.insights

        models = [
            ForecastModel(
                id="visitor-forecast",
                name="Visitor Forecast",
                type="forecast",
                accuracy=metrics.accuracy_score,
                last_updated=last_updated,
                predictions={
                    "nextMonth": {
                        "visitors": metrics.next_month_visitors,
                        "confidence": VISITOR_NEXT_MONTH_CONFIDENCE,
                    },
                    "quarter": {
                        "revenue": metrics.quarterly_revenue,
                        "confidence": VISITOR_QUARTER_CONFIDENCE,
                    },
                },
                insights=insights.key_predictions[:DERIVED_INSIGHT_COUNT],
            ),
            ForecastModel(
                id="revenue-prediction",
                name="Revenue Prediction",
                type="prediction",
                accuracy=_round_half_up(metrics.accuracy_score * REVENUE_ACCURACY_FACTOR),
                last_updated=last_updated,
                predictions={
                    "nextMonth": {
                        "revenue": metrics.next_month_revenue,
                        "confidence": REVENUE_NEXT_MONTH_CONFIDENCE,
                    },
                    "growthRate": {
                        "percentage": metrics.growth_rate,
                        "confidence": REVENUE_GROWTH_CONFIDENCE,
                    },
                },
                insights=[
                    f"Projected {_display_number(metrics.growth_rate)}% growth rate",
                    f"Seasonal index: {_display_number(metrics.seasonal_index)}",
                ],
            ),
            ForecastModel(
                id="trend-analysis",
                name="Trend Analysis",
                type="analysis",
                accuracy=TREND_ANALYSIS_ACCURACY,
                last_updated=last_updated,
                predictions={
                    "trends": insights.opportunities[:DERIVED_INSIGHT_COUNT],
                    "risks": insights.risk_factors[:DERIVED_INSIGHT_COUNT],
                },
                insights=[
                    f"{stats.total_visits} historical visits analyzed",
                    f"{len(stats.monthly_trends)} months of trend data processed",
                ],
            ),
        ]
        return models[: max(limit, 0)]


def _round_half_up(value: float) -> int:
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def _display_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)
