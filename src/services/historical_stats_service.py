from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import List

from src.core.config import get_settings
from src.models.tourism import AttractionPerformanceRecord, MonthlyTrendRecord, VisitRecord
from src.repositories.tourism_stats_repository import TourismStatsRepository
from src.schemas.forecasts import HistoricalStatsSummary, MonthlyTrend, TopAttraction
from src.shared.time import month_window_start


class HistoricalStatsService:
    def __init__(self, repository: TourismStatsRepository) -> None:
        self.repository = repository
        self.settings = get_settings()

    def build_stats(self, limit: int) -> HistoricalStatsSummary:
        trend_months = self.settings.stats_trend_months
        with ThreadPoolExecutor(max_workers=3, thread_name_prefix="stats-read") as pool:
            visits_future = pool.submit(
                self.repository.list_recent_visits, self.settings.stats_visit_window
            )
            attractions_future = pool.submit(
                self.repository.list_attraction_performance, self.settings.stats_attraction_window
            )
            trends_future = pool.submit(
                self.repository.list_monthly_trends,
                month_window_start(trend_months),
                trend_months,
            )
            visits = visits_future.result()
            attractions = attractions_future.result()
            trends = trends_future.result()

        return self.summarize(visits, attractions, trends, limit=limit, trend_months=trend_months)

    @staticmethod
    def summarize(
        visits: List[VisitRecord],
        attractions: List[AttractionPerformanceRecord],
        trends: List[MonthlyTrendRecord],
        *,
        limit: int,
        trend_months: int = 6,
    ) -> HistoricalStatsSummary:
        total_visits = len(visits)
        total_revenue = sum(visit.amount or 0.0 for visit in visits)
        rating_sum = sum(visit.rating or 0.0 for visit in visits)
        avg_rating = rating_sum / total_visits if total_visits else 0.0

        recent_trends = sorted(trends, key=lambda trend: trend.month, reverse=True)[:trend_months]
        ranked = sorted(attractions, key=lambda attraction: attraction.visit_count, reverse=True)

        return HistoricalStatsSummary(
            total_visits=total_visits,
            total_revenue=total_revenue,
            avg_rating=avg_rating,
            monthly_trends=[
                MonthlyTrend(
                    month=trend.month,
                    visits=trend.visits,
                    revenue=trend.revenue or 0.0,
                    avg_revenue=trend.avg_revenue or 0.0,
                    avg_rating=trend.avg_rating or 0.0,
                )
                for trend in recent_trends
            ],
            top_attractions=[
                TopAttraction(
                    id=attraction.id,
                    name=attraction.name,
                    category=attraction.category,
                    visits=attraction.visit_count,
                    price=attraction.price,
                    rating=attraction.rating,
                )
                for attraction in ranked[: max(limit, 0)]
            ],
        )
