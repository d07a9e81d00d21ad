from __future__ import annotations

from datetime import date
from typing import List, Optional

from src.core.supabase import SupabaseClient
from src.models.tourism import (
    AttractionPerformanceRecord,
    CategoryStatsRecord,
    MonthlyTrendRecord,
    VisitRecord,
)

MAX_QUERY_ROWS = 500


class TourismStatsRepository:
    def __init__(self) -> None:
        self.client = SupabaseClient()

    def list_recent_visits(self, limit: int) -> List[VisitRecord]:
        rows, _ = self.client.select(
            table="visits",
            select=(
                "id,visit_date,amount,rating,user_id,attraction_id,"
                "attraction:attractions(name,category,price)"
            ),
            limit=min(max(limit, 1), MAX_QUERY_ROWS),
            order="visit_date.desc",
        )
        return [VisitRecord.model_validate(row) for row in rows]

    def list_attraction_performance(
        self,
        limit: int,
        order: str = "visit_count.desc",
    ) -> List[AttractionPerformanceRecord]:
        rows, _ = self.client.select(
            table="v_attraction_performance",
            select="id,name,category,price,rating,visit_count",
            limit=min(max(limit, 1), MAX_QUERY_ROWS),
            order=order,
        )
        return [AttractionPerformanceRecord.model_validate(row) for row in rows]

    def list_top_rated_attractions(self, limit: int) -> List[AttractionPerformanceRecord]:
        return self.list_attraction_performance(
            limit=limit,
            order="rating.desc.nullslast,visit_count.desc",
        )

    def list_monthly_trends(self, since: date, limit: int) -> List[MonthlyTrendRecord]:
        rows, _ = self.client.select(
            table="v_visit_monthly_trends",
            select="month,visits,revenue,avg_revenue,avg_rating",
            filters=[("month", f"gte.{since.strftime('%Y-%m')}")],
            limit=max(limit, 1),
            order="month.desc",
        )
        return [MonthlyTrendRecord.model_validate(row) for row in rows]

    def list_category_stats(self) -> List[CategoryStatsRecord]:
        rows, _ = self.client.select(
            table="v_attraction_category_stats",
            select="category,attraction_count,avg_rating,avg_price",
            limit=MAX_QUERY_ROWS,
            order="category.asc",
        )
        return [CategoryStatsRecord.model_validate(row) for row in rows]

    def count_attractions(self) -> int:
        return self.client.count("attractions")

    def count_visits(self, user_id: Optional[int] = None) -> int:
        filters = [("user_id", f"eq.{user_id}")] if user_id is not None else None
        return self.client.count("visits", filters=filters)
