from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional


from src.core.config import get_settings
from src.core.supabase import STORAGE_ERRORS
from src.models.tourism import AttractionPerformanceRecord, CategoryStatsRecord
from src.repositories.tourism_stats_repository import TourismStatsRepository
from src.schemas.chat import CategoryBreakdown, ChatAttraction, ChatContext

logger = logging.getLogger(__name__)


class ChatContextService:
    """Builds the grounding snapshot handed to the AI backend on every chat turn."""

    def __init__(self, repository: TourismStatsRepository) -> None:
        self.repository = repository
        self.settings = get_settings()

    def build_context(self, user_id: Optional[int] = None) -> ChatContext:
        with ThreadPoolExecutor(
            max_workers=self.settings.storage_max_workers, thread_name_prefix="chat-context"
        ) as pool:
            attractions_future = pool.submit(self.repository.count_attractions)
            visits_future = pool.submit(self.repository.count_visits)
            category_future = pool.submit(self.repository.list_category_stats)
            top_future = pool.submit(
                self.repository.list_top_rated_attractions, self.settings.chat_top_attractions
            )
            user_future = pool.submit(self._count_user_visits, user_id) if user_id is not None else None
            try:
                total_attractions = attractions_future.result()
                total_visits = visits_future.result()
                category_stats = category_future.result()
                top_attractions = top_future.result()
            except STORAGE_ERRORS as exc:
                logger.warning("Chat context unavailable, using an empty snapshot: %s", exc)
                return ChatContext()
            user_visits = user_future.result() if user_future is not None else 0

        return self.assemble(
            total_attractions=total_attractions,
            total_visits=total_visits,
            category_stats=category_stats,
            top_attractions=top_attractions,
            user_visits=user_visits,
            top_limit=self.settings.chat_top_attractions,
        )

    @staticmethod
    def assemble(
        *,
        total_attractions: int,
        total_visits: int,
        category_stats: List[CategoryStatsRecord],
        top_attractions: List[AttractionPerformanceRecord],
        user_visits: int = 0,
        top_limit: int = 10,
    ) -> ChatContext:
        ranked = sorted(
            top_attractions,
            key=lambda attraction: (attraction.rating or 0.0, attraction.visit_count),
            reverse=True,
        )
        categories: List[str] = []
        for stat in category_stats:
            if stat.category not in categories:
                categories.append(stat.category)

        return ChatContext(
            total_attractions=total_attractions,
            total_visits=total_visits,
            categories=categories,
            top_attractions=[
                ChatAttraction(
                    name=attraction.name,
                    category=attraction.category,
                    rating=attraction.rating,
                    price=attraction.price,
                    visit_count=attraction.visit_count,
                )
                for attraction in ranked[:top_limit]
            ],
            category_breakdown=[
                CategoryBreakdown(
                    category=stat.category,
                    count=stat.attraction_count,
                    percentage=category_percentage(stat.attraction_count, total_attractions),
                    avg_rating=round(stat.avg_rating or 0.0, 1),
                    avg_price=round(stat.avg_price or 0.0),
                )
                for stat in category_stats
            ],
            user_visits=user_visits,
        )

    def _count_user_visits(self, user_id: int) -> int:
        try:
            return self.repository.count_visits(user_id=user_id)
        except STORAGE_ERRORS as exc:
            logger.warning("Visit count for user %s unavailable: %s", user_id, exc)
            return 0


def category_percentage(count: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return round(count / total * 100, 1)
