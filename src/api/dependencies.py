from __future__ import annotations

from functools import lru_cache

from src.repositories.chat_repository import ChatRepository
from src.repositories.insight_sources_repository import InsightSourcesRepository
from src.repositories.tourism_stats_repository import TourismStatsRepository
from src.services.ai_chat_service import AiChatService
from src.services.chat_context_service import ChatContextService
from src.services.forecast_service import ForecastService
from src.services.historical_stats_service import HistoricalStatsService
from src.services.insight_feed_service import InsightFeedService
from src.services.openai_generation_service import OpenAiGenerationService


@lru_cache
def get_insight_sources_repository() -> InsightSourcesRepository:
    return InsightSourcesRepository()


@lru_cache
def get_tourism_stats_repository() -> TourismStatsRepository:
    return TourismStatsRepository()


@lru_cache
def get_chat_repository() -> ChatRepository:
    return ChatRepository()


@lru_cache
def get_openai_generation_service() -> OpenAiGenerationService:
    return OpenAiGenerationService()


def get_insight_feed_service() -> InsightFeedService:
    return InsightFeedService(repository=get_insight_sources_repository())


def get_historical_stats_service() -> HistoricalStatsService:
    return HistoricalStatsService(repository=get_tourism_stats_repository())


def get_forecast_service() -> ForecastService:
    return ForecastService(
        stats_service=get_historical_stats_service(),
        openai_service=get_openai_generation_service(),
    )


def get_chat_context_service() -> ChatContextService:
    return ChatContextService(repository=get_tourism_stats_repository())


def get_ai_chat_service() -> AiChatService:
    return AiChatService(
        context_service=get_chat_context_service(),
        openai_service=get_openai_generation_service(),
        repository=get_chat_repository(),
    )
