from __future__ import annotations

from typing import List, Optional

import httpx
import pytest

from src.models.tourism import AttractionPerformanceRecord, CategoryStatsRecord
from src.services.chat_context_service import ChatContextService, category_percentage


class StubTourismStatsRepository:
    def __init__(
        self,
        total_attractions: int = 4,
        total_visits: int = 120,
        fail_core: bool = False,
        fail_user_count: bool = False,
    ) -> None:
        self.total_attractions = total_attractions
        self.total_visits = total_visits
        self.fail_core = fail_core
        self.fail_user_count = fail_user_count
        self.top_limit: Optional[int] = None

    def count_attractions(self) -> int:
        if self.fail_core:
            raise httpx.ConnectError("storage unreachable")
        return self.total_attractions

    def count_visits(self, user_id: Optional[int] = None) -> int:
        if user_id is not None:
            if self.fail_user_count:
                raise httpx.HTTPError("boom")
            return 7
        return self.total_visits

    def list_category_stats(self) -> List[CategoryStatsRecord]:
        return [
            CategoryStatsRecord(category="museum", attraction_count=3, avg_rating=4.26, avg_price=12.6),
            CategoryStatsRecord(category="park", attraction_count=1, avg_rating=None, avg_price=None),
        ]

    def list_top_rated_attractions(self, limit: int) -> List[AttractionPerformanceRecord]:
        self.top_limit = limit
        return [
            AttractionPerformanceRecord(id=1, name="City Park", category="park", rating=4.5, visit_count=10),
            AttractionPerformanceRecord(id=2, name="Art Museum", category="museum", rating=4.8, visit_count=5),
            AttractionPerformanceRecord(id=3, name="War Museum", category="museum", rating=4.5, visit_count=30),
        ]


def test_build_context_assembles_snapshot() -> None:
    repository = StubTourismStatsRepository()
    context = ChatContextService(repository=repository).build_context()

    assert context.total_attractions == 4
    assert context.total_visits == 120
    assert context.categories == ["museum", "park"]
    assert [attraction.name for attraction in context.top_attractions] == [
        "Art Museum",
        "War Museum",
        "City Park",
    ]
    assert context.top_attractions[1].visit_count == 30
    museum, park = context.category_breakdown
    assert museum.percentage == pytest.approx(75.0)
    assert museum.avg_rating == pytest.approx(4.3)
    assert museum.avg_price == pytest.approx(13)
    assert park.percentage == pytest.approx(25.0)
    assert park.avg_rating == 0.0
    assert context.user_visits == 0
    assert repository.top_limit == 10


def test_build_context_includes_user_visits() -> None:
    context = ChatContextService(repository=StubTourismStatsRepository()).build_context(user_id=42)
    assert context.user_visits == 7


def test_user_visit_count_failure_defaults_to_zero() -> None:
    repository = StubTourismStatsRepository(fail_user_count=True)
    context = ChatContextService(repository=repository).build_context(user_id=42)

    assert context.user_visits == 0
    assert context.total_attractions == 4


def test_zero_attractions_guard_percentages() -> None:
    context = ChatContextService(repository=StubTourismStatsRepository(total_attractions=0)).build_context()
    assert all(entry.percentage == 0.0 for entry in context.category_breakdown)


def test_storage_failure_yields_empty_context() -> None:
    context = ChatContextService(repository=StubTourismStatsRepository(fail_core=True)).build_context()

    assert context.total_attractions == 0
    assert context.categories == []
    assert context.top_attractions == []


@pytest.mark.parametrize(
    ("count", "total", "expected"),
    [(1, 3, 33.3), (2, 3, 66.7), (5, 0, 0.0), (0, 10, 0.0)],
)
def test_category_percentage(count: int, total: int, expected: float) -> None:
    assert category_percentage(count, total) == pytest.approx(expected)


def test_invalid_storage_url_yields_empty_context() -> None:
    class InvalidUrlRepository(StubTourismStatsRepository):
        def count_attractions(self) -> int:
            raise httpx.InvalidURL("No scheme included in URL")

    context = ChatContextService(repository=InvalidUrlRepository()).build_context()

    assert context.total_attractions == 0
    assert context.category_breakdown == []
