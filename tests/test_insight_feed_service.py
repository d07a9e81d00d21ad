from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import List, Optional

import httpx
import pytest

from src.models.tourism import AlertRecord, PredictiveModelRecord, ReportRecord
from src.schemas.insights import Insight
from src.services.insight_feed_service import InsightFeedService, aggregate

BASE_TIME = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class StubInsightSourcesRepository:
    def __init__(
        self,
        predictive: Optional[List[PredictiveModelRecord]] = None,
        alerts: Optional[List[AlertRecord]] = None,
        reports: Optional[List[ReportRecord]] = None,
        failing: tuple[str, ...] = (),
    ) -> None:
        self.predictive = predictive or []
        self.alerts = alerts or []
        self.reports = reports or []
        self.failing = failing
        self.requested_limits: dict[str, int] = {}

    def list_predictive_models(self, limit: int) -> List[PredictiveModelRecord]:
        self.requested_limits["predictive"] = limit
        if "predictive" in self.failing:
            raise httpx.ConnectError("storage unreachable")
        return self.predictive[:limit]

    def list_unresolved_alerts(self, limit: int) -> List[AlertRecord]:
        self.requested_limits["alert"] = limit
        if "alert" in self.failing:
            raise ValueError("Unexpected payload from alerts")
        return self.alerts[:limit]

    def list_reports(self, limit: int) -> List[ReportRecord]:
        self.requested_limits["report"] = limit
        if "report" in self.failing:
            raise httpx.ReadTimeout("timed out")
        return self.reports[:limit]


def _predictive(record_id: int, minutes: int, value: float = 12000, model_data=None) -> PredictiveModelRecord:
    return PredictiveModelRecord(
        id=record_id,
        prediction_type="monthly_visitors",
        predicted_value=value,
        generated_date=BASE_TIME + timedelta(minutes=minutes),
        model_data=model_data,
    )


def _alert(record_id: int, minutes: int, resolved: bool = False) -> AlertRecord:
    return AlertRecord(
        id=record_id,
        alert_type="capacity_warning",
        alert_message="Lot full",
        triggered_at=BASE_TIME + timedelta(minutes=minutes),
        alert_resolved=resolved,
    )


def _report(record_id: int, minutes: int, report_type: str = "recommendation") -> ReportRecord:
    return ReportRecord(
        id=record_id,
        report_type=report_type,
        report_title="Weekend staffing",
        description="Add two guides",
        generated_date=BASE_TIME + timedelta(minutes=minutes),
    )


def _insight(insight_id: str, generated_at: datetime) -> Insight:
    return Insight(
        id=insight_id,
        kind="trend",
        title=insight_id,
        description="",
        impact="low",
        confidence=0.5,
        generated_at=generated_at,
        source_kind="predictive",
        source_id=1,
    )


def test_feed_with_one_alert_and_one_forecast() -> None:
    repository = StubInsightSourcesRepository(
        predictive=[_predictive(1, minutes=0, model_data='{"accuracy": 0.9}')],
        alerts=[_alert(2, minutes=5)],
    )
    feed = InsightFeedService(repository=repository).get_feed()

    assert len(feed.items) == 2
    assert feed.degraded_sources == []
    alert_insight, predictive_insight = feed.items
    assert alert_insight.id == "alert-2"
    assert alert_insight.impact == "high"
    assert alert_insight.confidence == pytest.approx(0.95)
    assert predictive_insight.id == "predictive-1"
    assert predictive_insight.impact == "high"
    assert predictive_insight.confidence == pytest.approx(0.9)
    assert predictive_insight.title == "Monthly Visitors Forecast"


def test_feed_is_bounded_and_newest_first() -> None:
    repository = StubInsightSourcesRepository(
        predictive=[_predictive(i, minutes=i) for i in range(1, 6)],
        alerts=[_alert(i, minutes=10 + i) for i in range(1, 6)],
        reports=[_report(i, minutes=20 + i) for i in range(1, 6)],
    )
    feed = InsightFeedService(repository=repository).get_feed()

    assert len(feed.items) == 10
    timestamps = [item.generated_at for item in feed.items]
    assert timestamps == sorted(timestamps, reverse=True)
    assert feed.items[0].id == "report-5"
    assert all(item.source_kind != "predictive" for item in feed.items)


def test_recency_outranks_impact() -> None:
    repository = StubInsightSourcesRepository(
        predictive=[_predictive(i, minutes=100 + i, value=10) for i in range(1, 6)],
        reports=[_report(i, minutes=50 + i) for i in range(1, 6)],
        alerts=[_alert(99, minutes=0)],
    )
    feed = InsightFeedService(repository=repository).get_feed()

    assert len(feed.items) == 10
    assert "alert-99" not in {item.id for item in feed.items}
    assert feed.items[0].impact == "low"


def test_failed_source_degrades_to_empty() -> None:
    repository = StubInsightSourcesRepository(
        predictive=[_predictive(1, minutes=0)],
        alerts=[_alert(2, minutes=1)],
        reports=[_report(3, minutes=2)],
        failing=("predictive", "report"),
    )
    feed = InsightFeedService(repository=repository).get_feed()

    assert [item.id for item in feed.items] == ["alert-2"]
    assert feed.degraded_sources == ["predictive", "report"]


def test_all_sources_failing_yields_empty_feed() -> None:
    repository = StubInsightSourcesRepository(failing=("predictive", "alert", "report"))
    feed = InsightFeedService(repository=repository).get_feed()

    assert feed.items == []
    assert len(feed.degraded_sources) == 3


def test_resolved_alerts_and_ineligible_reports_are_dropped() -> None:
    repository = StubInsightSourcesRepository(
        alerts=[_alert(1, minutes=0, resolved=True), _alert(2, minutes=1)],
        reports=[_report(3, minutes=2, report_type="booking")],
    )
    feed = InsightFeedService(repository=repository).get_feed()

    assert [item.id for item in feed.items] == ["alert-2"]


def test_source_readers_use_configured_limit() -> None:
    repository = StubInsightSourcesRepository()
    InsightFeedService(repository=repository).get_feed()

    assert repository.requested_limits == {"predictive": 5, "alert": 5, "report": 5}


def test_individual_reader_returns_empty_on_failure() -> None:
    service = InsightFeedService(repository=StubInsightSourcesRepository(failing=("alert",)))
    assert service.fetch_alerts(5) == []
    assert service.fetch_predictive_models(5) == []


def test_aggregate_sort_is_stable_for_equal_timestamps() -> None:
    insights = [
        _insight("first", BASE_TIME),
        _insight("newest", BASE_TIME + timedelta(hours=1)),
        _insight("second", BASE_TIME),
        _insight("third", BASE_TIME),
    ]
    assert [item.id for item in aggregate(insights)] == ["newest", "first", "second", "third"]


def test_aggregate_truncates_to_limit() -> None:
    insights = [_insight(f"i{n}", BASE_TIME + timedelta(minutes=n)) for n in range(25)]
    result = aggregate(insights, limit=10)

    assert len(result) == 10
    assert result[0].id == "i24"


def test_invalid_storage_url_degrades_source() -> None:
    class InvalidUrlRepository(StubInsightSourcesRepository):
        def list_reports(self, limit: int) -> List[ReportRecord]:
            raise httpx.InvalidURL("Invalid non-printable ASCII character in URL")

    feed = InsightFeedService(repository=InvalidUrlRepository()).get_feed()

    assert feed.items == []
    assert feed.degraded_sources == ["report"]
