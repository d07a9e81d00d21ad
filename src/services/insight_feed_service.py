from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, Optional, Sequence, Tuple, TypeVar


from src.core.config import get_settings
from src.core.supabase import STORAGE_ERRORS
from src.models.tourism import AlertRecord, PredictiveModelRecord, ReportRecord
from src.repositories.insight_sources_repository import InsightSourcesRepository
from src.schemas.insights import Insight, InsightFeedResponse, InsightSourceKind
from src.services.insight_normalizers import SourceRecord, normalize_record

logger = logging.getLogger(__name__)

R = TypeVar("R")


def aggregate(insights: Iterable[Insight], limit: int = 10) -> List[Insight]:
    """Newest first, truncated to `limit`. Equal timestamps keep their incoming order."""
    ordered = sorted(insights, key=lambda insight: insight.generated_at, reverse=True)
    return ordered[: max(limit, 0)]


class InsightFeedService:
    def __init__(self, repository: InsightSourcesRepository) -> None:
        self.repository = repository
        self.settings = get_settings()

    def fetch_predictive_models(self, limit: int) -> List[PredictiveModelRecord]:
        records, _ = self._read_source("predictive", self.repository.list_predictive_models, limit)
        return records

    def fetch_alerts(self, limit: int) -> List[AlertRecord]:
        records, _ = self._read_source("alert", self.repository.list_unresolved_alerts, limit)
        return records

    def fetch_reports(self, limit: int) -> List[ReportRecord]:
        records, _ = self._read_source("report", self.repository.list_reports, limit)
        return records

    def get_feed(self, limit: Optional[int] = None) -> InsightFeedResponse:
        feed_size = limit if limit is not None else self.settings.insight_feed_size
        source_limit = self.settings.insight_source_limit

        with ThreadPoolExecutor(max_workers=3, thread_name_prefix="insight-source") as pool:
            predictive_future = pool.submit(
                self._read_source, "predictive", self.repository.list_predictive_models, source_limit
            )
            alert_future = pool.submit(
                self._read_source, "alert", self.repository.list_unresolved_alerts, source_limit
            )
            report_future = pool.submit(
                self._read_source, "report", self.repository.list_reports, source_limit
            )
            reads: List[Tuple[InsightSourceKind, Tuple[Sequence[SourceRecord], bool]]] = [
                ("predictive", predictive_future.result()),
                ("alert", alert_future.result()),
                ("report", report_future.result()),
            ]

        insights: List[Insight] = []
        degraded_sources: List[InsightSourceKind] = []
        for source_kind, (records, ok) in reads:
            if not ok:
                degraded_sources.append(source_kind)
            insights.extend(self.normalize_records(records))

        items = aggregate(insights, limit=feed_size)
        logger.info(
            "Built insight feed with %d of %d insights (degraded sources: %s)",
            len(items),
            len(insights),
            ",".join(degraded_sources) or "none",
        )
        return InsightFeedResponse(items=items, degraded_sources=degraded_sources)

    @staticmethod
    def normalize_records(records: Iterable[SourceRecord]) -> List[Insight]:
        insights: List[Insight] = []
        for record in records:
            insight = normalize_record(record)
            if insight is not None:
                insights.append(insight)
        return insights

    @staticmethod
    def _read_source(
        source_kind: InsightSourceKind,
        reader: Callable[[int], List[R]],
        limit: int,
    ) -> Tuple[List[R], bool]:
        try:
            return reader(limit), True
        except STORAGE_ERRORS as exc:
            logger.warning("Insight source %s unavailable, treating as empty: %s", source_kind, exc)
            return [], False
