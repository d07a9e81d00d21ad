from __future__ import annotations

from typing import List

from src.core.supabase import SupabaseClient
from src.models.tourism import AlertRecord, PredictiveModelRecord, ReportRecord

MAX_SOURCE_ROWS = 100


class InsightSourcesRepository:
    def __init__(self) -> None:
        self.client = SupabaseClient()

    def list_predictive_models(self, limit: int) -> List[PredictiveModelRecord]:
        rows, _ = self.client.select(
            table="predictive_models",
            select="id,prediction_type,predicted_value,generated_date,model_data,attraction_id",
            limit=min(max(limit, 1), MAX_SOURCE_ROWS),
            order="generated_date.desc",
        )
        return [PredictiveModelRecord.model_validate(row) for row in rows]

    def list_unresolved_alerts(self, limit: int) -> List[AlertRecord]:
        rows, _ = self.client.select(
            table="alerts",
            select="id,alert_type,alert_message,alert_data,triggered_at,alert_resolved",
            filters=[("alert_resolved", "eq.false")],
            limit=min(max(limit, 1), MAX_SOURCE_ROWS),
            order="triggered_at.desc",
        )
        return [AlertRecord.model_validate(row) for row in rows]

    def list_reports(self, limit: int) -> List[ReportRecord]:
        rows, _ = self.client.select(
            table="reports",
            select="id,report_type,report_title,description,report_data,generated_date,attraction_id",
            limit=min(max(limit, 1), MAX_SOURCE_ROWS),
            order="generated_date.desc",
        )
        return [ReportRecord.model_validate(row) for row in rows]
