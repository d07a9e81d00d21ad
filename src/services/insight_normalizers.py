"""Map stored predictive models, alerts and reports onto the unified Insight shape.

Every mapper is pure: the same record always yields the same insight id, kind and
impact. Records that are not eligible for the feed (resolved alerts, reports without
recommendation semantics) map to ``None``.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Optional, Union

from src.models.tourism import AlertRecord, PredictiveModelRecord, ReportRecord
from src.schemas.insights import Insight, InsightImpact
from src.shared.payloads import optional_float, parse_json_object
from src.shared.time import as_utc

SourceRecord = Union[PredictiveModelRecord, AlertRecord, ReportRecord]

PREDICTIVE_HIGH_THRESHOLD = 10000
PREDICTIVE_MEDIUM_THRESHOLD = 5000
DEFAULT_PREDICTIVE_CONFIDENCE = 0.8
ALERT_CONFIDENCE = 0.95
DEFAULT_REPORT_CONFIDENCE = 0.7
REPORT_HIGH_CONFIDENCE = 0.8
REPORT_MEDIUM_CONFIDENCE = 0.6

HIGH_IMPACT_ALERT_MARKERS = ("capacity", "critical")
MEDIUM_IMPACT_ALERT_MARKERS = ("warning", "anomaly")
ELIGIBLE_REPORT_TYPES = frozenset({"recommendation", "insight"})
REPORT_TEXT_MARKER = "recommendation"

FALLBACK_PREDICTION_NOTE = "AI-powered prediction"
FALLBACK_REPORT_TITLE = "Analysis Report"
FALLBACK_REPORT_DESCRIPTION = "Detailed analysis and recommendations available"

_WORD_START = re.compile(r"\b\w")


def normalize_record(record: SourceRecord) -> Optional[Insight]:
    if isinstance(record, PredictiveModelRecord):
        return normalize_predictive_model(record)
    if isinstance(record, AlertRecord):
        return normalize_alert(record)
    if isinstance(record, ReportRecord):
        return normalize_report(record)
    raise TypeError(f"Unsupported insight source record: {type(record).__name__}")


def normalize_predictive_model(record: PredictiveModelRecord) -> Insight:
    model_data = parse_json_object(record.model_data, label=f"model_data of predictive model {record.id}")
    accuracy = _confidence_value(model_data.get("accuracy"))
    if accuracy is not None:
        note = f"Model accuracy: {int(accuracy * 100 + 0.5)}%"
    else:
        note = FALLBACK_PREDICTION_NOTE

    return Insight(
        id=insight_id("predictive", record.id),
        kind="trend",
        title=f"{title_case(record.prediction_type)} Forecast",
        description=f"Predicted value: {format_number(record.predicted_value)}. {note}",
        impact=predictive_impact(record.predicted_value),
        confidence=accuracy if accuracy is not None else DEFAULT_PREDICTIVE_CONFIDENCE,
        generated_at=as_utc(record.generated_date),
        source_kind="predictive",
        source_id=record.id,
    )


def normalize_alert(record: AlertRecord) -> Optional[Insight]:
    if record.alert_resolved:
        return None
    # Alert payloads are not displayed; parsing only surfaces malformed rows in the logs.
    parse_json_object(record.alert_data, label=f"alert_data of alert {record.id}")

    return Insight(
        id=insight_id("alert", record.id),
        kind="anomaly",
        title=title_case(record.alert_type),
        description=record.alert_message,
        impact=alert_impact(record.alert_type),
        confidence=ALERT_CONFIDENCE,
        generated_at=as_utc(record.triggered_at),
        source_kind="alert",
        source_id=record.id,
    )


def normalize_report(record: ReportRecord) -> Optional[Insight]:
    if not is_recommendation_report(record):
        return None
    report_data = parse_json_object(record.report_data, label=f"report_data of report {record.id}")
    confidence = _confidence_value(report_data.get("confidence"))
    if confidence is None:
        confidence = DEFAULT_REPORT_CONFIDENCE

    return Insight(
        id=insight_id("report", record.id),
        kind="recommendation",
        title=record.report_title or FALLBACK_REPORT_TITLE,
        description=_report_description(record, report_data),
        impact=report_impact(confidence),
        confidence=confidence,
        generated_at=as_utc(record.generated_date),
        source_kind="report",
        source_id=record.id,
    )


def insight_id(source_kind: str, source_id: int) -> str:
    return f"{source_kind}-{source_id}"


def title_case(value: str) -> str:
    return _WORD_START.sub(lambda match: match.group(0).upper(), value.replace("_", " "))


def format_number(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


def predictive_impact(predicted_value: float) -> InsightImpact:
    if predicted_value > PREDICTIVE_HIGH_THRESHOLD:
        return "high"
    if predicted_value > PREDICTIVE_MEDIUM_THRESHOLD:
        return "medium"
    return "low"


def alert_impact(alert_type: str) -> InsightImpact:
    lowered = alert_type.lower()
    if any(marker in lowered for marker in HIGH_IMPACT_ALERT_MARKERS):
        return "high"
    if any(marker in lowered for marker in MEDIUM_IMPACT_ALERT_MARKERS):
        return "medium"
    return "low"


def report_impact(confidence: float) -> InsightImpact:
    if confidence > REPORT_HIGH_CONFIDENCE:
        return "high"
    if confidence > REPORT_MEDIUM_CONFIDENCE:
        return "medium"
    return "low"


def is_recommendation_report(record: ReportRecord) -> bool:
    if record.report_type in ELIGIBLE_REPORT_TYPES:
        return True
    description = (record.description or "").lower()
    title = (record.report_title or "").lower()
    return REPORT_TEXT_MARKER in description or REPORT_TEXT_MARKER in title


def _report_description(record: ReportRecord, report_data: Dict[str, Any]) -> str:
    if record.description:
        return record.description
    recommendation = report_data.get("recommendation")
    if isinstance(recommendation, str) and recommendation.strip():
        return recommendation
    return FALLBACK_REPORT_DESCRIPTION


def _confidence_value(raw_value: Any) -> Optional[float]:
    value = optional_float(raw_value)
    if value is None:
        return None
    # Some producers store accuracy as a percentage.
    if 1.0 < value <= 100.0:
        value = value / 100.0
    return min(max(value, 0.0), 1.0)
