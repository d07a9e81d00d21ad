from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class PredictiveModelRecord(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    id: int
    prediction_type: str
    predicted_value: float
    generated_date: datetime
    model_data: Any = None
    attraction_id: Optional[int] = None


class AlertRecord(BaseModel):
    id: int
    alert_type: str
    alert_message: str
    alert_data: Any = None
    triggered_at: datetime
    alert_resolved: bool = False


class ReportRecord(BaseModel):
    id: int
    report_type: str
    report_title: Optional[str] = None
    description: Optional[str] = None
    report_data: Any = None
    generated_date: datetime
    attraction_id: Optional[int] = None


class VisitAttractionRecord(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = None


class VisitRecord(BaseModel):
    id: int
    visit_date: datetime
    amount: Optional[float] = None
    rating: Optional[float] = None
    user_id: Optional[int] = None
    attraction_id: Optional[int] = None
    attraction: Optional[VisitAttractionRecord] = None


class AttractionPerformanceRecord(BaseModel):
    id: int
    name: str
    category: Optional[str] = None
    price: Optional[float] = None
    rating: Optional[float] = None
    visit_count: int = 0


class MonthlyTrendRecord(BaseModel):
    month: str
    visits: int = 0
    revenue: Optional[float] = None
    avg_revenue: Optional[float] = None
    avg_rating: Optional[float] = None


class CategoryStatsRecord(BaseModel):
    category: str
    attraction_count: int = 0
    avg_rating: Optional[float] = None
    avg_price: Optional[float] = None


class ChatMessageRecord(BaseModel):
    id: int
    user_id: Optional[int] = None
    user_message: str
    ai_response: str
    suggestions: Any = None
    timestamp: datetime
