from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import ConfigDict, Field

from src.shared.base import BaseSchema


class ChatAttraction(BaseSchema):
    name: str
    category: Optional[str] = None
    rating: Optional[float] = None
    price: Optional[float] = None
    visit_count: int = 0


class CategoryBreakdown(BaseSchema):
    category: str
    count: int
    percentage: float
    avg_rating: float
    avg_price: float


class ChatContext(BaseSchema):
    total_attractions: int = 0
    total_visits: int = 0
    categories: List[str] = Field(default_factory=list)
    top_attractions: List[ChatAttraction] = Field(default_factory=list)
    category_breakdown: List[CategoryBreakdown] = Field(default_factory=list)
    user_visits: int = 0


class ChatTurn(BaseSchema):
    role: Literal["user", "assistant"]
    content: str = Field(max_length=4000)


class ChatMessageRequest(BaseSchema):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    message: str = Field(max_length=4000)
    chat_history: List[ChatTurn] = Field(default_factory=list)


class ChatReply(BaseSchema):
    message: str
    suggestions: List[str] = Field(default_factory=list)
    data_insights: List[str] = Field(default_factory=list)
    action_items: List[str] = Field(default_factory=list)


class ChatMessageResponse(ChatReply):
    timestamp: datetime


class ChatHistoryItem(BaseSchema):
    id: int
    user_message: str
    ai_response: str
    suggestions: List[str] = Field(default_factory=list)
    timestamp: datetime


class ChatHistoryResponse(BaseSchema):
    items: List[ChatHistoryItem]


class ChatRecommendations(BaseSchema):
    recommendations: List[str] = Field(default_factory=list)
    insights: List[str] = Field(default_factory=list)
    timestamp: datetime
