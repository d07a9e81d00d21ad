from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Header, Query

from src.api.dependencies import get_ai_chat_service, get_chat_context_service
from src.core.errors import BadRequestError
from src.schemas.chat import (
    ChatContext,
    ChatHistoryResponse,
    ChatMessageRequest,
    ChatMessageResponse,
    ChatRecommendations,
)
from src.services.ai_chat_service import AiChatService
from src.services.chat_context_service import ChatContextService
from src.shared.response import ResponseEnvelope, build_meta, build_pagination

router = APIRouter(prefix="/ai-chat", tags=["ai-chat"])


def get_user_id(x_user_id: Optional[int] = Header(default=None)) -> Optional[int]:
    return x_user_id


def require_user_id(user_id: Optional[int] = Depends(get_user_id)) -> int:
    if user_id is None:
        raise BadRequestError("X-User-Id header is required")
    return user_id


@router.post("/message")
def chat_message(
    request: ChatMessageRequest,
    user_id: Optional[int] = Depends(get_user_id),
    service: AiChatService = Depends(get_ai_chat_service),
) -> ResponseEnvelope[ChatMessageResponse]:
    data = service.send_message(user_id, request.message, request.chat_history)
    return ResponseEnvelope(data=data, pagination=None, meta=build_meta("ai_chat", "now"))


@router.get("/history")
def chat_history(
    limit: int = Query(default=20, ge=1, le=100),
    user_id: int = Depends(require_user_id),
    service: AiChatService = Depends(get_ai_chat_service),
) -> ResponseEnvelope[ChatHistoryResponse]:
    items = service.get_history(user_id, limit)
    pagination = build_pagination(1, limit, len(items))
    return ResponseEnvelope(
        data=ChatHistoryResponse(items=items),
        pagination=pagination,
        meta=build_meta("chat_messages", "historical"),
    )


@router.get("/recommendations")
def chat_recommendations(
    user_id: Optional[int] = Depends(get_user_id),
    service: AiChatService = Depends(get_ai_chat_service),
) -> ResponseEnvelope[ChatRecommendations]:
    data = service.get_recommendations(user_id)
    return ResponseEnvelope(data=data, pagination=None, meta=build_meta("ai_chat", "now"))


@router.get("/context")
def chat_context(
    user_id: Optional[int] = Depends(get_user_id),
    service: ChatContextService = Depends(get_chat_context_service),
) -> ResponseEnvelope[ChatContext]:
    data = service.build_context(user_id)
    return ResponseEnvelope(data=data, pagination=None, meta=build_meta("attractions,visits", "now"))
