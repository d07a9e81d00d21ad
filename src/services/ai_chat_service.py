from __future__ import annotations

import json
import logging
from typing import List, Optional, Sequence


from src.core.config import get_settings
from src.core.supabase import STORAGE_ERRORS
from src.core.errors import BadRequestError
from src.repositories.chat_repository import ChatRepository
from src.schemas.chat import (
    ChatHistoryItem,
    ChatMessageResponse,
    ChatRecommendations,
    ChatReply,
    ChatTurn,
)
from src.services.chat_context_service import ChatContextService
from src.services.openai_generation_service import OpenAiGenerationService
from src.shared.payloads import parse_json_list
from src.shared.time import utc_now

logger = logging.getLogger(__name__)

RECOMMENDATION_PROMPT = (
    "Based on the tourism data provided, generate 5 personalized attraction recommendations "
    "for a tourist. Consider popular attractions, variety of categories, and good ratings."
)


class AiChatService:
    def __init__(
        self,
        context_service: ChatContextService,
        openai_service: OpenAiGenerationService,
        repository: ChatRepository,
    ) -> None:
        self.context_service = context_service
        self.openai_service = openai_service
        self.repository = repository
        self.settings = get_settings()

    def send_message(
        self,
        user_id: Optional[int],
        message: str,
        chat_history: Sequence[ChatTurn] = (),
    ) -> ChatMessageResponse:
        text = message.strip()
        if not text:
            raise BadRequestError("Message is required and cannot be empty")

        context = self.context_service.build_context(user_id)
        turns = self.settings.chat_history_turns
        recent_history = list(chat_history)[-turns:] if turns > 0 else []
        reply = self.openai_service.generate_chat_response(text, context, recent_history)
        timestamp = utc_now()
        self._save_exchange(user_id, text, reply)
        return ChatMessageResponse(**reply.model_dump(), timestamp=timestamp)

    def get_history(self, user_id: int, limit: int = 20) -> List[ChatHistoryItem]:
        try:
            records = self.repository.list_chat_history(user_id, limit)
        except STORAGE_ERRORS as exc:
            logger.warning("Chat history for user %s unavailable: %s", user_id, exc)
            return []
        return [
            ChatHistoryItem(
                id=record.id,
                user_message=record.user_message,
                ai_response=record.ai_response,
                suggestions=[
                    str(item)
                    for item in parse_json_list(
                        record.suggestions, label=f"suggestions of chat message {record.id}"
                    )
                ],
                timestamp=record.timestamp,
            )
            for record in records
        ]

    def get_recommendations(self, user_id: Optional[int]) -> ChatRecommendations:
        context = self.context_service.build_context(user_id)
        reply = self.openai_service.generate_chat_response(RECOMMENDATION_PROMPT, context, [])
        return ChatRecommendations(
            recommendations=reply.action_items,
            insights=reply.data_insights,
            timestamp=utc_now(),
        )

    def _save_exchange(self, user_id: Optional[int], message: str, reply: ChatReply) -> None:
        if user_id is None:
            return
        try:
            self.repository.insert_chat_message(
                {
                    "user_id": user_id,
                    "user_message": message,
                    "ai_response": reply.message,
                    "suggestions": json.dumps(reply.suggestions),
                    "data_insights": json.dumps(reply.data_insights),
                    "action_items": json.dumps(reply.action_items),
                    "timestamp": utc_now().isoformat(),
                }
            )
        except STORAGE_ERRORS as exc:
            logger.warning("Failed to save chat message for user %s: %s", user_id, exc)
