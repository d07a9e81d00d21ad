from __future__ import annotations

from typing import Any, Dict, List, Optional

from src.core.supabase import SupabaseClient
from src.models.tourism import ChatMessageRecord

MAX_HISTORY_ROWS = 100


class ChatRepository:
    def __init__(self) -> None:
        self.client = SupabaseClient()

    def insert_chat_message(self, row: Dict[str, Any]) -> Optional[ChatMessageRecord]:
        rows = self.client.insert("chat_messages", row)
        return ChatMessageRecord.model_validate(rows[0]) if rows else None

    def list_chat_history(self, user_id: int, limit: int) -> List[ChatMessageRecord]:
        rows, _ = self.client.select(
            table="chat_messages",
            select="id,user_id,user_message,ai_response,suggestions,timestamp",
            filters=[("user_id", f"eq.{user_id}")],
            limit=min(max(limit, 1), MAX_HISTORY_ROWS),
            order="timestamp.desc",
        )
        return [ChatMessageRecord.model_validate(row) for row in rows]
