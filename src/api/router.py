from __future__ import annotations

from fastapi import APIRouter

from src.api.ai_chat import router as ai_chat_router
from src.api.health import router as health_router
from src.api.insights import router as insights_router
from src.api.predictive import router as predictive_router


api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(insights_router)
api_router.include_router(predictive_router)
api_router.include_router(ai_chat_router)
