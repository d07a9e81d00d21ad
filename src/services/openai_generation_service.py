from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

import httpx
from pydantic import ValidationError

from src.core.config import get_settings
from src.core.errors import AiGenerationError
from src.schemas.chat import ChatContext, ChatReply, ChatTurn
from src.schemas.forecasts import ForecastConfig, HistoricalStatsSummary, PredictiveAnalytics

logger = logging.getLogger(__name__)

OPENAI_CHAT_COMPLETIONS_URL = "https://api.openai.com/v1/chat/completions"

PERIOD_GUIDANCE: Dict[str, Dict[str, str]] = {
    "month": {
        "instructions": (
            "Analyze monthly trends, seasonal effects and holiday impacts. Focus on mid-term "
            "planning and monthly revenue cycles."
        ),
        "growth_range": "5-15%",
        "visitor_range": "12000-30000",
        "focus": "monthly planning and seasonal preparation",
    },
    "quarter": {
        "instructions": (
            "Focus on quarterly business cycles, seasonal tourism patterns and strategic "
            "planning metrics. Emphasize 3-month trend analysis."
        ),
        "growth_range": "8-25%",
        "visitor_range": "25000-60000",
        "focus": "quarterly strategy and long-term trends",
    },
}

FORECAST_SYSTEM_PROMPT = (
    "You are a tourism analytics expert. Using only the historical data supplied, produce "
    "forward-looking metrics for the requested analysis period. Reply with a single JSON object: "
    '{"forecastMetrics": {"nextMonthVisitors": number, "nextMonthRevenue": number, '
    '"quarterlyRevenue": number, "seasonalIndex": number (0.5-2.0), "accuracyScore": number (85-98), '
    '"growthRate": number}, "insights": {"keyPredictions": [string], "riskFactors": [string], '
    '"opportunities": [string]}}. Keep predictions, risks and opportunities specific to the period.'
)

CHAT_SYSTEM_PROMPT = (
    "You are a tourism data assistant for tourism authorities. The context object holds live "
    "statistics from the tourism database: attraction and visit totals, categories, a category "
    "breakdown and the top attractions. Quote specific numbers, attraction names and percentages "
    "from it, and do not invent figures that are not present. Reply with a single JSON object: "
    '{"message": string, "suggestions": [string], "dataInsights": [string], "actionItems": [string]}.'
)


@dataclass
class ModelExecutionResult:
    payload: Dict[str, Any]
    model_name: str
    tokens_used: int
    latency_ms: int


class OpenAiGenerationService:
    OPERATION_FORECAST = "predictive_analytics"
    OPERATION_CHAT = "chat_response"

    def __init__(self) -> None:
        self.settings = get_settings()

    def generate_predictive_analytics(
        self,
        stats: HistoricalStatsSummary,
        config: ForecastConfig,
    ) -> PredictiveAnalytics:
        result = self.build_structured_output(
            operation=self.OPERATION_FORECAST,
            model_name=self.settings.openai_model_forecast,
            system_prompt=FORECAST_SYSTEM_PROMPT,
            user_payload=self.build_forecast_payload(stats, config),
        )
        return self.parse_predictive_analytics(result.payload)

    def generate_chat_response(
        self,
        message: str,
        context: ChatContext,
        recent_history: Sequence[ChatTurn],
    ) -> ChatReply:
        result = self.build_structured_output(
            operation=self.OPERATION_CHAT,
            model_name=self.settings.openai_model_chat,
            system_prompt=CHAT_SYSTEM_PROMPT,
            user_payload={
                "context": context.model_dump(by_alias=True, mode="json"),
                "recentConversation": [
                    {"role": turn.role, "content": turn.content} for turn in recent_history
                ],
                "question": message,
            },
        )
        return self.parse_chat_reply(result.payload)

    @staticmethod
    def build_forecast_payload(
        stats: HistoricalStatsSummary,
        config: ForecastConfig,
        today: Optional[date] = None,
    ) -> Dict[str, Any]:
        guidance = PERIOD_GUIDANCE[config.period]
        return {
            "analysisContext": {
                "currentDate": (today or date.today()).isoformat(),
                "period": config.period,
                "forecastHorizonMonths": config.forecast_horizon,
                "includeSeasonality": config.include_seasonality,
                "periodInstructions": guidance["instructions"],
                "targetFocus": guidance["focus"],
                "expectedGrowthRange": guidance["growth_range"],
                "expectedVisitorRange": guidance["visitor_range"],
            },
            "historicalData": stats.model_dump(by_alias=True, mode="json"),
        }

    @staticmethod
    def parse_predictive_analytics(payload: Dict[str, Any]) -> PredictiveAnalytics:
        insights = payload.get("insights") if isinstance(payload.get("insights"), dict) else {}
        shaped = {
            "forecastMetrics": payload.get("forecastMetrics"),
            "insights": {
                "keyPredictions": _string_list(insights.get("keyPredictions")),
                "riskFactors": _string_list(insights.get("riskFactors")),
                "opportunities": _string_list(insights.get("opportunities")),
            },
        }
        try:
            return PredictiveAnalytics.model_validate(shaped)
        except ValidationError as exc:
            logger.error("AI forecast response missing required metrics: %s", exc)
            raise AiGenerationError(
                OpenAiGenerationService.OPERATION_FORECAST,
                "Forecast generation failed: the AI response was malformed",
            ) from exc

    @staticmethod
    def parse_chat_reply(payload: Dict[str, Any]) -> ChatReply:
        message = payload.get("message")
        if not isinstance(message, str) or not message.strip():
            logger.error("AI chat response missing message text")
            raise AiGenerationError(
                OpenAiGenerationService.OPERATION_CHAT,
                "Chat generation failed: the AI response was malformed",
            )
        return ChatReply(
            message=message.strip(),
            suggestions=_string_list(payload.get("suggestions")),
            data_insights=_string_list(payload.get("dataInsights")),
            action_items=_string_list(payload.get("actionItems")),
        )

    def build_structured_output(
        self,
        *,
        operation: str,
        model_name: str,
        system_prompt: str,
        user_payload: Dict[str, Any],
    ) -> ModelExecutionResult:
        api_key = self.settings.openai_api_key
        if not api_key:
            logger.error("AI %s requested but OPENAI_API_KEY is not configured", operation)
            raise AiGenerationError(operation, "AI generation is not configured")

        attempts = max(self.settings.openai_max_retries, 0) + 1
        last_error: Optional[Exception] = None
        for attempt in range(1, attempts + 1):
            started = time.perf_counter()
            try:
                response = httpx.post(
                    OPENAI_CHAT_COMPLETIONS_URL,
                    headers={
                        "Authorization": f"Bearer {api_key}",
                        "Content-Type": "application/json",
                    },
                    json={
                        "model": model_name,
                        "temperature": 0.2,
                        "response_format": {"type": "json_object"},
                        "messages": [
                            {"role": "system", "content": system_prompt},
                            {
                                "role": "user",
                                "content": json.dumps(
                                    user_payload,
                                    separators=(",", ":"),
                                ),
                            },
                        ],
                    },
                    timeout=self.settings.openai_timeout_seconds,
                )
                response.raise_for_status()
                payload = response.json()
                content = self._extract_content(payload)
                structured_payload = json.loads(content)
                if not isinstance(structured_payload, dict):
                    raise ValueError("Model response must be a JSON object")
                usage = payload.get("usage") or {}
                result = ModelExecutionResult(
                    payload=structured_payload,
                    model_name=model_name,
                    tokens_used=int(usage.get("total_tokens", 0) or 0),
                    latency_ms=int((time.perf_counter() - started) * 1000),
                )
                logger.info(
                    "AI %s completed with %s in %dms using %d tokens (attempt %d)",
                    operation,
                    result.model_name,
                    result.latency_ms,
                    result.tokens_used,
                    attempt,
                )
                return result
            except (httpx.HTTPError, ValueError) as exc:
                last_error = exc
                logger.warning(
                    "AI %s attempt %d/%d with %s failed: %s",
                    operation,
                    attempt,
                    attempts,
                    model_name,
                    exc,
                )

        logger.error("AI %s failed after %d attempts", operation, attempts)
        raise AiGenerationError(operation) from last_error

    @staticmethod
    def _extract_content(response_payload: Dict[str, Any]) -> str:
        choices = response_payload.get("choices")
        if not isinstance(choices, list) or not choices:
            raise ValueError("Model response choices missing")
        message = choices[0].get("message") if isinstance(choices[0], dict) else None
        if not isinstance(message, dict):
            raise ValueError("Model response message missing")
        content = message.get("content")
        if not isinstance(content, str):
            raise ValueError("Model response content missing")
        return content


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if item is not None and str(item).strip()]
