from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class ErrorDetail(BaseModel):
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None


class ErrorEnvelope(BaseModel):
    error: ErrorDetail


class AppError(Exception):
    status_code = 400

    def __init__(
        self,
        code: str,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details


class BadRequestError(AppError):
    def __init__(self, message: str = "Bad request") -> None:
        super().__init__(code="bad_request", message=message, status_code=400)


class AiGenerationError(AppError):
    """The AI backend failed or replied with something unusable. Safe to retry."""

    def __init__(self, operation: str, message: str = "AI generation failed") -> None:
        super().__init__(
            code="ai_generation_failed",
            message=message,
            status_code=502,
            details={"operation": operation, "retryable": True},
        )
        self.operation = operation


def _error_response(status_code: int, detail: ErrorDetail) -> JSONResponse:
    content = jsonable_encoder(ErrorEnvelope(error=detail))
    return JSONResponse(status_code=status_code, content=content)


def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.code)
    return _error_response(
        exc.status_code,
        ErrorDetail(code=exc.code, message=exc.message, details=exc.details),
    )


def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return _error_response(
        422,
        ErrorDetail(
            code="validation_error",
            message="Validation error",
            details={"errors": exc.errors()},
        ),
    )
