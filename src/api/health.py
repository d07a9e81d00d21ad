from __future__ import annotations

from fastapi import APIRouter

from src.shared.response import ResponseEnvelope, build_meta


router = APIRouter(tags=["health"])


@router.get("/health")
@router.get("/healthz")
def health_check() -> ResponseEnvelope[dict]:
    return ResponseEnvelope(data={"status": "ok"}, meta=build_meta("system", "now"))
