from __future__ import annotations

import json
import math
import logging
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


def _loads(raw_value: Any, label: str) -> Any:
    if raw_value is None:
        return None
    if isinstance(raw_value, (dict, list)):
        return raw_value
    if isinstance(raw_value, (bytes, bytearray)):
        raw_value = raw_value.decode("utf-8", errors="replace")
    if not isinstance(raw_value, str):
        logger.warning("Ignoring %s of unsupported type %s", label, type(raw_value).__name__)
        return None
    if not raw_value.strip():
        return None
    try:
        return json.loads(raw_value)
    except json.JSONDecodeError as exc:
        logger.warning("Ignoring malformed %s: %s", label, exc)
        return None


def parse_json_object(raw_value: Any, label: str = "payload") -> Dict[str, Any]:
    """Decode a stored JSON blob into a dict. Null, empty or malformed input yields {}."""
    decoded = _loads(raw_value, label)
    return decoded if isinstance(decoded, dict) else {}


def parse_json_list(raw_value: Any, label: str = "payload") -> List[Any]:
    decoded = _loads(raw_value, label)
    return decoded if isinstance(decoded, list) else []


def optional_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None
