from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Any, Dict, List

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.abspath(os.path.join(SCRIPT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


def load_env_file(env_path: str) -> None:
    if not os.path.exists(env_path):
        return
    with open(env_path, "r", encoding="utf-8") as env_file:
        for line in env_file:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            os.environ.setdefault(key, value)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate AI forecast models from visit and attraction history."
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=3,
        help="Number of forecast models and top attractions to include (default: 3).",
    )
    parser.add_argument(
        "--period",
        choices=("month", "quarter"),
        default="month",
        help="Analysis period passed to the forecast prompt (default: month).",
    )
    parser.add_argument(
        "--horizon",
        type=int,
        default=3,
        help="Forecast horizon in months, 1-12 (default: 3).",
    )
    parser.add_argument(
        "--no-seasonality",
        action="store_true",
        help="Ask the model to ignore seasonal effects.",
    )
    parser.add_argument(
        "--stats-only",
        action="store_true",
        help="Print the historical statistics summary without calling the AI backend.",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Environment file path (default: .env).",
    )
    return parser.parse_args()


def run_stats(limit: int) -> Dict[str, Any]:
    from src.api.dependencies import get_historical_stats_service

    stats = get_historical_stats_service().build_stats(limit)
    return stats.model_dump(by_alias=True, mode="json")


def run_forecast(limit: int, period: str, horizon: int, include_seasonality: bool) -> List[Dict[str, Any]]:
    from src.api.dependencies import get_forecast_service
    from src.schemas.forecasts import ForecastConfig

    config = ForecastConfig(
        period=period,
        forecast_horizon=horizon,
        include_seasonality=include_seasonality,
    )
    models = get_forecast_service().get_predictive_models(limit, config)
    return [model.model_dump(by_alias=True, mode="json") for model in models]


def main() -> None:
    args = parse_args()
    load_env_file(args.env_file)

    from src.core.config import get_settings
    from src.core.errors import AppError
    from src.core.logging import configure_logging

    configure_logging(get_settings().log_level)
    if args.stats_only:
        print(json.dumps(run_stats(args.limit), indent=2, sort_keys=True))
        return
    try:
        result = run_forecast(
            limit=args.limit,
            period=args.period,
            horizon=args.horizon,
            include_seasonality=not args.no_seasonality,
        )
    except AppError as exc:
        print(json.dumps({"error": {"code": exc.code, "message": exc.message}}, indent=2))
        sys.exit(1)
    print(json.dumps(result, indent=2, sort_keys=True))


if __name__ == "__main__":
    main()
