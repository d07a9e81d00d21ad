from __future__ import annotations

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    # Storage mixes timestamptz and naive timestamp columns; naive values are stored in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def month_window_start(months: int, today: date | None = None) -> date:
    """First day of the oldest calendar month in a window of `months` months ending this month."""
    anchor = (today or date.today()).replace(day=1)
    month_index = anchor.month - 1 - (max(months, 1) - 1)
    year = anchor.year + month_index // 12
    month = month_index % 12 + 1
    return date(year, month, 1)
