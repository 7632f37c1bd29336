from __future__ import annotations

from datetime import date, datetime, timezone

UTC = timezone.utc


def utc_now() -> datetime:
    return datetime.now(UTC)


def server_date(now_utc: datetime) -> date:
    """Calendar date that keys daily counters (swipe quota, tasks, prize draw)."""
    return now_utc.astimezone(UTC).date()
