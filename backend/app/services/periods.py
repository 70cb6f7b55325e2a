"""Calendar helpers in the shop's local timezone."""
from __future__ import annotations

from datetime import date, datetime, time, timezone, tzinfo

from backend.app.core.config import settings


def shop_tz(tz: tzinfo | None = None) -> tzinfo:
    return tz or settings.shop_tz


def local_now(now: datetime | None = None, tz: tzinfo | None = None) -> datetime:
    """Wall-clock now in the shop timezone (``now`` may be naive UTC)."""
    zone = shop_tz(tz)
    if now is None:
        return datetime.now(zone)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(zone)


def local_date(moment: datetime, tz: tzinfo | None = None) -> date:
    """Calendar day of *moment* as seen in the shop."""
    return local_now(moment, tz).date()


def day_start(day: date, tz: tzinfo | None = None) -> datetime:
    return datetime.combine(day, time.min, tzinfo=shop_tz(tz))


def day_end(day: date, tz: tzinfo | None = None) -> datetime:
    return datetime.combine(day, time.max, tzinfo=shop_tz(tz))


def to_utc(moment: datetime | None) -> datetime:
    """Normalise a timestamp for storage; ``None`` means now."""
    if moment is None:
        return datetime.now(timezone.utc)
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)
