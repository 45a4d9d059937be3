# FILE: frontdesk/utils/timezone.py
from __future__ import annotations

from datetime import datetime, date
from typing import Optional
from zoneinfo import ZoneInfo

from frontdesk.core.config import settings


def hospital_tz() -> ZoneInfo:
    return ZoneInfo(settings.TIMEZONE or "Asia/Kolkata")


def now_local() -> datetime:
    """
    Returns a *naive* datetime on the hospital wall clock.
    DateTime columns are naive, so everything stored uses this clock.
    """
    return datetime.now(hospital_tz()).replace(tzinfo=None)


def today_local() -> date:
    return now_local().date()


def to_local(dt: Optional[datetime]) -> datetime:
    """
    - None   -> now on the hospital clock
    - naive  -> already hospital wall time, returned as-is
    - aware  -> converted to the hospital zone, tzinfo dropped
    """
    if dt is None:
        return now_local()
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(hospital_tz()).replace(tzinfo=None)
