# FILE: frontdesk/services/uhid.py
from __future__ import annotations

import logging
import re
import time
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from frontdesk.core.config import settings
from frontdesk.crud.crud_patients import find_max_uhid_suffix, uhid_exists
from frontdesk.services.errors import UhidAllocationExhausted, UhidCapacityExceeded
from frontdesk.services.number_series import next_sequence, peek_sequence
from frontdesk.utils.timezone import to_local

logger = logging.getLogger(__name__)

UHID_SERIES_KEY = "UHID"
MAX_SEQ = 9999


# ----------------------------
# Format helpers
# ----------------------------
def uhid_period(now: Optional[datetime] = None) -> str:
    return to_local(now).strftime("%y%m")


def uhid_prefix(now: Optional[datetime] = None) -> str:
    """AH + YY + MM on the hospital clock, e.g. AH2510."""
    return f"{settings.UHID_PREFIX}{uhid_period(now)}"


def format_uhid(prefix: str, seq: int) -> str:
    return f"{prefix}-{seq:04d}"


def uhid_pattern() -> re.Pattern:
    return re.compile(rf"^{re.escape(settings.UHID_PREFIX)}\d{{4}}-\d{{4}}$")


def is_valid_uhid(uhid: str) -> bool:
    return bool(uhid_pattern().match(uhid or ""))


# ----------------------------
# Allocation
# ----------------------------
def allocate_uhid(db: Session, now: Optional[datetime] = None) -> str:
    """
    Reserve the next UHID for the month of `now` (default: current time).

    The per-month counter row is bumped atomically and committed at once, so
    concurrent registrations never receive the same number. A counter that
    does not exist yet starts after the highest UHID already stored for the
    month. Numbers already taken in `patients` (pre-allocated UHIDs written
    without going through the counter) are skipped, up to
    UHID_MAX_ATTEMPTS draws.
    """
    prefix = uhid_prefix(now)
    period = uhid_period(now)
    attempts = max(1, settings.UHID_MAX_ATTEMPTS)

    for attempt in range(1, attempts + 1):
        try:
            seq = next_sequence(
                db,
                UHID_SERIES_KEY,
                period,
                seed=lambda: find_max_uhid_suffix(db, prefix) or 0,
            )
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise

        if seq > MAX_SEQ:
            raise UhidCapacityExceeded(prefix)

        uhid = format_uhid(prefix, seq)
        if not uhid_exists(db, uhid):
            return uhid

        logger.warning("UHID %s already in use, drawing again (attempt %s/%s)",
                       uhid, attempt, attempts)
        if settings.UHID_RETRY_DELAY_MS > 0:
            time.sleep(settings.UHID_RETRY_DELAY_MS / 1000.0)

    raise UhidAllocationExhausted(prefix, attempts)


def preview_next_uhid(db: Session, now: Optional[datetime] = None) -> str:
    """What allocate_uhid would most likely return. Reserves nothing."""
    prefix = uhid_prefix(now)
    seq = peek_sequence(
        db,
        UHID_SERIES_KEY,
        uhid_period(now),
        seed=lambda: find_max_uhid_suffix(db, prefix) or 0,
    )
    if seq > MAX_SEQ:
        raise UhidCapacityExceeded(prefix)
    return format_uhid(prefix, seq)
