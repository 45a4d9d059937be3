# FILE: frontdesk/services/number_series.py
from __future__ import annotations

from datetime import date
from typing import Callable, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from frontdesk.models.number_series import NumberSeries


def date_key(d: date) -> str:
    return d.strftime("%Y%m%d")


def _bump(db: Session, key: str, period_key: str) -> Optional[int]:
    # single UPDATE first: takes the row (or, on sqlite, the db write) lock
    # before anything is read, so two callers never see the same value
    res = db.execute(
        update(NumberSeries)
        .where(NumberSeries.key == key, NumberSeries.period_key == period_key)
        .values(next_seq=NumberSeries.next_seq + 1)
        .execution_options(synchronize_session=False))
    if not res.rowcount:
        return None
    nxt = db.execute(
        select(NumberSeries.next_seq).where(
            NumberSeries.key == key,
            NumberSeries.period_key == period_key,
        )).scalar_one()
    return int(nxt) - 1


def next_sequence(
    db: Session,
    key: str,  # e.g. "UHID", "OPQ", "APT"
    period_key: str,  # e.g. "2510", "20251014"
    *,
    seed: Optional[Callable[[], int]] = None,
    max_retry: int = 5,
) -> int:
    """
    Concurrency-safe counter over NumberSeries with UNIQUE(key, period_key).

    Returns the reserved number (1, 2, 3 ... per period). The change is only
    flushed; the caller commits it together with the row that uses it.
    Call it at the start of a unit of work: a seeding collision rolls the
    session back.

    `seed` returns the highest number already in use when the series row does
    not exist yet (e.g. rows written before the counter table was introduced).
    """
    for _ in range(max_retry):
        n = _bump(db, key, period_key)
        if n is not None:
            return n

        start = int(seed() or 0) + 1 if seed else 1
        # Create row. If two callers create at same time, one hits IntegrityError.
        db.add(NumberSeries(key=key, period_key=period_key, next_seq=start + 1))
        try:
            db.flush()
            return start
        except IntegrityError:
            db.rollback()

    raise RuntimeError(f"Could not reserve a number for series {key}/{period_key}")


def peek_sequence(
    db: Session,
    key: str,
    period_key: str,
    *,
    seed: Optional[Callable[[], int]] = None,
) -> int:
    """The number next_sequence would hand out now. Reserves nothing."""
    row = (db.query(NumberSeries).filter(
        NumberSeries.key == key,
        NumberSeries.period_key == period_key,
    ).first())
    if row:
        return int(row.next_seq or 1)
    return int(seed() or 0) + 1 if seed else 1
