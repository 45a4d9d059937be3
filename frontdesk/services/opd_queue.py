# FILE: frontdesk/services/opd_queue.py
from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from frontdesk.crud.common import is_unique_violation
from frontdesk.models.opd import OpdQueueEntry
from frontdesk.services.audit_logger import audit_created
from frontdesk.services.number_series import date_key, next_sequence
from frontdesk.utils.timezone import now_local

QUEUE_SERIES_KEY = "OPQ"


def get_queue_entry(db: Session, patient_id: int,
                    registration_date: date) -> Optional[OpdQueueEntry]:
    return (db.query(OpdQueueEntry).filter(
        OpdQueueEntry.patient_id == patient_id,
        OpdQueueEntry.registration_date == registration_date,
    ).first())


def add_to_queue(
    db: Session,
    patient_id: int,
    registration_date: Optional[date] = None,
    priority: int = 0,
    notes: Optional[str] = None,
    staff_id: Optional[int] = None,
) -> OpdQueueEntry:
    """
    Put the patient in the day's vitals / triage queue with the next queue
    number. One entry per patient per day: a repeat call returns the entry
    already there.
    """
    now = now_local()
    reg_date = registration_date or now.date()

    existing = get_queue_entry(db, patient_id, reg_date)
    if existing:
        return existing

    entry = OpdQueueEntry(
        patient_id=patient_id,
        queue_number=next_sequence(db, QUEUE_SERIES_KEY, date_key(reg_date)),
        registration_date=reg_date,
        registration_time=now.strftime("%H:%M:%S"),
        status="waiting",
        priority=priority or 0,
        notes=notes,
        staff_id=staff_id,
    )
    db.add(entry)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if is_unique_violation(e):
            existing = get_queue_entry(db, patient_id, reg_date)
            if existing:
                return existing
        raise
    db.refresh(entry)
    audit_created(db, entry, user_id=staff_id)
    return entry
