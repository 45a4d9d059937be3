# FILE: frontdesk/services/ipd_beds.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from frontdesk.models.ipd import BedAllocation, IpdBed
from frontdesk.services.audit_logger import audit_created
from frontdesk.services.errors import ActiveAllocationExists, BedUnavailable
from frontdesk.services.number_series import date_key, next_sequence
from frontdesk.utils.timezone import now_local, to_local

ALLOCATION_SERIES_KEY = "BA"
IP_SERIES_KEY = "IP"


def get_active_allocation(db: Session, patient_id: int) -> Optional[BedAllocation]:
    return (db.query(BedAllocation).filter(
        BedAllocation.patient_id == patient_id,
        BedAllocation.status == "active",
    ).first())


def _reserve(db: Session, key: str, period_key: str) -> int:
    try:
        n = next_sequence(db, key, period_key)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return n


def allocate_bed(
    db: Session,
    *,
    patient_id: int,
    bed_id: int,
    admission_date: Optional[datetime] = None,
    reason: str = "",
    doctor_id: Optional[int] = None,
    admission_type: str = "inpatient",
    staff_id: Optional[int] = None,
    ip_number: Optional[str] = None,
) -> BedAllocation:
    """
    Allocate an available bed. The bed flip to `occupied` and the allocation
    row commit together; a bed taken in the meantime raises BedUnavailable.

    allocation_id: BA{YYYYMMDD}{NNNN}, ip_number: IP{YY}{MM}{NNNN}
    """
    if get_active_allocation(db, patient_id):
        raise ActiveAllocationExists("Patient already has an active bed allocation")

    admitted_at = to_local(admission_date)
    today = now_local()

    # committed one at a time; a seeding collision rolls back the whole session
    alloc_seq = _reserve(db, ALLOCATION_SERIES_KEY, date_key(today.date()))
    if not ip_number:
        period = today.strftime("%y%m")
        ip_number = f"IP{period}{_reserve(db, IP_SERIES_KEY, period):04d}"

    try:
        taken = db.execute(
            update(IpdBed)
            .where(IpdBed.id == bed_id, IpdBed.status == "available")
            .values(status="occupied")
            .execution_options(synchronize_session=False))
        if not taken.rowcount:
            db.rollback()
            raise BedUnavailable(f"Bed is not available for allocation. (ID: {bed_id})")

        allocation = BedAllocation(
            allocation_id=f"BA{date_key(today.date())}{alloc_seq:04d}",
            ip_number=ip_number,
            patient_id=patient_id,
            bed_id=bed_id,
            doctor_id=doctor_id,
            staff_id=staff_id,
            admission_date=admitted_at,
            admission_type=admission_type or "inpatient",
            reason=reason or "",
            status="active",
        )
        db.add(allocation)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(allocation)
    audit_created(db, allocation, user_id=staff_id)
    return allocation
