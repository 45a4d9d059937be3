# FILE: frontdesk/services/billing_advance.py
from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from frontdesk.models.billing import Advance
from frontdesk.services.audit_logger import audit_created
from frontdesk.utils.timezone import now_local

# ---------- helpers ----------
TWOPLACES = Decimal("0.01")


def D(x) -> Decimal:
    """Safe Decimal conversion (never Decimal -= float)."""
    if x is None:
        return Decimal("0")
    if isinstance(x, Decimal):
        return x
    return Decimal(str(x))  # IMPORTANT: str() avoids float binary issues


def money(x) -> Decimal:
    """Money rounding to 2 decimals."""
    return D(x).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def create_advance_record(
    db: Session,
    *,
    patient_id: int,
    amount,  # can be float/str/Decimal
    allocation_id: Optional[int] = None,
    mode: Optional[str] = None,
    reference_no: Optional[str] = None,
    remarks: Optional[str] = None,
    created_by: Optional[int] = None,
) -> Advance:
    amt = money(amount)
    if amt <= 0:
        raise ValueError("Amount must be > 0")

    adv = Advance(
        patient_id=patient_id,
        allocation_id=allocation_id,
        amount=amt,
        balance_remaining=amt,
        mode=(mode or "cash").strip().lower(),
        reference_no=reference_no,
        remarks=remarks,
        received_at=now_local(),
        created_by=created_by,
    )
    db.add(adv)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(adv)
    audit_created(db, adv, user_id=created_by)
    return adv
