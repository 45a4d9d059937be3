# FILE: frontdesk/models/billing.py
from datetime import datetime

from sqlalchemy import (Column, Integer, String, DateTime, Numeric, Boolean,
                        ForeignKey, Index)

from frontdesk.db.base import Base


class Advance(Base):
    """
    Patient advance payments (IP advance collected at admission).
    Adjusted against invoices later by billing; this service only records them.
    """

    __tablename__ = "billing_advances"
    __table_args__ = (Index("ix_billing_advances_patient_alloc", "patient_id",
                            "allocation_id"), )

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(
        Integer,
        ForeignKey("patients.id"),
        nullable=False,
        index=True,
    )
    allocation_id = Column(Integer,
                           ForeignKey("bed_allocations.id"),
                           nullable=True)

    amount = Column(Numeric(12, 2), nullable=False)
    balance_remaining = Column(Numeric(12, 2), nullable=False)

    mode = Column(String(32), nullable=False)  # cash/card/upi/other
    reference_no = Column(String(100), nullable=True)
    remarks = Column(String(255), nullable=True)

    received_at = Column(DateTime, default=datetime.utcnow)
    is_voided = Column(Boolean, default=False, nullable=False)

    created_by = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
