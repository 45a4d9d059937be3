# FILE: frontdesk/models/ipd.py
from __future__ import annotations
from datetime import datetime
from sqlalchemy import (Column, Integer, String, DateTime, Text, ForeignKey,
                        Index)
from sqlalchemy.orm import relationship
from frontdesk.db.base import Base


class IpdBed(Base):
    __tablename__ = "beds"
    __table_args__ = (
        Index("ix_beds_status", "status"),
        {
            "mysql_engine": "InnoDB",
            "mysql_charset": "utf8mb4",
        },
    )

    id = Column(Integer, primary_key=True)
    bed_number = Column(String(30), unique=True, nullable=False)
    room_number = Column(String(30), default="")
    bed_type = Column(String(30), default="general")
    status = Column(String(20),
                    default="available")  # available/occupied/maintenance/reserved


class BedAllocation(Base):
    __tablename__ = "bed_allocations"
    __table_args__ = (
        Index("ix_bed_alloc_patient_status", "patient_id", "status"),
        {
            "mysql_engine": "InnoDB",
            "mysql_charset": "utf8mb4",
        },
    )

    id = Column(Integer, primary_key=True)
    allocation_id = Column(String(20), unique=True, nullable=False)  # BAYYYYMMDDNNNN
    ip_number = Column(String(20), unique=True, index=True, nullable=True)  # IPYYMMNNNN
    patient_id = Column(Integer,
                        ForeignKey("patients.id"),
                        nullable=False,
                        index=True)
    bed_id = Column(Integer, ForeignKey("beds.id"),
                    nullable=False,
                    index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=True)
    staff_id = Column(Integer, nullable=True)

    admission_date = Column(DateTime, nullable=False)
    admission_type = Column(String(20), default="inpatient")
    reason = Column(Text, default="")
    status = Column(String(20), default="active")  # active/discharged/transferred

    allocated_at = Column(DateTime, default=datetime.utcnow)
    discharged_at = Column(DateTime, nullable=True)

    bed = relationship("IpdBed")
