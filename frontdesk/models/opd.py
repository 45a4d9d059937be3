# FILE: frontdesk/models/opd.py
from sqlalchemy import (
    Column,
    Integer,
    String,
    Date,
    DateTime,
    ForeignKey,
    UniqueConstraint,
    Text,
    Index,
)
from sqlalchemy.orm import relationship
from datetime import datetime
from frontdesk.db.base import Base


class OpdEncounter(Base):
    __tablename__ = "opd_encounters"
    __table_args__ = (
        Index("ix_opd_encounter_patient_date", "patient_id", "encounter_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(
        Integer,
        ForeignKey("patients.id"),
        nullable=False,
        index=True,
    )
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=True)
    encounter_date = Column(Date, nullable=False)
    encounter_type = Column(String(30), default="outpatient")
    status = Column(String(30), default="open")  # open / closed / cancelled
    chief_complaint = Column(Text, nullable=True)
    created_by = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        Index("ix_appt_patient_date", "patient_id", "appointment_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    appointment_id = Column(String(30), unique=True, nullable=False)  # APTYYYYMMDDNNNN
    patient_id = Column(
        Integer,
        ForeignKey("patients.id"),
        nullable=False,
        index=True,
    )
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=True)
    # set only for the encounter-backed shape; legacy rows leave it empty
    encounter_id = Column(Integer, ForeignKey("opd_encounters.id"), nullable=True)

    appointment_date = Column(Date, nullable=False)
    appointment_time = Column(String(8), nullable=False, default="09:00:00")
    duration_minutes = Column(Integer, default=30)
    type = Column(String(30), default="consultation")
    status = Column(String(30), default="scheduled")  # scheduled / confirmed / ...
    symptoms = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    created_by = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    encounter = relationship("OpdEncounter", foreign_keys=[encounter_id])


class OpdQueueEntry(Base):
    __tablename__ = "outpatient_queue"
    __table_args__ = (
        UniqueConstraint(
            "patient_id",
            "registration_date",
            name="uq_opd_queue_patient_date",
        ),
        Index("ix_opd_queue_date_status", "registration_date", "status"),
    )

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(
        Integer,
        ForeignKey("patients.id"),
        nullable=False,
        index=True,
    )
    queue_number = Column(Integer, nullable=False)
    registration_date = Column(Date, nullable=False)
    registration_time = Column(String(8), nullable=False)  # HH:MM:SS
    status = Column(String(20), default="waiting")  # waiting / in_progress / completed / cancelled
    priority = Column(Integer, default=0)
    notes = Column(String(500), nullable=True)
    staff_id = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
