# FILE: frontdesk/services/opd_appointments.py
from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from frontdesk.models.doctor import Doctor
from frontdesk.models.opd import Appointment, OpdEncounter
from frontdesk.services.audit_logger import audit_created
from frontdesk.services.errors import DoctorNotFound
from frontdesk.services.number_series import date_key, next_sequence

APPOINTMENT_SERIES_KEY = "APT"


def pick_active_doctor(db: Session) -> Optional[Doctor]:
    return (db.query(Doctor).filter(Doctor.status == "active").order_by(
        Doctor.id.asc()).first())


def _ensure_doctor(db: Session, doctor_id: Optional[int]) -> None:
    if doctor_id is None:
        return
    doc = db.get(Doctor, doctor_id)
    if not doc:
        raise DoctorNotFound(
            f"Doctor with ID {doctor_id} not found. Only registered doctors can have appointments."
        )


def _next_appointment_id(db: Session, on: date) -> str:
    dk = date_key(on)
    n = next_sequence(db, APPOINTMENT_SERIES_KEY, dk)
    return f"APT{dk}{n:04d}"


def _commit(db: Session, obj):
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(obj)
    return obj


def create_appointment(
    db: Session,
    *,
    patient_id: int,
    appointment_date: date,
    appointment_time: str = "09:00:00",
    doctor_id: Optional[int] = None,
    type: str = "consultation",
    symptoms: Optional[str] = None,
    notes: Optional[str] = None,
    created_by: Optional[int] = None,
) -> Appointment:
    """
    Flat appointment row (no encounter). Raises DoctorNotFound when
    doctor_id does not point at a doctor.
    """
    _ensure_doctor(db, doctor_id)

    appt = Appointment(
        appointment_id=_next_appointment_id(db, appointment_date),
        patient_id=patient_id,
        doctor_id=doctor_id,
        appointment_date=appointment_date,
        appointment_time=appointment_time,
        type=type,
        status="scheduled",
        symptoms=symptoms,
        notes=notes,
        created_by=created_by,
    )
    db.add(appt)
    _commit(db, appt)
    audit_created(db, appt, user_id=created_by)
    return appt


def create_encounter_appointment(
    db: Session,
    *,
    patient_id: int,
    appointment_date: date,
    appointment_time: str = "09:00:00",
    doctor_id: Optional[int] = None,
    chief_complaint: Optional[str] = None,
    notes: Optional[str] = None,
    created_by: Optional[int] = None,
) -> Appointment:
    """
    OPD encounter + appointment bound to it, committed together.
    """
    _ensure_doctor(db, doctor_id)

    appointment_id = _next_appointment_id(db, appointment_date)
    enc = OpdEncounter(
        patient_id=patient_id,
        doctor_id=doctor_id,
        encounter_date=appointment_date,
        encounter_type="outpatient",
        status="open",
        chief_complaint=chief_complaint,
        created_by=created_by,
    )
    db.add(enc)
    db.flush()

    appt = Appointment(
        appointment_id=appointment_id,
        patient_id=patient_id,
        doctor_id=doctor_id,
        encounter_id=enc.id,
        appointment_date=appointment_date,
        appointment_time=appointment_time,
        type="outpatient",
        status="scheduled",
        symptoms=chief_complaint,
        notes=notes,
        created_by=created_by,
    )
    db.add(appt)
    _commit(db, appt)
    audit_created(db, appt, user_id=created_by)
    return appt


def find_scheduled_appointment(db: Session, patient_id: int, appointment_date: date,
                               type: str) -> Optional[Appointment]:
    return (db.query(Appointment).filter(
        Appointment.patient_id == patient_id,
        Appointment.appointment_date == appointment_date,
        Appointment.type == type,
        Appointment.status == "scheduled",
    ).order_by(Appointment.id.asc()).first())
