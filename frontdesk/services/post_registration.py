# FILE: frontdesk/services/post_registration.py
from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from typing import Callable, Optional, Tuple

from sqlalchemy.orm import Session

from frontdesk.core.config import settings
from frontdesk.models.patient import Patient
from frontdesk.schemas.registration import PatientRegistrationIn
from frontdesk.services.errors import DoctorNotFound
from frontdesk.services.ipd_beds import get_active_allocation
from frontdesk.services.opd_appointments import find_scheduled_appointment
from frontdesk.services.registration_services import RegistrationServices
from frontdesk.services.saga import SagaRunner
from frontdesk.utils.text import clean

logger = logging.getLogger(__name__)


def _slot_time() -> str:
    return time(settings.DEFAULT_APPOINTMENT_HOUR).strftime("%H:%M:%S")


def initial_appointment_slot(now: datetime) -> Tuple[date, str]:
    """Next day at the default appointment hour."""
    return now.date() + timedelta(days=1), _slot_time()


def outpatient_slot(now: datetime) -> Tuple[date, str]:
    """Today at the default hour, or tomorrow once that hour has passed."""
    slot = datetime.combine(now.date(), time(settings.DEFAULT_APPOINTMENT_HOUR))
    day = now.date() if now <= slot else now.date() + timedelta(days=1)
    return day, _slot_time()


def _choose_doctor_id(db: Session, data: PatientRegistrationIn,
                      services: RegistrationServices) -> Optional[int]:
    if data.consulting_doctor_id:
        return data.consulting_doctor_id
    doctor = services.pick_active_doctor(db)
    return doctor.id if doctor else None


def _with_doctor_fallback(db: Session, book: Callable, doctor_id: Optional[int], **kwargs):
    """Book with `doctor_id`; an unknown doctor books unassigned instead."""
    try:
        return book(db, doctor_id=doctor_id, **kwargs)
    except DoctorNotFound:
        db.rollback()
        logger.warning("Doctor %s not found; booking without a doctor", doctor_id)
        return book(db, doctor_id=None, **kwargs)


# ------------------------------------------------------------------
# Branches
# ------------------------------------------------------------------
def book_initial_appointment(saga: SagaRunner, db: Session, patient: Patient,
                             data: PatientRegistrationIn,
                             services: RegistrationServices, now: datetime):
    symptoms = clean(data.initial_symptoms)
    complaint = clean(data.primary_complaint)
    if not (symptoms or complaint):
        saga.skip("initial_appointment", reason="no symptoms or complaint supplied")
        return None

    appt_date, appt_time = initial_appointment_slot(now)
    existing = find_scheduled_appointment(db, patient.id, appt_date, "consultation")
    if existing:
        saga.skip("initial_appointment", reason=f"already booked ({existing.appointment_id})")
        return existing

    def _book():
        return _with_doctor_fallback(
            db,
            services.create_appointment,
            _choose_doctor_id(db, data, services),
            patient_id=patient.id,
            appointment_date=appt_date,
            appointment_time=appt_time,
            type="consultation",
            symptoms=symptoms or complaint,
            notes=f"Initial consultation. Chief complaint: {complaint or symptoms}",
            created_by=data.staff_id,
        )

    return saga.best_effort("initial_appointment", _book)


def start_outpatient_visit(saga: SagaRunner, db: Session, patient: Patient,
                           data: PatientRegistrationIn,
                           services: RegistrationServices, now: datetime):
    """Same-day (or next-day) OPD appointment, then the triage queue."""
    appt_date, appt_time = outpatient_slot(now)
    complaint = clean(data.primary_complaint) or clean(data.initial_symptoms)

    def _book():
        existing = find_scheduled_appointment(db, patient.id, appt_date, "outpatient")
        if existing:
            return existing
        doctor_id = _choose_doctor_id(db, data, services)
        try:
            return _with_doctor_fallback(
                db,
                services.create_encounter_appointment,
                doctor_id,
                patient_id=patient.id,
                appointment_date=appt_date,
                appointment_time=appt_time,
                chief_complaint=complaint,
                notes="Outpatient visit booked at registration",
                created_by=data.staff_id,
            )
        except Exception:
            db.rollback()
            logger.warning("Encounter booking failed for %s; using a plain appointment",
                           patient.uhid, exc_info=True)
        return _with_doctor_fallback(
            db,
            services.create_appointment,
            doctor_id,
            patient_id=patient.id,
            appointment_date=appt_date,
            appointment_time=appt_time,
            type="outpatient",
            symptoms=complaint,
            notes="Outpatient visit booked at registration",
            created_by=data.staff_id,
        )

    appointment = saga.best_effort("outpatient_visit", _book)
    entry = saga.best_effort(
        "outpatient_queue",
        services.add_to_queue,
        db,
        patient.id,
        now.date(),
        data.queue_priority,
        clean(data.queue_notes) or complaint,
        data.staff_id,
    )
    return appointment, entry


def admit_inpatient(saga: SagaRunner, db: Session, patient: Patient,
                    data: PatientRegistrationIn,
                    services: RegistrationServices, now: datetime):
    """Bed allocation, admitted flag, optional advance. Each independent."""
    if data.bed_id is None:
        saga.skip("bed_allocation", reason="no bed selected")
        return None

    existing = get_active_allocation(db, patient.id)
    if existing:
        # repeat registration: bed, flag and advance were handled the first time
        saga.skip("bed_allocation", reason=f"already allocated ({existing.allocation_id})")
        return existing

    allocation = saga.best_effort(
        "bed_allocation",
        services.allocate_bed,
        db,
        patient_id=patient.id,
        bed_id=data.bed_id,
        admission_date=now,
        reason=clean(data.admission_reason) or clean(data.primary_complaint) or "",
        doctor_id=data.consulting_doctor_id,
        admission_type="inpatient",
        staff_id=data.staff_id,
    )
    if allocation is None:
        return None

    saga.best_effort("admission_status", services.mark_admitted, db, patient)

    if data.advance_amount is not None and data.advance_amount > 0:
        saga.best_effort(
            "advance_payment",
            services.create_advance_record,
            db,
            patient_id=patient.id,
            amount=data.advance_amount,
            allocation_id=allocation.id,
            mode=data.advance_payment_mode,
            reference_no=clean(data.advance_reference),
            remarks=f"Advance at admission ({patient.uhid})",
            created_by=data.staff_id,
        )
    else:
        saga.skip("advance_payment", reason="no advance amount")
    return allocation


def run_post_registration(saga: SagaRunner, db: Session, patient: Patient,
                          data: PatientRegistrationIn,
                          services: RegistrationServices, now: datetime) -> None:
    book_initial_appointment(saga, db, patient, data, services, now)
    if patient.admission_type == "outpatient":
        start_outpatient_visit(saga, db, patient, data, services, now)
    elif patient.admission_type == "inpatient":
        admit_inpatient(saga, db, patient, data, services, now)
