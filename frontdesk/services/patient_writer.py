# FILE: frontdesk/services/patient_writer.py
from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from frontdesk.crud.crud_patients import get_patient_by_uhid, insert_patient
from frontdesk.models.patient import Patient
from frontdesk.schemas.registration import PatientRegistrationIn
from frontdesk.services.audit_logger import audit_created
from frontdesk.services.credentials import patient_login_email
from frontdesk.services.errors import DuplicateKey, PatientNotFound, RegistrationStepError
from frontdesk.utils.text import clean
from frontdesk.utils.timezone import today_local

logger = logging.getLogger(__name__)

ADMISSION_TYPES = (
    "emergency",
    "elective",
    "referred",
    "outpatient",
    "transfer",
    "inpatient",
)
DEFAULT_ADMISSION_TYPE = "outpatient"

# values older forms still send
LEGACY_ADMISSION_TYPES = {
    "scheduled": "elective",
    "planned": "elective",
    "opd": "outpatient",
    "op": "outpatient",
    "ipd": "inpatient",
    "ip": "inpatient",
    "admit": "inpatient",
    "referral": "referred",
}


def normalize_admission_type(value: Optional[str]) -> str:
    v = (value or "").strip().lower()
    if not v:
        return DEFAULT_ADMISSION_TYPE
    if v in ADMISSION_TYPES:
        return v
    return LEGACY_ADMISSION_TYPES.get(v, DEFAULT_ADMISSION_TYPE)


def derive_full_name(first_name: Optional[str], last_name: Optional[str],
                     uhid: str) -> str:
    full = " ".join(p for p in (clean(first_name), clean(last_name)) if p)
    return full or f"Patient {uhid}"


def age_from_dob(dob: Optional[date], on: Optional[date] = None) -> Optional[int]:
    if not dob:
        return None
    today = on or today_local()
    years = today.year - dob.year - ((today.month, today.day) < (dob.month, dob.day))
    return max(years, 0)


def _admission_datetime(data: PatientRegistrationIn) -> Optional[datetime]:
    if not data.admission_date:
        return None
    if not data.admission_time:
        return datetime.combine(data.admission_date, time.min)
    parts = [int(p) for p in data.admission_time.split(":")]
    return datetime.combine(data.admission_date, time(*parts))


def build_patient(uhid: str, data: PatientRegistrationIn,
                  owner_user_id: Optional[int]) -> Patient:
    age = data.age if data.age is not None else age_from_dob(data.date_of_birth)
    return Patient(
        uhid=uhid,
        name=derive_full_name(data.first_name, data.last_name, uhid),
        first_name=clean(data.first_name),
        last_name=clean(data.last_name),
        date_of_birth=data.date_of_birth,
        age=age,
        gender=clean(data.gender),
        marital_status=clean(data.marital_status),
        phone=clean(data.phone),
        email=clean(data.email) or patient_login_email(uhid),
        address=clean(data.address),
        blood_group=clean(data.blood_group),
        allergies=clean(data.allergies),
        medical_history=clean(data.medical_history),
        current_medications=clean(data.current_medications),
        chronic_conditions=clean(data.chronic_conditions),
        previous_surgeries=clean(data.previous_surgeries),
        admission_type=normalize_admission_type(data.admission_type),
        admission_date=_admission_datetime(data),
        admission_time=clean(data.admission_time),
        primary_complaint=clean(data.primary_complaint),
        initial_symptoms=clean(data.initial_symptoms),
        referring_doctor_facility=clean(data.referring_doctor_facility),
        referred_by=clean(data.referred_by),
        consulting_doctor_id=data.consulting_doctor_id,
        consulting_doctor_name=clean(data.consulting_doctor_name),
        department_ward=clean(data.department_ward),
        room_number=clean(data.room_number),
        guardian_name=clean(data.guardian_name),
        guardian_relationship=clean(data.guardian_relationship),
        guardian_phone=clean(data.guardian_phone),
        guardian_address=clean(data.guardian_address),
        emergency_contact_name=clean(data.emergency_contact_name),
        emergency_contact_phone=clean(data.emergency_contact_phone),
        emergency_contact_relationship=clean(data.emergency_contact_relationship),
        insurance_provider=clean(data.insurance_provider),
        insurance_number=clean(data.insurance_number),
        height=data.height,
        weight=data.weight,
        bmi=data.bmi,
        temperature=data.temperature,
        bp_systolic=data.bp_systolic,
        bp_diastolic=data.bp_diastolic,
        pulse=data.pulse,
        spo2=data.spo2,
        respiratory_rate=data.respiratory_rate,
        registration_fee=data.registration_fee,
        consultation_fee=data.consultation_fee,
        total_amount=data.total_amount,
        payment_mode=clean(data.payment_mode),
        is_admitted=False,
        status="active",
        user_id=owner_user_id,
    )


def write_patient(
    db: Session,
    uhid: str,
    data: PatientRegistrationIn,
    owner_user_id: Optional[int],
) -> Patient:
    """
    Insert the patient row for `uhid`, or return the one already there.
    Any failure other than a duplicate UHID is fatal to the registration.
    """
    existing = get_patient_by_uhid(db, uhid)
    if existing:
        logger.info("Patient %s already exists (id=%s); reusing", uhid, existing.id)
        return existing

    try:
        patient = insert_patient(db, build_patient(uhid, data, owner_user_id))
    except DuplicateKey:
        # lost a race with another request for the same UHID
        existing = get_patient_by_uhid(db, uhid)
        if existing:
            return existing
        raise RegistrationStepError(
            "write_patient",
            f"Failed to create patient record for {uhid}: duplicate key")
    except SQLAlchemyError as e:
        db.rollback()
        raise RegistrationStepError(
            "write_patient", f"Failed to create patient record: {e}") from e

    audit_created(db, patient, user_id=data.staff_id)
    return patient


def mark_patient_admitted(db: Session, patient: Patient) -> Patient:
    patient.is_admitted = True
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(patient)
    return patient


def get_registered_patient(db: Session, uhid: str) -> Patient:
    patient = get_patient_by_uhid(db, (uhid or "").strip())
    if not patient:
        raise PatientNotFound(f"No patient registered under {uhid}")
    return patient
