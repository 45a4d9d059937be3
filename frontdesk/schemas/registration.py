# FILE: frontdesk/schemas/registration.py
from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, field_validator


class PatientRegistrationIn(BaseModel):
    """
    Everything the registration desk collects. All optional: the workflow
    fills gaps (name fallback, default admission type, synthesized email).
    """

    # personal
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    date_of_birth: Optional[date] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    marital_status: Optional[str] = None  # single / married / divorced / widowed / separated
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None

    # medical
    blood_group: Optional[str] = None
    allergies: Optional[str] = None
    medical_history: Optional[str] = None
    current_medications: Optional[str] = None
    chronic_conditions: Optional[str] = None
    previous_surgeries: Optional[str] = None

    # admission
    admission_type: Optional[str] = None  # emergency / elective / referred / outpatient / transfer / inpatient
    admission_date: Optional[date] = None
    admission_time: Optional[str] = None  # HH:MM or HH:MM:SS
    primary_complaint: Optional[str] = None
    initial_symptoms: Optional[str] = None
    referring_doctor_facility: Optional[str] = None
    referred_by: Optional[str] = None
    consulting_doctor_id: Optional[int] = None
    consulting_doctor_name: Optional[str] = None
    department_ward: Optional[str] = None
    room_number: Optional[str] = None

    # guardian / attendant
    guardian_name: Optional[str] = None
    guardian_relationship: Optional[str] = None
    guardian_phone: Optional[str] = None
    guardian_address: Optional[str] = None

    # emergency contact
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    emergency_contact_relationship: Optional[str] = None

    # insurance
    insurance_provider: Optional[str] = None
    insurance_number: Optional[str] = None

    # vitals captured at the desk
    height: Optional[Decimal] = None
    weight: Optional[Decimal] = None
    bmi: Optional[Decimal] = None
    temperature: Optional[Decimal] = None
    bp_systolic: Optional[int] = None
    bp_diastolic: Optional[int] = None
    pulse: Optional[int] = None
    spo2: Optional[int] = None
    respiratory_rate: Optional[int] = None

    # billing scratch
    registration_fee: Optional[Decimal] = None
    consultation_fee: Optional[Decimal] = None
    total_amount: Optional[Decimal] = None
    payment_mode: Optional[str] = None

    # inpatient
    bed_id: Optional[int] = None
    admission_reason: Optional[str] = None
    advance_amount: Optional[Decimal] = None
    advance_payment_mode: Optional[str] = None  # cash/card/upi/other
    advance_reference: Optional[str] = None

    # outpatient queue
    queue_priority: int = 0
    queue_notes: Optional[str] = None

    # operator performing the registration
    staff_id: Optional[int] = None

    @field_validator("gender")
    @classmethod
    def _lower_gender(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().lower() if v else v

    @field_validator("admission_time")
    @classmethod
    def _check_time(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        parts = v.strip().split(":")
        if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
            raise ValueError("admission_time must be HH:MM or HH:MM:SS")
        try:
            time(*(int(p) for p in parts))
        except ValueError as e:
            raise ValueError(f"admission_time out of range: {e}") from e
        return v.strip()


class RegistrationIn(PatientRegistrationIn):
    # UHID shown to the operator earlier via POST /patients/uhid
    uhid: Optional[str] = None


class UhidOut(BaseModel):
    uhid: str


class CredentialsOut(BaseModel):
    email: str
    password: str


class StepOutcomeOut(BaseModel):
    step: str
    fatal: bool
    ok: bool
    skipped: bool = False
    error: Optional[str] = None


class PatientOut(BaseModel):
    id: int
    uhid: str
    name: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    date_of_birth: Optional[date] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    marital_status: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    blood_group: Optional[str] = None
    admission_type: str
    admission_date: Optional[datetime] = None
    primary_complaint: Optional[str] = None
    is_admitted: bool = False
    status: Optional[str] = None
    user_id: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class RegistrationOut(BaseModel):
    success: bool
    uhid: Optional[str] = None
    patient: Optional[PatientOut] = None
    credentials: Optional[CredentialsOut] = None
    error: Optional[str] = None
    steps: List[StepOutcomeOut] = []
