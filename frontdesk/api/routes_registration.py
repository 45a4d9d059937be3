# FILE: frontdesk/api/routes_registration.py
from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from frontdesk.api.response import err, ok
from frontdesk.core.config import settings
from frontdesk.db.session import get_db
from frontdesk.schemas.registration import (
    CredentialsOut,
    PatientOut,
    RegistrationIn,
    RegistrationOut,
    StepOutcomeOut,
    UhidOut,
)
from frontdesk.services.errors import (
    PatientNotFound,
    UhidAllocationError,
    UhidCapacityExceeded,
)
from frontdesk.services.patient_writer import get_registered_patient
from frontdesk.services.registration import RegistrationResult, register_patient
from frontdesk.services.saga import Deadline
from frontdesk.services.uhid import allocate_uhid, preview_next_uhid

router = APIRouter()


def _steps_out(result: RegistrationResult):
    return [StepOutcomeOut(**asdict(s)) for s in result.steps]


def _registration_out(result: RegistrationResult) -> RegistrationOut:
    return RegistrationOut(
        success=result.success,
        uhid=result.uhid,
        patient=PatientOut.model_validate(result.patient) if result.patient else None,
        credentials=CredentialsOut(email=result.credentials.email,
                                   password=result.credentials.password)
        if result.credentials else None,
        error=result.error,
        steps=_steps_out(result),
    )


def _uhid_error(e: UhidAllocationError):
    code = "UHID_CAPACITY_EXCEEDED" if isinstance(
        e, UhidCapacityExceeded) else "UHID_ALLOCATION_FAILED"
    return err(msg=str(e), status_code=409, code=code)


# ---------- UHID ----------
@router.post("/uhid")
def reserve_uhid(db: Session = Depends(get_db)):
    """Reserve a UHID to show the operator before the form is submitted."""
    try:
        uhid = allocate_uhid(db)
    except UhidAllocationError as e:
        return _uhid_error(e)
    return ok(UhidOut(uhid=uhid), status_code=201)


@router.get("/uhid/preview")
def preview_uhid(db: Session = Depends(get_db)):
    try:
        uhid = preview_next_uhid(db)
    except UhidAllocationError as e:
        return _uhid_error(e)
    return ok(UhidOut(uhid=uhid))


# ---------- REGISTER ----------
@router.post("/register")
def register(payload: RegistrationIn, db: Session = Depends(get_db)):
    deadline = None
    if settings.REGISTRATION_TIMEOUT_SECONDS > 0:
        deadline = Deadline.after(settings.REGISTRATION_TIMEOUT_SECONDS)

    data = payload.model_copy(update={"uhid": None})
    result = register_patient(db, data, payload.uhid, deadline=deadline)
    if not result.success:
        return err(
            msg=result.error or "Registration failed",
            status_code=400,
            code="REGISTRATION_FAILED",
            details={"steps": _steps_out(result)},
        )
    return ok(_registration_out(result), status_code=201)


# ---------- FETCH ----------
@router.get("/{uhid}")
def get_patient(uhid: str, db: Session = Depends(get_db)):
    try:
        patient = get_registered_patient(db, uhid)
    except PatientNotFound:
        raise HTTPException(404, "Patient not found")
    return ok(PatientOut.model_validate(patient))
