# FILE: frontdesk/services/registration.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from frontdesk.core.config import settings
from frontdesk.models.patient import Patient
from frontdesk.schemas.registration import PatientRegistrationIn
from frontdesk.services.credentials import IssuedCredentials, patient_login_email
from frontdesk.services.errors import RegistrationError
from frontdesk.services.post_registration import run_post_registration
from frontdesk.services.registration_services import RegistrationServices
from frontdesk.services.saga import Deadline, SagaRunner, StepOutcome
from frontdesk.utils.timezone import to_local

logger = logging.getLogger(__name__)


@dataclass
class RegistrationResult:
    success: bool
    uhid: Optional[str] = None
    patient: Optional[Patient] = None
    credentials: Optional[IssuedCredentials] = None
    error: Optional[str] = None
    steps: List[StepOutcome] = field(default_factory=list)


def register_patient(
    db: Session,
    data: PatientRegistrationIn,
    pre_allocated_uhid: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
    deadline: Optional[Deadline] = None,
    services: Optional[RegistrationServices] = None,
) -> RegistrationResult:
    """
    Register one patient.

    Order: UHID -> login identity -> party -> user link -> patient row ->
    appointment / queue / bed. The UHID, user link and patient row are
    required; everything else is best-effort and only logged (and written to
    error_logs) when it fails. Each step commits on its own and nothing is
    undone, so a retry with the same pre-allocated UHID picks up the rows
    already written instead of duplicating them.
    """
    services = services or RegistrationServices()
    saga = SagaRunner(db, module="registration", deadline=deadline)
    local_now = to_local(now)

    try:
        uhid = (pre_allocated_uhid or "").strip()
        if uhid:
            logger.info("Using pre-allocated UHID %s", uhid)
            saga.skip("allocate_uhid", fatal=True, reason="pre-allocated")
        else:
            uhid = saga.fatal("allocate_uhid", services.allocate_uhid, db, local_now)
            logger.info("Allocated UHID %s", uhid)
        saga.context["uhid"] = uhid

        creds = saga.best_effort("issue_credentials", services.issue_credentials, db, uhid)
        if creds is None:
            creds = IssuedCredentials(email=patient_login_email(uhid),
                                      password=settings.PATIENT_DEFAULT_PASSWORD)

        party = saga.best_effort("create_party", services.create_party, db, uhid, data)

        user = saga.fatal("link_identity", services.link_identity, db, creds.auth_id,
                          uhid, data, party.id if party is not None else None)
        patient = saga.fatal("write_patient", services.write_patient, db, uhid, data,
                             user.id)
        saga.context["patient_id"] = patient.id
    except RegistrationError as e:
        logger.error("Patient registration failed: %s", e)
        return RegistrationResult(success=False, error=str(e), steps=saga.outcomes)

    run_post_registration(saga, db, patient, data, services, local_now)

    try:
        db.refresh(patient)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Could not reload patient %s after registration", uhid)

    failed = saga.failed_steps()
    if failed:
        logger.warning("Patient %s registered with incomplete steps: %s", uhid,
                       ", ".join(failed))
    else:
        logger.info("Patient %s registered", uhid)

    return RegistrationResult(
        success=True,
        uhid=uhid,
        patient=patient,
        credentials=creds,
        steps=saga.outcomes,
    )
