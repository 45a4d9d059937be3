# FILE: frontdesk/services/identity.py
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from frontdesk.core.config import settings
from frontdesk.crud.crud_party import insert_party, party_table_exists
from frontdesk.crud.crud_users import find_user_by_email_or_employee_id, insert_user
from frontdesk.models.user import Party, User
from frontdesk.schemas.registration import PatientRegistrationIn
from frontdesk.services.audit_logger import audit_created
from frontdesk.services.credentials import patient_login_email
from frontdesk.services.errors import DuplicateKey, RegistrationStepError
from frontdesk.services.patient_writer import derive_full_name
from frontdesk.utils.text import clean

logger = logging.getLogger(__name__)

DEFAULT_PATIENT_PERMISSIONS = {
    "view_own_records": True,
    "book_appointments": True,
    "view_prescriptions": True,
    "view_bills": True,
}


# ---------------------------------------------------------------------
# Party (optional per deployment)
# ---------------------------------------------------------------------
def create_party(db: Session, uhid: str,
                 data: PatientRegistrationIn) -> Optional[Party]:
    """
    Party row for the patient, or None when the deployment has no party
    store (flag off / table missing) or the insert fails. Never raises.
    """
    if not settings.PARTY_ENABLED:
        return None

    try:
        if not party_table_exists(db):
            logger.info("No parties table; skipping party for %s", uhid)
            return None

        existing = db.query(Party).filter(Party.external_ref == uhid).first()
        if existing:
            return existing

        return insert_party(
            db,
            Party(
                party_type="patient",
                display_name=derive_full_name(data.first_name, data.last_name, uhid),
                phone=clean(data.phone),
                email=clean(data.email) or patient_login_email(uhid),
                external_ref=uhid,
            ),
        )
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Party creation failed for %s; continuing without party", uhid)
        return None


# ---------------------------------------------------------------------
# User
# ---------------------------------------------------------------------
def _attach_auth_handle(db: Session, user: User, auth_handle: Optional[str]) -> User:
    """Fill a missing auth_id on an existing user; a set one is never replaced."""
    if not auth_handle or user.auth_id:
        return user
    user.auth_id = auth_handle
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Could not attach auth handle to user %s", user.id)
        return user
    db.refresh(user)
    return user


def link_identity(
    db: Session,
    auth_handle: Optional[str],
    uhid: str,
    data: PatientRegistrationIn,
    party_id: Optional[int] = None,
) -> User:
    """
    User row (role=patient) bound to the UHID. Returns the existing row when
    one matches the UHID or login email. A duplicate-key insert means another
    request got there first: that row is re-read and returned.
    """
    email = patient_login_email(uhid)

    existing = find_user_by_email_or_employee_id(db, email=email, employee_id=uhid)
    if existing:
        return _attach_auth_handle(db, existing, auth_handle)

    user = User(
        auth_id=auth_handle or None,
        employee_id=uhid,
        name=derive_full_name(data.first_name, data.last_name, uhid),
        email=email,
        phone=clean(data.phone),
        address=clean(data.address),
        role="patient",
        status="active",
        permissions=dict(DEFAULT_PATIENT_PERMISSIONS),
        party_id=party_id,
    )

    try:
        user = insert_user(db, user)
    except DuplicateKey:
        existing = find_user_by_email_or_employee_id(db, email=email, employee_id=uhid)
        if existing:
            return _attach_auth_handle(db, existing, auth_handle)
        raise RegistrationStepError(
            "link_identity", f"Failed to create user record for {uhid}: duplicate key")
    except SQLAlchemyError as e:
        db.rollback()
        raise RegistrationStepError("link_identity",
                                    f"Failed to create user record: {e}") from e

    audit_created(db, user, user_id=data.staff_id)
    return user
