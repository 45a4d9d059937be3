# FILE: frontdesk/services/credentials.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from frontdesk.core.config import settings
from frontdesk.crud.crud_users import get_user_by_email
from frontdesk.services.auth_identity import (
    create_auth_identity,
    get_identity_by_email,
    sign_in,
)
from frontdesk.services.errors import AuthIdentityExists

logger = logging.getLogger(__name__)


@dataclass
class IssuedCredentials:
    email: str
    password: str
    # None when no live identity backs these credentials
    auth_id: Optional[str] = None


def patient_login_email(uhid: str) -> str:
    return f"{uhid}@{settings.PATIENT_EMAIL_DOMAIN}"


def _recover_handle(db: Session, email: str, password: str) -> Optional[str]:
    try:
        handle = sign_in(db, email, password)
        if handle:
            return handle
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Sign-in recovery failed for %s", email)

    try:
        user = get_user_by_email(db, email)
        if user and user.auth_id:
            return user.auth_id
    except SQLAlchemyError:
        db.rollback()
        logger.exception("User-table recovery failed for %s", email)

    logger.warning("Auth identity for %s exists but its handle could not be recovered",
                   email)
    return None


def issue_credentials(db: Session, uhid: str) -> IssuedCredentials:
    """
    Login credentials for a patient: `{uhid}@{domain}` + the initial password.

    Makes sure at most one auth identity exists for the email. Never raises:
    when the identity cannot be created or found, the deterministic
    credentials come back with auth_id=None.
    """
    creds = IssuedCredentials(
        email=patient_login_email(uhid),
        password=settings.PATIENT_DEFAULT_PASSWORD,
    )

    try:
        existing = get_identity_by_email(db, creds.email)
        if existing:
            creds.auth_id = existing.id
            return creds

        creds.auth_id = create_auth_identity(
            db,
            creds.email,
            creds.password,
            role="patient",
            uhid=uhid,
        )
    except AuthIdentityExists:
        creds.auth_id = _recover_handle(db, creds.email, creds.password)
    except Exception:
        db.rollback()
        logger.exception("Auth identity creation failed for %s; continuing without one",
                         uhid)

    return creds
