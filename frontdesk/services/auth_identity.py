# FILE: frontdesk/services/auth_identity.py
from __future__ import annotations

import uuid
from typing import Optional

from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from frontdesk.core.config import settings
from frontdesk.crud.common import is_unique_violation
from frontdesk.models.auth import AuthIdentity
from frontdesk.services.errors import AuthIdentityExists

def _make_context() -> CryptContext:
    opts = {}
    if settings.PASSWORD_HASH_SCHEME == "bcrypt":
        opts["bcrypt__rounds"] = settings.BCRYPT_ROUNDS
    return CryptContext(schemes=[settings.PASSWORD_HASH_SCHEME],
                        deprecated="auto",
                        **opts)


pwd_context = _make_context()


def hash_password(raw: str) -> str:
    return pwd_context.hash(raw)


def verify_password(raw: str, hashed: str) -> bool:
    """
    Safe wrapper around passlib verify (unknown / corrupt hashes -> False).
    """
    try:
        return pwd_context.verify(raw, hashed)
    except (ValueError, TypeError):
        return False


def get_identity_by_email(db: Session, email: str) -> Optional[AuthIdentity]:
    return db.query(AuthIdentity).filter(AuthIdentity.email == email).first()


def create_auth_identity(
    db: Session,
    email: str,
    password: str,
    *,
    role: str = "patient",
    uhid: Optional[str] = None,
) -> str:
    """
    Create a login identity and return its opaque handle.
    Raises AuthIdentityExists when the email is already registered.
    """
    ident = AuthIdentity(
        id=uuid.uuid4().hex,
        email=email,
        password_hash=hash_password(password),
        role=role,
        uhid=uhid,
    )
    db.add(ident)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if is_unique_violation(e):
            raise AuthIdentityExists(email) from e
        raise
    return ident.id


def sign_in(db: Session, email: str, password: str) -> Optional[str]:
    """Handle of the identity when email/password match, else None."""
    ident = get_identity_by_email(db, email)
    if not ident or not verify_password(password, ident.password_hash):
        return None
    return ident.id
