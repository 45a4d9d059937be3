# FILE: frontdesk/crud/crud_users.py
from __future__ import annotations

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from frontdesk.crud.common import is_unique_violation
from frontdesk.models.user import User
from frontdesk.services.errors import DuplicateKey


def find_user_by_email_or_employee_id(
    db: Session,
    *,
    email: Optional[str],
    employee_id: Optional[str],
) -> Optional[User]:
    conds = []
    if employee_id:
        conds.append(User.employee_id == employee_id)
    if email:
        conds.append(User.email == email)
    if not conds:
        return None
    return db.query(User).filter(or_(*conds)).order_by(User.id.asc()).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def insert_user(db: Session, user: User) -> User:
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if is_unique_violation(e):
            raise DuplicateKey("users", str(e.orig)) from e
        raise
    db.refresh(user)
    return user
