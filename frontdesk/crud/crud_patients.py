# FILE: frontdesk/crud/crud_patients.py
from __future__ import annotations

import re
from typing import Optional

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from frontdesk.crud.common import is_unique_violation
from frontdesk.models.patient import Patient
from frontdesk.services.errors import DuplicateKey

_SUFFIX_RE = re.compile(r"^\d{4}$")


def find_max_uhid_suffix(db: Session, prefix: str) -> Optional[int]:
    """
    Numeric suffix of the lexicographically highest `{prefix}-%` UHID.
    Fixed-width zero padding keeps string order == numeric order.
    None when there is no row, or the top row's suffix is not 4 digits.
    """
    top = (db.query(Patient.uhid).filter(
        Patient.uhid.like(f"{prefix}-%")).order_by(
            Patient.uhid.desc()).limit(1).scalar())
    if not top:
        return None
    suffix = top[len(prefix) + 1:]
    if not _SUFFIX_RE.match(suffix):
        return None
    return int(suffix)


def uhid_exists(db: Session, uhid: str) -> bool:
    return db.query(Patient.id).filter(Patient.uhid == uhid).first() is not None


def get_patient_by_uhid(db: Session, uhid: str) -> Optional[Patient]:
    return db.query(Patient).filter(Patient.uhid == uhid).first()


def insert_patient(db: Session, patient: Patient) -> Patient:
    db.add(patient)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if is_unique_violation(e):
            raise DuplicateKey("patients", str(e.orig)) from e
        raise
    db.refresh(patient)
    return patient
