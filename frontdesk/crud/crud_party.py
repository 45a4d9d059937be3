# FILE: frontdesk/crud/crud_party.py
from __future__ import annotations

from sqlalchemy import inspect
from sqlalchemy.orm import Session

from frontdesk.models.user import Party


def party_table_exists(db: Session) -> bool:
    return inspect(db.get_bind()).has_table(Party.__tablename__)


def insert_party(db: Session, party: Party) -> Party:
    db.add(party)
    db.commit()
    db.refresh(party)
    return party
