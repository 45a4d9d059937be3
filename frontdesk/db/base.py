# frontdesk/db/base.py
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """All front-desk tables (patients, users, OPD, IPD, billing) inherit from this."""
    pass
