# FILE: frontdesk/models/user.py
from sqlalchemy import Column, Integer, String, DateTime, JSON, ForeignKey, func
from sqlalchemy.orm import relationship

from frontdesk.db.base import Base


class User(Base):
    __tablename__ = "users"
    __table_args__ = {
        "mysql_engine": "InnoDB",
        "mysql_charset": "utf8mb4",
        "mysql_collate": "utf8mb4_unicode_ci",
    }

    id = Column(Integer, primary_key=True, index=True)
    auth_id = Column(String(64), nullable=True, index=True)
    employee_id = Column(String(32), unique=True, nullable=True)  # UHID for patients
    name = Column(String(255), nullable=False)
    email = Column(String(191), unique=True, nullable=False)
    phone = Column(String(20), nullable=True)
    address = Column(String(500), nullable=True)
    role = Column(String(32), nullable=False, default="patient")
    status = Column(String(20), default="active")
    permissions = Column(JSON, nullable=True)

    party_id = Column(Integer, ForeignKey("parties.id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    party = relationship("Party")


class Party(Base):
    """
    Generic identity row (patient / staff / vendor). Optional per deployment:
    registration skips it when the table is missing.
    """
    __tablename__ = "parties"
    __table_args__ = {
        "mysql_engine": "InnoDB",
        "mysql_charset": "utf8mb4",
        "mysql_collate": "utf8mb4_unicode_ci",
    }

    id = Column(Integer, primary_key=True, index=True)
    party_type = Column(String(20), nullable=False, default="patient")
    display_name = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=True)
    email = Column(String(191), nullable=True)
    external_ref = Column(String(64), index=True, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
