# FILE: frontdesk/models/auth.py
from sqlalchemy import Column, String, DateTime, func

from frontdesk.db.base import Base


class AuthIdentity(Base):
    """Login identity. `id` is the opaque handle other tables keep as auth_id."""
    __tablename__ = "auth_identities"
    __table_args__ = {
        "mysql_engine": "InnoDB",
        "mysql_charset": "utf8mb4",
        "mysql_collate": "utf8mb4_unicode_ci",
    }

    id = Column(String(64), primary_key=True)
    email = Column(String(191), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default="patient")
    uhid = Column(String(32), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
