from datetime import datetime

from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Text,
    JSON,
)

from frontdesk.db.base import Base


class ErrorLog(Base):
    """
    Backend error log. Best-effort registration steps that fail land here so
    missing appointments / queue rows / allocations can be reconciled later.
    """
    __tablename__ = "error_logs"
    __table_args__ = {
        "mysql_engine": "InnoDB",
        "mysql_charset": "utf8mb4",
        "mysql_collate": "utf8mb4_unicode_ci",
    }

    id = Column(Integer, primary_key=True, index=True)

    error_source = Column(String(50), nullable=False, default="backend")

    # quick summary
    description = Column(String(1000), nullable=True)

    # where it happened
    endpoint = Column(String(255), nullable=True)  # e.g. "POST /api/patients/register"
    module = Column(String(255), nullable=True)  # e.g. "registration"
    function = Column(String(255), nullable=True)  # e.g. "bed_allocation"

    # raw payload (uhid, patient id, step arguments)
    request_payload = Column(JSON, nullable=True)

    stack_trace = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
