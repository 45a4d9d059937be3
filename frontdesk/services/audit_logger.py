# FILE: frontdesk/services/audit_logger.py
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from frontdesk.models.audit import AuditLog

logger = logging.getLogger(__name__)


def instance_to_audit_dict(obj: Any) -> Dict[str, Any]:
    """
    Convert SQLAlchemy model instance to a JSON-serializable dict
    based on its columns.
    """
    if obj is None:
        return {}
    data: Dict[str, Any] = {}
    for col in obj.__table__.columns:  # type: ignore[attr-defined]
        val = getattr(obj, col.name)
        if isinstance(val, (date, datetime)):
            val = val.isoformat()
        elif isinstance(val, Decimal):
            val = str(val)
        data[col.name] = val
    return data


def log_audit(
    db: Session,
    *,
    user_id: Optional[int],
    action: str,  # "CREATE" | "UPDATE" | "DELETE"
    table_name: str,
    record_id: Any,
    new_values: Optional[Dict[str, Any]] = None,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> None:
    """
    Persist one audit event into audit_logs. Never raises.
    """
    try:
        log = AuditLog(
            user_id=user_id,
            action=action,
            table_name=table_name,
            record_id=str(record_id),
            new_values=new_values,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        db.add(log)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Failed to log audit %s %s/%s", action, table_name,
                         record_id)


def audit_created(db: Session, obj: Any, *, user_id: Optional[int] = None) -> None:
    log_audit(
        db,
        user_id=user_id,
        action="CREATE",
        table_name=obj.__tablename__,
        record_id=obj.id,
        new_values=instance_to_audit_dict(obj),
    )
