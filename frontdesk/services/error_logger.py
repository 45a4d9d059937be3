# FILE: frontdesk/services/error_logger.py
import logging
import traceback
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from frontdesk.models.error_log import ErrorLog

logger = logging.getLogger(__name__)

DESCRIPTION_MAX = 1000


def format_exception(exc: BaseException) -> str:
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


def log_error(
    db: Session,
    *,
    description: Optional[str] = None,
    error_source: str = "backend",
    endpoint: Optional[str] = None,
    module: Optional[str] = None,
    function: Optional[str] = None,
    request_payload: Optional[Dict[str, Any]] = None,
    stack_trace: Optional[str] = None,
) -> Optional[ErrorLog]:
    """
    Persist one row into error_logs and return it.
    Never raises: a failed write is rolled back and only logged.
    """
    row = ErrorLog(
        error_source=error_source,
        description=(description or "")[:DESCRIPTION_MAX] or None,
        endpoint=endpoint,
        module=module,
        function=function,
        request_payload=request_payload,
        stack_trace=stack_trace,
    )
    try:
        db.add(row)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Could not write error_logs row for %s.%s", module, function)
        return None
    return row


def log_step_failure(
    db: Session,
    exc: BaseException,
    *,
    module: str,
    step: str,
    context: Optional[Dict[str, Any]] = None,
) -> Optional[ErrorLog]:
    """error_logs row for a skipped follow-up step, keyed for reconciliation."""
    return log_error(
        db,
        description=f"{step}: {exc}",
        module=module,
        function=step,
        request_payload=dict(context or {}),
        stack_trace=format_exception(exc),
    )
