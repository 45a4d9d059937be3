# FILE: frontdesk/services/saga.py
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from frontdesk.services.error_logger import log_step_failure
from frontdesk.services.errors import (
    RegistrationDeadlineExceeded,
    RegistrationError,
    RegistrationStepError,
)

logger = logging.getLogger(__name__)


class Deadline:
    """Monotonic-clock deadline handed down by the caller."""

    def __init__(self, expires_at: float):
        self.expires_at = expires_at

    @classmethod
    def after(cls, seconds: float) -> "Deadline":
        return cls(time.monotonic() + seconds)

    def remaining(self) -> float:
        return self.expires_at - time.monotonic()

    def expired(self) -> bool:
        return self.remaining() <= 0


@dataclass
class StepOutcome:
    step: str
    fatal: bool
    ok: bool
    skipped: bool = False
    error: Optional[str] = None


@dataclass
class SagaRunner:
    """
    Runs the steps of one multi-write operation, each committing on its own.

    fatal(): a failure aborts the operation (raised as RegistrationError).
    best_effort(): a failure is logged, written to error_logs with `context`
    for later reconciliation, and swallowed; the step returns None.
    Nothing already committed is undone.
    """

    db: Session
    module: str = "registration"
    deadline: Optional[Deadline] = None
    context: Dict[str, Any] = field(default_factory=dict)
    outcomes: List[StepOutcome] = field(default_factory=list)

    def fatal(self, step: str, fn: Callable[..., Any], *args, **kwargs) -> Any:
        if self.deadline is not None and self.deadline.expired():
            err = RegistrationDeadlineExceeded(step)
            self._record(step, True, ok=False, error=str(err))
            raise err

        try:
            result = fn(*args, **kwargs)
        except RegistrationError as e:
            self.db.rollback()
            self._record(step, True, ok=False, error=str(e))
            raise
        except Exception as e:
            self.db.rollback()
            self._record(step, True, ok=False, error=str(e))
            raise RegistrationStepError(step, f"{step} failed: {e}") from e

        self._record(step, True, ok=True)
        return result

    def best_effort(self, step: str, fn: Callable[..., Any], *args, **kwargs) -> Any:
        if self.deadline is not None and self.deadline.expired():
            self._fail(step, RegistrationDeadlineExceeded(step))
            return None

        try:
            result = fn(*args, **kwargs)
        except Exception as e:
            self.db.rollback()
            self._fail(step, e)
            return None

        self._record(step, False, ok=True)
        return result

    def skip(self, step: str, *, fatal: bool = False, reason: Optional[str] = None) -> None:
        self.outcomes.append(
            StepOutcome(step=step, fatal=fatal, ok=True, skipped=True, error=reason))

    def failed_steps(self) -> List[str]:
        return [o.step for o in self.outcomes if not o.ok]

    # ---------------------------------------------------------------

    def _record(self, step: str, fatal: bool, *, ok: bool, error: Optional[str] = None) -> None:
        self.outcomes.append(StepOutcome(step=step, fatal=fatal, ok=ok, error=error))

    def _fail(self, step: str, exc: BaseException) -> None:
        logger.exception(
            "Best-effort step %s failed (%s); continuing",
            step,
            ", ".join(f"{k}={v}" for k, v in self.context.items()),
            exc_info=exc,
        )
        log_step_failure(self.db, exc, module=self.module, step=step, context=self.context)
        self._record(step, False, ok=False, error=str(exc))
