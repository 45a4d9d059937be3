# FILE: frontdesk/services/errors.py
from __future__ import annotations

from typing import Optional


class RegistrationError(Exception):
    """Base for failures that make a registration report success=False."""


class UhidAllocationError(RegistrationError):
    pass


class UhidCapacityExceeded(UhidAllocationError):
    def __init__(self, prefix: str):
        super().__init__(f"UHID capacity exhausted for {prefix} (max 9999 per month)")
        self.prefix = prefix


class UhidAllocationExhausted(UhidAllocationError):
    def __init__(self, prefix: str, attempts: int):
        super().__init__(
            f"Failed to allocate a unique UHID for {prefix} after {attempts} attempts")
        self.prefix = prefix
        self.attempts = attempts


class RegistrationStepError(RegistrationError):
    def __init__(self, step: str, message: str):
        super().__init__(message)
        self.step = step


class RegistrationDeadlineExceeded(RegistrationError):
    def __init__(self, step: str):
        super().__init__(f"Registration deadline exceeded during {step}")
        self.step = step


class DuplicateKey(Exception):
    """A unique constraint rejected the insert; the row already exists."""

    def __init__(self, table: str, detail: Optional[str] = None):
        super().__init__(f"Duplicate key on {table}" + (f": {detail}" if detail else ""))
        self.table = table


# ---------- collaborator errors ----------


class AuthIdentityExists(Exception):
    pass


class DoctorNotFound(ValueError):
    pass


class BedUnavailable(ValueError):
    pass


class ActiveAllocationExists(ValueError):
    pass


class PatientNotFound(LookupError):
    pass
