# FILE: frontdesk/crud/common.py
from __future__ import annotations

from sqlalchemy.exc import IntegrityError

# sqlite / mysql / postgres wording for a unique-key violation
_UNIQUE_MARKERS = ("unique constraint", "duplicate entry", "duplicate key", "unique")


def is_unique_violation(e: IntegrityError) -> bool:
    msg = str(getattr(e, "orig", e)).lower()
    return any(m in msg for m in _UNIQUE_MARKERS)
