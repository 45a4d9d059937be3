# FILE: frontdesk/utils/text.py
from __future__ import annotations

import re
from typing import Optional


def clean(s: Optional[str]) -> Optional[str]:
    """Trim; blank strings become None so optional columns stay NULL."""
    if s is None:
        return None
    s = re.sub(r"\s+", " ", str(s).strip())
    return s or None
