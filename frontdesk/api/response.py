# FILE: frontdesk/api/response.py
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def _envelope(status_code: int, body: Dict[str, Any]) -> JSONResponse:
    # dates, Decimals and pydantic models all go through jsonable_encoder
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def ok(data: Any = None, *, status_code: int = 200) -> JSONResponse:
    """{"ok": true, "data": ...}"""
    return _envelope(status_code, {"ok": True, "data": data})


def err(
    msg: str = "Something went wrong",
    *,
    status_code: int = 400,
    code: Optional[str] = None,
    details: Any = None,
) -> JSONResponse:
    """{"ok": false, "error": {"msg", "code", "details"}}"""
    return _envelope(status_code, {
        "ok": False,
        "error": {"msg": msg, "code": code, "details": details},
    })
