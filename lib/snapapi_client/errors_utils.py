from __future__ import annotations

import json
from typing import Any

from .errors import UNKNOWN_ERROR, ApiError, AuthError


def parse_error_body(body: bytes | str | None) -> dict[str, Any] | None:
    if not body:
        return None
    try:
        data = json.loads(body)
    except Exception:
        return None
    if not isinstance(data, dict):
        return None
    error = data.get("error")
    return error if isinstance(error, dict) else None


def normalize_error(status_code: int, body: bytes | str | None) -> ApiError:
    """Turn a non-2xx response into an ApiError. Never raises."""
    fallback = f"HTTP {status_code}"
    error = parse_error_body(body) or {}

    code = error.get("code")
    message = error.get("message")
    details = error.get("details")

    cls = AuthError if status_code in (401, 403) else ApiError
    return cls(
        str(message) if message else fallback,
        code=str(code) if code else UNKNOWN_ERROR,
        status_code=status_code,
        details=details if isinstance(details, dict) else None,
    )
