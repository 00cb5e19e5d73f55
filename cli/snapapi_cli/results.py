from __future__ import annotations

from typing import Any

import typer
from snapapi_client import ApiError, AuthError, DecodeError, Err, RequestTimeout, Result, SnapClientError

from . import console


def describe_error(error: BaseException) -> str:
    if isinstance(error, ApiError):
        status = f"HTTP {error.status_code}" if error.status_code is not None else "no response"
        return f"{error.message} ({error.code}, {status})"
    if isinstance(error, DecodeError):
        return f"{error} (HTTP {error.status_code})"
    return str(error)


def report_error(error: SnapClientError, *, action: str) -> None:
    if isinstance(error, AuthError):
        console.err(f"{action} failed: unauthorized. Check your API key. {describe_error(error)}")
        return
    if isinstance(error, RequestTimeout):
        console.err(f"{action} timed out. Raise timeout_ms with `snapapi settings set --timeout-ms ...`.")
        return
    console.err(f"{action} failed: {describe_error(error)}")


def unwrap_or_exit(result: Result[Any, SnapClientError], *, action: str) -> Any:
    if isinstance(result, Err):
        report_error(result.error, action=action)
        raise typer.Exit(code=2)
    return result.value


def summarize_payload(data: Any) -> Any:
    """Shorten embedded base64 blobs so JSON results stay readable."""
    if not isinstance(data, dict):
        return data
    out = dict(data)
    for key in ("data", "thumbnail"):
        value = out.get(key)
        if isinstance(value, str) and len(value) > 80:
            out[key] = f"<{len(value)} base64 chars>"
    return out
