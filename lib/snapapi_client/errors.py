from __future__ import annotations

from typing import Any

UNKNOWN_ERROR = "UNKNOWN_ERROR"
TIMEOUT = "TIMEOUT"
NETWORK_ERROR = "NETWORK_ERROR"


class SnapClientError(Exception):
    """Base client error."""


class ValidationError(SnapClientError):
    """Request rejected locally, before anything was sent."""


class ApiError(SnapClientError):
    """Uniform failure value for everything that went wrong on the wire.

    ``status_code`` is the real HTTP status, or ``None`` when no response
    was received at all (timeouts, connection failures).
    """

    def __init__(
            self,
            message: str,
            *,
            code: str = UNKNOWN_ERROR,
            status_code: int | None = None,
            details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return (
            self.code == other.code
            and self.status_code == other.status_code
            and self.message == other.message
            and self.details == other.details
        )

    def __hash__(self) -> int:
        return hash((type(self), self.code, self.status_code, self.message))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, status_code={self.status_code!r}, message={self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "status_code": self.status_code,
        }
        if self.details is not None:
            data["details"] = self.details
        return data


class AuthError(ApiError):
    """Auth-related API error."""


class RequestTimeout(ApiError):
    """No response arrived before the configured deadline."""

    def __init__(self, message: str, *, details: dict[str, Any] | None = None):
        super().__init__(message, code=TIMEOUT, status_code=None, details=details)


class NetworkError(ApiError):
    """Transport/network layer error."""

    def __init__(self, message: str, *, details: dict[str, Any] | None = None):
        super().__init__(message, code=NETWORK_ERROR, status_code=None, details=details)


class DecodeError(SnapClientError):
    """A 2xx body that cannot be read under the requested response mode."""

    def __init__(self, message: str, *, mode: str, status_code: int):
        super().__init__(message)
        self.mode = mode
        self.status_code = status_code
