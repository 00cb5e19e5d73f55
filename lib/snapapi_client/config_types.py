from __future__ import annotations
from dataclasses import dataclass

from .errors import ValidationError

DEFAULT_BASE_URL = "https://api.snapapi.pics"
DEFAULT_TIMEOUT_MS = 60_000
CLIENT_ID = "snapapi-python/0.1.0"


@dataclass(frozen=True)
class ClientConfig:
    api_key: str
    base_url: str = DEFAULT_BASE_URL
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    client_id: str = CLIENT_ID

    def __post_init__(self) -> None:
        if not (self.api_key or "").strip():
            raise ValidationError("API key is required")
        # sent as a header value: printable ASCII only
        if not self.api_key.isascii() or not self.api_key.isprintable():
            raise ValidationError("API key contains invalid characters")
        if not (self.base_url or "").strip():
            raise ValidationError("base_url cannot be empty")
        if int(self.timeout_ms) <= 0:
            raise ValidationError("timeout_ms must be positive")

    @property
    def timeout_s(self) -> float:
        return self.timeout_ms / 1000.0
