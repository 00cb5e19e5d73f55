from .client import SnapClient, create_client
from .config_types import ClientConfig
from .errors import (
    ApiError,
    AuthError,
    DecodeError,
    NetworkError,
    RequestTimeout,
    SnapClientError,
    ValidationError,
)
from .result import Err, Ok, Result
from .types import AnalyzeProvider, ExtractType, ResponseMode

__all__ = [
    "SnapClient",
    "create_client",
    "ClientConfig",
    "ApiError",
    "AuthError",
    "DecodeError",
    "NetworkError",
    "RequestTimeout",
    "SnapClientError",
    "ValidationError",
    "Ok",
    "Err",
    "Result",
    "ResponseMode",
    "ExtractType",
    "AnalyzeProvider",
]
