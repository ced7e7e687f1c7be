from .client import BaseApiClient, is_public_endpoint
from .auth_api import AuthApi
from .models import LoginResponse, ProfileUpdate, UserRecord, VerifyResult
from .exceptions import (
    ApiError,
    ServiceUnavailableError,
    ServiceTimeoutError,
    AuthenticationError,
    NotFoundError,
    RequestValidationError,
)

__all__ = [
    "BaseApiClient",
    "is_public_endpoint",
    "AuthApi",
    "LoginResponse",
    "ProfileUpdate",
    "UserRecord",
    "VerifyResult",
    "ApiError",
    "ServiceUnavailableError",
    "ServiceTimeoutError",
    "AuthenticationError",
    "NotFoundError",
    "RequestValidationError",
]
