from typing import Optional, Any


class ApiError(Exception):
    """Base exception for all backend communication errors."""
    def __init__(self, message: str, path: str = "", status_code: Optional[int] = None, details: Any = None):
        self.message = message
        self.path = path
        self.status_code = status_code
        self.details = details
        super().__init__(f"{message} (Status: {status_code}, Path: {path or '-'})")


class ServiceUnavailableError(ApiError):
    """Raised when the backend is unreachable or returns a 5xx."""
    pass


class ServiceTimeoutError(ServiceUnavailableError):
    """Raised specifically on timeouts."""
    pass


class AuthenticationError(ApiError):
    """Raised when the backend rejects the session (401/403)."""
    pass


class NotFoundError(ApiError):
    """Raised when the requested resource is not found (404)."""
    pass


class RequestValidationError(ApiError):
    """Raised when the backend rejects the request payload (400/422)."""
    pass
