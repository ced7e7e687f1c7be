import logging
import httpx
from typing import Optional, Type, TypeVar, Any, Callable, Dict, Sequence, Union
from pydantic import BaseModel
from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential, retry_if_exception_type, before_sleep_log

from ..constants import PUBLIC_ENDPOINTS
from .exceptions import (
    ApiError,
    ServiceUnavailableError,
    ServiceTimeoutError,
    AuthenticationError,
    NotFoundError,
    RequestValidationError,
)

# Generic type for Pydantic models
T = TypeVar("T", bound=BaseModel)

logger = logging.getLogger(__name__)


def is_public_endpoint(path: str, public_endpoints: Sequence[str] = PUBLIC_ENDPOINTS) -> bool:
    """True if a 401 from this path must not end the session."""
    return any(endpoint in path for endpoint in public_endpoints)


class BaseApiClient:
    """
    Async HTTP client for the console backend.

    Features:
    - Bearer token attached to every request from the session store.
    - Session-wide 401 handling, skipped for public endpoints.
    - Automatic retries of GET requests on network errors and 5xx responses.
      Mutating requests are sent once so an OTP is never requested twice.
    - Pydantic model deserialization.
    - Standardized exception mapping.
    """

    def __init__(
        self,
        base_url: str,
        token_provider: Optional[Callable[[], Optional[str]]] = None,
        on_unauthorized: Optional[Callable[[str], None]] = None,
        public_endpoints: Sequence[str] = PUBLIC_ENDPOINTS,
        timeout: float = 10.0,
        max_retries: int = 3,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token_provider = token_provider
        self.on_unauthorized = on_unauthorized
        self.public_endpoints = tuple(public_endpoints)
        self.timeout = timeout
        self.max_retries = max_retries
        self._retry_wait = wait_exponential(multiplier=1, min=1, max=10)

        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.aclose()

    async def aclose(self):
        """Close the underlying HTTP client."""
        await self.client.aclose()

    def _auth_headers(self) -> Dict[str, str]:
        token = self.token_provider() if self.token_provider else None
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    @staticmethod
    def _server_message(response: httpx.Response, default: str) -> str:
        try:
            body = response.json()
        except ValueError:
            return default
        if isinstance(body, dict):
            return body.get("message") or body.get("details") or default
        return default

    def _map_exception(self, exc: Exception, path: str) -> Exception:
        """Map httpx exceptions to API exceptions."""
        if isinstance(exc, httpx.TimeoutException):
            return ServiceTimeoutError("Request timed out", path=path)
        if isinstance(exc, (httpx.ConnectError, httpx.NetworkError)):
            return ServiceUnavailableError(f"Failed to connect: {str(exc)}", path=path)
        if isinstance(exc, httpx.HTTPStatusError):
            response = exc.response
            status = response.status_code
            text = response.text
            if status == 401:
                return AuthenticationError(self._server_message(response, "Unauthorized"), path=path, status_code=status, details=text)
            if status == 403:
                return AuthenticationError(self._server_message(response, "Forbidden"), path=path, status_code=status, details=text)
            if status == 404:
                return NotFoundError(self._server_message(response, "Resource not found"), path=path, status_code=status, details=text)
            if status in (400, 422):
                return RequestValidationError(self._server_message(response, "Validation error"), path=path, status_code=status, details=text)
            if status >= 500:
                return ServiceUnavailableError(self._server_message(response, "Server error"), path=path, status_code=status, details=text)

            return ApiError(self._server_message(response, f"HTTP {status} Error"), path=path, status_code=status, details=text)

        return ApiError(f"Unexpected error: {str(exc)}", path=path)

    def _handle_unauthorized(self, path: str) -> None:
        if is_public_endpoint(path, self.public_endpoints):
            return
        logger.warning(f"Session rejected by backend on {path}, clearing session")
        if self.on_unauthorized:
            self.on_unauthorized(path)

    async def _request(
        self,
        method: str,
        path: str,
        response_model: Optional[Type[T]] = None,
        **kwargs
    ) -> Union[T, Dict[str, Any], Any, None]:
        """Execute a single request with error handling."""
        headers = {**kwargs.pop("headers", {}), **self._auth_headers()}
        try:
            response = await self.client.request(method, path, headers=headers, **kwargs)
            response.raise_for_status()

            if response.status_code == 204 or not response.content:
                return None

            if response_model:
                return response_model.model_validate(response.json())

            return response.json()

        except httpx.HTTPError as e:
            if isinstance(e, httpx.HTTPStatusError) and e.response.status_code == 401:
                self._handle_unauthorized(path)
            raise self._map_exception(e, path)
        except Exception as e:
            logger.exception(f"Unexpected client error for {method} {path}")
            raise ApiError(str(e), path=path)

    async def get(self, path: str, params: Optional[Dict] = None, response_model: Optional[Type[T]] = None) -> Union[T, Dict, Any, None]:
        retrying = AsyncRetrying(
            retry=retry_if_exception_type((ServiceUnavailableError, ServiceTimeoutError)),
            stop=stop_after_attempt(self.max_retries),
            wait=self._retry_wait,
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await self._request("GET", path, params=params, response_model=response_model)

    async def post(self, path: str, json: Any = None, response_model: Optional[Type[T]] = None) -> Union[T, Dict, Any, None]:
        return await self._request("POST", path, json=json, response_model=response_model)

    async def put(self, path: str, json: Any = None, response_model: Optional[Type[T]] = None) -> Union[T, Dict, Any, None]:
        return await self._request("PUT", path, json=json, response_model=response_model)
