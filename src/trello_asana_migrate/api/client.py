"""Shared asynchronous HTTP client for the Asana and Trello APIs."""

import asyncio
import json
from typing import Any, Dict, Optional, Type

import aiohttp
from loguru import logger
from pydantic import BaseModel

from .exceptions import APIError
from .rate_limiter import RateLimiter


class APIResponse(BaseModel):
    """Standard API response wrapper."""

    status_code: int
    data: Any
    headers: Dict[str, str]
    success: bool


class BaseClient:
    """Rate limited aiohttp client that maps HTTP failures to exceptions.

    Subclasses name their service, supply authentication through
    ``_default_headers``/``_default_params`` and choose the exception types
    raised for failing status codes.
    """

    service_name = 'API'
    api_error: Type[APIError] = APIError
    status_errors: Dict[int, Type[APIError]] = {}
    rate_limit_error: Optional[Type[APIError]] = None

    def __init__(
        self,
        base_url: str,
        timeout: float = 60,
        rate_limit_per_second: float = 10.0,
    ):
        """Initialize client.

        Args:
            base_url: API base URL without trailing slash
            timeout: Total request timeout in seconds
            rate_limit_per_second: Sustained request rate
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.rate_limiter = RateLimiter(rate_limit_per_second)
        self._session: Optional[aiohttp.ClientSession] = None
        self.logger = logger.bind(component=self.__class__.__name__)

    def _default_headers(self) -> Dict[str, str]:
        return {'Accept': 'application/json', 'User-Agent': 'trello-asana-migrate/0.1.0'}

    def _default_params(self) -> Dict[str, str]:
        return {}

    def _build_url(self, endpoint: str) -> str:
        """Build full API URL from endpoint.

        Absolute URLs are passed through unchanged.

        Args:
            endpoint: API endpoint path or absolute URL

        Returns:
            Full URL
        """
        if endpoint.startswith(('http://', 'https://')):
            return endpoint
        return f'{self.base_url}/{endpoint.lstrip("/")}'

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers=self._default_headers(),
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
        return self._session

    def _error_message(self, status: int, payload: Any) -> str:
        """Extract a readable message from an error body."""
        if isinstance(payload, dict) and payload.get('message'):
            return str(payload['message'])
        if isinstance(payload, str) and payload:
            return f'HTTP {status}: {payload[:200]}'
        return f'HTTP {status}'

    def _raise_for_status(
        self, status: int, headers: Dict[str, str], payload: Any
    ) -> None:
        """Raise the exception matching a failing status code.

        Raises:
            APIError: Subclass chosen from ``status_errors``
        """
        message = f'{self.service_name} request failed: {self._error_message(status, payload)}'
        error_class = self.status_errors.get(status, self.api_error)
        response_data = payload if isinstance(payload, (dict, list)) else None

        if status == 429 and self.rate_limit_error is not None:
            retry_after = int(headers.get('Retry-After', 60))
            raise self.rate_limit_error(
                f'Rate limit exceeded. Retry after {retry_after} seconds',
                retry_after=retry_after,
                status_code=status,
                response_data=response_data,
            )

        raise error_class(message, status_code=status, response_data=response_data)

    async def _handle_response(
        self, response: aiohttp.ClientResponse, raw: bool = False
    ) -> APIResponse:
        """Handle API response and convert to standard format.

        Args:
            response: Raw HTTP response
            raw: Return the body as bytes instead of decoded JSON

        Returns:
            Standardized API response

        Raises:
            APIError: For failing status codes
        """
        headers = dict(response.headers)
        body = await response.read()

        if raw and response.status < 400:
            return APIResponse(
                status_code=response.status,
                data=body,
                headers=headers,
                success=200 <= response.status < 300,
            )

        text = body.decode('utf-8', errors='replace') if body else ''
        try:
            data = json.loads(text) if text else None
        except ValueError:
            data = text

        if response.status >= 400:
            self._raise_for_status(response.status, headers, data)

        return APIResponse(
            status_code=response.status,
            data=data,
            headers=headers,
            success=200 <= response.status < 300,
        )

    async def _make_request_async(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        form: Optional[aiohttp.FormData] = None,
        headers: Optional[Dict[str, str]] = None,
        raw: bool = False,
        authenticate: bool = True,
    ) -> APIResponse:
        """Make asynchronous API request.

        Args:
            method: HTTP method
            endpoint: API endpoint or absolute URL
            params: Query parameters
            data: JSON request body
            form: Multipart body (mutually exclusive with data)
            headers: Extra request headers
            raw: Return the body as bytes
            authenticate: Add the service credentials to the query string

        Returns:
            API response
        """
        url = self._build_url(endpoint)
        request_params = dict(self._default_params()) if authenticate else {}
        request_params.update(params or {})

        await self.rate_limiter.acquire()
        session = await self._get_session()

        self.logger.debug(f'{method} {url}')
        try:
            async with session.request(
                method=method,
                url=url,
                params=request_params or None,
                json=data,
                data=form,
                headers=headers,
            ) as response:
                return await self._handle_response(response, raw=raw)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self.logger.error(f'Network error during {method} {url}: {e!r}')
            raise self.api_error(f'Network error: {e!r}') from e

    async def get_async(
        self, endpoint: str, params: Optional[Dict[str, Any]] = None, **kwargs
    ) -> APIResponse:
        """Make asynchronous GET request."""
        return await self._make_request_async('GET', endpoint, params=params, **kwargs)

    async def post_async(
        self, endpoint: str, data: Optional[Dict[str, Any]] = None, **kwargs
    ) -> APIResponse:
        """Make asynchronous POST request."""
        return await self._make_request_async('POST', endpoint, data=data, **kwargs)

    async def close(self) -> None:
        """Close the client session."""
        if self._session is not None and not self._session.closed:
            await self._session.close()
            self.logger.debug(f'{self.service_name} client session closed')
        self._session = None

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
