"""
HTTP Transport for gitprovider.

Handles HTTP communication with the provider REST APIs: automatic retry
logic, Link-header pagination, cancellation and error classification.
"""

import random
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

from gitprovider.context import Context, ensure_context
from gitprovider.exceptions import (
    AuthenticationError,
    AuthorizationError,
    CancelledError,
    ConflictError,
    GitProviderError,
    InvalidServerDataError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    TransportError,
    ValidationError,
)
from gitprovider.logging import log_http_request, log_http_response


@dataclass
class RetryConfig:
    """Configuration for automatic retry behavior."""

    max_retries: int = 3
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [429, 500, 502, 503])
    respect_retry_after: bool = True
    max_backoff: float = 60.0  # Maximum backoff time in seconds
    jitter: float = 0.1  # Jitter factor (0.1 = ±10%)


class LoggingTransport(httpx.BaseTransport):
    """Transport wrapper logging every request and response at DEBUG level."""

    def __init__(self, inner: httpx.BaseTransport) -> None:
        self.inner = inner

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        log_http_request(request.method, str(request.url), dict(request.headers))
        start = time.monotonic()
        response = self.inner.handle_request(request)
        elapsed_ms = (time.monotonic() - start) * 1000
        log_http_response(response.status_code, str(request.url), elapsed_ms)
        return response

    def close(self) -> None:
        self.inner.close()


class HTTPTransport:
    """
    HTTP transport layer with retry, pagination and error mapping.

    Handles:
    - Token authentication through a provider-specific header
    - Exponential backoff with jitter for retries
    - Retry-After header respect for rate limiting
    - Link-header pagination for list endpoints
    - Error response parsing into typed exceptions
    - Cancellation through a Context token
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        token_header: str = "Authorization",
        token_prefix: str = "Bearer ",
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        headers: dict[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
        pre_chain_hook: Callable[[httpx.BaseTransport], httpx.BaseTransport] | None = None,
        post_chain_hook: Callable[[httpx.BaseTransport], httpx.BaseTransport] | None = None,
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            base_url: Base URL for API requests (e.g., "https://api.github.com")
            token: Access token, sent in ``token_header``
            token_header: Header carrying the token
            token_prefix: Prefix put before the token in the header value
            timeout: Request timeout in seconds
            retry_config: Configuration for retry behavior
            headers: Extra headers sent with every request
            transport: Network transport (default: httpx.HTTPTransport)
            pre_chain_hook: Wraps the network transport
            post_chain_hook: Wraps the logging transport
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()

        default_headers = {"Accept": "application/json"}
        if headers:
            default_headers.update(headers)
        if token:
            default_headers[token_header] = f"{token_prefix}{token}"

        chain: httpx.BaseTransport = transport or httpx.HTTPTransport()
        if pre_chain_hook is not None:
            chain = pre_chain_hook(chain)
        chain = LoggingTransport(chain)
        if post_chain_hook is not None:
            chain = post_chain_hook(chain)

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers=default_headers,
            transport=chain,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def request(
        self,
        ctx: Context | None,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """
        Make a request with automatic retry.

        Args:
            ctx: Cancellation context
            method: HTTP method
            path: API path, or an absolute URL
            params: Query parameters
            body: JSON request body
            headers: Extra headers for this request

        Returns:
            Parsed JSON response, or None for an empty response

        Raises:
            GitProviderError: On API errors
            CancelledError: If ctx was cancelled
        """
        response = self._send(ensure_context(ctx), method, path, params, body, headers)
        return self._decode(response)

    def paginate(
        self,
        ctx: Context | None,
        path: str,
        params: dict[str, Any] | None = None,
        per_page: int = 100,
    ) -> list[Any]:
        """
        GET every page of a list endpoint, following ``Link: rel="next"``.

        Returns:
            The concatenated items of all pages

        Raises:
            InvalidServerDataError: If a page isn't a JSON array
        """
        ctx = ensure_context(ctx)
        items: list[Any] = []
        next_url: str | None = path
        page_params: dict[str, Any] | None = {**(params or {}), "per_page": per_page}

        while next_url:
            response = self._send(ctx, "GET", next_url, page_params, None, None)
            page = self._decode(response)
            if not isinstance(page, list):
                raise InvalidServerDataError(
                    "INVALID_SERVER_DATA",
                    f"expected a JSON array from {response.request.url}",
                )
            items.extend(page)
            next_url = response.links.get("next", {}).get("url")
            # The next link already carries the query string
            page_params = None

        return items

    def _send(
        self,
        ctx: Context,
        method: str,
        path: str,
        params: dict[str, Any] | None,
        body: dict[str, Any] | None,
        headers: dict[str, str] | None,
    ) -> httpx.Response:
        def make_request() -> httpx.Response:
            return self._client.request(
                method, path, params=params, json=body, headers=headers
            )

        return self._execute_with_retry(ctx, make_request)

    def _execute_with_retry(
        self, ctx: Context, request_fn: Callable[[], httpx.Response]
    ) -> httpx.Response:
        """
        Execute a request with automatic retry on retryable errors.

        Args:
            ctx: Cancellation context, checked around every attempt
            request_fn: Function that makes the HTTP request

        Returns:
            The successful response

        Raises:
            GitProviderError: On non-retryable errors or after max retries
        """
        last_error: Exception | None = None

        for attempt in range(self.retry_config.max_retries + 1):
            ctx.check()
            try:
                response = request_fn()
            except httpx.RequestError as e:
                # Network errors are retryable
                if attempt >= self.retry_config.max_retries:
                    raise TransportError("CONNECTION_ERROR", str(e)) from e

                last_error = e
                ctx.sleep(self._get_backoff_time(attempt, None))
                continue

            if ctx.cancelled:
                raise CancelledError("operation cancelled while awaiting the response")

            if response.status_code < 400:
                return response

            error = self._parse_error_response(response)

            if not self._should_retry(response.status_code, attempt):
                raise error

            last_error = error

            retry_after = response.headers.get("Retry-After")
            ctx.sleep(self._get_backoff_time(attempt, retry_after))

        # Should not reach here, but just in case
        if last_error:
            if isinstance(last_error, GitProviderError):
                raise last_error
            raise TransportError("MAX_RETRIES_EXCEEDED", str(last_error))

        raise TransportError("UNKNOWN_ERROR", "Request failed with no error details")

    def _should_retry(self, status_code: int, attempt: int) -> bool:
        """
        Determine if a request should be retried.

        Args:
            status_code: HTTP status code
            attempt: Current attempt number (0-indexed)

        Returns:
            True if the request should be retried
        """
        if attempt >= self.retry_config.max_retries:
            return False

        return status_code in self.retry_config.retry_on

    def _get_backoff_time(
        self, attempt: int, retry_after: str | None
    ) -> float:
        """
        Calculate backoff time for retry.

        Uses exponential backoff with jitter, respecting Retry-After header
        if present.

        Args:
            attempt: Current attempt number (0-indexed)
            retry_after: Value of Retry-After header (if present)

        Returns:
            Time to wait in seconds
        """
        if retry_after and self.retry_config.respect_retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass  # Fall through to exponential backoff

        # Exponential backoff: backoff_factor ^ attempt
        base_wait = self.retry_config.backoff_factor ** attempt

        # Apply jitter (±jitter%)
        jitter_range = base_wait * self.retry_config.jitter
        jitter = random.uniform(-jitter_range, jitter_range)
        wait_time = base_wait + jitter

        return min(wait_time, self.retry_config.max_backoff)

    def _decode(self, response: httpx.Response) -> Any:
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise InvalidServerDataError(
                "INVALID_SERVER_DATA",
                f"response from {response.request.url} is not valid JSON",
            ) from e

    def _parse_error_response(self, response: httpx.Response) -> GitProviderError:
        """
        Parse an error response into a typed exception.

        Both GitHub (``{"message": ...}``) and GitLab (``{"message": ...}`` or
        ``{"error": ...}``) error bodies are understood.

        Args:
            response: HTTP response with error status

        Returns:
            Appropriate GitProviderError subclass
        """
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        message = data.get("message") or data.get("error") or f"HTTP {response.status_code}"
        if not isinstance(message, str):
            message = str(message)
        code = f"HTTP_{response.status_code}"
        request_id = response.headers.get("X-GitHub-Request-Id") or response.headers.get(
            "X-Request-Id"
        )

        status_code = response.status_code

        if status_code == 401:
            return AuthenticationError(code, message, request_id)
        elif status_code == 403:
            return AuthorizationError(code, message, request_id)
        elif status_code == 404:
            return NotFoundError(code, message, request_id)
        elif status_code == 409:
            return ConflictError(code, message, request_id)
        elif status_code == 422 and "already exists" in str(data).lower():
            # GitHub answers 422 when creating something that exists
            return ConflictError(code, message, request_id)
        elif status_code == 429:
            retry_after_str = response.headers.get("Retry-After", "60")
            try:
                retry_after = int(retry_after_str)
            except ValueError:
                retry_after = 60
            return RateLimitedError(code, message, retry_after, request_id)
        elif status_code >= 500:
            return ServerError(code, message, request_id)
        else:
            details = data.get("errors")
            errors = [str(d) for d in details] if isinstance(details, list) else []
            return ValidationError(code, message, errors=errors, request_id=request_id)
