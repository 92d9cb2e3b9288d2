"""Async HTTP client wrapper built on HTTPX.

Provides:
- Structured error handling (status categories, request ids, body snippets)
- Request/response logging with redaction
- Streaming downloads to disk via aiofiles

The client never retries: every transport failure is surfaced once to the
caller, which decides how to report it.
"""

from __future__ import annotations

import contextlib
import logging
import time
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import aiofiles  # type: ignore[import-untyped]
import httpx

from crxwatch.core.api.http.config import HttpClientConfig
from crxwatch.core.api.http.errors import (
    ApiError,
    NetworkError,
    TimeoutError,
    category_for_status,
)
from crxwatch.core.api.http.utils import get_request_id, resolve_url, safe_snippet

logger = logging.getLogger(__name__)

REDACTED = "***REDACTED***"


def _merge_headers(base: Mapping[str, str], extra: Mapping[str, str] | None) -> dict[str, str]:
    """Merge base headers with request-specific headers."""
    out = dict(base)
    if extra:
        out.update(extra)
    return out


class _Exchange:
    """Debug logging for one request/response pair."""

    def __init__(self, method: str, url: str, request_id: str) -> None:
        self.method = method
        self.url = url
        self.request_id = request_id
        self.started = time.perf_counter()

    def sent(self, headers: Mapping[str, str], redact: tuple[str, ...]) -> None:
        hidden = {h.lower() for h in redact}
        logger.debug(
            f"-> {self.method} {self.url}",
            extra={
                "request_id": self.request_id,
                "headers": {k: REDACTED if k.lower() in hidden else v for k, v in headers.items()},
            },
        )

    def received(self, status_code: int) -> None:
        elapsed_ms = int((time.perf_counter() - self.started) * 1000)
        logger.debug(
            f"<- {self.method} {self.url} {status_code} in {elapsed_ms}ms",
            extra={"request_id": self.request_id, "status_code": status_code},
        )


def _default_request_id() -> str:
    """Generate simple timestamp-based request ID."""
    return f"req_{int(time.time() * 1000)}"


def _build_api_error(
    *,
    exc_type: type[ApiError],
    message: str,
    method: str,
    url: str,
    status_code: int | None = None,
    body: bytes | None = None,
    headers: Mapping[str, str] | None = None,
    request_id: str | None = None,
    body_snippet_limit: int = 4096,
    cause: BaseException | None = None,
) -> ApiError:
    """Build API error with response context."""
    snippet: str | None = None
    if body is not None:
        snippet = safe_snippet(body, body_snippet_limit)
    if headers is not None:
        request_id = get_request_id(headers) or request_id

    return exc_type(
        message=message,
        method=method,
        url=url,
        status_code=status_code,
        request_id=request_id,
        response_body_snippet=snippet,
        cause=cause,
    )


class AsyncApiClient:
    """Asynchronous HTTP client used for update metadata and artifact downloads.

    Args:
        config: Client configuration
        transport: Optional custom transport (useful for testing)

    Example:
        >>> from crxwatch.core.api.http import AsyncApiClient, HttpClientConfig
        >>> async with AsyncApiClient(HttpClientConfig()) as client:
        ...     resp = await client.get("https://ext.goguardian.com/stable.xml")
        ...     body = resp.content
    """

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or HttpClientConfig()
        self._client = httpx.AsyncClient(
            headers={"User-Agent": self.config.user_agent, **self.config.headers},
            timeout=self.config.timeout,
            limits=self.config.limits,
            follow_redirects=self.config.follow_redirects,
            transport=transport,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client and release resources."""
        await self._client.aclose()

    async def __aenter__(self) -> AsyncApiClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def _prepare(
        self, method: str, path: str, headers: Mapping[str, str] | None
    ) -> tuple[str, str, dict[str, str], str]:
        method_u = method.upper()
        url = resolve_url(self.config.base_url, path)
        req_id = (headers.get("X-Request-Id") if headers else None) or _default_request_id()
        merged_headers = _merge_headers(self._client.headers, headers)
        merged_headers.setdefault("X-Request-Id", req_id)
        return method_u, url, merged_headers, req_id

    def _status_error(
        self,
        method: str,
        url: str,
        status_code: int,
        body: bytes,
        headers: Mapping[str, str],
        req_id: str,
        expected_status: Sequence[int] | None,
    ) -> ApiError | None:
        if expected_status is not None:
            if status_code in expected_status:
                return None
            message = f"Unexpected status code (expected {list(expected_status)})"
        elif not 200 <= status_code < 300:
            message = "HTTP error response"
        else:
            return None
        return _build_api_error(
            exc_type=category_for_status(status_code),
            message=message,
            method=method,
            url=url,
            status_code=status_code,
            body=body,
            headers=headers,
            request_id=req_id,
            body_snippet_limit=self.config.max_response_body_for_error,
        )

    def _transport_error(
        self, exc: httpx.HTTPError, method: str, url: str, req_id: str
    ) -> ApiError:
        if isinstance(exc, httpx.TimeoutException):
            exc_type: type[ApiError] = TimeoutError
            message = "Request timed out"
        else:
            exc_type = NetworkError
            message = "Network error while sending request"
        return _build_api_error(
            exc_type=exc_type,
            message=message,
            method=method,
            url=url,
            request_id=req_id,
            cause=exc,
        )

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        content: bytes | None = None,
        expected_status: Sequence[int] | None = None,
    ) -> httpx.Response:
        """Send a request and return the fully read response.

        Args:
            method: HTTP method
            path: Absolute URL or path relative to ``config.base_url``
            headers: Extra request headers
            content: Raw request body
            expected_status: Accepted status codes (default: any 2xx status)

        Returns:
            HTTP response

        Raises:
            ApiError: On transport failure or unaccepted status
        """
        method_u, url, merged_headers, req_id = self._prepare(method, path, headers)
        exchange = _Exchange(method_u, url, req_id)
        exchange.sent(merged_headers, self.config.redact_headers)

        try:
            resp = await self._client.request(
                method_u,
                url,
                headers=merged_headers,
                content=content,
            )
        except httpx.HTTPError as e:
            raise self._transport_error(e, method_u, url, req_id) from e

        exchange.received(resp.status_code)

        error = self._status_error(
            method_u, url, resp.status_code, resp.content, resp.headers, req_id, expected_status
        )
        if error is not None:
            raise error
        return resp

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        """Perform async GET request.

        Raises:
            ApiError: On request failure
        """
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> httpx.Response:
        """Perform async POST request.

        Raises:
            ApiError: On request failure
        """
        return await self.request("POST", path, **kwargs)

    async def download(self, path: str, destination: Path) -> int:
        """Stream a GET response body into ``destination``.

        Args:
            path: Absolute URL or path relative to ``config.base_url``
            destination: File to create (overwritten if present)

        Returns:
            Number of bytes written

        Raises:
            ApiError: On transport failure or error status
            OSError: If the destination cannot be written
        """
        method_u, url, merged_headers, req_id = self._prepare("GET", path, None)
        exchange = _Exchange(method_u, url, req_id)
        exchange.sent(merged_headers, self.config.redact_headers)

        written = 0
        try:
            async with self._client.stream(method_u, url, headers=merged_headers) as resp:
                exchange.received(resp.status_code)
                if not resp.is_success:
                    body = await resp.aread()
                    error = self._status_error(
                        method_u, url, resp.status_code, body, resp.headers, req_id, None
                    )
                    if error is not None:
                        raise error

                try:
                    async with aiofiles.open(destination, mode="wb") as f:
                        async for chunk in resp.aiter_bytes(self.config.download_chunk_size):
                            await f.write(chunk)
                            written += len(chunk)
                except BaseException:
                    # a truncated .crx must not be mistaken for a release
                    with contextlib.suppress(FileNotFoundError):
                        destination.unlink()
                    raise
        except httpx.HTTPError as e:
            raise self._transport_error(e, method_u, url, req_id) from e

        return written
