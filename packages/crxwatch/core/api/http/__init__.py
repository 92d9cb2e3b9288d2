"""HTTPX wrapper used for update metadata and artifact downloads.

Exposes a small, ergonomic surface:
- AsyncApiClient: high-level async client
- HttpClientConfig: configuration
- Exceptions: ApiError and subclasses
"""

from crxwatch.core.api.http.client import AsyncApiClient
from crxwatch.core.api.http.config import HttpClientConfig
from crxwatch.core.api.http.errors import (
    ApiError,
    AuthError,
    ClientError,
    NetworkError,
    RateLimitError,
    ServerError,
    TimeoutError,
    UnexpectedStatusError,
)

__all__ = [
    "AsyncApiClient",
    "HttpClientConfig",
    "ApiError",
    "NetworkError",
    "TimeoutError",
    "RateLimitError",
    "AuthError",
    "ClientError",
    "ServerError",
    "UnexpectedStatusError",
]
