"""Utility functions for HTTP client operations."""

from __future__ import annotations

from collections.abc import Mapping
from urllib.parse import urljoin


def resolve_url(base_url: str | None, path: str) -> str:
    """Resolve a request target against an optional base URL.

    Absolute ``http(s)://`` targets are returned unchanged; relative paths are
    joined predictably (base gains a trailing '/', path loses its leading '/').

    Args:
        base_url: Base URL (e.g. "https://api.example.com") or None
        path: Absolute URL or path relative to ``base_url``

    Returns:
        Absolute request URL

    Raises:
        ValueError: If ``path`` is relative and no base URL is configured
    """
    if path.startswith(("http://", "https://")):
        return path
    if not base_url:
        raise ValueError(f"Relative path {path!r} requires a base_url")
    base = base_url if base_url.endswith("/") else base_url + "/"
    return urljoin(base, path.lstrip("/"))


def safe_snippet(content: bytes, limit: int) -> str:
    """Extract safe text snippet from response content for logging.

    Args:
        content: Response body bytes
        limit: Maximum number of bytes to include

    Returns:
        Truncated, decoded text snippet
    """
    if not content:
        return ""
    return content[:limit].decode("utf-8", errors="replace")


def get_request_id(headers: Mapping[str, str]) -> str | None:
    """Extract request ID from common tracing headers.

    Checks for: x-request-id, x-correlation-id, request-id, trace-id (case-insensitive).
    """
    for key in ("x-request-id", "x-correlation-id", "request-id", "trace-id"):
        for hk, hv in headers.items():
            if hk.lower() == key:
                return hv
    return None
