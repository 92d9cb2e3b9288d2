"""Exceptions raised by the store HTTP client.

Every failure carries a ``RequestFailure`` record so resolvers and the
artifact fetcher can log the endpoint and status without re-parsing the
message. Status-based subclasses are chosen by ``category_for_status``.
"""

from __future__ import annotations

from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field


class RequestFailure(BaseModel):
    """What went wrong with one request to an update or download endpoint."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    message: str
    method: str
    url: str
    status_code: int | None = None
    request_id: str | None = None
    response_body_snippet: str | None = None
    cause: BaseException | None = Field(default=None, repr=False)

    @property
    def host(self) -> str:
        return urlsplit(self.url).hostname or ""


class ApiError(Exception):
    """A request to a store endpoint failed or returned an unaccepted status."""

    def __init__(
        self,
        *,
        message: str,
        method: str,
        url: str,
        status_code: int | None = None,
        request_id: str | None = None,
        response_body_snippet: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.failure = RequestFailure(
            message=message,
            method=method,
            url=url,
            status_code=status_code,
            request_id=request_id,
            response_body_snippet=response_body_snippet,
            cause=cause,
        )
        super().__init__(str(self))

    @property
    def message(self) -> str:
        return self.failure.message

    @property
    def url(self) -> str:
        return self.failure.url

    @property
    def status_code(self) -> int | None:
        return self.failure.status_code

    @property
    def request_id(self) -> str | None:
        return self.failure.request_id

    @property
    def response_body_snippet(self) -> str | None:
        return self.failure.response_body_snippet

    @property
    def cause(self) -> BaseException | None:
        return self.failure.cause

    def __str__(self) -> str:
        f = self.failure
        text = f"{f.message}: {f.method} {f.url}"
        if f.status_code is not None:
            text += f" (HTTP {f.status_code})"
        if f.request_id:
            text += f" [{f.request_id}]"
        return text


class NetworkError(ApiError):
    """Connection could not be made or was dropped."""


class TimeoutError(ApiError):
    """Request timed out."""


class RateLimitError(ApiError):
    """Store answered 429."""


class AuthError(ApiError):
    """Store answered 401 or 403, typically for unlisted or private items."""


class ClientError(ApiError):
    """Any other 4xx, e.g. a removed extension id."""


class ServerError(ApiError):
    """Store answered 5xx."""


class UnexpectedStatusError(ApiError):
    """Status outside the accepted set that fits no other category."""


def category_for_status(status_code: int) -> type[ApiError]:
    """Pick the exception class for an unaccepted HTTP status."""
    if status_code in (401, 403):
        return AuthError
    if status_code == 429:
        return RateLimitError
    if 400 <= status_code < 500:
        return ClientError
    if 500 <= status_code < 600:
        return ServerError
    return UnexpectedStatusError
