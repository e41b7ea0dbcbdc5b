"""Error taxonomy for repository profiling."""

from __future__ import annotations


class RepoProfilerError(Exception):
    """Base exception."""


class RemoteFetchError(RepoProfilerError):
    """Fatal failure while retrieving repository metadata or the file tree."""


class NotFoundOrPrivateError(RemoteFetchError):
    """Repository does not exist or is private (-> HTTP 404)."""


class RateLimitedError(RemoteFetchError):
    """GitHub API rate limit exhausted (-> HTTP 429)."""


class AccessForbiddenError(RemoteFetchError):
    """Request refused for a reason other than rate limiting (-> HTTP 403)."""


class UnauthorizedError(RemoteFetchError):
    """Token is invalid or expired (-> HTTP 401)."""


class UpstreamError(RemoteFetchError):
    """Any other non-success answer from the hosting API (-> HTTP 502)."""

    def __init__(self, status: int | None, message: str) -> None:
        self.status = status
        self.message = message
        label = status if status is not None else "transport"
        super().__init__(f"GitHub API error ({label}): {message}")


class TransportTimeoutError(RemoteFetchError):
    """The request did not complete within its timeout (-> HTTP 504)."""


class ManifestParseError(RepoProfilerError):
    """A manifest could not be parsed; always downgraded to an empty manifest."""

    def __init__(self, file_name: str, reason: str) -> None:
        self.file_name = file_name
        self.reason = reason
        super().__init__(f"{file_name}: {reason}")


_STATUS_MAP: dict[type[RepoProfilerError], int] = {
    NotFoundOrPrivateError: 404,
    RateLimitedError: 429,
    AccessForbiddenError: 403,
    UnauthorizedError: 401,
    UpstreamError: 502,
    TransportTimeoutError: 504,
}


def http_status_for(exc: BaseException) -> int:
    """Return the transport-level status a calling boundary should report for *exc*."""
    for cls in type(exc).__mro__:
        if cls in _STATUS_MAP:
            return _STATUS_MAP[cls]
    return 500
