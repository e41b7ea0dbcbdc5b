"""Async GitHub API client with bounded timeouts and error classification."""

from __future__ import annotations

import base64
import binascii
from typing import Any
from urllib.parse import quote

import httpx
import structlog

from repoprofiler.core.config import DEFAULT_API_BASE_URL, DEFAULT_TIMEOUT_SECONDS
from repoprofiler.errors import (
    AccessForbiddenError,
    NotFoundOrPrivateError,
    RateLimitedError,
    RemoteFetchError,
    TransportTimeoutError,
    UnauthorizedError,
    UpstreamError,
)
from repoprofiler.models import FileEntry, RepositoryMetadata

log = structlog.get_logger("repoprofiler.engine")

_USER_AGENT = "repoprofiler/0.3"

# git/trees node type → FileEntry kind; submodules ("commit") are dropped.
_TREE_KINDS = {"blob": "file", "tree": "directory"}
# contents API item type → FileEntry kind
_CONTENT_KINDS = {"file": "file", "dir": "directory", "symlink": "file"}


class GitHubClient:
    """Thin async wrapper around the GitHub REST API.

    Metadata and tree calls raise one of the :mod:`repoprofiler.errors`
    remote-fetch kinds; :meth:`fetch_file_content` never raises.  No call is
    retried.
    """

    def __init__(
        self,
        token: str | None = None,
        *,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers: dict[str, str] = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": _USER_AGENT,
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    # ── lifecycle ──────────────────────────────────────────────────────────

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # ── public ─────────────────────────────────────────────────────────────

    async def fetch_metadata(self, owner: str, repo: str) -> RepositoryMetadata:
        """GET /repos/{owner}/{repo}."""
        data = await self._get_json(f"/repos/{_seg(owner)}/{_seg(repo)}")
        if not isinstance(data, dict):
            raise UpstreamError(200, "unexpected repository payload")

        license_info = data.get("license")
        license_name = license_info.get("name") if isinstance(license_info, dict) else None
        html_url = data.get("html_url") or f"https://github.com/{owner}/{repo}"
        return RepositoryMetadata(
            name=data.get("name") or repo,
            description=data.get("description") or "",
            language=data.get("language") or "Unknown",
            topics=tuple(t for t in data.get("topics") or () if isinstance(t, str)),
            license=license_name,
            html_url=html_url,
            clone_url=data.get("clone_url") or f"{html_url}.git",
            stars=int(data.get("stargazers_count") or 0),
            forks=int(data.get("forks_count") or 0),
            default_branch=data.get("default_branch") or "main",
        )

    async def fetch_tree(self, owner: str, repo: str, ref: str = "HEAD") -> list[FileEntry]:
        """GET /repos/{owner}/{repo}/git/trees/{ref}?recursive=1, in API order."""
        data = await self._get_json(
            f"/repos/{_seg(owner)}/{_seg(repo)}/git/trees/{quote(ref, safe='')}",
            params={"recursive": "1"},
        )
        if not isinstance(data, dict) or not isinstance(data.get("tree"), list):
            raise UpstreamError(200, "unexpected tree payload")
        if data.get("truncated"):
            log.warning("github.tree_truncated", repo=f"{owner}/{repo}", entries=len(data["tree"]))

        entries: list[FileEntry] = []
        for node in data["tree"]:
            kind = _TREE_KINDS.get(node.get("type"))
            path = node.get("path")
            if kind is None or not path:
                continue
            entries.append(
                FileEntry(
                    path=path,
                    name=path.rsplit("/", 1)[-1],
                    type=kind,
                    size=node.get("size"),
                )
            )
        return entries

    async def list_directory(self, owner: str, repo: str, path: str = "") -> list[FileEntry]:
        """GET /repos/{owner}/{repo}/contents/{path}: a single, non-recursive level."""
        data = await self._get_json(
            f"/repos/{_seg(owner)}/{_seg(repo)}/contents/{quote(path, safe='/')}"
        )
        if not isinstance(data, list):
            return []

        entries: list[FileEntry] = []
        for item in data:
            kind = _CONTENT_KINDS.get(item.get("type"))
            item_path = item.get("path")
            if kind is None or not item_path:
                continue
            entries.append(
                FileEntry(
                    path=item_path,
                    name=item.get("name") or item_path.rsplit("/", 1)[-1],
                    type=kind,
                    size=item.get("size"),
                )
            )
        return entries

    async def fetch_file_content(self, owner: str, repo: str, path: str) -> str | None:
        """Return decoded text of *path*, or ``None`` on any failure."""
        try:
            data = await self._get_json(
                f"/repos/{_seg(owner)}/{_seg(repo)}/contents/{quote(path, safe='/')}"
            )
        except (RemoteFetchError, httpx.InvalidURL, ValueError) as exc:
            log.debug("github.content_unavailable", path=path, error=str(exc))
            return None
        return self._decode_content(data)

    # ── internal ───────────────────────────────────────────────────────────

    async def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        """Single GET; transport and HTTP failures become remote-fetch errors."""
        try:
            resp = await self._client.get(url, params=params)
        except httpx.TimeoutException as exc:
            log.warning("github.timeout", url=url)
            raise TransportTimeoutError(f"request to {url} timed out") from exc
        except httpx.HTTPError as exc:
            log.warning("github.transport_error", url=url, error=str(exc))
            raise UpstreamError(None, str(exc) or type(exc).__name__) from exc

        if resp.status_code >= 400:
            raise self._classify(resp)

        try:
            return resp.json()
        except ValueError as exc:
            raise UpstreamError(resp.status_code, "response body is not valid JSON") from exc

    def _classify(self, response: httpx.Response) -> RemoteFetchError:
        """Map a failed response onto the error taxonomy."""
        status = response.status_code
        message = self._error_message(response)

        if status == 404:
            return NotFoundOrPrivateError("Repository not found or is private")
        if status == 401:
            return UnauthorizedError("GitHub token is invalid or expired")
        if status == 429 or (status == 403 and self._is_rate_limited(response, message)):
            log.warning(
                "github.rate_limited",
                url=str(response.request.url),
                reset=response.headers.get("X-RateLimit-Reset"),
            )
            return RateLimitedError(
                "GitHub API rate limit exceeded. Try again later or supply a token."
            )
        if status == 403:
            return AccessForbiddenError(f"GitHub API access forbidden: {message}")
        return UpstreamError(status, message)

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get("message"), str):
            return body["message"]
        return response.text.strip() or response.reason_phrase or f"HTTP {response.status_code}"

    @staticmethod
    def _is_rate_limited(response: httpx.Response, message: str) -> bool:
        """Check if a 403 response is due to rate limiting."""
        if "rate limit" in message.lower():
            return True
        remaining = GitHubClient._parse_header_int(response.headers.get("X-RateLimit-Remaining"))
        if remaining is not None:
            return remaining == 0
        # GitHub also uses Retry-After header for abuse rate limits
        return "Retry-After" in response.headers

    @staticmethod
    def _parse_header_int(value: str | None) -> int | None:
        """Safely parse an integer header value."""
        if value is None:
            return None
        try:
            return int(value)
        except (ValueError, TypeError):
            return None

    @staticmethod
    def _decode_content(data: Any) -> str | None:
        """Decode a contents-API file payload to text."""
        if not isinstance(data, dict) or data.get("type", "file") != "file":
            return None
        content = data.get("content")
        if not content:
            return None
        if data.get("encoding") != "base64":
            return content if isinstance(content, str) else None
        try:
            raw = base64.b64decode(content)
        except (binascii.Error, ValueError):
            return None
        return raw.decode("utf-8", errors="replace")


def _seg(value: str) -> str:
    return quote(value, safe="")
