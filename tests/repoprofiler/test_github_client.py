"""Tests for the GitHub client (httpx.MockTransport, no network)."""

from __future__ import annotations

import asyncio
import base64

import httpx
import pytest

from repoprofiler.engines.github.cache import CachedContentSource
from repoprofiler.engines.github.client import GitHubClient
from repoprofiler.errors import (
    AccessForbiddenError,
    NotFoundOrPrivateError,
    RateLimitedError,
    TransportTimeoutError,
    UnauthorizedError,
    UpstreamError,
)


def _client(handler, **kwargs) -> GitHubClient:
    return GitHubClient(transport=httpx.MockTransport(handler), **kwargs)


def _respond(status: int, **kwargs):
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, **kwargs)

    return handler


# ── metadata ──────────────────────────────────────────────────────────────


class TestFetchMetadata:
    @pytest.mark.anyio
    async def test_maps_repository_payload(self):
        seen: list[httpx.Request] = []

        async def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "name": "demo",
                    "description": None,
                    "language": "TypeScript",
                    "topics": ["nextjs", "docs"],
                    "license": {"name": "MIT License"},
                    "html_url": "https://github.com/acme/demo",
                    "clone_url": "https://github.com/acme/demo.git",
                    "stargazers_count": 12,
                    "forks_count": 3,
                    "default_branch": "trunk",
                },
            )

        async with _client(handler, token="tkn") as client:
            meta = await client.fetch_metadata("acme", "demo")

        assert meta.name == "demo"
        assert meta.description == ""
        assert meta.language == "TypeScript"
        assert meta.topics == ("nextjs", "docs")
        assert meta.license == "MIT License"
        assert meta.stars == 12
        assert meta.forks == 3
        assert meta.default_branch == "trunk"
        assert seen[0].url.path == "/repos/acme/demo"
        assert seen[0].headers["Authorization"] == "Bearer tkn"
        assert seen[0].headers["Accept"] == "application/vnd.github+json"

    @pytest.mark.anyio
    async def test_missing_language_is_unknown(self):
        handler = _respond(200, json={"name": "x", "language": None, "license": None})
        async with _client(handler) as client:
            meta = await client.fetch_metadata("acme", "x")
        assert meta.language == "Unknown"
        assert meta.license is None
        assert meta.html_url == "https://github.com/acme/x"

    @pytest.mark.anyio
    async def test_no_token_sends_no_auth_header(self):
        seen: list[httpx.Request] = []

        async def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"name": "x"})

        async with _client(handler) as client:
            await client.fetch_metadata("acme", "x")
        assert "Authorization" not in seen[0].headers


# ── error classification ──────────────────────────────────────────────────


class TestErrorClassification:
    @pytest.mark.anyio
    async def test_404_is_not_found(self):
        async with _client(_respond(404, json={"message": "Not Found"})) as client:
            with pytest.raises(NotFoundOrPrivateError):
                await client.fetch_metadata("acme", "gone")

    @pytest.mark.anyio
    async def test_401_is_unauthorized(self):
        async with _client(_respond(401, json={"message": "Bad credentials"})) as client:
            with pytest.raises(UnauthorizedError):
                await client.fetch_metadata("acme", "demo")

    @pytest.mark.anyio
    async def test_403_rate_limit_message(self):
        body = {"message": "API rate limit exceeded for 1.2.3.4."}
        async with _client(_respond(403, json=body)) as client:
            with pytest.raises(RateLimitedError):
                await client.fetch_metadata("acme", "demo")

    @pytest.mark.anyio
    async def test_403_remaining_zero_header(self):
        handler = _respond(403, json={"message": "Forbidden"}, headers={"X-RateLimit-Remaining": "0"})
        async with _client(handler) as client:
            with pytest.raises(RateLimitedError):
                await client.fetch_tree("acme", "demo")

    @pytest.mark.anyio
    async def test_403_other_is_forbidden(self):
        handler = _respond(
            403, json={"message": "Resource not accessible"}, headers={"X-RateLimit-Remaining": "42"}
        )
        async with _client(handler) as client:
            with pytest.raises(AccessForbiddenError):
                await client.fetch_metadata("acme", "demo")

    @pytest.mark.anyio
    async def test_429_is_rate_limited(self):
        async with _client(_respond(429, text="slow down")) as client:
            with pytest.raises(RateLimitedError):
                await client.fetch_metadata("acme", "demo")

    @pytest.mark.anyio
    async def test_other_status_is_upstream_error(self):
        async with _client(_respond(500, json={"message": "boom"})) as client:
            with pytest.raises(UpstreamError) as exc_info:
                await client.fetch_metadata("acme", "demo")
        assert exc_info.value.status == 500
        assert exc_info.value.message == "boom"
        assert str(exc_info.value) == "GitHub API error (500): boom"

    @pytest.mark.anyio
    async def test_timeout_is_transport_timeout(self):
        async def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        async with _client(handler) as client:
            with pytest.raises(TransportTimeoutError):
                await client.fetch_metadata("acme", "demo")

    @pytest.mark.anyio
    async def test_connect_error_is_upstream_without_status(self):
        async def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(UpstreamError) as exc_info:
                await client.fetch_metadata("acme", "demo")
        assert exc_info.value.status is None


# ── tree / listing ────────────────────────────────────────────────────────


class TestTree:
    @pytest.mark.anyio
    async def test_recursive_tree_maps_kinds(self):
        seen: list[httpx.Request] = []

        async def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "tree": [
                        {"path": "src", "type": "tree"},
                        {"path": "src/index.js", "type": "blob", "size": 120},
                        {"path": "vendor/lib", "type": "commit"},
                    ],
                    "truncated": False,
                },
            )

        async with _client(handler) as client:
            entries = await client.fetch_tree("acme", "demo", "main")

        assert [(e.path, e.type) for e in entries] == [("src", "directory"), ("src/index.js", "file")]
        assert entries[1].name == "index.js"
        assert entries[1].size == 120
        assert seen[0].url.path == "/repos/acme/demo/git/trees/main"
        assert seen[0].url.params["recursive"] == "1"

    @pytest.mark.anyio
    async def test_list_directory(self):
        handler = _respond(
            200,
            json=[
                {"path": "README.md", "name": "README.md", "type": "file", "size": 10},
                {"path": "src", "name": "src", "type": "dir"},
            ],
        )
        async with _client(handler) as client:
            entries = await client.list_directory("acme", "demo")
        assert [(e.name, e.type) for e in entries] == [("README.md", "file"), ("src", "directory")]


# ── file content ──────────────────────────────────────────────────────────


class TestFileContent:
    @pytest.mark.anyio
    async def test_decodes_base64(self):
        encoded = base64.b64encode("héllo\nworld".encode()).decode()
        # embedded newlines, as in real payloads, are ignored
        wrapped = "\n".join(encoded[i : i + 4] for i in range(0, len(encoded), 4))
        handler = _respond(200, json={"type": "file", "encoding": "base64", "content": wrapped})
        async with _client(handler) as client:
            assert await client.fetch_file_content("acme", "demo", "a.txt") == "héllo\nworld"

    @pytest.mark.anyio
    async def test_invalid_utf8_is_replaced(self):
        encoded = base64.b64encode(b"ok\xff").decode()
        handler = _respond(200, json={"type": "file", "encoding": "base64", "content": encoded})
        async with _client(handler) as client:
            text = await client.fetch_file_content("acme", "demo", "bin.dat")
        assert text == "ok\ufffd"

    @pytest.mark.anyio
    async def test_missing_file_is_absent(self):
        async with _client(_respond(404, json={"message": "Not Found"})) as client:
            assert await client.fetch_file_content("acme", "demo", "nope.txt") is None

    @pytest.mark.anyio
    async def test_directory_payload_is_absent(self):
        async with _client(_respond(200, json=[{"type": "file", "path": "x"}])) as client:
            assert await client.fetch_file_content("acme", "demo", "src") is None

    @pytest.mark.anyio
    async def test_timeout_is_absent_not_raised(self):
        async def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        async with _client(handler) as client:
            assert await client.fetch_file_content("acme", "demo", "a.txt") is None

    @pytest.mark.anyio
    async def test_rate_limit_is_absent_not_raised(self):
        handler = _respond(403, json={"message": "API rate limit exceeded"})
        async with _client(handler) as client:
            assert await client.fetch_file_content("acme", "demo", "a.txt") is None


# ── per-run read cache ────────────────────────────────────────────────────


class TestCachedContentSource:
    @pytest.mark.anyio
    async def test_concurrent_and_repeated_reads_share_one_request(self, fake_source, make_tree):
        source = fake_source(make_tree("a.txt"), {"a.txt": "hello"})
        cache = CachedContentSource(source)

        first, second = await asyncio.gather(
            cache.fetch_file_content("acme", "demo", "a.txt"),
            cache.fetch_file_content("acme", "demo", "a.txt"),
        )
        third = await cache.fetch_file_content("acme", "demo", "a.txt")

        assert first == second == third == "hello"
        assert source.content_calls == ["a.txt"]

    @pytest.mark.anyio
    async def test_absent_results_are_cached(self, fake_source):
        source = fake_source([], {})
        cache = CachedContentSource(source)
        assert await cache.fetch_file_content("acme", "demo", "nope") is None
        assert await cache.fetch_file_content("acme", "demo", "nope") is None
        assert source.content_calls == ["nope"]
