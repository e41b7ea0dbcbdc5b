"""API-endpoint extractor over sampled snippets."""

from __future__ import annotations

import re
from collections.abc import Iterator

import structlog

from repoprofiler.engines.detectors.context import DetectionContext
from repoprofiler.models import ApiEndpoint, ApiParameter, CodeSnippet

log = structlog.get_logger("repoprofiler.engine")

MAX_ENDPOINTS = 10

_VERBS = "get|post|put|delete|patch"

# app.get('/users/:id', ...)  /  @router.post("/items/{item_id}")
ROUTER_CALL_RE = re.compile(
    r"(@?)\b(?:app|router|server|api|route|routes|blueprint|bp)"
    rf"\.({_VERBS})\s*\(\s*['\"`](/[^'\"`]*)['\"`]"
)

# app router: app/api/users/[id]/route.ts -> /api/users/[id]
APP_ROUTE_FILE_RE = re.compile(r"(?:^|/)(api(?:/.*)?)/route\.(?:js|ts|jsx|tsx)$")
# pages router: pages/api/users/[id].ts -> /api/users/[id]
PAGES_ROUTE_FILE_RE = re.compile(r"(?:^|/)pages/(api(?:/.*)?)\.(?:js|ts|jsx|tsx)$")

_EXPORTED_HANDLER_RE = re.compile(
    rf"export\s+(?:(?:async\s+)?function\s+|const\s+)({_VERBS})\b"
)
_REQ_METHOD_RE = re.compile(rf"req\.method\s*===?\s*['\"]({_VERBS})['\"]")

ROUTER_RESPONSES = ("200 OK", "400 Bad Request", "500 Internal Server Error")
DECORATOR_RESPONSES = ("200 OK", "422 Validation Error")
ROUTE_FILE_RESPONSES = ("200 OK", "400 Bad Request")

# flask-style <int:id> converters
_CONVERTER_TYPES = {"int": "integer", "float": "number"}


def extract_parameters(path: str) -> tuple[ApiParameter, ...]:
    """Path parameters from ``[name]``, ``:name``, ``{name}`` and ``<conv:name>`` segments.

    A trailing ``?`` or a doubled ``[[...]]`` marks the parameter optional.
    """
    params: list[ApiParameter] = []
    for segment in path.split("/"):
        if not segment:
            continue
        if segment.startswith("[") and segment.endswith("]"):
            optional = segment.startswith("[[")
            name = segment.strip("[]").lstrip(".")
            params.append(ApiParameter(name=name, required=not optional))
        elif segment.startswith(":"):
            name = segment[1:]
            params.append(ApiParameter(name=name.rstrip("?"), required=not name.endswith("?")))
        elif segment.startswith("{") and segment.endswith("}"):
            name = segment[1:-1].split(":", 1)[0]
            params.append(ApiParameter(name=name.rstrip("?"), required=not name.endswith("?")))
        elif segment.startswith("<") and segment.endswith(">"):
            converter, _, name = segment[1:-1].rpartition(":")
            params.append(ApiParameter(name=name, type=_CONVERTER_TYPES.get(converter, "string")))
    return tuple(params)


def _route_calls(content: str) -> Iterator[ApiEndpoint]:
    for m in ROUTER_CALL_RE.finditer(content):
        decorated, verb, path = m.groups()
        method = verb.upper()
        yield ApiEndpoint(
            path=path,
            method=method,
            description=f"{method} endpoint",
            parameters=extract_parameters(path),
            responses=DECORATOR_RESPONSES if decorated else ROUTER_RESPONSES,
        )


def _route_file(snippet: CodeSnippet, content: str) -> Iterator[ApiEndpoint]:
    file_name = snippet.file_name.lower()

    m = APP_ROUTE_FILE_RE.search(file_name)
    if m:
        verbs = _EXPORTED_HANDLER_RE.findall(content)
    else:
        m = PAGES_ROUTE_FILE_RE.search(file_name)
        if not m or "export default" not in content:
            return
        verbs = _REQ_METHOD_RE.findall(content) or ["get"]

    path = "/" + m.group(1)
    if path.endswith("/index"):
        path = path[: -len("/index")]
    for verb in dict.fromkeys(verbs):
        method = verb.upper()
        yield ApiEndpoint(
            path=path,
            method=method,
            description=f"{method} API endpoint",
            parameters=extract_parameters(path),
            responses=ROUTE_FILE_RESPONSES,
        )


def dedupe_endpoints(endpoints: list[ApiEndpoint], limit: int = MAX_ENDPOINTS) -> list[ApiEndpoint]:
    """Keep the first endpoint per (path, method), at most *limit* of them."""
    seen: set[tuple[str, str]] = set()
    result: list[ApiEndpoint] = []
    for endpoint in endpoints:
        key = (endpoint.path, endpoint.method)
        if key in seen:
            continue
        seen.add(key)
        result.append(endpoint)
        if len(result) >= limit:
            break
    return result


async def extract_api_endpoints(ctx: DetectionContext) -> tuple[ApiEndpoint, ...]:
    found: list[ApiEndpoint] = []
    for snippet in ctx.snippets:
        content = snippet.content.lower()
        found.extend(_route_calls(content))
        found.extend(_route_file(snippet, content))
    endpoints = dedupe_endpoints(found)
    log.debug("endpoints.extracted", repo=ctx.slug, found=len(found), kept=len(endpoints))
    return tuple(endpoints)
