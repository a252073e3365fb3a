"""GET /n2yo/{path}: allowlisted relay to the N2YO REST API.

The browser-facing side never sees the API key: it is appended here, after the
caller's own query parameters, so a caller-supplied ``apiKey`` cannot win.

Example:
    GET /n2yo/satellite/positions/25544/22.28552/114.15769/0/60
"""

from __future__ import annotations

import json
import logging

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from isswatch.config import Settings, get_settings
from isswatch.deps import get_http_client
from isswatch.models import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["relay"])

# Only these N2YO endpoints are reachable through the relay
ALLOWED_PREFIXES = (
    "satellite/positions",
    "satellite/above",
    "satellite/visualpasses",
    "satellite/info",
    "satellite/risetimes",
)


def is_allowed(path: str) -> bool:
    # Dot segments would be resolved by the URL builder and escape the prefix
    if "\\" in path or any(segment in (".", "..") for segment in path.split("/")):
        return False
    return any(path.startswith(prefix) for prefix in ALLOWED_PREFIXES)


def build_upstream_params(
    query: list[tuple[str, str]], api_key: str | None
) -> list[tuple[str, str]]:
    """Caller params in their original order, then the server key."""
    params = list(query)
    if api_key:
        params.append(("apiKey", api_key))
    return params


def _redact(url: httpx.URL) -> str:
    if "apiKey" in url.params:
        url = url.copy_set_param("apiKey", "***")
    return str(url)


def _reject_constant(name: str) -> None:
    # NaN / Infinity are not JSON; JSONResponse would refuse to render them
    raise ValueError(f"non-standard JSON constant {name}")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(ErrorResponse(error=message).model_dump(), status_code=status_code)


@router.get("/n2yo/{path:path}")
async def relay_n2yo(
    path: str,
    request: Request,
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> Response:
    if not path:
        return _error(400, "Missing path")
    if not is_allowed(path):
        logger.warning("Rejected relay path %r", path)
        return _error(403, "Endpoint not allowed by proxy")

    try:
        params = build_upstream_params(
            request.query_params.multi_items(), settings.n2yo_api_key
        )
        url = httpx.URL(f"{settings.n2yo_base_url.rstrip('/')}/{path}", params=params)
        logger.info("Proxying to N2YO: %s", _redact(url))

        upstream = await client.get(url)
        text = upstream.text

        # Forward status and body; re-serialise as JSON when it parses
        try:
            body = json.loads(text, parse_constant=_reject_constant)
        except ValueError:
            return PlainTextResponse(text, status_code=upstream.status_code)
        return JSONResponse(body, status_code=upstream.status_code)
    except Exception:
        logger.exception("Proxy error for path %s", path)
        return _error(500, "Proxy server error")
