"""Shared FastAPI dependencies."""

from __future__ import annotations

from typing import AsyncIterator

import httpx
from fastapi import Depends

from isswatch.config import Settings, get_settings


async def get_http_client(
    settings: Settings = Depends(get_settings),
) -> AsyncIterator[httpx.AsyncClient]:
    """One outbound client per request, closed when the response is done."""
    async with httpx.AsyncClient(timeout=settings.http_timeout, follow_redirects=True) as client:
        yield client
