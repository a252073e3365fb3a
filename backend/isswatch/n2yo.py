"""Client for the N2YO endpoints, reached through the relay service."""

from __future__ import annotations

import logging

import httpx

from isswatch.config import Settings
from isswatch.models import PositionsResponse, VisualPassesResponse

logger = logging.getLogger(__name__)

ISS_NORAD_ID = 25544

OBSERVER_ALT_M = 0          # sea level
TRAJECTORY_SECONDS = 5580   # ~one orbit (93 min)
PASS_DAYS = 10
MIN_VISIBILITY_SECONDS = 300


class RelayError(Exception):
    """Non-2xx answer from the relay (or from N2YO behind it)."""

    def __init__(self, status_code: int, body: str = ""):
        super().__init__(f"relay returned {status_code}")
        self.status_code = status_code
        self.body = body


class RelayClient:
    """Builds N2YO REST paths and fetches them via the relay's /n2yo/ prefix."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: Settings,
        norad_id: int = ISS_NORAD_ID,
    ):
        self._client = client
        self.base_url = settings.proxy_base.rstrip("/")
        self.norad_id = norad_id

    async def _get(self, path: str) -> httpx.Response:
        url = f"{self.base_url}/n2yo/{path}"
        logger.debug("GET %s", url)
        resp = await self._client.get(url)
        if not resp.is_success:
            raise RelayError(resp.status_code, resp.text)
        return resp

    async def positions(
        self, lat: float, lon: float, seconds: int = TRAJECTORY_SECONDS
    ) -> PositionsResponse:
        """Current position followed by one sample per second for ``seconds``."""
        resp = await self._get(
            f"satellite/positions/{self.norad_id}/{lat}/{lon}/{OBSERVER_ALT_M}/{seconds}"
        )
        return PositionsResponse.model_validate(resp.json())

    async def visual_passes(
        self,
        lat: float,
        lon: float,
        days: int = PASS_DAYS,
        min_visibility: int = MIN_VISIBILITY_SECONDS,
    ) -> VisualPassesResponse:
        resp = await self._get(
            f"satellite/visualpasses/{self.norad_id}/{lat}/{lon}"
            f"/{OBSERVER_ALT_M}/{days}/{min_visibility}"
        )
        return VisualPassesResponse.model_validate(resp.json())
