"""Nominatim (OpenStreetMap) forward and reverse geocoding."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from isswatch.config import Settings
from isswatch.models import Coordinate

logger = logging.getLogger(__name__)

UNKNOWN_LOCATION = "an unknown location"

# Matched case-insensitively against display_name when the address has no country/ocean/sea
OCEAN_NAMES = (
    ("pacific", "the Pacific Ocean"),
    ("atlantic", "the Atlantic Ocean"),
    ("indian", "the Indian Ocean"),
    ("arctic", "the Arctic Ocean"),
    ("southern", "the Southern Ocean"),
)


def resolve_place_label(data: Any) -> str:
    """Pick one human-readable label from a Nominatim reverse lookup payload."""
    if not isinstance(data, dict) or not data.get("address"):
        return UNKNOWN_LOCATION

    address = data["address"]
    if not isinstance(address, dict):
        return UNKNOWN_LOCATION
    if address.get("country"):
        return address["country"]
    if address.get("ocean"):
        return f"the {address['ocean']}"
    if address.get("sea"):
        return f"the {address['sea']}"

    display_name = data.get("display_name")
    if display_name:
        lowered = display_name.lower()
        for keyword, label in OCEAN_NAMES:
            if keyword in lowered:
                return label
        return display_name.split(",")[0]

    return UNKNOWN_LOCATION


class NominatimClient:
    """Thin async wrapper over the Nominatim search and reverse endpoints."""

    def __init__(self, client: httpx.AsyncClient, settings: Settings):
        self._client = client
        self.base_url = settings.nominatim_base_url.rstrip("/")
        # Nominatim's usage policy rejects anonymous clients
        self._headers = {"User-Agent": settings.user_agent}

    async def geocode(self, address: str) -> Coordinate | None:
        """First search hit for a free-text address, or None."""
        resp = await self._client.get(
            f"{self.base_url}/search",
            params={"format": "json", "q": address},
            headers=self._headers,
        )
        resp.raise_for_status()
        data = resp.json()
        if not data:
            logger.info("No geocoding result for %r", address)
            return None
        first = data[0]
        return Coordinate(latitude=float(first["lat"]), longitude=float(first["lon"]))

    async def reverse_label(self, lat: float, lon: float) -> str:
        """Place label under a point; never raises."""
        try:
            resp = await self._client.get(
                f"{self.base_url}/reverse",
                params={"format": "json", "lat": lat, "lon": lon, "zoom": 3},
                headers=self._headers,
            )
            resp.raise_for_status()
            return resolve_place_label(resp.json())
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Reverse geocoding failed for (%s, %s): %s", lat, lon, exc)
            return UNKNOWN_LOCATION
