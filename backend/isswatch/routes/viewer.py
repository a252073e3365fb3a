"""Viewer endpoints.

GET /           HTML page: location form, output panel and the ISS map
GET /api/track  same chain, JSON TrackingReport instead of a page
"""

from __future__ import annotations

import html
import logging
import math

import folium
import httpx
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import HTMLResponse

from isswatch.config import Settings, get_settings
from isswatch.deps import get_http_client
from isswatch.geocoding import NominatimClient
from isswatch.map_view import MapView
from isswatch.models import TrackingReport
from isswatch.n2yo import RelayClient
from isswatch.tracker import IssTracker

logger = logging.getLogger(__name__)

router = APIRouter()

MAP_HEIGHT = "70%"
FORM_HEIGHT = "30%"

_FORM_TEMPLATE = """
<form method="get" action="/" style="padding:8px;font-family:sans-serif;">
  <input type="text" name="address" placeholder="Address" value="{address}" size="40">
  <button type="submit" name="action" value="geocode">Convert address &amp; find ISS</button>
  <br>
  <label>Latitude <input type="text" name="lat" value="{lat}"></label>
  <label>Longitude <input type="text" name="lon" value="{lon}"></label>
  <button type="submit" name="action" value="track">Where is the ISS?</button>
</form>
<div id="output" style="padding:8px;font-family:sans-serif;">{output}</div>
"""


def parse_coordinate(raw: str | None, default: float, limit: float) -> float | None:
    """Form field to degrees: missing -> default, unparseable or out of range -> None."""
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        return None
    if not math.isfinite(value) or abs(value) > limit:
        return None
    return value


def build_tracker(
    client: httpx.AsyncClient, settings: Settings, lat: float, lon: float
) -> IssTracker:
    return IssTracker(
        relay=RelayClient(client, settings),
        geocoder=NominatimClient(client, settings),
        view=MapView(lat, lon, height=MAP_HEIGHT),
    )


def render_page(tracker: IssTracker, address: str, lat: float, lon: float) -> str:
    m = tracker.view.render()
    form = _FORM_TEMPLATE.format(
        address=html.escape(address, quote=True),
        lat=lat,
        lon=lon,
        output=tracker.output.html(),
    )
    root = m.get_root()
    root.header.add_child(folium.Element("<title>ISS Watch</title>"))
    # Html inserts the form as data; Element would parse it as a template
    root.html.add_child(folium.Html(form, script=True, width="100%", height=FORM_HEIGHT))
    return root.render()


@router.get("/", response_class=HTMLResponse)
async def viewer_page(
    address: str = Query(default=""),
    lat: str | None = Query(default=None),
    lon: str | None = Query(default=None),
    action: str | None = Query(default=None, description="geocode or track"),
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    # Free-text form fields: bad input becomes an output line, not a 422
    invalid = []
    parsed_lat = parse_coordinate(lat, settings.default_lat, 90.0)
    parsed_lon = parse_coordinate(lon, settings.default_lon, 180.0)
    if parsed_lat is None:
        invalid.append(f"Invalid latitude: {html.escape(repr(lat))}")
        parsed_lat = settings.default_lat
    if parsed_lon is None:
        invalid.append(f"Invalid longitude: {html.escape(repr(lon))}")
        parsed_lon = settings.default_lon
    lat, lon = parsed_lat, parsed_lon

    tracker = build_tracker(client, settings, lat, lon)
    if action:
        logger.info("Viewer action %s (address=%r, lat=%s, lon=%s)", action, address, lat, lon)

    if action == "geocode":
        report = await tracker.locate_address(address)
        if report.observer is not None:
            lat, lon = report.observer.latitude, report.observer.longitude
        else:
            for line in invalid:
                tracker.output.append(line)
    elif action == "track":
        if invalid:
            logger.info("Track skipped: %s", "; ".join(invalid))
            tracker.output.set("<br>".join(invalid))
        else:
            await tracker.track(lat, lon)

    return HTMLResponse(render_page(tracker, address, lat, lon))


@router.get("/api/track", response_model=TrackingReport)
async def track_api(
    address: str | None = Query(default=None),
    lat: float | None = Query(default=None),
    lon: float | None = Query(default=None),
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    if address:
        tracker = build_tracker(client, settings, settings.default_lat, settings.default_lon)
        return await tracker.locate_address(address)
    if lat is None or lon is None:
        raise HTTPException(status_code=400, detail="Provide an address or both lat and lon")

    tracker = build_tracker(client, settings, lat, lon)
    return await tracker.track(lat, lon)
