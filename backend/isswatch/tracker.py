"""ISS tracking chain: geocode -> relay positions -> reverse geocode -> render -> passes.

Every step is awaited in order. Failures never propagate out of a chain: they
end up as a line in the output panel, which is what the user sees.
"""

from __future__ import annotations

import html
import logging
from datetime import datetime, tzinfo

from isswatch.geocoding import NominatimClient
from isswatch.map_view import MapView
from isswatch.models import Coordinate, TrackingReport
from isswatch.n2yo import PASS_DAYS, RelayClient, RelayError
from isswatch.passes import next_pass, no_passes_message, summarize_pass

logger = logging.getLogger(__name__)


class OutputPanel:
    """Ordered HTML fragments shown under the map."""

    def __init__(self):
        self.lines: list[str] = []

    def set(self, text: str) -> None:
        self.lines = [text]

    def append(self, text: str) -> None:
        self.lines.append(text)

    def html(self) -> str:
        return "<br>".join(self.lines)

    def plain_text(self) -> str:
        text = "\n".join(self.lines).replace("<br>", "\n")
        for tag in ("<b>", "</b>", "<pre>", "</pre>"):
            text = text.replace(tag, "")
        return html.unescape(text)


class IssTracker:
    """Runs user actions against the relay and geocoder and updates the view."""

    def __init__(
        self,
        relay: RelayClient,
        geocoder: NominatimClient,
        view: MapView,
        tz: tzinfo | None = None,
    ):
        self.relay = relay
        self.geocoder = geocoder
        self.view = view
        self.output = OutputPanel()
        self.tz = tz
        self.report = TrackingReport()

    def _finish(self) -> TrackingReport:
        self.report.output = list(self.output.lines)
        return self.report

    async def locate_address(self, address: str) -> TrackingReport:
        """Geocode an address, move the observer there and track the ISS."""
        address = address.strip()
        if not address:
            return self._finish()

        try:
            loc = await self.geocoder.geocode(address)
        except Exception as exc:
            logger.warning("Geocoding failed for %r: %s", address, exc)
            self.output.set(f"Error: {html.escape(str(exc))}")
            return self._finish()

        if loc is None:
            self.output.set("Address not found.")
            return self._finish()

        self.view.set_user_location(loc.latitude, loc.longitude)
        self.output.set(
            f"Converted address to: Latitude {loc.latitude}, Longitude {loc.longitude}"
        )
        return await self.track(loc.latitude, loc.longitude)

    async def track(self, lat: float, lon: float) -> TrackingReport:
        """Show the ISS now, its next orbit and the next visible pass from (lat, lon)."""
        self.report.observer = Coordinate(latitude=lat, longitude=lon)
        self.view.set_user_location(lat, lon)

        try:
            data = await self.relay.positions(lat, lon)
            if not data.positions:
                raise ValueError("no positions in relay response")

            current = data.positions[0]
            iss_lat, iss_lon = current.as_pair()
            label = await self.geocoder.reverse_label(iss_lat, iss_lon)
            self.report.iss = Coordinate(latitude=iss_lat, longitude=iss_lon)
            self.report.place = label

            self.output.set(
                f"ISS Position: Latitude {iss_lat}, Longitude {iss_lon}<br>"
                f"Right now, the ISS is passing over <b>{html.escape(label)}</b>."
            )
            self.view.show_satellite(iss_lat, iss_lon)

            if len(data.positions) > 1:
                self.view.draw_path([p.as_pair() for p in data.positions])

            await self.append_visual_pass(lat, lon)

            self.view.fit_bounds((lat, lon), (iss_lat, iss_lon))
        except RelayError as exc:
            logger.warning("Position lookup failed: %s", exc)
            self.output.set(f"Error: {exc.status_code}")
        except Exception as exc:
            logger.exception("ISS tracking failed")
            self.output.set(f"Error: {html.escape(str(exc))}")

        return self._finish()

    async def append_visual_pass(
        self, lat: float, lon: float, now: datetime | None = None
    ) -> None:
        """Append the next-visible-pass sentence (or why there is none)."""
        try:
            data = await self.relay.visual_passes(lat, lon)
        except RelayError as exc:
            logger.warning("Visual pass lookup failed: %s", exc)
            self.output.append(f"Error fetching visual pass info: {exc.status_code}")
            self.output.append(f"<pre>{html.escape(exc.body)}</pre>")
            return
        except Exception as exc:
            logger.exception("Visual pass lookup failed")
            self.output.append(f"Error: {html.escape(str(exc))}")
            return

        upcoming = next_pass(data.passes)
        if upcoming is None:
            self.output.append(no_passes_message(PASS_DAYS))
            return

        summary = summarize_pass(upcoming, now=now, tz=self.tz)
        self.report.next_pass = summary
        self.output.append(summary.text)
