"""Map view controller: owns the folium map settings and the live overlays.

Each setter replaces the overlay it manages (old one dropped, new one kept);
``render()`` assembles a fresh Leaflet map from whatever is current.
"""

from __future__ import annotations

import logging
from typing import Sequence

import folium

from isswatch.ground_track import LatLon, drawable_segments, place_arrows

logger = logging.getLogger(__name__)

TILES_URL = "https://{s}.basemaps.cartocdn.com/rastertiles/voyager/{z}/{x}/{y}{r}.png"
TILES_ATTRIBUTION = (
    '&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> contributors '
    '&copy; <a href="https://carto.com/attributions">CARTO</a>'
)

VISIBILITY_RADIUS_M = 2_200_000  # ISS is visible within ~2200 km
PATH_COLOR = "#ff0000"
CIRCLE_COLOR = "#ffe066"
FIT_PADDING_PX = 50


def _emoji_icon(glyph: str) -> folium.DivIcon:
    return folium.DivIcon(
        html=glyph,
        class_name="custom-icon",
        icon_size=(30, 30),
        icon_anchor=(15, 15),
    )


def _arrow_icon(angle_deg: float) -> folium.DivIcon:
    return folium.DivIcon(
        html=(
            f'<div style="transform: rotate({angle_deg}deg); font-size: 20px; '
            f'line-height: 1; color: {PATH_COLOR};">&#9654;</div>'
        ),
        class_name="arrow-icon",
        icon_size=(20, 20),
        icon_anchor=(10, 10),
    )


class MapView:
    """Holds the map centre and every overlay currently shown on it."""

    def __init__(self, lat: float, lon: float, zoom: int = 2, height: str = "100%"):
        self.center: LatLon = (lat, lon)
        self.zoom = zoom
        self.height = height
        self.user_marker: folium.Marker | None = None
        self.satellite_marker: folium.Marker | None = None
        self.visibility_circle: folium.Circle | None = None
        self.path_lines: list[folium.PolyLine] = []
        self.arrows: list[folium.Marker] = []
        self.bounds: list[LatLon] | None = None
        self.set_user_location(lat, lon)

    def set_user_location(self, lat: float, lon: float) -> None:
        self.user_marker = folium.Marker(
            location=[lat, lon], icon=_emoji_icon("🏠"), tooltip="Your Location"
        )

    def show_satellite(self, lat: float, lon: float) -> None:
        self.satellite_marker = folium.Marker(
            location=[lat, lon], icon=_emoji_icon("🛰️"), tooltip="ISS"
        )
        self.visibility_circle = folium.Circle(
            location=[lat, lon],
            radius=VISIBILITY_RADIUS_M,
            color=CIRCLE_COLOR,
            fill=True,
            fill_color=CIRCLE_COLOR,
            fill_opacity=0.3,
            weight=2,
            dash_array="5, 10",
        )

    def draw_path(self, samples: Sequence[LatLon]) -> None:
        """Replace the trajectory with one polyline per wrap-free segment plus arrows."""
        self.path_lines = [
            folium.PolyLine(locations=segment, color=PATH_COLOR, weight=3, opacity=0.7)
            for segment in drawable_segments(samples)
        ]
        self.arrows = [
            folium.Marker(location=list(arrow.location), icon=_arrow_icon(arrow.angle_deg))
            for arrow in place_arrows(samples)
        ]
        logger.debug("Path: %d segments, %d arrows", len(self.path_lines), len(self.arrows))

    def fit_bounds(self, *points: LatLon) -> None:
        self.bounds = list(points)

    def overlays(self) -> list[folium.MacroElement]:
        layers = [self.user_marker, self.satellite_marker, self.visibility_circle]
        return [layer for layer in layers if layer is not None] + self.path_lines + self.arrows

    def render(self) -> folium.Map:
        m = folium.Map(
            location=list(self.center),
            zoom_start=self.zoom,
            tiles=None,
            min_zoom=2,
            max_bounds=True,
            max_bounds_viscosity=1.0,
            height=self.height,
        )
        folium.TileLayer(
            tiles=TILES_URL,
            attr=TILES_ATTRIBUTION,
            max_zoom=18,
            no_wrap=False,
        ).add_to(m)
        for layer in self.overlays():
            layer.add_to(m)
        if self.bounds:
            m.fit_bounds(
                [list(p) for p in self.bounds],
                padding=(FIT_PADDING_PX, FIT_PADDING_PX),
            )
        return m

    def to_html(self) -> str:
        return self.render().get_root().render()
