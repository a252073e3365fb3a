"""Ground-track geometry for the map: antimeridian splitting and arrow placement.

Works on plain ``(lat, lon)`` pairs in degrees. The bearing is a flat
lat/lon-plane angle, good enough for orienting a glyph on a Web Mercator map.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

LatLon = tuple[float, float]

WRAP_THRESHOLD_DEG = 180.0
ARROW_COUNT = 5


@dataclass
class Arrow:
    index: int
    location: LatLon
    angle_deg: float


def is_wrap(a: LatLon, b: LatLon) -> bool:
    """True when the step a -> b jumps across the ±180° line."""
    return abs(b[1] - a[1]) > WRAP_THRESHOLD_DEG


def split_at_antimeridian(samples: Sequence[LatLon]) -> list[list[LatLon]]:
    """Partition samples into maximal runs with no longitude wrap inside."""
    segments: list[list[LatLon]] = []
    current: list[LatLon] = []

    for i, point in enumerate(samples):
        current.append(point)
        if i < len(samples) - 1 and is_wrap(point, samples[i + 1]):
            segments.append(current)
            current = []

    if current:
        segments.append(current)
    return segments


def drawable_segments(samples: Sequence[LatLon]) -> list[list[LatLon]]:
    # A lone point cannot be drawn as a line
    return [seg for seg in split_at_antimeridian(samples) if len(seg) > 1]


def bearing_degrees(a: LatLon, b: LatLon) -> float:
    return math.degrees(math.atan2(b[1] - a[1], b[0] - a[0]))


def arrow_indices(n: int, count: int = ARROW_COUNT) -> list[int]:
    interval = max(n // count, 1)
    return list(range(interval, n, interval))


def place_arrows(samples: Sequence[LatLon], count: int = ARROW_COUNT) -> list[Arrow]:
    """Direction arrows at evenly spaced samples, skipping wrap boundaries."""
    arrows: list[Arrow] = []
    for i in arrow_indices(len(samples), count):
        prev, cur = samples[i - 1], samples[i]
        if is_wrap(prev, cur):
            continue
        arrows.append(Arrow(index=i, location=cur, angle_deg=bearing_degrees(prev, cur)))
    return arrows
