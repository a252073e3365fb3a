"""Next-visible-pass summary text."""

from __future__ import annotations

import math
from datetime import datetime, timezone, tzinfo
from typing import Sequence

from isswatch.models import PassSummary, VisiblePass

SECONDS_PER_DAY = 86400


def next_pass(passes: Sequence[VisiblePass]) -> VisiblePass | None:
    # N2YO returns passes ordered by start time
    return passes[0] if passes else None


def days_until(start: datetime, now: datetime) -> int:
    """Whole days between now and start, truncated towards -inf."""
    return math.floor((start - now).total_seconds() / SECONDS_PER_DAY)


def describe_when(days: int) -> str:
    if days == 0:
        return "today"
    if days == 1:
        return "tomorrow"
    return f"in {days} days"


def duration_minutes(seconds: float) -> int:
    """Round to the nearest minute, halves up (330 s -> 6)."""
    return math.floor(seconds / 60 + 0.5)


def no_passes_message(days: int) -> str:
    return f"No visible ISS passes in the next {days} days."


def summarize_pass(
    visible_pass: VisiblePass,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> PassSummary:
    """Build the "next visible" sentence for one pass.

    ``tz`` is the observer's display zone; ``None`` means the host's local zone.
    """
    now = now or datetime.now(timezone.utc)
    start = datetime.fromtimestamp(visible_pass.startUTC, tz=timezone.utc)
    local_start = start.astimezone(tz)

    when = describe_when(days_until(start, now))
    minutes = duration_minutes(visible_pass.duration)
    date_str = local_start.strftime("%Y-%m-%d")
    time_str = local_start.strftime("%H:%M:%S")

    text = (
        f"The ISS will next be visible at your location <b>{when}</b> ({date_str}) "
        f"at <b>{time_str}</b> local time for <b>{minutes}</b> minutes. "
        "Keep an eye out for it!"
    )
    return PassSummary(start_utc=visible_pass.startUTC, duration_min=minutes, when=when, text=text)
