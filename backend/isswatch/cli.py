"""
ISS Watch command line.

Run as:
    isswatch serve [--host HOST] [--port PORT]
    isswatch track --address "Hong Kong" [--output iss_map.html] [--open]
    isswatch track --lat 22.28 --lon 114.16

Environment variables (or .env):
    N2YO_API_KEY          key appended by the relay (serve)
    PORT                  relay port, default 3000
    ISSWATCH_PROXY_BASE   relay used by `track`, default http://localhost:3000
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import webbrowser
from pathlib import Path

import httpx

from isswatch.config import Settings, get_settings
from isswatch.geocoding import NominatimClient
from isswatch.map_view import MapView
from isswatch.models import TrackingReport
from isswatch.n2yo import RelayClient
from isswatch.tracker import IssTracker

log = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="isswatch", description=__doc__.split("\n")[1])
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="run the relay and viewer HTTP service")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=None, help="defaults to $PORT")

    track = sub.add_parser("track", help="locate the ISS once and write a map")
    track.add_argument("--address", help="free-text address to geocode")
    track.add_argument("--lat", type=float)
    track.add_argument("--lon", type=float)
    track.add_argument("--output", default="iss_map.html", help="map HTML file")
    track.add_argument("--open", action="store_true", help="open the map in a browser")

    args = parser.parse_args(argv)
    if args.command == "track" and not args.address and (args.lat is None or args.lon is None):
        parser.error("track needs --address or both --lat and --lon")
    return args


def open_http_client(settings: Settings) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=settings.http_timeout, follow_redirects=True)


async def run_track(args: argparse.Namespace, settings: Settings) -> tuple[TrackingReport, IssTracker]:
    lat = settings.default_lat if args.lat is None else args.lat
    lon = settings.default_lon if args.lon is None else args.lon

    async with open_http_client(settings) as client:
        tracker = IssTracker(
            relay=RelayClient(client, settings),
            geocoder=NominatimClient(client, settings),
            view=MapView(lat, lon),
        )
        if args.address:
            report = await tracker.locate_address(args.address)
        else:
            report = await tracker.track(lat, lon)
    return report, tracker


def _serve(args: argparse.Namespace, settings: Settings) -> None:
    import uvicorn

    uvicorn.run("isswatch.main:app", host=args.host, port=args.port or settings.port)


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        stream=sys.stderr,
    )
    args = _parse_args(argv)

    try:
        settings = get_settings()
    except ValueError as exc:
        log.error("Configuration error: %s", exc)
        sys.exit(1)

    if args.command == "serve":
        _serve(args, settings)
        return

    report, tracker = asyncio.run(run_track(args, settings))
    print(tracker.output.plain_text())

    output = Path(args.output)
    output.write_text(tracker.view.to_html(), encoding="utf-8")
    log.info("Map written to %s", output.resolve())
    if args.open:
        webbrowser.open(output.resolve().as_uri())

    if report.iss is None:
        sys.exit(1)


if __name__ == "__main__":
    main()
