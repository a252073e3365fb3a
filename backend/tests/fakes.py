"""Canned upstream payloads and an httpx mock router shared by the tests."""

import time

import httpx

from isswatch.config import Settings

SETTINGS = Settings(n2yo_api_key="SECRET-KEY")


def positions_payload(track):
    now = int(time.time())
    return {
        "info": {"satname": "SPACE STATION", "satid": 25544, "transactionscount": 1},
        "positions": [
            {
                "satlatitude": lat,
                "satlongitude": lon,
                "sataltitude": 417.0,
                "azimuth": 10.0,
                "elevation": -40.0,
                "ra": 100.0,
                "dec": 5.0,
                "timestamp": now + i,
                "eclipsed": False,
            }
            for i, (lat, lon) in enumerate(track)
        ],
    }


def passes_payload(*passes):
    payload = {"info": {"satid": 25544, "satname": "SPACE STATION", "passescount": len(passes)}}
    if passes:
        payload["passes"] = [
            {"startUTC": start, "duration": duration, "maxEl": 40.0, "startAz": 250.0, "endAz": 80.0}
            for start, duration in passes
        ]
    return payload


class FakeUpstream:
    """Routes requests to canned responses by host and path prefix; records every request."""

    def __init__(self):
        self.routes = {}
        self.requests = []

    def on(self, host, path_prefix, status=200, json=None, text=None, error=None):
        self.routes[(host, path_prefix)] = (status, json, text, error)
        return self

    def handler(self, request):
        self.requests.append(request)
        for (host, prefix), (status, json, text, error) in self.routes.items():
            if request.url.host == host and request.url.path.startswith(prefix):
                if error is not None:
                    raise error
                if json is not None:
                    return httpx.Response(status, json=json)
                return httpx.Response(status, text=text or "")
        return httpx.Response(404, text="no fake route")

    def client(self):
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def paths(self, host):
        return [r.url.path for r in self.requests if r.url.host == host]
