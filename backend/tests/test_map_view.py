"""
Tests for the map view controller and the viewer endpoints.

Run with:
    python -m pytest backend/tests/test_map_view.py -v
"""

import unittest

import folium
from fastapi.testclient import TestClient

from fakes import SETTINGS, FakeUpstream, passes_payload, positions_payload
from isswatch.config import get_settings
from isswatch.deps import get_http_client
from isswatch.main import app
from isswatch.map_view import VISIBILITY_RADIUS_M, MapView

TRACK = [(10.0, 170.0), (11.0, 175.0), (12.0, -178.0), (13.0, -172.0), (14.0, -166.0)]


def _children_of(m, cls):
    return [child for child in m._children.values() if isinstance(child, cls)]


class TestMapView(unittest.TestCase):

    def test_overlays_are_replaced_not_accumulated(self):
        view = MapView(0.0, 0.0)
        first_user = view.user_marker

        view.set_user_location(1.0, 1.0)
        view.show_satellite(10.0, 20.0)
        first_circle = view.visibility_circle
        view.show_satellite(11.0, 21.0)
        view.draw_path(TRACK)
        view.draw_path(TRACK[:2])

        self.assertIsNot(view.user_marker, first_user)
        self.assertIsNot(view.visibility_circle, first_circle)
        self.assertEqual(view.satellite_marker.location, [11.0, 21.0])
        self.assertEqual(len(view.path_lines), 1)
        self.assertEqual(view.arrows[0].location, [11.0, 175.0])

        m = view.render()
        self.assertEqual(len(_children_of(m, folium.PolyLine)), 1)
        self.assertEqual(len(_children_of(m, folium.Circle)), 1)
        # user, ISS and one arrow
        markers = [c for c in m._children.values() if type(c) is folium.Marker]
        self.assertEqual(len(markers), 3)

    def test_rendered_html(self):
        view = MapView(22.28, 114.15)
        view.show_satellite(10.0, 170.0)
        view.draw_path(TRACK)
        view.fit_bounds((22.28, 114.15), (10.0, 170.0))

        page = view.to_html()

        self.assertIn("basemaps.cartocdn.com/rastertiles/voyager", page)
        self.assertIn("fitBounds", page)
        self.assertIn(str(VISIBILITY_RADIUS_M), page)
        self.assertIn("#ff0000", page)
        self.assertIn("rotate(", page)


class TestViewerRoutes(unittest.TestCase):

    def setUp(self):
        self.upstream = FakeUpstream()

        async def fake_client():
            async with self.upstream.client() as client:
                yield client

        app.dependency_overrides[get_settings] = lambda: SETTINGS
        app.dependency_overrides[get_http_client] = fake_client
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def _serve_iss(self):
        self.upstream.on("localhost", "/n2yo/satellite/positions", json=positions_payload(TRACK))
        self.upstream.on("localhost", "/n2yo/satellite/visualpasses", json=passes_payload())
        self.upstream.on("nominatim.openstreetmap.org", "/reverse",
                         json={"address": {"ocean": "Pacific Ocean"}})

    def test_page_without_action_makes_no_requests(self):
        resp = self.client.get("/")

        self.assertEqual(resp.status_code, 200)
        self.assertIn('name="action" value="track"', resp.text)
        self.assertIn(f'value="{SETTINGS.default_lat}"', resp.text)
        self.assertEqual(self.upstream.requests, [])

    def test_track_action(self):
        self._serve_iss()

        resp = self.client.get("/", params={"action": "track", "lat": 1.0, "lon": 2.0})

        self.assertEqual(resp.status_code, 200)
        self.assertIn("Right now, the ISS is passing over <b>the Pacific Ocean</b>.", resp.text)
        self.assertIn("No visible ISS passes in the next 10 days.", resp.text)

    def test_geocode_action_updates_form(self):
        self._serve_iss()
        self.upstream.on("nominatim.openstreetmap.org", "/search", json=[{"lat": "51.5", "lon": "-0.12"}])

        resp = self.client.get("/", params={"action": "geocode", "address": "London <UK>"})

        self.assertIn('value="51.5"', resp.text)
        self.assertIn('value="London &lt;UK&gt;"', resp.text)

    def test_cleared_latitude_is_reported_in_the_page(self):
        for action in ("track", "geocode"):
            resp = self.client.get("/", params={"action": action, "address": "", "lat": "", "lon": "2"})

            self.assertEqual(resp.status_code, 200, action)
            self.assertIn("Invalid latitude", resp.text)
            self.assertNotIn("Invalid longitude", resp.text)
            self.assertIn(f'value="{SETTINGS.default_lat}"', resp.text)
        self.assertEqual(self.upstream.requests, [])

    def test_non_finite_longitude_is_reported(self):
        resp = self.client.get("/", params={"action": "track", "lat": "1", "lon": "nan"})

        self.assertEqual(resp.status_code, 200)
        self.assertIn("Invalid longitude", resp.text)
        self.assertEqual(self.upstream.requests, [])

    def test_track_api(self):
        self._serve_iss()

        resp = self.client.get("/api/track", params={"lat": 1.0, "lon": 2.0})

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["iss"], {"latitude": 10.0, "longitude": 170.0})
        self.assertEqual(body["place"], "the Pacific Ocean")
        self.assertIsNone(body["next_pass"])

    def test_track_api_needs_a_location(self):
        resp = self.client.get("/api/track", params={"lat": 1.0})
        self.assertEqual(resp.status_code, 400)


if __name__ == "__main__":
    unittest.main()
