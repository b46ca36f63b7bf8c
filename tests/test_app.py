"""Tests for the HTTP endpoints."""
import httpx
import pytest
from fastapi.testclient import TestClient

from meteor_api import app as app_module
from meteor_api import config


@pytest.fixture
def client(monkeypatch):
    # keep a developer's local .env out of the tests
    monkeypatch.setattr(config, "load_dotenv", lambda *a, **k: False)
    for name in ("GEONAMES_USERNAME", "GEONAMES_BASE_URL", "GEONAMES_TIMEOUT_S", "RING_STEPS"):
        monkeypatch.delenv(name, raising=False)
    return TestClient(app_module.app)


class _FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            request = httpx.Request("GET", "http://api.geonames.org/oceanJSON")
            raise httpx.HTTPStatusError("boom", request=request,
                                        response=httpx.Response(self.status_code, request=request))

    def json(self):
        return self._payload


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_presets(client):
    body = client.get("/presets").json()
    assert body["ranges"]["velocity_kms"] == {"min": 12.0, "avg": 20.0, "max": 72.0}
    assert body["default_state"]["diameter_m"] == 100.0
    assert [m["id"] for m in body["meteors"]] == ["chicxulub", "tunguska", "chelyabinsk", "barringer"]


# ── /impact/summary ─────────────────────────────────────────────────


def test_summary_converts_kms_to_mps(client):
    r = client.post("/impact/summary", json={"diameter_m": 20, "velocity_kms": 19, "angle_deg": 18})
    assert r.status_code == 200
    body = r.json()
    assert body["inputs"]["velocity_mps"] == 19000.0
    assert body["inputs"]["density_kgpm3"] == 3000.0
    assert body["results"]["climate_impact"] == "Negligible global climate impact"
    assert body["results"]["acid_rain_severity"] == "Localized acid rain possible"
    assert body["display"]["crater_diameter"].endswith(" km")
    assert "overlay" not in body


def test_summary_with_location_adds_overlay(client):
    r = client.post("/impact/summary", json={
        "diameter_m": 500, "velocity_kms": 20, "density_kgpm3": 3000, "angle_deg": 45,
        "impact_location": {"lat": 47.5, "lng": 19.0}, "ring_steps": 16,
    })
    assert r.status_code == 200
    overlay = r.json()["overlay"]
    features = overlay["features"]
    assert len(features) == 5
    radii = [f["properties"]["radius_km"] for f in features]
    assert radii == sorted(radii, reverse=True)
    assert len(features[0]["geometry"]["coordinates"][0]) == 17


def test_summary_ring_steps_default_from_env(client, monkeypatch):
    monkeypatch.setenv("RING_STEPS", "32")
    r = client.post("/impact/summary", json={
        "diameter_m": 100, "velocity_kms": 20, "impact_location": {"lat": 0, "lng": 0},
    })
    assert len(r.json()["overlay"]["features"][0]["geometry"]["coordinates"][0]) == 33


def test_summary_bad_ring_steps_env_is_500(client, monkeypatch):
    monkeypatch.setenv("RING_STEPS", "lots")
    r = client.post("/impact/summary", json={
        "diameter_m": 100, "velocity_kms": 20, "impact_location": {"lat": 0, "lng": 0},
    })
    assert r.status_code == 500
    assert "RING_STEPS" in r.json()["detail"]


@pytest.mark.parametrize("steps", ["2", "7", "513", "10000000"])
def test_summary_out_of_range_ring_steps_env_is_500(client, monkeypatch, steps):
    monkeypatch.setenv("RING_STEPS", steps)
    r = client.post("/impact/summary", json={
        "diameter_m": 100, "velocity_kms": 20, "impact_location": {"lat": 0, "lng": 0},
    })
    assert r.status_code == 500
    assert "between 8 and 512" in r.json()["detail"]


def test_rings_out_of_range_ring_steps_env_is_500(client, monkeypatch):
    monkeypatch.setenv("RING_STEPS", "2")
    r = client.post("/impact/rings", json={"center": {"lat": 0, "lng": 0},
                                           "rings": [{"id": "a", "radius_km": 5}]})
    assert r.status_code == 500


def test_summary_display_rounds_to_two_decimals(client):
    display = client.post("/impact/summary", json={"diameter_m": 100, "velocity_kms": 20}).json()["display"]
    for key in ("crater_diameter", "severe_damage_radius", "noise_damage_radius"):
        number = display[key].removesuffix(" km")
        assert len(number.split(".")[1]) == 2, key
    assert display["ozone_depletion"].endswith(" %")


@pytest.mark.parametrize("payload", [
    {"diameter_m": 0, "velocity_kms": 20},
    {"diameter_m": 100, "velocity_kms": -1},
    {"diameter_m": 100, "velocity_kms": 20, "angle_deg": 95},
    {"diameter_m": 100, "velocity_kms": 20, "impact_location": {"lat": 91, "lng": 0}},
    {"velocity_kms": 20},
])
def test_summary_validation(client, payload):
    assert client.post("/impact/summary", json=payload).status_code == 422


# ── /impact/presets/{id} ────────────────────────────────────────────


def test_preset_summary(client):
    body = client.get("/impact/presets/chicxulub").json()
    assert body["meteor"]["name"] == "Chicxulub Impactor"
    assert body["inputs"]["velocity_mps"] == 20000.0
    assert body["results"]["climate_impact"].startswith("Global impact winter")


def test_preset_with_location(client):
    body = client.get("/impact/presets/tunguska", params={"lat": 60.9, "lng": 101.9}).json()
    assert body["overlay"]["type"] == "FeatureCollection"


def test_preset_unknown(client):
    assert client.get("/impact/presets/vesta").status_code == 404


def test_preset_half_location(client):
    r = client.get("/impact/presets/tunguska", params={"lat": 60.9})
    assert r.status_code == 422
    detail = r.json()["detail"]
    assert isinstance(detail, list)
    assert detail[0]["loc"][0] == "query"
    assert "lat and lng must be given together" in detail[0]["msg"]


def test_preset_422_matches_framework_validation_shape(client):
    framework = client.get("/impact/presets/tunguska", params={"lat": 95, "lng": 0}).json()["detail"]
    ours = client.get("/impact/presets/tunguska", params={"lng": 0}).json()["detail"]
    assert set(ours[0]) >= {"type", "loc", "msg"}
    assert set(framework[0]) >= {"type", "loc", "msg"}


# ── /impact/rings ───────────────────────────────────────────────────


def test_rings_sorted_and_closed(client):
    r = client.post("/impact/rings", json={
        "center": {"lat": 10.0, "lng": 20.0},
        "rings": [{"id": "a", "radius_km": 10}, {"id": "b", "radius_km": 50, "color": "#f00"},
                  {"id": "c", "radius_km": 25, "label": "C"}],
        "steps": 64,
    })
    assert r.status_code == 200
    features = r.json()["features"]
    assert [f["properties"]["id"] for f in features] == ["b", "c", "a"]
    coords = features[0]["geometry"]["coordinates"][0]
    assert len(coords) == 65
    assert coords[0] == pytest.approx(coords[-1])


def test_rings_empty(client):
    r = client.post("/impact/rings", json={"center": {"lat": 0, "lng": 0}, "rings": []})
    assert r.json() == {"type": "FeatureCollection", "features": []}


def test_rings_reject_negative_radius(client):
    r = client.post("/impact/rings", json={"center": {"lat": 0, "lng": 0},
                                           "rings": [{"id": "a", "radius_km": -1}]})
    assert r.status_code == 422


# ── /isOcean ────────────────────────────────────────────────────────


def test_is_ocean_requires_username(client):
    r = client.get("/isOcean", params={"lat": 0, "lon": 0})
    assert r.status_code == 500


def test_is_ocean_true(client, monkeypatch):
    monkeypatch.setenv("GEONAMES_USERNAME", "demo")
    calls = []

    def fake_get(url, params=None, timeout=None):
        calls.append((url, params, timeout))
        return _FakeResponse({"ocean": {"name": "North Atlantic Ocean", "distance": "0"}})

    monkeypatch.setattr(app_module.httpx, "get", fake_get)
    r = client.get("/isOcean", params={"lat": 30, "lon": -40})
    assert r.json() is True
    url, params, timeout = calls[0]
    assert url == "http://api.geonames.org/oceanJSON"
    assert params == {"lat": 30.0, "lng": -40.0, "username": "demo"}
    assert timeout == 10.0


def test_is_ocean_false_on_land(client, monkeypatch):
    monkeypatch.setenv("GEONAMES_USERNAME", "demo")
    monkeypatch.setattr(app_module.httpx, "get", lambda *a, **k: _FakeResponse(
        {"status": {"message": "we are afraid we could not find an ocean for latitude and longitude", "value": 15}}))
    assert client.get("/isOcean", params={"lat": 47.5, "lon": 19.0}).json() is False


def test_is_ocean_geonames_error_status(client, monkeypatch):
    monkeypatch.setenv("GEONAMES_USERNAME", "demo")
    monkeypatch.setattr(app_module.httpx, "get", lambda *a, **k: _FakeResponse(
        {"status": {"message": "user account not enabled to use the free webservice.", "value": 10}}))
    r = client.get("/isOcean", params={"lat": 0, "lon": 0})
    assert r.status_code == 502
    assert "not enabled" in r.json()["detail"]


def test_is_ocean_upstream_failure(client, monkeypatch):
    monkeypatch.setenv("GEONAMES_USERNAME", "demo")
    monkeypatch.setattr(app_module.httpx, "get", lambda *a, **k: _FakeResponse({}, status_code=503))
    r = client.get("/isOcean", params={"lat": 0, "lon": 0})
    assert r.status_code == 502
    assert r.json()["detail"].startswith("Error fetching data from GeoNames")


def test_is_ocean_bad_timeout_env_is_500_with_detail(client, monkeypatch):
    monkeypatch.setenv("GEONAMES_USERNAME", "demo")
    monkeypatch.setenv("GEONAMES_TIMEOUT_S", "ten")
    r = client.get("/isOcean", params={"lat": 0, "lon": 0})
    assert r.status_code == 500
    assert "GEONAMES_TIMEOUT_S" in r.json()["detail"]
