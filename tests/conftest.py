import pytest
import requests

from config.settings import settings

DELHI_ENVELOPE = {
    "coord": {"lon": 77.2, "lat": 28.6},
    "list": [{
        "main": {"aqi": 3},
        "components": {"pm2_5": 45.2, "pm10": 80.1, "no2": 12, "co": 300, "o3": 40, "so2": 8},
        "dt": 1700000000,
    }],
}


def gemini_body(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class FakeResponse:
    def __init__(self, payload=None, status_code=200, text=None):
        self.payload = payload
        self.status_code = status_code
        self.text = text if text is not None else str(payload)

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class UpstreamStub:
    """Stands in for OpenWeatherMap and Gemini; records every call"""

    def __init__(self):
        self.calls = []
        self.geocode = lambda params: FakeResponse([{"lat": 28.6, "lon": 77.2}])
        self.pollution = lambda params: FakeResponse(DELHI_ENVELOPE)
        self.gemini = lambda body: FakeResponse(gemini_body("Air is moderate today."))

    def get(self, url, params=None, timeout=None, **kwargs):
        params = dict(params or {})
        if url == settings.OPENWEATHER_GEO_URL:
            self.calls.append(("geocode", url, params))
            return self.geocode(params)
        if url.endswith("/air_pollution"):
            self.calls.append(("pollution", url, params))
            return self.pollution(params)
        raise AssertionError(f"unexpected GET {url}")

    def post(self, url, params=None, json=None, timeout=None, **kwargs):
        self.calls.append(("gemini", url, {"params": dict(params or {}), "json": json}))
        return self.gemini(json)

    def called(self, name):
        return [call for call in self.calls if call[0] == name]


@pytest.fixture(autouse=True)
def api_keys(monkeypatch):
    monkeypatch.setattr(settings, "OPENWEATHERMAP_API_KEY", "ow-test-key")
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "gemini-test-key")


@pytest.fixture
def upstream(monkeypatch):
    stub = UpstreamStub()
    monkeypatch.setattr(requests, "get", stub.get)
    monkeypatch.setattr(requests, "post", stub.post)
    return stub


@pytest.fixture
def client(upstream):
    from fastapi.testclient import TestClient
    from main import app

    return TestClient(app)
