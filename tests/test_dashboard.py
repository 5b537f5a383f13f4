import threading

import pytest

from conftest import DELHI_ENVELOPE
from models.dashboard import CitizenDashboardView, PolicymakerDashboardView, ViewRegistry
from models.forecaster import RandomPlaceholderGenerator
from utils.exceptions import CityNotFoundError, UpstreamError


def envelope(aqi, pm25=45.2):
    return {"list": [{"main": {"aqi": aqi},
                      "components": {"pm2_5": pm25, "pm10": 80.1, "no2": 12, "co": 300, "o3": 40, "so2": 8}}]}


class FakeFetcher:
    def __init__(self, envelopes=None, error=None):
        self.envelopes = envelopes or {}
        self.error = error
        self.cities = []

    def resolve_air_quality(self, city=None, lat=None, lon=None):
        self.cities.append(city)
        if self.error:
            raise self.error
        return self.envelopes.get(city, DELHI_ENVELOPE)


class FakeNarrator:
    def __init__(self, failing=()):
        self.failing = failing
        self.requests = []
        self._lock = threading.Lock()

    def generate(self, aqi_data, location=None, kind="summary"):
        with self._lock:
            self.requests.append((kind, dict(aqi_data), location))
        if kind in self.failing:
            raise UpstreamError("Gemini API error: 500 - boom", upstream_status=500, body="boom")
        return f"{kind} for {location}"


def make_view(view_type, fetcher=None, narrator=None):
    return view_type(fetcher=fetcher or FakeFetcher(), narrator=narrator or FakeNarrator(),
                     series=RandomPlaceholderGenerator(seed=0))


def test_citizen_view_loads_everything():
    narrator = FakeNarrator()
    view = make_view(CitizenDashboardView, narrator=narrator)

    result = view.load("Delhi")

    assert result.ok
    data = result.data
    assert data["aqi_data"] == {"aqi": 3, "pm25": 45.2, "pm10": 80.1, "no2": 12, "co": 300, "o3": 40, "so2": 8}
    assert data["aqi_info"]["label"] == "Unhealthy (Sensitive)"
    assert len(data["forecast"]) == 5
    assert data["summary"] == "summary for Delhi"
    assert data["health_recommendations"] == "health for Delhi"
    assert data["notifications"][-1]["title"] == "Data Updated"
    assert data["token"] == 1 and data["stale"] is False

    kinds = {kind: payload for kind, payload, _ in narrator.requests}
    assert kinds["health"] == {"aqi": 3, "pm25": 45.2, "pm10": 80.1}
    assert "no2" in kinds["summary"]


def test_co_is_scaled_in_pollutant_chart():
    view = make_view(CitizenDashboardView)

    rows = {row["name"]: row["value"] for row in view.load("Delhi").data["pollutants"]}

    assert rows["CO"] == pytest.approx(3.0)
    assert rows["PM2.5"] == 45.2


def test_air_quality_failure_keeps_previous_state():
    fetcher = FakeFetcher()
    view = make_view(CitizenDashboardView, fetcher=fetcher)
    view.load("Delhi")

    fetcher.error = CityNotFoundError("Atlantis")
    result = view.load("Atlantis")

    assert not result.ok
    assert result.kind == "CityNotFoundError"
    assert result.status_code == 404
    assert view.state["location"] == "Delhi"
    assert view.state["summary"] == "summary for Delhi"


def test_narrative_failure_only_affects_its_panel():
    view = make_view(CitizenDashboardView, narrator=FakeNarrator(failing=("health",)))

    result = view.load("Delhi")

    assert result.ok
    assert result.data["summary"] == "summary for Delhi"
    assert result.data["health_recommendations"] == ""
    errors = [n for n in result.data["notifications"] if n["variant"] == "destructive"]
    assert len(errors) == 1
    assert "health" in errors[0]["description"]


def test_narratives_wait_for_air_quality():
    order = []

    class RecordingFetcher(FakeFetcher):
        def resolve_air_quality(self, city=None, lat=None, lon=None):
            order.append("air")
            return super().resolve_air_quality(city=city)

    class RecordingNarrator(FakeNarrator):
        def generate(self, aqi_data, location=None, kind="summary"):
            order.append(kind)
            return super().generate(aqi_data, location, kind)

    view = make_view(CitizenDashboardView, fetcher=RecordingFetcher(), narrator=RecordingNarrator())
    view.load("Delhi")

    assert order[0] == "air"
    assert sorted(order[1:]) == ["health", "summary"]


def test_citizen_narratives_run_concurrently():
    both_started = threading.Barrier(2, timeout=5)

    class BlockingNarrator(FakeNarrator):
        def generate(self, aqi_data, location=None, kind="summary"):
            both_started.wait()
            return super().generate(aqi_data, location, kind)

    result = make_view(CitizenDashboardView, narrator=BlockingNarrator()).load("Delhi")

    assert result.ok
    assert result.data["summary"] and result.data["health_recommendations"]


def test_superseded_load_is_discarded():
    class ReentrantFetcher(FakeFetcher):
        """The first request is still in flight when the user picks another city"""

        def __init__(self):
            super().__init__(envelopes={"Delhi": envelope(5), "Mumbai": envelope(2)})
            self.view = None
            self.newer = None

        def resolve_air_quality(self, city=None, lat=None, lon=None):
            if city == "Delhi" and self.newer is None:
                self.newer = self.view.load("Mumbai")
            return super().resolve_air_quality(city=city)

    fetcher = ReentrantFetcher()
    view = make_view(CitizenDashboardView, fetcher=fetcher)
    fetcher.view = view

    older = view.load("Delhi")

    assert fetcher.newer.ok
    assert fetcher.newer.data["token"] == 2
    assert not older.ok
    assert older.status_code == 409
    assert view.state["location"] == "Mumbai"
    assert view.state["aqi_data"]["aqi"] == 2


def test_failed_newer_load_leaves_older_state_untouched():
    class ReentrantNarrator(FakeNarrator):
        """A newer, failing load starts while Delhi's narratives are in flight"""

        def __init__(self):
            super().__init__()
            self.view = None
            self.newer = None

        def generate(self, aqi_data, location=None, kind="summary"):
            if location == "Delhi" and kind == "summary":
                self.newer = self.view.load("Atlantis")
            return super().generate(aqi_data, location, kind)

    class AtlantisFetcher(FakeFetcher):
        def resolve_air_quality(self, city=None, lat=None, lon=None):
            if city == "Atlantis":
                raise CityNotFoundError(city)
            return super().resolve_air_quality(city=city)

    narrator = ReentrantNarrator()
    fetcher = AtlantisFetcher(envelopes={"Pune": envelope(2), "Delhi": envelope(5)})
    view = make_view(CitizenDashboardView, fetcher=fetcher, narrator=narrator)
    narrator.view = view

    assert view.load("Pune").ok
    before = dict(view.state)

    delhi = view.load("Delhi")

    assert narrator.newer.status_code == 404
    assert not delhi.ok
    assert delhi.status_code == 409
    assert view.state == before
    assert view.state["location"] == "Pune"
    assert view.state["aqi_data"]["aqi"] == 2
    assert view.state["aqi_info"]["label"] == "Moderate"
    assert view.state["summary"] == "summary for Pune"
    assert view.state["health_recommendations"] == "health for Pune"


def test_commit_rejects_old_tokens():
    view = make_view(CitizenDashboardView)
    first = view.begin()
    second = view.begin()

    assert not view.commit(first, {"location": "Old"})
    assert view.commit(second, {"location": "New"})
    assert view.state["location"] == "New"


def test_policymaker_view():
    narrator = FakeNarrator()
    fetcher = FakeFetcher(envelopes={"Punjab": envelope(4, pm25=120.0)})
    view = make_view(PolicymakerDashboardView, fetcher=fetcher, narrator=narrator)

    result = view.load("Punjab")

    assert result.ok
    data = result.data
    assert "so2" not in data["aqi_data"]
    assert data["hotspots"] == ["Industrial Zone", "Traffic Junction", "Construction Area"]
    assert len(data["historical"]) == 7
    assert all(110.0 <= row["predicted"] <= 130.0 for row in data["pm25_forecast"])
    assert data["policy_recommendations"] == "policy for Punjab"
    assert data["notifications"][-1]["title"] == "Data Loaded"
    assert [kind for kind, _, _ in narrator.requests] == ["policy"]


def test_no_hotspots_for_moderate_air():
    view = make_view(PolicymakerDashboardView, fetcher=FakeFetcher(envelopes={"Kerala": envelope(2)}))

    assert view.load("Kerala").data["hotspots"] == []


def test_policy_narrative_failure_is_notified():
    view = make_view(PolicymakerDashboardView, narrator=FakeNarrator(failing=("policy",)))

    result = view.load("Delhi")

    assert result.ok
    assert result.data["policy_recommendations"] == ""
    assert result.data["notifications"][0]["variant"] == "destructive"


def test_malformed_envelope_is_a_failure():
    view = make_view(CitizenDashboardView, fetcher=FakeFetcher(envelopes={"Delhi": {"list": []}}))

    result = view.load("Delhi")

    assert not result.ok
    assert result.kind == "ParseError"
    assert view.state["aqi_data"] is None


def test_export_report_uses_current_state():
    view = make_view(PolicymakerDashboardView)
    view.load("Delhi")

    report = view.export_report()

    assert report["location"] == "Delhi"
    assert report["notifications"][0]["title"] == "Report Generated"


def test_registry_reuses_session_views():
    registry = ViewRegistry(max_sessions=2)

    first = registry.get("citizen", "abc")
    assert registry.get("citizen", "abc") is first
    assert registry.get("policymaker", "abc") is not first
    assert registry.get("citizen", None) is not registry.get("citizen", None)


def test_registry_drops_least_recent_session():
    registry = ViewRegistry(max_sessions=2)
    oldest = registry.get("citizen", "a")
    registry.get("citizen", "b")
    registry.get("citizen", "c")

    assert len(registry) == 2
    assert registry.get("citizen", "a") is not oldest
