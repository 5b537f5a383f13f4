"""
Dashboard Views
Orchestrates the air-quality and narrative proxies for the citizen and
policymaker dashboards and keeps the resulting view state
"""

import logging
import threading
from collections import OrderedDict
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Optional

from config.settings import settings
from data.fetcher import AirQualityDataFetcher
from models.classifier import classify_aqi
from models.forecaster import RandomPlaceholderGenerator, SeriesGenerator
from models.narrative import NarrativeGenerator
from utils.constants import API_MESSAGES, CURRENT_LOCATION_LABEL
from utils.helpers import create_notification, extract_reading, identify_hotspots, pollutant_chart
from utils.result import Err, Ok, capture

logger = logging.getLogger(__name__)


class DashboardView:
    """
    Base view: holds the last successfully loaded state for one viewer

    Every load takes a generation token. Results from a load that has been
    superseded by a newer one are discarded instead of overwriting newer data.
    """

    name = "dashboard"
    failure_message = API_MESSAGES["air_quality_failed"]

    def __init__(self, fetcher: AirQualityDataFetcher = None, narrator: NarrativeGenerator = None,
                 series: SeriesGenerator = None):
        self.fetcher = fetcher or AirQualityDataFetcher()
        self.narrator = narrator or NarrativeGenerator()
        self.series = series or RandomPlaceholderGenerator()
        self._lock = threading.Lock()
        self._generation = 0
        self.state = self._empty_state()

    def _empty_state(self) -> Dict:
        return {"location": None, "aqi_data": None, "aqi_info": None}

    @property
    def generation(self) -> int:
        return self._generation

    def begin(self) -> int:
        with self._lock:
            self._generation += 1
            return self._generation

    def is_current(self, token: int) -> bool:
        with self._lock:
            return token == self._generation

    def commit(self, token: int, updates: Dict) -> bool:
        """Apply updates only if token is still the latest load"""
        with self._lock:
            if token != self._generation:
                logger.info("Discarding stale %s result (token %s, latest %s)", self.name, token, self._generation)
                return False
            self.state.update(updates)
            return True

    def snapshot(self, token: int, notifications, stale: bool = False) -> Dict:
        with self._lock:
            view = dict(self.state)
        view.update({"view": self.name, "token": token, "stale": stale, "notifications": notifications})
        return view

    def load(self, location: str):
        """
        Load the view for a location

        Returns:
            Ok(view) on success or partial success, Err on air-quality failure
            or when a newer load superseded this one
        """
        token = self.begin()
        logger.info("Loading %s view for %s (token %s)", self.name, location, token)
        return self._load(token, location)

    def _fetch_reading(self, location: str, fields=None, coords=None):
        query = {"lat": coords[0], "lon": coords[1]} if coords else {"city": location}
        air = capture(self.fetcher.resolve_air_quality, **query)
        if not air.ok:
            return air
        return capture(extract_reading, air.data, fields)

    def _failure(self, err: Err) -> Err:
        logger.error("%s view failed: %s (%s)", self.name, err.message, err.kind)
        return err

    def _stale(self) -> Err:
        return Err(kind="StaleResult", message="Superseded by a newer request", status_code=409)

    def _narrate(self, reading: Dict, location: str, kind: str):
        return capture(self.narrator.generate, reading, location, kind)

    def _load(self, token: int, location: str):
        raise NotImplementedError


class CitizenDashboardView(DashboardView):
    """AQI, pollutant breakdown, 5-day forecast, AI summary and health advice"""

    name = "citizen"

    def _empty_state(self) -> Dict:
        state = super()._empty_state()
        state.update({"pollutants": [], "forecast": [], "summary": "", "health_recommendations": ""})
        return state

    def _load(self, token: int, location: str):
        reading = self._fetch_reading(location)
        if not reading.ok:
            return self._failure(reading)

        aqi_data = reading.data
        # Everything for this load is committed at once, so a superseded load leaves no trace
        updates = {
            "location": location,
            "aqi_data": aqi_data,
            "aqi_info": classify_aqi(aqi_data["aqi"]).to_dict(),
            "pollutants": pollutant_chart(aqi_data),
            "forecast": self.series.aqi_forecast(aqi_data["aqi"]),
        }

        requests_by_panel = {
            "summary": (aqi_data, "summary"),
            "health_recommendations": (
                {"aqi": aqi_data["aqi"], "pm25": aqi_data.get("pm25"), "pm10": aqi_data.get("pm10")},
                "health",
            ),
        }

        notifications = []
        # Both narratives only need the reading, so they run side by side
        with ThreadPoolExecutor(max_workers=settings.NARRATIVE_WORKERS) as executor:
            futures = {
                executor.submit(self._narrate, payload, location, kind): (panel, kind)
                for panel, (payload, kind) in requests_by_panel.items()
            }
            for future in as_completed(futures):
                panel, kind = futures[future]
                result = future.result()
                if result.ok:
                    updates[panel] = result.data
                else:
                    logger.warning("%s narrative failed: %s", kind, result.message)
                    notifications.append(create_notification(
                        "Error", API_MESSAGES["narrative_failed"].format(kind=kind), "destructive"))

        if not self.commit(token, updates):
            return self._stale()

        notifications.append(create_notification(
            "Data Updated", API_MESSAGES["citizen_loaded"].format(location=location)))
        return Ok(self.snapshot(token, notifications))


class PolicymakerDashboardView(DashboardView):
    """AQI, historical comparison, PM2.5 projection, hotspots and policy advice"""

    name = "policymaker"
    failure_message = API_MESSAGES["policy_failed"]

    def _empty_state(self) -> Dict:
        state = super()._empty_state()
        state.update({"historical": [], "pm25_forecast": [], "hotspots": [], "policy_recommendations": ""})
        return state

    def _load(self, token: int, location: str):
        reading = self._fetch_reading(location, fields=["pm25", "pm10", "no2", "co", "o3"])
        if not reading.ok:
            return self._failure(reading)

        aqi_data = reading.data
        pm25 = aqi_data.get("pm25") or 0.0
        updates = {
            "location": location,
            "aqi_data": aqi_data,
            "aqi_info": classify_aqi(aqi_data["aqi"]).to_dict(),
            "historical": self.series.policy_history(),
            "pm25_forecast": self.series.pm25_projection(pm25),
            "hotspots": identify_hotspots(aqi_data["aqi"]),
        }

        notifications = []
        result = self._narrate(aqi_data, location, "policy")
        if result.ok:
            updates["policy_recommendations"] = result.data
        else:
            logger.warning("policy narrative failed: %s", result.message)
            notifications.append(create_notification(
                "Error", API_MESSAGES["narrative_failed"].format(kind="policy"), "destructive"))

        if not self.commit(token, updates):
            return self._stale()

        notifications.append(create_notification(
            "Data Loaded", API_MESSAGES["policy_loaded"].format(location=location)))
        return Ok(self.snapshot(token, notifications))

    def export_report(self) -> Dict:
        """Report notification plus the current view state; nothing is written to disk"""
        notification = create_notification("Report Generated", API_MESSAGES["report_generated"])
        return self.snapshot(self.generation, [notification])


class LandingView(DashboardView):
    """
    Landing AQI card: the viewer's own position, or the fallback city

    No narratives; a failed lookup keeps whatever the card showed before.
    """

    name = "landing"

    def _empty_state(self) -> Dict:
        state = super()._empty_state()
        state["aqi"] = None
        return state

    def load_at(self, lat: Optional[float] = None, lon: Optional[float] = None):
        """Load by coordinates when both are given, otherwise by the landing city"""
        if lat is None or lon is None:
            return self.load(settings.LANDING_CITY)

        token = self.begin()
        logger.info("Loading %s view at %s,%s (token %s)", self.name, lat, lon, token)
        return self._resolve(token, CURRENT_LOCATION_LABEL, (lat, lon))

    def _load(self, token: int, location: str):
        return self._resolve(token, location)

    def _resolve(self, token: int, location: str, coords=None):
        reading = self._fetch_reading(location, fields=["pm25"], coords=coords)
        if not reading.ok:
            return self._failure(reading)

        aqi = reading.data["aqi"]
        updates = {
            "location": location,
            "aqi": aqi,
            "aqi_data": reading.data,
            "aqi_info": classify_aqi(aqi).to_dict(),
        }
        if not self.commit(token, updates):
            return self._stale()
        return Ok(self.snapshot(token, []))


VIEW_TYPES = {
    "citizen": CitizenDashboardView,
    "policymaker": PolicymakerDashboardView,
    "landing": LandingView,
}


class ViewRegistry:
    """
    Per-viewer dashboard views, keyed by session id

    Bounded; the least recently used session is dropped first.
    """

    def __init__(self, max_sessions: int = 1024):
        self.max_sessions = max_sessions
        self._views = OrderedDict()
        self._lock = threading.Lock()

    def get(self, kind: str, session: Optional[str] = None) -> DashboardView:
        view_type = VIEW_TYPES[kind]
        if session is None:
            return view_type()

        key = (kind, session)
        with self._lock:
            view = self._views.get(key)
            if view is None:
                view = view_type()
                self._views[key] = view
                if len(self._views) > self.max_sessions:
                    self._views.popitem(last=False)
            else:
                self._views.move_to_end(key)
            return view

    def __len__(self):
        return len(self._views)


registry = ViewRegistry()
