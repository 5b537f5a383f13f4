"""
Air Quality Data Fetcher
Resolves a city or coordinates and relays OpenWeatherMap air-pollution data
"""

import logging
import requests
from typing import Dict, Optional, Tuple

from config.settings import settings
from utils.exceptions import CityNotFoundError, ParseError, UpstreamError

logger = logging.getLogger(__name__)


class AirQualityDataFetcher:
    """Stateless proxy for the OpenWeatherMap geocoding and air-pollution APIs"""

    def __init__(self, timeout: Optional[float] = None):
        self.geo_url = settings.OPENWEATHER_GEO_URL
        self.pollution_url = f"{settings.OPENWEATHER_BASE_URL}/air_pollution"
        self.timeout = timeout if timeout is not None else settings.UPSTREAM_TIMEOUT

    def _get_json(self, url: str, params: Dict, service: str):
        safe_params = {k: v for k, v in params.items() if k != "appid"}
        logger.info("Fetching %s from %s %s", service, url, safe_params)

        try:
            response = requests.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error("%s request failed: %s", service, e)
            raise UpstreamError(f"{service} request failed: {e}")

        if not response.ok:
            logger.error("%s error response: %s %s", service, response.status_code, response.text)
            raise UpstreamError(
                f"{service} error: {response.status_code} - {response.text}",
                upstream_status=response.status_code,
                body=response.text,
            )

        try:
            return response.json()
        except ValueError:
            raise ParseError(
                f"{service} returned a non-JSON body",
                upstream_status=response.status_code,
                body=response.text,
            )

    def geocode_city(self, city: str, api_key: str) -> Tuple[float, float]:
        """
        Resolve a city name to coordinates using the first geocoding match

        Raises:
            CityNotFoundError: geocoding returned no results
        """
        params = {"q": city, "limit": 1, "appid": api_key}
        results = self._get_json(self.geo_url, params, "Geocoding")

        if not results:
            logger.warning("No geocoding results for %s", city)
            raise CityNotFoundError(city)

        try:
            return results[0]["lat"], results[0]["lon"]
        except (KeyError, IndexError, TypeError):
            raise ParseError("Geocoding response has no coordinates")

    def fetch_air_pollution(self, lat: float, lon: float, api_key: str) -> Dict:
        """Fetch current air pollution for coordinates; body is returned verbatim"""
        params = {"lat": lat, "lon": lon, "appid": api_key}
        data = self._get_json(self.pollution_url, params, "Air pollution")

        if not isinstance(data, dict):
            raise ParseError("Air pollution response is not an object")

        logger.info("Air quality data received for %s, %s", lat, lon)
        return data

    def resolve_air_quality(self, city: str = None, lat: float = None, lon: float = None) -> Dict:
        """
        Fetch air quality for a city or a coordinate pair

        Coordinates win when both are given. Geocoding and the pollution call
        are sequential; at most two upstream requests are made.

        Args:
            city: City or region name
            lat: Latitude
            lon: Longitude

        Returns:
            Upstream envelope: {"list": [{"main": {"aqi"}, "components": {...}}]}
        """
        api_key = settings.require("OPENWEATHERMAP_API_KEY")

        if lat is not None and lon is not None:
            coords = (lat, lon)
        elif city:
            coords = self.geocode_city(city, api_key)
        else:
            raise ValueError("Either city or both lat and lon are required")

        return self.fetch_air_pollution(coords[0], coords[1], api_key)
