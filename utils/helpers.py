"""
Helper Functions for AeroSense API
Utility functions used across the application
"""

from datetime import datetime
from typing import Dict, List, Optional

from utils.constants import (
    POLLUTANT_FIELDS, POLLUTANTS, HOTSPOTS, HOTSPOT_AQI_THRESHOLD, MISSING_VALUE,
)
from config.settings import settings
from utils.exceptions import ParseError


def extract_reading(envelope: Dict, fields: Optional[List[str]] = None) -> Dict:
    """
    Map the first entry of an air-pollution envelope into a flat reading

    Args:
        envelope: Upstream body, {"list": [{"main": {"aqi"}, "components": {...}}]}
        fields: Reading fields to keep (defaults to every pollutant)

    Returns:
        Dict like {"aqi": 3, "pm25": 45.2, "pm10": 80.1, ...}
    """
    try:
        entry = envelope["list"][0]
        aqi = entry["main"]["aqi"]
        components = entry["components"]
    except (KeyError, IndexError, TypeError):
        raise ParseError("Air quality response has no readings")

    wanted = fields or list(POLLUTANT_FIELDS.values())
    reading = {"aqi": aqi}
    for upstream_key, field in POLLUTANT_FIELDS.items():
        if field in wanted:
            reading[field] = components.get(upstream_key)
    return reading


def format_value(value) -> str:
    """Render a reading value for a prompt"""
    if value is None:
        return MISSING_VALUE
    return str(value)


def pollutant_chart(reading: Dict) -> List[Dict]:
    """Bar chart rows for a reading; CO is scaled down to share the axis"""
    rows = []
    for field, info in POLLUTANTS.items():
        if reading.get(field) is None:
            continue
        rows.append({
            "name": info["name"],
            "value": reading[field] * info.get("chart_scale", 1),
            "unit": info["unit"],
        })
    return rows


def identify_hotspots(aqi: int) -> List[str]:
    """Simulated pollution hotspots, only listed for unhealthy air"""
    if isinstance(aqi, (int, float)) and aqi >= HOTSPOT_AQI_THRESHOLD:
        return list(HOTSPOTS)
    return []


def create_notification(title: str, description: str, variant: str = "default") -> dict:
    """
    Create a transient user-visible notification

    Args:
        title: Short heading
        description: Message body
        variant: "default" or "destructive"

    Returns:
        Notification dict
    """
    return {
        "title": title,
        "description": description,
        "variant": variant,
        "timestamp": datetime.now().isoformat()
    }


def create_error_response(message: str) -> dict:
    """Standard error body shared by every endpoint"""
    return {"error": message}


def cors_headers() -> dict:
    """Headers for an OPTIONS reply that bypasses the CORS middleware"""
    return {
        "Access-Control-Allow-Origin": ", ".join(settings.CORS_ORIGINS),
        "Access-Control-Allow-Headers": ", ".join(settings.CORS_ALLOW_HEADERS),
        "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    }
