"""
Configuration Management for AeroSense API
Loads environment variables once per process and provides centralized settings
"""

import os
from dotenv import load_dotenv

from utils.exceptions import ConfigurationError

# Load environment variables from .env file
load_dotenv()


def _optional_float(name: str):
    value = os.getenv(name, "").strip()
    return float(value) if value else None


class Settings:
    """Application settings and configuration"""

    # API Configuration
    API_TITLE = "AeroSense API"
    API_VERSION = "1.0.0"
    API_DESCRIPTION = "Air quality readings and AI narratives for citizens and policymakers"
    API_HOST = os.getenv("API_HOST", "0.0.0.0")
    API_PORT = int(os.getenv("API_PORT", "8000"))

    # External API Keys
    OPENWEATHERMAP_API_KEY = os.getenv("OPENWEATHERMAP_API_KEY", "")
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")

    # External API URLs
    OPENWEATHER_GEO_URL = "http://api.openweathermap.org/geo/1.0/direct"
    OPENWEATHER_BASE_URL = "http://api.openweathermap.org/data/2.5"
    GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"

    # Generative text settings
    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-pro")
    GEMINI_TEMPERATURE = 0.7
    GEMINI_MAX_OUTPUT_TOKENS = 300

    # None means requests waits forever
    UPSTREAM_TIMEOUT = _optional_float("UPSTREAM_TIMEOUT")

    # Dashboard
    DEFAULT_LOCATION = "Delhi"
    # Landing lookup when the browser shares no coordinates
    LANDING_CITY = "New Delhi"
    NARRATIVE_WORKERS = 2

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # CORS Settings (for frontend)
    CORS_ORIGINS = ["*"]
    CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]

    def require(self, name: str) -> str:
        """Return a configured secret or fail the current request"""
        value = getattr(self, name, "")
        if not value:
            raise ConfigurationError(f"{name} not configured")
        return value

    def validate_config(self):
        """Validate configuration and warn about missing keys"""
        warnings = []

        if not self.OPENWEATHERMAP_API_KEY:
            warnings.append("OPENWEATHERMAP_API_KEY not set - air quality requests will fail")

        if not self.GEMINI_API_KEY:
            warnings.append("GEMINI_API_KEY not set - narrative requests will fail")

        return warnings


# Create singleton instance
settings = Settings()
