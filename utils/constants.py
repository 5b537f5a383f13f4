"""
Constants used throughout the AeroSense API
AQI categories, theme colors, prompt text and other fixed values
"""

# ==================== AQI Categories ====================

# Upstream reports a 1-5 category; anything else is shown as hazardous
AQI_CATEGORIES = {
    1: {"label": "Good", "token": "aqi-good"},
    2: {"label": "Moderate", "token": "aqi-moderate"},
    3: {"label": "Unhealthy (Sensitive)", "token": "aqi-unhealthy-sensitive"},
    4: {"label": "Unhealthy", "token": "aqi-unhealthy"},
    5: {"label": "Very Unhealthy", "token": "aqi-very-unhealthy"},
}

HAZARDOUS_CATEGORY = {"label": "Hazardous", "token": "aqi-hazardous"}

BACKGROUND_ALPHA = 0.1

# ==================== Pollutant Information ====================

# Upstream component key -> reading field
POLLUTANT_FIELDS = {
    "pm2_5": "pm25",
    "pm10": "pm10",
    "no2": "no2",
    "co": "co",
    "o3": "o3",
    "so2": "so2",
}

POLLUTANTS = {
    "pm25": {"name": "PM2.5", "full_name": "Fine Particulate Matter", "unit": "μg/m³"},
    "pm10": {"name": "PM10", "full_name": "Coarse Particulate Matter", "unit": "μg/m³"},
    "no2": {"name": "NO₂", "full_name": "Nitrogen Dioxide", "unit": "μg/m³"},
    "co": {"name": "CO", "full_name": "Carbon Monoxide", "unit": "μg/m³", "chart_scale": 0.01},
    "o3": {"name": "O₃", "full_name": "Ozone", "unit": "μg/m³"},
    "so2": {"name": "SO₂", "full_name": "Sulfur Dioxide", "unit": "μg/m³"},
}

# ==================== Narratives ====================

NARRATIVE_KINDS = ("summary", "health", "policy")

FALLBACK_NARRATIVE = "Unable to generate summary"

MISSING_VALUE = "N/A"

# ==================== Dashboard ====================

PRESET_LOCATIONS = [
    "Andhra Pradesh", "Delhi", "Gujarat", "Karnataka", "Kerala", "Maharashtra",
    "Tamil Nadu", "Uttar Pradesh", "West Bengal", "Rajasthan", "Punjab", "Haryana",
]

HOTSPOT_AQI_THRESHOLD = 4

HOTSPOTS = ["Industrial Zone", "Traffic Junction", "Construction Area"]

# ==================== API Response Messages ====================

API_MESSAGES = {
    "citizen_loaded": "Air quality data for {location} loaded successfully",
    "policy_loaded": "Policy analytics for {location} updated",
    "air_quality_failed": "Failed to fetch air quality data",
    "policy_failed": "Failed to fetch policy data",
    "narrative_failed": "Failed to generate {kind} narrative",
    "report_generated": "Your air quality report is being prepared for download",
    "superseded": "A newer request for this view replaced this one",
}

# Shown instead of a city name when the landing lookup uses coordinates
CURRENT_LOCATION_LABEL = "Your Location"
