from pydantic import BaseModel, Field, model_validator
from typing import Any, Dict, List, Literal, Optional


class AirQualityRequest(BaseModel):
    city: Optional[str] = None
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lon: Optional[float] = Field(None, ge=-180, le=180)

    @model_validator(mode="after")
    def check_location(self):
        has_coords = self.lat is not None and self.lon is not None
        if not has_coords and not (self.city and self.city.strip()):
            raise ValueError("Provide either city or both lat and lon")
        return self


class MainReading(BaseModel):
    aqi: int


class Components(BaseModel):
    pm2_5: float
    pm10: float
    no2: float
    co: float
    o3: float
    so2: float


class PollutionEntry(BaseModel):
    main: MainReading
    components: Components


class AirQualityEnvelope(BaseModel):
    """Documents the upstream shape; responses are relayed without re-validation"""
    list: List[PollutionEntry]


class NarrativeRequest(BaseModel):
    aqiData: Dict[str, Any]
    city: Optional[str] = None
    type: Literal["summary", "health", "policy"] = "summary"


class NarrativeResponse(BaseModel):
    summary: str


class ErrorResponse(BaseModel):
    error: str


class AQIBadge(BaseModel):
    category: int
    label: str
    color: str
    background: str
    pulse: bool


class Notification(BaseModel):
    title: str
    description: str
    variant: str
    timestamp: str


class AQIInfo(BaseModel):
    label: str
    color: str
    background: str


class DashboardBase(BaseModel):
    view: str
    token: int
    stale: bool
    location: Optional[str] = None
    aqi_data: Optional[Dict[str, Any]] = None
    aqi_info: Optional[AQIInfo] = None
    notifications: List[Notification] = []


class CitizenDashboard(DashboardBase):
    pollutants: List[Dict[str, Any]] = []
    forecast: List[Dict[str, Any]] = []
    summary: str = ""
    health_recommendations: str = ""


class PolicymakerDashboard(DashboardBase):
    historical: List[Dict[str, Any]] = []
    pm25_forecast: List[Dict[str, Any]] = []
    hotspots: List[str] = []
    policy_recommendations: str = ""


class LandingDashboard(DashboardBase):
    aqi: Optional[int] = None
