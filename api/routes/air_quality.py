from fastapi import APIRouter, Response
from api.schemas import AQIBadge, AirQualityEnvelope, AirQualityRequest, ErrorResponse
from data.fetcher import AirQualityDataFetcher
from models.classifier import aqi_badge
from utils.helpers import cors_headers

router = APIRouter()
fetcher = AirQualityDataFetcher()

ERROR_RESPONSES = {
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
}


@router.post(
    "/functions/v1/fetch-air-quality",
    responses={200: {"model": AirQualityEnvelope}, **ERROR_RESPONSES},
)
def fetch_air_quality(request: AirQualityRequest):
    """Relay current air pollution for a city or coordinates"""
    return fetcher.resolve_air_quality(city=request.city, lat=request.lat, lon=request.lon)


@router.options("/functions/v1/fetch-air-quality", include_in_schema=False)
def fetch_air_quality_options():
    return Response(status_code=200, headers=cors_headers())


@router.get("/api/v1/aqi/{category}", response_model=AQIBadge)
def get_aqi_badge(category: int):
    """Display label and theme colors for an AQI category"""
    return aqi_badge(category)
