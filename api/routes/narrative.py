from fastapi import APIRouter, Response
from api.schemas import ErrorResponse, NarrativeRequest, NarrativeResponse
from models.narrative import NarrativeGenerator
from utils.helpers import cors_headers

router = APIRouter()
generator = NarrativeGenerator()


@router.post(
    "/functions/v1/generate-ai-summary",
    response_model=NarrativeResponse,
    responses={500: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
def generate_ai_summary(request: NarrativeRequest):
    """Generate a summary, health advice or policy narrative for AQI data"""
    text = generator.generate(request.aqiData, request.city, request.type)
    return NarrativeResponse(summary=text)


@router.options("/functions/v1/generate-ai-summary", include_in_schema=False)
def generate_ai_summary_options():
    return Response(status_code=200, headers=cors_headers())
