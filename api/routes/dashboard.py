from fastapi import APIRouter, Header, Query
from fastapi.responses import JSONResponse
from typing import Optional
from api.schemas import CitizenDashboard, ErrorResponse, LandingDashboard, PolicymakerDashboard
from models.dashboard import registry
from utils.constants import API_MESSAGES
from utils.helpers import create_notification

router = APIRouter()

VIEW_RESPONSES = {
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
}


def _failed(view, result):
    # The view keeps its previous state; the caller gets that state plus a notification
    if result.kind == "StaleResult":
        notification = create_notification("Superseded", API_MESSAGES["superseded"])
    else:
        notification = create_notification("Error", view.failure_message, "destructive")
    body = view.snapshot(view.generation, [notification])
    body["error"] = result.message
    return JSONResponse(status_code=result.status_code, content=body)


def _render(view, location: str):
    result = view.load(location)
    if result.ok:
        return result.data
    return _failed(view, result)


@router.get(
    "/api/v1/dashboard/landing",
    response_model=LandingDashboard,
    responses=VIEW_RESPONSES,
)
def get_landing_dashboard(
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lon: Optional[float] = Query(None, ge=-180, le=180),
    x_session_id: Optional[str] = Header(None),
):
    """Landing AQI card for the viewer's coordinates, or the fallback city without them"""
    view = registry.get("landing", x_session_id)
    result = view.load_at(lat, lon)
    if result.ok:
        return result.data
    return _failed(view, result)


@router.get(
    "/api/v1/dashboard/citizen/{location}",
    response_model=CitizenDashboard,
    responses=VIEW_RESPONSES,
)
def get_citizen_dashboard(location: str, x_session_id: Optional[str] = Header(None)):
    """Citizen view: AQI, pollutants, forecast, summary and health advice"""
    view = registry.get("citizen", x_session_id)
    return _render(view, location)


@router.get(
    "/api/v1/dashboard/policymaker/{location}",
    response_model=PolicymakerDashboard,
    responses=VIEW_RESPONSES,
)
def get_policymaker_dashboard(location: str, x_session_id: Optional[str] = Header(None)):
    """Policymaker view: AQI, policy history, PM2.5 projection, hotspots and interventions"""
    view = registry.get("policymaker", x_session_id)
    return _render(view, location)


@router.post("/api/v1/dashboard/policymaker/{location}/report", response_model=PolicymakerDashboard)
def export_policy_report(location: str, x_session_id: Optional[str] = Header(None)):
    """Prepare a report from the session's view, loading it first if it is empty"""
    view = registry.get("policymaker", x_session_id)
    if view.state.get("location") != location:
        result = view.load(location)
        if not result.ok:
            return JSONResponse(status_code=result.status_code, content={"error": result.message})
    return view.export_report()
