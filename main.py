import logging
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from api.routes import air_quality, dashboard, narrative
from config.settings import settings
from utils.constants import PRESET_LOCATIONS
from utils.exceptions import AeroSenseError
from utils.helpers import create_error_response

logging.basicConfig(level=settings.LOG_LEVEL, format=settings.LOG_FORMAT)
logger = logging.getLogger("aerosense")


class HeadersOnlyCORSMiddleware(CORSMiddleware):
    """CORS middleware whose accepted preflight replies carry no body"""

    def preflight_response(self, request_headers):
        response = super().preflight_response(request_headers)
        if response.status_code != 200:
            return response
        headers = {
            key: value for key, value in response.headers.items()
            if key not in ("content-length", "content-type")
        }
        return Response(status_code=200, headers=headers)


app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION
)

# CORS
app.add_middleware(
    HeadersOnlyCORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=settings.CORS_ALLOW_HEADERS,
)

# Include routers
app.include_router(air_quality.router)
app.include_router(narrative.router)
app.include_router(dashboard.router)

for warning in settings.validate_config():
    logger.warning("Configuration: %s", warning)


@app.exception_handler(AeroSenseError)
def handle_aerosense_error(request: Request, exc: AeroSenseError):
    logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=create_error_response(exc.message))


@app.exception_handler(StarletteHTTPException)
def handle_http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
def handle_validation_error(request: Request, exc: RequestValidationError):
    messages = "; ".join(err.get("msg", "") for err in exc.errors())
    return JSONResponse(status_code=422, content=create_error_response(messages or "Invalid request"))


@app.exception_handler(Exception)
def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(status_code=500, content=create_error_response(str(exc) or "Unknown error"))


@app.get("/")
def root():
    return {
        "message": settings.API_TITLE,
        "version": settings.API_VERSION,
        "endpoints": {
            "air_quality": "/functions/v1/fetch-air-quality",
            "narrative": "/functions/v1/generate-ai-summary",
            "aqi_badge": "/api/v1/aqi/{category}",
            "landing": "/api/v1/dashboard/landing",
            "citizen": "/api/v1/dashboard/citizen/{location}",
            "policymaker": "/api/v1/dashboard/policymaker/{location}",
            "policy_report": "/api/v1/dashboard/policymaker/{location}/report",
            "docs": "/docs"
        },
        "locations": PRESET_LOCATIONS,
        "default_location": settings.DEFAULT_LOCATION,
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)
