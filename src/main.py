"""
Main FastAPI application entrypoint.
"""
import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from src.config import settings
from src.domain.errors import RoutingUnavailableError, TripPlannerError
from src.api.health import router as health_router, API_VERSION
from src.api.itineraries import router as itineraries_router
from src.api.places import router as places_router
from src.api.routes import router as routes_router
from src.api.my_trips import router as my_trips_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan event handler for startup and shutdown.
    """
    # Startup
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info(f"Starting Trip Route API on {settings.host}:{settings.port}")
    logger.info(f"Debug mode: {settings.debug}")
    if not settings.google_maps_api_key:
        logger.warning("GOOGLE_MAPS_API_KEY not set: route calculation and place lookups will fail")

    yield

    # Shutdown
    logger.info("Shutting down Trip Route API")


# Create FastAPI app
app = FastAPI(
    title="Trip Route API",
    description="Route computation and trip classification for multi-day itineraries",
    version=API_VERSION,
    lifespan=lifespan,
)

# CORS middleware for the web/mobile clients
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TripPlannerError)
async def trip_planner_error_handler(request: Request, exc: TripPlannerError) -> JSONResponse:
    if isinstance(exc, RoutingUnavailableError):
        logger.warning(
            f"{exc.code} on {request.url.path}: {exc.message} "
            f"(provider status: {exc.provider_status})"
        )
    elif exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Dict details are returned as-is so every error body is {"code", "message"}."""
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {"code": "HTTP_ERROR", "message": str(exc.detail)}
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = f"{location}: {first.get('msg', 'invalid request')}" if location else "Invalid request"
    return JSONResponse(status_code=400, content={"code": "VALIDATION_ERROR", "message": message})


# Register routers
app.include_router(health_router, prefix="/api")
app.include_router(itineraries_router, prefix="/api")
app.include_router(places_router, prefix="/api")
app.include_router(routes_router, prefix="/api")
app.include_router(my_trips_router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Trip Route API",
        "version": API_VERSION,
        "status": "running",
        "docs": "/docs",
    }
