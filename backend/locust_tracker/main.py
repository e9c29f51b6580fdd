"""Main FastAPI application."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .database import init_db, close_db
from .errors import TrackerError
from .routers import ingest_router, dashboard_router, push_router
from .services.geofence import get_geofence

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    geofence = get_geofence()
    logger.info(
        f"Starting Locust Tracker - geofence '{geofence.name}' "
        f"({geofence.center_lat}, {geofence.center_lng}) r={geofence.radius_km}km"
    )

    await init_db()
    logger.info("Database initialized")

    if not settings.ingest_api_key:
        logger.warning("INGEST_API_KEY is not set - ingest requests will be rejected")

    yield

    await close_db()
    logger.info("Shutdown complete")


async def tracker_error_handler(request: Request, exc: TrackerError):
    """Map pipeline errors to their HTTP status."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Reject malformed payloads as a client error."""
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid payload", "details": jsonable_encoder(exc.errors())},
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Locust Tracker",
        description="Device location ingestion with geofence entry alerts",
        version="1.0.0",
        lifespan=lifespan,
    )

    # CORS middleware for the dashboard frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, restrict to your domain
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(TrackerError, tracker_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.include_router(ingest_router)
    app.include_router(dashboard_router)
    app.include_router(push_router)

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "geofence": settings.geofence_name,
        }

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.web_port)
