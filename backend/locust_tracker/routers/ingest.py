"""Location ingest API endpoint for devices."""
import hmac
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..database import get_db
from ..errors import AuthenticationError, ConfigurationError
from ..schemas.ingest import LocationFix, IngestResponse, GeofenceStatus
from ..services.ingest import ingest_fix

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ingest", tags=["ingest"])


async def require_ingest_key(x_api_key: Optional[str] = Header(default=None)):
    """Check the shared secret before anything else touches the request."""
    server_key = settings.ingest_api_key
    if not server_key:
        logger.error("Ingest rejected - INGEST_API_KEY is not configured")
        raise ConfigurationError("Missing required setting: INGEST_API_KEY")

    if not x_api_key or not hmac.compare_digest(x_api_key.encode(), server_key.encode()):
        logger.warning("Ingest rejected - invalid or missing API key")
        raise AuthenticationError("Unauthorized")


@router.post("", response_model=IngestResponse, dependencies=[Depends(require_ingest_key)])
async def ingest_location(fix: LocationFix, db: AsyncSession = Depends(get_db)):
    """Ingest one location fix from a device.

    Stores the fix, refreshes the device record and sends a geofence entry
    alert when the device has just entered and is outside its cooldown.
    """
    outcome = await ingest_fix(db, fix)
    return IngestResponse(
        ok=True,
        geofence=GeofenceStatus(inside=outcome.inside, distance_km=outcome.distance_km),
        alert_created=outcome.alert_created,
    )
