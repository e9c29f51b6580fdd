"""Location record sink - durable append of every reported fix."""
import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import DurabilityError
from ..models import Location
from ..schemas.ingest import LocationFix
from ..utils.db_utils import retry_on_lock
from .geofence import GeofenceResult

logger = logging.getLogger(__name__)


class LocationSink:
    """Append-only store of location fixes."""

    async def append(
        self,
        session: AsyncSession,
        fix: LocationFix,
        result: GeofenceResult,
        timestamp: datetime,
    ) -> Location:
        """Write one fix and commit it.

        Raises DurabilityError if the record cannot be stored; nothing
        downstream may run without it.
        """
        location = Location(
            device_id=fix.device_id,
            latitude=fix.latitude,
            longitude=fix.longitude,
            accuracy=fix.accuracy,
            altitude=fix.altitude,
            speed=fix.speed,
            heading=fix.heading,
            battery=fix.battery,
            timestamp=timestamp,
            is_in_geofence=result.inside,
            distance_from_center_km=result.distance_km,
        )
        session.add(location)

        try:
            await retry_on_lock(session.commit)
        except SQLAlchemyError as e:
            logger.error(f"Failed to store location for {fix.device_id}: {e}")
            await session.rollback()
            raise DurabilityError("Location could not be stored") from e

        return location


# Global instance
location_sink = LocationSink()
