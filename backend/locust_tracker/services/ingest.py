"""Ingest pipeline - one fix from payload to alert."""
import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas.ingest import LocationFix
from ..utils.time_utils import to_naive_utc
from .alerter import alert_engine
from .device_store import device_store
from .geofence import classify, get_geofence
from .location_sink import location_sink

logger = logging.getLogger(__name__)


@dataclass
class IngestOutcome:
    inside: bool
    distance_km: float
    alert_created: bool


async def ingest_fix(session: AsyncSession, fix: LocationFix) -> IngestOutcome:
    """Store a fix, update the device and fire an entry alert if due.

    The location record is committed first; if that fails the device state
    is left untouched and the error propagates.
    """
    now = alert_engine.clock()
    timestamp = to_naive_utc(fix.timestamp) if fix.timestamp else now

    result = classify(fix.latitude, fix.longitude, get_geofence())

    await location_sink.append(session, fix, result, timestamp)
    snapshot = await device_store.upsert(session, fix, seen_at=timestamp, now=now)
    alert = await alert_engine.evaluate(session, fix, result, snapshot, timestamp, now=now)

    logger.debug(
        f"Fix from {fix.device_id}: inside={result.inside} "
        f"distance={result.distance_km:.3f}km alert={alert is not None}"
    )
    return IngestOutcome(
        inside=result.inside,
        distance_km=result.distance_km,
        alert_created=alert is not None,
    )
