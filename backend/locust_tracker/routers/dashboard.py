"""Dashboard API - aggregated state for the map view."""
from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..models import Device, Location, Alert
from ..schemas.dashboard import (
    DashboardResponse,
    DeviceResponse,
    GeofenceCenter,
    GeofenceResponse,
    LocationResponse,
    AlertResponse,
)
from ..services.geofence import get_geofence

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])

RECENT_ALERT_LIMIT = 50


@router.get("", response_model=DashboardResponse)
async def get_dashboard(db: AsyncSession = Depends(get_db)):
    """Get geofence, active devices, their latest fixes and recent alerts."""
    geofence = get_geofence()

    devices_result = await db.execute(
        select(Device)
        .where(Device.is_active.is_(True))
        .order_by(Device.last_seen.desc())
    )
    devices = devices_result.scalars().all()

    # Latest location for every device that has reported
    device_ids_result = await db.execute(select(Location.device_id).distinct())
    latest_locations = []
    for device_id in device_ids_result.scalars().all():
        latest_result = await db.execute(
            select(Location)
            .where(Location.device_id == device_id)
            .order_by(Location.timestamp.desc(), Location.id.desc())
            .limit(1)
        )
        latest = latest_result.scalar_one_or_none()
        if latest:
            latest_locations.append(latest)
    latest_locations.sort(key=lambda loc: loc.timestamp, reverse=True)

    alerts_result = await db.execute(
        select(Alert)
        .order_by(Alert.timestamp.desc(), Alert.id.desc())
        .limit(RECENT_ALERT_LIMIT)
    )
    recent_alerts = alerts_result.scalars().all()

    return DashboardResponse(
        geofence=GeofenceResponse(
            name=geofence.name,
            center=GeofenceCenter(lat=geofence.center_lat, lng=geofence.center_lng),
            radius_km=geofence.radius_km,
        ),
        devices=[DeviceResponse.model_validate(d) for d in devices],
        latest_locations=[LocationResponse.model_validate(loc) for loc in latest_locations],
        recent_alerts=[AlertResponse.model_validate(a) for a in recent_alerts],
    )
