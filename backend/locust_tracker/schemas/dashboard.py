"""Dashboard schemas."""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel

from .ingest import CamelModel


class GeofenceCenter(BaseModel):
    lat: float
    lng: float


class GeofenceResponse(CamelModel):
    """Configured geofence."""
    name: str
    center: GeofenceCenter
    radius_km: float


class DeviceResponse(CamelModel):
    """Device as shown on the dashboard."""
    device_id: str
    device_name: str
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    os_version: Optional[str] = None
    registered_at: datetime
    last_seen: Optional[datetime] = None
    is_active: bool
    last_geofence_inside: Optional[bool] = None
    last_alert_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LocationResponse(CamelModel):
    """Stored location fix."""
    device_id: str
    latitude: float
    longitude: float
    accuracy: float
    altitude: Optional[float] = None
    speed: Optional[float] = None
    heading: Optional[float] = None
    battery: Optional[int] = None
    timestamp: datetime
    is_in_geofence: bool
    distance_from_center_km: float

    class Config:
        from_attributes = True


class AlertResponse(CamelModel):
    """Stored alert with delivery status."""
    id: int
    device_id: str
    device_name: str
    latitude: float
    longitude: float
    distance_from_center_km: float
    timestamp: datetime
    email_sent: bool
    push_sent: bool

    class Config:
        from_attributes = True


class DashboardResponse(CamelModel):
    """Everything the map dashboard polls for."""
    geofence: GeofenceResponse
    devices: List[DeviceResponse]
    latest_locations: List[LocationResponse]
    recent_alerts: List[AlertResponse]
