"""Ingest schemas - the fix payload sent by devices."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model using camelCase field names on the wire."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class LocationFix(CamelModel):
    """One location sample reported by a device."""
    device_id: str = Field(..., min_length=1)
    device_name: str = Field(..., min_length=1)
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    os_version: Optional[str] = None

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    accuracy: float
    altitude: Optional[float] = None
    speed: Optional[float] = None
    heading: Optional[float] = None
    battery: Optional[int] = Field(None, ge=0, le=100)

    timestamp: Optional[datetime] = None  # Receipt time when omitted


class GeofenceStatus(CamelModel):
    """Membership of a fix in the geofence."""
    inside: bool
    distance_km: float


class IngestResponse(CamelModel):
    """Result of ingesting one fix."""
    ok: bool = True
    geofence: GeofenceStatus
    alert_created: bool
