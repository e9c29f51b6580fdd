"""Pydantic schemas for API request/response models."""
from .ingest import (
    LocationFix,
    GeofenceStatus,
    IngestResponse,
)
from .dashboard import (
    GeofenceCenter,
    GeofenceResponse,
    DeviceResponse,
    LocationResponse,
    AlertResponse,
    DashboardResponse,
)
from .push import (
    PushSubscriptionKeys,
    PushSubscriptionCreate,
    PushPublicKeyResponse,
    PushSubscribeResponse,
)

__all__ = [
    "LocationFix",
    "GeofenceStatus",
    "IngestResponse",
    "GeofenceCenter",
    "GeofenceResponse",
    "DeviceResponse",
    "LocationResponse",
    "AlertResponse",
    "DashboardResponse",
    "PushSubscriptionKeys",
    "PushSubscriptionCreate",
    "PushPublicKeyResponse",
    "PushSubscribeResponse",
]
