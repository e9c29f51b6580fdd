"""Geofence calculator - great-circle distance and inside/outside test."""
import math
from dataclasses import dataclass

from ..config import settings

EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class Geofence:
    """A named circular region."""
    name: str
    center_lat: float
    center_lng: float
    radius_km: float


@dataclass(frozen=True)
class GeofenceResult:
    """Membership of a point in a geofence."""
    inside: bool
    distance_km: float


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two points on a spherical Earth, in km."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)

    x = (
        math.sin(d_lat / 2) * math.sin(d_lat / 2)
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lng / 2) * math.sin(d_lng / 2)
    )
    # Rounding can push x just past 1 for near-antipodal points
    x = min(1.0, max(0.0, x))
    c = 2 * math.atan2(math.sqrt(x), math.sqrt(1 - x))
    return EARTH_RADIUS_KM * c


def classify(latitude: float, longitude: float, geofence: Geofence) -> GeofenceResult:
    """Classify a point against a geofence. The boundary counts as inside."""
    distance_km = haversine_km(latitude, longitude, geofence.center_lat, geofence.center_lng)
    return GeofenceResult(inside=distance_km <= geofence.radius_km, distance_km=distance_km)


def get_geofence() -> Geofence:
    """The process-wide geofence from configuration."""
    return Geofence(
        name=settings.geofence_name,
        center_lat=settings.geofence_center_lat,
        center_lng=settings.geofence_center_lng,
        radius_km=settings.geofence_radius_km,
    )
