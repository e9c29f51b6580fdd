"""Location model - append-only history of reported fixes."""
from sqlalchemy import Column, Integer, Float, String, DateTime, Boolean, Index

from ..database import Base
from ..utils.time_utils import utcnow


class Location(Base):
    """A single reported fix, tagged with its computed geofence membership."""

    __tablename__ = "locations"
    __table_args__ = (
        Index("ix_locations_device_timestamp", "device_id", "timestamp"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    device_id = Column(String, nullable=False, index=True)  # Reference only, no FK
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    accuracy = Column(Float, nullable=False)
    altitude = Column(Float, nullable=True)
    speed = Column(Float, nullable=True)
    heading = Column(Float, nullable=True)
    battery = Column(Integer, nullable=True)  # 0-100
    timestamp = Column(DateTime, nullable=False, index=True)
    is_in_geofence = Column(Boolean, nullable=False, index=True)
    distance_from_center_km = Column(Float, nullable=False)
    created_at = Column(DateTime, default=utcnow)
