"""Alert model - log of geofence entry alerts."""
from sqlalchemy import Column, Integer, Float, String, DateTime, Boolean, Index

from ..database import Base
from ..utils.time_utils import utcnow


class Alert(Base):
    """Record of a geofence entry and the outcome of each notification channel."""

    __tablename__ = "alerts"
    __table_args__ = (
        Index("ix_alerts_device_timestamp", "device_id", "timestamp"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    device_id = Column(String, nullable=False, index=True)
    device_name = Column(String, nullable=False)  # Name at alert time
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    distance_from_center_km = Column(Float, nullable=False)
    timestamp = Column(DateTime, nullable=False, index=True)
    email_sent = Column(Boolean, nullable=False, default=False)
    push_sent = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=utcnow)
