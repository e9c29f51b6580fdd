"""Device model - one row per reporting device."""
from sqlalchemy import Column, Integer, String, DateTime, Boolean

from ..database import Base
from ..utils.time_utils import utcnow


class Device(Base):
    """A device that reports location fixes.

    last_geofence_inside is NULL until the first fix has been evaluated.
    state_version increases on every geofence state write and guards the
    read-then-write window of the alert decision.
    """

    __tablename__ = "devices"

    id = Column(Integer, primary_key=True, autoincrement=True)
    device_id = Column(String, unique=True, nullable=False, index=True)
    device_name = Column(String, nullable=False)
    manufacturer = Column(String, nullable=True)
    model = Column(String, nullable=True)
    os_version = Column(String, nullable=True)
    registered_at = Column(DateTime, nullable=False, default=utcnow)
    last_seen = Column(DateTime, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    last_geofence_inside = Column(Boolean, nullable=True)
    last_alert_at = Column(DateTime, nullable=True)
    state_version = Column(Integer, nullable=False, default=0)

    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
