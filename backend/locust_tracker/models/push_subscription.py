"""PushSubscription model - browser push endpoints for alert broadcast."""
from sqlalchemy import Column, Integer, String, DateTime

from ..database import Base
from ..utils.time_utils import utcnow


class PushSubscription(Base):
    """Registered browser for web push notifications."""

    __tablename__ = "push_subscriptions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    endpoint = Column(String, unique=True, nullable=False, index=True)
    p256dh = Column(String, nullable=False)
    auth = Column(String, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
