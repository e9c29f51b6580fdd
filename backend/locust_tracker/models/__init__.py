"""Database models."""
from .device import Device
from .location import Location
from .alert import Alert
from .push_subscription import PushSubscription

__all__ = ["Device", "Location", "Alert", "PushSubscription"]
