"""Services for geofence evaluation, persistence and notifications."""
from .alerter import AlertEngine
from .device_store import DeviceStore
from .email_sender import EmailSenderService
from .location_sink import LocationSink
from .push_sender import PushSenderService

__all__ = ["AlertEngine", "DeviceStore", "EmailSenderService", "LocationSink", "PushSenderService"]
