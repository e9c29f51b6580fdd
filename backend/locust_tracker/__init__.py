"""Locust Tracker - device location ingestion with geofence entry alerts."""
__version__ = "1.0.0"
