"""Error types surfaced by the ingest pipeline."""


class TrackerError(Exception):
    """Base class for errors mapped to an HTTP response."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(TrackerError):
    """Required server configuration is missing or invalid."""

    status_code = 500


class AuthenticationError(TrackerError):
    """Missing or incorrect shared secret."""

    status_code = 401


class DurabilityError(TrackerError):
    """A location record could not be written."""

    status_code = 503


class DeliveryError(TrackerError):
    """A notification channel failed to deliver."""

    status_code = 502
