from __future__ import annotations


class SensorHubError(Exception):
    pass


class ValidationError(SensorHubError):
    """Malformed client input; the request is rejected without state change."""


class EmptyError(SensorHubError):
    """Export requested while the session buffer holds no records."""


class FetchError(SensorHubError):
    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class SinkError(SensorHubError):
    """Durable store rejected or could not complete an operation."""
