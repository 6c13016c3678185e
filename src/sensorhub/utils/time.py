from __future__ import annotations

from datetime import datetime, timedelta, timezone

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def from_epoch_millis(value: int) -> datetime:
    return _EPOCH + timedelta(milliseconds=value)


def iso_millis(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def floor_to_interval(value: datetime, seconds: int) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    elapsed = (value - _EPOCH) // timedelta(seconds=seconds)
    return _EPOCH + timedelta(seconds=elapsed * seconds)


def next_tick(value: datetime, seconds: int) -> datetime:
    """First interval boundary strictly after ``value``."""
    return floor_to_interval(value, seconds) + timedelta(seconds=seconds)
