from __future__ import annotations

import csv
import io
from collections.abc import Sequence
from decimal import Decimal

from ..api.schemas.sensor import MEASUREMENT_FIELDS, SensorRecord
from ..utils.time import from_epoch_millis, iso_millis

CSV_COLUMNS: tuple[str, ...] = ("timestamp", "datetime", "seconds_elapsed", *MEASUREMENT_FIELDS)


def format_number(value: float | None) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    # shortest round-trip digits, never exponent notation
    return format(Decimal(repr(value)), "f")


def seconds_elapsed(timestamp: int, start: int) -> str:
    return f"{(timestamp - start) / 1000:.3f}"


def render_csv(records: Sequence[SensorRecord]) -> bytes:
    ordered = sorted(records, key=lambda record: record.timestamp)
    start = ordered[0].timestamp

    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for record in ordered:
        writer.writerow(
            [
                record.timestamp,
                iso_millis(from_epoch_millis(record.timestamp)),
                seconds_elapsed(record.timestamp, start),
                *(format_number(getattr(record, field)) for field in MEASUREMENT_FIELDS),
            ]
        )
    return output.getvalue().encode("utf-8")
