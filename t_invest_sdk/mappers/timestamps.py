from __future__ import annotations

from datetime import date, datetime, time, timezone

from google.protobuf import timestamp_pb2

from t_invest_sdk.core.exceptions import ConversionError


_NANOS_PER_SECOND = 1_000_000_000


def _check(ts: timestamp_pb2.Timestamp) -> None:
    if not 0 <= ts.nanos < _NANOS_PER_SECOND:
        raise ConversionError(f"Invalid timestamp: {ts.seconds} seconds, {ts.nanos} nanos")


def datetime_to_timestamp(dt: datetime) -> timestamp_pb2.Timestamp:
    """Aware datetimes are converted to UTC, naive ones are taken as UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    ts = timestamp_pb2.Timestamp()
    ts.FromDatetime(dt.astimezone(timezone.utc))
    return ts


def timestamp_to_datetime(ts: timestamp_pb2.Timestamp) -> datetime:
    """Aware UTC datetime; nanoseconds below a microsecond are truncated."""
    _check(ts)
    try:
        return ts.ToDatetime(tzinfo=timezone.utc)
    except (OverflowError, ValueError, OSError) as exc:
        raise ConversionError(f"Invalid timestamp: {ts.seconds} seconds, {ts.nanos} nanos") from exc


def date_to_timestamp(d: date) -> timestamp_pb2.Timestamp:
    """Midnight UTC of ``d``."""
    return datetime_to_timestamp(datetime.combine(d, time.min, tzinfo=timezone.utc))


def timestamp_to_date(ts: timestamp_pb2.Timestamp) -> date:
    """UTC calendar date of ``ts``; the time of day is ignored."""
    return timestamp_to_datetime(ts).date()
