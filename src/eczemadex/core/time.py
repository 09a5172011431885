from __future__ import annotations

from datetime import datetime, timezone


def now_utc() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_iso(value: datetime) -> str:
    """Render an aware datetime as an ISO 8601 UTC string with microseconds."""
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def parse_iso(raw: str) -> datetime:
    """Parse an ISO 8601 timestamp, requiring an explicit offset."""
    value = datetime.fromisoformat(raw)
    if value.tzinfo is None:
        raise ValueError(f"Timestamp has no UTC offset: {raw}")
    return value.astimezone(timezone.utc)
