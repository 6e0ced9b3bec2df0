from datetime import datetime, date, time, timezone
from zoneinfo import ZoneInfo
from typing import Optional

DEFAULT_TZ = "Europe/Stockholm"

def as_utc(dt: Optional[datetime]) -> Optional[datetime]:
    if not dt:
        return None

    # Treat naive DB values as UTC
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)

def local_to_utc(day: Optional[date], wall_time: Optional[time], tz_name: str = DEFAULT_TZ) -> Optional[datetime]:
    """Combine an event date and a local wall-clock time into an aware UTC datetime."""
    if day is None or wall_time is None:
        return None
    local = datetime.combine(day, wall_time.replace(tzinfo=None), tzinfo=ZoneInfo(tz_name))
    return local.astimezone(timezone.utc)

def to_iso(dt: Optional[datetime]) -> Optional[str]:
    dt = as_utc(dt)
    if not dt:
        return None
    return dt.isoformat().replace("+00:00", "Z")

def parse_iso(raw: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp ("2026-05-16T18:30:00Z" style).

    Raises ValueError for malformed input so callers can answer 400.
    Naive values are taken as UTC.
    """
    raw = (raw or "").strip()
    if not raw:
        return None
    if raw.endswith("Z") or raw.endswith("z"):
        raw = raw[:-1] + "+00:00"
    return as_utc(datetime.fromisoformat(raw))

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

def resolve_now(simulate_time: Optional[str] = None) -> datetime:
    """
    The single "now" for a request.

    An organizer preview passes simulate_time; everybody else gets real UTC time.
    Whatever is returned here must be threaded through every computation of the
    request, never re-read.
    """
    simulated = parse_iso(simulate_time)
    return simulated or utc_now()
