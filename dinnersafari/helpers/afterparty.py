"""
Afterparty geofence narrative.

The afterparty reuses the envelope state machine, but STREET and NUMBER mean
"you're in the zone" (~500 m circle) and "closing in" (~100 m circle) rather
than street name and house number. Only the labels change here; the state
calculation is the same one used for meal courses.
"""
import math
from datetime import time, timedelta
from typing import Optional

from dinnersafari.helpers.envelope_state import (
    calculate_state,
    envelope_timestamps,
    state_at_least,
)
from dinnersafari.helpers.geo import (
    cycling_estimates,
    estimate_cycling_minutes,
    haversine_km,
    point,
)
from dinnersafari.helpers.time import as_utc, local_to_utc, to_iso, DEFAULT_TZ

NARRATIVE_LABELS = {
    "STREET": "ZONE",
    "NUMBER": "CLOSING_IN",
}

NARRATIVE_ORDER = ("LOCKED", "TEASING", "STREET", "NUMBER", "OPEN")

DEFAULT_ZONE_RADIUS_M = 500
DEFAULT_CLOSING_RADIUS_M = 100
DEFAULT_AFTERPARTY_TIME = time(22, 0)
DEFAULT_TEASE_MINUTES = 30


def narrative_label(state: str) -> str:
    return NARRATIVE_LABELS.get(state, state)


def afterparty_scheduled_at(event, envelope=None, tz_name: str = DEFAULT_TZ):
    if envelope is not None and envelope.scheduled_at:
        return as_utc(envelope.scheduled_at)

    if event.afterparty_time is not None:
        return local_to_utc(event.event_date, event.afterparty_time, tz_name)

    return local_to_utc(event.event_date, DEFAULT_AFTERPARTY_TIME, tz_name)


def afterparty_timestamps(event, envelope, tz_name: str = DEFAULT_TZ, tease_minutes: int = DEFAULT_TEASE_MINUTES) -> dict:
    """
    Timestamp set for the afterparty, in the same shape as envelope_timestamps().

    Organizer overrides win, then the envelope's own schedule, then the
    automatic window (tease N minutes before, open at the scheduled time).
    ZONE / CLOSING_IN only exist when the envelope schedules them.
    """
    ts = envelope_timestamps(envelope) if envelope is not None else {}
    scheduled = afterparty_scheduled_at(event, envelope, tz_name)

    teasing = as_utc(event.afterparty_teasing_at) or ts.get("TEASING")
    opened = as_utc(event.afterparty_revealed_at) or ts.get("OPEN")

    if teasing is None and scheduled is not None:
        teasing = scheduled - timedelta(minutes=tease_minutes)
    if opened is None:
        opened = scheduled

    return {
        "TEASING": teasing,
        "CLUE_1": None,
        "CLUE_2": None,
        "STREET": ts.get("STREET"),
        "NUMBER": ts.get("NUMBER"),
        "OPEN": opened,
    }


def afterparty_state(timestamps: dict, now) -> str:
    return calculate_state(timestamps, now)


def afterparty_next_reveal(timestamps: dict, state: str, now) -> Optional[dict]:
    """
    Next narrative step that is actually scheduled.

    Unlike meal courses the clue states never exist here, and an unscheduled
    ZONE / CLOSING_IN step is skipped rather than ending the countdown.
    """
    later = NARRATIVE_ORDER[NARRATIVE_ORDER.index(state) + 1:]
    for candidate in later:
        at = timestamps.get(candidate)
        if at is None:
            continue
        return {
            "type": narrative_label(candidate),
            "at": to_iso(at),
            "in_seconds": max(0, math.floor((at - as_utc(now)).total_seconds())),
        }
    return None


def geofence(lat, lng, radius_m, default_radius: int) -> Optional[dict]:
    """An approximate circle: center + radius. Never the real point."""
    center = point(lat, lng)
    if center is None:
        return None
    return {"center": center, "radius_m": int(radius_m or default_radius)}


def afterparty_base_minutes(event, envelope, dessert_host=None) -> Optional[int]:
    """
    Sober cycling minutes to the afterparty.

    Uses the distance precomputed on the envelope; otherwise measures from
    the couple's dessert host to the afterparty.
    """
    if envelope.cycling_distance_km is not None:
        return estimate_cycling_minutes(envelope.cycling_distance_km)

    if (
        dessert_host is None
        or dessert_host.lat is None or dessert_host.lng is None
        or event.afterparty_lat is None or event.afterparty_lng is None
    ):
        return None

    km = haversine_km(dessert_host.lat, dessert_host.lng, event.afterparty_lat, event.afterparty_lng)
    return estimate_cycling_minutes(round(km, 1))


def _host_names(raw) -> Optional[list[str]]:
    if not raw:
        return None
    names = [n.strip() for n in raw.replace("&", ",").split(",") if n.strip()]
    return names or None


def afterparty_disclosures(event, envelope, state: str, base_minutes: Optional[int]) -> dict:
    """
    Afterparty-only fields for the current state.

    TEASING+     time, BYOB, notes, description
    ZONE         ~500 m circle
    CLOSING_IN   ~100 m circle
    OPEN         exact address, door code, hosts, cycling estimates
    """
    out = {
        "afterparty_time": None,
        "afterparty_byob": None,
        "afterparty_notes": None,
        "afterparty_description": None,
        "afterparty_hosts": None,
        "zone": None,
        "closing_in": None,
        "cycling_estimates": None,
        "full_address": None,
        "host_names": None,
    }

    if state == "LOCKED":
        return out

    out["afterparty_time"] = event.afterparty_time.strftime("%H:%M") if event.afterparty_time else None
    out["afterparty_byob"] = bool(event.afterparty_byob)
    out["afterparty_notes"] = event.afterparty_notes
    out["afterparty_description"] = event.afterparty_description

    if state == "STREET":
        out["zone"] = geofence(envelope.zone_lat, envelope.zone_lng, envelope.zone_radius_m, DEFAULT_ZONE_RADIUS_M)

    if state == "NUMBER":
        out["closing_in"] = geofence(envelope.closing_lat, envelope.closing_lng, envelope.closing_radius_m, DEFAULT_CLOSING_RADIUS_M)

    if state_at_least(state, "OPEN"):
        hosts = _host_names(event.afterparty_hosts)
        out["afterparty_hosts"] = hosts
        out["host_names"] = hosts
        out["cycling_estimates"] = cycling_estimates(base_minutes)
        out["full_address"] = {
            "street": envelope.destination_address or event.afterparty_location,
            "number": None,
            "apartment": None,
            "door_code": envelope.destination_notes or event.afterparty_door_code,
            "city": None,
            "coordinates": point(event.afterparty_lat, event.afterparty_lng),
        }

    return out


def afterparty_starts_at(event, envelope, tz_name: str = DEFAULT_TZ) -> Optional[str]:
    return to_iso(afterparty_scheduled_at(event, envelope, tz_name))
