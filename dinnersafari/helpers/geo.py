import logging
import math
import random
from typing import Optional

log = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0
METERS_PER_DEGREE_LAT = 111320.0

# ~15 km/h on a bike
CYCLING_MINUTES_PER_KM = 4

# Afterparty pace estimates: (key, label, multiplier)
PACE_MULTIPLIERS = (
    ("sober", "Nykter", 1.0),
    ("lagom", "Lagom", 1.5),
    ("efterfest", "Efterfest-läge", 2.5),
)


def round_half_up(value: float) -> int:
    """Round like a human would (2.5 -> 3), not banker's rounding."""
    return int(math.floor(value + 0.5))


def point(lat, lng) -> Optional[dict]:
    if lat is None or lng is None:
        return None
    try:
        return {"lat": float(lat), "lng": float(lng)}
    except (TypeError, ValueError):
        log.warning("unparsable coordinates lat=%r lng=%r", lat, lng)
        return None


def haversine_km(from_lat: float, from_lng: float, to_lat: float, to_lng: float) -> float:
    """Great-circle distance in kilometers (fågelvägen)."""
    d_lat = math.radians(to_lat - from_lat)
    d_lng = math.radians(to_lng - from_lng)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(from_lat)) * math.cos(math.radians(to_lat)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def estimate_cycling_minutes(distance_km: Optional[float]) -> Optional[int]:
    if distance_km is None:
        return None
    return round_half_up(distance_km * CYCLING_MINUTES_PER_KM)


def distance_meters(distance_km: Optional[float]) -> Optional[int]:
    if distance_km is None:
        return None
    return round_half_up(distance_km * 1000)


def cycling_estimates(base_minutes: Optional[int]) -> Optional[dict]:
    """
    Scale a sober cycling estimate into the three afterparty paces.

    Returns {"sober": {"label": "Nykter", "minutes": 8}, "lagom": ..., "efterfest": ...}
    """
    if base_minutes is None:
        return None

    return {
        key: {"label": label, "minutes": round_half_up(base_minutes * factor)}
        for key, label, factor in PACE_MULTIPLIERS
    }


def random_offset(lat: float, lng: float, min_m: float, max_m: float, rng=None) -> dict:
    """
    A point at a random bearing, min_m..max_m meters away from (lat, lng).

    Used when placing afterparty envelopes so every couple gets their own
    approximate zone center instead of one that triangulates the real spot.
    """
    rng = rng or random
    angle = rng.random() * 2 * math.pi
    distance = min_m + rng.random() * (max_m - min_m)
    d_lat = (distance * math.cos(angle)) / METERS_PER_DEGREE_LAT
    d_lng = (distance * math.sin(angle)) / (METERS_PER_DEGREE_LAT * math.cos(math.radians(lat)))
    return {"lat": lat + d_lat, "lng": lng + d_lng}
