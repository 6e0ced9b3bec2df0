import logging
import math
from datetime import datetime
from typing import Optional

from dinnersafari.helpers.time import as_utc, to_iso

log = logging.getLogger(__name__)

STATE_ORDER = ["LOCKED", "TEASING", "CLUE_1", "CLUE_2", "STREET", "NUMBER", "OPEN"]

# Which envelope column unlocks which state (LOCKED has none)
STATE_COLUMNS = (
    ("TEASING", "teasing_at"),
    ("CLUE_1", "clue_1_at"),
    ("CLUE_2", "clue_2_at"),
    ("STREET", "street_at"),
    ("NUMBER", "number_at"),
    ("OPEN", "opened_at"),
)


def state_rank(state: str) -> int:
    return STATE_ORDER.index(state)


def state_at_least(state: str, other: str) -> bool:
    return state_rank(state) >= state_rank(other)


def next_state(state: str) -> Optional[str]:
    i = state_rank(state)
    if i + 1 >= len(STATE_ORDER):
        return None
    return STATE_ORDER[i + 1]


def envelope_timestamps(envelope) -> dict:
    """{"TEASING": dt|None, ..., "OPEN": dt|None} read off an envelope row."""
    return {
        state: as_utc(getattr(envelope, column, None))
        for state, column in STATE_COLUMNS
    }


def calculate_state(timestamps: dict, now: datetime) -> str:
    """
    Most advanced state whose timestamp exists and has passed.

    Scans from OPEN downwards so a missing intermediate timestamp can never
    pull a participant back to a less revealed state.
    """
    now = as_utc(now)
    for state, _column in reversed(STATE_COLUMNS):
        at = timestamps.get(state)
        if at is not None and now >= at:
            return state
    return "LOCKED"


def next_reveal(timestamps: dict, state: str, now: datetime) -> Optional[dict]:
    """
    The upcoming transition, or None when OPEN or the next timestamp is unset.

    in_seconds is whole seconds, floored and clamped to >= 0.
    """
    upcoming = next_state(state)
    if upcoming is None:
        return None

    at = timestamps.get(upcoming)
    if at is None:
        return None

    in_seconds = max(0, math.floor((at - as_utc(now)).total_seconds()))

    return {
        "type": upcoming,
        "at": to_iso(at),
        "in_seconds": in_seconds,
    }


def timestamps_out_of_order(timestamps: dict) -> bool:
    """True if the timestamps that ARE set are not non-decreasing in state order."""
    present = [timestamps[state] for state, _ in STATE_COLUMNS if timestamps.get(state) is not None]
    return any(a > b for a, b in zip(present, present[1:]))


def envelope_state(envelope, now: datetime) -> str:
    """
    State of a meal-course envelope.

    No host assigned yet means LOCKED whatever the schedule says.
    """
    if envelope.host_couple_id is None:
        return "LOCKED"

    timestamps = envelope_timestamps(envelope)
    if timestamps_out_of_order(timestamps):
        log.warning(
            "envelope id=%s course=%s has out-of-order reveal timestamps; using most advanced match",
            envelope.id, envelope.course,
        )
    return calculate_state(timestamps, now)
