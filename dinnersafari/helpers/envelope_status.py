"""
Living envelope status: everything one couple may currently know.

Two steps, kept strictly apart:

1. load_snapshot() reads every row the response needs, once.
2. build_envelope_status() turns that snapshot plus a single "now" into the
   payload. It never touches the database, so a request is internally
   consistent even if rows change while it runs, and replaying it with the
   same "now" gives the same payload (clue pool order aside).
"""
from dataclasses import dataclass, field
from typing import Optional

from dinnersafari.models import Couple, CourseClue, Envelope, StreetInfo, COURSES, AFTERPARTY
from dinnersafari.helpers.afterparty import (
    afterparty_base_minutes,
    afterparty_disclosures,
    afterparty_next_reveal,
    afterparty_starts_at,
    afterparty_state,
    afterparty_timestamps,
    narrative_label,
)
from dinnersafari.helpers.allergies import summarize_allergies
from dinnersafari.helpers.clues import (
    build_clue_pool,
    build_table_lookup,
    host_clue_texts,
    reveal_host_clues,
    select_filler,
    show_clue_pool,
    wants_street_hint,
)
from dinnersafari.helpers.envelope_state import (
    envelope_state,
    envelope_timestamps,
    next_reveal,
    state_at_least,
)
from dinnersafari.helpers.fun_facts import has_fun_facts
from dinnersafari.helpers.geo import distance_meters, estimate_cycling_minutes, point
from dinnersafari.helpers.messages import message_catalogs
from dinnersafari.helpers.time import DEFAULT_TZ, local_to_utc, to_iso


@dataclass(frozen=True)
class EnvelopeSnapshot:
    event: object
    couple_id: int
    # this couple's non-cancelled envelopes in the active plan, keyed by course
    envelopes: dict = field(default_factory=dict)
    couples_by_id: dict = field(default_factory=dict)
    # (host couple id, course) -> clue indices
    course_clues: dict = field(default_factory=dict)
    # host couple id -> StreetInfo
    street_infos: dict = field(default_factory=dict)
    # host couple id -> course -> [guest couple ids]
    table_lookup: dict = field(default_factory=dict)


def load_snapshot(event, couple_id: int) -> EnvelopeSnapshot:
    """Fetch every row needed to answer for one couple. No queries happen after this."""
    plan_envelopes = []
    if event.active_match_plan_id:
        plan_envelopes = (
            Envelope.query
            .filter(
                Envelope.match_plan_id == event.active_match_plan_id,
                Envelope.cancelled.is_(False),
            )
            .all()
        )

    own = {e.course: e for e in plan_envelopes if e.couple_id == couple_id}
    host_ids = {e.host_couple_id for e in own.values() if e.host_couple_id}

    couples = (
        Couple.query
        .filter(
            Couple.event_id == event.id,
            Couple.confirmed.is_(True),
            Couple.cancelled.is_(False),
        )
        .all()
    )

    course_clues = {}
    street_infos = {}
    if host_ids:
        for cc in CourseClue.query.filter(CourseClue.couple_id.in_(host_ids)).all():
            course_clues[(cc.couple_id, cc.course_type)] = list(cc.clue_indices or [])
        for si in StreetInfo.query.filter(StreetInfo.couple_id.in_(host_ids)).all():
            street_infos[si.couple_id] = si

    return EnvelopeSnapshot(
        event=event,
        couple_id=couple_id,
        envelopes=own,
        couples_by_id={c.id: c for c in couples},
        course_clues=course_clues,
        street_infos=street_infos,
        table_lookup=build_table_lookup(plan_envelopes),
    )


def course_starts_at(event, course: str, tz_name: str = DEFAULT_TZ) -> Optional[str]:
    wall_time = {
        "starter": event.starter_time,
        "main": event.main_time,
        "dessert": event.dessert_time,
    }.get(course)
    return to_iso(local_to_utc(event.event_date, wall_time, tz_name))


def _empty_course(course: str, state: str, starts_at) -> dict:
    return {
        "type": course,
        "state": state,
        "clues": [],
        "clue_pool": None,
        "street": None,
        "number": None,
        "full_address": None,
        "next_reveal": None,
        "starts_at": starts_at,
        "host_names": None,
        "allergies_summary": None,
        "is_self_host": False,
        "host_has_fun_facts": False,
        "cycling_meters": None,
        "filler": None,
        "street_hint": None,
    }


def build_course_status(snapshot: EnvelopeSnapshot, course: str, now, catalogs: dict,
                        tz_name: str = DEFAULT_TZ, rng=None) -> dict:
    event = snapshot.event
    starts_at = course_starts_at(event, course, tz_name)
    envelope = snapshot.envelopes.get(course)

    if envelope is None:
        return _empty_course(course, "LOCKED", starts_at)

    host_id = envelope.host_couple_id

    # Not matched yet: scheduled start only, every other layer skipped
    if host_id is None:
        return _empty_course(course, "LOCKED", starts_at)

    state = envelope_state(envelope, now)
    host = snapshot.couples_by_id.get(host_id)
    street_info = snapshot.street_infos.get(host_id)
    is_self_host = host_id == snapshot.couple_id
    host_facts = has_fun_facts(host)

    clue_texts = host_clue_texts(host, snapshot.course_clues.get((host_id, course), []))

    out = _empty_course(course, state, starts_at)
    out["is_self_host"] = is_self_host
    out["host_has_fun_facts"] = host_facts
    out["cycling_meters"] = distance_meters(envelope.cycling_distance_km)
    out["next_reveal"] = next_reveal(envelope_timestamps(envelope), state, now)

    # The host never gets clues about themselves
    if not is_self_host:
        out["clues"] = reveal_host_clues(envelope, clue_texts, state)

    out["filler"] = select_filler(state, catalogs, is_self_host, host_facts, out["clues"])

    if wants_street_hint(state, is_self_host, host_facts, out["clues"]) and street_info is not None:
        out["street_hint"] = street_info.street_name or None

    if show_clue_pool(state, course, is_self_host):
        out["clue_pool"] = build_clue_pool(host_id, course, snapshot.table_lookup, snapshot.couples_by_id, rng=rng)

    if state_at_least(state, "STREET"):
        if street_info is not None:
            out["street"] = {
                "name": street_info.street_name or "",
                "range": street_info.number_range,
                "cycling_minutes": estimate_cycling_minutes(envelope.cycling_distance_km) or 0,
            }

    if state_at_least(state, "NUMBER") and street_info is not None:
        out["number"] = street_info.street_number

    if state == "OPEN":
        out["full_address"] = {
            "street": street_info.street_name if street_info else None,
            "number": street_info.street_number if street_info else None,
            "apartment": street_info.apartment if street_info else None,
            "door_code": street_info.door_code if street_info else None,
            "city": street_info.city if street_info else None,
            "coordinates": point(host.lat, host.lng) if host else None,
        }
        out["host_names"] = host.display_names if host else []

    if is_self_host and state != "LOCKED":
        out["allergies_summary"] = summarize_allergies(host_id, course, snapshot.table_lookup, snapshot.couples_by_id)

    return out


def build_afterparty_status(snapshot: EnvelopeSnapshot, now, tz_name: str = DEFAULT_TZ,
                            tease_minutes: int = 30) -> dict:
    event = snapshot.event
    envelope = snapshot.envelopes[AFTERPARTY]

    timestamps = afterparty_timestamps(event, envelope, tz_name, tease_minutes)
    state = afterparty_state(timestamps, now)

    dessert_host = None
    dessert = snapshot.envelopes.get("dessert")
    if dessert is not None and dessert.host_couple_id:
        dessert_host = snapshot.couples_by_id.get(dessert.host_couple_id)

    base_minutes = afterparty_base_minutes(event, envelope, dessert_host) if state == "OPEN" else None

    out = _empty_course(AFTERPARTY, narrative_label(state), afterparty_starts_at(event, envelope, tz_name))
    out["next_reveal"] = afterparty_next_reveal(timestamps, state, now)
    out["cycling_meters"] = distance_meters(envelope.cycling_distance_km)
    out.update(afterparty_disclosures(event, envelope, state, base_minutes))
    return out


def build_envelope_status(snapshot: EnvelopeSnapshot, now, tz_name: str = DEFAULT_TZ,
                          tease_minutes: int = 30, rng=None) -> dict:
    """
    The full payload for one couple at one instant.

    `now` must be the request's single resolved time (real or simulated).
    """
    catalogs = message_catalogs(snapshot.event)

    courses = [
        build_course_status(snapshot, course, now, catalogs, tz_name=tz_name, rng=rng)
        for course in COURSES
    ]

    if AFTERPARTY in snapshot.envelopes:
        courses.append(build_afterparty_status(snapshot, now, tz_name=tz_name, tease_minutes=tease_minutes))

    return {
        "server_time": to_iso(now),
        "event_id": snapshot.event.id,
        "couple_id": snapshot.couple_id,
        "courses": courses,
        "messages": catalogs,
    }
