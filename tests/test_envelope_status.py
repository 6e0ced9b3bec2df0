import random
from datetime import timedelta

from dinnersafari.helpers.envelope_status import build_envelope_status
from dinnersafari.helpers.messages import DEFAULT_HOST_SELF, DEFAULT_LIPS_SEALED, DEFAULT_MYSTERY_HOST
from tests.factories import (
    SCHEDULE,
    make_couple,
    make_envelope,
    make_event,
    make_snapshot,
    starter_table,
    utc,
)


def _status(couple_id, now, course_clues=None, envelopes=None, couples=None, street_infos=None, event=None, rng=None):
    table_envelopes, table_couples, table_clues, table_streets = starter_table()
    snapshot = make_snapshot(
        event or make_event(),
        couple_id,
        table_envelopes if envelopes is None else envelopes,
        table_couples if couples is None else couples,
        table_clues if course_clues is None else course_clues,
        table_streets if street_infos is None else street_infos,
    )
    return build_envelope_status(snapshot, now, rng=rng)


def _course(payload, course="starter"):
    return next(c for c in payload["courses"] if c["type"] == course)


def test_payload_shape():
    now = utc(2026, 5, 16, 12, 0)
    payload = _status(20, now)

    assert payload["server_time"] == "2026-05-16T12:00:00Z"
    assert payload["event_id"] == 1
    assert payload["couple_id"] == 20
    assert [c["type"] for c in payload["courses"]] == ["starter", "main", "dessert"]
    assert set(payload["messages"]) == {"host_self", "lips_sealed", "mystery_host"}


def test_courses_without_envelope_are_locked_with_start_time():
    payload = _status(20, utc(2026, 5, 16, 12, 0))
    main = _course(payload, "main")
    dessert = _course(payload, "dessert")

    assert main["state"] == "LOCKED"
    assert main["starts_at"] == "2026-05-16T17:30:00Z"
    assert main["clues"] == []
    assert main["next_reveal"] is None
    assert dessert["starts_at"] == "2026-05-16T19:00:00Z"


def test_unassigned_envelope_stays_locked():
    envelopes, *_ = starter_table()
    envelopes[1] = make_envelope(2, 20, "starter", None)

    starter = _course(_status(20, utc(2026, 5, 16, 16, 30), envelopes=envelopes))
    assert starter["state"] == "LOCKED"
    assert starter["street"] is None
    assert starter["full_address"] is None
    assert starter["next_reveal"] is None
    assert starter["starts_at"] == "2026-05-16T16:00:00Z"


def test_teasing_shows_countdown_only():
    starter = _course(_status(20, utc(2026, 5, 16, 12, 0)))
    assert starter["state"] == "TEASING"
    assert starter["clues"] == []
    assert starter["clue_pool"] is None
    assert starter["filler"] is None
    assert starter["next_reveal"] == {"type": "CLUE_1", "at": "2026-05-16T14:00:00Z", "in_seconds": 7200}
    assert starter["cycling_meters"] == 2400


def test_guest_at_clue_1_gets_first_clue_and_pool():
    starter = _course(_status(20, utc(2026, 5, 16, 14, 30)))

    assert starter["state"] == "CLUE_1"
    assert starter["clues"] == [{"text": "Har husdjur: katt", "revealed_at": "2026-05-16T14:00:00Z"}]
    assert starter["filler"] is None
    assert starter["is_self_host"] is False
    assert starter["host_has_fun_facts"] is True
    assert sorted(starter["clue_pool"]) == sorted([
        "Har husdjur: katt",
        "Hemligt talent: jonglera",
        "Sportar: löpning",
        "Har bestigit Kebnekaise",
        "Har bott i Japan",
        "Spelar dragspel",
    ])


def test_guest_at_clue_2_gets_both_clues_and_no_pool():
    starter = _course(_status(20, utc(2026, 5, 16, 15, 35)))

    assert starter["state"] == "CLUE_2"
    assert [c["text"] for c in starter["clues"]] == ["Har husdjur: katt", "Har bestigit Kebnekaise"]
    assert starter["clue_pool"] is None
    assert starter["street"] is None
    assert starter["street_hint"] is None


def test_street_then_number_then_open():
    street = _course(_status(20, utc(2026, 5, 16, 15, 50)))
    assert street["state"] == "STREET"
    assert street["street"] == {"name": "Rörstrandsgatan", "range": "12-40", "cycling_minutes": 10}
    assert street["number"] is None
    assert street["full_address"] is None

    number = _course(_status(20, utc(2026, 5, 16, 15, 56)))
    assert number["state"] == "NUMBER"
    assert number["number"] == 22
    assert number["full_address"] is None

    opened = _course(_status(20, utc(2026, 5, 16, 16, 0)))
    assert opened["state"] == "OPEN"
    assert opened["next_reveal"] is None
    assert opened["full_address"] == {
        "street": "Rörstrandsgatan",
        "number": 22,
        "apartment": "3 tr",
        "door_code": "1234",
        "city": "Stockholm",
        "coordinates": {"lat": 59.34, "lng": 18.04},
    }
    assert opened["host_names"] == ["Anna", "Björn"]
    # earlier layers stay revealed
    assert len(opened["clues"]) == 2
    assert opened["street"]["name"] == "Rörstrandsgatan"


def test_guest_never_sees_allergy_summary():
    for hour, minute in ((12, 0), (14, 30), (16, 0)):
        assert _course(_status(20, utc(2026, 5, 16, hour, minute)))["allergies_summary"] is None


def test_single_clue_at_clue_2_gets_street_hint():
    # Host removed facts after matching: index 9 no longer exists
    clues = {(10, "starter"): [0, 9]}

    clue_1 = _course(_status(20, utc(2026, 5, 16, 14, 30), course_clues=clues))
    assert len(clue_1["clues"]) == 1
    assert clue_1["filler"] is None

    clue_2 = _course(_status(20, utc(2026, 5, 16, 15, 35), course_clues=clues))
    assert [c["text"] for c in clue_2["clues"]] == ["Har husdjur: katt"]
    assert clue_2["filler"] is None
    assert clue_2["street_hint"] == "Rörstrandsgatan"


def test_only_second_clue_valid_still_gets_street_hint():
    clues = {(10, "starter"): [9, 0]}

    clue_1 = _course(_status(20, utc(2026, 5, 16, 14, 30), course_clues=clues))
    assert clue_1["clues"] == []
    assert clue_1["filler"] == {"kind": "lips_sealed", **DEFAULT_LIPS_SEALED[0]}

    clue_2 = _course(_status(20, utc(2026, 5, 16, 15, 35), course_clues=clues))
    assert [c["text"] for c in clue_2["clues"]] == ["Har husdjur: katt"]
    assert clue_2["filler"] is None
    assert clue_2["street_hint"] == "Rörstrandsgatan"


def test_no_clues_at_all_is_lips_sealed_without_hint():
    clues = {(10, "starter"): [8, 9]}

    clue_2 = _course(_status(20, utc(2026, 5, 16, 15, 35), course_clues=clues))
    assert clue_2["clues"] == []
    assert clue_2["filler"] == {"kind": "lips_sealed", **DEFAULT_LIPS_SEALED[1]}
    assert clue_2["street_hint"] is None


def test_first_clue_out_of_range_at_clue_1_is_lips_sealed():
    # Host still has facts, but the index for the first clue points past them
    clues = {(10, "starter"): [7, 0]}
    clue_1 = _course(_status(20, utc(2026, 5, 16, 14, 30), course_clues=clues))

    assert clue_1["state"] == "CLUE_1"
    assert clue_1["host_has_fun_facts"] is True
    assert clue_1["clues"] == []
    assert clue_1["filler"] == {"kind": "lips_sealed", **DEFAULT_LIPS_SEALED[0]}
    # the street hint only compensates a missing second clue
    assert clue_1["street_hint"] is None
    assert clue_1["clue_pool"] is not None


def test_single_clue_without_street_info_has_no_hint():
    clues = {(10, "starter"): [0, 9]}
    clue_2 = _course(_status(20, utc(2026, 5, 16, 15, 35), course_clues=clues, street_infos=[]))
    assert len(clue_2["clues"]) == 1
    assert clue_2["filler"] is None
    assert clue_2["street_hint"] is None


def test_street_reached_without_number_or_open_scheduled():
    envelopes, *_ = starter_table()
    schedule = {**SCHEDULE, "number_at": None, "opened_at": None}
    envelopes[1] = make_envelope(2, 20, "starter", 10, schedule=schedule, cycling_distance_km=2.4)

    starter = _course(_status(20, utc(2026, 5, 16, 15, 50), envelopes=envelopes))
    assert starter["state"] == "STREET"
    assert starter["number"] is None
    assert starter["street"]["range"] == "12-40"
    assert starter["next_reveal"] is None
    assert starter["full_address"] is None


def test_host_without_facts_is_a_mystery():
    envelopes, couples, clues, streets = starter_table()
    couples[3] = make_couple(40, "Frida")

    clue_1 = _course(_status(50, utc(2026, 5, 16, 14, 30), couples=couples))
    assert clue_1["clues"] == []
    assert clue_1["host_has_fun_facts"] is False
    assert clue_1["filler"] == {"kind": "mystery_host", **DEFAULT_MYSTERY_HOST[0]}
    # only the other guest's facts are left to guess from
    assert clue_1["clue_pool"] == ["Samlar på frimärken"]


def test_self_host_gets_filler_and_allergies_never_clues():
    locked = _course(_status(10, utc(2026, 5, 16, 9, 0)))
    assert locked["state"] == "LOCKED"
    assert locked["is_self_host"] is True
    assert locked["allergies_summary"] is None

    expected_allergies = [
        "Gluten (1 pers)",
        "Laktos (1 pers)",
        "Nötter (2 pers)",
        "Cecilia: fiskallergi men ok med skaldjur",
    ]

    for slot, now in enumerate((utc(2026, 5, 16, 14, 30), utc(2026, 5, 16, 15, 35))):
        course = _course(_status(10, now))
        assert course["clues"] == []
        assert course["clue_pool"] is None
        assert course["filler"] == {"kind": "host_self", **DEFAULT_HOST_SELF[slot]}
        assert course["allergies_summary"] == expected_allergies

    opened = _course(_status(10, utc(2026, 5, 16, 16, 0)))
    assert opened["clues"] == []
    assert opened["filler"] is None
    assert opened["allergies_summary"] == expected_allergies


def test_missing_street_info_leaves_address_empty():
    street = _course(_status(50, utc(2026, 5, 16, 15, 50)))
    assert street["state"] == "STREET"
    assert street["street"] is None

    opened = _course(_status(50, utc(2026, 5, 16, 16, 0)))
    assert opened["full_address"] == {
        "street": None,
        "number": None,
        "apartment": None,
        "door_code": None,
        "city": None,
        "coordinates": None,
    }
    assert opened["host_names"] == ["Frida"]


def test_cancelled_envelopes_are_ignored():
    envelopes, *_ = starter_table()
    envelopes[2] = make_envelope(3, 30, "starter", 10, cancelled=True)

    guest = _course(_status(20, utc(2026, 5, 16, 14, 30), envelopes=envelopes))
    assert "Spelar dragspel" not in guest["clue_pool"]
    assert len(guest["clue_pool"]) == 5

    erik = _course(_status(30, utc(2026, 5, 16, 14, 30), envelopes=envelopes))
    assert erik["state"] == "LOCKED"


def test_same_now_same_payload():
    now = utc(2026, 5, 16, 14, 30)
    first = _status(20, now, rng=random.Random(7))
    second = _status(20, now, rng=random.Random(7))
    assert first == second

    # without a seeded rng only the pool order may differ
    third = _status(20, now)
    for a, b in zip(first["courses"], third["courses"]):
        assert {k: v for k, v in a.items() if k != "clue_pool"} == {k: v for k, v in b.items() if k != "clue_pool"}
        assert sorted(a["clue_pool"] or []) == sorted(b["clue_pool"] or [])


def test_event_catalog_override_reaches_filler():
    event = make_event(host_self_messages=[{"emoji": "🍷", "text": "Det är du som bjuder!"}])
    course = _course(_status(10, utc(2026, 5, 16, 15, 35), event=event))
    # single message: both slots wrap to it
    assert course["filler"] == {"kind": "host_self", "emoji": "🍷", "text": "Det är du som bjuder!"}


def test_afterparty_course_only_when_enveloped():
    envelopes, *_ = starter_table()
    envelopes.append(make_envelope(6, 20, "afterparty", None, schedule={}, cycling_distance_km=1.5))

    t = utc(2026, 5, 16, 21, 0)

    teasing = _status(20, t - timedelta(minutes=10), envelopes=envelopes)
    assert [c["type"] for c in teasing["courses"]] == ["starter", "main", "dessert", "afterparty"]
    party = _course(teasing, "afterparty")
    assert party["state"] == "TEASING"
    assert party["starts_at"] == "2026-05-16T21:00:00Z"
    assert party["afterparty_time"] == "23:00"
    assert party["full_address"] is None
    assert party["next_reveal"] == {"type": "OPEN", "at": "2026-05-16T21:00:00Z", "in_seconds": 600}

    opened = _course(_status(20, t, envelopes=envelopes), "afterparty")
    assert opened["state"] == "OPEN"
    assert opened["full_address"]["street"] == "Sveavägen 100"
    assert opened["cycling_estimates"]["sober"] == {"label": "Nykter", "minutes": 6}
    assert opened["afterparty_hosts"] == ["Greta", "Hugo"]

    # couple 30 has no afterparty envelope
    assert len(_status(30, t, envelopes=envelopes)["courses"]) == 3
