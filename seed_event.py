# seed_event.py
"""
Demo data: one event with N couples, a match plan, a full reveal schedule
and afterparty envelopes. Handy for poking at /api/envelope/status locally.

    python seed_event.py "Cykelfesten Vasastan" 12
"""
import random
import sys
from datetime import date, time, timedelta

from dinnersafari.run import api
from dinnersafari.extensions import db
from dinnersafari.models import COURSES, AFTERPARTY, Couple, CourseClue, Envelope, Event, MatchPlan, StreetInfo
from dinnersafari.helpers.geo import haversine_km, random_offset
from dinnersafari.helpers.time import local_to_utc
from dinnersafari.helpers.url import slugify

CITY_CENTER = (59.3420, 18.0500)
AFTERPARTY_SPOT = (59.3450, 18.0550)

# Reveal schedule relative to each course start
TEASING_BEFORE = timedelta(hours=6)
CLUE_1_BEFORE = timedelta(hours=2)
CLUE_2_BEFORE = timedelta(minutes=30)
STREET_BEFORE = timedelta(minutes=15)
NUMBER_BEFORE = timedelta(minutes=5)

COURSE_TIMES = {"starter": time(18, 0), "main": time(19, 30), "dessert": time(21, 0)}

NAMES = [
    "Anna", "Björn", "Cecilia", "David", "Elin", "Fredrik", "Greta", "Hugo",
    "Ida", "Johan", "Klara", "Lars", "Maja", "Nils", "Olivia", "Per",
    "Rut", "Sven", "Tove", "Ulf", "Vera", "Axel", "Wilma", "Oskar",
]

STREETS = ["Rörstrandsgatan", "Upplandsgatan", "Dalagatan", "Odengatan", "Sankt Eriksgatan"]

FUN_FACTS = [
    {"pet": "katt", "talent": "jonglera"},
    {"musicDecade": "80", "sport": "padel"},
    {"firstJob": "glassförsäljare", "dreamDestination": "Japan"},
    {"instruments": "dragspel", "importantYear": "1999"},
    ["Har bestigit Kebnekaise", "Har bott i Lissabon"],
    {"unknownFact": "Har träffat kungen"},
]


def reveal_schedule(starts_at):
    return {
        "teasing_at": starts_at - TEASING_BEFORE,
        "clue_1_at": starts_at - CLUE_1_BEFORE,
        "clue_2_at": starts_at - CLUE_2_BEFORE,
        "street_at": starts_at - STREET_BEFORE,
        "number_at": starts_at - NUMBER_BEFORE,
        "opened_at": starts_at,
    }


def seat_course(couples, course_index):
    """
    Every third couple hosts this course; the rest are spread across them.
    Rotating by course_index means nobody hosts twice.
    """
    hosts = couples[course_index::3]
    guests = [c for i, c in enumerate(couples) if i % 3 != course_index]
    random.shuffle(guests)

    seating = {h.id: h.id for h in hosts}
    for i, guest in enumerate(guests):
        seating[guest.id] = hosts[i % len(hosts)].id
    return seating


def main(name="Cykelfesten Vasastan", num_couples=12):
    if num_couples < 3 or num_couples % 3:
        raise SystemExit("num_couples must be a positive multiple of 3")

    with api.app_context():
        event_day = date.today() + timedelta(days=1)

        event = Event(
            name=name,
            slug=slugify(name),
            event_date=event_day,
            starter_time=COURSE_TIMES["starter"],
            main_time=COURSE_TIMES["main"],
            dessert_time=COURSE_TIMES["dessert"],
            afterparty_time=time(23, 0),
            afterparty_byob=True,
            afterparty_notes="Ta med dansskor",
            afterparty_location="Sveavägen 100",
            afterparty_lat=AFTERPARTY_SPOT[0],
            afterparty_lng=AFTERPARTY_SPOT[1],
            afterparty_door_code="4242",
            afterparty_hosts="Greta & Hugo",
        )
        db.session.add(event)
        db.session.flush()

        plan = MatchPlan(event_id=event.id, version=1)
        db.session.add(plan)
        db.session.flush()
        event.active_match_plan_id = plan.id

        couples = []
        for i in range(num_couples):
            spot = random_offset(CITY_CENTER[0], CITY_CENTER[1], 200, 1500)
            couple = Couple(
                event_id=event.id,
                invited_name=NAMES[(2 * i) % len(NAMES)],
                # every fourth signs up alone
                partner_name=None if i % 4 == 3 else NAMES[(2 * i + 1) % len(NAMES)],
                lat=spot["lat"],
                lng=spot["lng"],
                invited_fun_facts=random.choice(FUN_FACTS),
                invited_allergies=random.choice([[], ["gluten"], ["nötter"], ["laktos", "gluten"]]),
            )
            couples.append(couple)
        db.session.add_all(couples)
        db.session.flush()

        by_id = {c.id: c for c in couples}

        for course_index, course in enumerate(COURSES):
            starts_at = local_to_utc(event_day, COURSE_TIMES[course], api.config["EVENT_TIMEZONE"])
            for couple_id, host_id in seat_course(couples, course_index).items():
                host = by_id[host_id]
                guest = by_id[couple_id]
                km = round(haversine_km(guest.lat, guest.lng, host.lat, host.lng), 1)
                db.session.add(Envelope(
                    match_plan_id=plan.id,
                    couple_id=couple_id,
                    course=course,
                    host_couple_id=host_id,
                    cycling_distance_km=0.0 if couple_id == host_id else km,
                    **reveal_schedule(starts_at),
                ))

            for host in couples[course_index::3]:
                db.session.add(CourseClue(couple_id=host.id, course_type=course, clue_indices=[0, 1]))

        for couple in couples:
            low = random.randint(1, 20)
            db.session.add(StreetInfo(
                couple_id=couple.id,
                street_name=random.choice(STREETS),
                number_range_low=low,
                number_range_high=low + 20,
                street_number=low + random.randint(0, 20),
                door_code=f"{random.randint(1000, 9999)}",
                city="Stockholm",
            ))

            zone = random_offset(AFTERPARTY_SPOT[0], AFTERPARTY_SPOT[1], 150, 400)
            closing = random_offset(AFTERPARTY_SPOT[0], AFTERPARTY_SPOT[1], 30, 80)
            db.session.add(Envelope(
                match_plan_id=plan.id,
                couple_id=couple.id,
                course=AFTERPARTY,
                zone_lat=zone["lat"],
                zone_lng=zone["lng"],
                closing_lat=closing["lat"],
                closing_lng=closing["lng"],
            ))

        db.session.commit()
        print(f"Seeded event {event.id} ({event.slug}) with {num_couples} couples on {event_day}.")
        print(f"Try: /api/envelope/status?eventId={event.id}&coupleId={couples[0].id}")


if __name__ == "__main__":
    name = sys.argv[1] if len(sys.argv) > 1 else "Cykelfesten Vasastan"
    count = int(sys.argv[2]) if len(sys.argv) > 2 else 12
    main(name, count)
