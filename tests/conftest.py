from datetime import time

import pytest

from dinnersafari import create_app
from dinnersafari.config import Config
from dinnersafari.extensions import db as _db
from dinnersafari.models import Couple, CourseClue, Envelope, Event, MatchPlan, StreetInfo
from dinnersafari.routes import register_blueprints

from tests.factories import EVENT_DATE, SCHEDULE, utc


class ConfigForTests(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SECRET_KEY = "test-secret-key"
    TOKEN_SECRET = "test-token-secret"
    TOKEN_EXPIRY_DAYS = 30
    ADMIN_PASSWORD = "pw"
    EVENT_TIMEZONE = "Europe/Stockholm"
    AFTERPARTY_TEASE_MINUTES = 30


@pytest.fixture
def app():
    app = create_app(ConfigForTests)
    register_blueprints(app)

    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def organizer(client):
    resp = client.post("/admin/api/login", json={"password": "pw"})
    assert resp.status_code == 200
    return client


@pytest.fixture
def dinner(app):
    """
    A seeded event: Anna & Björn host the starter for Cecilia & David and Erik.
    Cecilia & David also have an afterparty envelope.
    """

    event = Event(
        name="Cykelfesten Vasastan",
        slug="cykelfesten-vasastan",
        event_date=EVENT_DATE,
        starter_time=time(18, 0),
        main_time=time(19, 30),
        dessert_time=time(21, 0),
        afterparty_time=time(23, 0),
        afterparty_byob=True,
        afterparty_location="Sveavägen 100",
        afterparty_lat=59.3450,
        afterparty_lng=18.0550,
        afterparty_door_code="4242",
    )
    _db.session.add(event)
    _db.session.flush()

    plan = MatchPlan(event_id=event.id, version=1)
    _db.session.add(plan)
    _db.session.flush()
    event.active_match_plan_id = plan.id

    host = Couple(
        event_id=event.id, invited_name="Anna", partner_name="Björn",
        lat=59.3400, lng=18.0400,
        invited_fun_facts={"pet": "katt", "talent": "jonglera"},
        partner_fun_facts=["Har bestigit Kebnekaise"],
    )
    guest = Couple(
        event_id=event.id, invited_name="Cecilia", partner_name="David",
        invited_fun_facts=["Har bott i Japan"],
        invited_allergies=["Nötter"], partner_allergies=["nötter"],
    )
    solo = Couple(
        event_id=event.id, invited_name="Erik",
        invited_fun_facts=["Spelar dragspel"],
    )
    _db.session.add_all([host, guest, solo])
    _db.session.flush()

    envelopes = [
        Envelope(match_plan_id=plan.id, couple_id=host.id, course="starter", host_couple_id=host.id, **SCHEDULE),
        Envelope(match_plan_id=plan.id, couple_id=guest.id, course="starter", host_couple_id=host.id,
                 cycling_distance_km=2.4, **SCHEDULE),
        Envelope(match_plan_id=plan.id, couple_id=solo.id, course="starter", host_couple_id=host.id, **SCHEDULE),
        Envelope(match_plan_id=plan.id, couple_id=guest.id, course="afterparty", host_couple_id=None,
                 scheduled_at=utc(2026, 5, 16, 21, 0), destination_address="Sveavägen 100",
                 destination_notes="4242", cycling_distance_km=1.5),
    ]
    _db.session.add_all(envelopes)

    _db.session.add(CourseClue(couple_id=host.id, course_type="starter", clue_indices=[0, 2]))
    _db.session.add(StreetInfo(
        couple_id=host.id, street_name="Rörstrandsgatan",
        number_range_low=12, number_range_high=40, street_number=22,
        apartment="3 tr", door_code="1234", city="Stockholm",
    ))
    _db.session.commit()

    return {
        "event_id": event.id,
        "host_id": host.id,
        "guest_id": guest.id,
        "solo_id": solo.id,
        "guest_starter_id": envelopes[1].id,
    }
