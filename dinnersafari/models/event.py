from datetime import datetime, timezone
from dinnersafari.extensions import db

class Event(db.Model):
    __tablename__ = "event"

    id = db.Column(db.Integer, primary_key=True)

    # Public-facing name, e.g. "Cykelfesten Vasastan"
    name = db.Column(db.String(160), nullable=False)
    slug = db.Column(db.String(160), nullable=False, unique=True)

    # Course times are local wall-clock times (see Config.EVENT_TIMEZONE)
    event_date = db.Column(db.Date, nullable=False)
    starter_time = db.Column(db.Time, nullable=False)
    main_time = db.Column(db.Time, nullable=False)
    dessert_time = db.Column(db.Time, nullable=False)

    # Only envelopes belonging to this plan are ever shown
    active_match_plan_id = db.Column(
        db.Integer,
        db.ForeignKey("match_plan.id", use_alter=True, name="fk_event_active_match_plan"),
        nullable=True,
    )

    # --- Afterparty configuration ---
    afterparty_time = db.Column(db.Time, nullable=True)
    afterparty_byob = db.Column(db.Boolean, nullable=False, default=False)
    afterparty_notes = db.Column(db.Text, nullable=True)
    afterparty_description = db.Column(db.Text, nullable=True)
    afterparty_location = db.Column(db.String(255), nullable=True)
    afterparty_lat = db.Column(db.Float, nullable=True)
    afterparty_lng = db.Column(db.Float, nullable=True)
    afterparty_door_code = db.Column(db.String(40), nullable=True)
    afterparty_hosts = db.Column(db.String(255), nullable=True)

    # Manual organizer overrides; when null the schedule is derived from afterparty_time
    afterparty_teasing_at = db.Column(db.DateTime(timezone=True), nullable=True)
    afterparty_revealed_at = db.Column(db.DateTime(timezone=True), nullable=True)

    # Per-event filler copy, JSON lists of {"emoji": ..., "text": ...}
    host_self_messages = db.Column(db.JSON, nullable=True)
    lips_sealed_messages = db.Column(db.JSON, nullable=True)
    mystery_host_messages = db.Column(db.JSON, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    couples = db.relationship(
        "Couple",
        back_populates="event",
        lazy=True,
    )
