from datetime import datetime, timezone
from sqlalchemy import UniqueConstraint
from dinnersafari.extensions import db

COURSES = ("starter", "main", "dessert")
AFTERPARTY = "afterparty"

class Envelope(db.Model):
    __tablename__ = "envelope"

    id = db.Column(db.Integer, primary_key=True)

    match_plan_id = db.Column(
        db.Integer,
        db.ForeignKey("match_plan.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # The guest couple this envelope is shown to
    couple_id = db.Column(
        db.Integer,
        db.ForeignKey("couple.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    course = db.Column(db.String(20), nullable=False)  # 'starter','main','dessert','afterparty'

    # Null until matching has assigned a host (always null for the afterparty)
    host_couple_id = db.Column(
        db.Integer,
        db.ForeignKey("couple.id"),
        nullable=True,
        index=True,
    )

    # Reveal schedule, set upstream; expected non-decreasing in this order
    teasing_at = db.Column(db.DateTime(timezone=True), nullable=True)
    clue_1_at = db.Column(db.DateTime(timezone=True), nullable=True)
    clue_2_at = db.Column(db.DateTime(timezone=True), nullable=True)
    street_at = db.Column(db.DateTime(timezone=True), nullable=True)
    number_at = db.Column(db.DateTime(timezone=True), nullable=True)
    opened_at = db.Column(db.DateTime(timezone=True), nullable=True)

    # Host resigned or guest dropped out; row is never shown again
    cancelled = db.Column(db.Boolean, nullable=False, default=False)

    cycling_distance_km = db.Column(db.Float, nullable=True)

    # --- Afterparty only ---
    scheduled_at = db.Column(db.DateTime(timezone=True), nullable=True)
    destination_address = db.Column(db.String(255), nullable=True)
    destination_notes = db.Column(db.String(255), nullable=True)

    # Randomized centers around the afterparty for the ZONE / CLOSING_IN steps
    zone_lat = db.Column(db.Float, nullable=True)
    zone_lng = db.Column(db.Float, nullable=True)
    zone_radius_m = db.Column(db.Integer, nullable=True)
    closing_lat = db.Column(db.Float, nullable=True)
    closing_lng = db.Column(db.Float, nullable=True)
    closing_radius_m = db.Column(db.Integer, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    couple = db.relationship("Couple", foreign_keys=[couple_id])
    host_couple = db.relationship("Couple", foreign_keys=[host_couple_id])

    __table_args__ = (
        UniqueConstraint("match_plan_id", "couple_id", "course", name="uq_envelope_plan_couple_course"),
    )
