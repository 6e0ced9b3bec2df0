from datetime import datetime, timezone
from dinnersafari.extensions import db

class Couple(db.Model):
    __tablename__ = "couple"

    id = db.Column(db.Integer, primary_key=True)

    event_id = db.Column(
        db.Integer,
        db.ForeignKey("event.id"),
        nullable=False,
        index=True,
    )

    invited_name = db.Column(db.String(120), nullable=False)
    # Null for people signing up alone
    partner_name = db.Column(db.String(120), nullable=True)

    address = db.Column(db.String(255), nullable=True)
    lat = db.Column(db.Float, nullable=True)
    lng = db.Column(db.Float, nullable=True)

    # Either a legacy list of strings or an object keyed by fun-fact field
    invited_fun_facts = db.Column(db.JSON, nullable=True)
    partner_fun_facts = db.Column(db.JSON, nullable=True)

    invited_allergies = db.Column(db.JSON, nullable=True)
    partner_allergies = db.Column(db.JSON, nullable=True)
    # Allergies of a stand-in who replaced the invited person
    replacement_allergies = db.Column(db.JSON, nullable=True)
    invited_allergy_notes = db.Column(db.Text, nullable=True)
    partner_allergy_notes = db.Column(db.Text, nullable=True)

    confirmed = db.Column(db.Boolean, nullable=False, default=True)
    cancelled = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    event = db.relationship("Event", back_populates="couples")

    @property
    def display_names(self) -> list[str]:
        return [n for n in (self.invited_name, self.partner_name) if n]
