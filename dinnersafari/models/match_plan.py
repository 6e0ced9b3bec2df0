from datetime import datetime, timezone
from dinnersafari.extensions import db

class MatchPlan(db.Model):
    __tablename__ = "match_plan"

    id = db.Column(db.Integer, primary_key=True)
    event_id = db.Column(db.Integer, db.ForeignKey("event.id", ondelete="CASCADE"), nullable=False, index=True)

    # Bumped every time matching is re-run for the event
    version = db.Column(db.Integer, nullable=False, default=1)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
