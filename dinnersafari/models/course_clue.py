from datetime import datetime, timezone
from sqlalchemy import UniqueConstraint
from dinnersafari.extensions import db

class CourseClue(db.Model):
    __tablename__ = "course_clue"

    id = db.Column(db.Integer, primary_key=True)

    # The HOST couple whose facts are being pointed at
    couple_id = db.Column(
        db.Integer,
        db.ForeignKey("couple.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    course_type = db.Column(db.String(20), nullable=False)

    # Indices into invited_fun_facts + partner_fun_facts, e.g. [2, 3]
    clue_indices = db.Column(db.JSON, nullable=False, default=list)

    allocated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("couple_id", "course_type", name="uq_course_clue_couple_course"),
    )
