from dinnersafari.extensions import db

class StreetInfo(db.Model):
    __tablename__ = "street_info"

    id = db.Column(db.Integer, primary_key=True)

    couple_id = db.Column(
        db.Integer,
        db.ForeignKey("couple.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    street_name = db.Column(db.String(160), nullable=True)

    # Public low-resolution range shown at STREET, e.g. 12-40
    number_range_low = db.Column(db.Integer, nullable=True)
    number_range_high = db.Column(db.Integer, nullable=True)

    # Never exposed before NUMBER / OPEN
    street_number = db.Column(db.Integer, nullable=True)
    apartment = db.Column(db.String(40), nullable=True)
    door_code = db.Column(db.String(40), nullable=True)

    city = db.Column(db.String(120), nullable=True)

    @property
    def number_range(self):
        if self.number_range_low is None or self.number_range_high is None:
            return None
        return f"{self.number_range_low}-{self.number_range_high}"
