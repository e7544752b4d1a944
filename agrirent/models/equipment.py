from agrirent.extensions import db
from agrirent.models.profile import utcnow

EQUIPMENT_CATEGORIES = ('Tractor', 'Harvester', 'Implement', 'Seeder', 'Irrigation', 'Other')

class Equipment(db.Model):
    __tablename__ = 'equipment'

    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey('profiles.id'), nullable=False, index=True)
    name = db.Column(db.String(150), nullable=False)
    description = db.Column(db.Text, default='')
    category = db.Column(db.String(20), nullable=False, index=True)
    price_per_day = db.Column(db.Float, nullable=False)
    location = db.Column(db.String(200), nullable=False)
    image_url = db.Column(db.String(255))
    is_available = db.Column(db.Boolean, default=True, nullable=False, index=True)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow, index=True)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    bookings = db.relationship('Booking', backref='equipment', lazy='dynamic')

    __table_args__ = (
        db.CheckConstraint('price_per_day > 0', name='ck_equipment_price_positive'),
    )

    def __repr__(self):
        return f"Equipment('{self.name}', '{self.category}', {self.price_per_day})"
