from agrirent.extensions import db
from agrirent.models.profile import utcnow

BOOKING_CONFIRMED = 'confirmed'
BOOKING_DELIVERED = 'delivered'
BOOKING_COMPLETED = 'completed'
BOOKING_CANCELLED = 'cancelled'
BOOKING_STATUSES = (BOOKING_CONFIRMED, BOOKING_DELIVERED, BOOKING_COMPLETED, BOOKING_CANCELLED)

PAYMENT_PENDING = 'pending'
PAYMENT_PAID = 'paid'
PAYMENT_STATUSES = (PAYMENT_PENDING, PAYMENT_PAID)

class Booking(db.Model):
    __tablename__ = 'bookings'

    id = db.Column(db.Integer, primary_key=True)
    equipment_id = db.Column(db.Integer, db.ForeignKey('equipment.id'), nullable=False, index=True)
    owner_id = db.Column(db.Integer, db.ForeignKey('profiles.id'), nullable=False, index=True)
    renter_id = db.Column(db.Integer, db.ForeignKey('profiles.id'), nullable=False, index=True)

    # Snapshot taken when the booking is made
    equipment_name = db.Column(db.String(150), nullable=False)
    equipment_type = db.Column(db.String(20), nullable=False)
    renter_name = db.Column(db.String(150), nullable=False)
    renter_phone = db.Column(db.String(20))
    renter_location = db.Column(db.String(200))
    owner_name = db.Column(db.String(150), nullable=False)
    owner_phone = db.Column(db.String(20))

    rental_start_date = db.Column(db.Date, nullable=False)
    rental_end_date = db.Column(db.Date, nullable=False)
    total_cost = db.Column(db.Float, nullable=False)
    booking_status = db.Column(db.String(12), nullable=False, default=BOOKING_CONFIRMED, index=True)
    payment_status = db.Column(db.String(10), nullable=False, default=PAYMENT_PENDING, index=True)

    created_at = db.Column(db.DateTime(timezone=True), default=utcnow, index=True)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    renter = db.relationship('Profile', foreign_keys=[renter_id])
    owner = db.relationship('Profile', foreign_keys=[owner_id])

    __table_args__ = (
        db.CheckConstraint('rental_end_date > rental_start_date', name='ck_booking_period'),
    )

    def __repr__(self):
        return f"Booking(Equipment: {self.equipment_id}, Renter: {self.renter_id}, {self.rental_start_date} -> {self.rental_end_date})"

    @property
    def is_paid(self):
        return self.payment_status == PAYMENT_PAID

    @property
    def duration_days(self):
        return (self.rental_end_date - self.rental_start_date).days
