import datetime
import logging
import math

from agrirent.extensions import session_management
from agrirent.models.booking import (
    Booking, BOOKING_CONFIRMED, BOOKING_DELIVERED, PAYMENT_PENDING, PAYMENT_PAID
)
from agrirent.models.profile import utcnow

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


class BookingError(Exception):
    """Booking cannot be made; the message is shown to the renter."""


class InvalidRentalPeriod(BookingError):
    pass


def _as_datetime(value):
    if isinstance(value, datetime.datetime):
        return value
    return datetime.datetime.combine(value, datetime.time.min)


def rental_duration_days(start, end):
    """Whole days billed for a rental: partial days round up, never less than one."""
    seconds = (_as_datetime(end) - _as_datetime(start)).total_seconds()
    return max(1, math.ceil(seconds / SECONDS_PER_DAY))


def calculate_total_cost(price_per_day, start, end):
    return price_per_day * rental_duration_days(start, end)


def validate_rental_period(start, end):
    if start is None or end is None:
        raise InvalidRentalPeriod('Please select both a start and an end date.')
    if _as_datetime(end) <= _as_datetime(start):
        raise InvalidRentalPeriod('End date must be after the start date.')


def default_rental_period(today=None):
    today = today or datetime.date.today()
    return today, today + datetime.timedelta(days=1)


def check_bookable(equipment, owner, renter):
    if equipment is None:
        raise BookingError('This equipment could not be found.')
    if owner is None:
        raise BookingError("The equipment owner's details are unavailable.")
    if renter is None:
        raise BookingError('Your profile could not be loaded.')
    if not equipment.is_available:
        raise BookingError('This equipment is no longer available for rent.')


def create_booking(equipment, owner, renter, start, end):
    """Insert a confirmed, unpaid booking with the renter's and owner's contact details copied in."""
    check_bookable(equipment, owner, renter)
    validate_rental_period(start, end)

    booking = Booking(
        equipment_id=equipment.id,
        owner_id=owner.id,
        renter_id=renter.id,
        equipment_name=equipment.name,
        equipment_type=equipment.category,
        rental_start_date=start,
        rental_end_date=end,
        total_cost=calculate_total_cost(equipment.price_per_day, start, end),
        booking_status=BOOKING_CONFIRMED,
        payment_status=PAYMENT_PENDING,
        renter_name=renter.full_name,
        renter_phone=renter.phone or '',
        renter_location=renter.location,
        owner_name=owner.full_name,
        owner_phone=owner.phone or ''
    )
    with session_management() as session:
        session.add(booking)
    logger.info("Booking %s created: renter %s, equipment %s, total %.2f",
                booking.id, renter.id, equipment.id, booking.total_cost)
    return booking


def mark_as_paid(booking):
    """Cash collected on delivery. Applying it again leaves the booking unchanged in effect."""
    with session_management():
        booking.payment_status = PAYMENT_PAID
        booking.booking_status = BOOKING_DELIVERED
        booking.updated_at = utcnow()
    logger.info("Booking %s marked as paid", booking.id)
    return booking


def renter_bookings(renter_id):
    return (Booking.query
            .filter_by(renter_id=renter_id)
            .order_by(Booking.created_at.desc(), Booking.id.desc())
            .all())


def owner_bookings(owner_id):
    return (Booking.query
            .filter_by(owner_id=owner_id)
            .order_by(Booking.created_at.desc(), Booking.id.desc())
            .all())


def split_by_payment(bookings):
    pending = [b for b in bookings if b.payment_status == PAYMENT_PENDING]
    paid = [b for b in bookings if b.payment_status == PAYMENT_PAID]
    return pending, paid
