import datetime

import pytest

from agrirent.extensions import db
from agrirent.models import Booking, Equipment, Profile
from agrirent.services import booking_service

from conftest import make_equipment


D = datetime.date


def test_duration_counts_whole_days():
    assert booking_service.rental_duration_days(D(2024, 3, 15), D(2024, 3, 20)) == 5
    assert booking_service.rental_duration_days(D(2024, 3, 15), D(2024, 3, 16)) == 1


def test_duration_rounds_partial_days_up():
    start = datetime.datetime(2024, 3, 15, 8, 0)
    assert booking_service.rental_duration_days(start, start + datetime.timedelta(hours=30)) == 2
    assert booking_service.rental_duration_days(start, start + datetime.timedelta(hours=2)) == 1


def test_total_cost_is_price_times_days():
    assert booking_service.calculate_total_cost(3000, D(2024, 3, 15), D(2024, 3, 20)) == 15000
    assert booking_service.calculate_total_cost(1250.5, D(2024, 1, 1), D(2024, 1, 3)) == 2501.0


@pytest.mark.parametrize('start, end', [
    (D(2024, 3, 15), D(2024, 3, 15)),
    (D(2024, 3, 15), D(2024, 3, 14)),
    (None, D(2024, 3, 14)),
])
def test_invalid_periods_are_rejected(start, end):
    with pytest.raises(booking_service.InvalidRentalPeriod):
        booking_service.validate_rental_period(start, end)


def test_default_period_is_today_to_tomorrow():
    start, end = booking_service.default_rental_period(D(2024, 12, 31))
    assert (start, end) == (D(2024, 12, 31), D(2025, 1, 1))


def test_create_booking_snapshots_contacts(app, farmer_id, owner_id):
    equipment_id = make_equipment(app, owner_id)
    with app.app_context():
        equipment = db.session.get(Equipment, equipment_id)
        owner = db.session.get(Profile, owner_id)
        renter = db.session.get(Profile, farmer_id)

        booking = booking_service.create_booking(equipment, owner, renter, D(2024, 3, 15), D(2024, 3, 18))

        assert booking.booking_status == 'confirmed'
        assert booking.payment_status == 'pending'
        assert booking.total_cost == 4500.0
        assert booking.equipment_name == 'John Deere Tractor'
        assert booking.equipment_type == 'Tractor'
        assert booking.renter_name == 'Ravi Kumar'
        assert booking.renter_phone == '+91 98765 43210'
        assert booking.renter_location == 'Village Madhopur, Punjab'
        assert booking.owner_name == 'Amit Singh'
        assert booking.owner_phone == '+91 98123 45678'

        # Later profile edits do not rewrite the booking
        renter.phone = '000'
        db.session.commit()
        assert db.session.get(Booking, booking.id).renter_phone == '+91 98765 43210'


def test_create_booking_rejects_bad_period_without_writing(app, farmer_id, owner_id):
    equipment_id = make_equipment(app, owner_id)
    with app.app_context():
        equipment = db.session.get(Equipment, equipment_id)
        owner = db.session.get(Profile, owner_id)
        renter = db.session.get(Profile, farmer_id)

        with pytest.raises(booking_service.InvalidRentalPeriod):
            booking_service.create_booking(equipment, owner, renter, D(2024, 3, 15), D(2024, 3, 15))
        assert Booking.query.count() == 0


def test_create_booking_requires_all_parties(app, farmer_id, owner_id):
    equipment_id = make_equipment(app, owner_id, is_available=False)
    with app.app_context():
        equipment = db.session.get(Equipment, equipment_id)
        owner = db.session.get(Profile, owner_id)
        renter = db.session.get(Profile, farmer_id)

        with pytest.raises(booking_service.BookingError):
            booking_service.create_booking(None, owner, renter, D(2024, 3, 15), D(2024, 3, 16))
        with pytest.raises(booking_service.BookingError):
            booking_service.create_booking(equipment, None, renter, D(2024, 3, 15), D(2024, 3, 16))
        with pytest.raises(booking_service.BookingError, match='no longer available'):
            booking_service.create_booking(equipment, owner, renter, D(2024, 3, 15), D(2024, 3, 16))
        assert Booking.query.count() == 0


def test_mark_as_paid_is_idempotent(app, farmer_id, owner_id):
    equipment_id = make_equipment(app, owner_id)
    with app.app_context():
        equipment = db.session.get(Equipment, equipment_id)
        booking = booking_service.create_booking(
            equipment, db.session.get(Profile, owner_id), db.session.get(Profile, farmer_id),
            D(2024, 3, 15), D(2024, 3, 16)
        )

        booking_service.mark_as_paid(booking)
        assert (booking.payment_status, booking.booking_status) == ('paid', 'delivered')

        booking_service.mark_as_paid(booking)
        assert (booking.payment_status, booking.booking_status) == ('paid', 'delivered')
        assert booking.total_cost == 1500.0


def test_split_by_payment():
    pending = Booking(payment_status='pending')
    paid = Booking(payment_status='paid')
    assert booking_service.split_by_payment([pending, paid]) == ([pending], [paid])
