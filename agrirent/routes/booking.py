import logging

from flask import Blueprint, render_template, request, redirect, url_for, flash, g, current_app, abort
from sqlalchemy.exc import SQLAlchemyError

from agrirent.extensions import db
from agrirent.forms.forms import CheckoutForm
from agrirent.models.booking import Booking
from agrirent.models.equipment import Equipment
from agrirent.models.profile import Profile
from agrirent.services import booking_service, notification_service
from agrirent.services.log_service import log_event
from agrirent.services.retry import retrieve_from_config

logger = logging.getLogger(__name__)

booking = Blueprint('booking', __name__)

def _load_checkout(equipment_id):
    """Equipment, its owner and the renter; any of them may be None."""
    equipment = db.session.get(Equipment, equipment_id) if equipment_id else None
    owner = db.session.get(Profile, equipment.owner_id) if equipment else None
    renter = db.session.get(Profile, g.session_ctx.profile.id)
    return equipment, owner, renter

def _cannot_process(message):
    return render_template('checkout_error.html', message=message), 400

@booking.route('/booking/checkout', methods=['GET', 'POST'])
def checkout():
    equipment_id = request.args.get('equipment_id', type=int)
    try:
        equipment, owner, renter = _load_checkout(equipment_id)
        booking_service.check_bookable(equipment, owner, renter)
    except booking_service.BookingError as e:
        return _cannot_process(str(e))
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Error loading checkout for equipment %s: %s", equipment_id, e)
        return _cannot_process('We could not load the booking details. Please try again.')

    form = CheckoutForm()
    if request.method == 'GET':
        form.start_date.data, form.end_date.data = booking_service.default_rental_period()

    error = None
    if form.validate_on_submit():
        try:
            new_booking = booking_service.create_booking(
                equipment, owner, renter, form.start_date.data, form.end_date.data
            )
        except booking_service.BookingError as e:
            error = str(e)
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("Booking error for equipment %s: %s", equipment.id, e)
            error = 'Failed to create booking. Please try again.'
        else:
            log_event("Booking Created", "SUCCESS",
                      {"booking_id": new_booking.id, "equipment_id": equipment.id, "total_cost": new_booking.total_cost},
                      profile_id=renter.id, ip_address=request.remote_addr)
            notification_service.send_booking_confirmation(new_booking)
            return redirect(url_for('booking.success', id=new_booking.id))

    start, end = form.start_date.data, form.end_date.data
    duration_days = total_cost = None
    if start and end and end > start:
        duration_days = booking_service.rental_duration_days(start, end)
        total_cost = booking_service.calculate_total_cost(equipment.price_per_day, start, end)

    return render_template('checkout.html', form=form, equipment=equipment, owner=owner, renter=renter,
                           duration_days=duration_days, total_cost=total_cost, error=error)

@booking.route('/booking/success')
def success():
    booking_id = request.args.get('id', type=int)
    found = None
    if booking_id:
        found = retrieve_from_config(lambda: db.session.get(Booking, booking_id), current_app.config)
    if found is not None and g.session_ctx.profile.id not in (found.renter_id, found.owner_id):
        abort(404)
    return render_template('booking_success.html', booking=found)

@booking.route('/bookings')
def my_bookings():
    try:
        bookings = booking_service.renter_bookings(g.session_ctx.profile.id)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Error fetching bookings: %s", e)
        flash('Your bookings could not be loaded. Please try again.', 'danger')
        bookings = []
    return render_template('bookings.html', bookings=bookings)
