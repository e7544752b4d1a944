import logging

from flask import Blueprint, render_template, request, redirect, url_for, flash, g, abort, current_app
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import RequestEntityTooLarge

from agrirent.extensions import db
from agrirent.forms.forms import EquipmentForm
from agrirent.models.booking import Booking
from agrirent.models.equipment import Equipment
from agrirent.services import booking_service, catalog_service, stats_service
from agrirent.services.log_service import log_event
from agrirent.services.storage_service import ImageValidationError, too_large_message

logger = logging.getLogger(__name__)

owner = Blueprint('owner', __name__)

TABS = ('bookings', 'equipment')

def _owned_or_404(model, object_id):
    obj = db.get_or_404(model, object_id)
    # Other owners' rows look the same as missing ones
    if obj.owner_id != g.session_ctx.profile.id:
        abort(404)
    return obj

@owner.route('/dashboard')
def dashboard():
    tab = request.args.get('tab', 'bookings')
    if tab not in TABS:
        tab = 'bookings'
    owner_id = g.session_ctx.profile.id

    try:
        bookings = booking_service.owner_bookings(owner_id)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Error fetching bookings for owner %s: %s", owner_id, e)
        flash('Bookings could not be loaded.', 'danger')
        bookings = []

    try:
        equipment = catalog_service.list_owner_equipment(owner_id)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Error fetching equipment for owner %s: %s", owner_id, e)
        flash('Equipment could not be loaded.', 'danger')
        equipment = []

    pending, paid = booking_service.split_by_payment(bookings)
    return render_template('owner_dashboard.html',
                           tab=tab,
                           pending=pending,
                           paid=paid,
                           summary=stats_service.payment_summary(pending, paid),
                           equipment=equipment)

@owner.route('/bookings/<int:booking_id>/mark-paid', methods=['POST'])
def mark_paid(booking_id):
    found = _owned_or_404(Booking, booking_id)
    try:
        booking_service.mark_as_paid(found)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Error updating booking %s: %s", booking_id, e)
        flash('Failed to update booking. Please try again.', 'danger')
    else:
        log_event("Booking Paid", "SUCCESS", {"booking_id": found.id, "total_cost": found.total_cost},
                  profile_id=g.session_ctx.profile.id, ip_address=request.remote_addr)
        flash(f'Booking for {found.equipment_name} marked as paid.', 'success')
    return redirect(url_for('owner.dashboard', tab='bookings'))

@owner.route('/equipment/<int:equipment_id>/toggle', methods=['POST'])
def toggle_equipment(equipment_id):
    equipment = _owned_or_404(Equipment, equipment_id)
    try:
        catalog_service.toggle_availability(equipment)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Error toggling equipment %s: %s", equipment_id, e)
        flash('Failed to update availability. Please try again.', 'danger')
    return redirect(url_for('owner.dashboard', tab='equipment'))

@owner.route('/equipment/add', methods=['GET', 'POST'])
def add_equipment():
    form = EquipmentForm()
    error = None
    if form.validate_on_submit():
        profile = g.session_ctx.profile
        try:
            equipment = catalog_service.add_equipment(
                profile,
                name=form.name.data,
                category=form.category.data,
                price_per_day=form.price_per_day.data,
                location=form.location.data,
                image=form.image.data,
                description=form.description.data
            )
        except (catalog_service.EquipmentValidationError, ImageValidationError) as e:
            error = str(e)
        except (SQLAlchemyError, OSError) as e:
            logger.error("Add equipment failed for owner %s: %s", profile.id, e)
            error = 'Failed to add equipment. Please try again.'
        else:
            log_event("Equipment Added", "SUCCESS", {"equipment_id": equipment.id, "name": equipment.name},
                      profile_id=profile.id, ip_address=request.remote_addr)
            flash(f'{equipment.name} is now listed.', 'success')
            return redirect(url_for('owner.dashboard', tab='equipment'))
    return render_template('add_equipment.html', form=form, error=error)

@owner.errorhandler(RequestEntityTooLarge)
def upload_too_large(e):
    # The body was refused before the form could be read
    logger.warning("Upload refused for owner %s: %s", g.session_ctx.profile.id, e)
    form = EquipmentForm(formdata=None)
    error = too_large_message(current_app.config['MAX_IMAGE_BYTES'])
    return render_template('add_equipment.html', form=form, error=error), 413
