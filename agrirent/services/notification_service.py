import logging
import smtplib

from flask import current_app
from flask_mail import Message

from agrirent.extensions import mail

logger = logging.getLogger(__name__)


def _send(subject, recipients, body):
    if not current_app.config.get('MAIL_ENABLED'):
        logger.debug("Mail disabled, not sending %r", subject)
        return False
    recipients = [r for r in recipients if r]
    if not recipients:
        return False
    try:
        mail.send(Message(subject, recipients=recipients, body=body))
        return True
    except (smtplib.SMTPException, OSError) as e:
        logger.warning("Could not send e-mail %r to %s: %s", subject, recipients, e)
        return False


def send_welcome_email(profile):
    body = (
        f"Hello {profile.full_name},\n\n"
        f"Your AgriRent {profile.role} account has been created. "
        "You can now log in with your e-mail and password.\n"
    )
    return _send('Welcome to AgriRent', [profile.email], body)


def send_booking_confirmation(booking):
    """Tells the renter and the owner about a new booking. Payment is cash on delivery."""
    period = f"{booking.rental_start_date:%d %b %Y} - {booking.rental_end_date:%d %b %Y}"
    body = (
        f"Booking #{booking.id}: {booking.equipment_name} ({booking.equipment_type})\n"
        f"Rental period: {period} ({booking.duration_days} days)\n"
        f"Total: {booking.total_cost:.2f}, to be paid in cash on delivery\n\n"
        f"Renter: {booking.renter_name}, {booking.renter_phone}, {booking.renter_location}\n"
        f"Owner: {booking.owner_name}, {booking.owner_phone}\n"
    )
    renter_email = booking.renter.email if booking.renter else None
    owner_email = booking.owner.email if booking.owner else None
    return _send(f'AgriRent booking #{booking.id} confirmed', [renter_email, owner_email], body)
