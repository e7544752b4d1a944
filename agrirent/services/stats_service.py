import logging

from sqlalchemy.exc import SQLAlchemyError

from agrirent.extensions import db
from agrirent.models.booking import Booking, PAYMENT_PENDING
from agrirent.models.profile import Profile, ROLE_FARMER, ROLE_OWNER

logger = logging.getLogger(__name__)

RECENT_USERS_LIMIT = 10


def _safe(label, query, default):
    try:
        return query()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Dashboard query '%s' failed: %s", label, e)
        return default


def admin_statistics():
    """Each figure is queried on its own; one failing shows its default and the rest still render."""
    return {
        'total_users': _safe('total_users', lambda: Profile.query.count(), 0),
        'farmers': _safe('farmers', lambda: Profile.query.filter_by(role=ROLE_FARMER).count(), 0),
        'owners': _safe('owners', lambda: Profile.query.filter_by(role=ROLE_OWNER).count(), 0),
        'bookings': _safe('bookings', lambda: Booking.query.count(), 0),
        'pending_payments': _safe(
            'pending_payments', lambda: Booking.query.filter_by(payment_status=PAYMENT_PENDING).count(), 0
        ),
        'recent_users': _safe(
            'recent_users',
            lambda: Profile.query.order_by(Profile.created_at.desc(), Profile.id.desc())
                                 .limit(RECENT_USERS_LIMIT).all(),
            []
        ),
    }


def payment_summary(pending, paid):
    return {
        'pending_count': len(pending),
        'paid_count': len(paid),
        'pending_total': sum(b.total_cost for b in pending),
        'paid_total': sum(b.total_cost for b in paid),
    }
