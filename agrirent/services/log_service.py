import json
import logging

from sqlalchemy.exc import SQLAlchemyError

from agrirent.extensions import db
from agrirent.models.activity_log import ActivityLog

logger = logging.getLogger(__name__)

def log_event(event_type, status, details, profile_id=None, ip_address=None):
    """Persist a business event to the activity log. Failures never reach the caller."""
    try:
        log_entry = ActivityLog(
            event_type=event_type,
            status=status,
            details=json.dumps(details, ensure_ascii=False, default=str),
            profile_id=profile_id,
            ip_address=ip_address
        )
        db.session.add(log_entry)
        db.session.commit()
    except SQLAlchemyError as e:
        logger.error("Could not save activity log entry %r: %s", event_type, e)
        db.session.rollback()
