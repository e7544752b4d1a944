"""
Request-level session gate.

Every request gets a SessionContext on ``flask.g`` built once from the
logged-in profile. Private paths need a session; role-restricted paths are
checked against one shared policy table.
"""
import logging
from urllib.parse import urlsplit

from flask import g, request, redirect, url_for, flash
from flask_login import current_user

from agrirent.models.profile import ROLE_ADMIN, ROLE_OWNER, ROLE_FARMER

logger = logging.getLogger(__name__)

PRIVATE_PREFIXES = (
    '/dashboard',
    '/bookings',
    '/booking/checkout',
    '/booking/success',
    '/owner',
    '/admin',
)

# path prefix -> (required role, endpoint to send other roles to)
ROLE_POLICY = (
    ('/admin', ROLE_ADMIN, 'auth.login'),
    ('/owner', ROLE_OWNER, 'auth.login'),
)

ROLE_HOME = {
    ROLE_ADMIN: 'admin.dashboard',
    ROLE_OWNER: 'owner.dashboard',
    ROLE_FARMER: 'booking.my_bookings',
}


class SessionContext:
    def __init__(self, profile=None):
        self.profile = profile

    @property
    def is_authenticated(self):
        return self.profile is not None

    @property
    def role(self):
        return self.profile.role if self.profile else None

    @property
    def home_endpoint(self):
        return ROLE_HOME.get(self.role, 'main.home')

    def has_role(self, role):
        return self.role == role


def _matches(path, prefix):
    return path == prefix or path.startswith(prefix + '/')


def is_private_path(path):
    return any(_matches(path, prefix) for prefix in PRIVATE_PREFIXES)


def required_role(path):
    for prefix, role, fallback in ROLE_POLICY:
        if _matches(path, prefix):
            return role, fallback
    return None, None


def authorize(path, context):
    """
    Returns the URL the request must be redirected to, or None when it may
    proceed.
    """
    if not is_private_path(path):
        return None

    if not context.is_authenticated:
        return url_for('auth.login', redirect=requested_target())

    role, fallback = required_role(path)
    if role is not None and not context.has_role(role):
        logger.info("Profile %s (%s) refused access to %s", context.profile.id, context.role, path)
        return url_for(fallback)
    return None


def requested_target():
    target = request.path
    if request.query_string:
        target += '?' + request.query_string.decode('utf-8', 'replace')
    return target


def is_safe_redirect(target):
    if not target:
        return False
    parts = urlsplit(target)
    return not parts.scheme and not parts.netloc and target.startswith('/') and not target.startswith('//')


def load_session_context():
    profile = current_user if current_user.is_authenticated else None
    g.session_ctx = SessionContext(profile)
    return g.session_ctx


def session_gate():
    context = load_session_context()
    target = authorize(request.path, context)
    if target is not None:
        if context.is_authenticated:
            flash('You do not have access to that page.', 'warning')
        return redirect(target)
    return None


def init_app(app):
    app.before_request(session_gate)

    @app.context_processor
    def inject_session_context():
        return {'session_ctx': g.get('session_ctx') or SessionContext()}
