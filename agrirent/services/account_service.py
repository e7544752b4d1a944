import logging

from sqlalchemy.exc import OperationalError

from agrirent.extensions import db, session_management
from agrirent.models.profile import (
    Profile, ROLES, ROLE_ADMIN, ROLE_FARMER, ROLE_OWNER, FARMER_FIELDS, OWNER_FIELDS
)

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

ROLE_FIELDS = {
    ROLE_FARMER: FARMER_FIELDS,
    ROLE_OWNER: OWNER_FIELDS,
    ROLE_ADMIN: (),
}


class SignupError(Exception):
    pass


class DuplicateEmailError(SignupError):
    pass


class AuthenticationError(Exception):
    pass


def validate_passwords(password, confirm_password):
    """Returns the inline error for a bad password pair, or None."""
    if password != confirm_password:
        return 'Passwords do not match'
    if len(password or '') < MIN_PASSWORD_LENGTH:
        return f'Password must be at least {MIN_PASSWORD_LENGTH} characters'
    return None


def find_profile_by_email(email):
    return Profile.query.filter_by(email=(email or '').strip().lower()).first()


def create_profile(role, email, password, full_name, phone=None, upsert=False, allow_admin=False, **fields):
    """
    Creates a profile together with all of its role-specific fields in one
    transaction. With ``upsert`` an existing profile with the same e-mail is
    updated instead, so running it twice yields the same row.
    """
    if role not in ROLES:
        raise SignupError(f"Unknown role '{role}'")
    if role == ROLE_ADMIN and not allow_admin:
        raise SignupError('Admin accounts cannot be created through signup')

    unknown = set(fields) - set(ROLE_FIELDS[role])
    if unknown:
        raise SignupError(f"Fields not valid for role {role}: {', '.join(sorted(unknown))}")

    profile = find_profile_by_email(email)
    if profile is not None and not upsert:
        raise DuplicateEmailError('User already registered')

    if profile is not None and profile.role != role:
        raise SignupError(f'{profile.email} is already registered as {profile.role}')

    with session_management() as session:
        if profile is None:
            profile = Profile(email=email, role=role)
            session.add(profile)
        profile.full_name = full_name
        profile.phone = phone
        for name, value in fields.items():
            setattr(profile, name, value)
        profile.set_password(password)

    logger.info("Profile %s saved (%s, %s)", profile.id, profile.email, profile.role)
    return profile


def authenticate(email, password):
    try:
        profile = find_profile_by_email(email)
    except OperationalError as e:
        db.session.rollback()
        logger.error("Profile lookup failed during login: %s", e)
        raise AuthenticationError('Network error: failed to fetch account')

    if profile is None or not profile.check_password(password or ''):
        raise AuthenticationError('Invalid login credentials')
    return profile


def classify_auth_error(message):
    """Maps an authentication error message to invalid, network or generic."""
    text = (message or '').lower()
    if 'invalid' in text:
        return 'invalid'
    if 'network' in text or 'fetch' in text:
        return 'network'
    return 'generic'


AUTH_ERROR_MESSAGES = {
    'invalid': 'Invalid email or password. Please check your credentials and try again.',
    'network': 'Network error. Please check your internet connection and try again.',
    'generic': 'An error occurred. Please try again later.',
}


def auth_error_message(message):
    return AUTH_ERROR_MESSAGES[classify_auth_error(message)]
