import pytest
from sqlalchemy.exc import OperationalError

from agrirent.extensions import db
from agrirent.models import Profile
from agrirent.models.profile import RoleChangeError
from agrirent.services import account_service

from conftest import FARMER, OWNER


@pytest.mark.parametrize('password, confirm, expected', [
    ('secret123', 'secret124', 'Passwords do not match'),
    ('12345', '12345', 'Password must be at least 6 characters'),
    ('123456', '123456', None),
])
def test_validate_passwords(password, confirm, expected):
    assert account_service.validate_passwords(password, confirm) == expected


def test_owner_profile_carries_role_fields(app):
    with app.app_context():
        profile = account_service.create_profile(
            role='owner', email='Amit@Example.com ', password='secret123', full_name='Amit Singh',
            phone='+91 98123 45678', business_name='Singh Rentals', property_address='Ludhiana',
            equipment_count=4, service_area='Ludhiana district'
        )
        db.session.expire_all()
        saved = db.session.get(Profile, profile.id)

        assert saved.email == 'amit@example.com'
        assert saved.role == 'owner'
        assert saved.business_name == 'Singh Rentals'
        assert saved.equipment_count == 4
        assert saved.location == 'Ludhiana'
        assert saved.check_password('secret123')


def test_fields_of_another_role_are_rejected(app):
    with app.app_context():
        with pytest.raises(account_service.SignupError):
            account_service.create_profile(role='farmer', business_name='Nope', **FARMER)
        assert Profile.query.count() == 0


def test_duplicate_email_is_reported(app, farmer_id):
    with app.app_context():
        with pytest.raises(account_service.DuplicateEmailError, match='already registered'):
            account_service.create_profile(role='farmer', **FARMER)
        assert Profile.query.count() == 1


def test_upsert_is_idempotent(app):
    with app.app_context():
        first = account_service.create_profile(role='owner', upsert=True, business_name='A', **OWNER)
        second = account_service.create_profile(role='owner', upsert=True, business_name='B', **OWNER)

        assert first.id == second.id
        assert Profile.query.count() == 1
        assert db.session.get(Profile, first.id).business_name == 'B'


def test_upsert_cannot_change_role(app, farmer_id):
    with app.app_context():
        with pytest.raises(account_service.SignupError):
            account_service.create_profile(role='owner', upsert=True, **FARMER)
        assert db.session.get(Profile, farmer_id).role == 'farmer'


def test_admin_cannot_sign_up(app):
    with app.app_context():
        with pytest.raises(account_service.SignupError, match='Admin'):
            account_service.create_profile(role='admin', email='x@example.com', password='secret123',
                                           full_name='X')
        assert Profile.query.count() == 0


def test_unknown_role_is_rejected(app):
    with app.app_context():
        with pytest.raises(account_service.SignupError):
            account_service.create_profile(role='tenant', **FARMER)


def test_role_is_immutable(app, farmer_id):
    with app.app_context():
        profile = db.session.get(Profile, farmer_id)
        with pytest.raises(RoleChangeError):
            profile.role = 'admin'
        profile.role = 'farmer'


def test_authenticate(app, farmer_id):
    with app.app_context():
        assert account_service.authenticate('RAVI@example.com', 'secret123').id == farmer_id

        with pytest.raises(account_service.AuthenticationError, match='Invalid login credentials'):
            account_service.authenticate(FARMER['email'], 'wrong')
        with pytest.raises(account_service.AuthenticationError, match='Invalid login credentials'):
            account_service.authenticate('nobody@example.com', 'secret123')


def test_authenticate_reports_database_outage_as_network_error(app, monkeypatch):
    def unreachable(email):
        raise OperationalError('SELECT', {}, Exception('connection refused'))

    monkeypatch.setattr(account_service, 'find_profile_by_email', unreachable)
    with app.app_context():
        with pytest.raises(account_service.AuthenticationError) as excinfo:
            account_service.authenticate(FARMER['email'], 'secret123')
    assert account_service.classify_auth_error(str(excinfo.value)) == 'network'


@pytest.mark.parametrize('message, kind', [
    ('Invalid login credentials', 'invalid'),
    ('Network error: failed to fetch account', 'network'),
    ('Failed to fetch', 'network'),
    ('Something else broke', 'generic'),
    (None, 'generic'),
])
def test_classify_auth_error(message, kind):
    assert account_service.classify_auth_error(message) == kind


def test_auth_error_message():
    assert account_service.auth_error_message('Invalid login credentials').startswith('Invalid email or password')
