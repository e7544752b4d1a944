import datetime
import io

import pytest
from PIL import Image

from agrirent import create_app
from agrirent.extensions import db
from agrirent.models import Equipment, Booking
from agrirent.services import account_service
from config import TestConfig

FARMER = {'email': 'ravi@example.com', 'password': 'secret123', 'full_name': 'Ravi Kumar'}
OWNER = {'email': 'amit@example.com', 'password': 'secret123', 'full_name': 'Amit Singh'}
ADMIN = {'email': 'admin@example.com', 'password': 'secret123', 'full_name': 'Site Admin'}


def build_app(tmp_path, **settings):
    settings.setdefault('UPLOAD_FOLDER', str(tmp_path / 'uploads'))
    config_class = type('Config', (TestConfig,), settings)
    return create_app(config_class)


@pytest.fixture
def app(tmp_path):
    app = build_app(tmp_path)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def farmer_id(app):
    with app.app_context():
        profile = account_service.create_profile(
            role='farmer', phone='+91 98765 43210', farm_location='Village Madhopur, Punjab', **FARMER
        )
        return profile.id


@pytest.fixture
def owner_id(app):
    with app.app_context():
        profile = account_service.create_profile(
            role='owner', phone='+91 98123 45678', business_name='Singh Rentals',
            property_address='Ludhiana, Punjab', **OWNER
        )
        return profile.id


@pytest.fixture
def admin_id(app):
    with app.app_context():
        profile = account_service.create_profile(role='admin', allow_admin=True, **ADMIN)
        return profile.id


def login(client, credentials, **query):
    return client.post('/auth/login', query_string=query,
                       data={'email': credentials['email'], 'password': credentials['password']})


def make_equipment(app, owner_id, **fields):
    values = {
        'name': 'John Deere Tractor',
        'description': '50 HP tractor with rotavator',
        'category': 'Tractor',
        'price_per_day': 1500.0,
        'location': 'Ludhiana, Punjab',
        'is_available': True,
    }
    values.update(fields)
    with app.app_context():
        equipment = Equipment(owner_id=owner_id, **values)
        db.session.add(equipment)
        db.session.commit()
        return equipment.id


def make_booking(app, equipment_id, renter_id, days=3, **fields):
    with app.app_context():
        equipment = db.session.get(Equipment, equipment_id)
        start = datetime.date(2024, 3, 15)
        values = {
            'equipment_id': equipment.id,
            'owner_id': equipment.owner_id,
            'renter_id': renter_id,
            'equipment_name': equipment.name,
            'equipment_type': equipment.category,
            'rental_start_date': start,
            'rental_end_date': start + datetime.timedelta(days=days),
            'total_cost': equipment.price_per_day * days,
            'renter_name': 'Ravi Kumar',
            'owner_name': 'Amit Singh',
        }
        values.update(fields)
        booking = Booking(**values)
        db.session.add(booking)
        db.session.commit()
        return booking.id


def image_bytes(fmt='PNG', size=(32, 32)):
    buffer = io.BytesIO()
    Image.new('RGB', size, color=(40, 160, 60)).save(buffer, format=fmt)
    buffer.seek(0)
    return buffer
