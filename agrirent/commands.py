import click
from flask.cli import with_appcontext
from sqlalchemy.exc import SQLAlchemyError

from agrirent.extensions import db
from agrirent.models.profile import ROLE_ADMIN
from agrirent.services import account_service

# Fixed accounts for local testing, one per role
TEST_USERS = [
    {
        'email': 'farmer@test.com',
        'password': 'farmer123',
        'role': 'farmer',
        'full_name': 'Test Farmer',
        'phone': '+1234567890',
        'farm_name': 'Green Valley Farm',
        'farm_size_acres': 250,
        'farm_location': 'Iowa, USA',
        'crop_types': 'Corn, Soybeans, Wheat',
    },
    {
        'email': 'owner@test.com',
        'password': 'owner123',
        'role': 'owner',
        'full_name': 'Test Equipment Owner',
        'phone': '+1234567891',
        'business_name': 'AgriEquip Rentals',
        'property_address': '123 Farm Road, Nebraska, USA',
        'equipment_count': 15,
        'service_area': 'Nebraska, Iowa, Kansas',
    },
    {
        'email': 'admin@test.com',
        'password': 'admin123',
        'role': 'admin',
        'full_name': 'System Administrator',
        'phone': '+1234567892',
    },
]

@click.command('init-db')
@with_appcontext
def init_db_command():
    """Creates the database tables."""
    db.create_all()
    click.echo('Database tables created.')

@click.command('seed-users')
@with_appcontext
def seed_users_command():
    """Creates or refreshes the test accounts for each role."""
    click.echo('Creating test users...')
    failures = 0
    for user in TEST_USERS:
        data = dict(user)
        role = data.pop('role')
        try:
            profile = account_service.create_profile(
                role=role, upsert=True, allow_admin=(role == ROLE_ADMIN), **data
            )
        except (account_service.SignupError, SQLAlchemyError) as e:
            failures += 1
            click.echo(f'Error creating {user["email"]}: {e}', err=True)
            continue
        click.echo(f'  {profile.role}: {profile.email} (id {profile.id})')

    click.echo('\nCredentials:')
    for user in TEST_USERS:
        click.echo(f'{user["role"]}: {user["email"]} / {user["password"]}')
    if failures:
        raise click.ClickException(f'{failures} test user(s) could not be created')

def register_commands(app):
    app.cli.add_command(init_db_command)
    app.cli.add_command(seed_users_command)
