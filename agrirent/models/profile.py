import datetime

from flask_login import UserMixin
from sqlalchemy.orm import validates
from werkzeug.security import generate_password_hash, check_password_hash

from agrirent.extensions import db, login_manager

ROLE_FARMER = 'farmer'
ROLE_OWNER = 'owner'
ROLE_ADMIN = 'admin'
ROLES = (ROLE_FARMER, ROLE_OWNER, ROLE_ADMIN)

FARMER_FIELDS = ('farm_name', 'farm_size_acres', 'farm_location', 'crop_types')
OWNER_FIELDS = ('business_name', 'property_address', 'equipment_count', 'service_area')


def utcnow():
    return datetime.datetime.now(datetime.timezone.utc)


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(Profile, int(user_id))


class RoleChangeError(ValueError):
    pass


class Profile(db.Model, UserMixin):
    __tablename__ = 'profiles'

    id = db.Column(db.Integer, primary_key=True)
    full_name = db.Column(db.String(150), nullable=False)
    email = db.Column(db.String(150), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(10), nullable=False, index=True)
    phone = db.Column(db.String(20))

    # Farmer
    farm_name = db.Column(db.String(150))
    farm_size_acres = db.Column(db.Float)
    farm_location = db.Column(db.String(200))
    crop_types = db.Column(db.String(200))

    # Owner
    business_name = db.Column(db.String(150))
    property_address = db.Column(db.String(255))
    equipment_count = db.Column(db.Integer)
    service_area = db.Column(db.String(200))

    created_at = db.Column(db.DateTime(timezone=True), default=utcnow, index=True)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    equipment = db.relationship('Equipment', backref='owner', lazy='dynamic')

    def __repr__(self):
        return f"Profile('{self.full_name}', '{self.email}', '{self.role}')"

    @validates('role')
    def validate_role(self, key, role):
        if role not in ROLES:
            raise ValueError(f"Unknown role '{role}'")
        if self.role is not None and self.role != role:
            raise RoleChangeError(f"Role of {self.email} is already '{self.role}'")
        return role

    @validates('email')
    def normalize_email(self, key, email):
        return email.strip().lower()

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    @property
    def is_farmer(self):
        return self.role == ROLE_FARMER

    @property
    def is_owner(self):
        return self.role == ROLE_OWNER

    @property
    def is_admin(self):
        return self.role == ROLE_ADMIN

    @property
    def location(self):
        """Best contact address for the profile's role."""
        if self.is_owner:
            return self.property_address or self.service_area or ''
        return self.farm_location or ''
