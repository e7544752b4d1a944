import logging
import math

from sqlalchemy.exc import SQLAlchemyError

from agrirent.extensions import session_management
from agrirent.models.equipment import Equipment, EQUIPMENT_CATEGORIES
from agrirent.services import storage_service

logger = logging.getLogger(__name__)


class EquipmentValidationError(ValueError):
    pass


def list_available_equipment():
    return (Equipment.query
            .filter_by(is_available=True)
            .order_by(Equipment.created_at.desc(), Equipment.id.desc())
            .all())


def list_owner_equipment(owner_id):
    return (Equipment.query
            .filter_by(owner_id=owner_id)
            .order_by(Equipment.created_at.desc(), Equipment.id.desc())
            .all())


def _contains(haystack, needle):
    return needle in (haystack or '').lower()


def filter_equipment(items, search='', location='', category=None):
    """
    Browse filter: the search term must appear in the name or description,
    the location term in the location, and the category must match when one
    is selected. All text matching is case-insensitive; empty terms match all.
    """
    search = (search or '').strip().lower()
    location = (location or '').strip().lower()
    category = category or None

    filtered = []
    for item in items:
        if search and not (_contains(item.name, search) or _contains(item.description, search)):
            continue
        if location and not _contains(item.location, location):
            continue
        if category and item.category != category:
            continue
        filtered.append(item)
    return filtered


def toggle_availability(equipment):
    with session_management():
        equipment.is_available = not equipment.is_available
    logger.info("Equipment %s is_available=%s", equipment.id, equipment.is_available)
    return equipment.is_available


def validate_equipment_fields(name, category, price_per_day, location):
    if not name or not category or price_per_day in (None, '') or not location:
        raise EquipmentValidationError('Please fill in all required fields')
    if category not in EQUIPMENT_CATEGORIES:
        raise EquipmentValidationError('Please choose a valid category')
    try:
        price = float(price_per_day)
    except (TypeError, ValueError):
        raise EquipmentValidationError('Price must be a valid positive number')
    if not math.isfinite(price) or price <= 0:
        raise EquipmentValidationError('Price must be a valid positive number')
    return price


def add_equipment(owner, name, category, price_per_day, location, image, description=''):
    """
    Upload the image first, then insert the row that references it, so no
    row ever points at a missing image. If the insert fails the uploaded
    image is removed again.
    """
    price = validate_equipment_fields(name, category, price_per_day, location)
    storage_service.validate_image(image)

    key, image_url = storage_service.save_equipment_image(image, owner.id)
    equipment = Equipment(
        owner_id=owner.id,
        name=name.strip(),
        description=(description or '').strip(),
        category=category,
        price_per_day=price,
        location=location.strip(),
        image_url=image_url,
        is_available=True
    )
    try:
        with session_management() as session:
            session.add(equipment)
    except SQLAlchemyError:
        storage_service.remove_image(key)
        raise

    logger.info("Owner %s added equipment %s (%s)", owner.id, equipment.id, equipment.name)
    return equipment
