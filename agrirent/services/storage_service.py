import logging
import os
import uuid

from flask import current_app, url_for
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

# Pillow format -> (mimetype, file extension)
IMAGE_FORMATS = {
    'JPEG': ('image/jpeg', '.jpg'),
    'PNG': ('image/png', '.png'),
    'WEBP': ('image/webp', '.webp'),
    'GIF': ('image/gif', '.gif'),
}

EQUIPMENT_IMAGE_DIR = 'equipment'


class ImageValidationError(ValueError):
    pass


def too_large_message(max_bytes):
    return f'Image is too large. Maximum size is {max_bytes // (1024 * 1024)}MB.'


def _stream_size(file_storage):
    stream = file_storage.stream
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


def validate_image(file_storage, allowed_types=None, max_bytes=None):
    """
    Checks an uploaded image before anything is written to storage.
    Raises ImageValidationError with a message for the user.
    """
    allowed_types = allowed_types or current_app.config['ALLOWED_IMAGE_TYPES']
    max_bytes = max_bytes or current_app.config['MAX_IMAGE_BYTES']

    if file_storage is None or not file_storage.filename:
        raise ImageValidationError('Please select an image of the equipment.')

    if file_storage.mimetype not in allowed_types:
        raise ImageValidationError('Invalid image type. Please upload a JPEG, PNG, WebP or GIF image.')

    size = _stream_size(file_storage)
    if size == 0:
        raise ImageValidationError('The selected image is empty.')
    if size > max_bytes:
        raise ImageValidationError(too_large_message(max_bytes))

    try:
        with Image.open(file_storage.stream) as image:
            image_format = image.format
            image.verify()
    except Image.DecompressionBombError:
        raise ImageValidationError('The selected image is too large.')
    except (UnidentifiedImageError, OSError, SyntaxError):
        raise ImageValidationError('The selected file is not a valid image.')
    finally:
        file_storage.stream.seek(0)

    if image_format not in IMAGE_FORMATS or IMAGE_FORMATS[image_format][0] not in allowed_types:
        raise ImageValidationError('Invalid image type. Please upload a JPEG, PNG, WebP or GIF image.')


def save_equipment_image(file_storage, owner_id):
    """Stores a validated image and returns (storage key, public URL)."""
    folder = os.path.join(current_app.config['UPLOAD_FOLDER'], EQUIPMENT_IMAGE_DIR)
    os.makedirs(folder, exist_ok=True)

    output_size = (1200, 1200)
    image = Image.open(file_storage.stream)
    image_format = image.format
    _, extension = IMAGE_FORMATS[image_format]

    picture_fn = f"{owner_id}_{uuid.uuid4().hex}{extension}"
    picture_path = os.path.join(folder, picture_fn)

    image.thumbnail(output_size)
    if image_format == 'JPEG' and image.mode not in ('RGB', 'L'):
        image = image.convert('RGB')
    image.save(picture_path, format=image_format)

    key = f"{EQUIPMENT_IMAGE_DIR}/{picture_fn}"
    logger.info("Stored equipment image %s", key)
    return key, url_for('main.uploaded_file', filename=key)


def remove_image(key):
    path = os.path.join(current_app.config['UPLOAD_FOLDER'], key)
    try:
        os.remove(path)
        logger.info("Removed orphaned image %s", key)
    except OSError as e:
        logger.warning("Could not remove orphaned image %s: %s", key, e)
