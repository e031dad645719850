"""
Image uploads through Django's storage API.

Whatever backend ``default_storage`` points at (local files, S3 through
django-storages, ...) acts as the object store; callers only get a URL back.
"""
import logging
import mimetypes
import os
import uuid

from django.core.files.storage import default_storage

from .conf import blog_settings
from .exceptions import UploadError, ValidationError

logger = logging.getLogger(__name__)


def validate_image(file_obj, field="image"):
    name = getattr(file_obj, "name", "") or ""
    content_type = getattr(file_obj, "content_type", None) or mimetypes.guess_type(name)[0]
    if content_type not in blog_settings.ALLOWED_IMAGE_TYPES:
        logger.warning(f"Rejected upload {name!r} with content type {content_type}")
        raise ValidationError.for_field(field, "Only image files are allowed")

    max_mb = blog_settings.MAX_IMAGE_SIZE_MB
    size = getattr(file_obj, "size", None)
    if size is not None and size > max_mb * 1024 * 1024:
        logger.warning(f"Rejected upload {name!r}: {size} bytes")
        raise ValidationError.for_field(field, f"File too large. Maximum size is {max_mb}MB.")


def upload_image(file_obj, folder, field="image"):
    """
    Store an uploaded image and return its public URL.

    Args:
        file_obj: Django UploadedFile or File
        folder: storage prefix, e.g. ``blog_images``
        field: input field name used in validation errors

    Returns:
        URL string from the storage backend
    """
    validate_image(file_obj, field=field)

    extension = os.path.splitext(getattr(file_obj, "name", "") or "")[1].lower()
    path = f"{folder}/{uuid.uuid4().hex}{extension}"
    try:
        saved_name = default_storage.save(path, file_obj)
    except Exception as e:
        logger.error(f"Image upload to {path} failed: {e}", exc_info=True)
        raise UploadError() from e

    logger.info(f"Stored image at {saved_name}")
    return default_storage.url(saved_name)
