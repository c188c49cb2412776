"""Product image upload.

Uploaded bytes go to the default storage backend under ``products/``; the
stored file's URL becomes the product's ``image_url``.
"""

import logging
import os
import uuid

from django.conf import settings
from django.core.files.storage import default_storage
from django.utils.text import get_valid_filename

from nexuscart.core.exceptions import PersistenceError, ValidationError

logger = logging.getLogger(__name__)

IMAGE_DIRECTORY = "products"


def store_product_image(upload) -> str:
    """Save an uploaded image and return its public URL.

    Raises:
        ValidationError: not an image, empty, or larger than MAX_PRODUCT_IMAGE_BYTES
        PersistenceError: the storage backend rejected the write
    """
    content_type = getattr(upload, "content_type", "") or ""
    if not content_type.startswith("image/"):
        raise ValidationError("Product image must be an image file")

    max_bytes = getattr(settings, "MAX_PRODUCT_IMAGE_BYTES", 5 * 1024 * 1024)
    if not upload.size:
        raise ValidationError("Product image is empty")
    if upload.size > max_bytes:
        raise ValidationError(f"Product image must be at most {max_bytes} bytes")

    basename = get_valid_filename(os.path.basename(upload.name or "image")) or "image"
    name = f"{IMAGE_DIRECTORY}/{uuid.uuid4().hex}-{basename}"

    try:
        saved_name = default_storage.save(name, upload)
    except OSError as e:
        logger.exception("Failed to store product image", extra={"image_name": name})
        raise PersistenceError("Could not store product image") from e

    logger.info("Stored product image", extra={"image_name": saved_name, "size": upload.size})
    return default_storage.url(saved_name)
