"""Application service: Upload Image use case.

Validation happens here, before the storage collaborator is called, so
a rejected file never reaches the store.
"""

from __future__ import annotations

import logging
import re

from storeadmin.domain.exceptions import ValidationError
from storeadmin.domain.model.identity import new_id
from storeadmin.domain.repository.image_storage import ImageStorage

logger = logging.getLogger(__name__)

MAX_IMAGE_BYTES = 5 * 1024 * 1024

ALLOWED_CONTENT_TYPES = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}

_FOLDER_PATTERN = re.compile(r"^[a-z0-9][a-z0-9_-]*(/[a-z0-9][a-z0-9_-]*)*$")


def validate_image(payload: bytes, content_type: str) -> str:
    """Check type and size; return the file extension to store under."""
    extension = ALLOWED_CONTENT_TYPES.get(content_type.lower())
    if extension is None:
        raise ValidationError(
            f"Unsupported image type '{content_type}' (use JPG, PNG, WEBP or GIF)"
        )
    if not payload:
        raise ValidationError("Image file is empty")
    if len(payload) > MAX_IMAGE_BYTES:
        raise ValidationError(
            f"Image is {len(payload) / (1024 * 1024):.1f}MB; the maximum size is 5MB"
        )
    return extension


class UploadImageHandler:

    def __init__(self, storage: ImageStorage) -> None:
        self._storage = storage

    def handle(self, payload: bytes, content_type: str, folder: str) -> str:
        """Validate and store an image; return its public URL."""
        extension = validate_image(payload, content_type)
        folder = folder.strip().strip("/").lower()
        if not _FOLDER_PATTERN.match(folder):
            raise ValidationError(f"Invalid upload folder '{folder}'")

        url = self._storage.upload(payload, folder, f"{new_id()}.{extension}")
        logger.info("Uploaded %d bytes to %s", len(payload), url)
        return url
