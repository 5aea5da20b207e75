"""Reads an image file given on the command line and uploads it."""

from __future__ import annotations

import mimetypes
from pathlib import Path

from storeadmin.application.upload_image import UploadImageHandler
from storeadmin.infrastructure.bootstrap import image_storage


def upload_file(path: str, folder: str) -> str:
    """Upload *path* into *folder*; DomainException propagates to the command."""
    file_path = Path(path)
    content_type, _ = mimetypes.guess_type(file_path.name)
    handler = UploadImageHandler(storage=image_storage())
    return handler.handle(
        payload=file_path.read_bytes(),
        content_type=content_type or "application/octet-stream",
        folder=folder,
    )
