"""Filesystem implementation of ImageStorage.

Files land under ``<root>/<folder>/<filename>`` and are addressed by
``<public_base_url>/<folder>/<filename>``; a static file server (or
the storefront's CDN sync) is expected to publish ``root``.
"""

from __future__ import annotations

from pathlib import Path

from storeadmin.domain.exceptions import UpstreamError
from storeadmin.domain.repository.image_storage import ImageStorage


class LocalImageStorage(ImageStorage):

    def __init__(self, root: Path, public_base_url: str) -> None:
        self._root = root
        self._public_base_url = public_base_url.rstrip("/")

    def upload(self, payload: bytes, folder: str, filename: str) -> str:
        target = self._root / folder / filename
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(payload)
        except OSError as exc:
            raise UpstreamError(f"Cannot store image {folder}/{filename}: {exc}") from exc
        return f"{self._public_base_url}/{folder}/{filename}"
