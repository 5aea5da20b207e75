"""Abstract object storage for uploaded images."""

from __future__ import annotations

from abc import ABC, abstractmethod


class ImageStorage(ABC):

    @abstractmethod
    def upload(self, payload: bytes, folder: str, filename: str) -> str:
        """Store *payload* under *folder* and return its public URL."""
