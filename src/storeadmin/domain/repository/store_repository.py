"""Abstract repositories for store configuration and cart sessions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from storeadmin.domain.model.store import CartEntry, StoreConfiguration


class StoreConfigRepository(ABC):

    @abstractmethod
    def load(self) -> StoreConfiguration | None:
        """Return the stored configuration, or None if never saved."""

    @abstractmethod
    def save(self, config: StoreConfiguration) -> None:
        """Persist the configuration."""


class CartRepository(ABC):

    @abstractmethod
    def list_created_between(self, start: datetime, end: datetime) -> list[CartEntry]:
        """Cart entries created in the inclusive range."""
