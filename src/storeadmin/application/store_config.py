"""Application services: Store configuration (name and logo)."""

from __future__ import annotations

import logging

from storeadmin.domain.model.store import StoreConfiguration
from storeadmin.domain.repository.store_repository import StoreConfigRepository

logger = logging.getLogger(__name__)


class ShowStoreConfigHandler:

    def __init__(self, config_repo: StoreConfigRepository) -> None:
        self._config_repo = config_repo

    def handle(self) -> StoreConfiguration:
        """Stored configuration, or the defaults when nothing was saved yet."""
        return self._config_repo.load() or StoreConfiguration()


class UpdateStoreConfigHandler:

    def __init__(self, config_repo: StoreConfigRepository) -> None:
        self._config_repo = config_repo

    def handle(
        self,
        store_name: str | None = None,
        logo_url: str | None = None,
    ) -> StoreConfiguration:
        """Merge the given fields into the current configuration and save it."""
        current = ShowStoreConfigHandler(self._config_repo).handle()
        updated = current.merge(store_name=store_name, logo_url=logo_url)
        self._config_repo.save(updated)
        logger.info("Store configuration saved (%s)", updated.store_name)
        return updated
