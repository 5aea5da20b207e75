"""JSON-file-backed store configuration and cart sessions."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from storeadmin.domain.model.store import CartEntry, StoreConfiguration
from storeadmin.domain.repository.store_repository import CartRepository, StoreConfigRepository
from storeadmin.infrastructure.persistence.json_file import JsonFile, parse_timestamp

GENERAL_KEY = "general"


class JsonStoreConfigRepository(StoreConfigRepository):
    """Settings are stored as ``{key: value}``; the store uses the "general" key."""

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path, empty={})

    def load(self) -> StoreConfiguration | None:
        raw = self._file.load().get(GENERAL_KEY)
        if raw is None:
            return None
        return StoreConfiguration(
            store_name=raw.get("store_name") or StoreConfiguration().store_name,
            logo_url=raw.get("logo_url"),
        )

    def save(self, config: StoreConfiguration) -> None:
        with self._file.locked():
            data = self._file.load()
            data[GENERAL_KEY] = {"store_name": config.store_name, "logo_url": config.logo_url}
            self._file.persist(data)


class JsonCartRepository(CartRepository):
    """Read-only view of cart lines written by the storefront."""

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    def list_created_between(self, start: datetime, end: datetime) -> list[CartEntry]:
        entries = (
            CartEntry(
                created_at=parse_timestamp(raw["created_at"]),
                customer_id=raw.get("customer_id"),
                session_id=raw.get("session_id"),
            )
            for raw in self._file.load()
        )
        return [e for e in entries if start <= e.created_at <= end]
