"""JSON-file-backed implementation of CategoryRepository."""

from __future__ import annotations

from pathlib import Path

from storeadmin.domain.model.category import Category
from storeadmin.domain.repository.category_repository import CategoryRepository
from storeadmin.infrastructure.persistence.json_file import JsonFile


class JsonCategoryRepository(CategoryRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    def get_by_id(self, category_id: str) -> Category | None:
        for raw in self._file.load():
            if raw["id"] == category_id:
                return Category(**raw)
        return None

    def get_by_name(self, name: str) -> Category | None:
        wanted = name.strip().lower()
        for raw in self._file.load():
            if raw["name"].lower() == wanted:
                return Category(**raw)
        return None

    def list_all(self) -> list[Category]:
        return sorted(
            (Category(**raw) for raw in self._file.load()), key=lambda c: c.name.lower()
        )

    def save(self, category: Category) -> None:
        self._file.upsert(
            {
                "id": category.id,
                "name": category.name,
                "slug": category.slug,
                "description": category.description,
                "image_url": category.image_url,
            }
        )

    def delete(self, category_id: str) -> None:
        self._file.remove(lambda raw: raw["id"] == category_id)
