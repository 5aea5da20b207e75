"""Application services: Category CRUD use cases."""

from __future__ import annotations

import logging

from storeadmin.domain.exceptions import DuplicateKeyError, EntityNotFoundError
from storeadmin.domain.model.category import Category
from storeadmin.domain.model.identity import new_id
from storeadmin.domain.repository.category_repository import CategoryRepository
from storeadmin.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


def _ensure_name_free(repo: CategoryRepository, name: str, own_id: str | None = None) -> None:
    existing = repo.get_by_name(name.strip())
    if existing is not None and existing.id != own_id:
        raise DuplicateKeyError(f"Category '{existing.name}' already exists")


class AddCategoryHandler:

    def __init__(self, category_repo: CategoryRepository) -> None:
        self._category_repo = category_repo

    def handle(self, name: str, description: str = "", image_url: str | None = None) -> Category:
        category = Category.create(id=new_id(), name=name, description=description)
        _ensure_name_free(self._category_repo, category.name)
        category.image_url = image_url
        self._category_repo.save(category)
        logger.info("Category '%s' added", category.name)
        return category


class UpdateCategoryHandler:

    def __init__(self, category_repo: CategoryRepository) -> None:
        self._category_repo = category_repo

    def handle(
        self,
        category_id: str,
        name: str | None = None,
        description: str | None = None,
        image_url: str | None = None,
    ) -> Category:
        """Apply the given changes; ``None`` leaves a field untouched."""
        category = self._category_repo.get_by_id(category_id)
        if category is None:
            raise EntityNotFoundError(f"Category {category_id} not found")
        if name is not None:
            category.rename(name)
            _ensure_name_free(self._category_repo, category.name, own_id=category.id)
        if description is not None:
            category.description = description.strip()
        if image_url is not None:
            category.image_url = image_url or None
        self._category_repo.save(category)
        return category


class DeleteCategoryHandler:

    def __init__(
        self,
        category_repo: CategoryRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._category_repo = category_repo
        self._product_repo = product_repo

    def handle(self, category_id: str) -> int:
        """Delete a category; its products stay in the catalog uncategorized.

        Returns the number of products that were detached.
        """
        if self._category_repo.get_by_id(category_id) is None:
            raise EntityNotFoundError(f"Category {category_id} not found")

        detached = 0
        for product in self._product_repo.list_all():
            if product.category_id == category_id:
                product.category_id = None
                self._product_repo.save(product)
                detached += 1

        self._category_repo.delete(category_id)
        logger.info("Category %s deleted, %d product(s) detached", category_id, detached)
        return detached
