"""Application service: Delete Product use case."""

from __future__ import annotations

from storeadmin.domain.exceptions import EntityNotFoundError
from storeadmin.domain.repository.product_repository import ProductRepository


class DeleteProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, product_id: str) -> None:
        """Remove a product together with its variants.

        Past orders keep their own snapshot of name, SKU and price.
        """
        if self._product_repo.get_by_id(product_id) is None:
            raise EntityNotFoundError(f"Product {product_id} not found")
        self._product_repo.delete(product_id)
