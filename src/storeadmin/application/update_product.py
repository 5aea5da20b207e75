"""Application service: Update Product use case."""

from __future__ import annotations

from storeadmin.domain.exceptions import EntityNotFoundError
from storeadmin.domain.model.product import Product, ProductStatus
from storeadmin.domain.model.value_objects import Money
from storeadmin.domain.repository.category_repository import CategoryRepository
from storeadmin.domain.repository.product_repository import ProductRepository


class UpdateProductHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        category_repo: CategoryRepository | None = None,
    ) -> None:
        self._product_repo = product_repo
        self._category_repo = category_repo

    def handle(
        self,
        product_id: str,
        name: str | None = None,
        price: str | None = None,
        stock: int | None = None,
        status: str | None = None,
        category_id: str | None = None,
    ) -> Product:
        """Apply the given changes; ``None`` leaves a field untouched."""
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product {product_id} not found")

        if name is not None and name.strip():
            product.name = name.strip()
        if price is not None:
            product.update_price(Money.of(price))
        if stock is not None:
            product.set_stock(stock)
        if status is not None:
            product.status = ProductStatus.parse(status)
        if category_id is not None:
            if category_id and self._category_repo is not None:
                if self._category_repo.get_by_id(category_id) is None:
                    raise EntityNotFoundError(f"Category {category_id} not found")
            product.category_id = category_id or None

        self._product_repo.save(product)
        return product
