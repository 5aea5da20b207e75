"""Application service: Add Product use case."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from storeadmin.domain.exceptions import DuplicateKeyError, EntityNotFoundError, ValidationError
from storeadmin.domain.model.identity import new_id
from storeadmin.domain.model.product import Product, ProductStatus, Variant
from storeadmin.domain.model.value_objects import Money
from storeadmin.domain.repository.category_repository import CategoryRepository
from storeadmin.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VariantSpec:
    sku: str
    stock: int = 0
    attributes: dict[str, str] = field(default_factory=dict)
    price: str | None = None
    active: bool = True


class AddProductHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        category_repo: CategoryRepository | None = None,
    ) -> None:
        self._product_repo = product_repo
        self._category_repo = category_repo

    def handle(
        self,
        sku: str,
        name: str,
        price: str,
        stock: int = 0,
        status: str = ProductStatus.ACTIVE.value,
        category_id: str | None = None,
        variants: list[VariantSpec] | None = None,
    ) -> Product:
        """Add a new product (and optional variants) to the catalog."""
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        if not sku or not sku.strip():
            raise ValidationError("SKU is required")
        sku = sku.strip()

        self._ensure_sku_free(sku)
        variant_skus = [v.sku.strip() for v in variants or []]
        if len(set(variant_skus + [sku])) != len(variant_skus) + 1:
            raise DuplicateKeyError("Variant SKUs must be unique and differ from the product SKU")
        for variant_sku in variant_skus:
            self._ensure_sku_free(variant_sku)

        if category_id and self._category_repo is not None:
            if self._category_repo.get_by_id(category_id) is None:
                raise EntityNotFoundError(f"Category {category_id} not found")

        product = Product(
            id=new_id(),
            sku=sku,
            name=name.strip(),
            price=Money.of(price),
            status=ProductStatus.parse(status),
            category_id=category_id,
        )
        product.update_price(product.price)  # rejects zero prices
        product.set_stock(stock)

        new_variants = []
        for spec in variants or []:
            variant = Variant(
                id=new_id(),
                product_id=product.id,
                sku=spec.sku.strip(),
                attributes=dict(spec.attributes),
                price=Money.of(spec.price) if spec.price is not None else None,
                active=spec.active,
            )
            variant.adjust_stock(spec.stock)
            new_variants.append(variant)

        self._product_repo.save(product)
        for variant in new_variants:
            self._product_repo.save_variant(variant)

        logger.info("Product %s (%s) added", product.sku, product.name)
        return product

    def _ensure_sku_free(self, sku: str) -> None:
        existing = self._product_repo.get_by_sku(sku)
        if existing is not None:
            raise DuplicateKeyError(
                f"SKU '{sku}' is already used by product '{existing.name}'"
            )
        if self._product_repo.get_variant_by_sku(sku) is not None:
            raise DuplicateKeyError(f"SKU '{sku}' is already used by a variant")
