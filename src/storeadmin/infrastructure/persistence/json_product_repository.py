"""JSON-file-backed implementation of ProductRepository.

Products and variants are kept in two files; stock adjustments run
under the file lock so concurrent processes never lose an update.
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from storeadmin.domain.exceptions import EntityNotFoundError, ValidationError
from storeadmin.domain.model.product import Product, ProductImage, ProductStatus, Variant
from storeadmin.domain.model.value_objects import DEFAULT_CURRENCY, Money
from storeadmin.domain.repository.product_repository import ProductRepository
from storeadmin.infrastructure.persistence.json_file import JsonFile


def _adjust_locked(file: JsonFile, record_id: str, delta: int, kind: str) -> int:
    with file.locked():
        records = file.load()
        for raw in records:
            if raw["id"] == record_id:
                current = raw.get("stock") or 0
                if current + delta < 0:
                    raise ValidationError(
                        f"Insufficient stock for {kind} {raw.get('sku', record_id)} "
                        f"(need {-delta}, have {current})"
                    )
                raw["stock"] = current + delta
                file.persist(records)
                return raw["stock"]
    raise EntityNotFoundError(f"{kind.capitalize()} {record_id} not found")


class JsonProductRepository(ProductRepository):

    def __init__(self, products_path: Path, variants_path: Path) -> None:
        self._products = JsonFile(products_path)
        self._variants = JsonFile(variants_path)

    # --- Products -------------------------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        for raw in self._products.load():
            if raw["id"] == product_id:
                return self._to_domain(raw)
        return None

    def get_by_sku(self, sku: str) -> Product | None:
        for raw in self._products.load():
            if raw["sku"] == sku:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Product]:
        return [self._to_domain(raw) for raw in self._products.load()]

    def save(self, product: Product) -> None:
        self._products.upsert(self._to_raw(product))

    def delete(self, product_id: str) -> None:
        self._variants.remove(lambda raw: raw["product_id"] == product_id)
        self._products.remove(lambda raw: raw["id"] == product_id)

    # --- Variants -------------------------------------------------------------

    def get_variant(self, variant_id: str) -> Variant | None:
        for raw in self._variants.load():
            if raw["id"] == variant_id:
                return self._variant_to_domain(raw)
        return None

    def get_variant_by_sku(self, sku: str) -> Variant | None:
        for raw in self._variants.load():
            if raw["sku"] == sku:
                return self._variant_to_domain(raw)
        return None

    def list_variants(self, product_id: str) -> list[Variant]:
        return [
            self._variant_to_domain(raw)
            for raw in self._variants.load()
            if raw["product_id"] == product_id
        ]

    def save_variant(self, variant: Variant) -> None:
        self._variants.upsert(self._variant_to_raw(variant))

    # --- Stock counters -------------------------------------------------------

    def adjust_stock(self, product_id: str, delta: int) -> int:
        return _adjust_locked(self._products, product_id, delta, "product")

    def adjust_variant_stock(self, variant_id: str, delta: int) -> int:
        return _adjust_locked(self._variants, variant_id, delta, "variant")

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "sku": product.sku,
            "name": product.name,
            "price": str(product.price.amount),
            "currency": product.price.currency,
            "stock": product.stock,
            "status": product.status.value,
            "category_id": product.category_id,
            "images": [
                {"url": img.url, "is_primary": img.is_primary, "position": img.position}
                for img in product.images
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        return Product(
            id=raw["id"],
            sku=raw["sku"],
            name=raw["name"],
            price=Money(Decimal(raw["price"]), raw.get("currency", DEFAULT_CURRENCY)),
            stock=raw.get("stock") or 0,
            status=ProductStatus(raw.get("status", "Active")),
            category_id=raw.get("category_id"),
            images=[ProductImage(**img) for img in raw.get("images", [])],
        )

    @staticmethod
    def _variant_to_raw(variant: Variant) -> dict:
        return {
            "id": variant.id,
            "product_id": variant.product_id,
            "sku": variant.sku,
            "attributes": variant.attributes,
            "price": str(variant.price.amount) if variant.price else None,
            "stock": variant.stock,
            "active": variant.active,
            "image_url": variant.image_url,
        }

    @staticmethod
    def _variant_to_domain(raw: dict) -> Variant:
        return Variant(
            id=raw["id"],
            product_id=raw["product_id"],
            sku=raw["sku"],
            attributes=raw.get("attributes") or {},
            price=Money(Decimal(raw["price"])) if raw.get("price") else None,
            stock=raw.get("stock") or 0,
            active=raw.get("active", True),
            image_url=raw.get("image_url"),
        )
