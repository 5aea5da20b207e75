"""Abstract repository for Product and Variant aggregates."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storeadmin.domain.model.product import Product, Variant


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def get_by_sku(self, sku: str) -> Product | None:
        """Return a product by its SKU, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product in the catalog."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist a new or updated product."""

    @abstractmethod
    def delete(self, product_id: str) -> None:
        """Remove a product and all of its variants."""

    # --- Variants -------------------------------------------------------------

    @abstractmethod
    def get_variant(self, variant_id: str) -> Variant | None:
        """Return a variant by its ID, or None if not found."""

    @abstractmethod
    def get_variant_by_sku(self, sku: str) -> Variant | None:
        """Return a variant by its SKU, or None if not found."""

    @abstractmethod
    def list_variants(self, product_id: str) -> list[Variant]:
        """Return the variants of a product."""

    @abstractmethod
    def save_variant(self, variant: Variant) -> None:
        """Persist a new or updated variant."""

    # --- Stock counters -------------------------------------------------------

    @abstractmethod
    def adjust_stock(self, product_id: str, delta: int) -> int:
        """Add *delta* (may be negative) to a product's stock; return the new value.

        The read-modify-write is atomic with respect to other callers of
        this method.  Raises EntityNotFoundError if the product does not
        exist and ValidationError if the stock would go negative.
        """

    @abstractmethod
    def adjust_variant_stock(self, variant_id: str, delta: int) -> int:
        """Same as ``adjust_stock`` for a variant's own counter."""
