"""Product and Variant aggregates.

Products live independently of orders. They have their own lifecycle:
prices change, stock goes down with sales and back up on cancellation.
A product may be sold as-is or through finer-grained variants, each with
its own stock counter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from storeadmin.domain.exceptions import ValidationError
from storeadmin.domain.model.value_objects import Money


class ProductStatus(Enum):
    DRAFT = "Draft"
    ACTIVE = "Active"
    INACTIVE = "Inactive"

    @staticmethod
    def parse(label: str) -> ProductStatus:
        for status in ProductStatus:
            if status.value.lower() == label.strip().lower():
                return status
        raise ValidationError(f"Unknown product status '{label}'")


@dataclass(frozen=True)
class ProductImage:
    url: str
    is_primary: bool = False
    position: int = 0


def _adjust(stock: int, delta: int, label: str) -> int:
    new_stock = stock + delta
    if new_stock < 0:
        raise ValidationError(
            f"Insufficient stock for {label} (need {-delta}, have {stock})"
        )
    return new_stock


@dataclass
class Product:
    """A product in the catalog."""

    id: str
    sku: str
    name: str
    price: Money
    stock: int = 0
    status: ProductStatus = ProductStatus.ACTIVE
    category_id: str | None = None
    images: list[ProductImage] = field(default_factory=list)

    def update_price(self, new_price: Money) -> None:
        """Change the product price.

        This does NOT affect any existing orders because orders
        capture a price snapshot at creation time.
        """
        if new_price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")
        self.price = new_price

    def set_stock(self, quantity: int) -> None:
        if quantity < 0:
            raise ValidationError("Stock cannot be negative")
        self.stock = quantity

    def adjust_stock(self, delta: int) -> None:
        self.stock = _adjust(self.stock, delta, self.name)

    @property
    def is_active(self) -> bool:
        return self.status == ProductStatus.ACTIVE

    @property
    def primary_image(self) -> str | None:
        """Primary image first, then lowest position."""
        if not self.images:
            return None
        ordered = sorted(self.images, key=lambda img: (not img.is_primary, img.position))
        return ordered[0].url


@dataclass
class Variant:
    """A sellable variation of a product (size, colour, ...)."""

    id: str
    product_id: str
    sku: str
    attributes: dict[str, str] = field(default_factory=dict)
    price: Money | None = None  # falls back to the product price
    stock: int = 0
    active: bool = True
    image_url: str | None = None

    def adjust_stock(self, delta: int) -> None:
        self.stock = _adjust(self.stock, delta, self.sku)

    @property
    def label(self) -> str:
        return ", ".join(f"{key}: {value}" for key, value in self.attributes.items())
