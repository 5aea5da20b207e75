"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from storeadmin.infrastructure.persistence.json_category_repository import (
    JsonCategoryRepository,
)
from storeadmin.infrastructure.persistence.json_customer_repository import (
    JsonCustomerRepository,
)
from storeadmin.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from storeadmin.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from storeadmin.infrastructure.persistence.json_store_repository import (
    JsonCartRepository,
    JsonStoreConfigRepository,
)
from storeadmin.infrastructure.settings import get_settings
from storeadmin.infrastructure.storage.local_image_storage import LocalImageStorage


def order_repository() -> JsonOrderRepository:
    return JsonOrderRepository(get_settings().data_dir / "orders.json")


def product_repository() -> JsonProductRepository:
    data_dir = get_settings().data_dir
    return JsonProductRepository(data_dir / "products.json", data_dir / "variants.json")


def customer_repository() -> JsonCustomerRepository:
    return JsonCustomerRepository(get_settings().data_dir / "customers.json")


def category_repository() -> JsonCategoryRepository:
    return JsonCategoryRepository(get_settings().data_dir / "categories.json")


def store_config_repository() -> JsonStoreConfigRepository:
    return JsonStoreConfigRepository(get_settings().data_dir / "store_config.json")


def cart_repository() -> JsonCartRepository:
    return JsonCartRepository(get_settings().data_dir / "cart.json")


def image_storage() -> LocalImageStorage:
    settings = get_settings()
    return LocalImageStorage(settings.uploads_dir, settings.public_base_url)
