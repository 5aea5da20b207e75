"""Application service: List Products use case (query)."""

from __future__ import annotations

from dataclasses import dataclass

from storeadmin.domain.model.product import ProductStatus
from storeadmin.domain.repository.product_repository import ProductRepository


@dataclass(frozen=True)
class ProductLineDTO:
    id: str
    sku: str
    name: str
    price: str
    stock: int
    status: str
    variants: int


class ListProductsHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(
        self,
        search: str | None = None,
        category_id: str | None = None,
        status: str | None = None,
    ) -> list[ProductLineDTO]:
        products = self._product_repo.list_all()
        if search and search.strip():
            needle = search.strip().lower()
            products = [p for p in products if needle in p.name.lower() or needle in p.sku.lower()]
        if category_id:
            products = [p for p in products if p.category_id == category_id]
        if status:
            wanted = ProductStatus.parse(status)
            products = [p for p in products if p.status == wanted]
        return [
            ProductLineDTO(
                id=p.id,
                sku=p.sku,
                name=p.name,
                price=str(p.price),
                stock=p.stock,
                status=p.status.value,
                variants=len(self._product_repo.list_variants(p.id)),
            )
            for p in products
        ]
