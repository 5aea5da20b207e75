"""Application service: Show Order use case (query)."""

from __future__ import annotations

from datetime import timezone, tzinfo

from storeadmin.application.dto import OrderDetailDTO
from storeadmin.application.order_views import to_detail_dto
from storeadmin.domain.repository.order_repository import OrderRepository
from storeadmin.domain.repository.product_repository import ProductRepository
from storeadmin.domain.service.order_lookup_service import OrderLookupService


class ShowOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        tz: tzinfo = timezone.utc,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._tz = tz

    def handle(self, reference: str) -> OrderDetailDTO:
        """Resolve *reference* (id, order number or ``#number``) and build its view."""
        order = OrderLookupService(self._order_repo).resolve(reference)
        return to_detail_dto(
            order,
            product_lookup=self._product_repo.get_by_id,
            variant_lookup=self._product_repo.get_variant,
            tz=self._tz,
        )
