"""Application service: List Orders use cases (queries)."""

from __future__ import annotations

from datetime import timezone, tzinfo

from storeadmin.application.dto import OrderPageDTO, OrderSummaryDTO
from storeadmin.application.order_views import to_summary_dto
from storeadmin.domain.exceptions import ValidationError
from storeadmin.domain.model.order import Order, OrderStatus
from storeadmin.domain.repository.order_repository import OrderRepository

ALL_STATUSES = "All"


def _matches(order: Order, needle: str) -> bool:
    haystack = (
        order.order_number,
        order.contact.first_name,
        order.contact.last_name,
    )
    return any(needle in value.lower() for value in haystack)


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository, tz: tzinfo = timezone.utc) -> None:
        self._order_repo = order_repo
        self._tz = tz

    def handle(
        self,
        status: str | None = None,
        search: str | None = None,
        customer_id: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> OrderPageDTO:
        """Filter, sort newest first and paginate.

        ``total_count`` is the number of matches before pagination.
        """
        if offset < 0 or (limit is not None and limit < 0):
            raise ValidationError("limit and offset must not be negative")

        orders = self._order_repo.list_all()

        if status and status != ALL_STATUSES:
            wanted = OrderStatus.parse(status)
            orders = [o for o in orders if o.status == wanted]
        if customer_id:
            orders = [o for o in orders if o.customer_id == customer_id]
        if search and search.strip():
            needle = search.strip().lstrip("#").lower()
            orders = [o for o in orders if _matches(o, needle)]

        orders.sort(key=lambda o: o.ordered_at, reverse=True)
        total_count = len(orders)
        page = orders[offset:] if limit is None else orders[offset:offset + limit]
        return OrderPageDTO(
            orders=[to_summary_dto(o, self._tz) for o in page],
            total_count=total_count,
        )


class RecentOrdersHandler:
    """Latest orders for the dashboard widget."""

    def __init__(self, order_repo: OrderRepository, tz: tzinfo = timezone.utc) -> None:
        self._list = ListOrdersHandler(order_repo, tz)

    def handle(self, limit: int = 5) -> list[OrderSummaryDTO]:
        return self._list.handle(limit=limit).orders
