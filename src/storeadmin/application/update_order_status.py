"""Application service: Update Order Status use case.

The status write is the primary operation and its failure propagates.
Two secondary effects follow it and are best-effort: restoring stock
when the order enters ``Cancelled``, and recording the history entry.
Their failures are logged and reported on the result, never raised,
and never retried automatically.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from storeadmin.application.dto import StatusChangeResult
from storeadmin.domain.exceptions import DomainException
from storeadmin.domain.model.order import OrderStatus
from storeadmin.domain.repository.order_repository import OrderRepository
from storeadmin.domain.repository.product_repository import ProductRepository
from storeadmin.domain.service.order_lookup_service import OrderLookupService
from storeadmin.domain.service.restock_service import RestockReport, RestockService

logger = logging.getLogger(__name__)


class UpdateOrderStatusHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._clock = clock

    def handle(
        self,
        reference: str,
        new_status: OrderStatus | str,
        note: str | None = None,
    ) -> StatusChangeResult:
        if isinstance(new_status, str):
            new_status = OrderStatus.parse(new_status)

        order = OrderLookupService(self._order_repo).resolve(reference)
        previous = order.status

        # Raises InvalidTransitionError / NoOpTransitionError before any write.
        entry = order.change_status(new_status, note=note, at=self._clock())
        self._order_repo.save(order)
        logger.info(
            "Order %s: %s -> %s", order.display_number, previous.value, new_status.value
        )

        restock: RestockReport | None = None
        if new_status == OrderStatus.CANCELLED and previous != OrderStatus.CANCELLED:
            try:
                restock = RestockService(self._product_repo).restock_order(order)
            except Exception as exc:
                logger.exception(
                    "Restock failed for cancelled order %s", order.display_number
                )
                restock = RestockReport(order_id=order.id, error=str(exc))

        history_recorded = True
        try:
            self._order_repo.add_history(order.id, entry)
            order.history.append(entry)
        except DomainException as exc:
            history_recorded = False
            logger.warning(
                "Could not record history for order %s: %s", order.display_number, exc
            )

        return StatusChangeResult(
            order_id=order.id,
            order_number=order.display_number,
            previous_status=previous.value,
            new_status=new_status.value,
            history_recorded=history_recorded,
            restock=restock,
        )
