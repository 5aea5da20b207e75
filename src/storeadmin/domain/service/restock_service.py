"""Domain service: Inventory Restock.

Reverses the stock decrement of an order when it is cancelled.  Every
line item is handled on its own: variant lines go back to the variant's
counter, plain lines to the product's counter.  A line that cannot be
restocked is logged and reported, and the remaining lines are still
processed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from storeadmin.domain.exceptions import DomainException
from storeadmin.domain.model.order import Order, OrderLineItem
from storeadmin.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RestockOutcome:
    """Result of restocking a single line item."""

    line_item_id: str
    target: str  # "variant" or "product"
    target_id: str
    quantity: int
    new_stock: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class RestockReport:
    order_id: str
    outcomes: list[RestockOutcome] = field(default_factory=list)
    error: str | None = None  # set when the whole run aborted

    @property
    def restocked(self) -> list[RestockOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> list[RestockOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def ok(self) -> bool:
        return self.error is None and not self.failed


class RestockService:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def restock_order(self, order: Order) -> RestockReport:
        """Increment stock by each line item's quantity."""
        report = RestockReport(order_id=order.id)
        if not order.items:
            logger.warning("Order %s has no line items to restock", order.display_number)
            return report

        for line in order.items:
            report.outcomes.append(self._restock_line(line))

        if report.failed:
            logger.error(
                "Restock for order %s finished with %d failed line(s) of %d",
                order.display_number,
                len(report.failed),
                len(report.outcomes),
            )
        else:
            logger.info("Stock restored for all lines of order %s", order.display_number)
        return report

    def _restock_line(self, line: OrderLineItem) -> RestockOutcome:
        qty = line.quantity.value
        if line.variant_id:
            target, target_id = "variant", line.variant_id
            increment = self._product_repo.adjust_variant_stock
        else:
            target, target_id = "product", line.product_id
            increment = self._product_repo.adjust_stock

        try:
            new_stock = increment(target_id, qty)
        except DomainException as exc:
            logger.error("Could not restock %s %s (+%d): %s", target, target_id, qty, exc)
            return RestockOutcome(line.id, target, target_id, qty, error=str(exc))
        except Exception as exc:
            logger.exception("Unexpected error restocking %s %s (+%d)", target, target_id, qty)
            return RestockOutcome(line.id, target, target_id, qty, error=str(exc))

        logger.debug("Restocked %s %s: +%d -> %d", target, target_id, qty, new_stock)
        return RestockOutcome(line.id, target, target_id, qty, new_stock=new_stock)
