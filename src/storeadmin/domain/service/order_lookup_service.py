"""Domain service: resolve an order from a caller-supplied reference.

Back-office users paste whatever they have at hand: the internal
identifier, the order number, or the order number as printed with a
leading ``#``.  Historical records are not consistent about storing the
``#`` either, so the lookup tries each plausible form in turn.
"""

from __future__ import annotations

import logging

from storeadmin.domain.exceptions import EntityNotFoundError
from storeadmin.domain.model.identity import looks_like_id
from storeadmin.domain.model.order import Order
from storeadmin.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


def normalize_reference(reference: str) -> str:
    """Strip surrounding whitespace and one leading ``#``."""
    cleaned = reference.strip()
    if cleaned.startswith("#"):
        cleaned = cleaned[1:]
    return cleaned


class OrderLookupService:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def find(self, reference: str) -> Order | None:
        """Return the matching order, or None.  Never writes."""
        ref = normalize_reference(reference)
        if not ref:
            return None

        order = None
        if looks_like_id(ref):
            # ids are stored in canonical lower-case form
            order = self._order_repo.get_by_id(ref.lower())
            if order is not None:
                logger.debug("Order %s resolved by id", ref)
                return order

        order = self._order_repo.get_by_number(ref)
        if order is None:
            # Older records were stored with the cosmetic '#'.
            order = self._order_repo.get_by_number(f"#{ref}")
        if order is not None:
            logger.debug("Order reference %r resolved to %s", reference, order.id)
        return order

    def resolve(self, reference: str) -> Order:
        """Like ``find`` but raises EntityNotFoundError on a miss."""
        order = self.find(reference)
        if order is None:
            raise EntityNotFoundError(f"Order {reference!r} not found")
        return order
