"""Abstract repository for Order aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations live in the infrastructure
layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from storeadmin.domain.model.order import Order, StatusHistoryEntry


class OrderRepository(ABC):

    @abstractmethod
    def next_order_number(self) -> str:
        """Generate the next human-facing order number."""

    @abstractmethod
    def get_by_id(self, order_id: str) -> Order | None:
        """Return an order by its internal ID, or None if not found."""

    @abstractmethod
    def get_by_number(self, order_number: str) -> Order | None:
        """Return an order whose stored order number equals *order_number* exactly."""

    @abstractmethod
    def list_all(self) -> list[Order]:
        """Return every order, newest first."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new or updated order (status, totals, items)."""

    @abstractmethod
    def add_history(self, order_id: str, entry: StatusHistoryEntry) -> None:
        """Append a status-history entry to an existing order."""

    def list_placed_between(self, start: datetime, end: datetime) -> list[Order]:
        """Orders whose ``ordered_at`` falls in the inclusive range."""
        return [o for o in self.list_all() if start <= o.ordered_at <= end]
