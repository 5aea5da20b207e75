"""Store-wide configuration and cart sessions."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

from storeadmin.domain.exceptions import ValidationError

DEFAULT_STORE_NAME = "My Store"


@dataclass(frozen=True)
class StoreConfiguration:
    """Name and logo shown in the back office sidebar."""

    store_name: str = DEFAULT_STORE_NAME
    logo_url: str | None = None

    def merge(self, store_name: str | None = None, logo_url: str | None = None) -> StoreConfiguration:
        """Return a copy with the given fields replaced; ``None`` keeps the current value."""
        if store_name is not None and not store_name.strip():
            raise ValidationError("Store name cannot be empty")
        return replace(
            self,
            store_name=store_name.strip() if store_name is not None else self.store_name,
            logo_url=logo_url if logo_url is not None else self.logo_url,
        )


@dataclass(frozen=True)
class CartEntry:
    """A storefront cart line, used as a proxy for visitor sessions."""

    created_at: datetime
    customer_id: str | None = None
    session_id: str | None = None

    @property
    def session_key(self) -> str | None:
        if self.customer_id:
            return f"customer:{self.customer_id}"
        if self.session_id:
            return f"session:{self.session_id}"
        return None
