"""Customer aggregate."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from storeadmin.domain.exceptions import ValidationError


@dataclass
class Customer:

    id: str
    first_name: str
    last_name: str = ""
    email: str = ""
    phone: str = ""
    region: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def create(id: str, first_name: str, **details: str) -> Customer:
        if not first_name or not first_name.strip():
            raise ValidationError("Customer name is required")
        cleaned = {key: (value or "").strip() for key, value in details.items()}
        return Customer(id=id, first_name=first_name.strip(), **cleaned)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
