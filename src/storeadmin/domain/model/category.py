"""Category aggregate: groups products in the catalog."""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass

from storeadmin.domain.exceptions import ValidationError


def slugify(name: str) -> str:
    """'Ropa de Niños' -> 'ropa-de-ninos'."""
    ascii_name = (
        unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
    )
    return re.sub(r"[^a-z0-9]+", "-", ascii_name.lower()).strip("-")


@dataclass
class Category:

    id: str
    name: str
    slug: str
    description: str = ""
    image_url: str | None = None

    @staticmethod
    def create(id: str, name: str, description: str = "") -> Category:
        if not name or not name.strip():
            raise ValidationError("Category name is required")
        return Category(
            id=id,
            name=name.strip(),
            slug=slugify(name),
            description=description.strip(),
        )

    def rename(self, name: str) -> None:
        if not name or not name.strip():
            raise ValidationError("Category name is required")
        self.name = name.strip()
        self.slug = slugify(name)
