"""Entity identifiers.

Every entity is keyed by an opaque UUID string.  Orders additionally
carry a human-facing order number, see ``Order.order_number``.
"""

from __future__ import annotations

import re
import uuid

_ID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def new_id() -> str:
    return str(uuid.uuid4())


def looks_like_id(value: str) -> bool:
    """True if *value* has the canonical identifier shape."""
    return bool(_ID_PATTERN.match(value))
