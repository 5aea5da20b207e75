"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class DuplicateKeyError(DomainException):
    """A unique attribute (SKU, category name, ...) is already taken."""


class InvalidTransitionError(DomainException):
    """An order status change is not allowed from the current status."""


class NoOpTransitionError(InvalidTransitionError):
    """The requested status is the order's current status."""


class UpstreamError(DomainException):
    """The underlying data or file store failed."""
