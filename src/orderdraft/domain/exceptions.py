"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class CatalogUnavailableError(DomainException):
    """The offering catalog could not be loaded."""


class QuoteError(DomainException):
    """The backend rejected or could not compute a price for a line item.

    The message is the backend's own text and is shown to the user verbatim.
    """


class SubmissionRejected(DomainException):
    """The backend rejected the whole order.

    ``field_errors`` maps backend error keys (e.g. ``items.2.quantity`` or
    ``customer_id``) to their messages.
    """

    def __init__(
        self,
        message: str,
        field_errors: dict[str, list[str]] | None = None,
    ) -> None:
        super().__init__(message)
        self.field_errors = dict(field_errors or {})
