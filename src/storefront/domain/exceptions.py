"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the HTTP and CLI layers can catch them uniformly and map them to a
status code or a user-friendly message.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A required field is missing or a business rule was violated."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class AuthorizationError(DomainException):
    """The caller's session or CSRF token could not be verified."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class EmptyCartError(DomainException):
    """Checkout was requested for a cart without lines."""


class MixedCurrencyError(DomainException):
    """The cart holds lines priced in more than one currency."""


class PaymentProviderError(DomainException):
    """The hosted checkout provider rejected or failed a request."""


class SignatureVerificationError(DomainException):
    """A webhook payload did not carry a valid provider signature."""
