"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class StoreError(DomainError):
    """The backing store failed (connectivity, constraint violation, ...)."""


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def unsupported_gst_rate(rate) -> str:
    """Return message for a GST rate outside the allowed slabs."""
    return f"Unsupported GST rate {rate}; expected one of 0, 5, 12, 18, 28"


def paired_field_missing(field: str, paired_with: str) -> str:
    """Return message when one half of a paired field is set without the other."""
    return f"'{field}' must be set together with '{paired_with}'"


def non_positive_amount(amount) -> str:
    """Return message for a zero or negative transaction amount."""
    return f"Transaction amount must be positive, got {amount}"
