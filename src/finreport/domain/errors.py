"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class InvalidTransactionError(ValidationError):
    """Transaction violates the input contract (amount, dates, references)."""


class ConfigurationError(DomainError):
    """Invalid engine configuration, such as an unknown line role or rate."""


def negative_amount(transaction_id: str, amount: Decimal) -> str:
    """Return message for a negative transaction amount."""
    return f"Transaction '{transaction_id}' has negative amount {amount}"


def invalid_amount(transaction_id: str, amount: object) -> str:
    """Return message for an amount that is not a finite Decimal."""
    return f"Transaction '{transaction_id}' has invalid amount {amount!r}"


def invalid_due_date(transaction_id: str, value: object) -> str:
    """Return message for a due date that is not a date."""
    return f"Transaction '{transaction_id}' has invalid due date {value!r}"


def missing_field(transaction_id: str, field_name: str) -> str:
    """Return message for a missing required transaction field."""
    return f"Transaction '{transaction_id}' is missing required field '{field_name}'"


def unknown_line_role(category_id: str, role: str) -> str:
    """Return message for a classification entry with an unknown role."""
    return f"Category '{category_id}' is mapped to unknown line role '{role}'"


def rate_out_of_range(name: str, value: Decimal) -> str:
    """Return message for a rate outside [0, 1]."""
    return f"{name} must be between 0 and 1, got {value}"
