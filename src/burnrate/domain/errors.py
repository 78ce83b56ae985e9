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


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


def signal_not_found(signal_id: str) -> str:
    """Return message for missing signal."""
    return f"Signal {signal_id} not found"


def document_not_found(document_id: str) -> str:
    """Return message for missing uploaded document."""
    return f"Document {document_id} not found"


def investment_account_not_found(account_id: int) -> str:
    """Return message for missing investment account."""
    return f"Investment account {account_id} not found"


def tax_document_not_found(document_id: int) -> str:
    """Return message for missing tax document."""
    return f"Tax document {document_id} not found"


def duplicate_investment_account(name: str) -> str:
    """Return message for duplicate investment account name."""
    return f"Investment account with name '{name}' already exists"


def invalid_choice(field_name: str, value: object, choices: list[str]) -> str:
    """Return message for a value outside an enumeration."""
    return f"Invalid {field_name} '{value}'. Expected one of: {', '.join(choices)}"


def negative_amount(field_name: str, value: object) -> str:
    """Return message for an amount that must not be negative."""
    return f"{field_name} must not be negative (got {value})"
