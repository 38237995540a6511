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


class ConfigurationError(DomainError):
    """Required backend or service configuration is missing."""


class StoreError(DomainError):
    """The storage backend failed to complete an operation."""


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def tax_setting_not_found(tax_id: str) -> str:
    """Return message for missing tax setting."""
    return f"Tax setting {tax_id} not found"


def remote_store_not_configured() -> str:
    """Return message for a remote store without credentials."""
    return (
        "Remote store is not configured: set SUPABASE_URL and "
        "SUPABASE_ANON_KEY, or use FINNEXUS_STORAGE_BACKEND=local"
    )


def partial_requires_pending(transaction_id: str | None = None) -> str:
    """Return message for a PARTIAL status without a pending amount."""
    subject = f"Transaction {transaction_id}" if transaction_id else "Transaction"
    return (
        f"{subject} cannot be partial without a positive pending amount"
    )
