"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist for this user."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class MissingLedgerError(ValidationError):
    """Confirmation attempted without a ledger."""


class InvalidTransitionError(ValidationError):
    """State machine transition not allowed from the current state."""


class ImmutableFieldError(ValidationError):
    """Attempt to change a field that is frozen after confirmation."""


class DuplicateLedgerNameError(ConflictError):
    """The user already owns a ledger with this name."""


class ExternalSuggestionUnavailable(DomainError):
    """The AI suggester failed, timed out, or returned an unusable payload."""


class StorageUnavailableError(DomainError):
    """The store could not be reached. Safe for the caller to retry."""


def not_found(kind: str, entity_id: int) -> str:
    """Return message for a missing entity."""
    return f"{kind} {entity_id} not found"


def duplicate_ledger_name(name: str) -> str:
    """Return message for a duplicate ledger name."""
    return f"Ledger '{name}' already exists"


def ledger_in_use(ledger_id: int, count: int) -> str:
    """Return message when a ledger is referenced by confirmed transactions."""
    return (
        f"Ledger {ledger_id} is used by {count} confirmed "
        f"transaction{'s' if count != 1 else ''}"
    )


def invalid_transition(kind: str, entity_id: int, current: str, target: str) -> str:
    """Return message for a rejected state transition."""
    return f"{kind} {entity_id} cannot move from '{current}' to '{target}'"


def account_delete_blocked(account_id: int, transaction_count: int) -> str:
    """Return message when a bank account still has transactions."""
    return (
        f"Cannot delete bank account {account_id}: it has {transaction_count} "
        f"transaction{'s' if transaction_count != 1 else ''}. "
        "Deactivate it instead."
    )
