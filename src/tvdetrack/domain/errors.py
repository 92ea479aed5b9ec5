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


def entity_not_found(kind: str, entity_id: str) -> str:
    """Return message for a missing platform, driver, vehicle or transaction."""
    return f"{kind} {entity_id} not found"


def reference_not_found(kind: str, entity_id: str) -> str:
    """Return message for a payload that points at a missing entity."""
    return f"Unknown {kind.lower()} '{entity_id}'"


def duplicate_name(kind: str, name: str) -> str:
    """Return message for a name already used in the same collection."""
    return f"{kind} with name '{name}' already exists"


def backup_not_found(backup_id: str) -> str:
    """Return message for a missing backup."""
    return f"Backup {backup_id} not found"


def derived_transaction_locked(transaction_id: str, parent_id: str) -> str:
    """Return message when a caller tries to edit an auto-generated tax entry."""
    return (
        f"Transaction {transaction_id} was generated from transaction {parent_id}; "
        "edit or delete the parent instead."
    )


def percentage_out_of_range(field: str, value: float) -> str:
    """Return message for a percentage outside 0-100."""
    return f"{field} must be between 0 and 100 (got {value:g})"
