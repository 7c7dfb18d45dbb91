"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested entity does not exist or is not owned by the user."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations or stale state."""


class StoreError(DomainError):
    """A write to the backing store failed and was rolled back."""


class ExplanationError(DomainError):
    """The explanation service failed or returned nothing usable."""


def project_not_found(project_id: str) -> str:
    """Return message for missing project."""
    return f"Project {project_id} not found"


def cost_item_not_found(item_id: str) -> str:
    """Return message for missing cost item."""
    return f"Cost item {item_id} not found"


def revenue_item_not_found(item_id: str) -> str:
    """Return message for missing revenue item."""
    return f"Revenue item {item_id} not found"


def fixed_cost_not_found(fixed_cost_id: str) -> str:
    """Return message for missing fixed cost."""
    return f"Fixed cost {fixed_cost_id} not found"


def category_not_found(name: str) -> str:
    """Return message for missing category by name."""
    return f"Category '{name}' not found"


def duplicate_category(name: str) -> str:
    """Return message for duplicate category name."""
    return f"Category '{name}' already exists"


def stale_fixed_cost(fixed_cost_id: str, expected, current) -> str:
    """Return message when a fixed cost moved on since it was read."""
    return (
        f"Fixed cost {fixed_cost_id} next payment date is {current}, "
        f"expected {expected}. Reload it and try again."
    )


def installment_group_mismatch(group_id: str) -> str:
    """Return message when a replayed installment batch differs from the stored one."""
    return f"Installment group {group_id} was already written with a different plan"
