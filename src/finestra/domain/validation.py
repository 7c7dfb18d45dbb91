"""Input checks shared by the domain services.

Each check raises ValidationError before anything is written.
"""

from decimal import Decimal
from typing import Optional

from finestra.domain.errors import ValidationError
from finestra.utils.amount_parser import quantize_amount

MIN_NAME_LENGTH = 2


def require_name(value: Optional[str], label: str = "Name") -> str:
    """Return the stripped name, at least two characters long."""
    name = (value or "").strip()
    if len(name) < MIN_NAME_LENGTH:
        raise ValidationError(f"{label} must be at least {MIN_NAME_LENGTH} characters")
    return name


def require_text(value: Optional[str], label: str) -> str:
    """Return the stripped value, which must not be empty."""
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{label} is required")
    return text


def require_positive(value: Optional[Decimal], label: str = "Amount") -> Decimal:
    """Return the amount in cents, which must be greater than zero."""
    if value is None:
        raise ValidationError(f"{label} is required")
    amount = quantize_amount(value)
    if amount <= 0:
        raise ValidationError(f"{label} must be greater than zero")
    return amount


def require_non_negative(value: Optional[Decimal], label: str = "Amount") -> Decimal:
    """Return the amount in cents, which must not be negative."""
    if value is None:
        raise ValidationError(f"{label} is required")
    amount = quantize_amount(value)
    if amount < 0:
        raise ValidationError(f"{label} must not be negative")
    return amount


def optional_text(value: Optional[str]) -> Optional[str]:
    """Stripped value, or None when blank."""
    if value is None:
        return None
    return value.strip() or None


def require_status(value, status_type, label: str = "Status"):
    """Coerce a raw value into the given status enum."""
    try:
        return status_type(value)
    except ValueError:
        allowed = ", ".join(s.value for s in status_type)
        raise ValidationError(f"{label} must be one of: {allowed}") from None
