from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from django.core.exceptions import ValidationError

CENT = Decimal("0.01")


def to_decimal(amount) -> Decimal:
    """
    Accept Decimal, int or numeric string; never a binary float.
    Amounts finer than one cent are rejected, not rounded.
    """
    if isinstance(amount, float):
        raise ValidationError("Monetary amounts must not be floats.")
    if isinstance(amount, bool):
        raise ValidationError(f"Invalid monetary amount: {amount!r}")
    try:
        value = Decimal(amount) if amount is not None else Decimal("0")
        # too large to carry cents raises InvalidOperation as well
        exact = value.is_finite() and value == value.quantize(CENT)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"Invalid monetary amount: {amount!r}")
    if not value.is_finite():
        raise ValidationError(f"Invalid monetary amount: {amount!r}")
    if not exact:
        raise ValidationError(
            f"Amount {amount} has more than two decimal places.")
    return value


def to_minor_units(amount) -> int:
    """Exact amount → integer cents."""
    return int(to_decimal(amount) * 100)


def quantize_cents(amount) -> Decimal:
    """Round a computed amount (e.g. quantity × cost) half-up to cents."""
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)
