"""Decimal helpers for money and hour amounts"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from ops_console.domain.exceptions import ValidationError

CENTS = Decimal("0.01")


def to_decimal(value, field_name: str = "value") -> Decimal:
    """Convert int/str/Decimal to Decimal; floats go through str to avoid binary noise"""
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool) or value is None:
        raise ValidationError(f"{field_name} must be a number, got {value!r}")
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError) as e:
            raise ValidationError(f"{field_name} must be a number, got {value!r}") from e

    if not result.is_finite():
        raise ValidationError(f"{field_name} must be finite, got {value!r}")
    return result


def quantize_money(amount: Decimal) -> Decimal:
    """Round to cents, half up"""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)
