"""
Monetary precision helpers.

Amounts are Decimals quantized to two places with banker's rounding
(ROUND_HALF_EVEN). Floats are converted through str() so binary noise never
reaches a stored total.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN
from typing import Iterable, Union

from core_backend.exceptions import ValidationError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(amount: Union[Decimal, str, int, float, None]) -> Decimal:
    """
    Round to cents using banker's rounding.

    Examples:
        >>> to_money("10.125")
        Decimal('10.12')
        >>> to_money(19.999)
        Decimal('20.00')
        >>> to_money(None)
        Decimal('0.00')
    """
    if amount is None or amount == "":
        return ZERO
    if isinstance(amount, float):
        amount = str(amount)
    try:
        value = Decimal(amount)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"Invalid amount {amount!r}")
    if not value.is_finite():
        raise ValidationError(f"Invalid amount {amount!r}")
    return value.quantize(CENT, rounding=ROUND_HALF_EVEN)


def sum_money(amounts: Iterable) -> Decimal:
    """Sum already-quantized amounts; the result is exact to the cent."""
    return sum((to_money(a) for a in amounts), ZERO)
