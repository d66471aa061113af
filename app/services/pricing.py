from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Union

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")

WeightInput = Optional[Union[str, int, float, Decimal]]


def parse_weight(value: WeightInput) -> Optional[Decimal]:
    """
    Parses free-text weight input ("2.5", " 3 ", 4.0).
    Returns None for empty, non-numeric, NaN or infinite values.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        # str() first so floats like 0.1 keep their shortest repr
        weight = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not weight.is_finite():
        return None
    return weight


def compute_total(weight: WeightInput, price_per_kg: Union[int, float, Decimal]) -> Decimal:
    """Total charge rounded to 2 decimals. Unparseable or unpriceable weight quotes as 0.00."""
    parsed = parse_weight(weight)
    if parsed is None:
        return ZERO
    try:
        return (parsed * Decimal(str(price_per_kg))).quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # Totals too large for the decimal context, e.g. "1e30"
        return ZERO


def format_kg(value: Decimal) -> str:
    """Decimal kg without trailing zeros: Decimal('3.00') -> '3', Decimal('2.50') -> '2.5'."""
    return format(value.normalize(), "f")


def ready_in_label(turnaround_days: int) -> str:
    return f"Ready in {turnaround_days} day{'s' if turnaround_days > 1 else ''}"
