"""Helpers for Decimal normalization."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENT = Decimal("0.01")


def coerce_decimal(value) -> Decimal:
    """Normalize numeric values to Decimal.

    Args:
        value: Raw numeric value from a JSON payload or a form field.

    Returns:
        Decimal: Normalized numeric value. ``None`` and empty strings map
        to zero.

    Raises:
        ValueError: If the value is not a finite number.
    """
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise ValueError(f"Not a number: {value!r}") from exc
    if not result.is_finite():
        raise ValueError(f"Amount must be finite: {value!r}")
    return result


def quantize_money(value: Decimal) -> Decimal:
    """Round a Decimal to cents, half away from zero."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_json_number(value: Decimal) -> float:
    """Convert a Decimal to a JSON-friendly float."""
    return float(value)


__all__ = ["coerce_decimal", "quantize_money", "to_json_number", "CENT"]
