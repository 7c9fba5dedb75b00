"""Domain normalization helpers for user-entered values."""

from datetime import date, datetime
from decimal import Decimal

from src.utils.decimal_utils import coerce_decimal


def normalize_optional_text(value: str | None) -> str | None:
    """Strip text input and map blank values to None.

    Args:
        value: Raw text from a form field or a payload.

    Returns:
        str | None: Cleaned text, or None when nothing is left.
    """
    if value is None:
        return None
    cleaned = str(value).strip()
    return cleaned or None


def normalize_month(value: str | date) -> str:
    """Normalize a month key to ``YYYY-MM``.

    Args:
        value: A ``YYYY-MM`` string or any date within the month.

    Returns:
        str: Month key.

    Raises:
        ValueError: If the string is not a valid month.
    """
    if isinstance(value, date):
        return value.strftime("%Y-%m")
    cleaned = value.strip()
    return datetime.strptime(cleaned, "%Y-%m").strftime("%Y-%m")


def current_month(today: date | None = None) -> str:
    """Return the month key for today."""
    return normalize_month(today or date.today())


def parse_limit_input(value: str | None) -> Decimal | None:
    """Parse a per-category limit field.

    Blank or non-numeric input removes the limit and yields None.
    """
    if value is None or not str(value).strip():
        return None
    try:
        return coerce_decimal(value)
    except ValueError:
        return None


__all__ = [
    "normalize_optional_text",
    "normalize_month",
    "current_month",
    "parse_limit_input",
]
