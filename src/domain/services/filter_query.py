"""Translate user filter criteria into a canonical expense query."""

from datetime import date, datetime, time, timezone, tzinfo

from src.domain.constants import DEFAULT_QUERY_LIMIT
from src.domain.models.expenses import PaymentMethod
from src.domain.models.filters import DateInput, ExpenseQuery, FilterCriteria


def build_expense_query(
    criteria: FilterCriteria,
    *,
    limit: int = DEFAULT_QUERY_LIMIT,
    tz: tzinfo | None = None,
) -> ExpenseQuery:
    """Build the store query for a set of filter criteria.

    Only fields carrying a value are included, in a fixed order, followed by
    the result-size cap.

    Args:
        criteria: Raw filter inputs.
        limit: Maximum number of expenses returned by the store.
        tz: Timezone used to interpret naive date inputs. Defaults to the
            system local timezone.

    Returns:
        ExpenseQuery: Canonical query; equal criteria give equal queries.

    Raises:
        ValueError: If the payment method or a date cannot be parsed.
    """
    params: list[tuple[str, str]] = []

    q = (criteria.q or "").strip()
    if q:
        params.append(("q", q))
    if criteria.category_id:
        params.append(("category_id", str(criteria.category_id)))
    if criteria.payment_method:
        method = PaymentMethod(criteria.payment_method)
        params.append(("payment_method", method.value))

    date_from = to_utc_instant(criteria.date_from, tz=tz)
    if date_from:
        params.append(("date_from", date_from))
    date_to = to_utc_instant(criteria.date_to, tz=tz, end_of_day=True)
    if date_to:
        params.append(("date_to", date_to))

    params.append(("limit", str(limit)))
    return ExpenseQuery(params=tuple(params))


def parse_local_datetime(
    value: DateInput,
    tz: tzinfo | None = None,
    end_of_day: bool = False,
) -> datetime | None:
    """Parse a date or datetime input into an aware datetime.

    A bare date means midnight of that day, or its last instant when
    ``end_of_day`` is set. Naive values are interpreted in ``tz``, or in
    the system local timezone when ``tz`` is ``None``.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.max if end_of_day else time.min)
    else:
        raw = value.strip()
        if not raw:
            return None
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        if len(raw) == 10:
            parsed = datetime.combine(
                date.fromisoformat(raw),
                time.max if end_of_day else time.min,
            )
        else:
            parsed = datetime.fromisoformat(raw)

    if parsed.tzinfo is not None:
        return parsed
    if tz is None:
        return parsed.astimezone()
    return parsed.replace(tzinfo=tz)


def format_instant(value: datetime) -> str:
    """Format an aware datetime as a UTC instant with millisecond precision."""
    utc = value.astimezone(timezone.utc)
    millis = utc.microsecond // 1000
    return f"{utc.strftime('%Y-%m-%dT%H:%M:%S')}.{millis:03d}Z"


def to_utc_instant(
    value: DateInput,
    tz: tzinfo | None = None,
    end_of_day: bool = False,
) -> str | None:
    """Return the canonical UTC instant for a local date input, if any.

    With ``end_of_day``, a bare date maps to the last millisecond of that
    local day so an upper bound includes the whole day.
    """
    parsed = parse_local_datetime(value, tz=tz, end_of_day=end_of_day)
    if parsed is None:
        return None
    return format_instant(parsed)


__all__ = [
    "build_expense_query",
    "parse_local_datetime",
    "format_instant",
    "to_utc_instant",
]
