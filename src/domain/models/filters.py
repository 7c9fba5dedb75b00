"""Domain models for expense search criteria."""

from dataclasses import dataclass
from datetime import date, datetime
from urllib.parse import urlencode

DateInput = str | date | datetime | None


@dataclass(frozen=True)
class FilterCriteria:
    """Raw filter inputs chosen by the user.

    Empty strings and ``None`` both mean "unset".
    """

    q: str = ""
    category_id: str = ""
    payment_method: str = ""
    date_from: DateInput = ""
    date_to: DateInput = ""


@dataclass(frozen=True)
class ExpenseQuery:
    """Canonical, store-ready expense query.

    Attributes:
        params: Ordered (name, value) pairs. ``limit`` is always last.
    """

    params: tuple[tuple[str, str], ...]

    def as_dict(self) -> dict[str, str]:
        return dict(self.params)

    def to_query_string(self) -> str:
        return urlencode(self.params)


__all__ = ["DateInput", "FilterCriteria", "ExpenseQuery"]
