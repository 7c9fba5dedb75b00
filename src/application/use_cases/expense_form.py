"""Form state for creating and editing expenses.

Form fields hold raw user input. They are converted to a payload only on
submit, and are kept intact whenever a submission fails so the user can
correct and resubmit.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, tzinfo

from src.application.use_cases.expense_mutations import ExpenseMutationClient
from src.domain.errors import ExpenseStoreError
from src.domain.models.expenses import Expense, ExpensePayload, PaymentMethod
from src.domain.services.filter_query import parse_local_datetime
from src.domain.services.normalization import normalize_optional_text
from src.infrastructure.logging.logger import get_app_logger
from src.utils.decimal_utils import coerce_decimal

LOCAL_INPUT_FORMAT = "%Y-%m-%dT%H:%M"


def local_input_now(tz: tzinfo | None = None) -> str:
    """Return the current time formatted for a datetime-local input."""
    now = datetime.now(tz) if tz else datetime.now().astimezone()
    return now.strftime(LOCAL_INPUT_FORMAT)


@dataclass
class ExpenseFormFields:
    """Raw values of the expense form."""

    amount: str = ""
    category_id: str = ""
    description: str = ""
    payment_method: str = PaymentMethod.OTHER.value
    date: str = field(default_factory=local_input_now)
    attachment_url: str = ""

    @classmethod
    def blank(cls, tz: tzinfo | None = None) -> "ExpenseFormFields":
        return cls(date=local_input_now(tz))

    @classmethod
    def from_expense(
        cls,
        expense: Expense,
        tz: tzinfo | None = None,
    ) -> "ExpenseFormFields":
        """Prefill the form with an existing expense."""
        local = expense.date.astimezone(tz) if tz else expense.date.astimezone()
        return cls(
            amount=str(expense.amount),
            category_id=expense.category_id or "",
            description=expense.description or "",
            payment_method=PaymentMethod(expense.payment_method).value,
            date=local.strftime(LOCAL_INPUT_FORMAT),
            attachment_url=expense.attachment_url or "",
        )

    def to_payload(self, tz: tzinfo | None = None) -> ExpensePayload:
        """Convert the raw fields to a full expense payload.

        Raises:
            ValueError: If the amount, payment method or date is invalid.
        """
        if not self.amount.strip():
            raise ValueError("Amount is required")
        return ExpensePayload(
            amount=coerce_decimal(self.amount),
            payment_method=PaymentMethod(self.payment_method),
            category_id=normalize_optional_text(self.category_id),
            description=normalize_optional_text(self.description),
            date=parse_local_datetime(self.date, tz=tz),
            attachment_url=normalize_optional_text(self.attachment_url),
        )


class ExpenseForm:
    """Quick-add form. Fields reset only after a successful create."""

    def __init__(
        self,
        mutations: ExpenseMutationClient,
        tz: tzinfo | None = None,
        logger=None,
    ) -> None:
        self._mutations = mutations
        self._tz = tz
        self._logger = logger or get_app_logger()
        self.fields = ExpenseFormFields.blank(tz)
        self.error: str | None = None

    def update(self, **values: str) -> None:
        self.fields = replace(self.fields, **values)

    async def submit(self) -> Expense | None:
        """Create an expense from the current fields.

        Returns:
            Expense | None: The created expense, or None when the
            submission failed and ``error`` holds the reason.
        """
        try:
            payload = self.fields.to_payload(self._tz)
            expense = await self._mutations.create(payload)
        except (ValueError, ExpenseStoreError) as exc:
            self.error = str(exc)
            self._logger.warning(f"Expense creation failed: {exc}")
            return None
        self.fields = ExpenseFormFields.blank(self._tz)
        self.error = None
        return expense


class ExpenseDetail:
    """Detail view of one expense with edit and delete actions."""

    def __init__(
        self,
        mutations: ExpenseMutationClient,
        tz: tzinfo | None = None,
        logger=None,
    ) -> None:
        self._mutations = mutations
        self._tz = tz
        self._logger = logger or get_app_logger()
        self.is_open = False
        self.expense: Expense | None = None
        self.fields: ExpenseFormFields | None = None
        self.error: str | None = None

    def open(self, expense: Expense) -> None:
        self.expense = expense
        self.fields = ExpenseFormFields.from_expense(expense, self._tz)
        self.error = None
        self.is_open = True

    def close(self) -> None:
        self.is_open = False
        self.expense = None
        self.fields = None
        self.error = None

    def update(self, **values: str) -> None:
        if self.fields is None:
            raise RuntimeError("No expense is open for editing.")
        self.fields = replace(self.fields, **values)

    async def save(self) -> Expense | None:
        """Send the edited fields as a full replacement.

        On failure the view stays open with the attempted values.
        """
        if self.expense is None or self.fields is None:
            raise RuntimeError("No expense is open for editing.")
        try:
            payload = self.fields.to_payload(self._tz)
            updated = await self._mutations.update(self.expense.id, payload)
        except (ValueError, ExpenseStoreError) as exc:
            self.error = str(exc)
            self._logger.warning(
                f"Expense update failed for id={self.expense.id}: {exc}"
            )
            return None
        self.close()
        return updated

    async def delete(self, *, confirmed: bool) -> bool:
        """Delete the open expense and close the view on success.

        The view closes as soon as the store confirms the deletion; the
        refetch of dependent views runs in the background.
        """
        if self.expense is None:
            raise RuntimeError("No expense is open.")
        try:
            await self._mutations.delete(self.expense.id, confirmed=confirmed)
        except (ValueError, ExpenseStoreError) as exc:
            self.error = str(exc)
            self._logger.warning(
                f"Expense deletion failed for id={self.expense.id}: {exc}"
            )
            return False
        self.close()
        return True


__all__ = [
    "ExpenseFormFields",
    "ExpenseForm",
    "ExpenseDetail",
    "local_input_now",
    "LOCAL_INPUT_FORMAT",
]
