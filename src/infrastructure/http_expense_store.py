"""ExpenseStorePort implementation over the REST/JSON API with httpx."""

import httpx

from src.domain.errors import DecodeFailure, NetworkFailure, RejectedByStore
from src.domain.models.budgets import Budget, UsageSummary
from src.domain.models.expenses import (
    Category,
    DashboardPeriod,
    DashboardSummary,
    Expense,
    ExpensePayload,
)
from src.domain.models.filters import ExpenseQuery
from src.infrastructure.expense_payloads import (
    encode_budget,
    encode_expense_payload,
    parse_budget,
    parse_category,
    parse_dashboard,
    parse_expense,
    parse_list,
    parse_usage,
)
from src.infrastructure.logging.logger import get_app_logger

_MISSING = object()


class HttpExpenseStore:
    """Expense store adapter backed by ``httpx.AsyncClient``.

    A client is opened per request, so the adapter is not bound to a single
    event loop. Transport errors become ``NetworkFailure``, non-2xx answers
    become ``RejectedByStore`` and unreadable bodies become
    ``DecodeFailure``.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
        logger=None,
    ) -> None:
        """Initialize the adapter.

        Args:
            base_url: Origin of the expense store.
            timeout: Request timeout in seconds.
            transport: Optional transport override, used by tests.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._logger = logger or get_app_logger()

    async def fetch_dashboard(
        self,
        period: DashboardPeriod,
    ) -> DashboardSummary:
        resolved = DashboardPeriod(period)
        raw = await self._request(
            "GET",
            "/api/dashboard",
            params={"period": resolved.value},
        )
        return parse_dashboard(raw, resolved)

    async def fetch_categories(self) -> list[Category]:
        raw = await self._request("GET", "/api/categories")
        return parse_list(raw, parse_category)

    async def fetch_expenses(self, query: ExpenseQuery) -> list[Expense]:
        raw = await self._request(
            "GET",
            "/api/expenses",
            params=list(query.params),
        )
        return parse_list(raw, parse_expense)

    async def create_expense(self, payload: ExpensePayload) -> Expense:
        raw = await self._request(
            "POST",
            "/api/expenses",
            json=encode_expense_payload(payload),
        )
        return parse_expense(raw)

    async def update_expense(
        self,
        expense_id: str,
        payload: ExpensePayload,
    ) -> Expense:
        raw = await self._request(
            "PUT",
            f"/api/expenses/{expense_id}",
            json=encode_expense_payload(payload),
        )
        if raw is None:
            raise DecodeFailure(f"Empty body when updating expense {expense_id}")
        return parse_expense(raw)

    async def delete_expense(self, expense_id: str) -> None:
        await self._request(
            "DELETE",
            f"/api/expenses/{expense_id}",
            decode=False,
        )

    async def fetch_budget(self, month: str) -> Budget | None:
        raw = await self._request(
            "GET",
            f"/api/budgets/{month}",
            missing=None,
        )
        return parse_budget(raw, month)

    async def save_budget(self, budget: Budget) -> None:
        await self._request(
            "PUT",
            f"/api/budgets/{budget.month}",
            json=encode_budget(budget),
            decode=False,
        )

    async def fetch_usage(self, month: str) -> UsageSummary:
        raw = await self._request("GET", f"/api/budgets/{month}/usage")
        return parse_usage(raw, month)

    async def _request(
        self,
        method: str,
        path: str,
        params=None,
        json=None,
        decode: bool = True,
        missing=_MISSING,
    ):
        """Send one request and return its decoded JSON body.

        Args:
            method: HTTP method.
            path: Path relative to the base URL.
            params: Optional query parameters.
            json: Optional JSON body.
            decode: Whether to decode the response body.
            missing: Value returned for a 404 instead of raising.

        Returns:
            Decoded JSON, ``missing`` on 404 when given, or None when the
            body is empty or not decoded.
        """
        async with httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            try:
                response = await client.request(
                    method,
                    path,
                    params=params,
                    json=json,
                )
            except httpx.HTTPError as exc:
                self._logger.error(f"{method} {path} failed: {exc}")
                raise NetworkFailure(f"{method} {path} failed: {exc}") from exc

        if response.status_code == 404 and missing is not _MISSING:
            return missing
        if not response.is_success:
            self._logger.warning(
                f"{method} {path} rejected with status {response.status_code}"
            )
            raise RejectedByStore(response.status_code, response.text[:200])
        if not decode or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            self._logger.error(f"{method} {path} returned invalid JSON")
            raise DecodeFailure(f"{method} {path} returned invalid JSON") from exc


__all__ = ["HttpExpenseStore"]
