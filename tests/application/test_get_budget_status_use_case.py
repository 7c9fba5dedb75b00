"""Tests for the GetBudgetStatusUseCase."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from src.application.use_cases.get_budget_status import GetBudgetStatusUseCase
from src.domain.errors import NetworkFailure
from src.domain.models.budgets import AlertLevel, Budget


@pytest.mark.asyncio
async def test_execute_without_budget_reports_zero(store) -> None:
    use_case = GetBudgetStatusUseCase(store, logger=MagicMock())

    report = await use_case.execute("2024-02")

    assert report.month == "2024-02"
    assert report.limit == Decimal("0")
    assert report.overall_percent == 0
    assert report.alert_level is AlertLevel.NORMAL


@pytest.mark.asyncio
async def test_execute_normalizes_month(store) -> None:
    store.budgets["2024-02"] = Budget("2024-02", Decimal("50"))
    logger = MagicMock()

    report = await GetBudgetStatusUseCase(store, logger=logger).execute("2024-2")

    assert report.limit == Decimal("50")
    assert ("fetch_budget", "2024-02") in store.calls
    logger.info.assert_called_once()


@pytest.mark.asyncio
async def test_execute_propagates_store_errors(store) -> None:
    store.fail["fetch_usage"] = NetworkFailure("offline")

    with pytest.raises(NetworkFailure):
        await GetBudgetStatusUseCase(store, logger=MagicMock()).execute("2024-02")
