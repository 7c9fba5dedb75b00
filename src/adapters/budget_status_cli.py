"""CLI adapter printing budget usage for a month.

This module wires the budget status use case to the HTTP expense store and
prints overall and per-category usage with their alert levels.
"""

import argparse
import asyncio
import sys

from src.domain.constants import UNCATEGORIZED_LABEL
from src.domain.errors import ExpenseStoreError
from src.domain.models.budgets import BudgetUsageReport
from src.domain.services.normalization import current_month, normalize_month
from src.infrastructure.container import build_budget_status_use_case
from src.infrastructure.logging.logger import get_app_logger


def format_report(report: BudgetUsageReport) -> list[str]:
    """Return the printable lines of a usage report."""
    lines = [
        f"Budget {report.month}: {report.total:,.2f} / {report.limit:,.2f} "
        f"({report.overall_percent}%) {report.alert_level.value}"
    ]
    for row in report.categories:
        name = row.category_name or UNCATEGORIZED_LABEL
        if row.limit is None:
            lines.append(f"  {name}: {row.total:,.2f}")
        else:
            lines.append(
                f"  {name}: {row.total:,.2f} / {row.limit:,.2f} "
                f"({row.percent}%) {row.alert_level.value}"
            )
    return lines


def _month_arg(value: str) -> str:
    try:
        return normalize_month(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"invalid month {value!r}, expected YYYY-MM"
        ) from exc


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Show budget usage and alert levels for a month.",
    )
    parser.add_argument(
        "month",
        nargs="?",
        type=_month_arg,
        default=current_month(),
        help="Month formatted as YYYY-MM (default: current month)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Run the budget status use case and print the report."""
    args = _parse_args(argv)
    logger = get_app_logger()
    use_case = build_budget_status_use_case(logger=logger)

    try:
        report = asyncio.run(use_case.execute(args.month))
    except ExpenseStoreError as exc:
        logger.error(f"Budget status failed for {args.month}: {exc}")
        print(f"Could not load budget status: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    for line in format_report(report):
        print(line)


if __name__ == "__main__":  # pragma: no cover
    main()
