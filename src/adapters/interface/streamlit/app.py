"""Streamlit dashboard entry point."""

import asyncio
from collections.abc import Coroutine, Sequence
from datetime import date, datetime, time
from decimal import Decimal

import altair as alt
import streamlit as st

from src.application.use_cases.budget_panel import BudgetPanelController
from src.application.use_cases.dashboard_view import (
    DashboardViewState,
    ExpenseRow,
)
from src.application.use_cases.expense_form import (
    LOCAL_INPUT_FORMAT,
    ExpenseDetail,
    ExpenseForm,
)
from src.domain.constants import RECEIPT_IMAGE_EXTENSIONS, UNCATEGORIZED_LABEL
from src.domain.models.budgets import AlertLevel, BudgetDraft, BudgetUsageReport
from src.domain.models.expenses import (
    BreakdownShare,
    Category,
    DashboardPeriod,
    Expense,
    PaymentMethod,
)
from src.domain.models.filters import FilterCriteria
from src.domain.models.preferences import UiPreferences
from src.domain.services.normalization import parse_limit_input
from src.infrastructure.container import (
    AppContainer,
    build_app_container,
    build_preferences_store,
)
from src.utils.decimal_utils import coerce_decimal

ALERT_COLORS = {
    AlertLevel.CRITICAL: "#dc2626",
    AlertLevel.WARNING: "#f59e0b",
    AlertLevel.NOTICE: "#22c55e",
    AlertLevel.NORMAL: "#3b82f6",
}

PAYMENT_METHODS = [method.value for method in PaymentMethod]

SELECTION_KEY = "open_expense"
SELECTION_RESET_KEY = "open_expense_reset"

DARK_CSS = """
<style>
.stApp { background-color: #0f172a; color: #e2e8f0; }
</style>
"""


def _format_currency(value: Decimal | None) -> str:
    """Format amounts in USD for display."""
    amount = value or Decimal("0")
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def _alert_color(level: AlertLevel | None) -> str:
    return ALERT_COLORS.get(level or AlertLevel.NORMAL, ALERT_COLORS[AlertLevel.NORMAL])


def _category_label(name: str | None) -> str:
    return name or UNCATEGORIZED_LABEL


def _receipt_preview_kind(url: str | None) -> str | None:
    """Return "image" for image receipts, "link" for others, None if unset."""
    if not url:
        return None
    lowered = url.lower()
    if lowered.endswith(RECEIPT_IMAGE_EXTENSIONS):
        return "image"
    return "link"


def _local_input(day: date, moment: time) -> str:
    """Format date and time widgets as a datetime-local value."""
    return datetime.combine(day, moment).strftime(LOCAL_INPUT_FORMAT)


def _expense_to_open(
    detail: ExpenseDetail,
    selected: str,
    by_id: dict[str, Expense],
) -> Expense | None:
    """Return the expense to open for the current selection, if any."""
    if not selected or selected not in by_id:
        return None
    if detail.is_open and detail.expense is not None:
        if detail.expense.id == selected:
            return None
    return by_id[selected]


def _request_selection_reset() -> None:
    """Clear the expense selector on the next run."""
    st.session_state[SELECTION_RESET_KEY] = True


def _consume_selection_reset() -> None:
    # Must run before the selector widget is created in this run.
    if st.session_state.pop(SELECTION_RESET_KEY, False):
        st.session_state[SELECTION_KEY] = ""


def _amount_edit(raw: str, current: Decimal) -> Decimal | None:
    """Return the new overall limit, or None when the value is unchanged.

    Raises:
        ValueError: If the input is not a number.
    """
    amount = coerce_decimal(raw)
    if amount == current:
        return None
    return amount


def _limit_changed(raw: str, current: Decimal | None) -> bool:
    """Compare a limit input with the stored limit by value."""
    return parse_limit_input(raw) != current


def _run(container: AppContainer, coro: Coroutine):
    """Run a coroutine and wait for the refetches it triggered."""

    async def _runner():
        result = await coro
        await container.event_bus.drain()
        return result

    return asyncio.run(_runner())


def _get_container() -> AppContainer:
    """Return the session's container, building it on first use."""
    if "container" not in st.session_state:
        st.session_state["container"] = build_app_container()
    return st.session_state["container"]


def _get_preferences() -> UiPreferences:
    """Load preferences once per session."""
    if "preferences" not in st.session_state:
        st.session_state["preferences"] = build_preferences_store().load()
    return st.session_state["preferences"]


def _set_dark_mode(enabled: bool) -> UiPreferences:
    """Persist a dark-mode change and keep it for the session."""
    preferences = _get_preferences()
    if preferences.dark_mode == enabled:
        return preferences
    updated = preferences.with_dark_mode(enabled)
    build_preferences_store().save(updated)
    st.session_state["preferences"] = updated
    return updated


def _prepare_breakdown_chart_data(
    breakdown: Sequence[BreakdownShare],
) -> list[dict[str, str | float]]:
    """Prepare Altair-ready rows for the category breakdown chart."""
    return [
        {
            "category": _category_label(item.category_name),
            "total": float(item.total),
            "total_label": _format_currency(item.total),
            "share_label": f"{item.share:.1f}%",
        }
        for item in breakdown
    ]


def _expense_table(rows: Sequence[ExpenseRow]) -> list[dict[str, str]]:
    """Return table rows for the filtered expenses."""
    return [
        {
            "Date": row.expense.date.astimezone().strftime("%Y-%m-%d %H:%M"),
            "Description": row.expense.description or "-",
            "Category": row.category_name or "-",
            "Payment": row.expense.payment_method.value,
            "Amount": _format_currency(row.expense.amount),
        }
        for row in rows
    ]


def _render_summary(state: DashboardViewState) -> None:
    total_col, recent_col, categories_col = st.columns(3)
    total_col.metric("Total Spent", _format_currency(state.total_spent))
    recent_col.metric("Recent Transactions", state.recent_count)
    categories_col.metric("Categories Used", state.categories_used)
    for name, message in state.errors.items():
        st.error(f"Could not load {name}: {message}")


def _render_quick_add(
    container: AppContainer,
    categories: Sequence[Category],
) -> None:
    """Render the quick-add form; inputs reset only after a success."""
    st.subheader("Quick Add")
    if "quick_add" not in st.session_state:
        st.session_state["quick_add"] = ExpenseForm(container.mutations)
        st.session_state["quick_add_version"] = 0
    form: ExpenseForm = st.session_state["quick_add"]
    version = st.session_state["quick_add_version"]
    category_ids = [""] + [category.id for category in categories]
    names = {category.id: category.name for category in categories}

    with st.form(f"quick_add_{version}"):
        amount = st.text_input("Amount", key=f"qa_amount_{version}")
        category_id = st.selectbox(
            "Category",
            category_ids,
            format_func=lambda cid: names.get(cid, "Category"),
            key=f"qa_category_{version}",
        )
        description = st.text_input(
            "Description",
            key=f"qa_description_{version}",
        )
        payment_method = st.selectbox(
            "Payment method",
            PAYMENT_METHODS,
            index=PAYMENT_METHODS.index(PaymentMethod.OTHER.value),
            key=f"qa_payment_{version}",
        )
        day = st.date_input("Date", key=f"qa_date_{version}")
        moment = st.time_input("Time", key=f"qa_time_{version}")
        attachment_url = st.text_input(
            "Receipt URL (optional)",
            key=f"qa_attachment_{version}",
        )
        submitted = st.form_submit_button("Add Expense")

    if not submitted:
        return
    form.update(
        amount=amount,
        category_id=category_id,
        description=description,
        payment_method=payment_method,
        date=_local_input(day, moment),
        attachment_url=attachment_url,
    )
    created = _run(container, form.submit())
    if created is None:
        st.error(form.error)
        return
    st.session_state["quick_add_version"] = version + 1
    st.rerun()


def _read_filters(categories: Sequence[Category]) -> FilterCriteria:
    """Render the filter inputs and return the criteria they describe."""
    st.subheader("Search & Filters")
    names = {category.id: category.name for category in categories}
    q_col, category_col, payment_col, from_col, to_col = st.columns(5)
    q = q_col.text_input("Search description")
    category_id = category_col.selectbox(
        "Category filter",
        [""] + list(names),
        format_func=lambda cid: names.get(cid, "All categories"),
    )
    payment_method = payment_col.selectbox(
        "Payment filter",
        [""] + PAYMENT_METHODS,
        format_func=lambda value: value or "Any payment",
    )
    date_from = from_col.date_input("From", value=None)
    date_to = to_col.date_input("To", value=None)
    return FilterCriteria(
        q=q,
        category_id=category_id,
        payment_method=payment_method,
        date_from=date_from,
        date_to=date_to,
    )


def _render_breakdown_chart(breakdown: Sequence[BreakdownShare]) -> None:
    st.subheader("Category Breakdown")
    if not breakdown:
        st.info("No spending recorded for this period.")
        return
    data = _prepare_breakdown_chart_data(breakdown)
    chart = alt.Chart(alt.Data(values=data)).mark_bar(
        cornerRadius=4,
    ).encode(
        x=alt.X("total:Q", title="Spent"),
        y=alt.Y("category:N", sort="-x", title=None),
        color=alt.value("#3b82f6"),
        tooltip=[
            alt.Tooltip("category:N"),
            alt.Tooltip("total_label:N"),
            alt.Tooltip("share_label:N"),
        ],
    )
    st.altair_chart(chart, width="stretch")


def _render_expenses(
    state: DashboardViewState,
    detail: ExpenseDetail,
) -> None:
    st.subheader("Recent Expenses")
    if state.loading.get("expenses"):
        st.caption("Loading...")
    st.dataframe(
        _expense_table(state.expenses),
        width="stretch",
        hide_index=True,
    )
    by_id = {row.expense.id: row.expense for row in state.expenses}
    _consume_selection_reset()
    selected = st.selectbox(
        "Open expense",
        [""] + list(by_id),
        format_func=lambda eid: eid or "Select an expense",
        key=SELECTION_KEY,
    )
    expense = _expense_to_open(detail, selected, by_id)
    if expense is not None:
        detail.open(expense)


def _render_detail(
    container: AppContainer,
    detail: ExpenseDetail,
    categories: Sequence[Category],
) -> None:
    """Render the expense detail editor with save and delete actions."""
    if not detail.is_open or detail.fields is None:
        return
    expense_id = detail.expense.id
    fields = detail.fields
    st.subheader("Expense Details")
    category_ids = [""] + [category.id for category in categories]
    names = {category.id: category.name for category in categories}
    amount = st.text_input("Amount", fields.amount, key=f"d_amount_{expense_id}")
    category_id = st.selectbox(
        "Category",
        category_ids,
        index=category_ids.index(fields.category_id)
        if fields.category_id in category_ids
        else 0,
        format_func=lambda cid: names.get(cid, UNCATEGORIZED_LABEL),
        key=f"d_category_{expense_id}",
    )
    description = st.text_input(
        "Description",
        fields.description,
        key=f"d_description_{expense_id}",
    )
    payment_method = st.selectbox(
        "Payment Method",
        PAYMENT_METHODS,
        index=PAYMENT_METHODS.index(fields.payment_method),
        key=f"d_payment_{expense_id}",
    )
    date_value = st.text_input(
        "Date",
        fields.date,
        key=f"d_date_{expense_id}",
    )
    attachment_url = st.text_input(
        "Receipt URL",
        fields.attachment_url,
        key=f"d_attachment_{expense_id}",
    )
    preview = _receipt_preview_kind(attachment_url)
    if preview == "image":
        st.image(attachment_url, caption="Receipt Preview")
    elif preview == "link":
        st.markdown(f"[Open attachment]({attachment_url})")

    detail.update(
        amount=amount,
        category_id=category_id,
        description=description,
        payment_method=payment_method,
        date=date_value,
        attachment_url=attachment_url,
    )
    confirm = st.checkbox("Confirm delete", key=f"d_confirm_{expense_id}")
    delete_col, cancel_col, save_col = st.columns(3)
    if delete_col.button("Delete", key=f"d_delete_{expense_id}"):
        if _run(container, detail.delete(confirmed=confirm)):
            _request_selection_reset()
            st.rerun()
    if cancel_col.button("Cancel", key=f"d_cancel_{expense_id}"):
        detail.close()
        _request_selection_reset()
        st.rerun()
    if save_col.button("Save", key=f"d_save_{expense_id}"):
        if _run(container, detail.save()) is not None:
            _request_selection_reset()
            st.rerun()
    if detail.error:
        st.error(detail.error)


def _render_usage_bar(
    label: str,
    percent: int,
    level: AlertLevel | None,
) -> None:
    color = _alert_color(level)
    st.markdown(
        f"{label}<div style='background:#e2e8f0;border-radius:4px;height:8px'>"
        f"<div style='width:{percent}%;background:{color};height:8px;"
        f"border-radius:4px'></div></div>",
        unsafe_allow_html=True,
    )


def _render_usage(report: BudgetUsageReport | None) -> None:
    if report is None:
        st.caption("Usage not available yet.")
        return
    _render_usage_bar(
        f"Used {_format_currency(report.total)} / "
        f"{_format_currency(report.limit)} ({report.overall_percent}%)",
        report.overall_percent,
        report.alert_level,
    )
    if not report.categories:
        return
    st.markdown("**Usage by Category**")
    for row in report.categories:
        name = _category_label(row.category_name)
        if row.limit is None:
            _render_usage_bar(f"{name}: {_format_currency(row.total)}", 0, None)
            continue
        _render_usage_bar(
            f"{name}: {_format_currency(row.total)} / "
            f"{_format_currency(row.limit)} ({row.percent}%)",
            row.percent,
            row.alert_level,
        )


def _render_budget_panel(
    container: AppContainer,
    panel: BudgetPanelController,
    categories: Sequence[Category],
) -> None:
    """Render the monthly budget editor and its usage bars."""
    st.subheader("Budget")
    month = st.text_input("Month (YYYY-MM)", panel.month)
    if month != panel.month:
        try:
            _run(container, panel.select_month(month))
        except ValueError as exc:
            st.error(str(exc))
    if panel.budget.error:
        st.error(f"Could not load budget: {panel.budget.error}")

    budget = panel.working_budget
    if isinstance(panel.state, BudgetDraft):
        st.caption("Draft, not saved yet.")
    amount = st.text_input(
        "Monthly Limit",
        str(budget.amount),
        key=f"budget_amount_{panel.month}",
    )
    try:
        new_amount = _amount_edit(amount, budget.amount)
    except ValueError as exc:
        st.error(str(exc))
    else:
        if new_amount is not None:
            panel.set_amount(new_amount)

    st.markdown("**Per-Category Limits (optional)**")
    for category in categories:
        current = budget.limit_for(category.id)
        raw = st.text_input(
            category.name,
            "" if current is None else str(current),
            key=f"limit_{panel.month}_{category.id}",
        )
        if _limit_changed(raw, current):
            panel.set_category_limit(category.id, raw)

    if st.button("Save budget"):
        known = {category.id for category in categories}
        if not _run(container, panel.save(known_category_ids=known)):
            st.error(panel.save_error)
    _render_usage(panel.usage_report())


def main() -> None:
    """Render the Streamlit app."""
    st.set_page_config(page_title="Expense Tracker", layout="wide")
    st.title("Expense Tracker")

    container = _get_container()
    preferences = _set_dark_mode(
        st.sidebar.toggle("Dark mode", value=_get_preferences().dark_mode)
    )
    if preferences.dark_mode:
        st.markdown(DARK_CSS, unsafe_allow_html=True)

    periods = [period.value for period in DashboardPeriod]
    period = st.sidebar.selectbox(
        "Period",
        periods,
        index=periods.index(container.dashboard.period.value),
    )

    dashboard = container.dashboard
    _run(container, dashboard.set_period(period))
    _run(container, dashboard.refresh())
    categories = list(dashboard.categories.data or [])

    try:
        criteria = _read_filters(categories)
        _run(container, dashboard.set_criteria(criteria))
    except ValueError as exc:
        st.error(str(exc))

    _run(container, container.budget_panel.refresh())
    state = dashboard.view_state()
    _render_summary(state)
    _render_quick_add(container, categories)
    _render_breakdown_chart(state.breakdown)

    if "detail" not in st.session_state:
        st.session_state["detail"] = ExpenseDetail(container.mutations)
    detail: ExpenseDetail = st.session_state["detail"]
    _render_expenses(state, detail)
    _render_detail(container, detail, categories)
    _render_budget_panel(container, container.budget_panel, categories)


if __name__ == "__main__":  # pragma: no cover
    main()
