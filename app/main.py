"""
Streamlit Frontend for the Expense Tracker

Pages:
1. Dashboard - summary cards, category breakdown, monthly trend
2. Add Expense - validated entry form
3. Expenses - filterable list with edit, delete and export
4. Top Categories / Top Vendors - rankings
5. Insights - this month at a glance

The UI never mutates data directly. Every change goes through the
ExpenseStore kept in the session, and every view is read back from it.
"""

from datetime import date
from typing import Optional

import streamlit as st

from expense_tracker.audit import configure_logging
from expense_tracker.config import get_settings
from expense_tracker.export import DEFAULT_EXPORT_BASENAME, EmptyExportError, ExportFormat
from expense_tracker.formatting import format_currency, format_date
from expense_tracker.models.expense import (
    ALL_CATEGORIES,
    Expense,
    ExpenseCategory,
    ExpenseFilters,
    ExpenseFormData,
)
from expense_tracker.queries import (
    monthly_insights,
    monthly_trend,
    rank_categories,
    rank_vendors,
    recent_expenses,
    select_for_export,
    sort_by_date,
)
from expense_tracker.store import ExpenseStore, create_store
from expense_tracker.validation import ExpenseValidator


CATEGORY_ICONS = {
    ExpenseCategory.FOOD: "🍔",
    ExpenseCategory.TRANSPORTATION: "🚗",
    ExpenseCategory.ENTERTAINMENT: "🎬",
    ExpenseCategory.SHOPPING: "🛒",
    ExpenseCategory.BILLS: "📄",
    ExpenseCategory.OTHER: "📌",
}


# Page configuration
st.set_page_config(
    page_title="Expense Tracker",
    page_icon="💸",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .big-number {
        font-size: 2.5em;
        font-weight: bold;
        color: #2c3e50;
    }
</style>
""", unsafe_allow_html=True)


def get_store() -> ExpenseStore:
    """Get or create the store for this browser session."""
    if "store" not in st.session_state:
        configure_logging(get_settings().app.log_level)
        st.session_state.store = create_store()
    return st.session_state.store


def category_label(category: ExpenseCategory) -> str:
    return f"{CATEGORY_ICONS[category]} {category.value}"


def main():
    """Main application entry point."""
    store = get_store()

    st.sidebar.title("💸 Expense Tracker")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        [
            "📊 Dashboard",
            "➕ Add Expense",
            "📋 Expenses",
            "🏆 Top Categories",
            "🏪 Top Vendors",
            "💡 Insights",
        ],
        index=0,
    )

    if page == "📊 Dashboard":
        render_dashboard_page(store)
    elif page == "➕ Add Expense":
        render_add_page(store)
    elif page == "📋 Expenses":
        render_expenses_page(store)
    elif page == "🏆 Top Categories":
        render_top_categories_page(store)
    elif page == "🏪 Top Vendors":
        render_top_vendors_page(store)
    elif page == "💡 Insights":
        render_insights_page(store)


def render_dashboard_page(store: ExpenseStore):
    """Render summary cards, charts and recent expenses."""
    settings = get_settings().app
    summary = store.summary

    st.title("📊 Dashboard")

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total Spending", format_currency(summary.total_spending))
    col2.metric("This Month", format_currency(summary.monthly_spending))
    col3.metric("Average Expense", format_currency(summary.average_expense))
    col4.metric("Expenses", summary.expense_count)

    st.markdown("---")

    col1, col2 = st.columns(2)
    with col1:
        st.subheader("By Category")
        if summary.category_breakdown:
            st.bar_chart({
                category.value: amount
                for category, amount in summary.category_breakdown.items()
            })
        else:
            st.info("No expenses yet.")

    with col2:
        trend = monthly_trend(store.expenses, store.today(), settings.trend_months)
        total = sum(month.amount for month in trend)
        st.subheader(f"Monthly Spending (last {settings.trend_months} months)")
        if total > 0:
            st.bar_chart({month.label: month.amount for month in trend})
            st.caption(
                f"{settings.trend_months}-month total: {format_currency(total)} · "
                f"Monthly average: {format_currency(total / settings.trend_months)}"
            )
        else:
            st.info(f"No spending data in the last {settings.trend_months} months")

    st.subheader("Recent Expenses")
    recent = recent_expenses(store.expenses, settings.recent_expenses_limit)
    if not recent:
        st.info("Add your first expense from the 'Add Expense' page.")
    for expense in recent:
        render_expense_row(expense)


def render_expense_row(expense: Expense):
    col1, col2 = st.columns([4, 1])
    col1.markdown(
        f"{CATEGORY_ICONS[expense.category]} **{expense.description}**  \n"
        f"{expense.category.value} · {format_date(expense.date)}"
    )
    col2.markdown(f"**{format_currency(expense.amount)}**")


def render_expense_form(
    key: str,
    initial: ExpenseFormData,
    today: date,
) -> Optional[ExpenseFormData]:
    """
    Show the expense form.

    Returns the submitted form once it passes validation.
    """
    categories = list(ExpenseCategory)

    with st.form(key):
        amount = st.number_input(
            "Amount ($) *",
            value=float(initial.amount),
            min_value=0.0,
            step=0.01,
            format="%.2f",
        )
        category = st.selectbox(
            "Category *",
            options=categories,
            index=categories.index(initial.category),
            format_func=category_label,
        )
        description = st.text_input("Description *", value=initial.description)
        expense_date = st.date_input("Date *", value=initial.date, max_value=today)
        submitted = st.form_submit_button("Save", type="primary")

    if not submitted:
        return None

    form = ExpenseFormData(
        amount=amount,
        category=category,
        description=description,
        date=expense_date,
    )
    validator = ExpenseValidator()
    result = validator.validate(form, today=today)
    if not result.is_valid:
        st.error(validator.get_user_friendly_summary(result))
        return None
    return form


def render_add_page(store: ExpenseStore):
    """Render the add-expense page."""
    st.title("➕ Add Expense")

    today = store.today()
    form = render_expense_form(
        "add_expense",
        ExpenseFormData(amount=0.0, description="", date=today),
        today,
    )
    if form:
        expense = store.add_expense(form)
        st.success(
            f"✅ Saved {format_currency(expense.amount)} for {expense.description}"
        )


def render_expenses_page(store: ExpenseStore):
    """Render the filterable expense list."""
    st.title("📋 Expenses")

    filters = store.filters
    col1, col2, col3, col4 = st.columns([3, 2, 2, 2])
    search = col1.text_input("Search", value=filters.search)
    category_options = [ALL_CATEGORIES] + list(ExpenseCategory)
    category = col2.selectbox(
        "Category",
        options=category_options,
        index=category_options.index(filters.category),
        format_func=lambda x: "All Categories" if x == ALL_CATEGORIES else category_label(x),
    )
    start_date = col3.date_input("From", value=filters.start_date)
    end_date = col4.date_input("To", value=filters.end_date)

    requested = ExpenseFilters(
        search=search,
        category=category,
        start_date=start_date,
        end_date=end_date,
    )
    changes = {
        name: value
        for name, value in requested.model_dump().items()
        if getattr(filters, name) != value
    }
    if changes:
        store.set_filters(**changes)
    if store.filters.is_active and st.button("Clear filters"):
        store.clear_filters()
        st.rerun()

    visible = sort_by_date(store.filtered_expenses)
    st.caption(f"Showing {len(visible)} of {store.summary.expense_count} expenses")

    render_export_section(store, visible)

    st.markdown("---")
    for expense in visible:
        render_expense_row(expense)
        col1, col2 = st.columns(2)
        with col1.expander("✏️ Edit"):
            form = render_expense_form(
                f"edit_{expense.id}", expense.to_form_data(), store.today()
            )
            if form:
                store.update_expense(expense.id, form)
                st.rerun()
        if col2.button("🗑️ Delete", key=f"delete_{expense.id}"):
            store.delete_expense(expense.id)
            st.rerun()


def render_export_section(store: ExpenseStore, visible: list[Expense]):
    """Export the visible expenses, narrowed by category and date range."""
    with st.expander("⬇️ Export"):
        col1, col2 = st.columns(2)
        export_format = col1.radio(
            "Format",
            options=list(ExportFormat),
            format_func=lambda f: f.label,
            horizontal=True,
        )
        basename = col2.text_input("Filename", value=DEFAULT_EXPORT_BASENAME)

        categories = st.multiselect(
            "Categories",
            options=list(ExpenseCategory),
            default=list(ExpenseCategory),
            format_func=category_label,
        )
        col1, col2 = st.columns(2)
        start_date = col1.date_input("Export from", value=None, key="export_start")
        end_date = col2.date_input("Export to", value=None, key="export_end")

        selection = select_for_export(
            visible,
            categories=categories,
            start_date=start_date,
            end_date=end_date,
        )
        st.caption(
            f"{len(selection)} expenses · "
            f"{format_currency(sum(e.amount for e in selection))}"
        )

        if st.button("Prepare export", key="prepare_export"):
            try:
                content, filename = store.export(
                    export_format, selection, basename=basename
                )
                st.session_state.export_payload = (content, filename, export_format)
            except EmptyExportError:
                st.session_state.pop("export_payload", None)
                st.warning("No expenses to export with current filters")

        payload = st.session_state.get("export_payload")
        if payload:
            content, filename, prepared_format = payload
            st.download_button(
                f"Download {filename}",
                data=content,
                file_name=filename,
                mime=prepared_format.mime_type,
            )
            if prepared_format is ExportFormat.HTML:
                st.caption("Open the report in a browser and print it to save as PDF.")


def render_top_categories_page(store: ExpenseStore):
    """Render categories ranked by spend."""
    st.title("🏆 Top Categories")

    rankings = rank_categories(store.expenses)
    active = [row for row in rankings if row.amount > 0]
    st.metric("Active Categories", len(active))

    for row in rankings:
        col1, col2, col3 = st.columns([1, 4, 2])
        col1.markdown(f"**#{row.rank}**")
        col2.markdown(category_label(row.category))
        col2.progress(min(row.percentage / 100, 1.0))
        col3.markdown(f"{format_currency(row.amount)} ({row.percentage:.1f}%)")


def render_top_vendors_page(store: ExpenseStore):
    """Render vendors ranked by spend."""
    st.title("🏪 Top Vendors")

    vendors = rank_vendors(store.expenses)
    col1, col2, col3 = st.columns(3)
    col1.metric("Total Vendors", len(vendors))
    col2.metric(
        "Top Vendor Spending",
        format_currency(vendors[0].total_amount if vendors else 0.0),
    )
    col3.metric(
        "Average per Vendor",
        format_currency(
            sum(v.total_amount for v in vendors) / len(vendors) if vendors else 0.0
        ),
    )

    if not vendors:
        st.info("Add some expenses to see your top vendors")
        return

    top_amount = vendors[0].total_amount
    for index, vendor in enumerate(vendors, start=1):
        col1, col2, col3 = st.columns([1, 4, 2])
        col1.markdown(f"**#{index}**")
        col2.markdown(
            f"**{vendor.name}**  \n"
            + " ".join(CATEGORY_ICONS[c] for c in vendor.categories)
            + f" · {vendor.transaction_count} transactions"
        )
        col2.progress(vendor.total_amount / top_amount if top_amount > 0 else 0.0)
        col3.markdown(
            f"{format_currency(vendor.total_amount)}  \n"
            f"avg {format_currency(vendor.average_amount)}"
        )


def render_insights_page(store: ExpenseStore):
    """Render this month's breakdown."""
    settings = get_settings().app
    st.title("💡 Monthly Insights")

    insights = monthly_insights(
        store.expenses,
        store.today(),
        top_n=settings.top_categories_limit,
        daily_budget=settings.daily_budget,
    )

    col1, col2, col3 = st.columns(3)
    col1.metric("Spent This Month", format_currency(insights.total))
    col2.metric("Expenses This Month", insights.expense_count)
    col3.metric(
        "Budget Streak",
        f"{insights.budget_streak} days",
        help=f"Consecutive days at or under {format_currency(settings.daily_budget)}",
    )

    st.subheader("Top Categories")
    if not insights.top_categories:
        st.info("No expenses this month")
    for category, amount in insights.top_categories:
        share = insights.category_shares.get(category, 0.0)
        st.markdown(
            f"{category_label(category)}: **{format_currency(amount)}** ({share:.0%})"
        )


if __name__ == "__main__":
    main()
