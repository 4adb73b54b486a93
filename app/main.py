"""
Streamlit Frontend for Budget Tracker

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Form errors shown inline, in plain language
3. Every mutation goes through the stores; the UI keeps no data of its own
4. Charts are drawn from the pure aggregates, recomputed on every rerun

Run with:
    streamlit run app/main.py
"""

from datetime import date

import streamlit as st

from budget_tracker.errors import BudgetTrackerError
from budget_tracker.models.transaction import TransactionKind, recommended_categories
from budget_tracker.models.user import User
from budget_tracker.orchestrator import AppComponents, DashboardData, create_app_components
from budget_tracker.services.storage import StorageError


# Page configuration
st.set_page_config(
    page_title="Budget Tracker",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)


@st.cache_resource
def get_components() -> AppComponents:
    """Get or create application components (cached)."""
    return create_app_components()


def main():
    """Main application entry point."""
    components = get_components()
    user = components.credentials.current_user()

    if user is None:
        render_auth_page(components)
    else:
        render_dashboard(components, user)


def render_auth_page(components: AppComponents):
    """Render sign-in and registration."""
    st.title("💰 Budget Tracker")
    st.markdown("Track your income and expenses in one place.")

    login_tab, register_tab = st.tabs(["Sign In", "Create Account"])

    with login_tab:
        with st.form("login_form"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Sign In", type="primary")

        if submitted:
            try:
                components.credentials.login(email, password)
                st.rerun()
            except BudgetTrackerError as e:
                st.error(e.message)

    with register_tab:
        with st.form("register_form"):
            name = st.text_input("Name")
            email = st.text_input("Email", key="register_email")
            password = st.text_input("Password", type="password", key="register_password")
            submitted = st.form_submit_button("Create Account", type="primary")

        if submitted:
            try:
                components.credentials.register(name, email, password)
                st.rerun()
            except BudgetTrackerError as e:
                st.error(e.message)


def render_dashboard(components: AppComponents, user: User):
    """Render the signed-in dashboard."""
    settings = components.settings

    st.sidebar.title("💰 Budget Tracker")
    st.sidebar.markdown(f"Signed in as **{user.name}**  \n{user.email}")
    if st.sidebar.button("Sign Out"):
        components.credentials.logout()
        st.rerun()

    search = st.session_state.get("search_term", "")
    data = components.dashboard.load(user, search=search)

    render_stats(data, settings.format_amount)

    add_tab, history_tab, analytics_tab = st.tabs(
        ["➕ Add Transaction", "📜 Transaction History", "📊 Analytics"]
    )

    with add_tab:
        render_add_form(components, user)

    with history_tab:
        render_history(components, user, data, settings.format_amount)

    with analytics_tab:
        render_analytics(data, settings.format_amount)


def render_stats(data: DashboardData, fmt):
    """Headline numbers."""
    summary = data.summary
    month_name = date.today().strftime("%B")

    col1, col2, col3, col4 = st.columns(4)
    col1.metric(
        "Total Balance",
        fmt(summary.balance),
        help="You're in the green!" if summary.is_positive else "You're overspending",
    )
    col2.metric("Total Income", fmt(summary.total_income), help="All time earnings")
    col3.metric("Total Expenses", fmt(summary.total_expenses), help="All time spending")
    col4.metric(
        month_name,
        fmt(summary.month_net),
        help=f"{fmt(summary.month_income)} in, {fmt(summary.month_expenses)} out",
    )


def render_add_form(components: AppComponents, user: User):
    """Add-transaction form."""
    kind = st.radio(
        "Transaction Type",
        options=list(TransactionKind),
        index=1,
        format_func=lambda k: k.value.capitalize(),
        horizontal=True,
    )

    with st.form("add_transaction_form", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            amount = st.text_input("Amount *", placeholder="0.00")
            category = st.selectbox(
                "Category *",
                options=[""] + list(recommended_categories(kind)),
                format_func=lambda c: c or "Select a category",
            )
        with col2:
            tx_date = st.date_input("Date *", value=date.today())
            note = st.text_area("Description (optional)", height=100)

        submitted = st.form_submit_button(
            f"Add {kind.value.capitalize()}", type="primary"
        )

    if submitted:
        try:
            result = components.transactions.record(
                user,
                kind=kind,
                amount=amount,
                category=category,
                date=tx_date,
                note=note,
            )
            summary = components.transactions.validator.get_user_friendly_summary(result)
            st.success(summary)
        except BudgetTrackerError as e:
            st.error(e.message)
        except StorageError as e:
            st.error(f"Could not save: {e}")


def render_history(components: AppComponents, user: User, data: DashboardData, fmt):
    """Searchable transaction list with delete buttons."""
    if data.is_empty:
        st.info("No transactions yet. Start by adding your first income or expense!")
        return

    count = data.total_transaction_count
    st.caption(f"{count} transaction{'s' if count != 1 else ''} recorded")
    st.text_input("Search transactions...", key="search_term")

    if not data.transactions and data.search_term:
        st.info("No transactions match your search.")
        return

    for tx in data.transactions:
        col1, col2, col3 = st.columns([6, 2, 1])
        with col1:
            st.markdown(f"**{tx.category}** · `{tx.kind.value}`")
            if tx.note:
                st.caption(tx.note)
            st.caption(tx.date.strftime("%b %d, %Y"))
        with col2:
            sign = "+" if tx.kind == TransactionKind.INCOME else "-"
            st.markdown(f"**{sign}{fmt(tx.amount)}**")
        with col3:
            if st.button("🗑️", key=f"delete_{tx.id}"):
                components.transactions.delete(user, tx.id)
                st.rerun()


def render_analytics(data: DashboardData, fmt):
    """Trend and breakdown charts."""
    if data.is_empty:
        st.info("No transaction data available for analytics")
        return

    monthly_rows = data.monthly_chart_rows()

    st.subheader("Monthly Income vs Expenses")
    st.bar_chart(
        monthly_rows,
        x="Month",
        y=["Income", "Expenses"],
    )

    st.subheader("Net Income Trend")
    st.line_chart(
        monthly_rows,
        x="Month",
        y="Net",
    )

    col1, col2 = st.columns(2)
    with col1:
        st.subheader("Expense Distribution")
        if not data.expense_shares:
            st.caption("No expenses recorded yet")
        for share in data.expense_shares:
            st.progress(
                min(share.percentage / 100, 1.0),
                text=f"{share.category}: {share.percentage:.0f}% ({fmt(share.amount)})",
            )

    with col2:
        st.subheader("Categories")
        st.bar_chart(
            [
                {"Category": row.category, "Total": float(row.total)}
                for row in data.categories
            ],
            x="Category",
            y="Total",
        )


if __name__ == "__main__":
    main()
