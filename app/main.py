"""
Streamlit Frontend for InverTrack

This is the user interface for tracking cash accounts and projecting
how the capital grows day by day.

DESIGN PRINCIPLES:
1. Every edit is saved immediately
2. Figures are recomputed after each change, never cached
3. Amounts are rounded only when displayed
4. AI analysis is on demand, one request at a time
"""

import asyncio

import streamlit as st

from invertrack.config import get_settings, validate_all_settings
from invertrack.formatting import format_currency, format_percent
from invertrack.models import HORIZON_OPTIONS, first_projection_day
from invertrack.tracker import PortfolioTracker, RecordNotFoundError, create_tracker


# Page configuration
st.set_page_config(
    page_title="InverTrack",
    page_icon="💼",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .info-box {
        padding: 20px;
        background-color: #eef2ff;
        border-radius: 10px;
        border-left: 5px solid #4f46e5;
        margin: 10px 0;
    }
</style>
""", unsafe_allow_html=True)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_tracker() -> PortfolioTracker:
    """Get or create the tracker (cached for the server process)."""
    try:
        return create_tracker(use_storage=True)
    except Exception as e:
        st.error(f"Failed to initialize storage: {e}")
        return create_tracker(use_storage=False)


def currency_symbol() -> str:
    try:
        return get_settings().app.currency_symbol
    except Exception:
        return "$"


def money(value: float) -> str:
    return format_currency(value, currency_symbol())


def main():
    """Main application entry point."""
    tracker = get_tracker()

    st.sidebar.title("💼 InverTrack")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["📊 Portfolio", "📈 Projection", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **Tip:** the weighted average yield is more accurate than a
        simple average, because it accounts for how much money is
        working at each rate.
        """
    )

    if page == "📊 Portfolio":
        render_portfolio_page(tracker)
    elif page == "📈 Projection":
        render_projection_page(tracker)
    elif page == "⚙️ Settings":
        render_settings_page()


def render_summary(tracker: PortfolioTracker):
    """Render the three summary metrics."""
    summary = tracker.summary()
    col1, col2, col3 = st.columns(3)
    col1.metric("Total Capital", money(summary.total_amount))
    col2.metric("Weighted Average Yield", f"{format_percent(summary.weighted_average_yield)} / year")
    col3.metric("Projected Monthly Income", money(summary.monthly_income))


def render_portfolio_page(tracker: PortfolioTracker):
    """Render the accounts page."""
    st.title("📊 Portfolio")
    render_summary(tracker)
    st.markdown("---")

    left, right = st.columns([2, 1])

    with left:
        header, action = st.columns([3, 1])
        header.subheader(f"Accounts ({len(tracker.accounts)})")
        if action.button("➕ New Account"):
            tracker.add_account()
            st.rerun()

        if not tracker.accounts:
            st.info('No accounts yet. Click "New Account" to start.')

        for account in tracker.accounts:
            col_name, col_amount, col_yield, col_delete = st.columns([3, 2, 1.5, 0.7])
            name = col_name.text_input(
                "Name",
                value=account.name,
                placeholder="Account name...",
                key=f"name_{account.id}",
                label_visibility="collapsed",
            )
            amount = col_amount.number_input(
                "Amount",
                value=float(account.amount),
                step=100.0,
                format="%.2f",
                key=f"amount_{account.id}",
                label_visibility="collapsed",
            )
            annual_yield = col_yield.number_input(
                "Yield (%)",
                value=float(account.annual_yield),
                step=0.01,
                format="%.2f",
                key=f"yield_{account.id}",
                label_visibility="collapsed",
            )
            if col_delete.button("🗑️", key=f"delete_{account.id}"):
                tracker.remove_account(account.id)
                st.rerun()

            values = {"name": name, "amount": amount, "annual_yield": annual_yield}
            try:
                if tracker.edit_account(account.id, values):
                    st.rerun()
            except (RecordNotFoundError, ValueError) as e:
                st.error(str(e))

        render_analysis(tracker)

    with right:
        st.subheader("Capital Distribution")
        slices = tracker.distribution()
        if slices:
            st.bar_chart(
                [{"Account": s.name, "Amount": s.amount} for s in slices],
                x="Account",
                y="Amount",
                horizontal=True,
            )
            st.dataframe(
                [
                    {
                        "Account": s.name,
                        "Amount": money(s.amount),
                        "Share": format_percent(s.share_percent),
                    }
                    for s in slices
                ],
                hide_index=True,
                use_container_width=True,
            )
        else:
            st.caption("No capital to distribute yet.")


def render_analysis(tracker: PortfolioTracker):
    """Render the AI analysis section."""
    st.markdown("---")
    st.subheader("✨ AI Analysis")

    if st.button("🔄 Refresh Analysis", disabled=not tracker.can_analyze):
        with st.spinner("Analyzing your portfolio..."):
            run_async(tracker.analyze())

    if tracker.last_analysis:
        render_analysis_text(tracker.last_analysis.text)
    else:
        st.markdown(
            '<div class="info-box">Click refresh to get insights about your portfolio.</div>',
            unsafe_allow_html=True,
        )


def render_analysis_text(text: str):
    """Show the model's reply as plain Markdown, never as raw HTML."""
    with st.container(border=True):
        st.markdown(text)


def render_projection_page(tracker: PortfolioTracker):
    """Render the daily projection page."""
    st.title("📈 Projection")
    render_summary(tracker)
    st.markdown("---")

    col1, col2 = st.columns(2)
    with col1:
        salary = st.number_input(
            "Salary per pay day (15th and month end)",
            value=float(tracker.salary),
            step=100.0,
            format="%.2f",
        )
        if salary != tracker.salary:
            tracker.set_salary(salary)
            st.rerun()

    with col2:
        try:
            default_horizon = get_settings().app.default_horizon_days
        except Exception:
            default_horizon = 30
        horizon = st.selectbox(
            "Horizon",
            options=list(HORIZON_OPTIONS),
            index=list(HORIZON_OPTIONS).index(default_horizon),
            format_func=lambda d: f"{d} days",
        )

    render_extra_incomes(tracker)

    ledger = tracker.projection(horizon)
    if not ledger:
        st.info("Nothing to project.")
        return

    final = ledger[-1]
    total_earned = sum(row.earned for row in ledger)
    total_income = sum(row.income for row in ledger)
    col1, col2, col3 = st.columns(3)
    col1.metric(f"Capital after {horizon} days", money(final.total))
    col2.metric("Interest earned", money(total_earned))
    col3.metric("Income received", money(total_income))

    st.line_chart({"Capital": [row.total for row in ledger]})
    st.dataframe(
        [
            {
                "Day": row.day,
                "Date": row.date.strftime("%d %b %Y"),
                "Earned": money(row.earned),
                "Income": money(row.income) if row.income else "",
                "Events": "; ".join(row.events),
                "Total": money(row.total),
            }
            for row in ledger
        ],
        hide_index=True,
        use_container_width=True,
    )


def render_extra_incomes(tracker: PortfolioTracker):
    """Render the extra income editor."""
    st.subheader("Extra Incomes")

    with st.form("add_extra_income", clear_on_submit=True):
        col1, col2, col3 = st.columns([3, 2, 2])
        description = col1.text_input("Description")
        amount = col2.number_input("Amount", value=0.0, step=100.0, format="%.2f")
        on = col3.date_input("Date", value=first_projection_day())
        if st.form_submit_button("➕ Add Income"):
            tracker.add_extra_income(description=description, amount=amount, on=on)
            st.rerun()
    st.caption("The projection starts tomorrow, so incomes dated today or earlier are not counted.")

    for income in tracker.extra_incomes:
        col1, col2, col3, col4 = st.columns([3, 2, 2, 0.7])
        description = col1.text_input(
            "Description",
            value=income.description,
            placeholder="Extra income",
            key=f"income_desc_{income.id}",
            label_visibility="collapsed",
        )
        amount = col2.number_input(
            "Amount",
            value=float(income.amount),
            step=100.0,
            format="%.2f",
            key=f"income_amount_{income.id}",
            label_visibility="collapsed",
        )
        on = col3.date_input(
            "Date",
            value=income.date,
            key=f"income_date_{income.id}",
            label_visibility="collapsed",
        )
        if col4.button("🗑️", key=f"delete_income_{income.id}"):
            tracker.remove_extra_income(income.id)
            st.rerun()

        values = {"description": description, "amount": amount, "date": on}
        try:
            if tracker.edit_extra_income(income.id, values):
                st.rerun()
        except (RecordNotFoundError, ValueError) as e:
            st.error(str(e))


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Connection Status")

    status = validate_all_settings()

    services = [
        ("Gemini (AI Analysis)", "gemini"),
        ("Local Storage", "storage"),
        ("Application", "app"),
    ]

    for name, key in services:
        if status.get(key, False):
            st.success(f"✅ {name} - Configured")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "To configure the application, create a `.env` file with your "
        "`GEMINI_API_KEY`. Storage location and currency symbol can be set with "
        "`INVERTRACK_STORAGE_DATA_PATH` and `CURRENCY_SYMBOL`."
    )


if __name__ == "__main__":
    main()
