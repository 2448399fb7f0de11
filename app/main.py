"""
Streamlit Frontend for the Expense Ledger

This is the screen a family uses every day to jot down what they spent.

DESIGN PRINCIPLES:
1. Adding an expense takes one short form
2. Every problem with the form is shown at once
3. Totals are always recomputed from the stored records
4. Storage problems are shown, never hidden

The UI is a consumer of the ledger: it only reads snapshots, submits
entries through intake, deletes by id and clears.
"""

from datetime import datetime
from decimal import Decimal

import streamlit as st

from expense_ledger.config import validate_all_settings
from expense_ledger.display import escape_markdown
from expense_ledger.models import ExpenseCategory, PERIOD_PRESETS, TimeWindow
from expense_ledger.orchestrator import LedgerComponents, create_app_components
from expense_ledger.queries import (
    newest_first,
    percentage_of,
    records_in,
    summarize,
    total_for,
)
from expense_ledger.services.export import export_filename


# Page configuration
st.set_page_config(
    page_title="Expense Ledger",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .success-box {
        padding: 20px;
        background-color: #d4edda;
        border-radius: 10px;
        border-left: 5px solid #28a745;
        margin: 10px 0;
    }
    .error-box {
        padding: 20px;
        background-color: #f8d7da;
        border-radius: 10px;
        border-left: 5px solid #dc3545;
        margin: 10px 0;
    }
    .big-number {
        font-size: 2.5em;
        font-weight: bold;
        color: #2c3e50;
    }
</style>
""", unsafe_allow_html=True)


PERIOD_TABS = [
    ("today", "📅 Today"),
    ("yesterday", "⏪ Yesterday"),
    ("week", "🗓️ Last 7 days"),
    ("month", "📆 This month"),
]


@st.cache_resource
def get_components() -> LedgerComponents:
    """Get or create application components (cached)."""
    return create_app_components()


def current_time(components: LedgerComponents) -> datetime:
    """Now, in the configured display timezone."""
    return datetime.now(components.settings.app.tzinfo).astimezone(
        components.settings.app.tzinfo
    )


def format_money(amount: Decimal, components: LedgerComponents) -> str:
    app = components.settings.app
    return f"{amount:,.0f} {app.currency_symbol}"


def category_caption(category: ExpenseCategory) -> str:
    return f"{category.icon} {category.label}"


def main():
    """Main application entry point."""
    components = get_components()

    # Sidebar navigation
    st.sidebar.title("💰 Expense Ledger")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["➕ Add Expense", "📊 History", "🏆 Monthly Summary", "💾 Data"],
        index=0,
    )

    st.sidebar.markdown("---")
    if not components.store.persistence_healthy:
        st.sidebar.error(
            "⚠️ Your last change could not be saved to disk. "
            "See the Data page for details."
        )

    # Route to appropriate page
    if page == "➕ Add Expense":
        render_add_page(components)
    elif page == "📊 History":
        render_history_page(components)
    elif page == "🏆 Monthly Summary":
        render_summary_page(components)
    elif page == "💾 Data":
        render_data_page(components)


def render_add_page(components: LedgerComponents):
    """Render the add-expense form with today's running total."""
    st.title("➕ Add Expense")

    categories = [""] + [c.value for c in ExpenseCategory]

    with st.form("add_expense", clear_on_submit=False):
        amount = st.text_input(
            f"Amount ({components.settings.app.currency_code}) *",
            placeholder="e.g. 50000",
        )
        category = st.selectbox(
            "Category *",
            options=categories,
            format_func=lambda code: (
                "Choose a category" if not code
                else category_caption(ExpenseCategory(code))
            ),
        )
        note = st.text_input("Note (optional)", placeholder="What was it for?")
        submitted = st.form_submit_button("💾 Save", type="primary")

    if submitted:
        result = components.intake.submit(amount, category, note)
        if result.saved:
            record = result.record
            st.markdown(f"""
            <div class="success-box">
                <h4>✅ Expense saved</h4>
                <p>{format_money(record.amount, components)} - {category_caption(record.category)}</p>
            </div>
            """, unsafe_allow_html=True)
        else:
            for issue in result.issues:
                st.error(f"{issue.field.title()}: {issue.message}")

    st.markdown("---")
    render_today(components)


def render_today(components: LedgerComponents):
    """Today's total and entries, newest first, each with a delete button."""
    now = current_time(components)
    window = TimeWindow.today()
    snapshot = components.store.snapshot()
    todays = newest_first(records_in(snapshot, window, now))

    st.subheader("Today")
    st.markdown(
        f'<div class="big-number">{format_money(total_for(snapshot, window, now), components)}</div>',
        unsafe_allow_html=True,
    )

    if not todays:
        st.info("No expenses recorded today yet.")
        return

    tz = components.settings.app.tzinfo
    for record in todays:
        col1, col2, col3 = st.columns([4, 2, 1])
        with col1:
            st.markdown(f"**{category_caption(record.category)}**")
            if record.note:
                st.caption(escape_markdown(record.note))
        with col2:
            st.markdown(format_money(record.amount, components))
            st.caption(record.timestamp.astimezone(tz).strftime("%H:%M"))
        with col3:
            if st.button("🗑️", key=f"delete_{record.id}", help="Delete this expense"):
                components.store.remove(record.id)
                st.rerun()


def render_history_page(components: LedgerComponents):
    """Render totals and breakdowns for the preset periods."""
    st.title("📊 History")

    now = current_time(components)
    snapshot = components.store.snapshot()
    windows = dict(PERIOD_PRESETS)
    windows["week"] = TimeWindow.trailing_days(components.settings.app.trailing_week_days)

    tabs = st.tabs([label for _, label in PERIOD_TABS])
    for tab, (name, _) in zip(tabs, PERIOD_TABS):
        with tab:
            render_period(components, snapshot, windows[name], now)


def render_period(components: LedgerComponents, snapshot, window: TimeWindow, now: datetime):
    summary = summarize(snapshot, window, limit=len(ExpenseCategory), now=now)

    col1, col2 = st.columns(2)
    with col1:
        st.metric(f"Total {summary.description}", format_money(summary.total, components))
    with col2:
        st.metric("Entries", summary.record_count)

    if summary.is_empty:
        st.info(f"No expenses {summary.description}.")
        return

    st.markdown("#### By category")
    for share in summary.categories:
        st.markdown(
            f"{category_caption(share.category)}: "
            f"**{format_money(share.total, components)}** ({share.percentage:.1f}%)"
        )
        st.progress(min(share.percentage / 100, 1.0))

    st.markdown("#### Entries")
    tz = components.settings.app.tzinfo
    for record in newest_first(records_in(snapshot, window, now)):
        local = record.timestamp.astimezone(tz)
        note = f" - {escape_markdown(record.note)}" if record.note else ""
        st.markdown(
            f"{local.strftime('%d/%m %H:%M')} · {category_caption(record.category)} · "
            f"{format_money(record.amount, components)}{note}"
        )


def render_summary_page(components: LedgerComponents):
    """Render the monthly summary: total, daily average and top categories."""
    st.title("🏆 Monthly Summary")

    now = current_time(components)
    limit = components.settings.app.top_categories_limit
    summary = summarize(components.store.snapshot(), TimeWindow.calendar_month(), limit, now)

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric(f"Total {summary.description}", format_money(summary.total, components))
    with col2:
        st.metric("Daily average", format_money(summary.daily_average, components))
    with col3:
        st.metric("Entries", summary.record_count)

    if summary.is_empty:
        st.info("Nothing recorded this month yet.")
        return

    st.markdown(f"### Top {limit} categories")
    for rank, share in enumerate(summary.top, start=1):
        st.markdown(
            f"**{rank}. {category_caption(share.category)}** - "
            f"{format_money(share.total, components)} "
            f"({percentage_of(share.total, summary.total):.1f}%)"
        )


def render_data_page(components: LedgerComponents):
    """Render export, clear-all and storage health."""
    st.title("💾 Data")

    store = components.store
    snapshot = store.snapshot()

    st.markdown("### Export")
    st.markdown(f"{len(snapshot)} expenses stored.")
    filename = export_filename(current_time(components))
    st.download_button(
        "⬇️ Download CSV",
        data=components.exporter.export_csv(snapshot, tz=components.settings.app.tzinfo),
        file_name=filename,
        mime="text/csv",
        disabled=not snapshot,
        on_click=components.exporter.record_download,
        args=(len(snapshot), filename),
    )

    st.markdown("---")
    st.markdown("### Storage")
    if store.persistence_healthy:
        st.success(f"✅ Saving to '{store.key}' works")
    else:
        st.markdown(f"""
        <div class="error-box">
            <h4>❌ Last save failed</h4>
            <p>{store.last_persistence_error}</p>
            <p>Your entries are kept for this session but may be lost on restart.</p>
        </div>
        """, unsafe_allow_html=True)

    status = validate_all_settings()
    for name in ("storage", "app"):
        if not status.get(name, False):
            st.error(f"❌ {name} settings - {status.get(f'{name}_error', 'invalid')}")

    with st.expander("📜 Recent activity"):
        for event in components.audit_logger.recent(limit=20):
            st.markdown(
                f"`{event.timestamp.strftime('%H:%M:%S')}` "
                f"**{event.event_type.value}** - {event.description}"
            )

    st.markdown("---")
    st.markdown("### Danger zone")
    confirm = st.checkbox("I understand this deletes every expense")
    if st.button("🗑️ Clear all data", disabled=not confirm):
        store.clear()
        st.rerun()


if __name__ == "__main__":
    main()
