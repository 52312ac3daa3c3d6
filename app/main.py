"""
Streamlit Frontend for Finance Tracker

Pages:
- Dashboard: summary cards, monthly and category charts, recent activity
- Transactions / Categories / Budget: list plus add/edit form
- Activity Log: audit events of this session

Every browser session gets its own FinanceSession (ledger store,
editors, dashboard engine) kept in st.session_state. Nothing is
persisted: a reload of the page starts from the sample data again.

The UI only talks to the editors and the dashboard engine:
- Forms submit drafts to an editor, which validates before saving
- The dashboard is recomputed from a store snapshot on every run
"""

from datetime import date
from decimal import Decimal
from typing import Optional

import streamlit as st

from finance_tracker.config import validate_all_settings
from finance_tracker.models.audit import AuditSeverity
from finance_tracker.models.ledger import EntityKind, TransactionType
from finance_tracker.orchestrator import EditorResult, EntityEditor, FinanceSession, create_app_components
from finance_tracker.presentation import (
    create_category_pie_chart,
    create_monthly_bar_chart,
    format_balance,
    format_currency,
    format_percent,
    format_signed_amount,
)


# Page configuration
st.set_page_config(
    page_title="Finance Tracker",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .tx-row {
        display: flex;
        justify-content: space-between;
        padding: 8px 0;
        border-bottom: 1px solid #f1f5f9;
    }
    .tx-meta {
        font-size: 0.8em;
        color: #64748b;
    }
    .amount-income {
        font-family: monospace;
        color: #10b981;
    }
    .amount-expense {
        font-family: monospace;
        color: #f43f5e;
    }
    .field-error {
        font-size: 0.85em;
        color: #ef4444;
    }
</style>
""", unsafe_allow_html=True)


PAGES = {
    "📊 Dashboard": "dashboard",
    "💳 Transactions": EntityKind.TRANSACTIONS,
    "🎁 Categories": EntityKind.CATEGORIES,
    "💵 Budget": EntityKind.BUDGETS,
    "📜 Activity Log": "activity",
}


def get_session() -> FinanceSession:
    """Get or create this browser session's components."""
    if "finance_session" not in st.session_state:
        st.session_state.finance_session = create_app_components()
    return st.session_state.finance_session


def main():
    """Main application entry point."""
    session = get_session()

    st.sidebar.title("💰 Finance Tracker")
    st.sidebar.markdown("---")

    choice = st.sidebar.radio("Navigate to:", list(PAGES.keys()), index=0)
    page = PAGES[choice]

    st.sidebar.markdown("---")
    st.sidebar.caption(
        "Data lives in this browser session only and is reset on reload."
    )

    try:
        if page == "dashboard":
            render_dashboard_page(session)
        elif page == "activity":
            render_activity_page(session)
        else:
            render_editor_page(session, session.editor(page))
    except Exception as e:
        session.audit_logger.log_error(
            error_type=type(e).__name__,
            error_message=str(e),
            details={"page": str(page)},
        )
        st.error(f"Something went wrong: {e}")


# =============================================================================
# DASHBOARD
# =============================================================================

def render_dashboard_page(session: FinanceSession):
    """Render summary cards, charts and recent transactions."""
    symbol = session.settings.currency_symbol
    view = session.dashboard()

    st.title("Dashboard")

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total Expenses", format_currency(view.total_expenses, symbol))
    col2.metric("Total Income", format_currency(view.total_income, symbol))
    col3.metric("Balance", format_balance(view.balance, symbol))
    col4.metric(
        "Top Category",
        format_currency(view.top_category.amount, symbol),
        help="Category with the highest expenses",
    )
    col4.caption(view.top_category.name)

    chart_col1, chart_col2 = st.columns(2)

    with chart_col1:
        st.subheader("Monthly Overview")
        st.caption("Your income and expenses over time")
        expenses_tab, income_tab = st.tabs(["Expenses", "Income"])
        with expenses_tab:
            st.plotly_chart(
                create_monthly_bar_chart(view.monthly_data, "expenses", symbol),
                use_container_width=True,
            )
        with income_tab:
            st.plotly_chart(
                create_monthly_bar_chart(view.monthly_data, "income", symbol),
                use_container_width=True,
            )

    with chart_col2:
        st.subheader("Expense Categories")
        st.caption("Where your money goes")
        st.plotly_chart(
            create_category_pie_chart(view.category_data, symbol),
            use_container_width=True,
        )

    st.subheader("Recent Transactions")
    st.caption("Your latest financial activity")

    if not view.recent_transactions:
        st.info("No transactions yet. Add one on the Transactions page.")
        return

    for tx in view.recent_transactions:
        css = "amount-expense" if tx.is_expense else "amount-income"
        st.markdown(f"""
        <div class="tx-row">
            <div>
                <div>{tx.description or tx.category}</div>
                <div class="tx-meta">{tx.category} • {tx.date}</div>
            </div>
            <div class="{css}">{format_signed_amount(tx, symbol)}</div>
        </div>
        """, unsafe_allow_html=True)


# =============================================================================
# EDITORS
# =============================================================================

def _result_key(editor: EntityEditor) -> str:
    return f"last_result_{editor.kind.value}"


def _form_version(editor: EntityEditor) -> int:
    return st.session_state.get(f"form_version_{editor.kind.value}", 0)


def _bump_form_version(editor: EntityEditor) -> None:
    key = f"form_version_{editor.kind.value}"
    st.session_state[key] = st.session_state.get(key, 0) + 1


def _field_error(result: Optional[EditorResult], field: str) -> None:
    if result is None or result.validation is None:
        return
    message = result.validation.field_errors().get(field)
    if message:
        st.markdown(f'<p class="field-error">{message}</p>', unsafe_allow_html=True)


def _as_float(value) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def _as_date(value) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        return None


def render_editor_page(session: FinanceSession, editor: EntityEditor):
    """List plus add/edit form for one ledger collection."""
    heading = {
        EntityKind.TRANSACTIONS: "Transactions",
        EntityKind.CATEGORIES: "Categories",
        EntityKind.BUDGETS: "Budget",
    }[editor.kind]
    st.title(heading)

    last_result: Optional[EditorResult] = st.session_state.get(_result_key(editor))

    with st.expander(editor.title, expanded=editor.is_editing or (
        last_result is not None and not last_result.success
    )):
        form_key = f"{editor.kind.value}-{editor.editing_id or 'new'}-{_form_version(editor)}"
        with st.form(key=form_key):
            form_data = render_form_fields(session, editor, last_result)
            col1, col2 = st.columns(2)
            submitted = col1.form_submit_button("Save", type="primary")
            cancelled = col2.form_submit_button("Cancel")

        if submitted:
            result = editor.submit(form_data)
            st.session_state[_result_key(editor)] = result
            if result.success:
                _bump_form_version(editor)
                st.session_state[_result_key(editor)] = None
                st.toast(result.message)
                for warning in result.validation.warnings if result.validation else []:
                    st.toast(warning, icon="⚠️")
            st.rerun()

        if cancelled:
            editor.cancel()
            st.session_state[_result_key(editor)] = None
            _bump_form_version(editor)
            st.rerun()

    if last_result is not None and not last_result.success:
        if last_result.not_found:
            st.warning(last_result.message)
        else:
            # Markdown hard line breaks keep one issue per line
            st.error(last_result.message.replace("\n", "  \n"))

    render_entity_list(session, editor)


def render_form_fields(
    session: FinanceSession,
    editor: EntityEditor,
    result: Optional[EditorResult],
) -> dict:
    """Render the inputs for the editor's draft and return their values."""
    draft = editor.draft

    if editor.kind == EntityKind.TRANSACTIONS:
        amount = st.number_input(
            "Amount",
            value=_as_float(draft.get("amount")),
            min_value=0.0,
            step=0.01,
            format="%.2f",
        )
        _field_error(result, "amount")

        tx_date = st.date_input("Date", value=_as_date(draft.get("date")))
        _field_error(result, "date")

        description = st.text_input(
            "Description",
            value=draft.get("description") or "",
            placeholder="Optional description",
            max_chars=session.settings.max_description_length,
        )
        _field_error(result, "description")

        category = st.text_input(
            "Category",
            value=draft.get("category") or "",
            placeholder="e.g., Food, Rent",
        )
        _field_error(result, "category")

        types = [t.value for t in TransactionType]
        current_type = TransactionType(draft.get("type") or "expense").value
        tx_type = st.selectbox(
            "Type",
            options=types,
            index=types.index(current_type),
            format_func=str.capitalize,
        )
        _field_error(result, "type")

        return {
            "amount": None if amount is None else Decimal(str(amount)),
            "date": tx_date.isoformat() if tx_date else "",
            "description": description,
            "category": category,
            "type": tx_type,
        }

    if editor.kind == EntityKind.CATEGORIES:
        name = st.text_input("Name", value=draft.get("name") or "")
        _field_error(result, "name")
        color = st.color_picker("Color", value=draft.get("color") or "#0ea5e9")
        _field_error(result, "color")
        return {"name": name, "color": color}

    category_names = [c.name for c in session.store.categories.list()]
    category = st.text_input(
        "Category",
        value=draft.get("category") or "",
        placeholder=", ".join(category_names) or "e.g., Food",
    )
    _field_error(result, "category")
    budget_amount = st.number_input(
        "Budget Amount",
        value=_as_float(draft.get("budget_amount")),
        min_value=0.0,
        step=0.01,
        format="%.2f",
    )
    _field_error(result, "budget_amount")
    spent_amount = st.number_input(
        "Spent Amount",
        value=_as_float(draft.get("spent_amount")),
        min_value=0.0,
        step=0.01,
        format="%.2f",
    )
    _field_error(result, "spent_amount")
    return {
        "category": category,
        "budget_amount": None if budget_amount is None else Decimal(str(budget_amount)),
        "spent_amount": None if spent_amount is None else Decimal(str(spent_amount)),
    }


def _edit_delete_buttons(editor: EntityEditor, entity_id: str, column) -> None:
    edit_col, delete_col = column.columns(2)
    if edit_col.button("✏️", key=f"edit-{editor.kind.value}-{entity_id}", help="Edit"):
        editor.start_edit(entity_id)
        st.session_state[_result_key(editor)] = None
        st.rerun()
    if delete_col.button("🗑️", key=f"delete-{editor.kind.value}-{entity_id}", help="Delete"):
        editor.delete(entity_id)
        st.rerun()


def render_entity_list(session: FinanceSession, editor: EntityEditor):
    """Cards for every entity in the collection."""
    symbol = session.settings.currency_symbol
    items = editor.items()

    if not items:
        st.info(f"No {editor.kind.value} found.")
        return

    if editor.kind == EntityKind.BUDGETS:
        progress = {p.budget_id: p for p in session.dashboard().budget_progress}

    for entity in items:
        with st.container(border=True):
            body, actions = st.columns([6, 1])

            if editor.kind == EntityKind.TRANSACTIONS:
                body.markdown(f"**{entity.description or entity.category}**")
                body.caption(f"{entity.category} • {entity.date} • {entity.type.value}")
                body.markdown(format_signed_amount(entity, symbol))

            elif editor.kind == EntityKind.CATEGORIES:
                body.markdown(
                    f'<span style="display:inline-block;width:12px;height:12px;'
                    f'border-radius:50%;background:{entity.color};"></span> '
                    f"**{entity.name}**",
                    unsafe_allow_html=True,
                )

            else:
                p = progress[entity.id]
                body.markdown(f"**{entity.category}**")
                body.caption(
                    f"Budget: {format_currency(entity.budget_amount, symbol)} | "
                    f"Spent: {format_currency(entity.spent_amount, symbol)}"
                )
                body.progress(p.percent_used / 100)
                body.caption(f"{format_percent(p.percent_used)} used")

            _edit_delete_buttons(editor, entity.id, actions)


# =============================================================================
# ACTIVITY LOG
# =============================================================================

def render_activity_page(session: FinanceSession):
    """Audit events of this session, plus a ledger reset."""
    st.title("📜 Activity Log")

    show_debug = st.checkbox(
        "Show debug events",
        value=session.settings.debug_mode,
        help="Dashboard recomputations, cancelled edits and ignored deletes",
    )
    events = [
        event for event in session.audit_logger.recent_events(limit=200)
        if show_debug or event.severity != AuditSeverity.DEBUG
    ]
    if events:
        st.dataframe([event.to_table_row() for event in events], use_container_width=True)
    else:
        st.info("No activity yet.")

    st.markdown("---")
    st.markdown("### Session")
    st.caption(
        f"Ledger: {session.store.counts()} • "
        f"Environment: {session.settings.app_environment}"
    )

    col1, col2 = st.columns(2)
    if col1.button("Reset to sample data"):
        session.reset(with_seed_data=True)
        st.rerun()
    if col2.button("Clear everything"):
        session.reset(with_seed_data=False)
        st.rerun()

    status = validate_all_settings()
    if not status.get("app", False):
        st.error(f"Configuration problem: {status.get('app_error')}")


if __name__ == "__main__":
    main()
