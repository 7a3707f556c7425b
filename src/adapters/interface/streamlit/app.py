"""Streamlit dashboard entry point."""

from collections.abc import Sequence
from datetime import date
from decimal import Decimal

import altair as alt
import streamlit as st
from sqlalchemy.exc import SQLAlchemyError

from src.adapters.interface.invoice_tree_view import (
    TreeViewController,
    VisibleRow,
)
from src.domain.models.invoices import (
    ClientTotal,
    InvoiceFilter,
    InvoiceRecord,
    TreeNode,
)
from src.domain.services.invoice_tree import (
    matches_filter,
    summarize_client_totals,
)
from src.infrastructure.container import build_get_invoice_tree_use_case
from src.infrastructure.logging.logger import (
    get_app_logger,
    get_usage_logger,
)
from src.infrastructure.settings import InvoiceTreeSettings
from src.utils.decimal_utils import coerce_decimal

CURRENCY_CODE = "MAD"
CONTROLLER_KEY = "invoice_tree_controller"
TREE_KEY = "invoice_tree_key"
REFRESH_KEY = "invoice_tree_refresh"
INDENT = "\u00a0" * 6


def _fetch_invoices() -> Sequence[InvoiceRecord]:
    """Fetch invoice records from the record store."""
    use_case = build_get_invoice_tree_use_case()
    return use_case.fetch_records()


@st.cache_data(show_spinner=False)
def _load_invoices(schema_version: int = 1) -> Sequence[InvoiceRecord]:
    """Cached wrapper around _fetch_invoices for Streamlit sessions."""
    _ = schema_version
    return _fetch_invoices()


def _load_invoices_safely() -> tuple[Sequence[InvoiceRecord], str | None]:
    """Load invoices, turning database failures into an error message."""
    try:
        return _load_invoices(), None
    except (SQLAlchemyError, RuntimeError) as exc:
        get_app_logger().error(f"Failed to load invoices: {exc}")
        return [], f"Could not load invoices: {exc}"


def _refresh_invoices() -> None:
    """Drop cached records so the next run reads the store again."""
    _load_invoices.clear()
    st.session_state[REFRESH_KEY] = st.session_state.get(REFRESH_KEY, 0) + 1
    get_usage_logger().info("Invoice data refresh requested")


def _build_filter(
    name_query: str | None,
    selected_date: date | None,
) -> InvoiceFilter:
    """Turn widget values into filter criteria."""
    return InvoiceFilter(
        date_iso_prefix=selected_date.isoformat() if selected_date else None,
        client_name_substring=(name_query or "").strip() or None,
    )


def _format_amount(value, currency_code: str) -> str:
    """Format amounts for display; invalid values are shown as zero."""
    amount = coerce_decimal(value, get_app_logger())
    return f"{amount:,.2f} {currency_code}"


def _get_controller() -> TreeViewController:
    controller = st.session_state.get(CONTROLLER_KEY)
    if controller is None:
        controller = TreeViewController(logger=get_app_logger())
        st.session_state[CONTROLLER_KEY] = controller
    return controller


def _sync_controller(
    controller: TreeViewController,
    tree: Sequence[TreeNode],
    records: Sequence[InvoiceRecord],
    invoice_filter: InvoiceFilter,
    keep_expansion: bool,
) -> None:
    """Rebuild the expansion state when records or filters changed.

    Args:
        controller: Session controller.
        tree: Tree aggregated for the current run.
        records: Records the tree was built from.
        invoice_filter: Filter applied to the records.
        keep_expansion: Carry expanded nodes over to the rebuilt tree.
    """
    tree_key = (
        invoice_filter,
        st.session_state.get(REFRESH_KEY, 0),
        hash(tuple(records)),
    )
    if st.session_state.get(TREE_KEY) == tree_key:
        return
    controller.build(tree, carry_over=keep_expansion)
    st.session_state[TREE_KEY] = tree_key
    get_usage_logger().info(
        f"Invoice tree rebuilt: clients={len(tree)}, "
        f"client_filter={invoice_filter.client_name_substring!r}, "
        f"date_filter={invoice_filter.date_iso_prefix!r}"
    )


def _row_label(row: VisibleRow, expanded: bool) -> str:
    """Return the text drawn for a visible row."""
    node = row.node
    indent = INDENT * row.depth
    if node.is_leaf:
        amount = _format_amount(node.value, CURRENCY_CODE)
        return f"{indent}• {node.label} — {amount}"
    marker = "▾" if expanded else "▸"
    total = _format_amount(node.total, CURRENCY_CODE)
    return f"{indent}{marker} {node.label} ({total})"


def _render_tree(controller: TreeViewController) -> None:
    """Render one row per visible node; branch rows toggle on click."""
    generation = controller.state.generation
    for row in controller.visible_rows():
        node = row.node
        label = _row_label(row, controller.is_expanded(node.id))
        if node.is_leaf:
            st.markdown(label)
            continue
        st.button(
            label,
            key=f"node-{generation}-{node.id}",
            on_click=controller.toggle,
            args=(node.id,),
            kwargs={"generation": generation},
        )


def _prepare_donut_chart_data(
    totals: Sequence[ClientTotal],
    max_clients: int = 6,
) -> list[dict[str, str | float]]:
    """Prepare donut chart data with a Top-N + Other grouping.

    Args:
        totals: Purchase totals per client.
        max_clients: Maximum clients to keep before grouping into Other.

    Returns:
        Altair-ready chart data.
    """
    sorted_items = sorted(totals, key=lambda item: item.amount, reverse=True)
    top_items = list(sorted_items[:max_clients])
    other_items = sorted_items[max_clients:]
    other_amount = sum(
        (item.amount for item in other_items),
        start=Decimal("0"),
    )
    if other_items and other_amount != 0:
        top_items.append(ClientTotal(client="Other", amount=other_amount))
    grand_total = sum(
        (item.amount for item in sorted_items),
        start=Decimal("0"),
    )
    data: list[dict[str, str | float]] = []
    for item in top_items:
        share = (
            (item.amount / grand_total) * Decimal("100")
            if grand_total
            else Decimal("0")
        )
        data.append(
            {
                "client": item.client,
                "amount": float(item.amount),
                "amount_label": _format_amount(item.amount, CURRENCY_CODE),
                "share_label": f"{share:.1f}%",
            }
        )
    return data


def _render_client_chart(
    tree: Sequence[TreeNode],
    chart_size: int = 320,
) -> None:
    """Render a donut chart of purchase amounts per client."""
    data = _prepare_donut_chart_data(summarize_client_totals(tree))
    if not data:
        return
    chart = alt.Chart(alt.Data(values=data)).mark_arc(
        innerRadius=chart_size * 0.4,
        cornerRadius=8,
        padAngle=0.02,
    ).encode(
        theta=alt.Theta("amount:Q"),
        color=alt.Color(
            "client:N",
            legend=alt.Legend(orient="bottom", title=None, columns=2),
        ),
        order=alt.Order("amount:Q", sort="descending"),
        tooltip=[
            alt.Tooltip("client:N"),
            alt.Tooltip("amount_label:N"),
            alt.Tooltip("share_label:N"),
        ],
    ).properties(
        width=chart_size,
        height=chart_size,
    )
    st.subheader("Amounts by Client")
    st.altair_chart(chart, use_container_width=True)


def _render_mind_map(
    records: Sequence[InvoiceRecord],
    invoice_filter: InvoiceFilter,
    settings: InvoiceTreeSettings,
) -> None:
    """Render the client hierarchy with expand/collapse rows."""
    use_case = build_get_invoice_tree_use_case()
    tree = use_case.execute(invoice_filter, records=records)
    controller = _get_controller()
    _sync_controller(
        controller,
        tree,
        records,
        invoice_filter,
        settings.keep_expansion,
    )

    if not tree:
        st.info(
            "No client data available. Import invoices to see the mind map."
        )
        return

    st.caption(
        "Click on nodes to expand and explore clients, dates, and purchases."
    )
    expand_col, collapse_col = st.columns(2)
    if expand_col.button("Expand all"):
        controller.expand_all()
    if collapse_col.button("Collapse all"):
        controller.collapse_all()

    tree_col, chart_col = st.columns(2)
    with tree_col:
        _render_tree(controller)
    with chart_col:
        _render_client_chart(tree)


def _render_invoices(
    records: Sequence[InvoiceRecord],
    invoice_filter: InvoiceFilter,
) -> None:
    """Render the filtered invoices as a flat table."""
    filtered = [
        record for record in records if matches_filter(record, invoice_filter)
    ]
    st.caption(f"{len(filtered)} invoices shown")
    if not filtered:
        st.info("No purchases found.")
        return
    data = [
        {
            "Client": record.client_name or "—",
            "Date": record.invoice_date or "—",
            "Description": record.description or "—",
            "Amount": _format_amount(record.amount, CURRENCY_CODE),
        }
        for record in filtered
    ]
    st.dataframe(data, use_container_width=True, hide_index=True, height=420)


def main() -> None:
    """Render the Streamlit app."""
    st.set_page_config(page_title="Client Mind Map", layout="wide")
    st.title("Client Mind Map")

    settings = InvoiceTreeSettings.from_env()
    page = st.sidebar.selectbox("Page", ["Mind Map", "Invoices"])
    name_query = st.sidebar.text_input(
        "Filter by client name",
        value=settings.client_filter or "",
        placeholder="Type to filter",
    )
    selected_date = st.sidebar.date_input("Filter by date", value=None)
    if st.sidebar.button("Refresh"):
        _refresh_invoices()

    invoice_filter = _build_filter(name_query, selected_date)
    records, error_message = _load_invoices_safely()
    if error_message:
        st.error(error_message)

    if page == "Mind Map":
        _render_mind_map(records, invoice_filter, settings)
    else:
        _render_invoices(records, invoice_filter)


if __name__ == "__main__":  # pragma: no cover
    main()
