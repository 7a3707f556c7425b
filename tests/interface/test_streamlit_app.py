"""Tests for the Streamlit app module."""

from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import SQLAlchemyError

from src.adapters.interface.streamlit import app
from src.application.use_cases.get_invoice_tree import GetInvoiceTreeUseCase
from src.domain.models import ClientTotal, InvoiceFilter, InvoiceRecord
from src.infrastructure.settings import InvoiceTreeSettings


def _records() -> list[InvoiceRecord]:
    return [
        InvoiceRecord(
            id="1",
            client_name="Acme",
            invoice_date="2024-01-05",
            description="Widget",
            amount=Decimal("10"),
        ),
        InvoiceRecord(
            id="2",
            client_name="Acme",
            invoice_date="2024-01-05",
            description="Gadget",
            amount=Decimal("20"),
        ),
        InvoiceRecord(
            id="3",
            client_name="Beta",
            invoice_date="2024-02-11",
            description="Crate",
            amount=Decimal("5"),
        ),
    ]


class _FakeColumn:
    def __init__(self, owner: "_FakeStreamlit") -> None:
        self._owner = owner

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def button(self, label: str, **_kwargs) -> bool:
        return label in self._owner.pressed


class _FakeSidebar:
    def __init__(self, owner: "_FakeStreamlit") -> None:
        self._owner = owner

    def selectbox(self, label, options, **_kwargs):
        return self._owner.page

    def text_input(self, label, **_kwargs):
        return self._owner.name_query

    def date_input(self, label, **_kwargs):
        return self._owner.selected_date

    def button(self, label, **_kwargs):
        return label in self._owner.pressed


class _FakeStreamlit:
    def __init__(
        self,
        page: str = "Mind Map",
        name_query: str = "",
        selected_date: date | None = None,
        pressed: set[str] | None = None,
    ) -> None:
        self.page = page
        self.name_query = name_query
        self.selected_date = selected_date
        self.pressed = pressed or set()
        self.session_state: dict = {}
        self.sidebar = _FakeSidebar(self)
        self.config_called = False
        self.title_text = None
        self.infos: list[str] = []
        self.errors: list[str] = []
        self.captions: list[str] = []
        self.markdowns: list[str] = []
        self.buttons: list[tuple[str, dict]] = []
        self.dataframe_payload = None
        self.charts: list = []
        self.subheaders: list[str] = []

    def set_page_config(self, **kwargs):
        self.config_called = True
        self.config_kwargs = kwargs

    def title(self, text: str):
        self.title_text = text

    def info(self, text: str):
        self.infos.append(text)

    def error(self, text: str):
        self.errors.append(text)

    def caption(self, text: str):
        self.captions.append(text)

    def markdown(self, text: str):
        self.markdowns.append(text)

    def subheader(self, text: str):
        self.subheaders.append(text)

    def button(self, label: str, **kwargs) -> bool:
        self.buttons.append((label, kwargs))
        return False

    def columns(self, count: int):
        return [_FakeColumn(self) for _ in range(count)]

    def dataframe(self, data, **kwargs):
        self.dataframe_payload = (data, kwargs)

    def altair_chart(self, chart, **kwargs):
        self.charts.append((chart, kwargs))

    def click(self, label_fragment: str) -> None:
        for label, kwargs in self.buttons:
            if label_fragment in label:
                kwargs["on_click"](*kwargs["args"], **kwargs["kwargs"])
                return
        raise AssertionError(f"No button containing {label_fragment!r}")


@pytest.fixture
def loggers(monkeypatch) -> SimpleNamespace:
    fakes = SimpleNamespace(app=MagicMock(), usage=MagicMock())
    monkeypatch.setattr(app, "get_app_logger", lambda: fakes.app)
    monkeypatch.setattr(app, "get_usage_logger", lambda: fakes.usage)
    monkeypatch.setattr(
        app.InvoiceTreeSettings,
        "from_env",
        classmethod(lambda cls: InvoiceTreeSettings()),
    )
    monkeypatch.setattr(
        app,
        "build_get_invoice_tree_use_case",
        lambda: GetInvoiceTreeUseCase(MagicMock(), logger=fakes.app),
    )
    return fakes


def _run(monkeypatch, fake_st, records) -> MagicMock:
    loader = MagicMock(return_value=records)
    monkeypatch.setattr(app, "st", fake_st)
    monkeypatch.setattr(app, "_load_invoices", loader)
    fake_st.buttons.clear()
    fake_st.markdowns.clear()
    app.main()
    return loader


def test_fetch_invoices_invokes_use_case(monkeypatch):
    """_fetch_invoices should delegate to the wired use case."""
    fake_use_case = MagicMock()
    fake_use_case.fetch_records.return_value = ["a"]
    monkeypatch.setattr(
        app,
        "build_get_invoice_tree_use_case",
        lambda: fake_use_case,
    )

    assert app._fetch_invoices() == ["a"]


def test_main_renders_collapsed_clients(monkeypatch, loggers):
    """A fresh session shows one collapsed row per client."""
    fake_st = _FakeStreamlit()

    _run(monkeypatch, fake_st, _records())

    assert fake_st.config_called
    assert fake_st.title_text == "Client Mind Map"
    assert [label for label, _ in fake_st.buttons] == [
        "▸ Acme (30.00 MAD)",
        "▸ Beta (5.00 MAD)",
    ]
    assert fake_st.markdowns == []
    assert fake_st.infos == []
    assert fake_st.subheaders == ["Amounts by Client"]


def test_clicking_rows_expands_them_across_reruns(monkeypatch, loggers):
    fake_st = _FakeStreamlit()
    _run(monkeypatch, fake_st, _records())

    fake_st.click("Acme")
    _run(monkeypatch, fake_st, _records())
    fake_st.click("2024-01-05")
    _run(monkeypatch, fake_st, _records())

    tree_labels = [
        label for label, kwargs in fake_st.buttons if "on_click" in kwargs
    ]
    indent = app.INDENT
    assert tree_labels == [
        "▾ Acme (30.00 MAD)",
        f"{indent}▾ 2024-01-05 (30.00 MAD)",
        "▸ Beta (5.00 MAD)",
    ]
    assert fake_st.markdowns == [
        f"{indent * 2}• Widget — 10.00 MAD",
        f"{indent * 2}• Gadget — 20.00 MAD",
    ]


def test_changing_filter_rebuilds_collapsed_tree(monkeypatch, loggers):
    fake_st = _FakeStreamlit()
    _run(monkeypatch, fake_st, _records())
    fake_st.click("Acme")

    fake_st.name_query = "ac"
    _run(monkeypatch, fake_st, _records())

    tree_labels = [
        label for label, kwargs in fake_st.buttons if "on_click" in kwargs
    ]
    assert tree_labels == ["▸ Acme (30.00 MAD)"]
    loggers.usage.info.assert_called()


def test_stale_click_after_rebuild_is_ignored(monkeypatch, loggers):
    """A click rendered before a rebuild must not affect the new tree."""
    fake_st = _FakeStreamlit()
    _run(monkeypatch, fake_st, _records())
    stale_buttons = list(fake_st.buttons)

    fake_st.name_query = "acme"
    _run(monkeypatch, fake_st, _records())
    fake_st.buttons[:] = stale_buttons
    fake_st.click("Acme")

    controller = fake_st.session_state[app.CONTROLLER_KEY]
    assert controller.is_expanded("name-Acme") is False


def test_main_shows_empty_state(monkeypatch, loggers):
    """main should render an explicit empty state without rows."""
    fake_st = _FakeStreamlit(name_query="zzz")

    _run(monkeypatch, fake_st, _records())

    assert fake_st.infos
    assert "No client data available" in fake_st.infos[0]
    assert all("on_click" not in kwargs for _, kwargs in fake_st.buttons)


def test_main_reports_load_failures(monkeypatch, loggers):
    fake_st = _FakeStreamlit()
    monkeypatch.setattr(app, "st", fake_st)
    monkeypatch.setattr(
        app,
        "_load_invoices",
        MagicMock(side_effect=SQLAlchemyError("connection refused")),
    )

    app.main()

    assert "connection refused" in fake_st.errors[0]
    assert fake_st.infos
    loggers.app.error.assert_called_once()


def test_refresh_clears_cache_and_rebuilds(monkeypatch, loggers):
    fake_st = _FakeStreamlit()
    _run(monkeypatch, fake_st, _records())
    fake_st.click("Acme")

    fake_st.pressed = {"Refresh"}
    loader = _run(monkeypatch, fake_st, _records())

    loader.clear.assert_called_once()
    assert fake_st.session_state[app.REFRESH_KEY] == 1
    controller = fake_st.session_state[app.CONTROLLER_KEY]
    assert controller.is_expanded("name-Acme") is False


def test_expand_all_button(monkeypatch, loggers):
    fake_st = _FakeStreamlit(pressed={"Expand all"})

    _run(monkeypatch, fake_st, _records())

    controller = fake_st.session_state[app.CONTROLLER_KEY]
    assert controller.is_expanded("name-Beta") is True
    assert controller.is_expanded("date-Beta-2024-02-11") is True


def test_invoices_page_renders_filtered_table(monkeypatch, loggers):
    fake_st = _FakeStreamlit(
        page="Invoices",
        selected_date=date(2024, 2, 11),
    )

    _run(monkeypatch, fake_st, _records())

    table_data, kwargs = fake_st.dataframe_payload
    assert table_data == [
        {
            "Client": "Beta",
            "Date": "2024-02-11",
            "Description": "Crate",
            "Amount": "5.00 MAD",
        }
    ]
    assert kwargs["hide_index"] is True
    assert "1 invoices shown" in fake_st.captions


def test_build_filter_converts_widget_values():
    assert app._build_filter("  acme ", date(2024, 1, 5)) == InvoiceFilter(
        date_iso_prefix="2024-01-05",
        client_name_substring="acme",
    )
    assert app._build_filter("", None) == InvoiceFilter()


def test_prepare_donut_chart_data_groups_small_clients():
    totals = [
        ClientTotal(client=f"Client {idx}", amount=Decimal(idx))
        for idx in range(1, 9)
    ]

    data = app._prepare_donut_chart_data(totals, max_clients=3)

    assert [item["client"] for item in data] == [
        "Client 8",
        "Client 7",
        "Client 6",
        "Other",
    ]
    assert data[-1]["amount"] == 15.0
    assert data[0]["share_label"] == "22.2%"


def test_mind_map_builds_tree_through_use_case(monkeypatch, loggers):
    fake_st = _FakeStreamlit()

    _run(monkeypatch, fake_st, _records())

    messages = [call.args[0] for call in loggers.app.info.call_args_list]
    assert "Built invoice tree with 2 clients from 3 records" in messages


def test_invoices_page_tolerates_text_amounts(monkeypatch, loggers):
    """Amounts that arrive as text are formatted, invalid ones shown as 0."""
    fake_st = _FakeStreamlit(page="Invoices")
    records = [
        InvoiceRecord(
            id="1",
            client_name="Acme",
            invoice_date="2024-01-05",
            description="Widget",
            amount="12.50",
        ),
        InvoiceRecord(
            id="2",
            client_name="Acme",
            invoice_date="2024-01-05",
            description="Gadget",
            amount="n/a",
        ),
    ]

    _run(monkeypatch, fake_st, records)

    table_data, _ = fake_st.dataframe_payload
    assert [row["Amount"] for row in table_data] == ["12.50 MAD", "0.00 MAD"]
    assert fake_st.errors == []
    loggers.app.warning.assert_called_once()
