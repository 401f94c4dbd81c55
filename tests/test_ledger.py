"""Tests for the ledger service."""

from datetime import date

import pytest

from erpcl.api import fallbacks
from erpcl.api.base import BinaryResponse
from erpcl.domain.errors import NotFoundError, ValidationError

ENTRY_ROWS = [
    {
        "id": 7,
        "date": "2024-01-15",
        "reference": "FAC-000007",
        "description": "Venta de servicios",
        "entries": [
            {"account": "1201", "debit": 119000, "credit": 0, "description": "Clientes"},
            {"account": "4101", "debit": 0, "credit": 100000, "description": "Ventas"},
            {"account": "2105", "debit": 0, "credit": 19000, "description": "IVA"},
        ],
        "total_debit": 119000,
        "total_credit": 119000,
    },
    {
        "id": 8,
        "date": "2024-01-28",
        "reference": "PAGO-0001",
        "description": "Pago a proveedor",
        "entries": [
            {"account": "2101", "debit": 595000, "credit": 0},
            {"account": "1102", "debit": 0, "credit": 595000},
        ],
    },
]


@pytest.fixture
def loaded_ledger(ledger_service, stub_backend):
    stub_backend.route("GET", "/accounting/entries", ENTRY_ROWS)
    stub_backend.route("GET", "/accounting/chart-of-accounts", {"1201": "Clientes", "4101": "Ventas"})
    ledger_service.load_entries()
    ledger_service.load_chart()
    return ledger_service


class TestLoading:
    """Tests for loading entries and the chart of accounts."""

    def test_entries_read_lines_from_entries_field(self, loaded_ledger):
        entry = loaded_ledger.get_entry(7)
        assert len(entry.lines) == 3
        assert entry.lines[0].debit == 119000

    def test_missing_totals_are_summed(self, loaded_ledger):
        entry = loaded_ledger.get_entry(8)
        assert entry.total_debit == entry.total_credit == 595000

    def test_sample_entries_when_unreachable(self, ledger_service):
        result = ledger_service.load_entries()
        assert result.is_sample
        assert result.data == fallbacks.LEDGER_ENTRIES

    def test_sample_chart_when_unreachable(self, ledger_service):
        result = ledger_service.load_chart()
        assert result.is_sample
        assert ledger_service.account_name("1101") == "Caja"

    def test_filters(self, loaded_ledger):
        assert [e.id for e in loaded_ledger.list_entries(search="pago")] == [8]
        assert [e.id for e in loaded_ledger.list_entries(account="4101")] == [7]
        assert [
            e.id for e in loaded_ledger.list_entries(start_date=date(2024, 1, 20))
        ] == [8]

    def test_unknown_entry(self, loaded_ledger):
        with pytest.raises(NotFoundError):
            loaded_ledger.get_entry(99)


class TestSave:
    """Tests for creating and updating entries."""

    def test_new_entry_is_posted(self, loaded_ledger, stub_backend):
        stub_backend.route("POST", "/accounting/entries", {"id": 9})
        form = loaded_ledger.new_form(
            description="Venta", reference="FAC-000009", entry_date=date(2024, 2, 1)
        )
        form.update_line(0, "account", "1201")
        form.update_line(0, "debit", 1000)
        form.update_line(1, "account", "4101")
        form.update_line(1, "credit", 1000)

        assert form.lines[1].description == "Ventas"
        assert loaded_ledger.save(form) == {"id": 9}

        (call,) = stub_backend.calls_to("POST", "/accounting/entries")
        assert call[3]["entries"][0] == {
            "account": "1201",
            "debit": 1000,
            "credit": 0,
            "description": "Clientes",
        }
        assert len(stub_backend.calls_to("GET", "/accounting/entries")) == 2

    def test_existing_entry_is_put(self, loaded_ledger, stub_backend):
        stub_backend.route("PUT", "/accounting/entries/7", {"id": 7})
        form = loaded_ledger.edit_form(7)
        form.description = "Venta corregida"

        loaded_ledger.save(form)

        (call,) = stub_backend.calls_to("PUT", "/accounting/entries/7")
        assert call[3]["description"] == "Venta corregida"
        assert call[3]["total_debit"] == 119000

    def test_unbalanced_entry_is_not_sent(self, loaded_ledger, stub_backend):
        form = loaded_ledger.new_form(description="Descuadrado", reference="AJ-1")
        form.update_line(0, "account", "1201")
        form.update_line(0, "debit", 1000)
        form.update_line(1, "account", "4101")
        form.update_line(1, "credit", 900)

        with pytest.raises(ValidationError, match="not balanced"):
            loaded_ledger.save(form)
        assert stub_backend.calls_to("POST", "/accounting/entries") == []


class TestReports:
    """Tests for accounting reports."""

    def test_general_ledger_params(self, ledger_service, stub_backend):
        stub_backend.route("GET", "/accounting/general-ledger", {"accounts": []})

        result = ledger_service.report(
            "general-ledger", date(2024, 1, 1), date(2024, 1, 31), account="1201"
        )

        assert result.is_live
        (call,) = stub_backend.calls_to("GET", "/accounting/general-ledger")
        assert call[2] == {"date_from": "2024-01-01", "date_to": "2024-01-31", "account": "1201"}

    def test_balance_sheet_is_as_of_a_date(self, ledger_service, stub_backend):
        stub_backend.route("GET", "/accounting/balance-sheet", {"assets": {}})

        ledger_service.report("balance-sheet", date(2024, 1, 1), date(2024, 1, 31))

        (call,) = stub_backend.calls_to("GET", "/accounting/balance-sheet")
        assert call[2] == {"date": "2024-01-31"}

    def test_report_has_no_sample_data(self, ledger_service):
        result = ledger_service.report("income-statement")
        assert result.state.value == "failed"
        assert result.data is None

    def test_unknown_report(self, ledger_service, stub_backend):
        with pytest.raises(ValidationError, match="Unknown report 'cash-flow'"):
            ledger_service.report("cash-flow")
        assert stub_backend.calls == []

    def test_report_pdf(self, ledger_service, stub_backend, tmp_path):
        stub_backend.downloads[("GET", "/accounting/report/pdf")] = BinaryResponse(
            200, "application/pdf; charset=binary", b"%PDF-1.4"
        )

        path = ledger_service.download_report_pdf(
            "income-statement", end_date=date(2024, 1, 31), directory=tmp_path
        )

        assert path.name == "reporte-contable-income-statement.pdf"
        (call,) = stub_backend.calls_to("GET", "/accounting/report/pdf")
        assert call[2]["type"] == "income-statement"
        assert call[2]["date_to"] == "2024-01-31"
