"""Ledger (accounting entries) domain service."""

from datetime import date
from pathlib import Path
from typing import Any, Optional

from erpcl.api import fallbacks, mappers
from erpcl.api.base import Backend
from erpcl.api.documents import save_pdf
from erpcl.api.loader import LoadResult, View, load
from erpcl.domain import filters
from erpcl.domain.entities import LedgerEntry
from erpcl.domain.errors import NotFoundError, ValidationError
from erpcl.domain.line_items import LedgerEntryForm

REPORT_KINDS = ("balance-sheet", "income-statement", "general-ledger")


def _report_params(
    kind: str,
    start_date: Optional[date],
    end_date: Optional[date],
    account: Optional[str],
) -> dict[str, Any]:
    if kind not in REPORT_KINDS:
        raise ValidationError(
            f"Unknown report '{kind}'. Expected one of: {', '.join(REPORT_KINDS)}"
        )
    return {
        "date_from": start_date.isoformat() if start_date else None,
        "date_to": end_date.isoformat() if end_date else None,
        "account": account or None,
    }


class LedgerService:
    """Service for ledger entries, the chart of accounts and reports."""

    def __init__(self, backend: Backend):
        """Initialize ledger service.

        Args:
            backend: Backend instance
        """
        self.backend = backend
        self.entries: View[tuple[LedgerEntry, ...]] = View(())
        self.chart: View[dict[str, str]] = View({})

    def load_entries(self) -> LoadResult[tuple[LedgerEntry, ...]]:
        return self.entries.refresh(
            lambda: load(
                self.backend,
                "/accounting/entries",
                fallback=fallbacks.LEDGER_ENTRIES,
                mapper=mappers.ledger_entries_to_domain,
            )
        )

    def load_chart(self) -> LoadResult[dict[str, str]]:
        return self.chart.refresh(
            lambda: load(
                self.backend,
                "/accounting/chart-of-accounts",
                fallback=dict(fallbacks.CHART_OF_ACCOUNTS),
                mapper=mappers.chart_of_accounts_to_domain,
            )
        )

    def list_entries(
        self,
        search: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account: Optional[str] = None,
    ) -> tuple[LedgerEntry, ...]:
        """Filter the loaded entries.

        Args:
            search: Substring of the reference or description
            start_date: Only entries dated on or after this date
            end_date: Only entries dated on or before this date
            account: Only entries with at least one line on this account code

        Returns:
            Matching entries
        """
        return filters.apply(
            self.entries.data,
            lambda entry: filters.matches_search(search, entry.reference, entry.description)
            and filters.in_date_range(entry.date, start_date, end_date)
            and (not account or any(line.account == account for line in entry.lines)),
        )

    def get_entry(self, entry_id: int) -> LedgerEntry:
        for entry in self.entries.data:
            if entry.id == entry_id:
                return entry
        raise NotFoundError(f"Ledger entry {entry_id} not found")

    def account_name(self, code: str) -> str:
        return self.chart.data.get(code, "")

    def new_form(self, **kwargs: Any) -> LedgerEntryForm:
        """Blank entry form bound to the loaded chart of accounts."""
        return LedgerEntryForm(chart_of_accounts=self.chart.data, **kwargs)

    def edit_form(self, entry_id: int) -> LedgerEntryForm:
        return LedgerEntryForm.from_entry(self.get_entry(entry_id), self.chart.data)

    def save(self, form: LedgerEntryForm) -> Any:
        """Validate and save an entry, then reload the list.

        New entries are POSTed; entries with an ID are PUT in full.

        Returns:
            The ``data`` of the backend response

        Raises:
            ValidationError: If the entry is incomplete or unbalanced
            BackendError: If the backend rejects or never receives the entry
        """
        form.validate()
        payload = form.to_payload()
        if form.entry_id is None:
            response = self.backend.post("/accounting/entries", json=payload)
        else:
            response = self.backend.put(f"/accounting/entries/{form.entry_id}", json=payload)
        self.load_entries()
        return response.data

    def report(
        self,
        kind: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account: Optional[str] = None,
    ) -> LoadResult[Any]:
        """Load a balance sheet, income statement or general ledger.

        Reports have no sample data; an unavailable backend gives a failed
        result.

        Raises:
            ValidationError: If ``kind`` is not a known report
        """
        params = _report_params(kind, start_date, end_date, account)
        if kind == "balance-sheet":
            params = {"date": params["date_to"]}
        return load(self.backend, f"/accounting/{kind}", params=params)

    def download_report_pdf(
        self,
        kind: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account: Optional[str] = None,
        directory: Path = Path("."),
    ) -> Path:
        """Save a report as ``reporte-contable-<kind>.pdf`` in ``directory``.

        Raises:
            ValidationError: If ``kind`` is not a known report
            ApiError: If the backend answers with anything but a PDF
        """
        params = {"type": kind, **_report_params(kind, start_date, end_date, account)}
        response = self.backend.download("/accounting/report/pdf", params=params)
        return save_pdf(response, Path(directory) / f"reporte-contable-{kind}.pdf")
