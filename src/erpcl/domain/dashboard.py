"""Dashboard KPI aggregation.

The dashboard reads four collections concurrently and derives counts and
sums from each. Sources are independent: one that fails contributes a
zero-valued section and is listed in ``failed_sources`` while the others
keep their real values.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Callable, Optional

from erpcl.api import mappers
from erpcl.api.base import Backend
from erpcl.api.loader import LoadResult, load
from erpcl.domain.entities import (
    Client,
    ClientStatus,
    Invoice,
    InvoiceStatus,
    OrderStatus,
    PurchaseInvoice,
    PurchaseOrder,
)

logger = logging.getLogger(__name__)

SOURCE_LIMIT = 100

SOURCES = {
    "clients": ("/clients", mappers.clients_to_domain),
    "invoices": ("/invoices", mappers.invoices_to_domain),
    "purchase_invoices": ("/purchase-invoices", mappers.purchase_invoices_to_domain),
    "purchase_orders": ("/purchase-orders", mappers.purchase_orders_to_domain),
}

_SETTLED = (InvoiceStatus.PAID, InvoiceStatus.CANCELLED)


@dataclass(frozen=True)
class ClientKpis:
    total: int = 0
    active: int = 0
    potential: int = 0
    new_this_month: int = 0


@dataclass(frozen=True)
class InvoiceKpis:
    total: int = 0
    paid: int = 0
    pending: int = 0
    overdue: int = 0
    paid_value: int = 0
    pending_value: int = 0
    overdue_value: int = 0
    total_value: int = 0


@dataclass(frozen=True)
class PurchaseInvoiceKpis:
    total: int = 0
    paid: int = 0
    pending: int = 0
    total_value: int = 0


@dataclass(frozen=True)
class PurchaseOrderKpis:
    total: int = 0
    pending_amount: int = 0
    delivered_amount: int = 0


@dataclass(frozen=True)
class DashboardSummary:
    clients: ClientKpis = field(default_factory=ClientKpis)
    invoices: InvoiceKpis = field(default_factory=InvoiceKpis)
    purchase_invoices: PurchaseInvoiceKpis = field(default_factory=PurchaseInvoiceKpis)
    purchase_orders: PurchaseOrderKpis = field(default_factory=PurchaseOrderKpis)
    failed_sources: tuple[str, ...] = field(default_factory=tuple)

    @property
    def net_margin(self) -> int:
        """Invoiced value minus purchase-invoice value."""
        return self.invoices.total_value - self.purchase_invoices.total_value

    @property
    def margin_percent(self) -> Optional[Decimal]:
        if self.invoices.total_value == 0:
            return None
        return (Decimal(self.net_margin) * 100 / self.invoices.total_value).quantize(
            Decimal("0.1")
        )

    @property
    def is_complete(self) -> bool:
        return not self.failed_sources


def is_overdue(invoice: Invoice | PurchaseInvoice, today: date) -> bool:
    """Due date (or issue date when there is none) before today and not settled."""
    if invoice.status in _SETTLED:
        return False
    due = invoice.due_date or invoice.date
    return due is not None and due < today


def client_kpis(clients: tuple[Client, ...], today: date) -> ClientKpis:
    return ClientKpis(
        total=len(clients),
        active=sum(1 for c in clients if c.status == ClientStatus.ACTIVE),
        potential=sum(1 for c in clients if c.status == ClientStatus.POTENTIAL),
        new_this_month=sum(
            1
            for c in clients
            if c.created_at is not None
            and (c.created_at.year, c.created_at.month) == (today.year, today.month)
        ),
    )


def invoice_kpis(invoices: tuple[Invoice, ...], today: date) -> InvoiceKpis:
    paid = [i for i in invoices if i.status == InvoiceStatus.PAID]
    pending = [i for i in invoices if i.status in (InvoiceStatus.SENT, InvoiceStatus.PENDING)]
    overdue = [i for i in invoices if is_overdue(i, today)]
    return InvoiceKpis(
        total=len(invoices),
        paid=len(paid),
        pending=len(pending),
        overdue=len(overdue),
        paid_value=sum(i.total for i in paid),
        pending_value=sum(i.total for i in pending),
        overdue_value=sum(i.total for i in overdue),
        total_value=sum(i.total for i in invoices),
    )


def purchase_invoice_kpis(invoices: tuple[PurchaseInvoice, ...]) -> PurchaseInvoiceKpis:
    return PurchaseInvoiceKpis(
        total=len(invoices),
        paid=sum(1 for i in invoices if i.status == InvoiceStatus.PAID),
        pending=sum(
            1 for i in invoices if i.status in (InvoiceStatus.PENDING, InvoiceStatus.APPROVED)
        ),
        total_value=sum(i.total for i in invoices),
    )


def purchase_order_kpis(orders: tuple[PurchaseOrder, ...]) -> PurchaseOrderKpis:
    return PurchaseOrderKpis(
        total=len(orders),
        pending_amount=sum(o.total for o in orders if o.status == OrderStatus.PENDING),
        delivered_amount=sum(o.total for o in orders if o.status == OrderStatus.DELIVERED),
    )


class DashboardService:
    """Service computing dashboard KPIs from the backend collections."""

    def __init__(
        self,
        backend: Backend,
        today: Optional[Callable[[], date]] = None,
        max_workers: int = len(SOURCES),
    ):
        """Initialize dashboard service.

        Args:
            backend: Backend instance
            today: Callable returning the reference date for overdue and
                new-this-month checks; defaults to date.today
            max_workers: Size of the fetch thread pool
        """
        self.backend = backend
        self.today = today or date.today
        self.max_workers = max_workers

    def _fetch_all(self) -> dict[str, LoadResult]:
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = {
                name: pool.submit(
                    load, self.backend, path, params={"limit": SOURCE_LIMIT}, mapper=mapper
                )
                for name, (path, mapper) in SOURCES.items()
            }
            return {name: future.result() for name, future in futures.items()}

    def summary(self) -> DashboardSummary:
        """Fetch every source and compute the KPIs.

        Returns:
            DashboardSummary; failed sources are zero and listed in
            ``failed_sources``
        """
        results = self._fetch_all()
        failed = tuple(name for name, result in results.items() if not result.is_live)
        for name in failed:
            logger.warning("Dashboard source %s failed: %s", name, results[name].reason)

        today = self.today()

        def live(name):
            return results[name].data if name not in failed else None

        clients = live("clients")
        invoices = live("invoices")
        purchase_invoices = live("purchase_invoices")
        orders = live("purchase_orders")
        return DashboardSummary(
            clients=client_kpis(clients, today) if clients is not None else ClientKpis(),
            invoices=invoice_kpis(invoices, today) if invoices is not None else InvoiceKpis(),
            purchase_invoices=(
                purchase_invoice_kpis(purchase_invoices)
                if purchase_invoices is not None
                else PurchaseInvoiceKpis()
            ),
            purchase_orders=(
                purchase_order_kpis(orders) if orders is not None else PurchaseOrderKpis()
            ),
            failed_sources=failed,
        )
