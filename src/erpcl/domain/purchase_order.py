"""Purchase order domain service."""

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Optional

from erpcl.api import fallbacks, mappers
from erpcl.api.base import Backend
from erpcl.api.documents import save_pdf
from erpcl.api.loader import LoadResult, View, load
from erpcl.domain import errors, filters
from erpcl.domain.entities import OrderStatus, PurchaseOrder, Supplier
from erpcl.domain.errors import NotFoundError, TransitionError
from erpcl.domain.line_items import PurchaseOrderForm

# pending -> approved -> ordered -> delivered
_NEXT_STATUS = {
    OrderStatus.PENDING: OrderStatus.APPROVED,
    OrderStatus.APPROVED: OrderStatus.ORDERED,
    OrderStatus.ORDERED: OrderStatus.DELIVERED,
}

TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})


def next_status(status: OrderStatus) -> Optional[OrderStatus]:
    """Return the forward successor of ``status``, or None at the end."""
    return _NEXT_STATUS.get(status)


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    """Forward by one step, or cancel from any non-terminal status."""
    if target == OrderStatus.CANCELLED:
        return current not in TERMINAL_STATUSES
    return _NEXT_STATUS.get(current) == target


@dataclass(frozen=True)
class OrderAmounts:
    """Money totals over a set of orders."""

    count: int
    total_amount: int
    pending_amount: int
    delivered_amount: int


def order_amounts(orders) -> OrderAmounts:
    """Sum order totals overall and for the pending and delivered statuses."""
    orders = tuple(orders)
    return OrderAmounts(
        count=len(orders),
        total_amount=sum(o.total for o in orders),
        pending_amount=sum(o.total for o in orders if o.status == OrderStatus.PENDING),
        delivered_amount=sum(o.total for o in orders if o.status == OrderStatus.DELIVERED),
    )


class PurchaseOrderService:
    """Service for listing, creating and moving purchase orders."""

    def __init__(self, backend: Backend):
        """Initialize purchase order service.

        Args:
            backend: Backend instance
        """
        self.backend = backend
        self.orders: View[tuple[PurchaseOrder, ...]] = View(())
        self.suppliers: View[tuple[Supplier, ...]] = View(())

    def load_orders(self) -> LoadResult[tuple[PurchaseOrder, ...]]:
        """Reload the order list, falling back to sample orders."""
        return self.orders.refresh(
            lambda: load(
                self.backend,
                "/purchase-orders",
                fallback=fallbacks.PURCHASE_ORDERS,
                mapper=mappers.purchase_orders_to_domain,
            )
        )

    def load_suppliers(self) -> LoadResult[tuple[Supplier, ...]]:
        return self.suppliers.refresh(
            lambda: load(
                self.backend,
                "/suppliers",
                fallback=fallbacks.SUPPLIERS,
                mapper=mappers.suppliers_to_domain,
            )
        )

    def list_orders(
        self,
        search: Optional[str] = None,
        status: Optional[OrderStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> tuple[PurchaseOrder, ...]:
        """Filter the loaded orders.

        Args:
            search: Substring of the order number or supplier name
            status: Only orders in this status
            start_date: Only orders dated on or after this date
            end_date: Only orders dated on or before this date

        Returns:
            Matching orders in backend order
        """
        return filters.apply(
            self.orders.data,
            lambda order: filters.matches_search(search, order.order_number, order.supplier_name)
            and filters.matches_value(status, order.status)
            and filters.in_date_range(order.date, start_date, end_date),
        )

    def get_order(self, order_id: int) -> PurchaseOrder:
        """Find a loaded order by ID.

        Raises:
            NotFoundError: If no loaded order has that ID
        """
        for order in self.orders.data:
            if order.id == order_id:
                return order
        raise NotFoundError(errors.order_not_found(order_id))

    def supplier_name(self, supplier_id: Optional[int]) -> str:
        for supplier in self.suppliers.data:
            if supplier.id == supplier_id:
                return supplier.name
        return ""

    def update_status(self, order_id: int, target: OrderStatus) -> PurchaseOrder:
        """Move an order to ``target`` and reload the list.

        Returns:
            The order as it was before the change

        Raises:
            NotFoundError: If the order is not loaded
            TransitionError: If the move is not allowed from the current status
            BackendError: If the backend rejects or never receives the change
        """
        order = self.get_order(order_id)
        if not can_transition(order.status, target):
            raise TransitionError(errors.invalid_transition(order.status.value, target.value))

        self.backend.patch(f"/purchase-orders/{order_id}/status", json={"status": target.value})
        self.load_orders()
        return order

    def advance(self, order_id: int) -> OrderStatus:
        """Move an order one step forward and return its new status.

        Raises:
            TransitionError: If the order is delivered or cancelled
        """
        order = self.get_order(order_id)
        target = next_status(order.status)
        if target is None:
            raise TransitionError(f"Order {order_id} is already {order.status.value}")
        self.update_status(order_id, target)
        return target

    def cancel(self, order_id: int) -> None:
        self.update_status(order_id, OrderStatus.CANCELLED)

    def new_form(self, **kwargs: Any) -> PurchaseOrderForm:
        return PurchaseOrderForm(**kwargs)

    def save(self, form: PurchaseOrderForm) -> Any:
        """Validate and create an order, then reload the list.

        Returns:
            The ``data`` of the backend response

        Raises:
            ValidationError: If the form is incomplete
            BackendError: If the backend rejects or never receives the order
        """
        form.validate()
        response = self.backend.post("/purchase-orders", json=form.to_payload())
        self.load_orders()
        return response.data

    def download_pdf(self, order_id: int, directory: Path = Path(".")) -> Path:
        """Save the order sheet as ``orden-compra-<id>.pdf`` in ``directory``.

        Raises:
            ApiError: If the backend answers with anything but a PDF
        """
        response = self.backend.download(f"/purchase-orders/{order_id}/pdf")
        return save_pdf(response, Path(directory) / f"orden-compra-{order_id}.pdf")
