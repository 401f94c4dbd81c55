"""Multi-row form editing for records with embedded line items.

A form holds its lines as an immutable tuple; every edit builds a new tuple
with one replaced record. Aggregates (debit/credit sums, order subtotal, tax
and total) are properties computed from the current lines and cannot be set.
"""

from dataclasses import fields, replace
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Callable, ClassVar, Generic, Iterable, Mapping, Optional, TypeVar

from erpcl.domain import errors
from erpcl.domain.entities import LedgerEntry, LedgerLine, PurchaseOrder, PurchaseOrderItem
from erpcl.domain.errors import ValidationError
from erpcl.utils.money import IVA_RATE, coerce_pesos, coerce_quantity, iva, line_total

L = TypeVar("L")


class LineItemEditor(Generic[L]):
    """Ordered list of line records bound to a parent form.

    Subclasses set ``line_type`` and ``min_lines`` and may declare per-field
    coercions and a hook that derives fields after an edit.
    """

    line_type: ClassVar[type]
    min_lines: ClassVar[int] = 1
    coercers: ClassVar[dict[str, Callable[[Any], Any]]] = {}
    derived_fields: ClassVar[frozenset[str]] = frozenset()

    def __init__(self, lines: Iterable[L] = ()):
        lines = tuple(lines)
        missing = self.min_lines - len(lines)
        if missing > 0:
            lines += tuple(self.blank_line() for _ in range(missing))
        self._lines: tuple[L, ...] = lines

    def blank_line(self) -> L:
        """Return a new line with empty text and zeroed numbers."""
        return self.line_type()

    @property
    def lines(self) -> tuple[L, ...]:
        return self._lines

    def __len__(self) -> int:
        return len(self._lines)

    @property
    def can_remove(self) -> bool:
        """False when removing a line would go below ``min_lines``."""
        return len(self._lines) > self.min_lines

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._lines):
            raise ValidationError(errors.line_out_of_range(index, len(self._lines)))

    def add_line(self) -> int:
        """Append a blank line and return its index."""
        self._lines = self._lines + (self.blank_line(),)
        return len(self._lines) - 1

    def remove_line(self, index: int) -> bool:
        """Remove the line at ``index``.

        Returns:
            False without changing anything when the form is already at
            ``min_lines``, True otherwise

        Raises:
            ValidationError: If index is out of range
        """
        self._check_index(index)
        if not self.can_remove:
            return False
        self._lines = self._lines[:index] + self._lines[index + 1 :]
        return True

    def update_line(self, index: int, field_name: str, value: Any) -> L:
        """Replace one field of one line and return the new line.

        Raises:
            ValidationError: If index is out of range, the field does not
                exist or the field is derived
        """
        self._check_index(index)
        if field_name not in {f.name for f in fields(self.line_type)}:
            raise ValidationError(errors.unknown_line_field(field_name))
        if field_name in self.derived_fields:
            raise ValidationError(f"Line field '{field_name}' is computed and cannot be set")

        coerce = self.coercers.get(field_name)
        if coerce is not None:
            value = coerce(value)

        line = replace(self._lines[index], **{field_name: value})
        line = self.after_update(line, field_name)
        self._lines = self._lines[:index] + (line,) + self._lines[index + 1 :]
        return line

    def after_update(self, line: L, field_name: str) -> L:
        """Hook for fields derived from the one just edited."""
        return line


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


class LedgerEntryForm(LineItemEditor[LedgerLine]):
    """Editor for a ledger entry. Double entry needs at least two lines."""

    line_type = LedgerLine
    min_lines = 2
    coercers = {"debit": coerce_pesos, "credit": coerce_pesos, "account": _text}

    def __init__(
        self,
        chart_of_accounts: Optional[Mapping[str, str]] = None,
        lines: Iterable[LedgerLine] = (),
        entry_date: Optional[date] = None,
        reference: str = "",
        description: str = "",
        entry_id: Optional[int] = None,
    ):
        self.chart_of_accounts = dict(chart_of_accounts or {})
        self.entry_id = entry_id
        self.date = entry_date or date.today()
        self.reference = reference
        self.description = description
        super().__init__(lines)

    @classmethod
    def from_entry(
        cls, entry: LedgerEntry, chart_of_accounts: Optional[Mapping[str, str]] = None
    ) -> "LedgerEntryForm":
        return cls(
            chart_of_accounts=chart_of_accounts,
            lines=entry.lines,
            entry_date=entry.date,
            reference=entry.reference,
            description=entry.description,
            entry_id=entry.id,
        )

    def after_update(self, line: LedgerLine, field_name: str) -> LedgerLine:
        if field_name == "account" and line.account in self.chart_of_accounts:
            return replace(line, description=self.chart_of_accounts[line.account])
        return line

    @property
    def total_debit(self) -> int:
        return sum(line.debit for line in self.lines)

    @property
    def total_credit(self) -> int:
        return sum(line.credit for line in self.lines)

    @property
    def difference(self) -> int:
        return self.total_debit - self.total_credit

    @property
    def is_balanced(self) -> bool:
        return self.total_debit == self.total_credit

    def validate(self) -> None:
        """Check the entry can be saved.

        Raises:
            ValidationError: On the first problem found
        """
        if not self.description.strip():
            raise ValidationError("Entry description is required")
        if not self.reference.strip():
            raise ValidationError("Entry reference is required")
        for index, line in enumerate(self.lines):
            if not line.account:
                raise ValidationError(f"Line {index} has no account")
            if not line.description.strip():
                raise ValidationError(
                    f"Line {index} has no description (account '{line.account}' is not in the chart)"
                )
            if line.debit < 0 or line.credit < 0:
                raise ValidationError(f"Line {index} has a negative amount")
            if (line.debit > 0) == (line.credit > 0):
                raise ValidationError(
                    f"Line {index} must have either a debit or a credit amount"
                )
        if not self.is_balanced:
            raise ValidationError(errors.ledger_unbalanced(self.total_debit, self.total_credit))

    def to_payload(self) -> dict[str, Any]:
        """Body of the create/update request. Lines travel as ``entries``."""
        return {
            "date": self.date.isoformat(),
            "reference": self.reference,
            "description": self.description,
            "entries": [
                {
                    "account": line.account,
                    "debit": line.debit,
                    "credit": line.credit,
                    "description": line.description,
                }
                for line in self.lines
            ],
            "total_debit": self.total_debit,
            "total_credit": self.total_credit,
        }


def _json_quantity(quantity: Decimal) -> int | float:
    return int(quantity) if quantity == quantity.to_integral_value() else float(quantity)


class PurchaseOrderForm(LineItemEditor[PurchaseOrderItem]):
    """Editor for a purchase order and its items."""

    line_type = PurchaseOrderItem
    min_lines = 1
    coercers = {
        "quantity": coerce_quantity,
        "unit_price": coerce_pesos,
        "description": _text,
        "unit": _text,
    }
    derived_fields = frozenset({"total"})

    DELIVERY_DAYS = 10

    def __init__(
        self,
        items: Iterable[PurchaseOrderItem] = (),
        supplier_id: Optional[int] = None,
        order_date: Optional[date] = None,
        delivery_date: Optional[date] = None,
        notes: str = "",
        order_id: Optional[int] = None,
        tax_rate: Decimal = IVA_RATE,
    ):
        self.order_id = order_id
        self.supplier_id = supplier_id
        self.date = order_date or date.today()
        self.delivery_date = delivery_date or self.date + timedelta(days=self.DELIVERY_DAYS)
        self.notes = notes
        self.tax_rate = tax_rate
        super().__init__(
            replace(item, total=line_total(item.quantity, item.unit_price)) for item in items
        )

    @classmethod
    def from_order(cls, order: PurchaseOrder) -> "PurchaseOrderForm":
        return cls(
            items=order.items,
            supplier_id=order.supplier_id,
            order_date=order.date,
            delivery_date=order.delivery_date,
            notes=order.notes,
            order_id=order.id,
        )

    def blank_line(self) -> PurchaseOrderItem:
        return PurchaseOrderItem(quantity=Decimal("0"), unit_price=0, total=0)

    def after_update(self, line: PurchaseOrderItem, field_name: str) -> PurchaseOrderItem:
        if field_name in ("quantity", "unit_price"):
            return replace(line, total=line_total(line.quantity, line.unit_price))
        return line

    @property
    def subtotal(self) -> int:
        return sum(item.total for item in self.lines)

    @property
    def tax(self) -> int:
        return iva(self.subtotal, self.tax_rate)

    @property
    def total(self) -> int:
        return self.subtotal + self.tax

    def described_items(self) -> tuple[PurchaseOrderItem, ...]:
        return tuple(item for item in self.lines if item.description.strip())

    def validate(self) -> None:
        """Check the order can be saved.

        Raises:
            ValidationError: On the first problem found
        """
        if self.supplier_id is None:
            raise ValidationError("A supplier is required")
        if self.delivery_date < self.date:
            raise ValidationError("Delivery date cannot be before the order date")
        items = self.described_items()
        if not items:
            raise ValidationError("At least one item with a description is required")
        for item in items:
            if item.quantity <= 0:
                raise ValidationError(f"Item '{item.description}' needs a positive quantity")
            if item.unit_price < 0:
                raise ValidationError(f"Item '{item.description}' has a negative price")

    def to_payload(self) -> dict[str, Any]:
        """Body of the create request. Items without a description are dropped."""
        return {
            "supplier_id": self.supplier_id,
            "date": self.date.isoformat(),
            "delivery_date": self.delivery_date.isoformat(),
            "notes": self.notes,
            "items": [
                {
                    "description": item.description,
                    "quantity": _json_quantity(item.quantity),
                    "unit_price": item.unit_price,
                    "unit": item.unit,
                    "total": item.total,
                }
                for item in self.described_items()
            ],
        }
