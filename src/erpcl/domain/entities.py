"""Domain model entities for erpcl.

These are pure data classes representing the records the ERP backend owns.
The client only ever holds transient copies of them, so every entity is
immutable; edits go through the form objects in ``erpcl.domain.line_items``
and are sent back to the backend explicitly.

All money amounts are integer Chilean pesos.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class Role(str, Enum):
    """User role."""

    ADMIN = "admin"
    USER = "user"
    ACCOUNTANT = "accountant"


class NotificationType(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    SUCCESS = "success"
    APPROVAL = "approval"
    DEADLINE = "deadline"


class NotificationPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class OrderStatus(str, Enum):
    """Purchase order status.

    Moves forward pending -> approved -> ordered -> delivered. Cancelled is
    absorbing and reachable from any state that is not terminal.
    """

    PENDING = "pending"
    APPROVED = "approved"
    ORDERED = "ordered"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class ClientStatus(str, Enum):
    ACTIVE = "active"
    POTENTIAL = "potential"
    INACTIVE = "inactive"


class ClientType(str, Enum):
    INDIVIDUAL = "individual"
    COMPANY = "company"


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    PENDING = "pending"
    APPROVED = "approved"
    PAID = "paid"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Identity:
    """Logged-in user identity."""

    id: int
    email: str
    name: str
    role: Role


@dataclass(frozen=True)
class Notification:
    """Notification entity. ``read`` only ever moves from False to True."""

    id: int
    type: NotificationType
    priority: NotificationPriority
    title: str
    message: str
    read: bool
    created_at: Optional[datetime]
    action_url: Optional[str] = None
    action_label: Optional[str] = None


@dataclass(frozen=True)
class LedgerLine:
    """One debit or credit line of a ledger entry."""

    account: str = ""
    debit: int = 0
    credit: int = 0
    description: str = ""


@dataclass(frozen=True)
class LedgerEntry:
    """Balanced set of debit/credit lines for one bookkeeping transaction."""

    id: Optional[int]
    date: date
    reference: str
    description: str
    lines: tuple[LedgerLine, ...]
    total_debit: int
    total_credit: int


@dataclass(frozen=True)
class PurchaseOrderItem:
    """Line item of a purchase order."""

    description: str = ""
    quantity: Decimal = Decimal("0")
    unit_price: int = 0
    total: int = 0
    unit: str = "unidades"


@dataclass(frozen=True)
class PurchaseOrder:
    """Purchase order entity."""

    id: Optional[int]
    order_number: str
    supplier_id: Optional[int]
    supplier_name: str
    date: date
    delivery_date: Optional[date]
    items: tuple[PurchaseOrderItem, ...]
    subtotal: int
    tax: int
    total: int
    status: OrderStatus
    notes: str = ""


@dataclass(frozen=True)
class Client:
    """Customer record."""

    id: Optional[int]
    rut: str
    name: str
    email: str
    phone: str
    address: str
    city: str
    region: str
    type: ClientType
    status: ClientStatus
    notes: str = ""
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Invoice:
    """Sales invoice, as needed by the dashboard."""

    id: int
    number: str
    client_id: Optional[int]
    date: Optional[date]
    due_date: Optional[date]
    total: int
    status: InvoiceStatus


@dataclass(frozen=True)
class PurchaseInvoice:
    """Supplier invoice, as needed by the dashboard."""

    id: int
    number: str
    supplier_id: Optional[int]
    date: Optional[date]
    due_date: Optional[date]
    total: int
    status: InvoiceStatus


@dataclass(frozen=True)
class Supplier:
    id: int
    rut: str
    name: str
    email: str
    phone: str
    city: str
    type: str
    status: str


@dataclass(frozen=True)
class Shipping:
    free: bool
    cost: int
    estimated_days: int


@dataclass(frozen=True)
class Product:
    """Product offered by an external supplier store. Read-only."""

    id: str
    name: str
    price: int
    currency: str
    supplier: str
    supplier_key: str
    available: bool
    category: str = ""
    brand: str = ""
    description: str = ""
    stock: int = 0
    rating: float = 0.0
    reviews: int = 0
    sku: str = ""
    shipping: Optional[Shipping] = None


@dataclass(frozen=True)
class SupplierHit:
    """Per-store result count of a product search."""

    name: str
    total: int
    error: Optional[str] = None


@dataclass(frozen=True)
class SearchResult:
    query: str
    total: int
    suppliers: tuple[SupplierHit, ...]
    products: tuple[Product, ...]
    search_time: Optional[str] = None


@dataclass(frozen=True)
class PriceRange:
    min: Optional[int]
    max: Optional[int]
    average: Optional[int]


@dataclass(frozen=True)
class SupplierPriceStats:
    supplier: str
    supplier_key: str
    product_count: int
    average_price: int
    min_price: Optional[int]
    max_price: Optional[int]
    error: Optional[str] = None


@dataclass(frozen=True)
class ComparisonResult:
    product_name: str
    total_products: int
    suppliers: tuple[SupplierPriceStats, ...]
    products: tuple[Product, ...]
    price_range: PriceRange
    compared_at: Optional[str] = None


@dataclass(frozen=True)
class ProductCategory:
    id: str
    name: str
    product_count: int
    parent_id: Optional[str] = None


@dataclass(frozen=True)
class Store:
    id: str
    name: str
    address: str
    city: str = ""
    phone: str = ""


@dataclass(frozen=True)
class CompanyConfig:
    """Company settings, saved with full replacement."""

    name: str
    rut: str
    address: str = ""
    city: str = ""
    region: str = ""
    phone: str = ""
    email: str = ""
    website: str = ""
    business_type: str = ""
    tax_regime: str = ""
    iva_rate: Decimal = Decimal("19")
    currency: str = "CLP"
    invoice_prefix: str = "FAC"
    quotation_prefix: str = "COT"
    purchase_order_prefix: str = "OC"
    id: Optional[int] = None


@dataclass(frozen=True)
class SettingsUser:
    """User managed from the settings screen."""

    id: Optional[int]
    email: str
    name: str
    role: Role
    active: bool = True


@dataclass(frozen=True)
class IntegrationConfig:
    """Integration settings (SII, banks, supplier APIs) kept as plain mappings."""

    sii: dict = field(default_factory=dict)
    banks: dict = field(default_factory=dict)
    suppliers: dict = field(default_factory=dict)


@dataclass(frozen=True)
class SystemStats:
    company_name: str
    users_total: int
    users_active: int
    users_by_role: dict[str, int]


@dataclass(frozen=True)
class Bank:
    key: str
    code: str
    name: str
    short_name: str = ""
    services: tuple[str, ...] = ()
    coverage: str = ""


@dataclass(frozen=True)
class BankBalance:
    bank: str
    account_number: str
    rut: str
    balance: int
    available_balance: int
    currency: str = "CLP"
    account_type: str = ""
    last_update: Optional[str] = None


@dataclass(frozen=True)
class TaxStatus:
    """Taxpayer standing as reported by the SII."""

    rut: str
    status: str
    last_declaration: Optional[date] = None
    next_declaration: Optional[date] = None
    credit_balance: int = 0
    debt_balance: int = 0
    remarks: tuple[str, ...] = ()


@dataclass(frozen=True)
class RutValidation:
    rut: str
    valid: bool
    message: str = ""
