"""Sample datasets substituted when the backend cannot be reached.

Whatever is shown from here is labelled as sample data by the caller; these
numbers are never authoritative.
"""

from datetime import date, datetime, timezone
from decimal import Decimal

from erpcl.domain.entities import (
    Client,
    ClientStatus,
    ClientType,
    CompanyConfig,
    LedgerEntry,
    LedgerLine,
    OrderStatus,
    Product,
    ProductCategory,
    PurchaseOrder,
    PurchaseOrderItem,
    Role,
    SearchResult,
    SettingsUser,
    Shipping,
    Store,
    Supplier,
    SupplierHit,
)

PURCHASE_ORDERS: tuple[PurchaseOrder, ...] = (
    PurchaseOrder(
        id=1,
        order_number="OC-000001-012024",
        supplier_id=1,
        supplier_name="Materiales Santiago S.A.",
        date=date(2024, 1, 15),
        delivery_date=date(2024, 1, 25),
        items=(
            PurchaseOrderItem("Cemento Portland 25kg", Decimal("100"), 2500, 250000, "bolsas"),
            PurchaseOrderItem("Arena gruesa", Decimal("10"), 15000, 150000, "m3"),
            PurchaseOrderItem('Grava 1/2"', Decimal("8"), 12500, 100000, "m3"),
        ),
        subtotal=500000,
        tax=95000,
        total=595000,
        status=OrderStatus.PENDING,
        notes="Materiales para proyecto residencial",
    ),
    PurchaseOrder(
        id=2,
        order_number="OC-000002-012024",
        supplier_id=2,
        supplier_name="Ferretería Central",
        date=date(2024, 1, 20),
        delivery_date=date(2024, 1, 30),
        items=(
            PurchaseOrderItem("Martillo demoledor", Decimal("2"), 80000, 160000, "unidades"),
            PurchaseOrderItem("Taladro percutor", Decimal("1"), 40000, 40000, "unidades"),
        ),
        subtotal=200000,
        tax=38000,
        total=238000,
        status=OrderStatus.DELIVERED,
        notes="Herramientas y accesorios",
    ),
)

SUPPLIERS: tuple[Supplier, ...] = (
    Supplier(
        id=1,
        rut="76.123.456-0",
        name="Materiales Santiago S.A.",
        email="ventas@materialessantiago.cl",
        phone="+56 2 2345 6789",
        city="Santiago",
        type="materials",
        status="active",
    ),
    Supplier(
        id=2,
        rut="98.765.432-5",
        name="Ferretería Central",
        email="compras@ferreteriacentral.cl",
        phone="+56 32 1234 5678",
        city="Valparaíso",
        type="tools",
        status="active",
    ),
)

LEDGER_ENTRIES: tuple[LedgerEntry, ...] = (
    LedgerEntry(
        id=1,
        date=date(2024, 1, 15),
        reference="FAC-000001",
        description="Venta de servicios de construcción",
        lines=(
            LedgerLine("1201", 119000, 0, "Cuentas por Cobrar Clientes"),
            LedgerLine("4101", 0, 100000, "Ventas de Servicios"),
            LedgerLine("2105", 0, 19000, "IVA Débito Fiscal"),
        ),
        total_debit=119000,
        total_credit=119000,
    ),
    LedgerEntry(
        id=2,
        date=date(2024, 1, 20),
        reference="OC-000001",
        description="Compra de materiales",
        lines=(
            LedgerLine("1302", 500000, 0, "Materiales"),
            LedgerLine("1105", 95000, 0, "IVA Crédito Fiscal"),
            LedgerLine("2101", 0, 595000, "Cuentas por Pagar Proveedores"),
        ),
        total_debit=595000,
        total_credit=595000,
    ),
)

CHART_OF_ACCOUNTS: dict[str, str] = {
    "1101": "Caja",
    "1102": "Banco Cuenta Corriente",
    "1105": "IVA Crédito Fiscal",
    "1201": "Cuentas por Cobrar Clientes",
    "1302": "Materiales",
    "1401": "Muebles y Útiles",
    "1403": "Maquinarias",
    "2101": "Cuentas por Pagar Proveedores",
    "2105": "IVA Débito Fiscal",
    "3101": "Capital",
    "4101": "Ventas de Servicios",
    "5101": "Costo de Ventas Servicios",
    "6101": "Gastos de Administración",
}

CLIENTS: tuple[Client, ...] = (
    Client(
        id=1,
        rut="12.345.678-5",
        name="Juan Pérez",
        email="juan.perez@email.com",
        phone="+56 9 1234 5678",
        address="Av. Principal 123",
        city="Santiago",
        region="Región Metropolitana",
        type=ClientType.INDIVIDUAL,
        status=ClientStatus.ACTIVE,
        notes="Cliente preferencial",
        created_at=datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc),
    ),
    Client(
        id=2,
        rut="9.876.543-3",
        name="María González",
        email="maria.gonzalez@email.com",
        phone="+56 9 8765 4321",
        address="Calle Secundaria 456",
        city="Valparaíso",
        region="Región de Valparaíso",
        type=ClientType.INDIVIDUAL,
        status=ClientStatus.POTENTIAL,
        notes="Cliente potencial",
        created_at=datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc),
    ),
)

PRODUCTS: tuple[Product, ...] = (
    Product(
        id="1",
        name="Cemento Portland Tipo I 25kg",
        price=4500,
        currency="CLP",
        supplier="Sodimac",
        supplier_key="sodimac",
        available=True,
        category="Materiales de Construcción",
        brand="Melón",
        description="Cemento Portland Tipo I para construcción general",
        stock=150,
        rating=4.5,
        reviews=23,
        sku="CEM-001",
        shipping=Shipping(free=False, cost=5000, estimated_days=2),
    ),
    Product(
        id="2",
        name="Ladrillos Cerámicos 10x20x40cm",
        price=120,
        currency="CLP",
        supplier="Easy",
        supplier_key="easy",
        available=True,
        category="Materiales de Construcción",
        brand="Ladrillos del Sur",
        description="Ladrillos cerámicos para construcción de muros",
        stock=5000,
        rating=4.2,
        reviews=15,
        sku="LAD-002",
        shipping=Shipping(free=True, cost=0, estimated_days=1),
    ),
)


def search_result(query: str) -> SearchResult:
    """Sample search answer echoing the query."""
    return SearchResult(
        query=query,
        total=len(PRODUCTS),
        suppliers=(SupplierHit("Sodimac", 1), SupplierHit("Easy", 1)),
        products=PRODUCTS,
    )


PRODUCT_CATEGORIES: tuple[ProductCategory, ...] = (
    ProductCategory("1", "Materiales de Construcción", 150),
    ProductCategory("2", "Herramientas", 89),
    ProductCategory("3", "Pinturas y Acabados", 67),
    ProductCategory("4", "Electricidad", 45),
    ProductCategory("5", "Plomería", 34),
)

STORES: tuple[Store, ...] = (
    Store("1", "Sodimac Maipú", "Av. Américo Vespucio 1501", "Maipú", "+56 2 2345 6789"),
    Store("2", "Easy Providencia", "Av. Providencia 1200", "Providencia", "+56 2 3456 7890"),
)

COMPANY_CONFIG = CompanyConfig(
    id=1,
    name="Patolin Construction",
    rut="12.345.678-5",
    address="Av. Principal 123",
    city="Santiago",
    region="Región Metropolitana",
    phone="+56 9 1234 5678",
    email="contacto@patolin.cl",
    website="www.patolin.cl",
    business_type="Construcción y Remodelaciones",
    tax_regime="Régimen General",
)

SETTINGS_USERS: tuple[SettingsUser, ...] = (
    SettingsUser(1, "admin@patolin.cl", "Administrador", Role.ADMIN),
    SettingsUser(2, "contador@patolin.cl", "Contador", Role.ACCOUNTANT),
    SettingsUser(3, "usuario@patolin.cl", "Usuario General", Role.USER),
)
