"""Mapper functions between backend JSON and domain entities.

This layer isolates the wire format, so field renames on the backend only
touch this module. Readers raise KeyError, TypeError, ValueError or a decimal
error on data they cannot interpret; the loader treats that like any other
bad response.
"""

from decimal import Decimal
from typing import Any

from erpcl.domain import entities as domain
from erpcl.utils.date_parser import parse_wire_date, parse_wire_datetime
from erpcl.utils.money import round_pesos


def _pesos(value: Any) -> int:
    if value is None or value == "":
        return 0
    return round_pesos(value)


def _optional_pesos(value: Any) -> int | None:
    return None if value is None else round_pesos(value)


def _many(mapper, rows: Any) -> tuple:
    if not isinstance(rows, list):
        raise TypeError(f"Expected a list, got {type(rows).__name__}")
    return tuple(mapper(row) for row in rows)


def notification_to_domain(row: dict) -> domain.Notification:
    """Convert a notification row to a Notification entity."""
    return domain.Notification(
        id=row["id"],
        type=domain.NotificationType(row.get("type", "info")),
        priority=domain.NotificationPriority(row.get("priority", "low")),
        title=row.get("title", ""),
        message=row.get("message", ""),
        read=bool(row.get("read", False)),
        created_at=parse_wire_datetime(row.get("created_at")),
        action_url=row.get("action_url"),
        action_label=row.get("action_label"),
    )


def notifications_to_domain(rows: Any) -> tuple[domain.Notification, ...]:
    return _many(notification_to_domain, rows)


def ledger_line_to_domain(row: dict) -> domain.LedgerLine:
    return domain.LedgerLine(
        account=str(row.get("account", "")),
        debit=_pesos(row.get("debit")),
        credit=_pesos(row.get("credit")),
        description=row.get("description") or "",
    )


def ledger_entry_to_domain(row: dict) -> domain.LedgerEntry:
    """Convert an accounting entry row to a LedgerEntry entity.

    The backend sends the lines under ``entries``; ``lines`` is accepted too.
    """
    raw_lines = row.get("entries", row.get("lines"))
    lines = _many(ledger_line_to_domain, raw_lines)
    return domain.LedgerEntry(
        id=row.get("id"),
        date=parse_wire_date(row["date"]),
        reference=row.get("reference") or "",
        description=row.get("description") or "",
        lines=lines,
        total_debit=_pesos(row.get("total_debit", sum(line.debit for line in lines))),
        total_credit=_pesos(row.get("total_credit", sum(line.credit for line in lines))),
    )


def ledger_entries_to_domain(rows: Any) -> tuple[domain.LedgerEntry, ...]:
    return _many(ledger_entry_to_domain, rows)


def chart_of_accounts_to_domain(data: Any) -> dict[str, str]:
    """The chart arrives as a ``{code: name}`` object."""
    if not isinstance(data, dict):
        raise TypeError(f"Expected an object, got {type(data).__name__}")
    return {str(code): str(name) for code, name in data.items()}


def purchase_order_item_to_domain(row: dict) -> domain.PurchaseOrderItem:
    return domain.PurchaseOrderItem(
        description=row.get("description", ""),
        quantity=Decimal(str(row.get("quantity", 0))),
        unit_price=_pesos(row.get("unit_price")),
        total=_pesos(row.get("total")),
        unit=row.get("unit") or "unidades",
    )


def purchase_order_to_domain(row: dict) -> domain.PurchaseOrder:
    """Convert a purchase order row to a PurchaseOrder entity."""
    return domain.PurchaseOrder(
        id=row.get("id"),
        order_number=row.get("order_number", ""),
        supplier_id=row.get("supplier_id"),
        supplier_name=row.get("supplier_name", ""),
        date=parse_wire_date(row["date"]),
        delivery_date=parse_wire_date(row.get("delivery_date")),
        items=_many(purchase_order_item_to_domain, row.get("items", [])),
        subtotal=_pesos(row.get("subtotal")),
        tax=_pesos(row.get("tax")),
        total=_pesos(row.get("total")),
        status=domain.OrderStatus(row.get("status", "pending")),
        notes=row.get("notes") or "",
    )


def purchase_orders_to_domain(rows: Any) -> tuple[domain.PurchaseOrder, ...]:
    return _many(purchase_order_to_domain, rows)


def client_to_domain(row: dict) -> domain.Client:
    return domain.Client(
        id=row.get("id"),
        rut=row.get("rut", ""),
        name=row["name"],
        email=row.get("email") or "",
        phone=row.get("phone") or "",
        address=row.get("address") or "",
        city=row.get("city") or "",
        region=row.get("region") or "",
        type=domain.ClientType(row.get("type", "company")),
        status=domain.ClientStatus(row.get("status", "active")),
        notes=row.get("notes") or "",
        created_at=parse_wire_datetime(row.get("created_at")),
    )


def clients_to_domain(rows: Any) -> tuple[domain.Client, ...]:
    return _many(client_to_domain, rows)


def client_to_payload(client: domain.Client) -> dict[str, Any]:
    """Convert a Client entity to the body of a create/update request."""
    return {
        "rut": client.rut,
        "name": client.name,
        "email": client.email,
        "phone": "".join(client.phone.split()),
        "address": client.address,
        "city": client.city,
        "region": client.region,
        "type": client.type.value,
        "status": client.status.value,
        "notes": client.notes,
    }


def invoice_to_domain(row: dict) -> domain.Invoice:
    return domain.Invoice(
        id=row["id"],
        number=str(row.get("invoice_number", row.get("number", row["id"]))),
        client_id=row.get("client_id"),
        date=parse_wire_date(row.get("date")),
        due_date=parse_wire_date(row.get("due_date")),
        total=_pesos(row.get("total")),
        status=domain.InvoiceStatus(row.get("status", "draft")),
    )


def invoices_to_domain(rows: Any) -> tuple[domain.Invoice, ...]:
    return _many(invoice_to_domain, rows)


def purchase_invoice_to_domain(row: dict) -> domain.PurchaseInvoice:
    return domain.PurchaseInvoice(
        id=row["id"],
        number=str(row.get("invoice_number", row.get("number", row["id"]))),
        supplier_id=row.get("supplier_id"),
        date=parse_wire_date(row.get("date")),
        due_date=parse_wire_date(row.get("due_date")),
        total=_pesos(row.get("total")),
        status=domain.InvoiceStatus(row.get("status", "pending")),
    )


def purchase_invoices_to_domain(rows: Any) -> tuple[domain.PurchaseInvoice, ...]:
    return _many(purchase_invoice_to_domain, rows)


def supplier_to_domain(row: dict) -> domain.Supplier:
    return domain.Supplier(
        id=row["id"],
        rut=row.get("rut", ""),
        name=row["name"],
        email=row.get("email") or "",
        phone=row.get("phone") or "",
        city=row.get("city") or "",
        type=row.get("type") or "",
        status=row.get("status") or "active",
    )


def suppliers_to_domain(rows: Any) -> tuple[domain.Supplier, ...]:
    return _many(supplier_to_domain, rows)


def product_to_domain(row: dict) -> domain.Product:
    shipping = row.get("shipping")
    return domain.Product(
        id=str(row["id"]),
        name=row["name"],
        price=_pesos(row.get("price")),
        currency=row.get("currency") or "CLP",
        supplier=row.get("supplier", ""),
        supplier_key=row.get("supplierKey", ""),
        available=bool(row.get("available", False)),
        category=row.get("category") or "",
        brand=row.get("brand") or "",
        description=row.get("description") or "",
        stock=int(row.get("stock") or 0),
        rating=float(row.get("rating") or 0),
        reviews=int(row.get("reviews") or 0),
        sku=row.get("sku") or "",
        shipping=(
            domain.Shipping(
                free=bool(shipping.get("free", False)),
                cost=_pesos(shipping.get("cost")),
                estimated_days=int(shipping.get("estimated_days") or 0),
            )
            if isinstance(shipping, dict)
            else None
        ),
    )


def search_result_to_domain(data: dict) -> domain.SearchResult:
    products = _many(product_to_domain, data.get("products", []))
    return domain.SearchResult(
        query=data.get("query", ""),
        total=int(data.get("total", len(products))),
        suppliers=tuple(
            domain.SupplierHit(
                name=hit["name"], total=int(hit.get("total", 0)), error=hit.get("error")
            )
            for hit in data.get("suppliers", [])
        ),
        products=products,
        search_time=data.get("searchTime"),
    )


def comparison_to_domain(data: dict) -> domain.ComparisonResult:
    products = _many(product_to_domain, data.get("products", []))
    price_range = data.get("priceRange") or {}
    return domain.ComparisonResult(
        product_name=data.get("productName", ""),
        total_products=int(data.get("totalProducts", len(products))),
        suppliers=tuple(
            domain.SupplierPriceStats(
                supplier=row["supplier"],
                supplier_key=row.get("supplierKey", ""),
                product_count=int(row.get("productCount", 0)),
                average_price=_pesos(row.get("averagePrice")),
                min_price=_optional_pesos(row.get("minPrice")),
                max_price=_optional_pesos(row.get("maxPrice")),
                error=row.get("error"),
            )
            for row in data.get("suppliers", [])
        ),
        products=products,
        price_range=domain.PriceRange(
            min=_optional_pesos(price_range.get("min")),
            max=_optional_pesos(price_range.get("max")),
            average=_optional_pesos(price_range.get("average")),
        ),
        compared_at=data.get("comparedAt"),
    )


def categories_to_domain(rows: Any) -> tuple[domain.ProductCategory, ...]:
    return _many(
        lambda row: domain.ProductCategory(
            id=str(row["id"]),
            name=row["name"],
            product_count=int(row.get("product_count", 0)),
            parent_id=row.get("parent_id"),
        ),
        rows,
    )


def stores_to_domain(rows: Any) -> tuple[domain.Store, ...]:
    """Stores arrive grouped per supplier: ``[{stores: [...]}, ...]``."""
    if not isinstance(rows, list):
        raise TypeError(f"Expected a list, got {type(rows).__name__}")
    flat = []
    for row in rows:
        flat.extend(row["stores"] if "stores" in row else [row])
    return _many(
        lambda row: domain.Store(
            id=str(row["id"]),
            name=row["name"],
            address=row.get("address", ""),
            city=row.get("city", ""),
            phone=row.get("phone", ""),
        ),
        flat,
    )


def company_config_to_domain(row: dict) -> domain.CompanyConfig:
    return domain.CompanyConfig(
        id=row.get("id"),
        name=row["name"],
        rut=row.get("rut", ""),
        address=row.get("address") or "",
        city=row.get("city") or "",
        region=row.get("region") or "",
        phone=row.get("phone") or "",
        email=row.get("email") or "",
        website=row.get("website") or "",
        business_type=row.get("business_type") or "",
        tax_regime=row.get("tax_regime") or "",
        iva_rate=Decimal(str(row.get("iva_rate", "19"))),
        currency=row.get("currency") or "CLP",
        invoice_prefix=row.get("invoice_prefix") or "FAC",
        quotation_prefix=row.get("quotation_prefix") or "COT",
        purchase_order_prefix=row.get("purchase_order_prefix") or "OC",
    )


def company_config_to_payload(config: domain.CompanyConfig) -> dict[str, Any]:
    return {
        "name": config.name,
        "rut": config.rut,
        "address": config.address,
        "city": config.city,
        "region": config.region,
        "phone": config.phone,
        "email": config.email,
        "website": config.website,
        "business_type": config.business_type,
        "tax_regime": config.tax_regime,
        "iva_rate": float(config.iva_rate),
        "currency": config.currency,
        "invoice_prefix": config.invoice_prefix,
        "quotation_prefix": config.quotation_prefix,
        "purchase_order_prefix": config.purchase_order_prefix,
    }


def settings_user_to_domain(row: dict) -> domain.SettingsUser:
    return domain.SettingsUser(
        id=row.get("id"),
        email=row["email"],
        name=row.get("name", ""),
        role=domain.Role(row.get("role", "user")),
        active=bool(row.get("active", True)),
    )


def settings_users_to_domain(rows: Any) -> tuple[domain.SettingsUser, ...]:
    return _many(settings_user_to_domain, rows)


def settings_user_to_payload(
    user: domain.SettingsUser, password: str | None = None
) -> dict[str, Any]:
    payload = {
        "email": user.email,
        "name": user.name,
        "role": user.role.value,
        "active": user.active,
    }
    if password:
        payload["password"] = password
    return payload


def integration_config_to_domain(data: dict) -> domain.IntegrationConfig:
    if not isinstance(data, dict):
        raise TypeError(f"Expected an object, got {type(data).__name__}")
    return domain.IntegrationConfig(
        sii=dict(data.get("sii") or {}),
        banks=dict(data.get("banks") or {}),
        suppliers=dict(data.get("suppliers") or {}),
    )


def system_stats_to_domain(data: dict) -> domain.SystemStats:
    users = data.get("users") or {}
    return domain.SystemStats(
        company_name=(data.get("company") or {}).get("name", ""),
        users_total=int(users.get("total", 0)),
        users_active=int(users.get("active", 0)),
        users_by_role={
            str(role): int(count) for role, count in (users.get("by_role") or {}).items()
        },
    )


def banks_to_domain(rows: Any) -> tuple[domain.Bank, ...]:
    return _many(
        lambda row: domain.Bank(
            key=row.get("key", ""),
            code=str(row.get("code", "")),
            name=row["name"],
            short_name=row.get("shortName", ""),
            services=tuple(row.get("services", [])),
            coverage=row.get("coverage", ""),
        ),
        rows,
    )


def bank_balance_to_domain(data: dict) -> domain.BankBalance:
    return domain.BankBalance(
        bank=data.get("bank", ""),
        account_number=str(data.get("accountNumber", "")),
        rut=data.get("rut", ""),
        balance=_pesos(data.get("balance")),
        available_balance=_pesos(data.get("availableBalance", data.get("balance"))),
        currency=data.get("currency") or "CLP",
        account_type=data.get("accountType") or "",
        last_update=data.get("lastUpdate"),
    )


def tax_status_to_domain(data: dict) -> domain.TaxStatus:
    """SII answers in Spanish field names."""
    return domain.TaxStatus(
        rut=data["rut"],
        status=data.get("estado", ""),
        last_declaration=parse_wire_date(data.get("ultimaDeclaracion")),
        next_declaration=parse_wire_date(data.get("proximaDeclaracion")),
        credit_balance=_pesos(data.get("saldoFavor")),
        debt_balance=_pesos(data.get("saldoDeuda")),
        remarks=tuple(str(item) for item in data.get("observaciones", [])),
    )


def rut_validation_to_domain(data: dict) -> domain.RutValidation:
    return domain.RutValidation(
        rut=data.get("rut", ""), valid=bool(data.get("valid")), message=data.get("message", "")
    )
