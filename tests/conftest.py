"""Shared pytest fixtures for erpcl tests."""

import threading
from datetime import date
from typing import Any, Optional

import pytest

from erpcl.api.base import ApiResponse, Backend, BinaryResponse
from erpcl.api.errors import TransportError
from erpcl.config import ClientConfig
from erpcl.domain.client import ClientService
from erpcl.domain.ledger import LedgerService
from erpcl.domain.notification import NotificationService
from erpcl.domain.purchase_order import PurchaseOrderService
from erpcl.domain.session import Session


class StubBackend(Backend):
    """In-memory backend answering from a route table.

    Routes map ``(method, path)`` to one of:
      - an ApiResponse, returned as is
      - an exception instance, raised
      - a callable ``(params, json) -> value``, whose result is handled the same way
      - anything else, returned as the ``data`` of a 200 response

    Unknown routes raise TransportError, like an unreachable server.
    """

    def __init__(self, routes: Optional[dict] = None, downloads: Optional[dict] = None):
        self.routes = dict(routes or {})
        self.downloads = dict(downloads or {})
        self.calls: list[tuple[str, str, Any, Any]] = []
        self._lock = threading.Lock()

    def route(self, method: str, path: str, value: Any) -> None:
        self.routes[(method, path)] = value

    def _resolve(self, table: dict, key: tuple, params: Any, json: Any) -> Any:
        if key not in table:
            raise TransportError(f"Connection refused: {key[0]} {key[1]}")
        value = table[key]
        if callable(value):
            value = value(params, json)
        if isinstance(value, Exception):
            raise value
        return value

    def request(self, method, path, params=None, json=None, timeout=None) -> ApiResponse:
        with self._lock:
            self.calls.append((method, path, params, json))
        value = self._resolve(self.routes, (method, path), params, json)
        if isinstance(value, ApiResponse):
            return value
        return ApiResponse(status_code=200, data=value)

    def download(self, path, params=None, timeout=None) -> BinaryResponse:
        with self._lock:
            self.calls.append(("GET", path, params, None))
        return self._resolve(self.downloads, ("GET", path), params, None)

    def calls_to(self, method: str, path: str) -> list[tuple[str, str, Any, Any]]:
        return [call for call in self.calls if call[0] == method and call[1] == path]


@pytest.fixture
def stub_backend():
    """Create an empty stub backend; every route is unreachable until added."""
    return StubBackend()


@pytest.fixture
def session():
    """Open a session with the stub identity and token."""
    with Session.open() as s:
        yield s


@pytest.fixture
def client_config():
    return ClientConfig(api_url="http://erp.test/api", token="t", timeout=1.0, poll_interval=0.05)


@pytest.fixture
def purchase_order_service(stub_backend):
    return PurchaseOrderService(stub_backend)


@pytest.fixture
def ledger_service(stub_backend):
    return LedgerService(stub_backend)


@pytest.fixture
def client_service(stub_backend):
    return ClientService(stub_backend)


@pytest.fixture
def notification_service(stub_backend, session):
    return NotificationService(stub_backend, session)


@pytest.fixture
def today():
    return date(2024, 1, 22)


@pytest.fixture
def order_rows():
    """Two purchase orders as the backend sends them."""
    return [
        {
            "id": 10,
            "order_number": "OC-000010-012024",
            "supplier_id": 1,
            "supplier_name": "Materiales Santiago S.A.",
            "date": "2024-01-15",
            "delivery_date": "2024-01-25",
            "items": [
                {"description": "Cemento", "quantity": 100, "unit_price": 5000, "total": 500000, "unit": "bolsas"}
            ],
            "subtotal": 500000,
            "tax": 95000,
            "total": 595000,
            "status": "pending",
            "notes": "",
        },
        {
            "id": 11,
            "order_number": "OC-000011-012024",
            "supplier_id": 2,
            "supplier_name": "Ferretería Central",
            "date": "2024-01-20",
            "delivery_date": "2024-01-30",
            "items": [
                {"description": "Taladro", "quantity": 2, "unit_price": 100000, "total": 200000}
            ],
            "subtotal": 200000,
            "tax": 38000,
            "total": 238000,
            "status": "delivered",
        },
    ]


@pytest.fixture
def client_rows():
    return [
        {
            "id": 1,
            "rut": "12.345.678-5",
            "name": "Constructora Andes",
            "email": "contacto@andes.cl",
            "type": "company",
            "status": "active",
            "created_at": "2024-01-05T10:00:00Z",
        },
        {
            "id": 2,
            "rut": "9.876.543-3",
            "name": "María González",
            "email": "maria@email.com",
            "type": "individual",
            "status": "potential",
            "created_at": "2023-12-10T10:00:00Z",
        },
        {
            "id": 3,
            "rut": "76.123.456-0",
            "name": "Inmobiliaria Sur",
            "email": "info@sur.cl",
            "type": "company",
            "status": "inactive",
            "created_at": "2023-06-01T10:00:00Z",
        },
    ]


@pytest.fixture
def invoice_rows():
    """Sales invoices; against ``today`` FAC-2 and FAC-4 are overdue."""
    return [
        {"id": 1, "invoice_number": "FAC-1", "total": 119000, "status": "paid", "date": "2024-01-02", "due_date": "2024-01-10"},
        {"id": 2, "invoice_number": "FAC-2", "total": 238000, "status": "sent", "date": "2024-01-05", "due_date": "2024-01-20"},
        {"id": 3, "invoice_number": "FAC-3", "total": 59500, "status": "pending", "date": "2024-01-15", "due_date": "2024-02-15"},
        {"id": 4, "invoice_number": "FAC-4", "total": 11900, "status": "draft", "date": "2024-01-01"},
        {"id": 5, "invoice_number": "FAC-5", "total": 50000, "status": "cancelled", "date": "2023-11-01", "due_date": "2023-12-01"},
    ]


@pytest.fixture
def purchase_invoice_rows():
    return [
        {"id": 1, "total": 100000, "status": "paid", "date": "2024-01-03"},
        {"id": 2, "total": 50000, "status": "pending", "date": "2024-01-04"},
        {"id": 3, "total": 30000, "status": "approved", "date": "2024-01-05"},
        {"id": 4, "total": 20000, "status": "draft", "date": "2024-01-06"},
    ]


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def cli_obj(stub_backend, session, client_config):
    """Context object that makes the CLI use the stub backend."""
    return {"backend": stub_backend, "session": session, "config": client_config}
