"""Presentation tables for enum-valued fields.

Each table maps every member of its enum to a label, a color name and an
icon name. ``_require_complete`` runs at import time, so adding an enum
member without a style fails immediately instead of falling through to a
default at display time.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, TypeVar

from erpcl.domain.entities import (
    ClientStatus,
    ClientType,
    InvoiceStatus,
    NotificationPriority,
    NotificationType,
    OrderStatus,
    Role,
)

E = TypeVar("E", bound=Enum)


@dataclass(frozen=True)
class StatusStyle:
    label: str
    color: str
    icon: str = ""


def _require_complete(enum_type: type[E], table: Mapping[E, StatusStyle]) -> Mapping[E, StatusStyle]:
    missing = set(enum_type) - set(table)
    if missing:
        names = ", ".join(sorted(member.value for member in missing))
        raise RuntimeError(f"No style for {enum_type.__name__}: {names}")
    return table


ORDER_STATUS_STYLES = _require_complete(
    OrderStatus,
    {
        OrderStatus.PENDING: StatusStyle("Pendiente", "warning", "inventory"),
        OrderStatus.APPROVED: StatusStyle("Aprobada", "info", "check-circle"),
        OrderStatus.ORDERED: StatusStyle("Ordenada", "primary", "shopping-cart"),
        OrderStatus.DELIVERED: StatusStyle("Entregada", "success", "local-shipping"),
        OrderStatus.CANCELLED: StatusStyle("Cancelada", "error", "cancel"),
    },
)

CLIENT_STATUS_STYLES = _require_complete(
    ClientStatus,
    {
        ClientStatus.ACTIVE: StatusStyle("Activo", "success"),
        ClientStatus.POTENTIAL: StatusStyle("Potencial", "warning"),
        ClientStatus.INACTIVE: StatusStyle("Inactivo", "error"),
    },
)

CLIENT_TYPE_STYLES = _require_complete(
    ClientType,
    {
        ClientType.INDIVIDUAL: StatusStyle("Persona", "default", "person"),
        ClientType.COMPANY: StatusStyle("Empresa", "default", "business"),
    },
)

INVOICE_STATUS_STYLES = _require_complete(
    InvoiceStatus,
    {
        InvoiceStatus.DRAFT: StatusStyle("Borrador", "default"),
        InvoiceStatus.SENT: StatusStyle("Enviada", "info"),
        InvoiceStatus.PENDING: StatusStyle("Pendiente", "warning"),
        InvoiceStatus.APPROVED: StatusStyle("Aprobada", "primary"),
        InvoiceStatus.PAID: StatusStyle("Pagada", "success"),
        InvoiceStatus.CANCELLED: StatusStyle("Anulada", "error"),
    },
)

NOTIFICATION_TYPE_STYLES = _require_complete(
    NotificationType,
    {
        NotificationType.INFO: StatusStyle("Información", "info", "info"),
        NotificationType.WARNING: StatusStyle("Advertencia", "warning", "warning"),
        NotificationType.ERROR: StatusStyle("Error", "error", "error"),
        NotificationType.SUCCESS: StatusStyle("Éxito", "success", "check-circle"),
        NotificationType.APPROVAL: StatusStyle("Aprobación", "primary", "check-circle"),
        NotificationType.DEADLINE: StatusStyle("Vencimiento", "warning", "schedule"),
    },
)

NOTIFICATION_PRIORITY_STYLES = _require_complete(
    NotificationPriority,
    {
        NotificationPriority.LOW: StatusStyle("Baja", "default"),
        NotificationPriority.MEDIUM: StatusStyle("Media", "info"),
        NotificationPriority.HIGH: StatusStyle("Alta", "warning"),
        NotificationPriority.URGENT: StatusStyle("Urgente", "error"),
    },
)

ROLE_STYLES = _require_complete(
    Role,
    {
        Role.ADMIN: StatusStyle("Administrador", "error"),
        Role.ACCOUNTANT: StatusStyle("Contador", "warning"),
        Role.USER: StatusStyle("Usuario", "primary"),
    },
)

_TABLES: dict[type, Mapping] = {
    OrderStatus: ORDER_STATUS_STYLES,
    ClientStatus: CLIENT_STATUS_STYLES,
    ClientType: CLIENT_TYPE_STYLES,
    InvoiceStatus: INVOICE_STATUS_STYLES,
    NotificationType: NOTIFICATION_TYPE_STYLES,
    NotificationPriority: NOTIFICATION_PRIORITY_STYLES,
    Role: ROLE_STYLES,
}


def style_for(member: Enum) -> StatusStyle:
    """Return the style of any enum member that has a table."""
    return _TABLES[type(member)][member]


def label_for(member: Enum) -> str:
    return style_for(member).label
