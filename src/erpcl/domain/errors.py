"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed client-side validation."""


class NotFoundError(DomainError):
    """Requested record does not exist in the loaded data."""


class TransitionError(DomainError):
    """Status change not allowed from the record's current status."""


def ledger_unbalanced(total_debit: int, total_credit: int) -> str:
    """Return message for a ledger entry whose sides differ."""
    return (
        f"Entry is not balanced: debit {total_debit} != credit {total_credit} "
        f"(difference {total_debit - total_credit})"
    )


def line_out_of_range(index: int, count: int) -> str:
    """Return message for a line index outside the form."""
    return f"Line {index} does not exist (form has {count} line{'s' if count != 1 else ''})"


def unknown_line_field(field_name: str) -> str:
    return f"Unknown line field '{field_name}'"


def order_not_found(order_id: int) -> str:
    return f"Purchase order {order_id} not found"


def client_not_found(client_id: int) -> str:
    return f"Client {client_id} not found"


def invalid_transition(current: str, target: str) -> str:
    """Return message for a forbidden status transition."""
    return f"Cannot move order from '{current}' to '{target}'"


def invalid_rut(rut: str) -> str:
    return f"Invalid RUT '{rut}'"
