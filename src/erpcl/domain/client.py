"""Client (customer) domain service."""

from dataclasses import replace
from typing import Any, Optional

from erpcl.api import fallbacks, mappers
from erpcl.api.base import Backend
from erpcl.api.loader import LoadResult, View, load
from erpcl.domain import errors, filters
from erpcl.domain.entities import Client, ClientStatus, ClientType
from erpcl.domain.errors import NotFoundError, ValidationError
from erpcl.utils.rut import format_rut, is_valid_rut

LIST_LIMIT = 100


class ClientService:
    """Service for managing clients."""

    def __init__(self, backend: Backend):
        """Initialize client service.

        Args:
            backend: Backend instance
        """
        self.backend = backend
        self.clients: View[tuple[Client, ...]] = View(())

    def load_clients(self) -> LoadResult[tuple[Client, ...]]:
        return self.clients.refresh(
            lambda: load(
                self.backend,
                "/clients",
                fallback=fallbacks.CLIENTS,
                params={"limit": LIST_LIMIT},
                mapper=mappers.clients_to_domain,
            )
        )

    def list_clients(
        self,
        search: Optional[str] = None,
        status: Optional[ClientStatus] = None,
        client_type: Optional[ClientType] = None,
    ) -> tuple[Client, ...]:
        """Filter the loaded clients.

        Args:
            search: Substring of the name, RUT or email
            status: Only clients with this status
            client_type: Only individuals or only companies

        Returns:
            Matching clients
        """
        return filters.apply(
            self.clients.data,
            lambda client: filters.matches_search(search, client.name, client.rut, client.email)
            and filters.matches_value(status, client.status)
            and filters.matches_value(client_type, client.type),
        )

    def get_client(self, client_id: int) -> Client:
        for client in self.clients.data:
            if client.id == client_id:
                return client
        raise NotFoundError(errors.client_not_found(client_id))

    @staticmethod
    def prepare(client: Client) -> Client:
        """Check required fields and normalize the RUT.

        Raises:
            ValidationError: If the name is missing or the RUT is invalid
        """
        if not client.name.strip():
            raise ValidationError("Client name is required")
        if not is_valid_rut(client.rut):
            raise ValidationError(errors.invalid_rut(client.rut))
        return replace(client, name=client.name.strip(), rut=format_rut(client.rut))

    def save(self, client: Client) -> Any:
        """Create a client, or replace it when it has an ID, then reload.

        Returns:
            The ``data`` of the backend response

        Raises:
            ValidationError: If the client is incomplete
            BackendError: If the backend rejects or never receives the client
        """
        client = self.prepare(client)
        payload = mappers.client_to_payload(client)
        if client.id is None:
            response = self.backend.post("/clients", json=payload)
        else:
            response = self.backend.put(f"/clients/{client.id}", json=payload)
        self.load_clients()
        return response.data

    def delete(self, client_id: int) -> None:
        self.backend.delete(f"/clients/{client_id}")
        self.load_clients()

    def activate(self, client_id: int) -> None:
        """Turn a potential client into an active one.

        Raises:
            ValidationError: If the loaded client is already active
        """
        for client in self.clients.data:
            if client.id == client_id and client.status == ClientStatus.ACTIVE:
                raise ValidationError(f"Client {client_id} is already active")
        self.backend.patch(f"/clients/{client_id}/activate")
        self.load_clients()
