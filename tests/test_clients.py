"""Tests for the client service."""

import pytest

from erpcl.api import fallbacks
from erpcl.api.errors import ApiError
from erpcl.domain.client import LIST_LIMIT
from erpcl.domain.entities import Client, ClientStatus, ClientType
from erpcl.domain.errors import NotFoundError, ValidationError


def _new_client(**overrides) -> Client:
    values = dict(
        id=None,
        rut="76123456-0",
        name=" Inmobiliaria Norte ",
        email="contacto@norte.cl",
        phone="+56 9 1111 2222",
        address="Av. Norte 1",
        city="Antofagasta",
        region="Región de Antofagasta",
        type=ClientType.COMPANY,
        status=ClientStatus.POTENTIAL,
    )
    values.update(overrides)
    return Client(**values)


@pytest.fixture
def loaded_clients(client_service, stub_backend, client_rows):
    stub_backend.route("GET", "/clients", client_rows)
    client_service.load_clients()
    return client_service


class TestLoading:
    def test_list_is_limited(self, loaded_clients, stub_backend):
        (call,) = stub_backend.calls_to("GET", "/clients")
        assert call[2] == {"limit": LIST_LIMIT}
        assert len(loaded_clients.clients.data) == 3

    def test_sample_clients_when_unreachable(self, client_service):
        result = client_service.load_clients()
        assert result.is_sample
        assert result.data == fallbacks.CLIENTS

    def test_filters(self, loaded_clients):
        assert [c.id for c in loaded_clients.list_clients(search="andes")] == [1]
        assert [c.id for c in loaded_clients.list_clients(search="76.123")] == [3]
        assert [c.id for c in loaded_clients.list_clients(search="MARIA@")] == [2]
        assert [
            c.id for c in loaded_clients.list_clients(status=ClientStatus.INACTIVE)
        ] == [3]
        assert [
            c.id for c in loaded_clients.list_clients(client_type=ClientType.INDIVIDUAL)
        ] == [2]
        assert [
            c.id
            for c in loaded_clients.list_clients(
                status=ClientStatus.ACTIVE, client_type=ClientType.COMPANY
            )
        ] == [1]

    def test_get_client(self, loaded_clients):
        assert loaded_clients.get_client(2).name == "María González"
        with pytest.raises(NotFoundError, match="Client 9 not found"):
            loaded_clients.get_client(9)


class TestSave:
    """Tests for creating and updating clients."""

    def test_prepare_formats_rut_and_trims_name(self, client_service):
        client = client_service.prepare(_new_client())
        assert client.rut == "76.123.456-0"
        assert client.name == "Inmobiliaria Norte"

    def test_invalid_rut_is_rejected(self, client_service, stub_backend):
        with pytest.raises(ValidationError, match="Invalid RUT '76.123.456-1'"):
            client_service.save(_new_client(rut="76.123.456-1"))
        assert stub_backend.calls == []

    def test_name_is_required(self, client_service):
        with pytest.raises(ValidationError, match="name is required"):
            client_service.save(_new_client(name="  "))

    def test_new_client_is_posted(self, client_service, stub_backend):
        stub_backend.route("POST", "/clients", {"id": 4})
        stub_backend.route("GET", "/clients", [])

        assert client_service.save(_new_client()) == {"id": 4}

        (call,) = stub_backend.calls_to("POST", "/clients")
        payload = call[3]
        assert payload["rut"] == "76.123.456-0"
        assert payload["phone"] == "+56911112222"
        assert payload["type"] == "company"
        assert payload["status"] == "potential"
        assert "id" not in payload

    def test_existing_client_is_put(self, client_service, stub_backend):
        stub_backend.route("PUT", "/clients/3", {"id": 3})
        stub_backend.route("GET", "/clients", [])

        client_service.save(_new_client(id=3))

        assert stub_backend.calls_to("PUT", "/clients/3")

    def test_delete(self, loaded_clients, stub_backend):
        stub_backend.route("DELETE", "/clients/3", None)

        loaded_clients.delete(3)

        assert stub_backend.calls_to("DELETE", "/clients/3")
        assert len(stub_backend.calls_to("GET", "/clients")) == 2


class TestActivate:
    def test_potential_client_is_activated(self, loaded_clients, stub_backend):
        stub_backend.route("PATCH", "/clients/2/activate", {"id": 2, "status": "active"})

        loaded_clients.activate(2)

        assert stub_backend.calls_to("PATCH", "/clients/2/activate")

    def test_active_client_is_rejected(self, loaded_clients, stub_backend):
        with pytest.raises(ValidationError, match="already active"):
            loaded_clients.activate(1)
        assert stub_backend.calls_to("PATCH", "/clients/1/activate") == []

    def test_backend_rejection_propagates(self, loaded_clients, stub_backend):
        stub_backend.route("PATCH", "/clients/3/activate", ApiError("Not Found", 404))
        with pytest.raises(ApiError):
            loaded_clients.activate(3)
