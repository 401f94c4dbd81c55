"""Tests for the settings service."""

from dataclasses import replace
from decimal import Decimal

import pytest

from erpcl.api import fallbacks
from erpcl.domain.entities import IntegrationConfig, Role, SettingsUser
from erpcl.domain.errors import ValidationError
from erpcl.domain.settings import SettingsService


@pytest.fixture
def settings_service(stub_backend):
    return SettingsService(stub_backend)


class TestCompany:
    def test_live_company(self, settings_service, stub_backend):
        stub_backend.route(
            "GET", "/settings/company", {"id": 1, "name": "Patolin", "rut": "12.345.678-5", "iva_rate": 19}
        )

        config = settings_service.company().data

        assert config.name == "Patolin"
        assert config.iva_rate == Decimal("19")
        assert config.purchase_order_prefix == "OC"

    def test_sample_company(self, settings_service):
        result = settings_service.company()
        assert result.is_sample
        assert result.data == fallbacks.COMPANY_CONFIG

    def test_save_company_is_full_replacement(self, settings_service, stub_backend):
        stub_backend.route("PUT", "/settings/company", {"id": 1})
        config = replace(fallbacks.COMPANY_CONFIG, rut="123456785")

        settings_service.save_company(config)

        (call,) = stub_backend.calls_to("PUT", "/settings/company")
        assert call[3]["rut"] == "12.345.678-5"
        assert call[3]["iva_rate"] == 19.0
        assert call[3]["website"] == "www.patolin.cl"

    @pytest.mark.parametrize(
        "changes, message",
        [
            ({"name": ""}, "Company name is required"),
            ({"rut": "12.345.678-9"}, "Invalid RUT"),
            ({"iva_rate": Decimal("119")}, "IVA rate"),
        ],
    )
    def test_invalid_company_is_not_sent(self, settings_service, stub_backend, changes, message):
        with pytest.raises(ValidationError, match=message):
            settings_service.save_company(replace(fallbacks.COMPANY_CONFIG, **changes))
        assert stub_backend.calls == []


class TestUsers:
    """Tests for user management."""

    def test_sample_users(self, settings_service):
        assert settings_service.load_users().data == fallbacks.SETTINGS_USERS

    def test_new_user_needs_password(self, settings_service):
        user = SettingsUser(None, "nuevo@patolin.cl", "Nuevo", Role.USER)
        with pytest.raises(ValidationError, match="password is required"):
            settings_service.save_user(user)

    def test_new_user_is_posted_with_password(self, settings_service, stub_backend):
        stub_backend.route("POST", "/settings/users", {"id": 4})
        stub_backend.route("GET", "/settings/users", [])
        user = SettingsUser(None, "nuevo@patolin.cl", "Nuevo", Role.ACCOUNTANT)

        settings_service.save_user(user, password="secreto")

        (call,) = stub_backend.calls_to("POST", "/settings/users")
        assert call[3] == {
            "email": "nuevo@patolin.cl",
            "name": "Nuevo",
            "role": "accountant",
            "active": True,
            "password": "secreto",
        }

    def test_update_does_not_send_password(self, settings_service, stub_backend):
        stub_backend.route("PUT", "/settings/users/2", {"id": 2})
        stub_backend.route("GET", "/settings/users", [])
        user = SettingsUser(2, "contador@patolin.cl", "Contador", Role.ACCOUNTANT, active=False)

        settings_service.save_user(user, password="ignored")

        (call,) = stub_backend.calls_to("PUT", "/settings/users/2")
        assert "password" not in call[3]
        assert call[3]["active"] is False

    def test_invalid_email(self, settings_service):
        with pytest.raises(ValidationError, match="Invalid email"):
            settings_service.save_user(SettingsUser(1, "admin", "Admin", Role.ADMIN))

    def test_delete_user_reloads(self, settings_service, stub_backend):
        stub_backend.route("DELETE", "/settings/users/3", None)
        stub_backend.route("GET", "/settings/users", [{"id": 1, "email": "a@b.cl", "role": "admin"}])

        settings_service.delete_user(3)

        assert [u.id for u in settings_service.users.data] == [1]


class TestIntegrationsAndStats:
    def test_integrations_default_to_empty(self, settings_service):
        result = settings_service.integrations()
        assert result.is_sample
        assert result.data == IntegrationConfig()

    def test_save_integrations(self, settings_service, stub_backend):
        stub_backend.route("PUT", "/settings/integrations", None)

        settings_service.save_integrations(IntegrationConfig(sii={"enabled": True}))

        (call,) = stub_backend.calls_to("PUT", "/settings/integrations")
        assert call[3] == {"sii": {"enabled": True}, "banks": {}, "suppliers": {}}

    def test_stats(self, settings_service, stub_backend):
        stub_backend.route(
            "GET",
            "/settings/stats",
            {
                "company": {"name": "Patolin"},
                "users": {"total": 3, "active": 2, "by_role": {"admin": 1, "user": 2}},
            },
        )

        stats = settings_service.stats().data

        assert stats.company_name == "Patolin"
        assert stats.users_active == 2
        assert stats.users_by_role == {"admin": 1, "user": 2}

    def test_stats_have_no_sample_data(self, settings_service):
        assert settings_service.stats().state.value == "failed"
