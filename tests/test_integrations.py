"""Tests for the SII and banking integration service."""

import pytest

from erpcl.api.errors import ApiError
from erpcl.domain.errors import ValidationError
from erpcl.domain.integration import IntegrationService


@pytest.fixture
def integration_service(stub_backend):
    return IntegrationService(stub_backend)


class TestValidateRut:
    def test_bad_check_digit_is_rejected_locally(self, integration_service, stub_backend):
        result = integration_service.validate_rut("12.345.678-9")

        assert not result.valid
        assert "Invalid RUT" in result.message
        assert stub_backend.calls == []

    def test_valid_rut_is_checked_with_sii(self, integration_service, stub_backend):
        stub_backend.route("POST", "/sii/validate-rut", {"valid": True, "message": "RUT vigente"})

        result = integration_service.validate_rut("123456785")

        assert result.valid
        assert result.rut == "12.345.678-5"
        assert result.message == "RUT vigente"
        (call,) = stub_backend.calls
        assert call[3] == {"rut": "12.345.678-5"}

    def test_rut_with_k_digit(self, integration_service, stub_backend):
        stub_backend.route("POST", "/sii/validate-rut", {"rut": "10.000.013-K", "valid": True})
        assert integration_service.validate_rut("10000013-k").rut == "10.000.013-K"


class TestTaxStatus:
    def test_spanish_fields_are_mapped(self, integration_service, stub_backend):
        stub_backend.route(
            "GET",
            "/sii/tax-status/76.123.456-0",
            {
                "rut": "76.123.456-0",
                "estado": "Al día",
                "ultimaDeclaracion": "2024-01-12",
                "saldoFavor": 15000,
                "saldoDeuda": 0,
                "observaciones": ["Sin observaciones"],
            },
        )

        status = integration_service.tax_status("76123456-0")

        assert status.status == "Al día"
        assert status.last_declaration.isoformat() == "2024-01-12"
        assert status.credit_balance == 15000
        assert status.remarks == ("Sin observaciones",)

    def test_invalid_rut(self, integration_service, stub_backend):
        with pytest.raises(ValidationError):
            integration_service.tax_status("1-1")
        assert stub_backend.calls == []


class TestBanking:
    def test_balance_body(self, integration_service, stub_backend):
        stub_backend.route(
            "POST",
            "/banking/balance",
            {"bank": "Banco de Chile", "accountNumber": "001-2", "balance": 2500000, "availableBalance": 2300000},
        )

        balance = integration_service.balance("bancochile", "001-2", "12.345.678-5")

        assert balance.balance == 2500000
        assert balance.available_balance == 2300000
        (call,) = stub_backend.calls
        assert call[3] == {"bankKey": "bancochile", "accountNumber": "001-2", "rut": "12.345.678-5"}

    def test_balance_needs_bank_and_account(self, integration_service):
        with pytest.raises(ValidationError, match="Select a bank"):
            integration_service.balance("", "001-2", "12.345.678-5")

    def test_balance_error_propagates(self, integration_service, stub_backend):
        stub_backend.route("POST", "/banking/balance", ApiError("Cuenta no encontrada", 404))
        with pytest.raises(ApiError, match="Cuenta no encontrada"):
            integration_service.balance("bancochile", "001-2", "12.345.678-5")

    def test_banks_have_no_sample_data(self, integration_service, stub_backend):
        assert integration_service.banks().state.value == "failed"

        stub_backend.route(
            "GET",
            "/banking/banks",
            [{"key": "bancoestado", "code": "012", "name": "BancoEstado", "services": ["balance"]}],
        )
        (bank,) = integration_service.banks().data
        assert bank.services == ("balance",)
