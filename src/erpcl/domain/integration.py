"""SII (tax service) and banking integration service.

RUTs are checked locally before any call, so a mistyped RUT never reaches
the backend.
"""

from dataclasses import replace

from erpcl.api import mappers
from erpcl.api.base import Backend
from erpcl.api.loader import LoadResult, load
from erpcl.domain import errors
from erpcl.domain.entities import Bank, BankBalance, RutValidation, TaxStatus
from erpcl.domain.errors import ValidationError
from erpcl.utils.rut import format_rut, is_valid_rut


def _checked_rut(rut: str) -> str:
    if not is_valid_rut(rut):
        raise ValidationError(errors.invalid_rut(rut))
    return format_rut(rut)


class IntegrationService:
    """Service for SII and bank lookups."""

    def __init__(self, backend: Backend):
        """Initialize integration service.

        Args:
            backend: Backend instance
        """
        self.backend = backend

    def banks(self) -> LoadResult[tuple[Bank, ...]]:
        return load(self.backend, "/banking/banks", mapper=mappers.banks_to_domain)

    def balance(self, bank_key: str, account_number: str, rut: str) -> BankBalance:
        """Query an account balance.

        Raises:
            ValidationError: If the bank or account is missing, or the RUT is invalid
            BackendError: If the backend rejects or never receives the query
        """
        if not bank_key or not account_number:
            raise ValidationError("Select a bank and enter the account number")
        rut = _checked_rut(rut)
        response = self.backend.post(
            "/banking/balance",
            json={"bankKey": bank_key, "accountNumber": account_number, "rut": rut},
        )
        return mappers.bank_balance_to_domain(response.data)

    def tax_status(self, rut: str) -> TaxStatus:
        """Taxpayer standing as reported by the SII.

        Raises:
            ValidationError: If the RUT is invalid
            BackendError: If the SII lookup fails
        """
        rut = _checked_rut(rut)
        response = self.backend.get(f"/sii/tax-status/{rut}")
        return mappers.tax_status_to_domain(response.data)

    def validate_rut(self, rut: str) -> RutValidation:
        """Validate a RUT locally, then against the SII registry.

        A RUT with a wrong check digit is rejected without a request.
        """
        if not is_valid_rut(rut):
            return RutValidation(rut=rut, valid=False, message=errors.invalid_rut(rut))
        formatted = format_rut(rut)
        response = self.backend.post("/sii/validate-rut", json={"rut": formatted})
        validation = mappers.rut_validation_to_domain(response.data)
        return validation if validation.rut else replace(validation, rut=formatted)
