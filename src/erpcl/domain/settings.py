"""Settings domain service: company data, users, integrations and stats."""

from dataclasses import replace
from typing import Any, Optional

from erpcl.api import fallbacks, mappers
from erpcl.api.base import Backend
from erpcl.api.loader import LoadResult, View, load
from erpcl.domain.entities import CompanyConfig, IntegrationConfig, SettingsUser, SystemStats
from erpcl.domain.errors import ValidationError
from erpcl.utils.rut import format_rut, is_valid_rut


class SettingsService:
    """Service for the settings screens.

    Company and integration settings are saved with full-replacement PUT.
    """

    def __init__(self, backend: Backend):
        """Initialize settings service.

        Args:
            backend: Backend instance
        """
        self.backend = backend
        self.users: View[tuple[SettingsUser, ...]] = View(())

    def company(self) -> LoadResult[CompanyConfig]:
        return load(
            self.backend,
            "/settings/company",
            fallback=fallbacks.COMPANY_CONFIG,
            mapper=mappers.company_config_to_domain,
        )

    def save_company(self, config: CompanyConfig) -> Any:
        """Replace the company settings.

        Raises:
            ValidationError: If the name or RUT is missing or invalid, or
                the IVA rate is outside 0-100
            BackendError: If the backend rejects or never receives the change
        """
        if not config.name.strip():
            raise ValidationError("Company name is required")
        if not is_valid_rut(config.rut):
            raise ValidationError(f"Invalid RUT '{config.rut}'")
        if not 0 <= config.iva_rate <= 100:
            raise ValidationError(f"IVA rate must be a percentage, got {config.iva_rate}")
        config = replace(config, rut=format_rut(config.rut))
        response = self.backend.put(
            "/settings/company", json=mappers.company_config_to_payload(config)
        )
        return response.data

    def load_users(self) -> LoadResult[tuple[SettingsUser, ...]]:
        return self.users.refresh(
            lambda: load(
                self.backend,
                "/settings/users",
                fallback=fallbacks.SETTINGS_USERS,
                mapper=mappers.settings_users_to_domain,
            )
        )

    def save_user(self, user: SettingsUser, password: Optional[str] = None) -> Any:
        """Create a user (POST) or update one with an ID (PUT), then reload.

        Raises:
            ValidationError: If the email is missing, or a new user has no password
        """
        if "@" not in user.email:
            raise ValidationError(f"Invalid email '{user.email}'")
        if user.id is None and not password:
            raise ValidationError("A password is required for new users")

        if user.id is None:
            response = self.backend.post(
                "/settings/users", json=mappers.settings_user_to_payload(user, password)
            )
        else:
            response = self.backend.put(
                f"/settings/users/{user.id}", json=mappers.settings_user_to_payload(user)
            )
        self.load_users()
        return response.data

    def delete_user(self, user_id: int) -> None:
        self.backend.delete(f"/settings/users/{user_id}")
        self.load_users()

    def integrations(self) -> LoadResult[IntegrationConfig]:
        return load(
            self.backend,
            "/settings/integrations",
            fallback=IntegrationConfig(),
            mapper=mappers.integration_config_to_domain,
        )

    def save_integrations(self, config: IntegrationConfig) -> Any:
        response = self.backend.put(
            "/settings/integrations",
            json={"sii": config.sii, "banks": config.banks, "suppliers": config.suppliers},
        )
        return response.data

    def stats(self) -> LoadResult[SystemStats]:
        """System statistics. There is no sample data for these."""
        return load(self.backend, "/settings/stats", mapper=mappers.system_stats_to_domain)
