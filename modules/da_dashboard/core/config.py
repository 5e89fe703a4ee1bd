"""
DA Dashboard Module Configuration.

Manages environment variables specific to the DA reporting dashboard.
Uses prefix DA_ to avoid conflicts with other modules.

The fixed administrator and regional-manager credentials are not secrets in
any meaningful sense; they gate which rows a user sees, nothing more.
"""

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


# Regional manager login identifiers mapped to the region name exactly as it
# is stored in da_users. Some regions are stored in Ge'ez script.
REGIONAL_MANAGER_ACCOUNTS: dict[str, str] = {
    "addisababa@123": "Addis Ababa",
    "afar@123": "Afar",
    "amhara@123": "Amhara",
    "benishangul@123": "Benishangul Gumuz",
    "centralethiopia@123": "Central Ethiopia",
    "diredawa@123": "Dire Dawa",
    "gambela@123": "Gambela",
    "harari@123": "Harari",
    "oromia@123": "Oromia",
    "sidama@123": "ሲዳማ",
    "somali@123": "Somali",
    "southethiopia@123": "ደቡብ ኢትዮጵያ",
    "southwest@123": "South West Ethiopia",
    "tigray@123": "Tigray",
}

CANONICAL_STATUSES: tuple[str, ...] = ("Active", "Inactive")
LEGACY_STATUS_PENDING = "Pending"

CredentialScheme = Literal["representative", "manager_table"]


class DashboardSettings(BaseSettings):
    """
    DA dashboard settings loaded from environment variables.

    All variables use the DA_ prefix for module isolation.
    Fixed credentials use SecretStr so they never appear in reprs or logs.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Fixed administrator account
    admin_identifier: Annotated[
        str,
        Field(default="Admin@123", validation_alias="DA_ADMIN_IDENTIFIER")
    ] = "Admin@123"
    admin_secret: Annotated[
        SecretStr,
        Field(default=SecretStr("Admin@123"), validation_alias="DA_ADMIN_SECRET")
    ] = SecretStr("Admin@123")

    # Read-only mirror of the administrator
    view_only_admin_identifier: Annotated[
        str,
        Field(default="Admin123", validation_alias="DA_VIEW_ONLY_ADMIN_IDENTIFIER")
    ] = "Admin123"
    view_only_admin_secret: Annotated[
        SecretStr,
        Field(default=SecretStr("Admin123"), validation_alias="DA_VIEW_ONLY_ADMIN_SECRET")
    ] = SecretStr("Admin123")

    # Shared secret for regional managers and (representative scheme) woreda reps
    fixed_secret: Annotated[
        SecretStr,
        Field(default=SecretStr("123"), validation_alias="DA_FIXED_SECRET")
    ] = SecretStr("123")

    credential_scheme: Annotated[
        CredentialScheme,
        Field(
            default="representative",
            description="How woreda logins are checked: 'representative' (woreda_reps + fixed secret) "
                        "or 'manager_table' (per-manager password in woreda_managers)",
            validation_alias="DA_CREDENTIAL_SCHEME",
        )
    ] = "representative"

    # Bearer token
    token_expire_minutes: Annotated[
        int,
        Field(default=480, gt=0, description="Bearer token lifetime in minutes", validation_alias="DA_TOKEN_EXPIRE_MINUTES")
    ] = 480

    # Legacy revisions
    allow_pending_status: Annotated[
        bool,
        Field(default=False, description="Accept 'Pending' as a status value", validation_alias="DA_ALLOW_PENDING_STATUS")
    ] = False
    require_active_for_data_edit: Annotated[
        bool,
        Field(default=False, description="Only Active DAs may have their data count edited", validation_alias="DA_REQUIRE_ACTIVE_FOR_DATA_EDIT")
    ] = False

    # Public statistics
    stats_zone_limit: Annotated[
        int,
        Field(default=10, gt=0, validation_alias="DA_STATS_ZONE_LIMIT")
    ] = 10
    stats_top_da_limit: Annotated[
        int,
        Field(default=5, gt=0, validation_alias="DA_STATS_TOP_DA_LIMIT")
    ] = 5
    stats_poll_interval_seconds: Annotated[
        int,
        Field(default=30, gt=0, validation_alias="DA_STATS_POLL_INTERVAL_SECONDS")
    ] = 30

    @property
    def regional_manager_accounts(self) -> dict[str, str]:
        return REGIONAL_MANAGER_ACCOUNTS

    @property
    def allowed_statuses(self) -> tuple[str, ...]:
        if self.allow_pending_status:
            return CANONICAL_STATUSES + (LEGACY_STATUS_PENDING,)
        return CANONICAL_STATUSES


@lru_cache
def get_dashboard_settings() -> DashboardSettings:
    """
    Get cached dashboard settings.

    Uses LRU cache to ensure settings are loaded only once.

    Returns:
        DashboardSettings: Dashboard settings instance.
    """
    return DashboardSettings()
