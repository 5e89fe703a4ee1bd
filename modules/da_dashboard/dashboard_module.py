"""
DA Dashboard Module Entry Point.

Implements IAppModule interface for integration with the framework.
Serves role-scoped reporting over Development Agent records.
"""

import logging
from typing import Any, Optional, TYPE_CHECKING

from fastapi import APIRouter

from core.interface import IAppModule
from modules.da_dashboard.core.config import get_dashboard_settings
from modules.da_dashboard.routers import auth_router, da_users_router, stats_router

if TYPE_CHECKING:
    from core.app_context import AppContext

logger = logging.getLogger(__name__)


class DADashboardModule(IAppModule):
    """
    DA Reporting Dashboard module.

    Features:
        - Login for administrators, regional managers and woreda managers
        - Scoped DA listing and status / data count updates
        - Public aggregate statistics and per-principal KPIs

    Routes are mounted at /api/da/*.
    """

    def __init__(self) -> None:
        self._context: Optional["AppContext"] = None
        self._api_router: Optional[APIRouter] = None
        self._settings = get_dashboard_settings()

    def get_module_name(self) -> str:
        """Return module identifier."""
        return "da_dashboard"

    def on_entry(self, context: "AppContext") -> None:
        """
        Initialize the dashboard module.

        Args:
            context: Application context from the main framework.
        """
        self._context = context
        logger.info("DA dashboard module initializing...")

        self._api_router = APIRouter(prefix="/da")
        self._api_router.include_router(auth_router)
        self._api_router.include_router(da_users_router)
        self._api_router.include_router(stats_router)

        if not context.config.is_token_signing_configured():
            logger.error("JWT_SECRET_KEY is not set; logins will fail until it is configured")

        context.log_event(
            f"DA dashboard loaded (credential scheme: {self._settings.credential_scheme})",
            "DA_DASHBOARD",
        )
        logger.info("DA dashboard module initialized")

    def get_api_router(self) -> Optional[APIRouter]:
        """
        Return the API router for this module.

        Returns:
            APIRouter with dashboard endpoints at /api/da/*
        """
        return self._api_router

    def get_status(self) -> dict[str, Any]:
        """Return current module status for monitoring."""
        status = "active"
        details = {
            "Credential Scheme": self._settings.credential_scheme,
            "Token Lifetime": f"{self._settings.token_expire_minutes} min",
            "Statuses": ", ".join(self._settings.allowed_statuses),
        }
        if self._context is not None and not self._context.config.is_token_signing_configured():
            status = "warning"
            details["Token Signing"] = "JWT_SECRET_KEY missing"
        return {"status": status, "details": details}

    def on_shutdown(self) -> None:
        """Cleanup when module is shutting down."""
        logger.info("DA dashboard module shutting down")


# Module factory function for dynamic loading
def create_module() -> DADashboardModule:
    """Factory function for module instantiation."""
    return DADashboardModule()
