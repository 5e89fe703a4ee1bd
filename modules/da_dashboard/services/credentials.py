"""
Credential Resolver.

Decides which kind of principal a submitted identifier/secret pair belongs
to. The checks run in a fixed order and the first match wins:

    1. Fixed administrator account (no database access)
    2. View-only administrator alias (no database access)
    3. Regional manager map with the shared fixed secret (no database access)
    4. Woreda lookup, by the configured credential scheme:
       - representative: woreda_reps by phone number, shared fixed secret
       - manager_table:  woreda_managers by phone number, per-manager password.
         If the woreda_managers table does not exist yet, the lookup falls
         back once to the representative scheme. Only the missing-table
         condition is handled this way.
"""

import logging
import secrets
from dataclasses import dataclass

from sqlalchemy import func, inspect, select
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from modules.da_dashboard.core.config import DashboardSettings, get_dashboard_settings
from modules.da_dashboard.models import WoredaManager, WoredaRep
from modules.da_dashboard.services.exceptions import (
    CredentialStoreError,
    InvalidCredentialsError,
    MissingFieldsError,
)
from modules.da_dashboard.services.principal import Principal, PrincipalKind

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE for undefined_table
UNDEFINED_TABLE_SQLSTATE = "42P01"


@dataclass(frozen=True)
class ResolvedLogin:
    """Successful credential resolution."""

    principal: Principal
    display_name: str


def _secret_matches(candidate: str, expected: str) -> bool:
    return secrets.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


def is_missing_table_error(exc: BaseException) -> bool:
    """True if a DBAPI error reports that the queried table does not exist."""
    orig = getattr(exc, "orig", None)
    if orig is None:
        return False
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate == UNDEFINED_TABLE_SQLSTATE:
        return True
    return "no such table" in str(orig).lower()


class CredentialResolver:
    """
    Resolves login credentials to a principal.

    Raises an AuthError subclass on every failure; no other exception
    escapes for string inputs.
    """

    def __init__(self, settings: DashboardSettings | None = None) -> None:
        self._settings = settings or get_dashboard_settings()

    def resolve_fixed(self, identifier: str, secret: str) -> ResolvedLogin | None:
        """
        Match the accounts that never touch the database.

        Returns:
            ResolvedLogin for the administrator, view-only administrator or a
            regional manager; None if the pair matches none of them.
        """
        settings = self._settings

        if (identifier == settings.admin_identifier
                and _secret_matches(secret, settings.admin_secret.get_secret_value())):
            return ResolvedLogin(
                principal=Principal(PrincipalKind.ADMINISTRATOR, identifier),
                display_name="Administrator",
            )

        if (identifier == settings.view_only_admin_identifier
                and _secret_matches(secret, settings.view_only_admin_secret.get_secret_value())):
            return ResolvedLogin(
                principal=Principal(PrincipalKind.VIEW_ONLY_ADMINISTRATOR, identifier),
                display_name="Administrator (view only)",
            )

        region = settings.regional_manager_accounts.get(identifier)
        if region is not None and _secret_matches(secret, settings.fixed_secret.get_secret_value()):
            return ResolvedLogin(
                principal=Principal(PrincipalKind.REGIONAL_MANAGER, identifier, region=region),
                display_name=f"{region} Regional Manager",
            )

        return None

    async def resolve(self, db: AsyncSession, identifier: str | None, secret: str | None) -> ResolvedLogin:
        """
        Resolve credentials to a principal.

        Raises:
            MissingFieldsError: identifier or secret is empty.
            InvalidCredentialsError: no account matches.
            CredentialStoreError: the data store failed.
        """
        identifier = (identifier or "").strip()
        secret = (secret or "").strip()
        if not identifier or not secret:
            raise MissingFieldsError("Phone number and password are required")

        fixed = self.resolve_fixed(identifier, secret)
        if fixed is not None:
            return fixed

        try:
            if self._settings.credential_scheme == "manager_table":
                return await self._resolve_woreda_manager(db, identifier, secret)
            return await self._resolve_woreda_representative(db, identifier, secret)
        except SQLAlchemyError as e:
            logger.exception("Credential lookup failed")
            raise CredentialStoreError("Credential lookup failed") from e

    async def _resolve_woreda_representative(
        self,
        db: AsyncSession,
        identifier: str,
        secret: str,
    ) -> ResolvedLogin:
        # The shared secret is checked before any database call.
        if not _secret_matches(secret, self._settings.fixed_secret.get_secret_value()):
            raise InvalidCredentialsError(InvalidCredentialsError.WRONG_SECRET)

        result = await db.execute(
            select(WoredaRep).where(WoredaRep.phone_number == identifier).limit(1)
        )
        rep = result.scalar_one_or_none()
        if rep is None:
            raise InvalidCredentialsError(InvalidCredentialsError.UNKNOWN_IDENTIFIER)

        return ResolvedLogin(
            principal=Principal(PrincipalKind.WOREDA_REPRESENTATIVE, rep.phone_number),
            display_name=rep.name or rep.phone_number,
        )

    async def _resolve_woreda_manager(
        self,
        db: AsyncSession,
        identifier: str,
        secret: str,
    ) -> ResolvedLogin:
        try:
            result = await db.execute(
                select(WoredaManager).where(WoredaManager.phone_number == identifier).limit(1)
            )
        except DBAPIError as e:
            if not is_missing_table_error(e):
                raise
            logger.warning(
                "woreda_managers table does not exist; "
                "using representative login until the credential table is provisioned"
            )
            await db.rollback()
            return await self._resolve_woreda_representative(db, identifier, secret)

        manager = result.scalar_one_or_none()
        if manager is None:
            raise InvalidCredentialsError(InvalidCredentialsError.UNKNOWN_IDENTIFIER)
        if not _secret_matches(secret, manager.password or ""):
            raise InvalidCredentialsError(InvalidCredentialsError.WRONG_SECRET)

        return ResolvedLogin(
            principal=Principal(PrincipalKind.WOREDA_MANAGER, manager.phone_number),
            display_name=manager.manager_name or manager.phone_number,
        )


async def check_credential_table(db: AsyncSession) -> dict:
    """
    Report whether the woreda_managers credential table is provisioned.

    Returns:
        dict with tableExists, recordCount and columns. Passwords are never
        included.
    """

    def _inspect(sync_session) -> tuple[bool, list[dict[str, str]]]:
        inspector = inspect(sync_session.connection())
        if not inspector.has_table(WoredaManager.__tablename__):
            return False, []
        columns = [
            {"name": column["name"], "type": str(column["type"])}
            for column in inspector.get_columns(WoredaManager.__tablename__)
        ]
        return True, columns

    exists, columns = await db.run_sync(_inspect)
    if not exists:
        return {
            "tableExists": False,
            "recordCount": 0,
            "columns": [],
            "message": "woreda_managers table does not exist; representative login is used.",
        }

    record_count = await db.scalar(select(func.count()).select_from(WoredaManager))
    record_count = int(record_count or 0)
    return {
        "tableExists": True,
        "recordCount": record_count,
        "columns": columns,
        "message": (
            f"Table exists with {record_count} records."
            if record_count
            else "Table exists but is empty. Run the password population job."
        ),
    }


def get_credential_resolver() -> CredentialResolver:
    """FastAPI dependency for the credential resolver."""
    return CredentialResolver()
