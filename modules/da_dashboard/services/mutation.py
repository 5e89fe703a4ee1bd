"""
DA Mutation Guard.

Decides whether a principal may update a DA row and which values are
written. Only status and total_data_collected can change, and every
permitted update stamps last_updated.

total_data_collected is coerced rather than validated: non-numeric input
becomes 0. This matches what dashboard clients have always relied on and is
kept until product owners decide otherwise.
"""

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.database.base import utcnow
from modules.da_dashboard.core.config import DashboardSettings, get_dashboard_settings
from modules.da_dashboard.models import ACTIVE_STATUS, DAUser
from modules.da_dashboard.services.exceptions import (
    DANotFoundError,
    DashboardError,
    OutOfScopeError,
    ReadOnlyAccessError,
    UpdateValidationError,
)
from modules.da_dashboard.services.principal import Principal

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("status", "total_data_collected")

# Largest value the INTEGER column holds
MAX_DATA_COUNT = 2**31 - 1

READ_ONLY_REASON = "read-only access"
OUT_OF_SCOPE_REASON = "not your DA"


@dataclass(frozen=True)
class UpdateDecision:
    """
    Outcome of authorize_update().

    Attributes:
        allowed: Whether the update may be written.
        reason: Why it was denied.
        error: Exception class to raise for a denial.
        values: Column values to write when allowed, including last_updated.
    """

    allowed: bool
    reason: str | None = None
    error: type[DashboardError] | None = None
    values: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def deny(cls, reason: str, error: type[DashboardError]) -> "UpdateDecision":
        return cls(allowed=False, reason=reason, error=error)

    def raise_if_denied(self) -> None:
        if not self.allowed:
            raise (self.error or DashboardError)(self.reason)


def coerce_data_count(value: Any) -> int:
    """
    Coerce an incoming data count to a non-negative integer.

    Numbers and numeric strings are accepted; fractions round half up
    ("2.5" -> 3). Anything else, including empty strings and null, becomes
    0. Results are clamped to [0, MAX_DATA_COUNT].
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        number = Decimal(int(value))
    elif isinstance(value, int):
        number = Decimal(value)
    elif isinstance(value, float):
        number = Decimal(repr(value))
    elif isinstance(value, str):
        try:
            number = Decimal(value.strip() or 0)
        except InvalidOperation:
            return 0
    else:
        return 0

    if not number.is_finite() or number <= 0:
        return 0
    if number >= MAX_DATA_COUNT:
        return MAX_DATA_COUNT
    return int(number.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def authorize_update(
    principal: Principal,
    target: DAUser | None,
    fields: dict[str, Any],
    settings: DashboardSettings | None = None,
) -> UpdateDecision:
    """
    Decide whether `principal` may apply `fields` to `target`.

    Args:
        principal: The authenticated actor.
        target: The row being updated, or None if it is not visible to the
            principal (absent, or outside a woreda principal's scope).
        fields: Subset of {status, total_data_collected} present in the request.
        settings: Dashboard settings (status set, legacy toggles).

    Returns:
        UpdateDecision with the values to write when allowed.
    """
    settings = settings or get_dashboard_settings()

    if principal.is_read_only:
        return UpdateDecision.deny(READ_ONLY_REASON, ReadOnlyAccessError)

    if principal.is_woreda_scoped:
        if target is None or target.reporting_manager_mobile != principal.identifier:
            return UpdateDecision.deny(OUT_OF_SCOPE_REASON, OutOfScopeError)
    elif target is None:
        return UpdateDecision.deny("DA not found", DANotFoundError)

    updates = {name: value for name, value in fields.items() if name in UPDATABLE_FIELDS}
    if not updates:
        return UpdateDecision.deny("No fields to update", UpdateValidationError)

    values: dict[str, Any] = {}

    if "status" in updates:
        status = updates["status"]
        if status not in settings.allowed_statuses:
            allowed = " or ".join(settings.allowed_statuses)
            return UpdateDecision.deny(f"Status must be either {allowed}", UpdateValidationError)
        values["status"] = status

    if "total_data_collected" in updates:
        values["total_data_collected"] = coerce_data_count(updates["total_data_collected"])
        if "status" in values:
            resulting_active = values["status"] == ACTIVE_STATUS
        else:
            resulting_active = target.is_active
        if settings.require_active_for_data_edit and not resulting_active:
            return UpdateDecision.deny(
                "Data can only be edited for Active DAs", UpdateValidationError
            )

    values["last_updated"] = utcnow()
    return UpdateDecision(allowed=True, values=values)


class DAMutationService:
    """Applies authorized updates to DA rows."""

    def __init__(self, settings: DashboardSettings | None = None) -> None:
        self._settings = settings or get_dashboard_settings()

    async def update(
        self,
        db: AsyncSession,
        principal: Principal,
        contact_number: str | None,
        fields: dict[str, Any],
    ) -> DAUser:
        """
        Update one DA row by contact number.

        Raises:
            ReadOnlyAccessError: Principal has a read-only role.
            UpdateValidationError: Missing contact number or invalid values.
            OutOfScopeError: Woreda principal targeting another manager's DA.
            DANotFoundError: Administrator targeting an unknown contact number.
        """
        if principal.is_read_only:
            raise ReadOnlyAccessError(READ_ONLY_REASON)

        contact_number = (contact_number or "").strip()
        if not contact_number:
            raise UpdateValidationError("Contact number is required")

        stmt = select(DAUser).where(DAUser.contact_number == contact_number)
        if principal.is_woreda_scoped:
            stmt = stmt.where(DAUser.reporting_manager_mobile == principal.identifier)

        result = await db.execute(stmt)
        target = result.scalar_one_or_none()

        decision = authorize_update(principal, target, fields, self._settings)
        if not decision.allowed:
            logger.info(
                f"Update of DA {contact_number} denied for {principal.kind.value}: {decision.reason}"
            )
        decision.raise_if_denied()

        for name, value in decision.values.items():
            setattr(target, name, value)

        await db.commit()
        await db.refresh(target)

        logger.info(
            f"DA {contact_number} updated by {principal.kind.value}: "
            f"{sorted(name for name in decision.values if name != 'last_updated')}"
        )
        return target


def get_mutation_service() -> DAMutationService:
    """FastAPI dependency for the mutation service."""
    return DAMutationService()
