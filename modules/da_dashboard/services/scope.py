"""
Access Scope Calculator.

Turns a principal into the set of DA rows it may see and whether it may
write to them:

    Administrator            all rows, writable
    View-only administrator  all rows, read-only
    Regional manager         rows in their region, read-only
    Woreda manager / rep     rows they report for, writable within that set

Stored region names are not normalised, so a regional manager's region is
first resolved against the distinct values actually stored, ignoring case
and surrounding whitespace.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy import ColumnElement, Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from modules.da_dashboard.models import DAUser
from modules.da_dashboard.services.principal import Principal, PrincipalKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessScope:
    """
    Row visibility and write permission for one principal.

    Attributes:
        row_filter: WHERE clause limiting visible rows, or None for all rows.
        can_write: Whether updates are permitted (only within row_filter).
        is_read_only: Inverse of can_write, kept for response payloads.
        region_locked: The scope already pins the region; a region query
            filter must not be applied on top of it.
    """

    row_filter: ColumnElement[bool] | None
    can_write: bool
    is_read_only: bool
    region_locked: bool = False


def normalized_region(column_or_value):
    """lower(trim(x)) as a SQL expression."""
    return func.lower(func.trim(column_or_value))


def region_lookup_query(region: str) -> Select:
    """Distinct stored region values equal to `region` ignoring case and whitespace."""
    return (
        select(DAUser.region)
        .where(normalized_region(DAUser.region) == normalized_region(region))
        .distinct()
    )


async def resolve_region(db: AsyncSession, region: str) -> list[str]:
    """
    Find the stored spellings of a region.

    Returns:
        Every distinct stored value matching `region` case-insensitively
        after trimming; empty if the region has no rows yet.
    """
    result = await db.execute(region_lookup_query(region))
    variants = [value for value in result.scalars().all() if value is not None]
    if variants:
        logger.debug(f"Region '{region}' resolved to stored values {variants}")
    else:
        logger.debug(f"Region '{region}' has no stored match; using case-insensitive comparison")
    return variants


def region_filter(region: str, stored_variants: Sequence[str] = ()) -> ColumnElement[bool]:
    """Predicate selecting rows in `region`."""
    if stored_variants:
        return DAUser.region.in_(list(stored_variants))
    return normalized_region(DAUser.region) == normalized_region(region)


def scope_for(
    principal: Principal,
    *,
    global_view: bool = False,
    stored_region_variants: Sequence[str] = (),
) -> AccessScope:
    """
    Compute the access scope of a principal.

    Args:
        principal: The authenticated actor.
        global_view: Administrator request to see all rows. Ignored for
            every other kind.
        stored_region_variants: Result of resolve_region() for a regional
            manager's region.
    """
    kind = principal.kind

    if kind is PrincipalKind.ADMINISTRATOR:
        # Administrators already see every row; global_view changes nothing.
        return AccessScope(row_filter=None, can_write=True, is_read_only=False)

    if kind is PrincipalKind.VIEW_ONLY_ADMINISTRATOR:
        return AccessScope(row_filter=None, can_write=False, is_read_only=True)

    if global_view:
        logger.info(f"Ignoring global view request from {kind.value}")

    if kind is PrincipalKind.REGIONAL_MANAGER:
        return AccessScope(
            row_filter=region_filter(principal.region, stored_region_variants),
            can_write=False,
            is_read_only=True,
            region_locked=True,
        )

    return AccessScope(
        row_filter=DAUser.reporting_manager_mobile == principal.identifier,
        can_write=True,
        is_read_only=False,
    )


async def resolve_scope(
    db: AsyncSession,
    principal: Principal,
    *,
    global_view: bool = False,
) -> AccessScope:
    """scope_for() with the regional manager's region resolved from storage."""
    variants: list[str] = []
    if principal.is_regional_manager:
        variants = await resolve_region(db, principal.region)
    return scope_for(principal, global_view=global_view, stored_region_variants=variants)
