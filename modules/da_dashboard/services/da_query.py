"""
DA Query Builder.

Builds the parameterized listing query for a scope and a set of optional
filters, and owns the canonical DA ordering:

    1. Active rows before all others
    2. Active rows by total_data_collected, highest first
    3. Every row then by trimmed name, case-insensitive

The ordering is a product rule, so it is also exposed as a plain Python sort
key for re-sorting an in-memory list after an edit.
"""

import logging
from collections.abc import Iterable, Sequence
from typing import Any, TypeVar

from sqlalchemy import Select, case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from modules.da_dashboard.models import ACTIVE_STATUS, DAUser
from modules.da_dashboard.schemas.da_user import DAFilters
from modules.da_dashboard.services.principal import Principal
from modules.da_dashboard.services.scope import AccessScope, resolve_scope

logger = logging.getLogger(__name__)

T = TypeVar("T")


def da_ordering() -> tuple:
    """ORDER BY clauses implementing the canonical DA ordering."""
    is_active = DAUser.status == ACTIVE_STATUS
    return (
        case((is_active, 0), else_=1),
        case((is_active, DAUser.total_data_collected), else_=0).desc(),
        func.lower(func.trim(func.coalesce(DAUser.name, ""))),
    )


def _field(record: Any, name: str) -> Any:
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def da_sort_key(record: Any) -> tuple[int, int, str]:
    """
    Sort key implementing the canonical DA ordering.

    Works on DAUser rows, response models and plain dicts.
    """
    active = _field(record, "status") == ACTIVE_STATUS
    data = _field(record, "total_data_collected") or 0
    name = (_field(record, "name") or "").strip().casefold()
    return (0 if active else 1, -int(data) if active else 0, name)


def sort_da_records(records: Iterable[T]) -> list[T]:
    """Return records in canonical DA order."""
    return sorted(records, key=da_sort_key)


def build_da_query(scope: AccessScope, filters: DAFilters | None = None) -> Select:
    """
    Build the DA listing query.

    The scope's row filter is applied first, then each present filter is
    ANDed on. A region filter is skipped when the scope is region-locked.
    Every value is bound as a parameter.

    Args:
        scope: Access scope of the requesting principal.
        filters: Optional narrowing filters.

    Returns:
        Select over DAUser in canonical order.
    """
    filters = filters or DAFilters()
    stmt = select(DAUser)

    if scope.row_filter is not None:
        stmt = stmt.where(scope.row_filter)

    if filters.region and not scope.region_locked:
        stmt = stmt.where(DAUser.region == filters.region)
    if filters.zone:
        stmt = stmt.where(DAUser.zone == filters.zone)
    if filters.woreda:
        stmt = stmt.where(DAUser.woreda == filters.woreda)
    if filters.kebele:
        stmt = stmt.where(DAUser.kebele == filters.kebele)
    if filters.status:
        stmt = stmt.where(DAUser.status == filters.status)
    if filters.search:
        stmt = stmt.where(
            or_(
                func.lower(DAUser.name).contains(filters.search.lower(), autoescape=True),
                DAUser.contact_number.contains(filters.search, autoescape=True),
            )
        )

    return stmt.order_by(*da_ordering())


async def list_da_users(
    db: AsyncSession,
    principal: Principal,
    filters: DAFilters | None = None,
    *,
    global_view: bool = False,
) -> tuple[Sequence[DAUser], AccessScope]:
    """
    Fetch the DA rows visible to a principal.

    Returns:
        Tuple of (rows in canonical order, the scope that was applied)
    """
    scope = await resolve_scope(db, principal, global_view=global_view)
    result = await db.execute(build_da_query(scope, filters))
    rows = result.scalars().all()
    logger.info(f"Listed {len(rows)} DA row(s) for {principal.kind.value}")
    return rows, scope
