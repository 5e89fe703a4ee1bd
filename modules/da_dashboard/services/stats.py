"""
Aggregate Stats Builder.

Read-only aggregates over the whole da_users table for the public dashboard,
plus scoped totals (KPIs) for a signed-in principal.

Every query is exposed as a statement builder so it can be inspected or run
against any engine; StatsService executes them and normalises the numbers
(PostgreSQL returns NUMERIC aggregates as Decimal) to int/float.
"""

import logging
from typing import Any

from sqlalchemy import ColumnElement, Select, case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from modules.da_dashboard.core.config import DashboardSettings, get_dashboard_settings
from modules.da_dashboard.models import DAUser
from modules.da_dashboard.schemas.stats import (
    KPIResponse,
    PublicStatsResponse,
    RegionStat,
    StatusTrendItem,
    SummaryStats,
    TopDA,
    ZoneStat,
)
from modules.da_dashboard.services.principal import Principal
from modules.da_dashboard.services.scope import resolve_scope

logger = logging.getLogger(__name__)


def _as_int(value: Any) -> int:
    return int(value or 0)


def _as_float(value: Any) -> float:
    return float(value or 0)


def _data_sum():
    return func.coalesce(func.sum(DAUser.total_data_collected), 0)


def _status_count(status: str):
    return func.count(case((func.lower(DAUser.status) == status, 1)))


# =============================================================================
# Statement builders
# =============================================================================

def summary_query() -> Select:
    """Grand totals. Rows with empty region or zone are included."""
    return select(
        func.count().label("total_das"),
        _data_sum().label("total_data"),
        func.count(func.distinct(DAUser.reporting_manager_mobile)).label("total_reps"),
        _status_count("active").label("active_das"),
        _status_count("inactive").label("inactive_das"),
        _status_count("pending").label("pending_das"),
        func.avg(DAUser.total_data_collected).label("avg_data_per_da"),
    ).select_from(DAUser)


def _breakdown_query(column) -> Select:
    total_data = _data_sum().label("total_data")
    return (
        select(
            column.label("name"),
            func.count().label("da_count"),
            total_data,
        )
        .where(column.is_not(None), func.trim(column) != "")
        .group_by(column)
        .order_by(total_data.desc(), column)
    )


def region_breakdown_query() -> Select:
    """Every non-empty region by total data, highest first."""
    return _breakdown_query(DAUser.region)


def zone_breakdown_query(limit: int = 10) -> Select:
    """Top non-empty zones by total data."""
    return _breakdown_query(DAUser.zone).limit(limit)


def status_trend_query() -> Select:
    """Count and total data per stored status value."""
    return (
        select(
            DAUser.status,
            func.count().label("da_count"),
            _data_sum().label("total_data"),
        )
        .group_by(DAUser.status)
        .order_by(func.coalesce(DAUser.status, ""))
    )


def top_das_query(limit: int = 5) -> Select:
    """Leading DAs with a positive data count."""
    return (
        select(DAUser)
        .where(DAUser.total_data_collected > 0)
        .order_by(DAUser.total_data_collected.desc(), DAUser.contact_number)
        .limit(limit)
    )


def totals_query(row_filter: ColumnElement[bool] | None = None) -> Select:
    """DA count and total data, optionally restricted to a scope."""
    stmt = select(func.count().label("da_count"), _data_sum().label("total_data")).select_from(DAUser)
    if row_filter is not None:
        stmt = stmt.where(row_filter)
    return stmt


# =============================================================================
# Row mapping
# =============================================================================

def summary_from_row(row) -> SummaryStats:
    return SummaryStats(
        total_das=_as_int(row.total_das),
        total_data=_as_int(row.total_data),
        total_reps=_as_int(row.total_reps),
        active_das=_as_int(row.active_das),
        inactive_das=_as_int(row.inactive_das),
        pending_das=_as_int(row.pending_das),
        avg_data_per_da=_as_float(row.avg_data_per_da),
    )


def region_stats_from_rows(rows) -> list[RegionStat]:
    return [
        RegionStat(region=row.name.strip(), da_count=_as_int(row.da_count), total_data=_as_int(row.total_data))
        for row in rows
    ]


def zone_stats_from_rows(rows) -> list[ZoneStat]:
    return [
        ZoneStat(zone=row.name.strip(), da_count=_as_int(row.da_count), total_data=_as_int(row.total_data))
        for row in rows
    ]


def status_trend_from_rows(rows) -> list[StatusTrendItem]:
    return [
        StatusTrendItem(status=row.status, count=_as_int(row.da_count), total_data=_as_int(row.total_data))
        for row in rows
    ]


class StatsService:
    """Runs the aggregate queries."""

    def __init__(self, settings: DashboardSettings | None = None) -> None:
        self._settings = settings or get_dashboard_settings()

    async def public_stats(self, db: AsyncSession) -> PublicStatsResponse:
        """
        Build the public statistics feed.

        No authentication or scoping; every figure is over the whole table.
        """
        settings = self._settings

        summary = (await db.execute(summary_query())).one()
        regions = (await db.execute(region_breakdown_query())).all()
        zones = (await db.execute(zone_breakdown_query(settings.stats_zone_limit))).all()
        trend = (await db.execute(status_trend_query())).all()
        top = (await db.execute(top_das_query(settings.stats_top_da_limit))).scalars().all()

        response = PublicStatsResponse(
            stats=summary_from_row(summary),
            region_data=region_stats_from_rows(regions),
            zone_data=zone_stats_from_rows(zones),
            status_trend=status_trend_from_rows(trend),
            top_das=[TopDA.model_validate(da) for da in top],
            poll_interval_seconds=settings.stats_poll_interval_seconds,
        )
        logger.debug(
            f"Public stats: {response.stats.total_das} DAs across "
            f"{len(response.region_data)} region(s)"
        )
        return response

    async def kpis(self, db: AsyncSession, principal: Principal) -> KPIResponse:
        """Totals for the principal's visible rows and for the whole table."""
        scope = await resolve_scope(db, principal)

        global_row = (await db.execute(totals_query())).one()
        if scope.row_filter is None:
            scoped_row = global_row
        else:
            scoped_row = (await db.execute(totals_query(scope.row_filter))).one()

        return KPIResponse(
            rep_total_das=_as_int(scoped_row.da_count),
            rep_total_data=_as_int(scoped_row.total_data),
            global_total_das=_as_int(global_row.da_count),
            global_total_data=_as_int(global_row.total_data),
        )


def get_stats_service() -> StatsService:
    """FastAPI dependency for the stats service."""
    return StatsService()
