"""
Statistics API Router.

The public feed needs no token; KPIs are scoped to the caller.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from core.dependencies import DbSessionDep
from modules.da_dashboard.core.auth import CurrentPrincipal
from modules.da_dashboard.schemas.stats import KPIResponse, PublicStatsResponse
from modules.da_dashboard.services.stats import StatsService, get_stats_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["DA Statistics"])

INTERNAL_ERROR = "Internal server error"


@router.get(
    "/public-stats",
    response_model=PublicStatsResponse,
    summary="Public aggregate statistics",
    description="Unauthenticated totals and breakdowns. Clients poll at pollIntervalSeconds.",
)
async def get_public_stats(
    db: DbSessionDep,
    stats_service: Annotated[StatsService, Depends(get_stats_service)],
) -> PublicStatsResponse:
    try:
        return await stats_service.public_stats(db)
    except SQLAlchemyError:
        logger.exception("Error fetching public stats")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=INTERNAL_ERROR)


@router.get("/kpis", response_model=KPIResponse, summary="KPI totals for the caller")
async def get_kpis(
    principal: CurrentPrincipal,
    db: DbSessionDep,
    stats_service: Annotated[StatsService, Depends(get_stats_service)],
) -> KPIResponse:
    try:
        return await stats_service.kpis(db, principal)
    except SQLAlchemyError:
        logger.exception("Error fetching KPIs")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=INTERNAL_ERROR)
