"""
DA Users API Router.

Scoped listing and field updates of Development Agent rows.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError

from core.dependencies import DbSessionDep
from modules.da_dashboard.core.auth import CurrentPrincipal
from modules.da_dashboard.schemas.da_user import (
    DAFilters,
    DAUserListResponse,
    DAUserResponse,
    DAUserUpdateRequest,
    DAUserUpdateResponse,
)
from modules.da_dashboard.services.da_query import list_da_users
from modules.da_dashboard.services.exceptions import (
    AccessDeniedError,
    DANotFoundError,
    UpdateValidationError,
)
from modules.da_dashboard.services.mutation import DAMutationService, get_mutation_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/da-users", tags=["DA Users"])

INTERNAL_ERROR = "Internal server error"


@router.get("", response_model=DAUserListResponse, summary="List DAs visible to the caller")
async def get_da_users(
    principal: CurrentPrincipal,
    db: DbSessionDep,
    region: Annotated[str | None, Query()] = None,
    zone: Annotated[str | None, Query()] = None,
    woreda: Annotated[str | None, Query()] = None,
    kebele: Annotated[str | None, Query()] = None,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
    search: Annotated[str | None, Query()] = None,
    global_view: Annotated[bool, Query(alias="global")] = False,
) -> DAUserListResponse:
    """
    List DA rows within the caller's scope, in canonical order.

    `global=true` is honoured for administrators only.
    """
    filters = DAFilters(
        region=region,
        zone=zone,
        woreda=woreda,
        kebele=kebele,
        status=status_filter,
        search=search,
    )
    try:
        rows, scope = await list_da_users(db, principal, filters, global_view=global_view)
    except SQLAlchemyError:
        logger.exception("Error fetching DA users")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=INTERNAL_ERROR)

    return DAUserListResponse(
        da_users=[DAUserResponse.model_validate(row) for row in rows],
        can_write=scope.can_write,
        is_read_only=scope.is_read_only,
    )


@router.patch("", response_model=DAUserUpdateResponse, summary="Update a DA's status or data count")
async def update_da_user(
    request: DAUserUpdateRequest,
    principal: CurrentPrincipal,
    db: DbSessionDep,
    mutation_service: Annotated[DAMutationService, Depends(get_mutation_service)],
) -> DAUserUpdateResponse:
    """
    Update one DA row by contact number.

    Raises:
        400: Missing contact number, no updatable field, or invalid status
        403: Read-only role, or the DA belongs to another woreda manager
        404: Unknown contact number (administrator)
    """
    try:
        da_user = await mutation_service.update(
            db,
            principal,
            request.contact_number,
            request.provided_fields(),
        )
    except AccessDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=f"Forbidden: {e}")
    except DANotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except UpdateValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Error updating DA user")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=INTERNAL_ERROR)

    return DAUserUpdateResponse(da_user=DAUserResponse.model_validate(da_user))
