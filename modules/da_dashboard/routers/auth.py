"""
Authentication API Router.

Login issues a signed bearer token; /me echoes the token's principal.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from core.dependencies import DbSessionDep
from modules.da_dashboard.core.auth import AdminPrincipal, CurrentPrincipal
from modules.da_dashboard.schemas.auth import (
    CredentialTableStatus,
    LoginRequest,
    LoginResponse,
    MeResponse,
)
from modules.da_dashboard.services.credentials import (
    CredentialResolver,
    check_credential_table,
    get_credential_resolver,
)
from modules.da_dashboard.services.exceptions import (
    CredentialStoreError,
    InvalidCredentialsError,
    MissingFieldsError,
)
from modules.da_dashboard.services.token_codec import encode_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["DA Authentication"])

INTERNAL_ERROR = "Internal server error"


@router.post(
    "/login",
    response_model=LoginResponse,
    response_model_exclude_none=True,
    summary="Log in",
)
async def login(
    request: LoginRequest,
    db: DbSessionDep,
    resolver: Annotated[CredentialResolver, Depends(get_credential_resolver)],
) -> LoginResponse:
    """
    Resolve credentials to a principal and issue a bearer token.

    Raises:
        400: Identifier or secret missing
        401: Invalid credentials
        500: Credential store failure
    """
    try:
        resolved = await resolver.resolve(db, request.identifier, request.secret)
    except MissingFieldsError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except InvalidCredentialsError as e:
        logger.info(f"Login rejected: {e.reason}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except CredentialStoreError:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=INTERNAL_ERROR)

    principal = resolved.principal
    try:
        token, expires_in = encode_token(principal)
    except ValueError as e:
        logger.error(f"Cannot issue token: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=INTERNAL_ERROR)

    logger.info(f"Login succeeded for {principal.kind.value}")
    return LoginResponse(
        token=token,
        identifier=principal.identifier,
        display_name=resolved.display_name,
        is_admin=principal.is_admin,
        is_view_only_admin=True if principal.is_view_only_admin else None,
        is_regional_manager=True if principal.is_regional_manager else None,
        region=principal.region,
        expires_in=expires_in,
    )


@router.get("/me", response_model=MeResponse, summary="Current principal")
async def me(principal: CurrentPrincipal) -> MeResponse:
    """Return the claims of the bearer token's principal."""
    return MeResponse(
        identifier=principal.identifier,
        kind=principal.kind.value,
        is_admin=principal.is_admin,
        is_view_only_admin=principal.is_view_only_admin,
        is_regional_manager=principal.is_regional_manager,
        region=principal.region,
        can_write=not principal.is_read_only,
    )


@router.get(
    "/check-table",
    response_model=CredentialTableStatus,
    summary="Credential table diagnostic",
    description="Report whether the woreda_managers table exists and how many rows it holds.",
)
async def check_table(principal: AdminPrincipal, db: DbSessionDep) -> CredentialTableStatus:
    try:
        report = await check_credential_table(db)
    except SQLAlchemyError:
        logger.exception("Credential table check failed")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=INTERNAL_ERROR)
    return CredentialTableStatus.model_validate(report)
