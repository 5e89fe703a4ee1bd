"""
Bearer authentication dependencies.

Every authenticated request carries `Authorization: Bearer <token>`; the
principal is rebuilt from the token claims with no database access.
"""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from modules.da_dashboard.services.exceptions import TokenExpiredError, TokenInvalidError
from modules.da_dashboard.services.principal import Principal
from modules.da_dashboard.services.token_codec import decode_token

logger = logging.getLogger(__name__)

# auto_error=False so a missing header yields our 401 body instead of FastAPI's 403
security = HTTPBearer(auto_error=False)

UNAUTHORIZED = "Unauthorized"


def _unauthorized(detail: str = UNAUTHORIZED) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> Principal:
    """
    FastAPI dependency: validate the bearer token and return the principal.

    Raises:
        HTTPException 401: Missing, malformed, forged or expired token.
    """
    if credentials is None or not credentials.credentials:
        raise _unauthorized()

    try:
        return decode_token(credentials.credentials)
    except TokenExpiredError as e:
        logger.info(f"Rejected expired token: {e}")
        raise _unauthorized("Token has expired")
    except TokenInvalidError as e:
        logger.warning(f"Rejected invalid token: {e}")
        raise _unauthorized()


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]


async def require_admin(principal: CurrentPrincipal) -> Principal:
    """FastAPI dependency: allow only the full administrator."""
    if not principal.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator access required",
        )
    return principal


AdminPrincipal = Annotated[Principal, Depends(require_admin)]
