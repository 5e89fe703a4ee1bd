"""
Bearer Token Codec.

Encodes a principal's claims into a signed JWT (HS256) with an expiry and
decodes it back on every request. The claim names match what dashboard
clients already read from the login response (isAdmin, isRegionalManager,
region).
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from core.app_context import ConfigLoader
from modules.da_dashboard.core.config import DashboardSettings, get_dashboard_settings
from modules.da_dashboard.services.exceptions import TokenExpiredError, TokenInvalidError
from modules.da_dashboard.services.principal import Principal, PrincipalKind

TOKEN_TYPE = "da_access"


def _get_jwt_config() -> tuple[str, str]:
    """Get JWT signing configuration from environment."""
    loader = ConfigLoader()
    loader.load()
    return (
        loader.get("security.jwt_secret_key", ""),
        loader.get("security.jwt_algorithm", "HS256"),
    )


def principal_claims(principal: Principal) -> dict[str, Any]:
    """Claims describing a principal, without registered JWT claims."""
    claims: dict[str, Any] = {
        "sub": principal.identifier,
        "kind": principal.kind.value,
        "isAdmin": principal.is_admin,
        "isViewOnlyAdmin": principal.is_view_only_admin,
        "isRegionalManager": principal.is_regional_manager,
    }
    if principal.region is not None:
        claims["region"] = principal.region
    return claims


def encode_token(
    principal: Principal,
    settings: DashboardSettings | None = None,
) -> tuple[str, int]:
    """
    Create a signed bearer token for a principal.

    Returns:
        Tuple of (token, expires_in_seconds)

    Raises:
        ValueError: If JWT_SECRET_KEY is not configured.
    """
    settings = settings or get_dashboard_settings()
    secret, algorithm = _get_jwt_config()
    if not secret:
        raise ValueError("JWT_SECRET_KEY not configured")

    now = datetime.now(timezone.utc)
    expires_delta = timedelta(minutes=settings.token_expire_minutes)

    payload = principal_claims(principal)
    payload.update({
        "type": TOKEN_TYPE,
        "iat": now,
        "exp": now + expires_delta,
    })

    token = jwt.encode(payload, secret, algorithm=algorithm)
    return token, int(expires_delta.total_seconds())


def decode_token(token: str) -> Principal:
    """
    Verify a bearer token and rebuild the principal it was issued for.

    Raises:
        TokenExpiredError: If the token has expired.
        TokenInvalidError: If the signature, type or claims are invalid.
    """
    secret, algorithm = _get_jwt_config()
    if not secret:
        raise TokenInvalidError("Token signing is not configured")

    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise TokenExpiredError("Token has expired") from e
    except jwt.InvalidTokenError as e:
        raise TokenInvalidError(f"Invalid token: {e}") from e

    if payload.get("type") != TOKEN_TYPE:
        raise TokenInvalidError("Invalid token type")

    try:
        kind = PrincipalKind(payload.get("kind"))
        return Principal(
            kind=kind,
            identifier=str(payload["sub"]),
            region=payload.get("region"),
        )
    except (KeyError, ValueError) as e:
        raise TokenInvalidError(f"Invalid token claims: {e}") from e
