"""
DA dashboard exceptions.

Service-layer errors. Routers translate them to HTTP status codes.
"""


class DashboardError(Exception):
    """Base exception for DA dashboard errors."""
    pass


# =============================================================================
# Authentication
# =============================================================================

class AuthError(DashboardError):
    """Base exception for authentication errors."""
    pass


class MissingFieldsError(AuthError):
    """Raised when the identifier or secret is empty."""
    pass


class InvalidCredentialsError(AuthError):
    """
    Raised when no principal matches the submitted credentials.

    `reason` is for server-side logging only and must not reach the client.
    """

    UNKNOWN_IDENTIFIER = "unknown_identifier"
    WRONG_SECRET = "wrong_secret"

    def __init__(self, reason: str = WRONG_SECRET) -> None:
        self.reason = reason
        super().__init__("Invalid credentials")


class CredentialStoreError(AuthError):
    """Raised when the credential lookup fails in the data store."""
    pass


class TokenError(AuthError):
    """Raised when a bearer token cannot be turned into a principal."""
    pass


class TokenExpiredError(TokenError):
    """Raised when a bearer token has expired."""
    pass


class TokenInvalidError(TokenError):
    """Raised when a bearer token is malformed, unsigned or carries bad claims."""
    pass


# =============================================================================
# Access / Mutation
# =============================================================================

class AccessDeniedError(DashboardError):
    """Base exception for write attempts the principal is not allowed to make."""
    pass


class ReadOnlyAccessError(AccessDeniedError):
    """Raised when a read-only role attempts a write."""
    pass


class OutOfScopeError(AccessDeniedError):
    """Raised when a woreda principal targets a DA outside their scope."""
    pass


class DANotFoundError(DashboardError):
    """Raised when the target contact number does not exist."""
    pass


class UpdateValidationError(DashboardError):
    """Raised when an update body carries invalid values."""
    pass
