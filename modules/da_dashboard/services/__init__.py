"""
DA Dashboard Module Services.
"""

from modules.da_dashboard.services.credentials import (
    CredentialResolver,
    ResolvedLogin,
    check_credential_table,
    get_credential_resolver,
)
from modules.da_dashboard.services.da_query import (
    build_da_query,
    da_sort_key,
    list_da_users,
    sort_da_records,
)
from modules.da_dashboard.services.exceptions import (
    AccessDeniedError,
    AuthError,
    CredentialStoreError,
    DANotFoundError,
    DashboardError,
    InvalidCredentialsError,
    MissingFieldsError,
    OutOfScopeError,
    ReadOnlyAccessError,
    TokenError,
    TokenExpiredError,
    TokenInvalidError,
    UpdateValidationError,
)
from modules.da_dashboard.services.mutation import (
    DAMutationService,
    UpdateDecision,
    authorize_update,
    coerce_data_count,
    get_mutation_service,
)
from modules.da_dashboard.services.principal import Principal, PrincipalKind
from modules.da_dashboard.services.scope import AccessScope, resolve_scope, scope_for
from modules.da_dashboard.services.stats import StatsService, get_stats_service
from modules.da_dashboard.services.token_codec import decode_token, encode_token

__all__ = [
    "AccessDeniedError",
    "AccessScope",
    "AuthError",
    "CredentialResolver",
    "CredentialStoreError",
    "DAMutationService",
    "DANotFoundError",
    "DashboardError",
    "InvalidCredentialsError",
    "MissingFieldsError",
    "OutOfScopeError",
    "Principal",
    "PrincipalKind",
    "ReadOnlyAccessError",
    "ResolvedLogin",
    "StatsService",
    "TokenError",
    "TokenExpiredError",
    "TokenInvalidError",
    "UpdateDecision",
    "UpdateValidationError",
    "authorize_update",
    "build_da_query",
    "check_credential_table",
    "coerce_data_count",
    "da_sort_key",
    "decode_token",
    "encode_token",
    "get_credential_resolver",
    "get_mutation_service",
    "get_stats_service",
    "list_da_users",
    "resolve_scope",
    "scope_for",
    "sort_da_records",
]
