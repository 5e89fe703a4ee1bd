"""
DA Dashboard Module Schemas.

Pydantic models for request/response validation.
"""

from modules.da_dashboard.schemas.auth import (
    CredentialColumn,
    CredentialTableStatus,
    LoginRequest,
    LoginResponse,
    MeResponse,
)
from modules.da_dashboard.schemas.da_user import (
    DAFilters,
    DAUserListResponse,
    DAUserResponse,
    DAUserUpdateRequest,
    DAUserUpdateResponse,
)
from modules.da_dashboard.schemas.stats import (
    KPIResponse,
    PublicStatsResponse,
    RegionStat,
    StatusTrendItem,
    SummaryStats,
    TopDA,
    ZoneStat,
)

__all__ = [
    "CredentialColumn",
    "CredentialTableStatus",
    "DAFilters",
    "DAUserListResponse",
    "DAUserResponse",
    "DAUserUpdateRequest",
    "DAUserUpdateResponse",
    "KPIResponse",
    "LoginRequest",
    "LoginResponse",
    "MeResponse",
    "PublicStatsResponse",
    "RegionStat",
    "StatusTrendItem",
    "SummaryStats",
    "TopDA",
    "ZoneStat",
]
