"""
Principal - the authenticated actor for a request.

A principal is rebuilt from the bearer token on every request and never
stored server-side.
"""

from dataclasses import dataclass
from enum import Enum


class PrincipalKind(str, Enum):
    """Role of an authenticated user."""

    ADMINISTRATOR = "administrator"
    VIEW_ONLY_ADMINISTRATOR = "view_only_administrator"
    REGIONAL_MANAGER = "regional_manager"
    WOREDA_MANAGER = "woreda_manager"
    WOREDA_REPRESENTATIVE = "woreda_representative"


@dataclass(frozen=True)
class Principal:
    """
    Authenticated actor.

    Attributes:
        kind: Exactly one role.
        identifier: Phone number, or the fixed admin identifier.
        region: Stored region name; set if and only if kind is REGIONAL_MANAGER.
    """

    kind: PrincipalKind
    identifier: str
    region: str | None = None

    def __post_init__(self) -> None:
        if not self.identifier:
            raise ValueError("Principal identifier must not be empty")
        if self.kind is PrincipalKind.REGIONAL_MANAGER and not self.region:
            raise ValueError("Regional manager principal requires a region")
        if self.kind is not PrincipalKind.REGIONAL_MANAGER and self.region is not None:
            raise ValueError(f"{self.kind.value} principal must not carry a region")

    @property
    def is_admin(self) -> bool:
        return self.kind is PrincipalKind.ADMINISTRATOR

    @property
    def is_view_only_admin(self) -> bool:
        return self.kind is PrincipalKind.VIEW_ONLY_ADMINISTRATOR

    @property
    def is_regional_manager(self) -> bool:
        return self.kind is PrincipalKind.REGIONAL_MANAGER

    @property
    def is_woreda_scoped(self) -> bool:
        return self.kind in (PrincipalKind.WOREDA_MANAGER, PrincipalKind.WOREDA_REPRESENTATIVE)

    @property
    def is_read_only(self) -> bool:
        return self.kind in (PrincipalKind.VIEW_ONLY_ADMINISTRATOR, PrincipalKind.REGIONAL_MANAGER)

    @property
    def sees_all_rows(self) -> bool:
        return self.kind in (PrincipalKind.ADMINISTRATOR, PrincipalKind.VIEW_ONLY_ADMINISTRATOR)
