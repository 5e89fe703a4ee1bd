"""
DA User Schemas.

Pydantic models for the DA listing and update endpoints.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DAFilters(BaseModel):
    """Optional narrowing filters for the DA listing. Empty strings count as absent."""

    region: str | None = Field(None, description="Region name (ignored for regional managers)")
    zone: str | None = Field(None, description="Zone name")
    woreda: str | None = Field(None, description="Woreda name")
    kebele: str | None = Field(None, description="Kebele name")
    status: str | None = Field(None, description="Exact status value")
    search: str | None = Field(None, description="Name (case-insensitive) or contact number substring")

    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value


class DAUserResponse(BaseModel):
    """Projection of one DA row."""

    model_config = ConfigDict(from_attributes=True)

    name: str | None = None
    region: str | None = None
    zone: str | None = None
    woreda: str | None = None
    kebele: str | None = None
    contact_number: str
    reporting_manager_name: str | None = None
    reporting_manager_mobile: str | None = None
    language: str | None = None
    total_data_collected: int = 0
    status: str | None = None
    last_updated: datetime | None = None


class DAUserListResponse(BaseModel):
    """Response for the DA listing."""

    model_config = ConfigDict(populate_by_name=True)

    da_users: list[DAUserResponse] = Field(default_factory=list, serialization_alias="daUsers")
    can_write: bool = Field(..., serialization_alias="canWrite")
    is_read_only: bool = Field(..., serialization_alias="isReadOnly")


class DAUserUpdateRequest(BaseModel):
    """
    Request body for a DA update.

    Only status and total_data_collected may change. total_data_collected is
    accepted as any JSON scalar and coerced by the mutation guard.
    """

    contact_number: str | None = Field(None, description="Target DA contact number")
    status: str | None = Field(None, description="Active or Inactive")
    total_data_collected: Any = Field(None, description="New data collection count")

    def provided_fields(self) -> dict[str, Any]:
        """Fields explicitly present in the request body, excluding the key."""
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if name != "contact_number"
        }


class DAUserUpdateResponse(BaseModel):
    """Response for a DA update."""

    model_config = ConfigDict(populate_by_name=True)

    da_user: DAUserResponse = Field(..., serialization_alias="daUser")
