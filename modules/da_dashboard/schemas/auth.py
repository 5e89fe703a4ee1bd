"""
Authentication Schemas.

Login accepts both the current field names (identifier/secret) and the ones
older dashboard clients still send (phoneNumber/password).
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    """Login request payload."""

    identifier: str | None = Field(
        "",
        validation_alias=AliasChoices("identifier", "phoneNumber"),
        description="Phone number, or a fixed admin / regional manager identifier",
    )
    secret: str | None = Field(
        "",
        validation_alias=AliasChoices("secret", "password"),
    )


class LoginResponse(BaseModel):
    """Login success response. Optional flags are omitted when unset."""

    model_config = ConfigDict(populate_by_name=True)

    token: str
    identifier: str
    display_name: str = Field(..., serialization_alias="displayName")
    is_admin: bool = Field(..., serialization_alias="isAdmin")
    is_view_only_admin: bool | None = Field(None, serialization_alias="isViewOnlyAdmin")
    is_regional_manager: bool | None = Field(None, serialization_alias="isRegionalManager")
    region: str | None = None
    expires_in: int = Field(..., serialization_alias="expiresIn")


class MeResponse(BaseModel):
    """Claims of the current principal."""

    model_config = ConfigDict(populate_by_name=True)

    identifier: str
    kind: str
    is_admin: bool = Field(..., serialization_alias="isAdmin")
    is_view_only_admin: bool = Field(..., serialization_alias="isViewOnlyAdmin")
    is_regional_manager: bool = Field(..., serialization_alias="isRegionalManager")
    region: str | None = None
    can_write: bool = Field(..., serialization_alias="canWrite")


class CredentialColumn(BaseModel):
    name: str
    type: str


class CredentialTableStatus(BaseModel):
    """Diagnostic report on the woreda_managers credential table."""

    model_config = ConfigDict(populate_by_name=True)

    table_exists: bool = Field(..., validation_alias="tableExists", serialization_alias="tableExists")
    record_count: int = Field(0, validation_alias="recordCount", serialization_alias="recordCount")
    columns: list[CredentialColumn] = Field(default_factory=list)
    message: str = ""
