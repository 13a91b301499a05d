"""Pydantic models describing the Microsoft Graph payloads we rely on."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GraphBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class GraphUser(GraphBaseModel):
    id: str
    display_name: str | None = Field(default=None, alias="displayName")
    user_principal_name: str | None = Field(default=None, alias="userPrincipalName")
    business_phones: list[str] = Field(default_factory=list, alias="businessPhones")

    @field_validator("business_phones", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return [] if value is None else value

    @property
    def telephone_number(self) -> str | None:
        """The primary business phone, which mirrors the on-premises ``telephoneNumber``."""

        return self.business_phones[0] if self.business_phones else None


class GraphUserPage(GraphBaseModel):
    value: list[GraphUser]
    next_link: str | None = Field(default=None, alias="@odata.nextLink")


class GraphErrorDetail(GraphBaseModel):
    code: str
    message: str = ""


class GraphErrorResponse(GraphBaseModel):
    error: GraphErrorDetail


class TokenResponse(GraphBaseModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int | None = None


class TokenErrorResponse(GraphBaseModel):
    error: str
    error_description: str = ""
