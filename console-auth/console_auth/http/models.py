"""
API Models
==========
Request and response payloads exchanged with the console backend.
"""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UserRecord(BaseModel):
    """User record as returned by the backend and cached in the session."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Optional[Union[int, str]] = None
    username: Optional[str] = None
    email: Optional[str] = None
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    role: Optional[str] = None

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)


class LoginResponse(UserRecord):
    """Login result: the user record plus its bearer token."""
    token: str

    @field_validator("role")
    @classmethod
    def strip_role_prefix(cls, value: Optional[str]) -> Optional[str]:
        # ROLE_ADMIN -> ADMIN
        if value and "_" in value:
            return value.split("_", 1)[1]
        return value


class VerifyResult(BaseModel):
    """Password-reset OTP verification result."""
    verified: bool = False


class ProfileUpdate(BaseModel):
    """Partial profile update; unset fields are left untouched server-side."""
    model_config = ConfigDict(populate_by_name=True)

    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    username: Optional[str] = None
    email: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.to_payload()

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
