"""
User Pydantic Schemas

Schemas:
- RegisterRequest: registration ruleset (confirmPassword is transport-only)
- LoginRequest: e-mail / password login
- ProfileUpdate: name and e-mail changes for the current user
- PasswordChange: change password with the current one
- UserResponse: public view of a user (never exposes the password hash)

Credential schemas switch off whitespace stripping: a password is compared
exactly as typed.
"""

from datetime import datetime
from typing import Annotated

from pydantic import ConfigDict, Field, StringConstraints, ValidationInfo, field_validator

from library_api.schemas.common import CamelModel, LowercaseEmail, PartialUpdateModel

DisplayName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=50)]
NewPassword = Annotated[str, Field(min_length=6, max_length=128)]


def _passwords_match(confirmation: str, info: ValidationInfo, against: str) -> str:
    # The other password failed its own rules; that error is enough
    if against in info.data and info.data[against] != confirmation:
        raise ValueError("Passwords do not match")
    return confirmation


class CredentialModel(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=False)


class RegisterRequest(CredentialModel):
    """
    Ruleset for registration.

    Example:
        {
            "name": "Jane Doe",
            "email": "jane@example.com",
            "password": "secret123",
            "confirmPassword": "secret123"
        }
    """

    name: DisplayName
    email: LowercaseEmail
    password: NewPassword
    confirm_password: str

    @field_validator("confirm_password")
    @classmethod
    def confirm_password_matches(cls, v: str, info: ValidationInfo) -> str:
        return _passwords_match(v, info, against="password")


class LoginRequest(CredentialModel):
    email: LowercaseEmail
    password: Annotated[str, Field(min_length=1)]


class ProfileUpdate(PartialUpdateModel):
    """Ruleset for PUT /auth/me. Omitted fields are left unchanged."""

    name: DisplayName | None = None
    email: LowercaseEmail | None = None


class PasswordChange(CredentialModel):
    current_password: Annotated[str, Field(min_length=1)]
    new_password: NewPassword
    confirm_new_password: str

    @field_validator("confirm_new_password")
    @classmethod
    def confirm_new_password_matches(cls, v: str, info: ValidationInfo) -> str:
        return _passwords_match(v, info, against="new_password")


class UserResponse(CamelModel):
    """
    Public view of a user.

    SECURITY: Never includes the password hash or the Google id.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    avatar_url: str | None = Field(default=None, alias="avatar")
    role: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
