"""User schemas for API request/response validation."""
from datetime import datetime
from typing import Optional

from fastapi_users import schemas
from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator


class UserRead(schemas.BaseUser[int]):
    """Schema for reading user data."""
    id: int
    username: str
    email: str
    is_active: bool
    is_superuser: bool
    is_verified: bool
    created_at: Optional[datetime] = None


class UserCreate(schemas.BaseUserCreate):
    """Schema for creating a new user."""
    username: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Strip surrounding whitespace and reject blank usernames."""
        if not v or not v.strip():
            raise ValueError("Username cannot be empty")
        return v.strip()


class UserUpdate(schemas.BaseUserUpdate):
    """Schema for updating user data."""
    password: Optional[str] = None
    email: Optional[EmailStr] = None


class UserSummary(BaseModel):
    """Public view of a user embedded in listings."""
    id: int
    username: str

    class Config:
        from_attributes = True


class TempPasswordRequest(BaseModel):
    """Schema for requesting a temporary password."""
    email: EmailStr


class TempPasswordResponse(BaseModel):
    """Identical confirmation returned whether or not the email is known."""
    message: str = "If the email is registered, a code for a temporary password has been sent to it."


class TempPasswordConfirm(BaseModel):
    """Schema for redeeming a mailed temporary password code."""
    token: str = Field(..., min_length=1)


class TempPasswordIssued(BaseModel):
    """The temporary password, shown once."""
    temp_password: str


class PasswordChange(BaseModel):
    """Schema for a logged-in user changing their password."""
    password: str = Field(..., min_length=1)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self) -> "PasswordChange":
        """Ensure the confirmation equals the new password."""
        if self.password != self.confirm_password:
            raise ValueError("Password confirmation does not match")
        return self


class PasswordChangeResponse(BaseModel):
    """Schema for successful password change."""
    success: bool = True
    message: str = "Password updated successfully"
