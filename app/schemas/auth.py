"""
Pydantic schemas for authentication endpoints.
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel


def _check_bcrypt_limit(v: str) -> str:
    if len(v.encode("utf-8")) > 72:
        raise ValueError("Password must be 72 bytes or fewer")
    return v


class RegisterRequest(BaseModel):
    """
    Request schema for user registration.

    Minimum length is checked by the auth service so the configured
    MIN_PASSWORD_LENGTH applies; only bcrypt's byte limit is enforced here.
    """
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=1, description="User's password")
    confirm_password: str = Field(..., description="Must equal password")
    name: Optional[str] = Field(default=None, max_length=200, description="Display name (optional)")

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        return _check_bcrypt_limit(v)

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "email": "alice@example.com",
                "password": "Passw0rd",
                "confirmPassword": "Passw0rd",
                "name": "Alice"
            }
        }


class LoginRequest(BaseModel):
    """Request schema for user login."""
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=1, description="User's password")

    class Config:
        json_schema_extra = {
            "example": {
                "email": "alice@example.com",
                "password": "Passw0rd"
            }
        }


class LogoutRequest(BaseModel):
    token: str = Field(..., min_length=1, description="Session token to revoke")


class UserResponse(BaseModel):
    """Public profile; the password hash is never serialized."""
    id: int
    email: str
    name: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class AuthResponse(BaseModel):
    success: bool = True
    token: str = Field(..., description="Opaque bearer token (64 hex characters)")
    user: UserResponse


class CurrentUserResponse(BaseModel):
    success: bool = True
    user: UserResponse


class SuccessResponse(BaseModel):
    success: bool = True
