"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Wire names are camelCase; Python attributes stay snake_case.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from src.domain.passwords import MAX_PASSWORD_BYTES


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class RegisterRequest(_CamelModel):
    """Request model for user registration."""

    full_name: str = Field(..., alias="fullName", min_length=1, examples=["John Kracker"])
    email: EmailStr
    password: str = Field(
        ..., min_length=6, description="User password (min 6 characters, at most 72 bytes as UTF-8)"
    )

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return value


class VerifyEmailRequest(_CamelModel):
    """Request model for email verification."""

    email: EmailStr
    verification_code: str = Field(
        ...,
        alias="verificationCode",
        min_length=6,
        max_length=6,
        pattern=r"^\d{6}$",
        description="6-digit verification code",
    )


class ResendCodeRequest(BaseModel):
    """Request model for reissuing a verification code."""

    email: EmailStr


class LoginRequest(BaseModel):
    """Request model for login."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class MessageResponse(BaseModel):
    """Response model carrying a confirmation message."""

    message: str


class LoginResponse(_CamelModel):
    """Response model for successful login."""

    access_token: str = Field(..., alias="accessToken")
    token_type: str = Field(default="bearer", alias="tokenType")


class AccountResponse(_CamelModel):
    """Public view of the authenticated account."""

    id: str
    full_name: str = Field(..., alias="fullName")
    email: str
    is_email_verified: bool = Field(..., alias="isEmailVerified")


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
