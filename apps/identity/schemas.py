"""API Schemas for Identity app - request validation and response shapes."""
from typing import Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from pydantic import Field, field_validator

from apps.core.schemas import CamelSchema
from .models import UserRole


# =============================================================================
# Request Schemas
# =============================================================================

class UserBase(CamelSchema):
    username: str = Field(max_length=50)
    email: str = Field(max_length=254)
    name: str = Field(max_length=100)
    role: str = UserRole.USER.value

    @field_validator('username', 'name')
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError('must not be blank')
        return value

    @field_validator('email')
    @classmethod
    def email_shape(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError('must not be blank')
        try:
            validate_email(value)
        except DjangoValidationError:
            raise ValueError('must be a valid email address')
        return value

    @field_validator('role')
    @classmethod
    def known_role(cls, value: str) -> str:
        if value not in UserRole.values:
            raise ValueError(f"must be one of: {', '.join(UserRole.values)}")
        return value


class UserCreate(UserBase):
    """Schema for creating a user."""
    password: str

    @field_validator('password')
    @classmethod
    def password_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError('must not be blank')
        return value


class UserUpdate(UserBase):
    """
    Schema for updating a user.
    Empty or missing password keeps the stored hash; role is always overwritten.
    """
    password: Optional[str] = None


# =============================================================================
# Response Schemas
# =============================================================================

class UserOut(CamelSchema):
    id: int
    username: str
    email: str
    name: str
    role: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
