"""User and authentication models for the reference store"""

from enum import Enum

from pydantic import BaseModel, Field


class UserRole(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class User(BaseModel):
    """Registered account. Only the password hash is kept."""
    id: int
    email: str
    first_name: str = ""
    last_name: str = ""
    role: UserRole = UserRole.USER
    password_salt: bytes
    password_hash: bytes


class LoginRequest(BaseModel):
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)


class RegisterRequest(BaseModel):
    email: str = Field(min_length=3)
    password: str = Field(min_length=6)
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")

    class Config:
        populate_by_name = True


class AuthResponse(BaseModel):
    """Credential issued on login or registration"""
    token: str
    email: str
    role: UserRole


class ErrorResponse(BaseModel):
    """Body of every non-2xx answer"""
    code: str
    message: str
