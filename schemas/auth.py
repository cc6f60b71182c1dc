# schemas/auth.py
"""
Pydantic schemas for signup / login.
"""
from typing import Optional

from pydantic import Field

from models.user import Role
from .base import CamelModel


class SignUpRequest(CamelModel):
     username: str = Field(..., min_length=1, max_length=255)
     password: str = Field(..., min_length=1)
     name: str = Field(..., min_length=1, max_length=255)
     role: Optional[str] = None  # validated against Role in the router


class LoginRequest(CamelModel):
     username: str = Field(..., min_length=1)
     password: str = Field(..., min_length=1)


class AuthUser(CamelModel):
     id: int
     token: str
     role: Role
     username: str


class AuthResponse(CamelModel):
     """Response for signup and login."""

     user: AuthUser
