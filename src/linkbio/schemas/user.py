"""Pydantic schemas for registration, login and user records.

Request fields are optional at the schema level so that a missing or
empty value is reported as a 400 with a readable message by the service
layer, rather than as a generic validation failure. Register lengths
match the users table columns.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    username: Optional[str] = Field(None, max_length=50)
    email: Optional[str] = Field(None, max_length=255)
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserRead(BaseModel):
    """A user as returned to clients. Never includes the password hash."""
    id: int
    username: str
    email: str
    profile_picture_url: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class RegisterResponse(BaseModel):
    message: str = "User created"
    user: UserRead


class TokenResponse(BaseModel):
    message: str = "Login successful"
    token: str
    token_type: str = "bearer"
