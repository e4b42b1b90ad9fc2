"""
Authentication schemas.

Email and password shape is checked by the identity service, not here, so
malformed credentials come back as a 400 with the service's message.
"""

import uuid

from pydantic import BaseModel


class UserCreate(BaseModel):
    """User registration request."""

    email: str
    password: str


class UserLogin(BaseModel):
    """User login request."""

    email: str
    password: str


class UserResponse(BaseModel):
    """Public user profile; never includes the password hash or tokens."""

    id: uuid.UUID
    email: str

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    """Authentication token response."""

    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class ChangePasswordRequest(BaseModel):
    """Password change request."""

    current_password: str
    new_password: str
