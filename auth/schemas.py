"""
Pydantic request / response schemas for the auth API.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ═══════════════════════════════════════════════════════════════════════════════
# Requests
# ═══════════════════════════════════════════════════════════════════════════════


class SignupRequest(BaseModel):
    username: str = Field(..., max_length=64)
    email: str = Field(..., max_length=255)
    password: str = Field(..., max_length=128)


class LoginRequest(BaseModel):
    identifier: str  # email or username
    password: str


class UpdateProfileRequest(BaseModel):
    username: Optional[str] = Field(default=None, max_length=64)
    bio: Optional[str] = Field(default=None, max_length=2000)


# ═══════════════════════════════════════════════════════════════════════════════
# Responses
# ═══════════════════════════════════════════════════════════════════════════════


class PublicUser(BaseModel):
    """The part of a user record that may leave the server."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    profile_pic: str
    bio: str


class SignupResponse(BaseModel):
    message: str = "User registered successfully!"
    user: PublicUser


class LoginResponse(BaseModel):
    message: str = "Login successful!"
    token: str
    user: PublicUser


class MessageResponse(BaseModel):
    message: str


class ProfilePictureResponse(BaseModel):
    message: str = "Profile picture updated!"
    profile_pic: str
