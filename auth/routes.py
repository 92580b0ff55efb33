"""
Auth API routes — signup, login, profile.

Route prefix: /api/auth
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile, status

from auth.dependencies import get_auth_service, get_bearer_token, get_upload_handler
from auth.schemas import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    ProfilePictureResponse,
    PublicUser,
    SignupRequest,
    SignupResponse,
    UpdateProfileRequest,
)
from auth.service import AuthService
from media.uploads import ImageUploadHandler

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    req: SignupRequest,
    service: AuthService = Depends(get_auth_service),
) -> SignupResponse:
    """Register a new user."""
    user = await service.signup(req.username, req.email, req.password)
    return SignupResponse(user=user)


@router.post("/login", response_model=LoginResponse)
async def login(
    req: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    """Login with email or username + password."""
    result = await service.login(req.identifier, req.password)
    return LoginResponse(token=result.token, user=result.user)


@router.get("/profile", response_model=PublicUser)
async def get_profile(
    token: str = Depends(get_bearer_token),
    service: AuthService = Depends(get_auth_service),
) -> PublicUser:
    return await service.get_profile(token)


@router.put("/update-profile", response_model=MessageResponse)
async def update_profile(
    req: UpdateProfileRequest,
    token: str = Depends(get_bearer_token),
    service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    await service.update_profile(token, username=req.username, bio=req.bio)
    return MessageResponse(message="Profile updated successfully!")


@router.post("/upload-profile-pic", response_model=ProfilePictureResponse)
async def upload_profile_pic(
    profile_pic: Optional[UploadFile] = File(default=None, alias="profilePic"),
    token: str = Depends(get_bearer_token),
    service: AuthService = Depends(get_auth_service),
    uploads: ImageUploadHandler = Depends(get_upload_handler),
) -> ProfilePictureResponse:
    """Store an image and make it the caller's profile picture."""
    # authenticate before anything touches the disk
    service.authenticate(token)
    filename = await uploads.save(profile_pic)
    try:
        path = await service.update_profile_picture(token, filename)
    except Exception:
        logger.warning("Profile picture update failed, removing %s", filename)
        uploads.discard(filename)
        raise
    return ProfilePictureResponse(profile_pic=path)
