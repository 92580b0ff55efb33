"""
FastAPI dependencies for authentication.

Provides ``db_session``, ``get_auth_service`` and ``get_bearer_token``
dependencies that are used across the auth routes.  The process-wide
collaborators (hasher, token service, upload handler) live on
``app.state`` and are set up by ``main.create_app``.
"""

from __future__ import annotations

from typing import AsyncGenerator, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from auth.jwt import extract_bearer
from auth.service import AuthService
from database.session import get_db_session
from database.store import CredentialStore
from media.uploads import ImageUploadHandler


async def db_session(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a DB session for route handlers."""
    yield session


def get_auth_service(
    request: Request,
    session: AsyncSession = Depends(db_session),
) -> AuthService:
    state = request.app.state
    return AuthService(
        store=CredentialStore(session),
        hasher=state.password_hasher,
        tokens=state.token_service,
    )


def get_upload_handler(request: Request) -> ImageUploadHandler:
    return request.app.state.upload_handler


async def get_bearer_token(
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> str:
    """
    Extract the Bearer token from the Authorization header.

    Only the header is parsed here; the signature and expiry are checked
    by the service.
    """
    return extract_bearer(authorization)
