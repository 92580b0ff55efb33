"""
Auth service — signup, login, profile read and profile updates.

One ``AuthService`` is built per request around that request's
``CredentialStore``; the hasher and token service are process-wide and
passed in.  Every profile operation takes the bearer token explicitly and
resolves it through ``TokenService.verify``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from auth.errors import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from auth.jwt import TokenService
from auth.password import MAX_PASSWORD_BYTES, PasswordHasher
from auth.schemas import PublicUser
from database.models import DEFAULT_BIO, DEFAULT_PROFILE_PIC
from database.store import CredentialStore

logger = logging.getLogger(__name__)

UPLOADS_URL_PREFIX = "/uploads/"


@dataclass
class LoginResult:
    token: str
    user: PublicUser


def _required(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field} is required")
    return value


def _username(value: Optional[str]) -> str:
    username = _required(value, "Username").strip()
    # '@' is reserved for email identifiers
    if "@" in username:
        raise ValidationError("Username must not contain '@'")
    return username


class AuthService:
    def __init__(
        self,
        store: CredentialStore,
        hasher: PasswordHasher,
        tokens: TokenService,
    ) -> None:
        self.store = store
        self.hasher = hasher
        self.tokens = tokens

    async def signup(
        self,
        username: Optional[str],
        email: Optional[str],
        password: Optional[str],
    ) -> PublicUser:
        """Register a new user.  No token is issued."""
        username = _username(username)
        email = _required(email, "Email").strip()
        password = _required(password, "Password")
        if "@" not in email:
            raise ValidationError("Email is invalid")
        if len(password.encode()) > MAX_PASSWORD_BYTES:
            raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

        if await self.store.exists_by_email_or_username(email, username):
            raise ConflictError("Username or Email already in use")

        password_hash = await self.hasher.hash_async(password)
        user = await self.store.insert(
            username=username,
            email=email,
            password_hash=password_hash,
            profile_pic=DEFAULT_PROFILE_PIC,
            bio=DEFAULT_BIO,
        )
        logger.info("Registered user %s (%s)", user.username, user.id)
        return PublicUser.model_validate(user)

    async def login(self, identifier: Optional[str], password: Optional[str]) -> LoginResult:
        """Login with email or username + password."""
        identifier = _required(identifier, "Identifier").strip()
        password = _required(password, "Password")

        user = await self.store.find_by_identifier(identifier)
        if user is None:
            logger.info("Login failed: unknown identifier")
            raise UnauthorizedError("User not found!")

        if not await self.hasher.verify_async(password, user.password_hash):
            logger.info("Login failed: bad password for user %s", user.id)
            raise UnauthorizedError("Invalid password!")

        token = self.tokens.issue(user.id)
        logger.info("Login: %s (%s)", user.username, user.id)
        return LoginResult(token=token, user=PublicUser.model_validate(user))

    def authenticate(self, token: Optional[str]) -> int:
        return self.tokens.verify(token)

    async def get_profile(self, token: Optional[str]) -> PublicUser:
        user_id = self.tokens.verify(token)
        profile = await self.store.fetch_public_profile(user_id)
        if profile is None:
            raise NotFoundError("User not found")
        return profile

    async def update_profile(
        self,
        token: Optional[str],
        username: Optional[str] = None,
        bio: Optional[str] = None,
    ) -> None:
        """Change username and/or bio of the token's owner."""
        user_id = self.tokens.verify(token)
        if username is None and bio is None:
            raise ValidationError("Nothing to update")
        if username is not None:
            username = _username(username)
            if await self.store.exists_by_username_excluding_user(username, user_id):
                raise ConflictError("Username already taken")

        await self.store.update_profile(user_id, username=username, bio=bio)
        logger.info("Updated profile of user %s", user_id)

    async def update_profile_picture(self, token: Optional[str], file_ref: Optional[str]) -> str:
        """Record an already stored image against the user; return its public path."""
        user_id = self.tokens.verify(token)
        if not file_ref:
            raise ValidationError("No file uploaded!")

        await self.store.update_profile_picture(user_id, file_ref)
        logger.info("Updated profile picture of user %s", user_id)
        return UPLOADS_URL_PREFIX + file_ref
