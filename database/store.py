"""
Credential store — all reads and writes of ``users`` rows.

The pre-insert / pre-update existence checks are only a fast path.  The
unique constraints on ``username`` and ``email`` are what actually keep
accounts distinct, so a late ``IntegrityError`` is turned into
``ConflictError`` here instead of surfacing as a server error.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import exists, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.errors import ConflictError, NotFoundError
from auth.schemas import PublicUser
from database.models import DEFAULT_BIO, DEFAULT_PROFILE_PIC, User

logger = logging.getLogger(__name__)


class CredentialStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    # ── Reads ───────────────────────────────────────────────────────────

    async def get(self, user_id: int) -> Optional[User]:
        return await self.session.get(User, user_id)

    async def find_by_identifier(self, identifier: str) -> Optional[User]:
        """Return the user whose email or username equals ``identifier``.

        An email match wins over a username match.
        """
        for column in (User.email, User.username):
            result = await self.session.execute(select(User).where(column == identifier))
            user = result.scalar_one_or_none()
            if user is not None:
                return user
        return None

    async def exists_by_email_or_username(self, email: str, username: str) -> bool:
        result = await self.session.execute(
            select(exists().where(or_(User.email == email, User.username == username)))
        )
        return bool(result.scalar())

    async def exists_by_username_excluding_user(self, username: str, exclude_id: int) -> bool:
        result = await self.session.execute(
            select(exists().where(User.username == username, User.id != exclude_id))
        )
        return bool(result.scalar())

    async def fetch_public_profile(self, user_id: int) -> Optional[PublicUser]:
        user = await self.get(user_id)
        if user is None:
            return None
        return PublicUser.model_validate(user)

    # ── Writes ──────────────────────────────────────────────────────────

    async def insert(
        self,
        username: str,
        email: str,
        password_hash: str,
        profile_pic: str = DEFAULT_PROFILE_PIC,
        bio: str = DEFAULT_BIO,
    ) -> User:
        user = User(
            username=username,
            email=email,
            password_hash=password_hash,
            profile_pic=profile_pic,
            bio=bio,
        )
        self.session.add(user)
        try:
            await self.session.flush()
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            logger.info("Insert rejected by unique constraint (username=%s)", username)
            raise ConflictError("Username or Email already in use")
        return user

    async def update_profile(
        self,
        user_id: int,
        username: Optional[str] = None,
        bio: Optional[str] = None,
    ) -> None:
        user = await self._require(user_id)
        if username is not None:
            user.username = username
        if bio is not None:
            user.bio = bio
        try:
            await self.session.flush()
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            logger.info("Rename of user %s rejected by unique constraint", user_id)
            raise ConflictError("Username already taken")

    async def update_profile_picture(self, user_id: int, path: str) -> None:
        user = await self._require(user_id)
        user.profile_pic = path
        await self.session.flush()
        await self.session.commit()

    async def _require(self, user_id: int) -> User:
        user = await self.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user
