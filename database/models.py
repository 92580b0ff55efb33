"""
SQLAlchemy ORM models.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase

DEFAULT_PROFILE_PIC = "default.png"
DEFAULT_BIO = "This is my bio!"


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # unique=True is the authoritative guard against duplicate accounts
    username = Column(String(64), unique=True, nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    profile_pic = Column(String(255), nullable=False, default=DEFAULT_PROFILE_PIC)
    bio = Column(Text, nullable=False, default=DEFAULT_BIO)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r}>"
