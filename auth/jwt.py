"""
JWT-style session token creation and verification.

Tokens are urlsafe-base64 JSON payloads signed with HMAC-SHA256::

    <b64(payload)>.<hex signature>

The payload carries ``sub`` (user id), ``iat`` and ``exp``.  Tokens are
never stored server side; expiry is the only way a token stops working.
"""

from __future__ import annotations

import binascii
import hashlib
import hmac
import json
import logging
import time
from base64 import urlsafe_b64decode, urlsafe_b64encode
from typing import Callable, Optional

from auth.errors import UnauthorizedError

logger = logging.getLogger(__name__)

DEFAULT_EXPIRY_SECONDS = 3600


class TokenService:
    def __init__(
        self,
        secret: str,
        expiry_seconds: int = DEFAULT_EXPIRY_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not secret:
            raise ValueError("token secret must not be empty")
        self._secret = secret.encode()
        self.expiry_seconds = expiry_seconds
        self._clock = clock

    def _sign(self, raw: bytes) -> str:
        return hmac.new(self._secret, raw, hashlib.sha256).hexdigest()

    def issue(self, user_id: int) -> str:
        """Create a signed token for ``user_id`` valid for ``expiry_seconds``."""
        now = int(self._clock())
        payload = {
            "sub": user_id,
            "iat": now,
            "exp": now + self.expiry_seconds,
        }
        raw = json.dumps(payload, separators=(",", ":")).encode()
        return urlsafe_b64encode(raw).decode() + "." + self._sign(raw)

    def verify(self, token: Optional[str]) -> int:
        """
        Verify ``token`` and return its subject (user id).

        Raises ``UnauthorizedError`` for absent, malformed, forged or
        expired tokens.
        """
        if not token:
            raise UnauthorizedError("Unauthorized")

        parts = token.split(".")
        if len(parts) != 2:
            raise UnauthorizedError("Invalid token")
        try:
            raw = urlsafe_b64decode(parts[0].encode())
        except (binascii.Error, ValueError):
            raise UnauthorizedError("Invalid token")

        if not hmac.compare_digest(parts[1].encode(), self._sign(raw).encode()):
            raise UnauthorizedError("Invalid token")

        try:
            payload = json.loads(raw)
        except ValueError:
            raise UnauthorizedError("Invalid token")
        if not isinstance(payload, dict):
            raise UnauthorizedError("Invalid token")

        exp = payload.get("exp")
        subject = payload.get("sub")
        if not isinstance(exp, int) or not isinstance(subject, int) or isinstance(subject, bool):
            raise UnauthorizedError("Invalid token")
        if exp <= self._clock():
            logger.debug("Rejected expired token for user %s", subject)
            raise UnauthorizedError("Token expired")
        return subject


def extract_bearer(authorization: Optional[str]) -> str:
    """Pull the token out of an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        raise UnauthorizedError("Unauthorized")
    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise UnauthorizedError("Unauthorized")
    return token
