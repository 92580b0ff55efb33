"""
Profile picture uploads.

Files are accepted only when both the extension and the declared MIME
type are jpg / jpeg / png.  Accepted files get a server-generated,
timestamp-derived name and are written under the configured storage root.
"""

from __future__ import annotations

import asyncio
import logging
import secrets
import time
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from auth.errors import ValidationError

logger = logging.getLogger(__name__)

ALLOWED_TYPES = frozenset({"jpg", "jpeg", "png"})
DEFAULT_EXTENSION = ".jpg"
_CHUNK_SIZE = 64 * 1024
_MAX_NAME_ATTEMPTS = 5


class ImageUploadHandler:
    def __init__(self, upload_dir: str | Path, max_bytes: Optional[int] = None) -> None:
        self.upload_dir = Path(upload_dir)
        self.max_bytes = max_bytes

    def ensure_dir(self) -> Path:
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        return self.upload_dir

    @staticmethod
    def resolve_extension(filename: Optional[str], content_type: Optional[str]) -> str:
        """
        Return the extension to store the file under.

        Raises ``ValidationError`` when the extension or MIME type is not an
        allowed image type.  A file with no extension but an allowed MIME
        type is stored as ``.jpg``.
        """
        mime_subtype = (content_type or "").lower().partition("/")[2]
        if mime_subtype not in ALLOWED_TYPES:
            raise ValidationError("Only JPG, JPEG, and PNG files are allowed!")

        suffix = Path(filename or "").suffix.lower()
        if not suffix:
            return DEFAULT_EXTENSION
        if suffix.lstrip(".") not in ALLOWED_TYPES:
            raise ValidationError("Only JPG, JPEG, and PNG files are allowed!")
        return suffix

    def _write_new(self, extension: str, data: bytes) -> str:
        """Create a fresh file for ``data``; never overwrites an existing one."""
        name = f"{int(time.time() * 1000)}{extension}"
        for _ in range(_MAX_NAME_ATTEMPTS):
            try:
                with open(self.upload_dir / name, "xb") as handle:
                    handle.write(data)
                return name
            except FileExistsError:
                name = f"{int(time.time() * 1000)}-{secrets.token_hex(4)}{extension}"
        raise RuntimeError("could not allocate a unique upload filename")

    def discard(self, name: str) -> None:
        """Remove a stored file that ended up unreferenced."""
        (self.upload_dir / name).unlink(missing_ok=True)
        logger.info("Discarded upload %s", name)

    async def save(self, upload: Optional[UploadFile]) -> str:
        """Validate and persist ``upload``; return the stored filename."""
        if upload is None or not upload.filename:
            raise ValidationError("No file uploaded!")

        extension = self.resolve_extension(upload.filename, upload.content_type)
        data = await self._read(upload)

        self.ensure_dir()
        name = await asyncio.to_thread(self._write_new, extension, data)
        logger.info("Stored upload %s (%d bytes)", name, len(data))
        return name

    async def _read(self, upload: UploadFile) -> bytes:
        chunks = []
        total = 0
        while True:
            chunk = await upload.read(_CHUNK_SIZE)
            if not chunk:
                break
            total += len(chunk)
            if self.max_bytes is not None and total > self.max_bytes:
                raise ValidationError("File is too large!")
            chunks.append(chunk)
        return b"".join(chunks)
