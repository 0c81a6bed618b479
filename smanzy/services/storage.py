"""Local filesystem storage for uploaded media files."""

import logging
import os
import uuid
from functools import lru_cache
from pathlib import Path
from typing import BinaryIO

from smanzy.core.config import settings
from smanzy.core.errors import InvalidInputError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


def make_stored_name(owner_id: int, original_filename: str) -> str:
    """Unique on-disk name: owner id, random part, original extension."""
    ext = Path(original_filename or "").suffix.lower()
    return f"{owner_id}_{uuid.uuid4().hex}{ext}"


def is_safe_name(name: str) -> bool:
    """True only for a bare file name (no directories, no traversal)."""
    return bool(name) and name not in (".", "..") and os.path.basename(name) == name and "\\" not in name


class LocalStorage:
    """Store files flat under base_path, addressed by stored name."""

    def __init__(self, base_path: str, max_bytes: int | None = None) -> None:
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.max_bytes = max_bytes

    def path_for(self, name: str) -> Path:
        if not is_safe_name(name):
            raise InvalidInputError("Invalid filename.")
        return self.base_path / name

    def save(self, name: str, source: BinaryIO) -> int:
        """
        Copy source to name and return the number of bytes written.

        A partially written file is removed if the copy fails or the size
        limit is exceeded.
        """
        path = self.path_for(name)
        written = 0
        try:
            with path.open("wb") as out:
                while chunk := source.read(CHUNK_SIZE):
                    written += len(chunk)
                    if self.max_bytes is not None and written > self.max_bytes:
                        raise InvalidInputError(
                            f"File size must not exceed {self.max_bytes // (1024 * 1024)} MB."
                        )
                    out.write(chunk)
        except BaseException:
            path.unlink(missing_ok=True)
            raise
        return written

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def remove(self, name: str) -> None:
        """Delete the file. A missing file is not an error."""
        self.path_for(name).unlink(missing_ok=True)

    def remove_quietly(self, name: str) -> bool:
        """Best-effort delete: log failures instead of raising. Returns success."""
        try:
            self.remove(name)
            return True
        except (OSError, InvalidInputError) as e:
            logger.warning("Failed to delete stored file %s: %s", name, e)
            return False


@lru_cache
def get_storage() -> LocalStorage:
    """Dependency returning the process-wide storage rooted at UPLOAD_DIR."""
    return LocalStorage(settings.UPLOAD_DIR, max_bytes=settings.MAX_UPLOAD_BYTES)
