from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Protocol

from werkzeug.utils import secure_filename

from ..core.exceptions import PersistenceFailure

logger = logging.getLogger(__name__)


class PhotoStore(Protocol):
    def save(self, *, user_id: int, kind: str, payload: bytes, taken_at: datetime) -> str:
        """Persist an opaque image payload and return its reference."""

        raise NotImplementedError

    def delete(self, ref: str) -> None:
        raise NotImplementedError


class LocalPhotoStore(PhotoStore):
    """Writes selfies under ``<base_dir>/<user_id>/<kind>_<timestamp>.jpg``."""

    def __init__(self, base_dir: str | Path):
        self._base_dir = Path(base_dir)

    def save(self, *, user_id: int, kind: str, payload: bytes, taken_at: datetime) -> str:
        name = secure_filename(f"{kind}_{taken_at.strftime('%Y%m%d%H%M%S%f')}.jpg")
        relative = Path(str(int(user_id))) / name
        target = self._base_dir / relative
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(payload)
        except OSError as e:
            logger.error("photo write failed: %s", target, exc_info=True)
            raise PersistenceFailure("photo could not be stored") from e
        return relative.as_posix()

    def delete(self, ref: str) -> None:
        target = self._base_dir / ref
        try:
            target.unlink(missing_ok=True)
        except OSError as e:
            logger.error("photo delete failed: %s", target, exc_info=True)
            raise PersistenceFailure("photo could not be removed") from e
