# -*- coding: utf-8 -*-
"""Image storage that exposes uploads under a public URL."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional
from uuid import uuid4

from chromaleap.errors import StorageFailure

logger = logging.getLogger(__name__)

UPLOADS_ROUTE = "/uploads"


def random_filename(original_name: Optional[str]) -> str:
    """Return a collision free name that keeps the original extension."""

    suffix = Path(original_name or "").suffix.lower()
    return f"{uuid4().hex}{suffix}"


class LocalImageStorage:
    """Store uploaded images on disk; the app serves them under ``/uploads``."""

    def __init__(self, root: Path, public_base_url: str) -> None:
        self.root = Path(root)
        self.public_base_url = public_base_url.rstrip("/")
        self.root.mkdir(parents=True, exist_ok=True)

    def _resolve(self, path: str) -> Path:
        name = Path(path).name
        if not name or name in {".", ".."}:
            raise StorageFailure(f"Invalid storage path: {path!r}")
        return self.root / name

    def put(self, data: bytes, filename: str) -> str:
        target = self._resolve(filename)
        tmp_path = target.with_suffix(target.suffix + ".tmp")
        try:
            tmp_path.write_bytes(data)
            tmp_path.replace(target)
        except OSError as exc:
            logger.exception("Image could not be stored: %s", target)
            try:
                tmp_path.unlink()
            except OSError:
                logger.debug("Temporary upload could not be removed: %s", tmp_path)
            raise StorageFailure(f"Upload failed: {exc}") from exc

        logger.info("Stored upload %s (%d bytes)", target.name, len(data))
        return self.get_public_url(target.name)

    def get_public_url(self, path: str) -> str:
        return f"{self.public_base_url}{UPLOADS_ROUTE}/{self._resolve(path).name}"


__all__ = ["LocalImageStorage", "UPLOADS_ROUTE", "random_filename"]
