# -*- coding: utf-8 -*-
"""File backed store for analysis records."""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Optional
from uuid import uuid4

from chromaleap.errors import PersistenceFailure

logger = logging.getLogger(__name__)

ANALYSES_TABLE = "image_analyses"

_TABLE_PATTERN = re.compile(r"^[a-z][a-z0-9_]*$")
_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


class AnalysisRepository:
    """Insert-only record store, one JSON file per record.

    Records live in ``<storage_dir>/<table>/<id>.json`` so that stored
    analyses survive a reload of the development server. Writes go through a
    temporary file and are serialized by a lock.
    """

    def __init__(self, storage_dir: Path) -> None:
        self._storage_dir = Path(storage_dir)
        self._lock = Lock()
        self._storage_dir.mkdir(parents=True, exist_ok=True)

    def _table_dir(self, table: str) -> Path:
        if not _TABLE_PATTERN.match(table or ""):
            raise PersistenceFailure(f"Invalid table name: {table!r}")
        return self._storage_dir / table

    def insert(self, table: str, record: Dict[str, Any]) -> Dict[str, Any]:
        record_id = uuid4().hex
        row = {
            "id": record_id,
            **record,
            "created_at": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        }

        table_dir = self._table_dir(table)
        json_path = table_dir / f"{record_id}.json"
        tmp_path = json_path.with_suffix(".json.tmp")
        with self._lock:
            try:
                table_dir.mkdir(parents=True, exist_ok=True)
                with tmp_path.open("w", encoding="utf-8") as handle:
                    json.dump(row, handle, ensure_ascii=False, indent=2)
                tmp_path.replace(json_path)
            except (OSError, TypeError, ValueError) as exc:
                try:
                    tmp_path.unlink()
                except OSError:
                    logger.debug("Temporary record file could not be removed: %s", tmp_path)
                raise PersistenceFailure(f"Record could not be written: {exc}") from exc

        logger.debug("Inserted %s record %s", table, record_id)
        return {"id": record_id}

    def get(self, table: str, record_id: str) -> Optional[Dict[str, Any]]:
        if not _ID_PATTERN.match(record_id or ""):
            return None
        json_path = self._table_dir(table) / f"{record_id}.json"
        if not json_path.exists():
            return None
        try:
            with json_path.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Record file could not be read: %s (%s)", json_path, exc)
            return None


__all__ = ["ANALYSES_TABLE", "AnalysisRepository"]
