"""Whole-collection JSON persistence.

A collection is one JSON array in `<data_dir>/<collection>.json`. Reads
tolerate a missing or corrupt file (logged, treated as empty). Writes replace
the whole document: the new array goes to a temp file in the same directory,
which is then renamed over the old one, so a crash leaves either the old or
the new contents and never a truncated file.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from .core import collection_path

logger = logging.getLogger(__name__)


def _ensure_collection(path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if not path.exists():
            path.write_text("[]", encoding="utf-8")
    except OSError as e:
        logger.warning("Could not create %s: %s", path, e)


def list_records(collection: str) -> list[dict[str, Any]]:
    """Load a collection. Returns [] if the file is missing or unreadable."""
    path = collection_path(collection)
    _ensure_collection(path)
    try:
        records = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Could not read %s, treating as empty: %s", path, e)
        return []
    if not isinstance(records, list):
        logger.warning("%s does not hold a JSON array, treating as empty", path)
        return []
    objects = [r for r in records if isinstance(r, dict)]
    if len(objects) != len(records):
        logger.warning("Skipping %d non-object entries in %s", len(records) - len(objects), path)
    return objects


def get_record(collection: str, record_id: str) -> dict[str, Any] | None:
    """Find a single record by id. Returns None if not found."""
    for record in list_records(collection):
        if record.get("id") == record_id:
            return record
    return None


def save_records(collection: str, records: list[dict[str, Any]]) -> bool:
    """Replace the whole collection. Returns False if the write failed."""
    path = collection_path(collection)
    tmp: str | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(records, f, indent=2, ensure_ascii=False)
        os.replace(tmp, path)
    except (OSError, TypeError, ValueError) as e:
        logger.error("Could not save %s: %s", path, e)
        if tmp is not None:
            Path(tmp).unlink(missing_ok=True)
        return False
    return True
