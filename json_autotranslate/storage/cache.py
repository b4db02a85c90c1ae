"""
Per-locale cache snapshots.

A snapshot is the flat content of a locale file as of its last successful
write. Only the synchronization engine reads and writes snapshots.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from json_autotranslate.core.flatten import flatten
from json_autotranslate.core.models import FileType
from json_autotranslate.storage.files import copy_tree, read_json, remove_file, write_json

logger = logging.getLogger(__name__)


class CacheStore:
    """Snapshot storage backed by a directory of JSON files."""

    def __init__(self, cache_dir: Path | str):
        self.cache_dir = Path(cache_dir)

    def ensure_dir(self) -> bool:
        """Create the cache directory. Returns True if it was created."""
        if self.cache_dir.is_dir():
            return False
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        return True

    def path_for(self, filename: str) -> Path:
        return self.cache_dir / filename

    def load(self, filename: str, file_type: FileType = FileType.KEY_BASED) -> dict[str, Any] | None:
        """
        Load a snapshot as flat content.

        Snapshots copied in by `bootstrap` may still be nested, so key-based
        snapshots are flattened (non-strict: already-flat keys pass through).

        Returns:
            Flat content, or None when there is no usable snapshot
        """
        path = self.path_for(filename)
        if not path.is_file():
            return None

        try:
            data = read_json(path)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Ignoring unreadable cache snapshot {path}: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning(f"Ignoring cache snapshot {path}: not a JSON object")
            return None

        if file_type is FileType.KEY_BASED:
            return flatten(data, strict=False)
        return data

    def save(self, filename: str, content: dict[str, Any]) -> Path:
        """Write the flat content that was just persisted for a locale."""
        return write_json(self.path_for(filename), content)

    def delete(self, filename: str) -> bool:
        return remove_file(self.path_for(filename))

    async def bootstrap(self, source_dir: Path | str) -> None:
        """Copy the whole source directory into the cache."""
        logger.debug(f"Caching {source_dir} into {self.cache_dir}")
        await copy_tree(source_dir, self.cache_dir)
