"""
Merge translated strings into a locale file and persist it with its cache.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Mapping

from json_autotranslate.core.flatten import unflatten
from json_autotranslate.core.models import FileType
from json_autotranslate.storage.cache import CacheStore
from json_autotranslate.storage.files import write_json

logger = logging.getLogger(__name__)


def merge(
    existing: Mapping[str, Any],
    to_delete: Iterable[str],
    translated: Mapping[str, Any],
) -> dict[str, Any]:
    """Drop `to_delete` from `existing`, then overlay `translated` on top."""
    deleted = set(to_delete)
    merged = {key: value for key, value in existing.items() if key not in deleted}
    merged.update(translated)
    return merged


def render(content: dict[str, Any], file_type: FileType) -> dict[str, Any]:
    """The document as written to disk: nested for key-based files."""
    if file_type is FileType.KEY_BASED:
        return unflatten(content)
    return content


def persist_locale(
    translations_dir: Path | str,
    cache: CacheStore,
    filename: str,
    content: dict[str, Any],
    file_type: FileType,
) -> Path:
    """
    Write a locale file, then its cache snapshot.

    The snapshot is the exact flat content that was written. If the process
    dies between the two writes the stale snapshot costs at most one extra
    retranslation on the next run.
    """
    path = write_json(Path(translations_dir) / filename, render(content, file_type))
    cache.save(filename, content)
    logger.debug(f"Persisted {path} ({len(content)} keys)")
    return path
