"""Inconsistency fixer for natural files: force every value to equal its key."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from json_autotranslate.core.models import FileType, TranslationFile
from json_autotranslate.storage.cache import CacheStore
from json_autotranslate.storage.files import write_json

logger = logging.getLogger(__name__)


def fix(files: Iterable[TranslationFile]) -> list[TranslationFile]:
    """Rewrite natural files so that `value == key`. Other files are dropped."""
    fixed = []
    for file in files:
        if file.type is not FileType.NATURAL:
            continue
        content = {key: key for key in file.content}
        fixed.append(file.model_copy(update={"content": content, "original_content": content}))
    return fixed


def fix_and_persist(
    files: Iterable[TranslationFile],
    directory: Path | str,
    cache: CacheStore,
) -> list[TranslationFile]:
    """Fix natural files and write them to `directory` and to the cache."""
    fixed = fix(files)
    for file in fixed:
        write_json(Path(directory) / file.name, file.content)
        cache.save(file.name, file.content)
        logger.info(f"Fixed key-value inconsistencies in {file.name}")
    return fixed
