"""
Translation file loading and writing on the local filesystem.

Loading is read-only. Writes go through a temporary file in the target
directory followed by `os.replace`, so a crash never leaves a half-written
JSON file behind.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any

from json_autotranslate.core.classifier import resolve_type
from json_autotranslate.core.errors import ConfigurationError, InvalidFileError, MissingSourceFile
from json_autotranslate.core.flatten import flatten
from json_autotranslate.core.models import FileType, TranslationFile

logger = logging.getLogger(__name__)


# =============================================================================
# Reading
# =============================================================================


def read_json(path: Path | str) -> Any:
    """Parse a UTF-8 JSON file."""
    return json.loads(Path(path).read_text(encoding="utf-8"))


def load_translation(
    directory: Path | str,
    filename: str,
    file_type: FileType | str = FileType.AUTO,
) -> TranslationFile:
    """
    Load a single translation file.

    Args:
        directory: Directory containing the file
        filename: File name (or a path; only its name is kept)
        file_type: Requested structure; AUTO detects it from the content

    Returns:
        The loaded file with flattened content for key-based files

    Raises:
        MissingSourceFile: The file does not exist or is not valid JSON
        InvalidFileError: The file is JSON but not an object
    """
    path = Path(directory) / filename
    if not path.is_file():
        raise MissingSourceFile(str(path))

    try:
        data = read_json(path)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MissingSourceFile(str(path), reason=str(e)) from e

    if not isinstance(data, dict):
        raise InvalidFileError(f"{path} must contain a JSON object")

    resolved = resolve_type(data, file_type)
    content = flatten(data, strict=False) if resolved is FileType.KEY_BASED else dict(data)

    logger.debug(f"Loaded {path.name} as {resolved.value} ({len(content)} keys)")
    return TranslationFile(
        name=path.name,
        type=resolved,
        original_content=data,
        content=content,
    )


def load_translations(
    directory: Path | str,
    file_type: FileType | str = FileType.AUTO,
) -> list[TranslationFile]:
    """
    Load every `*.json` file in a directory.

    Order follows the directory listing and carries no meaning.
    """
    directory = Path(directory)
    if not directory.is_dir():
        return []

    return [
        load_translation(directory, entry.name, file_type)
        for entry in os.scandir(directory)
        if entry.is_file() and entry.name.endswith(".json")
    ]


def read_locale_codes(path: Path | str) -> list[str]:
    """
    Read newline-separated locale codes.

    Blank lines and surrounding whitespace are ignored, duplicates dropped.
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigurationError(f"The locales file {path} doesn't exist.")

    codes: list[str] = []
    for line in path.read_text(encoding="utf-8").splitlines():
        code = line.strip()
        if code and code not in codes:
            codes.append(code)
    return codes


# =============================================================================
# Writing
# =============================================================================


def dumps(data: Any) -> str:
    """Serialize the way translation files are written: 2-space indent, newline."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def write_json(path: Path | str, data: Any) -> Path:
    """Atomically write `data` as JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(dumps(data))
        os.replace(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
    return path


def remove_file(path: Path | str) -> bool:
    """Delete a file if it exists."""
    path = Path(path)
    if path.is_file():
        path.unlink()
        return True
    return False


async def copy_tree(source: Path | str, destination: Path | str) -> None:
    """Recursively copy a directory, overwriting existing files."""
    source = Path(source).resolve()
    destination = Path(destination).resolve()

    def ignore(directory: str, names: list[str]) -> list[str]:
        # Never copy the destination into itself when it lives inside source
        return [name for name in names if (Path(directory) / name).resolve() == destination]

    await asyncio.to_thread(
        shutil.copytree, source, destination, ignore=ignore, dirs_exist_ok=True
    )
