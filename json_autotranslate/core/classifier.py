"""
File type detection.

Natural-language keys are literal phrases, so they tend to contain spaces
or punctuation. Key-based files use short dotted identifiers instead, which
appear as nested objects rather than as literal top-level keys.
"""

from __future__ import annotations

from typing import Any

from json_autotranslate.core.errors import InvalidFileError
from json_autotranslate.core.models import FileType, TranslationFile


def classify(doc: dict[str, Any]) -> FileType:
    """
    Decide the convention of a parsed JSON object.

    Returns NATURAL if any top-level key with a string value contains a
    period or a space, KEY_BASED otherwise (including for empty documents).
    """
    if not isinstance(doc, dict):
        raise InvalidFileError(
            f"Expected a JSON object at the top level, got {type(doc).__name__}"
        )

    natural_keys = [
        key for key, value in doc.items()
        if isinstance(value, str) and ("." in key or " " in key)
    ]
    return FileType.NATURAL if natural_keys else FileType.KEY_BASED


def resolve_type(doc: dict[str, Any], requested: FileType | str = FileType.AUTO) -> FileType:
    """Use the requested type unless it is AUTO, in which case classify."""
    requested = FileType(requested)
    if requested is FileType.AUTO:
        return classify(doc)
    return requested


def find_inconsistent_keys(file: TranslationFile) -> list[str]:
    """Keys of a natural file whose value is not the key itself."""
    if file.type is not FileType.NATURAL:
        return []
    return [key for key, value in file.content.items() if key != value]
