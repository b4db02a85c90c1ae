"""
Flatten/unflatten transform for key-based translation files.

    {"home": {"title": "Hello"}}  <->  {"home.title": "Hello"}

The two functions are an exact bijection for nested objects whose leaves
are scalars (str, int, float, bool, None). Empty objects are kept as leaves
so they survive a round trip. Arrays are not supported anywhere on the
translation-key path and are rejected.
"""

from __future__ import annotations

from typing import Any

from json_autotranslate.core.errors import InvalidKeyError, UnsupportedValueError


SEPARATOR = "."


def flatten(nested: dict[str, Any], strict: bool = True) -> dict[str, Any]:
    """
    Flatten a nested document into `path -> leaf` pairs.

    Args:
        nested: Parsed JSON object
        strict: Reject key segments that contain the separator. Without it,
            such segments are joined as-is (used for snapshots that are
            already flat).

    Returns:
        Flat mapping in document order

    Raises:
        InvalidKeyError: A key segment contains the separator (strict only)
        UnsupportedValueError: An array was found
    """
    flat: dict[str, Any] = {}
    invalid: list[str] = []
    _flatten_into(flat, nested, "", strict, invalid)
    if invalid:
        raise InvalidKeyError(invalid)
    return flat


def _flatten_into(
    flat: dict[str, Any],
    node: dict[str, Any],
    prefix: str,
    strict: bool,
    invalid: list[str],
) -> None:
    for key, value in node.items():
        path = f"{prefix}{SEPARATOR}{key}" if prefix else key

        if strict and SEPARATOR in key:
            invalid.append(path)
            continue

        if isinstance(value, list):
            raise UnsupportedValueError(path)

        if isinstance(value, dict) and value:
            _flatten_into(flat, value, path, strict, invalid)
        else:
            flat[path] = value


def unflatten(flat: dict[str, Any]) -> dict[str, Any]:
    """
    Rebuild the nested document from `path -> leaf` pairs.

    Raises:
        InvalidKeyError: A path is both a leaf and the parent of another path
    """
    nested: dict[str, Any] = {}
    conflicts: list[str] = []

    for path, value in flat.items():
        if isinstance(value, list):
            raise UnsupportedValueError(path)

        segments = path.split(SEPARATOR)
        node = nested
        for segment in segments[:-1]:
            child = node.setdefault(segment, {})
            if not isinstance(child, dict):
                conflicts.append(path)
                break
            node = child
        else:
            leaf = segments[-1]
            if isinstance(node.get(leaf), dict) and node[leaf]:
                conflicts.append(path)
                continue
            node[leaf] = value

    if conflicts:
        raise InvalidKeyError(conflicts)
    return nested


def find_invalid_keys(nested: dict[str, Any]) -> list[str]:
    """Paths whose key segment contains the separator, at any depth."""
    invalid: list[str] = []

    def walk(node: dict[str, Any], prefix: str) -> None:
        for key, value in node.items():
            path = f"{prefix}{SEPARATOR}{key}" if prefix else key
            if SEPARATOR in key:
                invalid.append(path)
            elif isinstance(value, dict):
                walk(value, path)

    walk(nested, "")
    return invalid
