"""Cache diff: which keys of a locale file changed since the last write."""

from __future__ import annotations

from typing import Any


def diff(cached: dict[str, Any] | None, current: dict[str, Any]) -> set[str]:
    """
    Keys whose value differs between the snapshot and the current content,
    or that exist on only one side.

    A missing snapshot (first run) yields no information, not "everything
    changed": missing keys are picked up by the planner instead.
    """
    if cached is None:
        return set()

    changed = {key for key, value in current.items() if key not in cached or cached[key] != value}
    changed.update(key for key in cached if key not in current)
    return changed
