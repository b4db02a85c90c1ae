"""
Synchronization planner.

Combines two signals per template key: the key is missing from the locale
file, or its value drifted from the cached snapshot. Either one triggers a
translation.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from json_autotranslate.core.flatten import SEPARATOR
from json_autotranslate.core.models import FileType, TranslationFile, TranslationItem, WorkPlan


def plan(
    template_keys: Iterable[str],
    existing_keys: Iterable[str],
    changed_keys: Iterable[str],
    delete_unused: bool = False,
    source_values: Mapping[str, Any] | None = None,
    nested: bool = False,
) -> WorkPlan:
    """
    Compute the work plan for one locale.

    Args:
        template_keys: Keys of the template, in template order
        existing_keys: Keys of the existing locale file
        changed_keys: Keys reported by the cache diff
        delete_unused: Delete keys that are no longer in the template
        source_values: Value to submit per key; defaults to the key itself
        nested: Keys are paths into a nested document; existing keys that
            clash with the template's nesting are always deleted

    Returns:
        WorkPlan with `to_translate` in template order
    """
    template_keys = list(template_keys)
    existing = set(existing_keys)
    changed = set(changed_keys)
    template = set(template_keys)

    to_translate = [
        TranslationItem(
            key=key,
            value=source_values[key] if source_values is not None else key,
        )
        for key in template_keys
        if key not in existing or key in changed
    ]
    translate_keys = {item.key for item in to_translate}

    to_delete = existing - template if delete_unused else set()
    if nested:
        to_delete |= shadowed_keys(template, existing)

    return WorkPlan(
        to_translate=to_translate,
        to_delete=to_delete,
        unchanged=(template & existing) - translate_keys,
    )


def shadowed_keys(template_keys: Iterable[str], existing_keys: Iterable[str]) -> set[str]:
    """
    Existing keys whose shape no longer matches the template.

    A string that became a group (`a` -> `a.b`) or a group that became a
    string (`a.b` -> `a`) leaves the old path behind, and both shapes cannot
    live in the same nested document.
    """
    template = set(template_keys)
    groups = set()
    for key in template:
        parts = key.split(SEPARATOR)
        for i in range(1, len(parts)):
            groups.add(SEPARATOR.join(parts[:i]))

    shadowed = set()
    for key in set(existing_keys) - template:
        parts = key.split(SEPARATOR)
        prefixes = {SEPARATOR.join(parts[:i]) for i in range(1, len(parts))}
        if key in groups or prefixes & template:
            shadowed.add(key)
    return shadowed


def source_values_for(template: TranslationFile) -> Mapping[str, Any] | None:
    """
    Values submitted for translation.

    Key-based files submit the template's leaf values. Natural files submit
    the key, which is the canonical source string.
    """
    if template.type is FileType.KEY_BASED:
        return template.content
    return None
