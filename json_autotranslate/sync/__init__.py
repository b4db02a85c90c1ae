"""
Synchronization - cache diff, planning, merging and the engine running them.
"""

from json_autotranslate.sync.diff import diff
from json_autotranslate.sync.planner import plan, shadowed_keys, source_values_for
from json_autotranslate.sync.merge import merge, render, persist_locale
from json_autotranslate.sync.fixer import fix, fix_and_persist
from json_autotranslate.sync.engine import SyncEngine

__all__ = [
    "diff",
    "plan",
    "shadowed_keys",
    "source_values_for",
    "merge",
    "render",
    "persist_locale",
    "fix",
    "fix_and_persist",
    "SyncEngine",
]
