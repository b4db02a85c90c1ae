"""
Storage - translation files and cache snapshots on the local filesystem.
"""

from json_autotranslate.storage.files import (
    read_json,
    load_translation,
    load_translations,
    read_locale_codes,
    dumps,
    write_json,
    remove_file,
    copy_tree,
)
from json_autotranslate.storage.cache import CacheStore

__all__ = [
    "read_json",
    "load_translation",
    "load_translations",
    "read_locale_codes",
    "dumps",
    "write_json",
    "remove_file",
    "copy_tree",
    "CacheStore",
]
