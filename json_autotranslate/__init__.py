"""
json-autotranslate - keep per-locale JSON translation files in sync with a
source-language template.

Only strings that are new, or whose translation changed since the last run,
are sent to the translation service.

Usage:
    from json_autotranslate import RunConfig, SyncEngine

    result = await SyncEngine().run(RunConfig(input_file=Path("locales/en.json")))
    print(result.added, result.removed)
"""

from json_autotranslate.config import RunConfig, Settings, get_settings
from json_autotranslate.core import (
    FileType,
    TranslationFile,
    WorkPlan,
    RunResult,
    AutoTranslateError,
    ConfigurationError,
    MissingSourceFile,
    UnsupportedSourceLanguage,
    UnsupportedTargetLanguage,
    InvalidKeyError,
    ProviderCallError,
    KeyConsistencyWarning,
    classify,
    flatten,
    unflatten,
)
from json_autotranslate.sync import SyncEngine, diff, plan, merge, fix

__version__ = "0.1.0"

__all__ = [
    "RunConfig",
    "Settings",
    "get_settings",
    "FileType",
    "TranslationFile",
    "WorkPlan",
    "RunResult",
    "AutoTranslateError",
    "ConfigurationError",
    "MissingSourceFile",
    "UnsupportedSourceLanguage",
    "UnsupportedTargetLanguage",
    "InvalidKeyError",
    "ProviderCallError",
    "KeyConsistencyWarning",
    "classify",
    "flatten",
    "unflatten",
    "SyncEngine",
    "diff",
    "plan",
    "merge",
    "fix",
]
