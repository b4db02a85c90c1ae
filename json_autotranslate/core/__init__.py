"""
Core module - data models, errors and the pure transforms.

This module contains:
- models: TranslationFile, WorkPlan, RunResult and friends
- errors: the exception taxonomy
- flatten: nested <-> flat key transform
- classifier: key-based / natural detection
"""

from json_autotranslate.core.models import (
    FileType,
    TranslationFile,
    TranslationItem,
    TranslatedString,
    WorkPlan,
    Translated,
    Skipped,
    Failed,
    LocaleOutcome,
    RunResult,
)

from json_autotranslate.core.errors import (
    AutoTranslateError,
    ConfigurationError,
    MissingSourceFile,
    InvalidFileError,
    UnsupportedSourceLanguage,
    UnsupportedTargetLanguage,
    InvalidKeyError,
    UnsupportedValueError,
    ProviderCallError,
    KeyConsistencyWarning,
)

from json_autotranslate.core.flatten import (
    SEPARATOR,
    flatten,
    unflatten,
    find_invalid_keys,
)

from json_autotranslate.core.classifier import (
    classify,
    resolve_type,
    find_inconsistent_keys,
)

__all__ = [
    # Models
    "FileType",
    "TranslationFile",
    "TranslationItem",
    "TranslatedString",
    "WorkPlan",
    "Translated",
    "Skipped",
    "Failed",
    "LocaleOutcome",
    "RunResult",
    # Errors
    "AutoTranslateError",
    "ConfigurationError",
    "MissingSourceFile",
    "InvalidFileError",
    "UnsupportedSourceLanguage",
    "UnsupportedTargetLanguage",
    "InvalidKeyError",
    "UnsupportedValueError",
    "ProviderCallError",
    "KeyConsistencyWarning",
    # Transforms
    "SEPARATOR",
    "flatten",
    "unflatten",
    "find_invalid_keys",
    "classify",
    "resolve_type",
    "find_inconsistent_keys",
]
