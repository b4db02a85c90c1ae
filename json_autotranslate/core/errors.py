"""
Error taxonomy for the synchronization engine.

Fatal conditions are raised as exceptions and abort the run. Recoverable
conditions (unsupported target locale, inconsistent natural keys) are
reported and the run continues.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from json_autotranslate.core.models import RunResult


class AutoTranslateError(Exception):
    """Base class for all errors raised by json_autotranslate."""
    pass


class ConfigurationError(AutoTranslateError):
    """Empty locale list, unknown service or unknown matcher."""
    pass


class MissingSourceFile(AutoTranslateError):
    """The template path does not resolve to a parseable JSON document."""
    
    def __init__(self, path: str, reason: str = "file not found"):
        self.path = path
        self.reason = reason
        super().__init__(f"Source file {path} could not be loaded: {reason}")


class InvalidFileError(AutoTranslateError):
    """A translation file is not a JSON object at the top level."""
    pass


class UnsupportedSourceLanguage(AutoTranslateError):
    """The provider cannot translate from the source language."""
    
    def __init__(self, service: str, language: str):
        self.service = service
        self.language = language
        super().__init__(f"{service} doesn't support the source language {language}")


class UnsupportedTargetLanguage(AutoTranslateError):
    """The provider cannot translate into a target locale. The locale is skipped."""
    
    def __init__(self, service: str, language: str):
        self.service = service
        self.language = language
        super().__init__(f"{service} doesn't support {language}")


class InvalidKeyError(AutoTranslateError):
    """A key-based file contains keys with the path separator in them."""
    
    def __init__(self, keys: Iterable[str], filename: str | None = None):
        self.keys = list(keys)
        self.filename = filename
        where = f" in {filename}" if filename else ""
        super().__init__(
            f"Found {len(self.keys)} invalid key(s){where}: {', '.join(self.keys)}"
        )
    
    @property
    def remediation(self) -> str:
        return (
            "It looks like you're trying to use the key-based mode on "
            "natural-language-style JSON files. Please make sure that your keys "
            "don't contain periods (.) or remove the --type / -t option."
        )


class UnsupportedValueError(AutoTranslateError):
    """Arrays are not supported on the translation-key path."""
    
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Array values are not supported (at '{path}')")


class ProviderCallError(AutoTranslateError):
    """
    The translation provider failed.
    
    Aborts the remaining locales. Locales persisted before the failure stay
    on disk; the partial run report is attached as `result`.
    """
    
    def __init__(self, locale: str, message: str, result: RunResult | None = None):
        self.locale = locale
        self.result = result
        super().__init__(f"Translating to {locale} failed: {message}")


class KeyConsistencyWarning(UserWarning):
    """A natural-type file has entries whose value differs from the key."""
    pass
