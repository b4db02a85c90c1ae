"""
Core data models for the synchronization engine.

Translation files are loaded fresh on every run and treated as immutable
snapshots while a locale is processed. Work plans and run reports are
derived, never persisted.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================


class FileType(str, Enum):
    """Structural convention of a translation file."""
    
    KEY_BASED = "key-based"  # Nested namespaces, strings at the leaves
    NATURAL = "natural"      # Flat, each key is the source-language phrase
    AUTO = "auto"            # Requested type only: detect per file


# =============================================================================
# Translation Files
# =============================================================================


class TranslationFile(BaseModel):
    """
    A loaded translation file.
    
    For key-based files `content` is the flattened `original_content`;
    for natural files the two are the same mapping.
    """
    
    model_config = {"frozen": True}
    
    name: str
    type: FileType
    original_content: dict[str, Any]
    content: dict[str, Any]
    
    @property
    def locale(self) -> str:
        """Locale code derived from the file name (`fr.json` -> `fr`)."""
        return self.name[:-5] if self.name.endswith(".json") else self.name
    
    @property
    def keys(self) -> list[str]:
        return list(self.content.keys())


# =============================================================================
# Provider Payloads
# =============================================================================


class TranslationItem(BaseModel):
    """A string submitted to the translation provider."""
    
    key: str
    value: Any  # Non-string template leaves are copied over, never sent


class TranslatedString(BaseModel):
    """A string returned by the translation provider."""
    
    key: str
    value: str
    translated: str


# =============================================================================
# Work Plan
# =============================================================================


class WorkPlan(BaseModel):
    """Per-locale plan: what to translate, delete and keep."""
    
    to_translate: list[TranslationItem] = Field(default_factory=list)
    to_delete: set[str] = Field(default_factory=set)
    unchanged: set[str] = Field(default_factory=set)

    @property
    def keys_to_translate(self) -> list[str]:
        return [item.key for item in self.to_translate]

    @property
    def is_empty(self) -> bool:
        return not self.to_translate and not self.to_delete


# =============================================================================
# Run Report
# =============================================================================


class Translated(BaseModel):
    """The locale was planned, translated and persisted."""
    
    status: Literal["translated"] = "translated"
    locale: str
    added: int = 0
    removed: int = 0
    unchanged: int = 0
    changed_from_cache: int | None = None  # None when there was no snapshot


class Skipped(BaseModel):
    """The locale was not touched."""
    
    status: Literal["skipped"] = "skipped"
    locale: str
    reason: str


class Failed(BaseModel):
    """The locale failed and aborted the run."""
    
    status: Literal["failed"] = "failed"
    locale: str
    reason: str


LocaleOutcome = Annotated[
    Union[Translated, Skipped, Failed],
    Field(discriminator="status"),
]


class RunResult(BaseModel):
    """Everything a run did, returned instead of accumulated in globals."""
    
    source_file: str
    file_type: FileType
    target_locales: list[str] = Field(default_factory=list)
    outcomes: list[LocaleOutcome] = Field(default_factory=list)
    inconsistent_keys: list[str] = Field(default_factory=list)
    fixed_inconsistencies: bool = False
    deleted_files: list[str] = Field(default_factory=list)
    cached_sources: bool = False
    dry_run: bool = False
    
    @property
    def added(self) -> int:
        return sum(o.added for o in self.outcomes if isinstance(o, Translated))
    
    @property
    def removed(self) -> int:
        return sum(o.removed for o in self.outcomes if isinstance(o, Translated))
    
    @property
    def skipped(self) -> list[Skipped]:
        return [o for o in self.outcomes if isinstance(o, Skipped)]
    
    def outcome_for(self, locale: str) -> Translated | Skipped | Failed | None:
        for outcome in self.outcomes:
            if outcome.locale == locale:
                return outcome
        return None
