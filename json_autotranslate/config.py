"""
Application configuration.

`Settings` loads defaults and API keys from environment variables (and a
`.env` file). `RunConfig` is the immutable set of options for one run; it
is passed into the engine instead of living in global state.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

from json_autotranslate.core.models import FileType


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # ==========================================================================
    # Run defaults
    # ==========================================================================

    input_file: str = "en.json"
    locales_file: str = "locales.txt"
    cache_dir: str = ".json-autotranslate-cache"
    translations_dir: str = "translations"
    source_language: str = "en"
    file_type: FileType = FileType.AUTO
    translation_service: str = "llm"
    interpolation_matcher: str = "icu"

    # ==========================================================================
    # DeepL
    # ==========================================================================

    deepl_api_key: str = ""

    # ==========================================================================
    # AI / LLM
    # ==========================================================================

    # Primary: Gemini (accepts either GOOGLE_API_KEY or GEMINI_API_KEY)
    google_api_key: str = ""
    gemini_api_key: str = ""  # Alias for google_api_key
    gemini_model: str = "gemini-2.0-flash"

    # Fallback providers
    openai_api_key: str = ""
    openai_model: str = "gpt-4-turbo"
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-3-opus-20240229"

    # Which provider to use
    llm_provider: str = "gemini"

    # ==========================================================================
    # Logging
    # ==========================================================================

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


class RunConfig(BaseModel):
    """Options for a single synchronization run."""

    model_config = {"frozen": True}

    input_file: Path = Path("en.json")
    locales_file: Path = Path("locales.txt")
    cache_dir: Path = Path(".json-autotranslate-cache")
    translations_dir: Path = Path("translations")
    source_language: str = "en"
    file_type: FileType = FileType.AUTO
    service: str = "llm"
    matcher: str = "icu"
    service_config: str | None = None
    fix_inconsistencies: bool = False
    delete_unused_strings: bool = False
    dry_run: bool = False
    retranslate_changed_source: bool = False

    @property
    def source_dir(self) -> Path:
        """Directory holding the template; copied into the cache after a run."""
        return self.input_file.resolve().parent

    @property
    def writes_files(self) -> bool:
        return not self.dry_run and self.service != "dry-run"

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **overrides: Any) -> RunConfig:
        """
        Build a run config from settings, letting explicit options win.

        Overrides that are None are ignored so CLI defaults can be left unset.
        """
        settings = settings or get_settings()
        values: dict[str, Any] = {
            "input_file": settings.input_file,
            "locales_file": settings.locales_file,
            "cache_dir": settings.cache_dir,
            "translations_dir": settings.translations_dir,
            "source_language": settings.source_language,
            "file_type": settings.file_type,
            "service": settings.translation_service,
            "matcher": settings.interpolation_matcher,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
