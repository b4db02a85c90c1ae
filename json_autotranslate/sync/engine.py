"""
Synchronization engine.

Runs the whole pipeline for every target locale, one locale at a time:

    Loaded -> Classified -> Diffed -> Planned -> Translating -> Merged -> Persisted

A locale the service cannot translate into is Skipped and the run goes on.
Any failure while translating or persisting a locale marks it Failed and
aborts the run; locales persisted before it stay on disk.

Usage:
    config = RunConfig(input_file=Path("locales/en.json"), service="deepl")
    result = await SyncEngine().run(config)
"""

from __future__ import annotations

import logging
import os
import warnings
from pathlib import Path

from json_autotranslate.config import RunConfig
from json_autotranslate.core.classifier import find_inconsistent_keys
from json_autotranslate.core.errors import (
    ConfigurationError,
    InvalidFileError,
    InvalidKeyError,
    KeyConsistencyWarning,
    MissingSourceFile,
    ProviderCallError,
    UnsupportedSourceLanguage,
    UnsupportedTargetLanguage,
)
from json_autotranslate.core.flatten import find_invalid_keys
from json_autotranslate.core.models import (
    Failed,
    FileType,
    RunResult,
    Skipped,
    Translated,
    TranslatedString,
    TranslationFile,
    TranslationItem,
)
from json_autotranslate.matchers import get_matcher
from json_autotranslate.services import get_service
from json_autotranslate.services.base import TranslationService
from json_autotranslate.storage.cache import CacheStore
from json_autotranslate.storage.files import load_translation, read_locale_codes, remove_file
from json_autotranslate.sync.diff import diff
from json_autotranslate.sync.fixer import fix, fix_and_persist
from json_autotranslate.sync.merge import merge, persist_locale
from json_autotranslate.sync.planner import plan, source_values_for

logger = logging.getLogger(__name__)


class SyncEngine:
    """
    Keeps locale files in sync with the template.

    The service can be injected (tests, embedding); otherwise it is created
    from `RunConfig.service`.
    """

    def __init__(self, service: TranslationService | None = None):
        self._service = service

    async def run(self, config: RunConfig) -> RunResult:
        """
        Synchronize every target locale.

        Raises:
            ConfigurationError: Empty locale list, unknown service or matcher
            MissingSourceFile: The template cannot be loaded
            UnsupportedSourceLanguage: The service cannot read the source language
            InvalidKeyError: A key-based template has keys containing "."
            InvalidFileError: An existing locale file is not a valid JSON object
            ProviderCallError: The service failed; `result` holds the partial report
        """
        # Configuration is validated before anything is touched on disk
        service = self._service or get_service(config.service)
        matcher = get_matcher(config.matcher)
        locale_codes = read_locale_codes(config.locales_file)
        if not locale_codes:
            raise ConfigurationError("The locales code file is empty.")

        dry_run = not config.writes_files or service.service_id == "dry-run"
        input_file = config.input_file.resolve()
        translations_dir = config.translations_dir.resolve()
        cache = CacheStore(config.cache_dir.resolve())
        targets = [code for code in locale_codes if code != config.source_language]

        if not dry_run:
            if cache.ensure_dir():
                logger.info("Created the cache directory.")
            if not translations_dir.is_dir():
                translations_dir.mkdir(parents=True)
                logger.info("Created translations directory.")

        template = load_translation(input_file.parent, input_file.name, config.file_type)
        logger.info(f"Loaded source file {template.name} ({template.type.value})")
        logger.info(f"Found {len(targets)} target language(s): {', '.join(targets)}")

        result = RunResult(
            source_file=template.name,
            file_type=template.type,
            target_locales=targets,
            dry_run=dry_run,
        )

        logger.info(f"Initializing {service.name}...")
        await service.initialize(config.service_config, matcher)
        try:
            if not service.supports_source_language(config.source_language):
                raise UnsupportedSourceLanguage(service.name, config.source_language)

            template = self._check_consistency(template, config, cache, result, dry_run)
            self._check_keys(template)

            source_changes: set[str] = set()
            if config.retranslate_changed_source:
                source_changes = diff(cache.load(template.name, template.type), template.content)
                source_changes &= set(template.content)

            if config.delete_unused_strings and not dry_run:
                result.deleted_files = self._delete_unused_files(
                    translations_dir, cache, locale_codes, keep=input_file
                )

            for locale in targets:
                if not service.supports_language(locale):
                    reason = str(UnsupportedTargetLanguage(service.name, locale))
                    logger.warning(f"{reason}. Skipping this language.")
                    result.outcomes.append(Skipped(locale=locale, reason=reason))
                    continue

                logger.info(f"Translating strings from {config.source_language} to {locale}...")
                try:
                    outcome = await self._sync_locale(
                        locale, template, service, config, translations_dir, cache,
                        source_changes, dry_run,
                    )
                except Exception as e:
                    result.outcomes.append(Failed(locale=locale, reason=str(e)))
                    if isinstance(e, ProviderCallError):
                        e.result = result
                    raise
                result.outcomes.append(outcome)
        finally:
            await service.shutdown()

        if not dry_run:
            logger.info("Caching source translation files...")
            await cache.bootstrap(config.source_dir)
            result.cached_sources = True

        logger.info(f"{result.added} new translations have been added")
        if result.removed:
            logger.info(f"{result.removed} translations have been removed")
        return result

    # =========================================================================
    # Pre-checks
    # =========================================================================

    def _check_consistency(
        self,
        template: TranslationFile,
        config: RunConfig,
        cache: CacheStore,
        result: RunResult,
        dry_run: bool,
    ) -> TranslationFile:
        """Report natural keys whose value drifted, and fix them on request."""
        inconsistent = find_inconsistent_keys(template)
        result.inconsistent_keys = inconsistent
        if not inconsistent:
            return template

        warnings.warn(
            KeyConsistencyWarning(
                f"{template.name} contains {len(inconsistent)} inconsistent key(s)"
            ),
            stacklevel=2,
        )
        if not config.fix_inconsistencies:
            return template

        if dry_run:
            fixed = fix([template])
        else:
            fixed = fix_and_persist([template], config.input_file.resolve().parent, cache)
        result.fixed_inconsistencies = True
        return fixed[0]

    def _check_keys(self, template: TranslationFile) -> None:
        """Key-based templates must not contain the path separator in a key."""
        if template.type is not FileType.KEY_BASED:
            return
        invalid = find_invalid_keys(template.original_content)
        if invalid:
            raise InvalidKeyError(invalid, template.name)

    def _delete_unused_files(
        self,
        translations_dir: Path,
        cache: CacheStore,
        locale_codes: list[str],
        keep: Path,
    ) -> list[str]:
        """Delete locale files (and snapshots) for locales no longer listed."""
        wanted = {f"{code}.json" for code in locale_codes}
        deleted = []
        for entry in sorted(os.scandir(translations_dir), key=lambda e: e.name):
            if not entry.is_file() or not entry.name.endswith(".json") or entry.name in wanted:
                continue
            if Path(entry.path).resolve() == keep:
                continue
            logger.info(f"{entry.name} is no longer used and will be deleted.")
            remove_file(entry.path)
            cache.delete(entry.name)
            deleted.append(entry.name)
        return deleted

    # =========================================================================
    # Per-locale pipeline
    # =========================================================================

    async def _sync_locale(
        self,
        locale: str,
        template: TranslationFile,
        service: TranslationService,
        config: RunConfig,
        translations_dir: Path,
        cache: CacheStore,
        source_changes: set[str],
        dry_run: bool,
    ) -> Translated:
        filename = f"{locale}.json"

        existing_file = None
        if (translations_dir / filename).is_file():
            try:
                existing_file = load_translation(translations_dir, filename, template.type)
            except MissingSourceFile as e:
                raise InvalidFileError(
                    f"Translation file {e.path} could not be loaded: {e.reason}"
                ) from e
        existing = existing_file.content if existing_file else {}

        cached = cache.load(filename, template.type) if existing_file else None
        changed = diff(cached, existing) | source_changes
        if cached is not None:
            logger.info(f"{locale}: {len(changed)} changes from cache")

        work = plan(
            template.content.keys(),
            existing.keys(),
            changed,
            config.delete_unused_strings,
            source_values_for(template),
            nested=template.type is FileType.KEY_BASED,
        )

        new_values = await self._translate(
            service, work.to_translate, config.source_language, locale
        )
        merged = merge(existing, work.to_delete, new_values)

        if not dry_run:
            persist_locale(translations_dir, cache, filename, merged, template.type)

        logger.info(f"{locale}: +{len(new_values)} / -{len(work.to_delete)}")
        return Translated(
            locale=locale,
            added=len(new_values),
            removed=len(work.to_delete),
            unchanged=len(work.unchanged),
            changed_from_cache=len(changed) if cached is not None else None,
        )

    async def _translate(
        self,
        service: TranslationService,
        items: list[TranslationItem],
        source_lang: str,
        target_lang: str,
    ) -> dict[str, object]:
        """
        Translate string values; copy non-string template leaves verbatim.

        Returns new values in template order. Keys the service did not
        return are left out and picked up again on the next run.
        """
        sendable = [item for item in items if isinstance(item.value, str)]

        translated: list[TranslatedString] = []
        if sendable:
            try:
                translated = await service.translate_strings(sendable, source_lang, target_lang)
            except Exception as e:
                raise ProviderCallError(target_lang, str(e) or type(e).__name__) from e

        by_key = {t.key: t.translated for t in translated}
        new_values: dict[str, object] = {}
        for item in items:
            if not isinstance(item.value, str):
                new_values[item.key] = item.value
            elif item.key in by_key:
                new_values[item.key] = by_key[item.key]
        return new_values
