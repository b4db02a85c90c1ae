"""
End-to-end tests for the synchronization engine.

Core principle: only new or drifted strings reach the translation service,
and nothing a human wrote is lost unless deletion was asked for.
"""

import json
from typing import Sequence

import pytest

from json_autotranslate.config import RunConfig
from json_autotranslate.core.errors import (
    ConfigurationError,
    InvalidFileError,
    InvalidKeyError,
    KeyConsistencyWarning,
    MissingSourceFile,
    ProviderCallError,
    UnsupportedSourceLanguage,
)
from json_autotranslate.core.models import (
    Failed,
    FileType,
    Skipped,
    Translated,
    TranslatedString,
    TranslationItem,
)
from json_autotranslate.services.base import TranslationService
from json_autotranslate.sync.engine import SyncEngine


class FakeService(TranslationService):
    """Prefixes every value with the target locale."""

    service_id = "fake"
    name = "Fake"

    def __init__(self, unsupported=(), fail_on=(), source_supported=True):
        super().__init__()
        self.unsupported = set(unsupported)
        self.fail_on = set(fail_on)
        self.source_supported = source_supported
        self.calls: list[tuple[str, list[str]]] = []
        self.initialized = False
        self.shut_down = False

    async def initialize(self, config=None, matcher=None):
        await super().initialize(config, matcher)
        self.initialized = True

    async def shutdown(self):
        self.shut_down = True

    def supports_language(self, code: str) -> bool:
        return code not in self.unsupported

    def supports_source_language(self, code: str) -> bool:
        return self.source_supported

    async def translate_strings(
        self,
        items: Sequence[TranslationItem],
        source_lang: str,
        target_lang: str,
    ) -> list[TranslatedString]:
        self.calls.append((target_lang, [item.key for item in items]))
        if target_lang in self.fail_on:
            raise RuntimeError("quota exceeded")
        return [
            TranslatedString(key=i.key, value=i.value, translated=f"[{target_lang}] {i.value}")
            for i in items
        ]


class ForbiddenService(FakeService):
    """Fails the test if anything is sent for translation."""

    async def translate_strings(self, items, source_lang, target_lang):
        raise AssertionError(f"unexpected translation call for {target_lang}")


# =============================================================================
# Fixtures
# =============================================================================


def write_json(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")


def read_json(path):
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.fixture
def workspace(tmp_path):
    (tmp_path / "locales.txt").write_text("en\nfr\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def make_config(workspace):
    def make(**overrides):
        options = {
            "input_file": workspace / "src" / "en.json",
            "locales_file": workspace / "locales.txt",
            "cache_dir": workspace / "cache",
            "translations_dir": workspace / "translations",
            "service": "fake",
        }
        options.update(overrides)
        return RunConfig(**options)
    return make


# =============================================================================
# Scenarios
# =============================================================================


class TestFirstRun:
    @pytest.mark.asyncio
    async def test_key_based_template(self, workspace, make_config):
        write_json(workspace / "src" / "en.json", {"title": "Hello"})
        service = FakeService()

        result = await SyncEngine(service).run(make_config())

        fr = read_json(workspace / "translations" / "fr.json")
        assert fr == {"title": "[fr] Hello"}
        assert read_json(workspace / "cache" / "fr.json") == fr
        assert service.calls == [("fr", ["title"])]
        assert result.outcomes == [Translated(locale="fr", added=1)]
        assert result.added == 1
        assert result.cached_sources

    @pytest.mark.asyncio
    async def test_nested_output_and_flat_cache(self, workspace, make_config):
        write_json(workspace / "src" / "en.json", {"home": {"title": "Hello", "body": "World"}})

        await SyncEngine(FakeService()).run(make_config())

        assert read_json(workspace / "translations" / "fr.json") == {
            "home": {"title": "[fr] Hello", "body": "[fr] World"}
        }
        assert read_json(workspace / "cache" / "fr.json") == {
            "home.title": "[fr] Hello",
            "home.body": "[fr] World",
        }

    @pytest.mark.asyncio
    async def test_natural_template_submits_keys(self, workspace, make_config):
        write_json(workspace / "src" / "en.json", {"Hello world": "Hello world", "Bye.": "Bye."})

        result = await SyncEngine(FakeService()).run(make_config())

        assert result.file_type == FileType.NATURAL
        assert read_json(workspace / "translations" / "fr.json") == {
            "Hello world": "[fr] Hello world",
            "Bye.": "[fr] Bye.",
        }

    @pytest.mark.asyncio
    async def test_source_files_are_cached(self, workspace, make_config):
        write_json(workspace / "src" / "en.json", {"title": "Hello"})

        await SyncEngine(FakeService()).run(make_config())

        assert read_json(workspace / "cache" / "en.json") == {"title": "Hello"}

    @pytest.mark.asyncio
    async def test_non_string_leaves_are_copied(self, workspace, make_config):
        write_json(workspace / "src" / "en.json", {"title": "Hello", "meta": {"version": 2}})
        service = FakeService()

        await SyncEngine(service).run(make_config())

        assert service.calls == [("fr", ["title"])]
        assert read_json(workspace / "translations" / "fr.json") == {
            "title": "[fr] Hello",
            "meta": {"version": 2},
        }


class TestIncrementalRuns:
    @pytest.mark.asyncio
    async def test_second_run_translates_nothing(self, workspace, make_config):
        write_json(workspace / "src" / "en.json", {"home": {"title": "Hello"}, "ok": "OK"})
        await SyncEngine(FakeService()).run(make_config())

        result = await SyncEngine(ForbiddenService()).run(make_config())

        assert result.outcomes == [
            Translated(locale="fr", added=0, unchanged=2, changed_from_cache=0)
        ]

    @pytest.mark.asyncio
    async def test_only_new_keys_are_translated(self, workspace, make_config):
        write_json(workspace / "src" / "en.json", {"a": "A"})
        await SyncEngine(FakeService()).run(make_config())
        write_json(workspace / "src" / "en.json", {"a": "A", "b": "B"})
        service = FakeService()

        await SyncEngine(service).run(make_config())

        assert service.calls == [("fr", ["b"])]
        assert read_json(workspace / "translations" / "fr.json") == {"a": "[fr] A", "b": "[fr] B"}

    @pytest.mark.asyncio
    async def test_value_drift_from_cache_is_retranslated(self, workspace, make_config):
        write_json(workspace / "src" / "en.json", {"a": "A", "b": "B"})
        await SyncEngine(FakeService()).run(make_config())
        write_json(workspace / "translations" / "fr.json", {"a": "[fr] A", "b": "edited"})
        service = FakeService()

        result = await SyncEngine(service).run(make_config())

        assert service.calls == [("fr", ["b"])]
        assert result.outcome_for("fr").changed_from_cache == 1
        assert read_json(workspace / "translations" / "fr.json")["b"] == "[fr] B"

    @pytest.mark.asyncio
    async def test_existing_translations_without_cache_are_kept(self, workspace, make_config):
        write_json(workspace / "src" / "en.json", {"a": "A", "b": "B"})
        write_json(workspace / "translations" / "fr.json", {"a": "Human A"})
        service = FakeService()

        await SyncEngine(service).run(make_config())

        assert service.calls == [("fr", ["b"])]
        assert read_json(workspace / "translations" / "fr.json") == {"a": "Human A", "b": "[fr] B"}

    @pytest.mark.asyncio
    async def test_source_changes_are_opt_in(self, workspace, make_config):
        write_json(workspace / "src" / "en.json", {"a": "A", "b": "B"})
        await SyncEngine(FakeService()).run(make_config())
        write_json(workspace / "src" / "en.json", {"a": "A", "b": "Better B"})

        # Dry run, so the cached template is not refreshed in between
        untouched = FakeService()
        await SyncEngine(untouched).run(make_config(dry_run=True))
        retranslated = FakeService()
        await SyncEngine(retranslated).run(make_config(retranslate_changed_source=True))

        assert untouched.calls == []
        assert retranslated.calls == [("fr", ["b"])]
        assert read_json(workspace / "translations" / "fr.json")["b"] == "[fr] Better B"

    @pytest.mark.asyncio
    async def test_natural_value_drift_is_retranslated(self, workspace, make_config):
        write_json(workspace / "src" / "en.json", {"Hello world": "Hello world", "Bye.": "Bye."})
        await SyncEngine(FakeService()).run(make_config())
        write_json(
            workspace / "translations" / "fr.json",
            {"Hello world": "[fr] Hello world", "Bye.": "edited"},
        )
        service = FakeService()

        result = await SyncEngine(service).run(make_config())

        assert service.calls == [("fr", ["Bye."])]
        assert result.outcome_for("fr").changed_from_cache == 1
        assert read_json(workspace / "translations" / "fr.json") == {
            "Hello world": "[fr] Hello world",
            "Bye.": "[fr] Bye.",
        }

    @pytest.mark.asyncio
    async def test_unchanged_keys_keep_their_translation(self, workspace, make_config):
        write_json(workspace / "src" / "en.json", {"a": "A", "b": "B"})
        write_json(workspace / "translations" / "fr.json", {"a": "Human A", "b": "Human B"})
        await SyncEngine(FakeService()).run(make_config())
        write_json(workspace / "src" / "en.json", {"a": "A", "b": "B", "c": "C"})
        service = FakeService()

        result = await SyncEngine(service).run(make_config())

        assert service.calls == [("fr", ["c"])]
        assert result.outcome_for("fr") == Translated(
            locale="fr", added=1, unchanged=2, changed_from_cache=0
        )
        assert read_json(workspace / "translations" / "fr.json") == {
            "a": "Human A",
            "b": "Human B",
            "c": "[fr] C",
        }


class TestKeyShapeChanges:
    @pytest.mark.asyncio
    async def test_string_becomes_group(self, workspace, make_config):
        (workspace / "locales.txt").write_text("en\nfr\nde\n", encoding="utf-8")
        write_json(workspace / "src" / "en.json", {"a": "A", "keep": "K"})
        await SyncEngine(FakeService()).run(make_config())
        write_json(workspace / "src" / "en.json", {"a": {"b": "B"}, "keep": "K"})
        service = FakeService()

        result = await SyncEngine(service).run(make_config())

        assert service.calls == [("fr", ["a.b"]), ("de", ["a.b"])]
        assert result.outcome_for("fr") == Translated(
            locale="fr", added=1, removed=1, unchanged=1, changed_from_cache=0
        )
        assert isinstance(result.outcome_for("de"), Translated)
        assert read_json(workspace / "translations" / "fr.json") == {
            "a": {"b": "[fr] B"},
            "keep": "[fr] K",
        }
        assert read_json(workspace / "cache" / "fr.json") == {"a.b": "[fr] B", "keep": "[fr] K"}

    @pytest.mark.asyncio
    async def test_group_becomes_string(self, workspace, make_config):
        write_json(workspace / "src" / "en.json", {"a": {"b": "B", "c": "C"}})
        await SyncEngine(FakeService()).run(make_config())
        write_json(workspace / "src" / "en.json", {"a": "A"})
        service = FakeService()

        result = await SyncEngine(service).run(make_config())

        assert service.calls == [("fr", ["a"])]
        assert result.removed == 2
        assert read_json(workspace / "translations" / "fr.json") == {"a": "[fr] A"}

    @pytest.mark.asyncio
    async def test_unrelated_unused_keys_are_still_kept(self, workspace, make_config):
        write_json(workspace / "src" / "en.json", {"a": {"b": "B"}})
        write_json(workspace / "translations" / "fr.json", {"a": "Old A", "ab": "Other"})

        await SyncEngine(FakeService()).run(make_config())

        assert read_json(workspace / "translations" / "fr.json") == {
            "ab": "Other",
            "a": {"b": "[fr] B"},
        }


class TestUnusedStrings:
    @pytest.mark.asyncio
    async def test_unused_keys_are_kept_by_default(self, workspace, make_config):
        write_json(workspace / "src" / "en.json", {"a": "A"})
        write_json(workspace / "translations" / "fr.json", {"a": "Un", "old": "Vieux"})

        result = await SyncEngine(FakeService()).run(make_config())

        assert read_json(workspace / "translations" / "fr.json") == {"a": "Un", "old": "Vieux"}
        assert result.removed == 0

    @pytest.mark.asyncio
    async def test_unused_keys_are_deleted_on_request(self, workspace, make_config):
        write_json(workspace / "src" / "en.json", {"a": "A"})
        write_json(workspace / "translations" / "fr.json", {"a": "Un", "old": "Vieux"})

        result = await SyncEngine(FakeService()).run(make_config(delete_unused_strings=True))

        assert read_json(workspace / "translations" / "fr.json") == {"a": "Un"}
        assert result.removed == 1

    @pytest.mark.asyncio
    async def test_unlisted_locale_files_are_deleted(self, workspace, make_config):
        write_json(workspace / "src" / "en.json", {"a": "A"})
        write_json(workspace / "translations" / "de.json", {"a": "Ah"})
        write_json(workspace / "cache" / "de.json", {"a": "Ah"})

        result = await SyncEngine(FakeService()).run(make_config(delete_unused_strings=True))

        assert result.deleted_files == ["de.json"]
        assert not (workspace / "translations" / "de.json").exists()
        assert not (workspace / "cache" / "de.json").exists()

    @pytest.mark.asyncio
    async def test_template_in_translations_dir_is_never_deleted(self, workspace, make_config):
        template = workspace / "translations" / "source.json"
        write_json(template, {"a": "A"})

        result = await SyncEngine(FakeService()).run(
            make_config(input_file=template, delete_unused_strings=True)
        )

        assert result.deleted_files == []
        assert template.exists()
        assert read_json(workspace / "translations" / "fr.json") == {"a": "[fr] A"}


class TestLocaleOutcomes:
    @pytest.mark.asyncio
    async def test_unsupported_locale_is_skipped(self, workspace, make_config):
        (workspace / "locales.txt").write_text("en\nxx\nfr\n", encoding="utf-8")
        write_json(workspace / "src" / "en.json", {"a": "A"})

        result = await SyncEngine(FakeService(unsupported={"xx"})).run(make_config())

        assert isinstance(result.outcomes[0], Skipped)
        assert result.outcomes[0].locale == "xx"
        assert isinstance(result.outcomes[1], Translated)
        assert not (workspace / "translations" / "xx.json").exists()

    @pytest.mark.asyncio
    async def test_provider_failure_aborts_the_run(self, workspace, make_config):
        (workspace / "locales.txt").write_text("en\nfr\nde\nit\n", encoding="utf-8")
        write_json(workspace / "src" / "en.json", {"a": "A"})
        service = FakeService(fail_on={"de"})

        with pytest.raises(ProviderCallError) as exc:
            await SyncEngine(service).run(make_config())

        assert exc.value.locale == "de"
        outcomes = exc.value.result.outcomes
        assert [o.locale for o in outcomes] == ["fr", "de"]
        assert isinstance(outcomes[1], Failed)
        # Work done before the failure stays on disk
        assert (workspace / "translations" / "fr.json").exists()
        assert not (workspace / "translations" / "de.json").exists()
        assert not (workspace / "translations" / "it.json").exists()
        assert not (workspace / "cache" / "en.json").exists()
        assert service.shut_down

    @pytest.mark.asyncio
    async def test_service_is_shut_down_after_a_run(self, workspace, make_config):
        write_json(workspace / "src" / "en.json", {"a": "A"})
        service = FakeService()

        await SyncEngine(service).run(make_config())

        assert service.initialized
        assert service.shut_down


class TestDryRun:
    @pytest.mark.asyncio
    async def test_nothing_is_written(self, workspace, make_config):
        write_json(workspace / "src" / "en.json", {"a": "A"})
        service = FakeService()

        result = await SyncEngine(service).run(make_config(dry_run=True))

        assert service.calls == [("fr", ["a"])]
        assert result.dry_run
        assert result.added == 1
        assert not (workspace / "translations").exists()
        assert not (workspace / "cache").exists()

    @pytest.mark.asyncio
    async def test_dry_run_service(self, workspace, make_config):
        write_json(workspace / "src" / "en.json", {"a": "A"})

        result = await SyncEngine().run(make_config(service="dry-run"))

        assert result.dry_run
        assert not (workspace / "translations").exists()


# =============================================================================
# Pre-checks and fatal errors
# =============================================================================


class TestInconsistencies:
    @pytest.mark.asyncio
    async def test_reported_but_left_alone(self, workspace, make_config):
        write_json(workspace / "src" / "en.json", {"Hi": "Hi", "Bye": "Bye!"})

        with pytest.warns(KeyConsistencyWarning):
            result = await SyncEngine(FakeService()).run(make_config(file_type=FileType.NATURAL))

        assert result.inconsistent_keys == ["Bye"]
        assert not result.fixed_inconsistencies
        assert read_json(workspace / "src" / "en.json") == {"Hi": "Hi", "Bye": "Bye!"}

    @pytest.mark.asyncio
    async def test_fixed_on_request(self, workspace, make_config):
        write_json(workspace / "src" / "en.json", {"Hi": "Hi", "Bye": "Bye!"})
        config = make_config(file_type=FileType.NATURAL, fix_inconsistencies=True)

        with pytest.warns(KeyConsistencyWarning):
            result = await SyncEngine(FakeService()).run(config)

        assert result.fixed_inconsistencies
        assert read_json(workspace / "src" / "en.json") == {"Hi": "Hi", "Bye": "Bye"}
        assert read_json(workspace / "cache" / "en.json") == {"Hi": "Hi", "Bye": "Bye"}


class TestFatalErrors:
    @pytest.mark.asyncio
    async def test_empty_locales_file(self, workspace, make_config):
        (workspace / "locales.txt").write_text("\n", encoding="utf-8")
        write_json(workspace / "src" / "en.json", {"a": "A"})

        with pytest.raises(ConfigurationError):
            await SyncEngine(FakeService()).run(make_config())

        assert not (workspace / "cache").exists()

    @pytest.mark.asyncio
    async def test_unknown_matcher(self, workspace, make_config):
        with pytest.raises(ConfigurationError):
            await SyncEngine(FakeService()).run(make_config(matcher="nope"))

    @pytest.mark.asyncio
    async def test_unknown_service(self, workspace, make_config):
        with pytest.raises(ConfigurationError):
            await SyncEngine().run(make_config(service="nope"))

    @pytest.mark.asyncio
    async def test_missing_template(self, workspace, make_config):
        with pytest.raises(MissingSourceFile):
            await SyncEngine(FakeService()).run(make_config())

    @pytest.mark.asyncio
    async def test_corrupt_locale_file(self, workspace, make_config):
        write_json(workspace / "src" / "en.json", {"a": "A"})
        (workspace / "translations").mkdir()
        (workspace / "translations" / "fr.json").write_text("{not json", encoding="utf-8")

        with pytest.raises(InvalidFileError) as exc:
            await SyncEngine(FakeService()).run(make_config())

        assert "Translation file" in str(exc.value)
        assert "fr.json" in str(exc.value)

    @pytest.mark.asyncio
    async def test_unsupported_source_language(self, workspace, make_config):
        write_json(workspace / "src" / "en.json", {"a": "A"})

        with pytest.raises(UnsupportedSourceLanguage):
            await SyncEngine(FakeService(source_supported=False)).run(make_config())

    @pytest.mark.asyncio
    async def test_invalid_keys_abort_the_run(self, workspace, make_config):
        write_json(workspace / "src" / "en.json", {"home.title": "Hello"})
        service = FakeService()

        with pytest.raises(InvalidKeyError) as exc:
            await SyncEngine(service).run(make_config(file_type=FileType.KEY_BASED))

        assert exc.value.keys == ["home.title"]
        assert service.calls == []
        assert not (workspace / "translations" / "fr.json").exists()
