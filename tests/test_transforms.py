"""
Tests for the pure transforms: flatten/unflatten and file type detection.
"""

import pytest

from json_autotranslate.core.classifier import classify, find_inconsistent_keys, resolve_type
from json_autotranslate.core.errors import InvalidFileError, InvalidKeyError, UnsupportedValueError
from json_autotranslate.core.flatten import find_invalid_keys, flatten, unflatten
from json_autotranslate.core.models import FileType, TranslationFile


# =============================================================================
# Flatten / Unflatten
# =============================================================================


class TestFlatten:
    def test_nested_paths(self):
        doc = {"home": {"title": "Hello", "nav": {"back": "Back"}}, "ok": "OK"}

        assert flatten(doc) == {
            "home.title": "Hello",
            "home.nav.back": "Back",
            "ok": "OK",
        }

    @pytest.mark.parametrize("doc", [
        {},
        {"title": "Hello"},
        {"a": {"b": {"c": "deep"}}, "d": "flat"},
        {"count": 3, "ratio": 0.5, "enabled": True, "missing": None},
        {"empty": {}, "filled": {"x": "y"}},
    ])
    def test_round_trip(self, doc):
        assert unflatten(flatten(doc)) == doc

    def test_keeps_document_order(self):
        doc = {"z": "1", "a": {"m": "2", "b": "3"}}

        assert list(flatten(doc)) == ["z", "a.m", "a.b"]

    def test_arrays_are_rejected(self):
        with pytest.raises(UnsupportedValueError) as exc:
            flatten({"menu": {"items": ["a", "b"]}})

        assert exc.value.path == "menu.items"

    def test_separator_in_key_is_invalid(self):
        with pytest.raises(InvalidKeyError) as exc:
            flatten({"home": {"title.main": "Hello"}, "a.b": "c"})

        assert exc.value.keys == ["home.title.main", "a.b"]

    def test_non_strict_passes_flat_keys_through(self):
        flat = {"home.title": "Hello", "ok": "OK"}

        assert flatten(flat, strict=False) == flat

    def test_unflatten_conflicting_paths(self):
        with pytest.raises(InvalidKeyError):
            unflatten({"a": "leaf", "a.b": "child"})

    def test_find_invalid_keys(self):
        doc = {"ok": "fine", "bad.key": "x", "nested": {"also.bad": "y"}}

        assert find_invalid_keys(doc) == ["bad.key", "nested.also.bad"]


# =============================================================================
# Classifier
# =============================================================================


class TestClassify:
    def test_natural_file(self):
        assert classify({"Hello": "Hello", "Bye there": "Bye there"}) == FileType.NATURAL

    def test_period_in_key_is_natural(self):
        assert classify({"Done.": "Done."}) == FileType.NATURAL

    def test_key_based_file(self):
        assert classify({"home": {"title": "Hello"}, "ok": "OK"}) == FileType.KEY_BASED

    def test_empty_document_is_key_based(self):
        assert classify({}) == FileType.KEY_BASED

    def test_only_string_values_count(self):
        # A nested namespace with a space in its name is not a phrase
        assert classify({"main menu": {"open": "Open"}}) == FileType.KEY_BASED

    def test_top_level_must_be_object(self):
        with pytest.raises(InvalidFileError):
            classify(["a", "b"])

    def test_requested_type_bypasses_detection(self):
        doc = {"Hello world": "Hello world"}

        assert resolve_type(doc, FileType.KEY_BASED) == FileType.KEY_BASED
        assert resolve_type(doc, "auto") == FileType.NATURAL


class TestInconsistentKeys:
    def test_reports_drifted_values(self):
        file = TranslationFile(
            name="en.json",
            type=FileType.NATURAL,
            original_content={"Hi": "Hi", "Bye": "Bye!"},
            content={"Hi": "Hi", "Bye": "Bye!"},
        )

        assert find_inconsistent_keys(file) == ["Bye"]

    def test_key_based_files_are_never_inconsistent(self):
        file = TranslationFile(
            name="en.json",
            type=FileType.KEY_BASED,
            original_content={"title": "Hello"},
            content={"title": "Hello"},
        )

        assert find_inconsistent_keys(file) == []
