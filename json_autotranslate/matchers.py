"""
Interpolation matchers.

A matcher finds template variables ("{name}", "{{count}}", "%s") so that a
translation service can hide them from the provider and put them back
afterwards:

    text, replacements = protect("Hello {name}", get_matcher("icu"))
    # 'Hello <span translate="no">0</span>'
    restore(translated, replacements)
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from json_autotranslate.core.errors import ConfigurationError


@dataclass(frozen=True)
class Matcher:
    """A named placeholder pattern. `pattern=None` matches nothing."""

    name: str
    pattern: re.Pattern[str] | None

    def find(self, text: str) -> list[str]:
        if self.pattern is None:
            return []
        return [m.group(0) for m in self.pattern.finditer(text)]


MATCHERS: dict[str, Matcher] = {
    "icu": Matcher("icu", re.compile(r"{\s*(\S+?)\s*}")),
    "i18next": Matcher("i18next", re.compile(r"{{.+?}}")),
    "sprintf": Matcher("sprintf", re.compile(r"%.")),
    "none": Matcher("none", None),
}


def list_matchers() -> list[str]:
    return list(MATCHERS.keys())


def get_matcher(name: str) -> Matcher:
    """Look up a matcher by name."""
    if name not in MATCHERS:
        raise ConfigurationError(f"The matcher {name} doesn't exist.")
    return MATCHERS[name]


def placeholder(index: int) -> str:
    return f'<span translate="no">{index}</span>'


def protect(text: str, matcher: Matcher | None) -> tuple[str, list[str]]:
    """Replace every interpolation with an untranslatable placeholder."""
    if matcher is None or matcher.pattern is None:
        return text, []

    replacements: list[str] = []

    def substitute(match: re.Match[str]) -> str:
        replacements.append(match.group(0))
        return placeholder(len(replacements) - 1)

    return matcher.pattern.sub(substitute, text), replacements


def restore(text: str, replacements: list[str]) -> str:
    """Put the original interpolations back in place of the placeholders."""
    for index, original in enumerate(replacements):
        text = text.replace(placeholder(index), original)
    return text
