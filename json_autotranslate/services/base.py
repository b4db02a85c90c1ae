"""
Base class for all translation services.

A service is the external collaborator that actually translates strings.
The synchronization engine treats it as opaque: it initializes it, asks
which languages it supports and awaits `translate_strings`. Retrying is the
service's business; the engine never retries.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from json_autotranslate.core.models import TranslatedString, TranslationItem
from json_autotranslate.matchers import Matcher, protect, restore


class TranslationService(ABC):
    """
    Base class for all translation services.

    Example:
        class UppercaseService(TranslationService):
            service_id = "uppercase"

            def supports_language(self, code: str) -> bool:
                return True

            async def translate_strings(self, items, source_lang, target_lang):
                return [
                    TranslatedString(key=i.key, value=i.value, translated=i.value.upper())
                    for i in items
                ]
    """

    #: Human-readable name used in reports
    name: str = "translation service"

    @property
    @abstractmethod
    def service_id(self) -> str:
        """Unique identifier used to select this service."""
        pass

    def __init__(self):
        self.matcher: Matcher | None = None
        self.config: str | None = None

    async def initialize(self, config: str | None = None, matcher: Matcher | None = None) -> None:
        """
        Prepare the service before any call.

        Args:
            config: Service-specific parameter (API key, path to a key file, ...)
            matcher: Interpolation matcher to protect placeholders with
        """
        self.config = config
        self.matcher = matcher

    @abstractmethod
    def supports_language(self, code: str) -> bool:
        """Whether the service can translate from/into `code`."""
        pass

    def supports_source_language(self, code: str) -> bool:
        return self.supports_language(code)

    @abstractmethod
    async def translate_strings(
        self,
        items: Sequence[TranslationItem],
        source_lang: str,
        target_lang: str,
    ) -> list[TranslatedString]:
        """
        Translate a batch of strings.

        Returns one result per item, keyed like the input. Failures raise.
        """
        pass

    async def shutdown(self) -> None:
        """Release resources held by the service."""
        pass

    def protect(self, text: str) -> tuple[str, list[str]]:
        return protect(text, self.matcher)

    def restore(self, text: str, replacements: list[str]) -> str:
        return restore(text, replacements)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.service_id})>"
