"""
LLM-powered translation service.

Uses DSPy signatures to translate a whole batch in one call, falling back
to one call per string when the model returns the wrong number of results.
Interpolations are replaced with placeholder tags before prompting and put
back afterwards.

`--config` selects the model as `provider` or `provider:model`
(e.g. `openai:gpt-4o`); without it the LLM_PROVIDER setting is used.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Sequence

import dspy
from tenacity import retry, stop_after_attempt, wait_exponential

from json_autotranslate.core.models import TranslatedString, TranslationItem
from json_autotranslate.matchers import Matcher
from json_autotranslate.services.base import TranslationService
from json_autotranslate.services.client import get_lm
from json_autotranslate.services.languages import get_language_name, is_supported

logger = logging.getLogger(__name__)

CONTEXT = (
    "user interface strings of a software application; "
    'keep every <span translate="no">...</span> tag exactly as it is'
)


# =============================================================================
# DSPy Signatures
# =============================================================================


class TranslateText(dspy.Signature):
    """Translate text while preserving meaning, tone, and style."""

    text: str = dspy.InputField(desc="Text to translate")
    source_language: str = dspy.InputField(desc="Source language name")
    target_language: str = dspy.InputField(desc="Target language name")
    context: str = dspy.InputField(desc="Context about the text")

    translated_text: str = dspy.OutputField(desc="Translated text")


class TranslateBatch(dspy.Signature):
    """Translate multiple texts efficiently."""

    texts: list[str] = dspy.InputField(desc="List of texts to translate")
    source_language: str = dspy.InputField(desc="Source language name")
    target_language: str = dspy.InputField(desc="Target language name")
    context: str = dspy.InputField(desc="Shared context for all texts")

    translated_texts: list[str] = dspy.OutputField(desc="List of translated texts in same order")


# =============================================================================
# Service
# =============================================================================


class LLMService(TranslationService):
    """Translate with a large language model through DSPy."""

    service_id = "llm"
    name = "LLM Translator"

    def __init__(
        self,
        lm: dspy.LM | None = None,
        batch_module: Any = None,
        translate_module: Any = None,
    ):
        super().__init__()
        self.lm = lm
        self._batch_module = batch_module
        self._translate_module = translate_module

    @property
    def batch_module(self) -> Any:
        if self._batch_module is None:
            self._batch_module = dspy.Predict(TranslateBatch)
        return self._batch_module

    @property
    def translate_module(self) -> Any:
        if self._translate_module is None:
            self._translate_module = dspy.Predict(TranslateText)
        return self._translate_module

    async def initialize(self, config: str | None = None, matcher: Matcher | None = None) -> None:
        await super().initialize(config, matcher)
        if self.lm is None and self._batch_module is None:
            provider, _, model = (config or "").partition(":")
            self.lm = get_lm(provider or None, model or None)

    def supports_language(self, code: str) -> bool:
        return is_supported(code)

    def _predict(self, module: Any, **kwargs: Any) -> Any:
        if self.lm is None:
            return module(**kwargs)
        with dspy.context(lm=self.lm):
            return module(**kwargs)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=4, max=10),
        reraise=True,
    )
    async def _translate_batch(self, texts: list[str], source: str, target: str) -> list[str]:
        result = await asyncio.to_thread(
            self._predict,
            self.batch_module,
            texts=texts,
            source_language=source,
            target_language=target,
            context=CONTEXT,
        )
        translations = list(result.translated_texts)

        if len(translations) != len(texts):
            logger.warning(
                f"{self.name} returned {len(translations)} translations for "
                f"{len(texts)} texts, translating one by one"
            )
            translations = [await self._translate_one(text, source, target) for text in texts]

        return [t.strip() for t in translations]

    async def _translate_one(self, text: str, source: str, target: str) -> str:
        result = await asyncio.to_thread(
            self._predict,
            self.translate_module,
            text=text,
            source_language=source,
            target_language=target,
            context=CONTEXT,
        )
        return result.translated_text

    async def translate_strings(
        self,
        items: Sequence[TranslationItem],
        source_lang: str,
        target_lang: str,
    ) -> list[TranslatedString]:
        if not items:
            return []

        protected = [self.protect(item.value) for item in items]
        translations = await self._translate_batch(
            [text for text, _ in protected],
            get_language_name(source_lang) or source_lang,
            get_language_name(target_lang) or target_lang,
        )

        return [
            TranslatedString(
                key=item.key,
                value=item.value,
                translated=self.restore(translated, replacements),
            )
            for item, (_, replacements), translated in zip(items, protected, translations)
        ]
