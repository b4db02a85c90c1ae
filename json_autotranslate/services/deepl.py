"""
DeepL translation service.

Talks to the DeepL REST API with httpx. Interpolations are wrapped in
`<span translate="no">` placeholders and DeepL is asked to respect HTML
tags, so template variables come back untouched.

The API key comes from `--config` or the DEEPL_API_KEY setting.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from json_autotranslate.config import get_settings
from json_autotranslate.core.errors import ConfigurationError
from json_autotranslate.core.models import TranslatedString, TranslationItem
from json_autotranslate.matchers import Matcher
from json_autotranslate.services.base import TranslationService

logger = logging.getLogger(__name__)

# DeepL accepts at most 50 texts per request
BATCH_SIZE = 50
RETRYABLE_STATUS = {429, 500, 502, 503, 504}


def _is_retryable(error: BaseException) -> bool:
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code in RETRYABLE_STATUS
    return isinstance(error, httpx.TransportError)


class DeepLService(TranslationService):
    """DeepL Pro API."""

    service_id = "deepl"
    name = "DeepL"
    base_url = "https://api.deepl.com"

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
        super().__init__()
        self._transport = transport
        self._api_key: str | None = None
        self._source_languages: set[str] = set()
        self._target_languages: set[str] = set()

    async def initialize(self, config: str | None = None, matcher: Matcher | None = None) -> None:
        await super().initialize(config, matcher)
        self._api_key = config or get_settings().deepl_api_key
        if not self._api_key:
            raise ConfigurationError(
                f"{self.name} needs an API key: pass it with --config or set DEEPL_API_KEY"
            )

        self._source_languages = await self._fetch_languages("source")
        self._target_languages = await self._fetch_languages("target")
        logger.debug(
            f"{self.name} supports {len(self._source_languages)} source and "
            f"{len(self._target_languages)} target languages"
        )

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Authorization": f"DeepL-Auth-Key {self._api_key}"},
            transport=self._transport,
            timeout=30.0,
        )

    @retry(
        retry=retry_if_exception(_is_retryable),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=4, max=10),
        reraise=True,
    )
    async def _fetch_languages(self, kind: str) -> set[str]:
        async with self._client() as client:
            response = await client.get("/v2/languages", params={"type": kind})
            response.raise_for_status()
            return {lang["language"].upper() for lang in response.json()}

    # =========================================================================
    # Language codes
    # =========================================================================

    @staticmethod
    def _normalize(code: str) -> str:
        return code.strip().replace("_", "-").upper()

    def _resolve(self, code: str, available: set[str]) -> str | None:
        """Map a locale code to the DeepL code, e.g. `pt` -> `PT-BR`, `de-at` -> `DE`."""
        code = self._normalize(code)
        if code in available:
            return code
        base = code.split("-")[0]
        if base in available:
            return base
        regional = sorted(lang for lang in available if lang.startswith(f"{base}-"))
        return regional[0] if regional else None

    def supports_language(self, code: str) -> bool:
        return self._resolve(code, self._target_languages) is not None

    def supports_source_language(self, code: str) -> bool:
        return self._resolve(code, self._source_languages) is not None

    # =========================================================================
    # Translation
    # =========================================================================

    async def translate_strings(
        self,
        items: Sequence[TranslationItem],
        source_lang: str,
        target_lang: str,
    ) -> list[TranslatedString]:
        source = self._resolve(source_lang, self._source_languages)
        target = self._resolve(target_lang, self._target_languages)

        results: list[TranslatedString] = []
        for start in range(0, len(items), BATCH_SIZE):
            batch = list(items[start:start + BATCH_SIZE])
            protected = [self.protect(item.value) for item in batch]
            translations = await self._translate_batch(
                [text for text, _ in protected], source, target
            )
            for item, (_, replacements), translated in zip(batch, protected, translations):
                results.append(
                    TranslatedString(
                        key=item.key,
                        value=item.value,
                        translated=self.restore(translated, replacements),
                    )
                )
        return results

    @retry(
        retry=retry_if_exception(_is_retryable),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=4, max=10),
        reraise=True,
    )
    async def _translate_batch(
        self,
        texts: list[str],
        source: str | None,
        target: str | None,
    ) -> list[str]:
        data: dict[str, Any] = {
            "text": texts,
            "target_lang": target,
            "tag_handling": "html",
        }
        if source:
            data["source_lang"] = source

        async with self._client() as client:
            response = await client.post("/v2/translate", data=data)
            if response.status_code != 200:
                logger.error(f"{self.name} translation failed: {response.text}")
            response.raise_for_status()

            translations = response.json()["translations"]
            if len(translations) != len(texts):
                raise ValueError(
                    f"{self.name} returned {len(translations)} translations for {len(texts)} texts"
                )
            return [t["text"] for t in translations]


class DeepLFreeService(DeepLService):
    """DeepL API Free plan."""

    service_id = "deepl-free"
    name = "DeepL Free"
    base_url = "https://api-free.deepl.com"
