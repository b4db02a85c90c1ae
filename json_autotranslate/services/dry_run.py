"""
Dry-run service.

Echoes every string back untranslated and supports every language. The
engine writes nothing when this service is selected, so a dry run shows
what would be translated without touching any file.
"""

from __future__ import annotations

import logging
from typing import Sequence

from json_autotranslate.core.models import TranslatedString, TranslationItem
from json_autotranslate.services.base import TranslationService

logger = logging.getLogger(__name__)


class DryRunService(TranslationService):
    """Pretend to translate."""

    service_id = "dry-run"
    name = "Dry Run"

    def supports_language(self, code: str) -> bool:
        return True

    async def translate_strings(
        self,
        items: Sequence[TranslationItem],
        source_lang: str,
        target_lang: str,
    ) -> list[TranslatedString]:
        for item in items:
            logger.info(f"[{source_lang} -> {target_lang}] {item.key}: {item.value}")
        return [
            TranslatedString(key=item.key, value=item.value, translated=item.value)
            for item in items
        ]
