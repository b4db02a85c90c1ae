"""
Manual service - the user types each translation.

Prompts on the terminal for every string. Leaving a prompt empty keeps the
source value.
"""

from __future__ import annotations

import asyncio
from typing import Sequence

from json_autotranslate.core.models import TranslatedString, TranslationItem
from json_autotranslate.services.base import TranslationService


class ManualService(TranslationService):
    """Interactive translation from stdin."""

    service_id = "manual"
    name = "Manual Translation"

    def supports_language(self, code: str) -> bool:
        return True

    async def translate_strings(
        self,
        items: Sequence[TranslationItem],
        source_lang: str,
        target_lang: str,
    ) -> list[TranslatedString]:
        results = []
        for item in items:
            print(f"\033[1m'{item.key}' '{item.value}'\033[0m => {target_lang}")
            answer = await asyncio.to_thread(input, "=> ")
            results.append(
                TranslatedString(
                    key=item.key,
                    value=item.value,
                    translated=answer.strip() or item.value,
                )
            )
        return results
