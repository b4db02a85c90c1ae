"""
Translation services.

Services are looked up by name:

    service = get_service("deepl")
    await service.initialize(api_key, get_matcher("icu"))
"""

from __future__ import annotations

from json_autotranslate.core.errors import ConfigurationError
from json_autotranslate.services.base import TranslationService
from json_autotranslate.services.deepl import DeepLFreeService, DeepLService
from json_autotranslate.services.dry_run import DryRunService
from json_autotranslate.services.llm import LLMService
from json_autotranslate.services.manual import ManualService

SERVICES: dict[str, type[TranslationService]] = {
    DryRunService.service_id: DryRunService,
    ManualService.service_id: ManualService,
    DeepLService.service_id: DeepLService,
    DeepLFreeService.service_id: DeepLFreeService,
    LLMService.service_id: LLMService,
}


def list_services() -> list[str]:
    return list(SERVICES.keys())


def get_service(name: str) -> TranslationService:
    """Create a service by name."""
    if name not in SERVICES:
        raise ConfigurationError(f"The service {name} doesn't exist.")
    return SERVICES[name]()


__all__ = [
    "TranslationService",
    "DryRunService",
    "ManualService",
    "DeepLService",
    "DeepLFreeService",
    "LLMService",
    "SERVICES",
    "list_services",
    "get_service",
]
