"""
Language table for the LLM service.

Locale codes in the locales file can be regional ("pt-BR", "zh_TW"). The
LLM is prompted with a human-readable language name, so a code is
supported when it, or its base language, has a name here.
"""

from __future__ import annotations


LANGUAGE_NAMES: dict[str, str] = {
    # Major world languages
    "en": "English",
    "es": "Spanish",
    "zh": "Chinese (Simplified)",
    "zh-tw": "Chinese (Traditional)",
    "zh-hant": "Chinese (Traditional)",
    "pt": "Portuguese",
    "pt-br": "Portuguese (Brazil)",
    "fr": "French",
    "de": "German",
    "ja": "Japanese",
    "ko": "Korean",
    "it": "Italian",
    "ru": "Russian",
    # Regional
    "nl": "Dutch",
    "pl": "Polish",
    "vi": "Vietnamese",
    "th": "Thai",
    "tr": "Turkish",
    "id": "Indonesian",
    "ms": "Malay",
    "tl": "Tagalog",
    # European
    "sv": "Swedish",
    "no": "Norwegian",
    "nb": "Norwegian Bokmål",
    "da": "Danish",
    "fi": "Finnish",
    "el": "Greek",
    "cs": "Czech",
    "sk": "Slovak",
    "hu": "Hungarian",
    "ro": "Romanian",
    "bg": "Bulgarian",
    "hr": "Croatian",
    "sr": "Serbian",
    "sl": "Slovenian",
    "uk": "Ukrainian",
    "lt": "Lithuanian",
    "lv": "Latvian",
    "et": "Estonian",
    "ca": "Catalan",
    # Indian
    "hi": "Hindi",
    "bn": "Bengali",
    "ta": "Tamil",
    "te": "Telugu",
    "mr": "Marathi",
    "gu": "Gujarati",
    "kn": "Kannada",
    "ml": "Malayalam",
    "pa": "Punjabi",
    # Right-to-left
    "ar": "Arabic",
    "he": "Hebrew",
    "fa": "Persian",
    "ur": "Urdu",
    # African
    "sw": "Swahili",
    "am": "Amharic",
    "ha": "Hausa",
    "yo": "Yoruba",
    "zu": "Zulu",
}


def normalize_language_code(code: str) -> str:
    """`pt_BR` -> `pt-br`."""
    return code.strip().replace("_", "-").lower()


def get_language_name(code: str) -> str | None:
    """Human-readable name for a code, falling back to its base language."""
    code = normalize_language_code(code)
    if code in LANGUAGE_NAMES:
        return LANGUAGE_NAMES[code]
    return LANGUAGE_NAMES.get(code.split("-")[0])


def is_supported(code: str) -> bool:
    return get_language_name(code) is not None
