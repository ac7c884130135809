"""
Supported locales.

Every component that returns a language returns a SupportedLanguage.
"""
from enum import Enum
from typing import Optional


class SupportedLanguage(str, Enum):
    """Closed set of storefront locales."""
    AR = "ar"
    EN_US = "en-US"
    NB_NO = "nb-NO"

    @property
    def provider_code(self) -> str:
        """Two-letter code understood by the public translation APIs."""
        return _PROVIDER_CODES[self]

    @property
    def english_name(self) -> str:
        """Name used when instructing the LLM translator."""
        return _ENGLISH_NAMES[self]

    @property
    def native_name(self) -> str:
        """Name used to tag offline mock translations."""
        return _NATIVE_NAMES[self]

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["SupportedLanguage"]:
        """Map a locale string (or provider code) to a member, None if unknown."""
        if value is None:
            return None
        if isinstance(value, cls):
            return value
        normalized = value.strip()
        for language in cls:
            if normalized == language.value or normalized.lower() == language.value.lower():
                return language
        for language, code in _PROVIDER_CODES.items():
            if normalized.lower() == code:
                return language
        return None


_PROVIDER_CODES = {
    SupportedLanguage.AR: "ar",
    SupportedLanguage.EN_US: "en",
    SupportedLanguage.NB_NO: "no",
}

_ENGLISH_NAMES = {
    SupportedLanguage.AR: "Arabic",
    SupportedLanguage.EN_US: "English (US)",
    SupportedLanguage.NB_NO: "Norwegian (Bokmål)",
}

_NATIVE_NAMES = {
    SupportedLanguage.AR: "العربية",
    SupportedLanguage.EN_US: "English",
    SupportedLanguage.NB_NO: "Norsk",
}
