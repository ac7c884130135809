"""Translation gateway with provider waterfall and TTL cache."""

from .gateway import TranslationGateway, get_translation_gateway
from .providers import ProviderOutcome, TranslationProvider

__all__ = [
    "TranslationGateway",
    "get_translation_gateway",
    "ProviderOutcome",
    "TranslationProvider",
]
