"""
Health check endpoint.
"""
from fastapi import APIRouter

from multisearch.core.logging import get_logger
from multisearch.services.search.dictionaries import get_term_dictionaries
from multisearch.services.translation.gateway import get_translation_gateway

logger = get_logger(__name__)
router = APIRouter()


@router.get("/")
async def health_check():
    """
    Basic health check endpoint.
    """
    return {
        "status": "ok",
        "message": "API is running"
    }


@router.get("/translation")
async def translation_health():
    """
    Health of the translation gateway.

    Returns:
        Provider chain in waterfall order with availability, breaker state
        and cache size
    """
    gateway = get_translation_gateway()

    providers = []
    for provider in gateway.providers:
        entry = {"name": provider.name, "available": provider.is_available()}
        breaker = getattr(provider, "circuit_breaker", None)
        if breaker is not None:
            entry["circuit_state"] = breaker.state.value
        providers.append(entry)

    cache_size = len(gateway.cache) if hasattr(gateway.cache, "__len__") else None
    return {
        "status": "ok",
        "providers": providers,
        "cache_entries": cache_size,
    }


@router.get("/dictionaries")
async def dictionaries_health():
    dictionaries = get_term_dictionaries()
    return {
        "status": "ok",
        "path": str(dictionaries.dictionary_dir),
        "product_keywords": len(dictionaries.product_keywords()),
    }
