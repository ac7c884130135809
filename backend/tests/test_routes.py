"""
Integration tests for the HTTP API.

Global service instances are replaced with offline ones so no request
leaves the process.
"""
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from multisearch.core.rate_limit import SlidingWindowRateLimiter
from multisearch.main import app
from multisearch.models.translation import TranslationRequest, TranslationResponse
from multisearch.services.search import suggestions as suggestions_module
from multisearch.services.search import term_processor as term_processor_module
from multisearch.services.search.dictionaries import TermDictionaries
from multisearch.services.search.product_repository import InMemoryProductRepository
from multisearch.services.search.suggestions import SuggestionEngine
from multisearch.services.search.term_processor import SearchTermProcessor
from multisearch.services.translation import gateway as gateway_module
from multisearch.services.translation.gateway import TranslationGateway
from multisearch.services.translation.providers import TranslationProvider

PRODUCTS = [
    {"name": "Shiny Watch", "category": "Watches", "is_published": True},
    {"name": "Running Shoes", "category": "Shoes", "is_published": True},
]


class UpperProvider(TranslationProvider):
    name = "upper"

    async def translate(self, request: TranslationRequest) -> TranslationResponse:
        return TranslationResponse(
            translated_text=request.text.upper(),
            detected_source_language="en",
            confidence=0.5,
            provider=self.name,
        )


@pytest.fixture(scope="module")
def dictionaries():
    d = TermDictionaries()
    d.initialize()
    return d


def install_services(monkeypatch, dictionaries, gateway):
    monkeypatch.setattr(gateway_module, "_translation_gateway", gateway)
    monkeypatch.setattr(
        term_processor_module,
        "_search_term_processor",
        SearchTermProcessor(dictionaries=dictionaries, gateway=gateway),
    )
    monkeypatch.setattr(
        suggestions_module,
        "_suggestion_engine",
        SuggestionEngine(
            repository=InMemoryProductRepository(PRODUCTS),
            gateway=gateway,
            dictionaries=dictionaries,
        ),
    )


@pytest.fixture
def gateway(monkeypatch, dictionaries):
    gateway = TranslationGateway(providers=[UpperProvider()])
    install_services(monkeypatch, dictionaries, gateway)
    return gateway


@pytest.fixture
def client(gateway):
    return TestClient(app)


# ============================================
# Health and metrics
# ============================================

def test_health_check(client):
    response = client.get("/health/")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_translation_health(client):
    response = client.get("/health/translation")

    assert response.status_code == 200
    assert response.json()["providers"] == [{"name": "upper", "available": True}]


def test_metrics_endpoint(client):
    client.post("/translate", json={"text": "shoes", "target_language": "nb-NO"})

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "translation_cache_misses_total" in response.text
    assert "http_requests_total" in response.text


def test_trace_id_is_echoed(client):
    response = client.get("/health/", headers={"X-Trace-ID": "trace-abc"})

    assert response.headers["X-Trace-ID"] == "trace-abc"
    assert response.headers["X-Request-ID"]


# ============================================
# /search/terms
# ============================================

def test_terms_all_has_empty_filter(client):
    response = client.get("/search/terms", params={"q": "all", "category": "all"})

    assert response.status_code == 200
    data = response.json()
    assert data["translated_queries"] == ["all"]
    assert data["translated_categories"] == ["all"]
    assert data["filter"] == {}


def test_terms_query_only(client):
    data = client.get("/search/terms", params={"q": "shoes"}).json()

    assert data["translated_queries"][0] == "shoes"
    assert "sko" in data["translated_queries"]
    assert data["detected_language"] == "en-US"
    assert set(data["filter"]) == {"$or"}


def test_terms_query_and_category(client):
    data = client.get("/search/terms", params={"q": "shoes", "category": "Footwear"}).json()

    assert set(data["filter"]) == {"$and"}
    assert len(data["filter"]["$and"]) == 2


def test_terms_invalid_locale(client):
    response = client.get("/search/terms", params={"q": "shoes", "locale": "de-DE"})

    assert response.status_code == 422


# ============================================
# /search/suggestions and /search/language
# ============================================

def test_suggestions_short_query(client):
    data = client.get("/search/suggestions", params={"q": "s"}).json()

    assert data["suggestions"] == []
    assert data["spell_check"] is None


def test_suggestions_ranking(client):
    data = client.get("/search/suggestions", params={"q": "sh", "limit": 5}).json()

    assert data["suggestions"][0] == "SHOES"
    assert "Shiny Watch" in data["suggestions"]
    assert data["spell_check"] is None


def test_suggestions_with_spell_check(client):
    data = client.get("/search/suggestions", params={"q": "shos"}).json()

    assert data["spell_check"]["is_likely_misspelled"] is True
    assert data["spell_check"]["corrected_query"] == "shoes"
    assert data["spell_check"]["confidence"] == 0.9


def test_suggestions_detected_language_overrides_locale(client):
    data = client.get("/search/suggestions", params={"q": "shoes", "locale": "nb-NO"}).json()

    assert data["detected_language"] == "en-US"


def test_language_detection(client):
    response = client.get("/search/language", params={"q": "سوار"})

    assert response.json() == {"query": "سوار", "detected_language": "ar"}


def test_categories_translate(client):
    response = client.post(
        "/search/categories/translate",
        json={"categories": ["Shoes", "Watches"], "target_language": "nb-NO"},
    )

    assert response.status_code == 200
    assert response.json() == [
        {"original": "Shoes", "translated": "SHOES"},
        {"original": "Watches", "translated": "WATCHES"},
    ]


# ============================================
# /translate
# ============================================

def test_translate(client):
    response = client.post("/translate", json={"text": "shoes", "target_language": "ar"})

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "translated_text": "SHOES",
        "detected_source_language": "en",
        "confidence": 0.5,
    }


def test_translate_validation_error(client):
    response = client.post(
        "/translate",
        json={"text": "<script>alert(1)</script>", "target_language": "ar"},
        headers={"X-Trace-ID": "trace-400"},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["status_code"] == 400
    assert body["trace_id"] == "trace-400"


def test_translate_rate_limited(client, gateway):
    gateway.rate_limiter = SlidingWindowRateLimiter(limit=1, window_seconds=60)
    headers = {"X-Forwarded-For": "203.0.113.7, 10.0.0.1"}

    first = client.post("/translate", json={"text": "one", "target_language": "ar"}, headers=headers)
    second = client.post("/translate", json={"text": "two", "target_language": "ar"}, headers=headers)

    assert first.status_code == 200
    assert second.status_code == 429


def test_translate_unexpected_failure(client, monkeypatch):
    broken = AsyncMock(spec=TranslationGateway)
    broken.translate.side_effect = RuntimeError("boom")
    monkeypatch.setattr(gateway_module, "_translation_gateway", broken)

    response = client.post("/translate", json={"text": "shoes", "target_language": "ar"})

    assert response.status_code == 503
