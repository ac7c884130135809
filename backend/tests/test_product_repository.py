"""
Unit tests for the product repositories and Supabase settings.

The Supabase repository is tested against a mocked client, so query
construction and error wrapping are checked without a database.
"""
from unittest.mock import MagicMock

import pytest

from multisearch.core import database
from multisearch.core.database import SupabaseSettings, get_supabase_client
from multisearch.core.exceptions import RepositoryError
from multisearch.models.languages import SupportedLanguage
from multisearch.models.search import ProcessedSearchTerms
from multisearch.services.search.product_repository import (
    InMemoryProductRepository,
    SupabaseProductRepository,
    escape_like,
)
from multisearch.services.search.query_filter import QueryFilterBuilder

PRODUCTS = [
    {"name": "Running Shoes", "category": "Shoes", "brand": "Nordic", "is_published": True},
    {"name": "Smart Watch", "category": "Watches", "is_published": True},
    {"name": "Leather Shoes", "category": "Shoes"},
    {"name": "Shoe Horn", "category": "Accessories", "is_published": False},
]


def mock_client(rows):
    """Supabase client whose fluent query chain returns `rows`."""
    client = MagicMock()
    query = client.table.return_value.select.return_value.eq.return_value
    query.execute.return_value.data = rows
    query.ilike.return_value.limit.return_value.execute.return_value.data = rows
    return client


# ============================================
# Supabase settings
# ============================================

def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://catalog.supabase.co")
    monkeypatch.delenv("SUPABASE_SERVICE_KEY", raising=False)
    monkeypatch.setenv("SUPABASE_KEY", "anon-key")
    monkeypatch.setenv("SUPABASE_PRODUCTS_TABLE", "catalog_products")

    settings = SupabaseSettings.from_env()

    assert settings.key == "anon-key"
    assert settings.products_table == "catalog_products"
    assert settings.problem() is None


@pytest.mark.parametrize(
    "url,key",
    [(None, "key"), ("https://catalog.supabase.co", None), ("catalog.supabase.co", "key")],
)
def test_settings_problem(url, key):
    assert SupabaseSettings(url=url, key=key).problem()


def test_unconfigured_client_is_none(monkeypatch):
    monkeypatch.setattr(database, "_supabase_client", None)

    assert get_supabase_client(SupabaseSettings(url=None, key=None)) is None


# ============================================
# Supabase repository
# ============================================

def test_supabase_categories_distinct_and_sorted():
    client = mock_client([{"category": "Shoes"}, {"category": "Bags"}, {"category": "Shoes"}, {"category": None}])
    repository = SupabaseProductRepository(client=client, table="products")

    assert repository.get_published_categories() == ["Bags", "Shoes"]
    client.table.assert_called_with("products")
    client.table.return_value.select.return_value.eq.assert_called_with("is_published", True)


def test_supabase_product_names_query():
    client = mock_client([{"name": "Running Shoes"}, {"name": None}])
    repository = SupabaseProductRepository(client=client, table="products")

    names = repository.search_product_names("100%_sho", 3)

    assert names == ["Running Shoes"]
    query = client.table.return_value.select.return_value.eq.return_value
    query.ilike.assert_called_once_with("name", "%100\\%\\_sho%")
    query.ilike.return_value.limit.assert_called_once_with(3)


def test_supabase_zero_limit_skips_query():
    client = mock_client([])
    repository = SupabaseProductRepository(client=client, table="products")

    assert repository.search_product_names("sho", 0) == []
    client.table.assert_not_called()


def test_supabase_errors_are_wrapped():
    client = MagicMock()
    client.table.side_effect = ConnectionError("connection refused")
    repository = SupabaseProductRepository(client=client, table="products")

    with pytest.raises(RepositoryError) as exc_info:
        repository.get_published_categories()

    assert exc_info.value.operation == "get_published_categories"


def test_supabase_missing_client(monkeypatch):
    monkeypatch.setattr(database, "_supabase_client", None)
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    repository = SupabaseProductRepository(table="products")

    with pytest.raises(RepositoryError):
        repository.search_product_names("sho", 5)


def test_escape_like():
    assert escape_like("shoes") == "shoes"
    assert escape_like("50%_off\\") == "50\\%\\_off\\\\"


# ============================================
# In-memory repository
# ============================================

def test_in_memory_categories_skip_unpublished():
    repository = InMemoryProductRepository(PRODUCTS)

    assert repository.get_published_categories() == ["Shoes", "Watches"]


def test_in_memory_product_names():
    repository = InMemoryProductRepository(PRODUCTS)

    assert repository.search_product_names("SHOE", 5) == ["Running Shoes", "Leather Shoes"]
    assert repository.search_product_names("shoe", 1) == ["Running Shoes"]


def test_in_memory_find_with_filter():
    repository = InMemoryProductRepository(PRODUCTS)
    predicate = QueryFilterBuilder().build_filter(ProcessedSearchTerms(
        original_query="shoes",
        translated_queries=("shoes", "sko"),
        original_category="all",
        translated_categories=("all",),
        detected_language=SupportedLanguage.EN_US,
    ))

    found = repository.find(predicate)

    assert [p["name"] for p in found] == ["Running Shoes", "Leather Shoes"]
    assert len(repository.find(None)) == 3
