"""
Read-only product catalog access used by suggestions.

Only two query shapes are needed:
- distinct categories among published products
- published product names containing a substring (case-insensitive), limited to N
"""
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol

from multisearch.core.database import SupabaseSettings, get_supabase_client
from multisearch.core.exceptions import RepositoryError
from multisearch.core.logging import get_logger
from multisearch.services.search.query_filter import Predicate

logger = get_logger(__name__)

LIKE_WILDCARDS = ("\\", "%", "_")


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input matches literally."""
    for char in LIKE_WILDCARDS:
        value = value.replace(char, "\\" + char)
    return value


class ProductRepository(Protocol):
    def get_published_categories(self) -> List[str]:
        ...

    def search_product_names(self, substring: str, limit: int) -> List[str]:
        ...


class SupabaseProductRepository:
    """Product repository backed by the Supabase `products` table."""

    def __init__(self, client: Optional[Any] = None, table: Optional[str] = None):
        self._client = client
        self.table = table or SupabaseSettings.from_env().products_table

    def _get_client(self, operation: str) -> Any:
        if self._client is None:
            self._client = get_supabase_client()
        if self._client is None:
            raise RepositoryError(operation, "Supabase client not configured")
        return self._client

    def get_published_categories(self) -> List[str]:
        client = self._get_client("get_published_categories")
        try:
            response = (
                client.table(self.table)
                .select("category")
                .eq("is_published", True)
                .execute()
            )
        except Exception as e:
            raise RepositoryError("get_published_categories", str(e)) from e

        categories = {row.get("category") for row in (response.data or [])}
        return sorted(c for c in categories if c)

    def search_product_names(self, substring: str, limit: int) -> List[str]:
        if limit <= 0:
            return []

        client = self._get_client("search_product_names")
        try:
            response = (
                client.table(self.table)
                .select("name")
                .eq("is_published", True)
                .ilike("name", f"%{escape_like(substring)}%")
                .limit(limit)
                .execute()
            )
        except Exception as e:
            raise RepositoryError("search_product_names", str(e)) from e

        return [row["name"] for row in (response.data or []) if row.get("name")]


class InMemoryProductRepository:
    """List-backed repository for tests and local development."""

    def __init__(self, products: Optional[Iterable[Mapping[str, Any]]] = None):
        self.products: List[Dict[str, Any]] = [dict(p) for p in (products or [])]

    def _published(self) -> List[Dict[str, Any]]:
        return [p for p in self.products if p.get("is_published", True)]

    def get_published_categories(self) -> List[str]:
        return sorted({p["category"] for p in self._published() if p.get("category")})

    def search_product_names(self, substring: str, limit: int) -> List[str]:
        needle = substring.lower()
        names = [p["name"] for p in self._published() if p.get("name") and needle in p["name"].lower()]
        return names[:max(limit, 0)]

    def find(self, predicate: Optional[Predicate], limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Published products matching a filter predicate (None matches all)."""
        matched = [p for p in self._published() if predicate is None or predicate.matches(p)]
        return matched[:limit] if limit is not None else matched


_product_repository: Optional[ProductRepository] = None


def get_product_repository() -> ProductRepository:
    """Get global product repository instance."""
    global _product_repository

    if _product_repository is None:
        _product_repository = SupabaseProductRepository()
        logger.info("product_repository_initialized", backend="supabase")

    return _product_repository
