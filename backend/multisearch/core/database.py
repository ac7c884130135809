"""
Supabase connection for the read-only product catalog.

Settings come from the environment; a `.env` file at the repository root
is loaded on import.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from supabase import create_client, Client

from multisearch.core.logging import get_logger

logger = get_logger(__name__)

env_path = Path(__file__).parent.parent.parent.parent / ".env"

if env_path.exists():
    load_dotenv(env_path)
    logger.info("env_loaded", env_path=str(env_path))


@dataclass(frozen=True)
class SupabaseSettings:
    url: Optional[str]
    key: Optional[str]
    products_table: str = "products"

    @classmethod
    def from_env(cls) -> "SupabaseSettings":
        return cls(
            url=os.getenv("SUPABASE_URL"),
            key=os.getenv("SUPABASE_SERVICE_KEY") or os.getenv("SUPABASE_KEY"),
            products_table=os.getenv("SUPABASE_PRODUCTS_TABLE", "products"),
        )

    def problem(self) -> Optional[str]:
        """Why these settings cannot produce a client, or None when they can."""
        if not self.url or not self.key:
            return "SUPABASE_URL and SUPABASE_SERVICE_KEY must be set"
        if not self.url.startswith("http"):
            return "SUPABASE_URL should start with http:// or https://"
        return None


_supabase_client: Optional[Client] = None


def get_supabase_client(settings: Optional[SupabaseSettings] = None) -> Optional[Client]:
    """
    Get the shared Supabase client.

    Returns None (and logs why) when the catalog is not configured, so
    callers can degrade instead of failing at import time.
    """
    global _supabase_client

    if _supabase_client is not None:
        return _supabase_client

    settings = settings or SupabaseSettings.from_env()
    problem = settings.problem()
    if problem:
        logger.warning("supabase_not_configured", reason=problem)
        return None

    try:
        _supabase_client = create_client(settings.url, settings.key)
    except Exception as e:
        logger.error(
            "supabase_client_creation_failed",
            error=str(e),
            error_type=type(e).__name__,
            exc_info=True,
        )
        return None

    logger.info("supabase_client_created", url_prefix=settings.url[:30])
    return _supabase_client
