"""
Core application modules.
Contains logging, error types, resilience helpers and the catalog connection.
"""
from .exceptions import (
    MultisearchError,
    ValidationError,
    RateLimitExceededError,
    ProviderError,
    RepositoryError,
)

__all__ = [
    "MultisearchError",
    "ValidationError",
    "RateLimitExceededError",
    "ProviderError",
    "RepositoryError",
]
