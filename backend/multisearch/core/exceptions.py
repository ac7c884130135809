"""
Exception taxonomy for the multilingual search core.

Only ValidationError (and RateLimitExceededError when a real rate limiter
is plugged in) ever reaches callers of the translation gateway. Provider
and repository errors are caught at their degradation seams and logged.
"""
from typing import Optional


class MultisearchError(Exception):
    """Base class for all multisearch errors."""
    pass


class ValidationError(MultisearchError):
    """Translation input is empty, oversized or contains an injection pattern."""
    pass


class RateLimitExceededError(MultisearchError):
    """Client exceeded the configured translation rate limit."""

    def __init__(self, client_id: str):
        super().__init__("Rate limit exceeded. Please try again later.")
        self.client_id = client_id


class ProviderError(MultisearchError):
    """A translation provider failed (network, non-2xx, unparseable payload)."""

    def __init__(self, provider: str, message: str, status_code: Optional[int] = None):
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.status_code = status_code


class RepositoryError(MultisearchError):
    """The product repository could not be reached or returned an error."""

    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation}: {message}")
        self.operation = operation
