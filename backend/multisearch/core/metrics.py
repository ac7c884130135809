"""
Prometheus metrics for the multilingual search service.

Metrics Categories:
- RED metrics for the HTTP surface
- Translation metrics: cache hits/misses, provider attempts and latency
- Search metrics: size of the expanded term sets, repository failures

Naming follows Prometheus conventions (_total for counters, _seconds for
durations).
"""
from prometheus_client import (
    Counter,
    Histogram,
    generate_latest,
    REGISTRY,
    CONTENT_TYPE_LATEST,
)

from multisearch.core.logging import get_logger

logger = get_logger(__name__)

registry = REGISTRY

# ============================================================================
# RED METRICS
# ============================================================================

http_requests_total = Counter(
    "http_requests_total",
    "Total number of HTTP requests",
    ["method", "endpoint", "status"],
    registry=registry,
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "endpoint"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
    registry=registry,
)

# ============================================================================
# TRANSLATION METRICS
# ============================================================================

translation_cache_hits_total = Counter(
    "translation_cache_hits_total",
    "Total number of translation cache hits",
    registry=registry,
)

translation_cache_misses_total = Counter(
    "translation_cache_misses_total",
    "Total number of translation cache misses",
    registry=registry,
)

translation_provider_requests_total = Counter(
    "translation_provider_requests_total",
    "Translation provider attempts",
    ["provider", "outcome"],  # outcome: success, failure
    registry=registry,
)

translation_provider_duration_seconds = Histogram(
    "translation_provider_duration_seconds",
    "Translation provider latency in seconds",
    ["provider"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
    registry=registry,
)

# ============================================================================
# SEARCH METRICS
# ============================================================================

search_terms_generated = Histogram(
    "search_terms_generated",
    "Number of expanded search terms per processed field",
    ["field"],  # query, category
    buckets=[1, 2, 5, 10, 20, 40, 80],
    registry=registry,
)

suggestion_repository_errors_total = Counter(
    "suggestion_repository_errors_total",
    "Product repository failures during suggestion generation",
    ["operation"],
    registry=registry,
)


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def record_http_request(
    method: str,
    endpoint: str,
    status_code: int,
    duration_seconds: float,
) -> None:
    """Record HTTP request count and latency."""
    if "?" in endpoint:
        endpoint = endpoint.split("?")[0]
    http_requests_total.labels(method=method, endpoint=endpoint, status=str(status_code)).inc()
    http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration_seconds)


def record_translation_cache_hit() -> None:
    translation_cache_hits_total.inc()


def record_translation_cache_miss() -> None:
    translation_cache_misses_total.inc()


def record_provider_attempt(provider: str, success: bool, duration_seconds: float) -> None:
    """Record one provider attempt in the translation waterfall."""
    outcome = "success" if success else "failure"
    translation_provider_requests_total.labels(provider=provider, outcome=outcome).inc()
    translation_provider_duration_seconds.labels(provider=provider).observe(duration_seconds)


def record_search_terms(field: str, count: int) -> None:
    search_terms_generated.labels(field=field).observe(count)


def record_repository_error(operation: str) -> None:
    suggestion_repository_errors_total.labels(operation=operation).inc()


def get_metrics() -> bytes:
    """Prometheus text exposition of the registry."""
    return generate_latest(registry)


def get_metrics_content_type() -> str:
    return CONTENT_TYPE_LATEST
