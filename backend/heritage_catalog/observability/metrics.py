"""
Counters for fail-closed degradations.

A rejected identifier silently widens a listing (no filter instead of an
error), so every such fallback is counted here and can be alerted on.
"""

from typing import Dict

from fastapi import FastAPI, Response
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, Counter, generate_latest

_PROM_COUNTERS: Dict[str, Counter] = {}

METRICS_PATH = "/metrics"

QUERY_FALLBACKS = "catalog_query_fallbacks_total"
LANGUAGE_COERCIONS = "catalog_language_coercions_total"


def _prom_counter(name: str, description: str, *, labelnames: tuple[str, ...]) -> Counter:
    metric = _PROM_COUNTERS.get(name)
    if metric is None:
        metric = Counter(name, description, labelnames=labelnames)
        _PROM_COUNTERS[name] = metric
    return metric


def _query_fallbacks() -> Counter:
    return _prom_counter(
        QUERY_FALLBACKS,
        "Query fragments replaced by their safe default",
        labelnames=("operation", "reason"),
    )


def _language_coercions() -> Counter:
    return _prom_counter(
        LANGUAGE_COERCIONS,
        "Language codes outside the whitelist coerced to the default",
        labelnames=("source",),
    )


def record_query_fallback(operation: str, reason: str) -> None:
    _query_fallbacks().labels(operation=operation, reason=reason).inc()


def record_language_coercion(source: str) -> None:
    _language_coercions().labels(source=source).inc()


def query_fallback_count(operation: str, reason: str) -> float:
    """Current value of the fallback counter for one label set."""
    _query_fallbacks()
    value = REGISTRY.get_sample_value(QUERY_FALLBACKS, {"operation": operation, "reason": reason})
    return value or 0.0


def language_coercion_count(source: str) -> float:
    _language_coercions()
    value = REGISTRY.get_sample_value(LANGUAGE_COERCIONS, {"source": source})
    return value or 0.0


def prometheus_latest() -> bytes:
    return generate_latest()


def install_metrics_endpoint(app: FastAPI, path: str = METRICS_PATH) -> None:
    """Expose the Prometheus text format at `path`."""

    @app.get(path, include_in_schema=False)
    async def _metrics() -> Response:
        return Response(content=prometheus_latest(), media_type=CONTENT_TYPE_LATEST)


__all__ = [
    "install_metrics_endpoint",
    "record_query_fallback",
    "record_language_coercion",
    "query_fallback_count",
    "language_coercion_count",
    "prometheus_latest",
]
