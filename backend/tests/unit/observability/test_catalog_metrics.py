"""
Tests for fail-closed degradation counters
"""

from fastapi import FastAPI
from fastapi.testclient import TestClient
from prometheus_client import CONTENT_TYPE_LATEST

from heritage_catalog.observability.metrics import (
    LANGUAGE_COERCIONS,
    QUERY_FALLBACKS,
    install_metrics_endpoint,
    language_coercion_count,
    prometheus_latest,
    query_fallback_count,
    record_language_coercion,
    record_query_fallback,
)


class TestCatalogMetrics:
    def test_query_fallback_counter(self):
        before = query_fallback_count("order", "unit_test")
        record_query_fallback("order", "unit_test")
        record_query_fallback("order", "unit_test")
        assert query_fallback_count("order", "unit_test") == before + 2

    def test_language_coercion_counter(self):
        before = language_coercion_count("unit_test")
        record_language_coercion("unit_test")
        assert language_coercion_count("unit_test") == before + 1

    def test_unseen_labels_read_as_zero(self):
        assert query_fallback_count("never", "seen") == 0.0

    def test_exposition(self):
        record_query_fallback("search", "empty_term")
        record_language_coercion("request")
        body = prometheus_latest().decode("utf-8")
        assert QUERY_FALLBACKS in body
        assert LANGUAGE_COERCIONS in body

    def test_metrics_endpoint(self):
        app = FastAPI()
        install_metrics_endpoint(app)
        record_query_fallback("projection", "invalid_alias")

        response = TestClient(app).get("/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith(CONTENT_TYPE_LATEST.split(";")[0])
        assert 'operation="projection",reason="invalid_alias"' in response.text
