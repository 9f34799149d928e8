"""
Unit tests for the result cache, fingerprinting and in-process metrics.
"""

import re

import pytest

from chromalab.config import Config
from chromalab.services.cache import ExtractionCache, InMemoryLRUCache
from chromalab.services.fingerprint import compute_sha256, extraction_cache_key, generate_cache_key_digest
from chromalab.utils.ids import generate_request_id
from chromalab.utils.metrics import MetricsCollector

EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


class TestFingerprint:

    def test_sha256(self):
        assert compute_sha256(b"") == EMPTY_SHA256

    def test_digest_ignores_param_order(self):
        assert generate_cache_key_digest({"a": 1, "b": 2}) == generate_cache_key_digest({"b": 2, "a": 1})

    def test_extraction_key_depends_on_every_parameter(self):
        base = extraction_cache_key(EMPTY_SHA256, 5, 1, 42, 1024)
        assert base.startswith(f"ext:{EMPTY_SHA256}:")
        assert base == extraction_cache_key(EMPTY_SHA256, 5, 1, 42, 1024)
        assert base != extraction_cache_key(EMPTY_SHA256, 5, 1, 43, 1024)
        assert base != extraction_cache_key(EMPTY_SHA256, 6, 1, 42, 1024)
        assert base != extraction_cache_key(EMPTY_SHA256, 5, 2, 42, 1024)
        assert base != extraction_cache_key(EMPTY_SHA256, 5, 1, 42, 512)


class TestInMemoryLRUCache:
    """LRU eviction and expiry"""

    def test_set_get(self):
        cache = InMemoryLRUCache(max_size=2)
        cache.set("a", 1)
        assert cache.get("a") == 1
        assert cache.exists("a")
        assert cache.get("missing") is None

    def test_evicts_least_recently_used(self):
        cache = InMemoryLRUCache(max_size=2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.get("a")
        cache.set("c", 3)
        assert cache.get("b") is None
        assert cache.get("a") == 1
        assert cache.get("c") == 3
        assert len(cache) == 2

    def test_expired_entries_dropped(self):
        cache = InMemoryLRUCache()
        cache.set("a", 1, ttl=-1)
        assert cache.get("a") is None
        assert len(cache) == 0

    def test_delete_and_clear(self):
        cache = InMemoryLRUCache()
        cache.set("a", 1)
        assert cache.delete("a") is True
        assert cache.delete("a") is False
        cache.set("b", 2)
        cache.clear()
        assert len(cache) == 0


class TestExtractionCache:

    def test_hits_and_misses(self):
        cache = ExtractionCache(InMemoryLRUCache(8), ttl=60)
        assert cache.get(EMPTY_SHA256, 3, 1, 42, 1024) is None
        cache.set(EMPTY_SHA256, 3, 1, 42, 1024, {"colors": []})
        assert cache.get(EMPTY_SHA256, 3, 1, 42, 1024) == {"colors": []}
        assert cache.get(EMPTY_SHA256, 3, 1, 7, 1024) is None
        assert cache.get_cache_stats() == {"hits": 1, "misses": 2, "hit_rate": pytest.approx(1 / 3)}

    def test_clear_resets_stats(self):
        cache = ExtractionCache(InMemoryLRUCache(8), ttl=60)
        cache.get(EMPTY_SHA256, 3, 1, 42, 1024)
        cache.clear()
        assert cache.get_cache_stats() == {"hits": 0, "misses": 0, "hit_rate": 0.0}


class TestMetricsCollector:

    def test_counters(self):
        metrics = MetricsCollector()
        metrics.increment_request_count("colors")
        metrics.increment_request_count("images")
        metrics.increment_failure_count("parse")
        metrics.increment_cache(hit=True)
        metrics.increment_cache(hit=False)
        counters = metrics.get_counters()
        assert counters["requests_total"] == 2
        assert counters["requests_total_colors"] == 1
        assert counters["failed_total_parse"] == 1
        assert counters["cache_hits_total"] == 1
        assert counters["cache_misses_total"] == 1

    def test_timing_stats(self):
        metrics = MetricsCollector()
        for value in (10.0, 20.0, 30.0, 40.0, 50.0):
            metrics.record_timing("kmeans", value)
        stats = metrics.get_timing_stats()["kmeans_duration_ms"]
        assert stats["count"] == 5
        assert stats["mean"] == 30.0
        assert stats["p50"] == 30.0
        assert stats["p95"] == pytest.approx(48.0)

    def test_reset(self):
        metrics = MetricsCollector()
        metrics.increment_convergence_warning()
        metrics.reset()
        assert metrics.get_summary()["counters"] == {}


class TestConfigAndIds:

    def test_request_id_format(self):
        assert re.fullmatch(r"ext-\d{14}-[0-9a-f]{8}", generate_request_id("ext"))
        assert generate_request_id() != generate_request_id()

    def test_validators(self):
        assert Config.validate_k(1)
        assert not Config.validate_k(0)
        assert not Config.validate_k(Config.MAX_K + 1)
        assert Config.validate_stride(64)
        assert not Config.validate_max_edge(32)
        assert Config.validate_grid_size(Config.MAX_GRID_SIZE)
        assert not Config.validate_intensity(1.5)
