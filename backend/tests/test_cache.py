"""Tests for the Redis cache wrapper."""

from unittest.mock import MagicMock

import pytest
import redis

from capital.cache import Cache, accounts_key, budgets_key, transactions_key


class TestCacheKeys:
    """Keys are scoped by user id."""

    def test_keys(self):
        """Should scope keys by collection and user."""
        assert accounts_key("u1") == "accounts:u1"
        assert budgets_key("u1") == "budgets:u1"
        assert transactions_key("u1") == "transactions:u1"


class TestCache:
    """Test get/set/delete against an in-process Redis."""

    def test_miss_returns_none(self, cache):
        """Should return None for a missing key."""
        assert cache.get("accounts:nobody") is None

    def test_set_then_get(self, cache, redis_client):
        """Should store values with a TTL."""
        cache.set("accounts:u1", 600, '{"ok": true}')
        assert cache.get("accounts:u1") == '{"ok": true}'
        assert 0 < redis_client.ttl("accounts:u1") <= 600

    def test_delete_many(self, cache):
        """Should delete several keys at once."""
        cache.set("accounts:u1", 60, "a")
        cache.set("transactions:u1", 60, "t")
        cache.delete("accounts:u1", "transactions:u1")

        assert cache.get("accounts:u1") is None
        assert cache.get("transactions:u1") is None

    def test_disabled_cache_is_a_no_op(self):
        """Should do nothing without a client."""
        cache = Cache(None)
        cache.set("k", 60, "v")
        cache.delete("k")

        assert cache.enabled is False
        assert cache.get("k") is None


class TestCacheFailures:
    """Redis errors degrade to cache misses."""

    @pytest.fixture
    def broken(self):
        client = MagicMock()
        client.get.side_effect = redis.ConnectionError("refused")
        client.setex.side_effect = redis.ConnectionError("refused")
        client.delete.side_effect = redis.ConnectionError("refused")
        return Cache(client)

    def test_get_error_is_a_miss(self, broken, caplog):
        """Should log read errors and report a miss."""
        assert broken.get("accounts:u1") is None
        assert "Cache get failed" in caplog.text

    def test_set_and_delete_errors_are_logged(self, broken, caplog):
        """Should log write errors without raising."""
        broken.set("accounts:u1", 60, "v")
        broken.delete("accounts:u1")
        assert "Cache set failed" in caplog.text
        assert "Cache delete failed" in caplog.text
