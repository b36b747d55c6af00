"""
Tests for storage drivers
"""

import json
import pytest
from unittest.mock import Mock

from upstash_redis.errors import UpstashError

from cartline.cart import Cart, MemoryDriver, RedisDriver, SessionDriver
from cartline.db import RedisKeys
from cartline.errors import StorageError


class TestMemoryDriver:
    """Tests for MemoryDriver."""

    def test_get_missing_returns_empty_list(self, memory_driver):
        assert memory_driver.get("nothing") == []

    def test_save_replaces_wholesale(self, memory_driver, sample_record):
        memory_driver.save("cart:1", [sample_record, dict(sample_record, id="sku-43")])
        memory_driver.save("cart:1", [sample_record])

        assert memory_driver.get("cart:1") == [sample_record]

    def test_stored_records_are_not_aliased(self, memory_driver, sample_record):
        records = [sample_record]
        memory_driver.save("cart:1", records)
        records[0]["quantity"] = 100

        loaded = memory_driver.get("cart:1")
        loaded[0]["name"] = "changed"

        assert memory_driver.get("cart:1")[0]["quantity"] == 2
        assert memory_driver.get("cart:1")[0]["name"] == "Grinder"


class _Session(dict):
    """Dict-like session that tracks modification like Django's."""

    modified = False


class TestSessionDriver:
    """Tests for SessionDriver."""

    def test_get_missing_returns_empty_list(self):
        assert SessionDriver({}).get("cart") == []

    def test_save_marks_session_modified(self, sample_record):
        session = _Session()

        SessionDriver(session).save("cart", [sample_record])

        assert session["cart"] == [sample_record]
        assert session.modified is True

    def test_plain_dict_session(self, make_item):
        session = {}
        cart = Cart("cart", driver=SessionDriver(session))

        cart.add(make_item())

        assert session["cart"][0]["id"] == "sku1"
        assert Cart("cart", driver=SessionDriver(session)).total_items() == 1


class TestRedisDriver:
    """Tests for RedisDriver."""

    def test_get_missing_returns_empty_list(self, mock_redis):
        assert RedisDriver(redis=mock_redis).get("42") == []
        mock_redis.get.assert_called_once_with(RedisKeys.cart_key("42"))

    def test_get_decodes_json(self, mock_redis, sample_record):
        mock_redis.get.return_value = json.dumps([sample_record])

        assert RedisDriver(redis=mock_redis).get("42") == [sample_record]

    def test_save_writes_json_with_ttl(self, mock_redis, sample_record):
        RedisDriver(redis=mock_redis, ttl=600).save("42", [sample_record])

        mock_redis.set.assert_called_once_with("cart:42", json.dumps([sample_record]), ex=600)

    def test_corrupted_payload_is_dropped(self, mock_redis):
        mock_redis.get.return_value = "{not json"

        assert RedisDriver(redis=mock_redis).get("42") == []
        mock_redis.delete.assert_called_once_with("cart:42")

    def test_corrupted_payload_delete_failure_raises_storage_error(self, mock_redis):
        """Test the cleanup delete is retried and wrapped like other calls."""
        mock_redis.get.return_value = "{not json"
        mock_redis.delete.side_effect = UpstashError("connection reset")

        with pytest.raises(StorageError) as exc_info:
            RedisDriver(redis=mock_redis).get("42")

        assert exc_info.value.retryable is True
        assert mock_redis.delete.call_count == 3

    def test_non_list_payload_is_dropped(self, mock_redis):
        mock_redis.get.return_value = json.dumps({"items": []})

        assert RedisDriver(redis=mock_redis).get("42") == []
        mock_redis.delete.assert_called_once_with("cart:42")

    def test_transport_error_raises_storage_error(self, mock_redis):
        mock_redis.set.side_effect = UpstashError("connection reset")

        with pytest.raises(StorageError) as exc_info:
            RedisDriver(redis=mock_redis).save("42", [])

        assert exc_info.value.retryable is True
        assert mock_redis.set.call_count == 3

    def test_transient_error_is_retried(self, mock_redis):
        mock_redis.get.side_effect = [UpstashError("timeout"), None]

        assert RedisDriver(redis=mock_redis).get("42") == []
        assert mock_redis.get.call_count == 2

    def test_cart_round_trip(self, mock_redis, make_item):
        """Test a cart written through Redis can be read back."""
        store = {}
        mock_redis.set.side_effect = lambda key, value, ex=None: store.__setitem__(key, value)
        mock_redis.get.side_effect = lambda key: store.get(key)
        driver = RedisDriver(redis=mock_redis)

        Cart("42", driver=driver).add(make_item(meta_data={"grind": "fine"}, quantity=2))
        restored = Cart("42", driver=driver)

        assert restored.total_items() == 2
        assert restored.items()[0].meta_data == {"grind": "fine"}


class TestContract:
    """Shared get/save contract."""

    @pytest.mark.parametrize("driver_factory", [MemoryDriver, lambda: SessionDriver({})])
    def test_round_trip(self, driver_factory, sample_record):
        driver = driver_factory()

        driver.save("k", [sample_record])

        assert driver.get("k") == [sample_record]
        assert driver.get("other") == []
