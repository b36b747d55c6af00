"""Pytest configuration and fixtures"""
import os
import pytest
from decimal import Decimal
from unittest.mock import Mock

# Set test environment variables
os.environ.setdefault("UPSTASH_REDIS_REST_URL", "https://test.upstash.io")
os.environ.setdefault("UPSTASH_REDIS_REST_TOKEN", "test_token")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from cartline.cart import LineItem, MemoryDriver
from cartline.cart import callbacks, resolvers


@pytest.fixture(autouse=True)
def isolated_registries(monkeypatch):
    """Keep registrations made by a test out of the other tests."""
    monkeypatch.setattr(callbacks, "_CALLBACK_REGISTRY", dict(callbacks._CALLBACK_REGISTRY))
    monkeypatch.setattr(resolvers, "_RESOLVER_REGISTRY", dict(resolvers._RESOLVER_REGISTRY))


@pytest.fixture
def memory_driver():
    """Empty in-memory storage driver"""
    return MemoryDriver()


@pytest.fixture
def make_item():
    """Factory for line items with sensible defaults"""
    def _make_item(**overrides):
        data = {
            "product_id": "sku1",
            "name": "Espresso beans 1kg",
            "unit_price": Decimal("10"),
            "quantity": 1,
            "tax_rate": Decimal("0.1"),
        }
        data.update(overrides)
        return LineItem(**data)

    return _make_item


@pytest.fixture
def sample_record():
    """Line item as stored by a driver"""
    return {
        "id": "sku-42",
        "name": "Grinder",
        "price": "149.90",
        "quantity": 2,
        "taxRate": "0.2",
        "metaData": {"color": "black", "plug": "EU"},
        "model": {"externalId": "42", "externalType": "catalog.Product"},
        "image": "https://cdn.example.com/grinder.png",
        "imageResolver": None,
        "group": "vendor-7",
        "callback": "",
    }


@pytest.fixture
def mock_redis():
    """Mock Upstash Redis client"""
    client = Mock()
    client.get.return_value = None
    client.set.return_value = True
    client.delete.return_value = 1
    return client
