"""
Storage Clients - Redis connection and key layout

Provides:
- Singleton sync Upstash Redis client for cart persistence
- Key prefixes and TTL constants

Configuration comes from the environment:
- UPSTASH_REDIS_REST_URL / UPSTASH_REDIS_REST_TOKEN
- CART_TTL_SECONDS (default 24 hours)
"""

import os
from typing import Optional

from upstash_redis import Redis


UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")
CART_TTL_SECONDS = int(os.environ.get("CART_TTL_SECONDS", 86400))


_redis_client: Optional[Redis] = None


def get_redis() -> Redis:
    """
    Get sync Upstash Redis client (singleton).

    Raises:
        ValueError: If the REST URL or token is not configured
    """
    global _redis_client

    if _redis_client is None:
        if not UPSTASH_REDIS_REST_URL or not UPSTASH_REDIS_REST_TOKEN:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = Redis(url=UPSTASH_REDIS_REST_URL, token=UPSTASH_REDIS_REST_TOKEN)

    return _redis_client


class RedisKeys:
    """Redis key prefixes for different data types."""

    CART = "cart:"  # cart:{storage_key}

    @staticmethod
    def cart_key(storage_key: str) -> str:
        return f"{RedisKeys.CART}{storage_key}"


class TTL:
    """Time-to-live constants for Redis keys (seconds)."""

    CART = CART_TTL_SECONDS
