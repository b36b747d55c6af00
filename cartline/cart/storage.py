"""Storage drivers for carts.

Every driver honours the same contract:
- ``get(storage_key)`` returns the stored records, or ``[]`` when nothing is
  stored (never raises for "not found");
- ``save(storage_key, records)`` replaces whatever was stored, wholesale.
"""
import copy
import json
from abc import ABC, abstractmethod
from typing import Any, MutableMapping, Optional

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential
from upstash_redis import Redis
from upstash_redis.errors import UpstashError

from cartline.db import get_redis, RedisKeys, TTL
from cartline.errors import StorageError, ERROR_STORAGE_UNAVAILABLE
from cartline.logging import get_logger, short_key

logger = get_logger(__name__)

_TRANSIENT_ERRORS = (UpstashError, httpx.HTTPError)


class StorageDriver(ABC):
    """Persistence boundary the cart reads from and writes to."""

    @abstractmethod
    def get(self, storage_key: str) -> list[dict]:
        """Return stored records for the key, ``[]`` if there are none."""

    @abstractmethod
    def save(self, storage_key: str, records: list[dict]) -> None:
        """Replace stored records for the key."""


class MemoryDriver(StorageDriver):
    """Process-local storage, for tests, scripts and single-process apps."""

    def __init__(self):
        self._store: dict[str, list[dict]] = {}

    def get(self, storage_key: str) -> list[dict]:
        return copy.deepcopy(self._store.get(storage_key, []))

    def save(self, storage_key: str, records: list[dict]) -> None:
        self._store[storage_key] = copy.deepcopy(records)
        logger.debug(f"Cart {short_key(storage_key)} saved in memory ({len(records)} items)")


class SessionDriver(StorageDriver):
    """
    Stores the cart in a web framework session.

    Works with any dict-like session (Django ``request.session``, Starlette
    ``request.session``, ...). Sessions that track changes through a
    ``modified`` flag get it set on every save.
    """

    def __init__(self, session: MutableMapping[str, Any]):
        self.session = session

    def get(self, storage_key: str) -> list[dict]:
        return list(self.session.get(storage_key) or [])

    def save(self, storage_key: str, records: list[dict]) -> None:
        self.session[storage_key] = list(records)
        if hasattr(self.session, "modified"):
            self.session.modified = True


def redis_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(_TRANSIENT_ERRORS),
    )


class RedisDriver(StorageDriver):
    """
    Stores carts in Upstash Redis as JSON with a TTL.

    Abandoned carts expire after ``ttl`` seconds (24 hours by default);
    every save refreshes the TTL.
    """

    def __init__(self, redis: Optional[Redis] = None, ttl: int = TTL.CART):
        self._redis = redis  # Lazy initialization
        self.ttl = ttl

    @property
    def redis(self) -> Redis:
        """Get Redis client (lazy initialization)."""
        if self._redis is None:
            self._redis = get_redis()
        return self._redis

    @redis_retry()
    def _read(self, key: str) -> Optional[str]:
        return self.redis.get(key)

    @redis_retry()
    def _delete(self, key: str) -> None:
        self.redis.delete(key)

    @redis_retry()
    def _write(self, key: str, payload: str) -> None:
        self.redis.set(key, payload, ex=self.ttl)

    def get(self, storage_key: str) -> list[dict]:
        key = RedisKeys.cart_key(storage_key)
        try:
            data = self._read(key)
        except _TRANSIENT_ERRORS as e:
            logger.error(f"Failed to get cart from Redis: {e}")
            raise StorageError(f"{ERROR_STORAGE_UNAVAILABLE}: {e}", raw_error=e) from e

        if not data:
            return []

        try:
            records = json.loads(data)
            if not isinstance(records, list):
                raise TypeError(f"expected a list, got {type(records).__name__}")
            return records
        except (json.JSONDecodeError, TypeError) as e:
            # Corrupted data - drop it and start over with an empty cart
            logger.warning(f"Corrupted cart data for {short_key(storage_key)}: {e}")
            try:
                self._delete(key)
            except _TRANSIENT_ERRORS as delete_error:
                logger.error(f"Failed to drop corrupted cart from Redis: {delete_error}")
                raise StorageError(
                    f"{ERROR_STORAGE_UNAVAILABLE}: {delete_error}", raw_error=delete_error
                ) from delete_error
            return []

    def save(self, storage_key: str, records: list[dict]) -> None:
        key = RedisKeys.cart_key(storage_key)
        try:
            self._write(key, json.dumps(records, default=str))
        except _TRANSIENT_ERRORS as e:
            logger.error(f"Failed to save cart to Redis: {e}")
            raise StorageError(f"{ERROR_STORAGE_UNAVAILABLE}: {e}", raw_error=e) from e
