"""Cart package: line items, collection, storage drivers and cart facade."""
from .models import LineItem, ModelRef, generate_item_key
from .collection import LineItemCollection
from .resolvers import (
    DefaultImageResolver,
    ImageResolver,
    available_image_resolvers,
    get_image_resolver,
    register_image_resolver,
)
from .callbacks import available_callbacks, get_callback, register_callback
from .storage import StorageDriver, MemoryDriver, SessionDriver, RedisDriver
from .service import Cart

__all__ = [
    "Cart",
    "LineItem",
    "LineItemCollection",
    "ModelRef",
    "generate_item_key",
    "ImageResolver",
    "DefaultImageResolver",
    "register_image_resolver",
    "get_image_resolver",
    "available_image_resolvers",
    "register_callback",
    "get_callback",
    "available_callbacks",
    "StorageDriver",
    "MemoryDriver",
    "SessionDriver",
    "RedisDriver",
]
