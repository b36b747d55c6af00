"""Save-time item callbacks.

Items reference a callback by name; ``Cart.save`` resolves the name here and
calls the hook with ``(item, cart)`` before writing to storage. Hooks may
adjust the item (re-price it, move it to another group, ...).
"""

from typing import TYPE_CHECKING, Any, Callable

from cartline.errors import (
    ConfigurationError,
    ERROR_CALLBACK_INVALID,
    ERROR_CALLBACK_NOT_CALLABLE,
    ERROR_CALLBACK_NOT_FOUND,
)
from cartline.logging import get_logger

if TYPE_CHECKING:
    from .models import LineItem
    from .service import Cart

logger = get_logger(__name__)

ItemCallback = Callable[["LineItem", "Cart"], None]

# Key: name stored on the item (callback)
_CALLBACK_REGISTRY: dict[str, Any] = {}


def register_callback(name: str):
    """Decorator to register an item callback under a name."""

    def decorator(func: ItemCallback) -> ItemCallback:
        if not callable(func):
            raise ConfigurationError(f"{ERROR_CALLBACK_NOT_CALLABLE}: {name}", code="CALLBACK_NOT_CALLABLE")
        _CALLBACK_REGISTRY[name] = func
        logger.debug(f"Registered item callback '{name}'")
        return func

    return decorator


def get_callback(name: Any) -> ItemCallback:
    """Resolve a callback reference.

    Raises:
        ConfigurationError: If the reference is not a non-blank string, is
            not registered, or points at something that cannot be called
    """
    if not isinstance(name, str) or not name.strip():
        raise ConfigurationError(f"{ERROR_CALLBACK_INVALID}: {name!r}", code="CALLBACK_INVALID")

    func = _CALLBACK_REGISTRY.get(name)
    if func is None:
        available = list(_CALLBACK_REGISTRY.keys())
        raise ConfigurationError(
            f"{ERROR_CALLBACK_NOT_FOUND}: {name}. Available: {available}",
            code="CALLBACK_NOT_FOUND",
        )
    if not callable(func):
        raise ConfigurationError(f"{ERROR_CALLBACK_NOT_CALLABLE}: {name}", code="CALLBACK_NOT_CALLABLE")
    return func


def available_callbacks() -> list[str]:
    return list(_CALLBACK_REGISTRY.keys())
